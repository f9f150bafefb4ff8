"""Gallery build pipeline.

Runs the whole conversion for one legacy Gallery directory:
captions → image pairs → page files.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any, Optional

from gallery_builder.config import Settings, get_settings
from gallery_builder.diagnostics import DiagnosticsCollector
from gallery_builder.metadata.captions import build_caption_index
from gallery_builder.pipeline.paginate import paginate
from gallery_builder.pipeline.pairing import build_image_pairs

logger = logging.getLogger(__name__)


class GalleryDirectoryError(Exception):
    """The gallery path cannot be used; nothing is built."""


def validate_gallery_dir(path: str | Path) -> Path:
    """Check that a gallery path exists and is a readable, listable directory.

    Raises:
        GalleryDirectoryError: Describing the first problem found.
    """
    dir_path = Path(path)
    if not dir_path.exists():
        raise GalleryDirectoryError(f"The path {path} does not exist")
    if not os.access(dir_path, os.R_OK):
        raise GalleryDirectoryError(f"Cannot read {path}")
    if not dir_path.is_dir():
        raise GalleryDirectoryError(f"{path} should be a directory")
    if not os.access(dir_path, os.X_OK):
        raise GalleryDirectoryError(f"Cannot list {path}")
    return dir_path


def run_build(
    directory: str | Path,
    settings: Optional[Settings] = None,
    diagnostics: Optional[DiagnosticsCollector] = None,
) -> dict:
    """Convert one gallery directory into page files.

    Args:
        directory: Legacy Gallery album directory.
        settings: Builder settings (defaults from env).
        diagnostics: Collector to record into (a new one if omitted).

    Returns:
        Dict with status, counts, written page paths and error strings.

    Raises:
        GalleryDirectoryError: If the directory is unusable.
    """
    settings = settings or get_settings()
    diagnostics = diagnostics if diagnostics is not None else DiagnosticsCollector()
    gallery_dir = validate_gallery_dir(directory)
    output_dir = settings.resolve_output_dir(gallery_dir)

    logger.info("=== Building gallery pages for %s ===", gallery_dir)

    captions = build_caption_index(
        gallery_dir,
        diagnostics,
        prefix=settings.metadata_prefix,
        encoding=settings.metadata_encoding,
    )
    pairs = build_image_pairs(gallery_dir, diagnostics, strict=settings.strict_pairing)
    pages = paginate(
        pairs,
        captions,
        output_dir,
        settings.photos_per_page,
        diagnostics,
        root_name=settings.gallery_root_name,
        encoding=settings.metadata_encoding,
    )

    failures = diagnostics.failures()
    results: dict[str, Any] = {
        "status": "completed" if not failures else "completed_with_errors",
        "captions": len(captions),
        "pairs": len(pairs),
        "pages": [str(page.path) for page in pages],
        "errors": [entry.describe() for entry in failures],
    }
    logger.info("=== Gallery build finished: %s ===", results["status"])
    return results
