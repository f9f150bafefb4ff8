"""Write gallery pages of Galleria <img> tags.

Each page is an HTML fragment, one tag per line:

    <img src="IMG_0438.thumb.jpg" data-big="IMG_0438.jpg" data-description="Alps 1">

Pages are written as bytes: file names exactly as the filesystem stores
them, captions as the bytes they had in photos.dat. Captions are not
HTML-escaped, so a caption containing '"' or '<' will break the
surrounding markup.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Optional

from gallery_builder.diagnostics import DiagnosticsCollector
from gallery_builder.models import GalleryPage, ImagePair

logger = logging.getLogger(__name__)


def render_tag(pair: ImagePair, caption: Optional[str] = None) -> str:
    """Render one <img> line, newline-terminated."""
    if caption:
        return (
            f'<img src="{pair.thumbnail}" data-big="{pair.main_image}" '
            f'data-description="{caption}">\n'
        )
    return f'<img src="{pair.thumbnail}" data-big="{pair.main_image}">\n'


def encode_tag(pair: ImagePair, caption: Optional[str], encoding: str) -> bytes:
    """Render one <img> line as the bytes written to a page."""
    line = (
        b'<img src="' + os.fsencode(pair.thumbnail)
        + b'" data-big="' + os.fsencode(pair.main_image)
    )
    if caption:
        line += b'" data-description="' + caption.encode(encoding, "surrogateescape")
    return line + b'">\n'


def page_filename(root_name: str, number: int) -> str:
    """Page file name, e.g. gallery_01."""
    return f"{root_name}_{number:02d}"


def _chunk(pairs: list[ImagePair], size: int) -> list[list[ImagePair]]:
    return [pairs[i:i + size] for i in range(0, len(pairs), size)]


def paginate(
    pairs: list[ImagePair],
    captions: dict[str, str],
    output_dir: str | Path,
    photos_per_page: int,
    diagnostics: DiagnosticsCollector,
    root_name: str = "gallery",
    encoding: str = "latin-1",
) -> list[GalleryPage]:
    """Write pairs to numbered page files.

    Pages hold photos_per_page tags each, the last one possibly fewer.
    On a write failure the failure is recorded and no further pages are
    written; pages already written stay on disk.

    Args:
        pairs: Image pairs in display order.
        captions: Mapping of full-size image name to caption.
        output_dir: Directory the page files are created in.
        photos_per_page: Maximum tags per page.
        diagnostics: Collector for write failures.
        root_name: Page file root name.
        encoding: Encoding the captions were read with.

    Returns:
        The pages written successfully, in order.

    Raises:
        ValueError: If photos_per_page is less than 1.
    """
    if photos_per_page < 1:
        raise ValueError(f"photos_per_page must be at least 1, got {photos_per_page}")

    out_path = Path(output_dir)
    pages: list[GalleryPage] = []

    for number, chunk in enumerate(_chunk(pairs, photos_per_page), start=1):
        page_path = out_path / page_filename(root_name, number)
        lines = [render_tag(pair, captions.get(pair.main_image)) for pair in chunk]
        try:
            with open(page_path, "wb") as f:
                for pair in chunk:
                    f.write(encode_tag(pair, captions.get(pair.main_image), encoding))
        except (OSError, UnicodeEncodeError) as e:
            diagnostics.log("paginate", "write_failed", {
                "page": page_path.name,
                "error": str(e),
            }, success=False)
            break

        pages.append(GalleryPage(number=number, path=page_path, lines=lines))
        logger.debug("Wrote %s (%d images)", page_path.name, len(lines))

    logger.info("Wrote %d pages to %s", len(pages), out_path)
    return pages
