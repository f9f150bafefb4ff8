"""Caption index for a legacy gallery directory.

Captions live in photos.dat, photos.dat.0, photos.dat.1 ... photos.dat.n.
All files are parsed and merged into one filename -> caption mapping.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Optional

from gallery_builder.diagnostics import DiagnosticsCollector
from gallery_builder.metadata.parser import parse_metadata

logger = logging.getLogger(__name__)

DEFAULT_PREFIX = "photos.dat"


def filename_key(filename: str, encoding: str) -> str:
    """Map a file name recovered from metadata onto the directory listing.

    The name is re-encoded to its original bytes and decoded the way the
    filesystem decodes names, so the UTF-8 name "CafÃ©.jpg" read as latin-1
    matches the listed "Café.jpg".
    """
    return os.fsdecode(filename.encode(encoding, "surrogateescape"))


def find_metadata_files(directory: str | Path, prefix: str = DEFAULT_PREFIX) -> list[Path]:
    """Return metadata files in a directory, sorted by name."""
    dir_path = Path(directory)
    return sorted(
        p for p in dir_path.iterdir()
        if p.is_file() and p.name.startswith(prefix)
    )


def read_metadata_file(
    path: Path,
    encoding: str,
    diagnostics: DiagnosticsCollector,
) -> Optional[str]:
    """Read a metadata file, reporting it as skipped when unreadable."""
    try:
        return path.read_text(encoding=encoding)
    except (OSError, UnicodeDecodeError) as e:
        diagnostics.log("metadata", "file_unreadable", {
            "file": path.name,
            "error": str(e),
        }, success=False)
        return None


def build_caption_index(
    directory: str | Path,
    diagnostics: DiagnosticsCollector,
    prefix: str = DEFAULT_PREFIX,
    encoding: str = "latin-1",
) -> dict[str, str]:
    """Build the filename -> caption mapping for a gallery directory.

    A gallery without metadata files is valid; the mapping is empty and a
    (non-failure) diagnostic is recorded. When the same file name appears in several
    metadata files the last file read wins.

    Args:
        directory: Gallery directory.
        diagnostics: Collector for skipped files.
        prefix: Metadata filename prefix.
        encoding: Text encoding of the metadata files.

    Returns:
        Mapping of image file name, as the filesystem lists it, to caption.
    """
    captions: dict[str, str] = {}
    try:
        metadata_files = find_metadata_files(directory, prefix)
    except OSError as e:
        diagnostics.log("metadata", "listing_failed", {
            "directory": str(directory),
            "error": str(e),
        }, success=False)
        return captions

    if not metadata_files:
        diagnostics.log("metadata", "no_metadata_files", {
            "directory": str(directory),
            "prefix": prefix,
        })
        return captions

    for path in metadata_files:
        text = read_metadata_file(path, encoding, diagnostics)
        if text is None:
            continue
        entries = parse_metadata(text, diagnostics, source=path.name)
        for entry in entries:
            captions[filename_key(entry.filename, encoding)] = entry.caption
        logger.debug("%s: %d captions", path.name, len(entries))

    logger.info("Loaded %d captions from %d metadata files", len(captions), len(metadata_files))
    return captions
