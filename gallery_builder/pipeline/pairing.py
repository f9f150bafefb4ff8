"""Pair full-size images with their thumbnails.

The legacy Gallery stored each photo as IMG_0001.jpg next to
IMG_0001.thumb.jpg, plus optional IMG_0001.sized.jpg and highlight
images. After sorting and dropping the sized/highlight files, each image
sits directly before its thumbnail.

Known limitation of the default (legacy) mode: names are taken two at a
time, so a single stray file shifts every later pairing. Strict mode
re-synchronises on the next name instead.
"""

from __future__ import annotations

import logging
from pathlib import Path

from gallery_builder.diagnostics import DiagnosticsCollector
from gallery_builder.models import ImagePair, is_excluded_name, is_thumbnail_name

logger = logging.getLogger(__name__)

IMAGE_EXTENSIONS = {".jpg", ".jpeg", ".png"}


def list_image_files(directory: str | Path) -> list[str]:
    """Return image file names in a directory, sorted by code point."""
    dir_path = Path(directory)
    return sorted(
        p.name for p in dir_path.iterdir()
        if p.is_file() and p.suffix.lower() in IMAGE_EXTENSIONS
    )


def filter_display_names(names: list[str]) -> list[str]:
    """Drop resized and highlight images, keeping order."""
    return [name for name in names if not is_excluded_name(name)]


def _missing_thumbnail(diagnostics: DiagnosticsCollector, name: str, found: str | None) -> None:
    diagnostics.log("pairing", "missing_thumbnail", {
        "image": name,
        "found": found,
    }, success=False)


def pair_images(
    names: list[str],
    diagnostics: DiagnosticsCollector,
    strict: bool = False,
) -> list[ImagePair]:
    """Pair sorted, filtered names into (image, thumbnail) pairs.

    Args:
        names: Sorted names with sized/highlight images already removed.
        diagnostics: Collector for dropped images.
        strict: Re-synchronise after a missing thumbnail.

    Returns:
        Pairs in directory order.
    """
    pairs: list[ImagePair] = []
    ix = 0
    while ix < len(names):
        left = names[ix]
        if ix + 1 >= len(names):
            _missing_thumbnail(diagnostics, left, None)
            break
        right = names[ix + 1]

        if strict and is_thumbnail_name(left):
            diagnostics.log("pairing", "orphan_thumbnail", {"thumbnail": left}, success=False)
            ix += 1
            continue

        if is_thumbnail_name(right):
            pairs.append(ImagePair(main_image=left, thumbnail=right))
            ix += 2
            continue

        _missing_thumbnail(diagnostics, left, right)
        # Legacy mode consumes both names, strict mode retries from the right one
        ix += 1 if strict else 2

    logger.info("Paired %d images from %d files", len(pairs), len(names))
    return pairs


def build_image_pairs(
    directory: str | Path,
    diagnostics: DiagnosticsCollector,
    strict: bool = False,
) -> list[ImagePair]:
    """List, filter and pair the images of a gallery directory."""
    try:
        names = filter_display_names(list_image_files(directory))
    except OSError as e:
        diagnostics.log("pairing", "listing_failed", {
            "directory": str(directory),
            "error": str(e),
        }, success=False)
        return []
    return pair_images(names, diagnostics, strict=strict)
