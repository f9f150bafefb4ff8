"""Parser for legacy Gallery photos.dat metadata.

The old PHP Gallery stored each album as a PHP-serialized array of
AlbumItem objects. Only three values per item are needed here: the root
file name, the file type and the caption. A trimmed item looks like:

    O:9:"AlbumItem":19:{s:5:"image";O:5:"Image":12:{s:4:"name";
    s:8:"IMG_0020";s:4:"type";s:3:"jpg";...}s:7:"caption";
    s:82:"The studio apartment I rented on Emili Vendrell (Joaquim ...)";
    s:6:"hidden";N;...}

Older files write the class name in lower case ("albumitem"). Length
prefixes of name and type are not checked; the caption is sliced using
its declared length because it may contain quotes or colons.

All functions are pure and return None when a value is missing.
"""

from __future__ import annotations

import re
from typing import Optional

from gallery_builder.diagnostics import DiagnosticsCollector
from gallery_builder.models import CaptionEntry

ITEM_MARKER = '"albumitem"'
CAPTION_TAG = '"caption"'

_MARKER_RE = re.compile(re.escape(ITEM_MARKER), re.IGNORECASE)


def normalize_markers(text: str) -> str:
    """Lower-case every item marker, leaving all other text untouched."""
    return _MARKER_RE.sub(ITEM_MARKER, text)


def split_items(text: str) -> list[str]:
    """Split metadata into one segment per album item.

    Text before the first marker is the serialized array header and is
    discarded, as are empty segments.
    """
    segments = normalize_markers(text).split(ITEM_MARKER)[1:]
    return [segment for segment in segments if segment]


def field_value(segment: str, field: str) -> Optional[str]:
    """Return the quoted value following a quoted field name.

    For '"name";s:8:"IMG_0020"' and field "name" this is "IMG_0020".
    The first occurrence wins, which for name and type is the full-size
    image rather than the thumbnail.
    """
    token = f'"{field}"'
    field_ix = segment.find(token)
    if field_ix < 0:
        return None
    open_ix = segment.find('"', field_ix + len(token))
    if open_ix < 0:
        return None
    close_ix = segment.find('"', open_ix + 1)
    if close_ix < 0:
        return None
    return segment[open_ix + 1:close_ix]


def caption_value(segment: str) -> Optional[str]:
    """Return the caption of an item, or None when it has none.

    Expects '"caption";s:<length>:"<text>"'. A null caption ("caption";N;),
    a bad length, or a length running past the end of the text all count
    as no caption.
    """
    tag_ix = segment.find(CAPTION_TAG)
    if tag_ix < 0:
        return None
    parts = segment[tag_ix + len(CAPTION_TAG):].split(":", 2)
    if len(parts) < 3:
        return None

    type_code, declared, value = parts
    if type_code.strip() != ";s":
        return None
    try:
        length = int(declared)
    except ValueError:
        return None
    if length <= 0 or not value.startswith('"'):
        return None
    # Opening quote plus the declared characters must all be present
    if len(value) <= length:
        return None
    return value[1:length + 1]


def item_filename(segment: str) -> Optional[str]:
    """Rebuild the image file name (name + "." + type) of an item."""
    name = field_value(segment, "name")
    suffix = field_value(segment, "type")
    if not name or not suffix:
        return None
    return f"{name}.{suffix}"


def parse_item(segment: str) -> Optional[CaptionEntry]:
    """Parse one album item into a CaptionEntry, if it has a caption."""
    filename = item_filename(segment)
    if filename is None:
        return None
    caption = caption_value(segment)
    if not caption:
        return None
    return CaptionEntry(filename=filename, caption=caption)


def parse_metadata(
    text: str,
    diagnostics: Optional[DiagnosticsCollector] = None,
    source: str = "",
) -> list[CaptionEntry]:
    """Parse the contents of one photos.dat file.

    Malformed items never raise; they are reported to the collector and
    skipped.

    Args:
        text: Full text of the metadata file.
        diagnostics: Optional collector for skipped items.
        source: File name used in diagnostics.

    Returns:
        One CaptionEntry per item with a non-empty caption, in file order.
    """
    entries: list[CaptionEntry] = []
    for index, segment in enumerate(split_items(text)):
        filename = item_filename(segment)
        if filename is None:
            if diagnostics is not None:
                diagnostics.log("metadata", "item_unnamed", {
                    "source": source,
                    "item": index,
                }, success=False)
            continue

        caption = caption_value(segment)
        if caption:
            entries.append(CaptionEntry(filename=filename, caption=caption))
    return entries
