"""Gallery builder Pydantic models.

Transient records passed between the pipeline stages. Nothing here is
persisted except the page files described by GalleryPage.
"""

from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

THUMBNAIL_MARKER = "thumb"
EXCLUDED_MARKERS = ("sized", "highlight")


def _utc_now() -> str:
    """Return current UTC timestamp as ISO string."""
    return datetime.now(timezone.utc).isoformat()


def is_thumbnail_name(name: str) -> bool:
    """Check if a filename carries the thumbnail marker."""
    return THUMBNAIL_MARKER in name.lower()


def is_excluded_name(name: str) -> bool:
    """Check if a filename is a resized or highlight artifact."""
    lower = name.lower()
    return any(marker in lower for marker in EXCLUDED_MARKERS)


class CaptionEntry(BaseModel):
    """A caption recovered from one album item in a photos.dat file."""

    filename: str = Field(..., description="Image file name, e.g. IMG_0001.jpg")
    caption: str

    @field_validator("caption")
    @classmethod
    def validate_caption(cls, v: str) -> str:
        """Empty captions are never recorded."""
        if not v:
            raise ValueError("caption must not be empty")
        return v


class ImagePair(BaseModel):
    """A full-size image and its thumbnail."""

    main_image: str
    thumbnail: str

    @model_validator(mode="after")
    def validate_names(self) -> "ImagePair":
        """Reject pairs the legacy naming convention does not allow."""
        if not is_thumbnail_name(self.thumbnail):
            raise ValueError(f"thumbnail '{self.thumbnail}' lacks the '{THUMBNAIL_MARKER}' marker")
        for name in (self.main_image, self.thumbnail):
            if is_excluded_name(name):
                raise ValueError(f"'{name}' is a resized or highlight image")
        return self


class GalleryPage(BaseModel):
    """One written page file of <img> tags."""

    number: int = Field(..., ge=1)
    path: Path
    lines: list[str] = Field(default_factory=list)

    @property
    def filename(self) -> str:
        return self.path.name

    def image_count(self) -> int:
        """Number of <img> tags on the page."""
        return len(self.lines)


class Diagnostic(BaseModel):
    """One entry recorded by the diagnostics collector."""

    timestamp: str = Field(default_factory=_utc_now)
    component: str = Field(..., description="metadata, pairing, paginate, or build")
    action: str
    details: Optional[dict[str, Any]] = None
    success: bool = True

    def describe(self) -> str:
        """Single-line description for console output."""
        text = f"{self.component}.{self.action}"
        if self.details:
            extras = ", ".join(f"{k}={v}" for k, v in self.details.items())
            text = f"{text}: {extras}"
        return text
