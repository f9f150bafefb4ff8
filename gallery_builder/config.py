"""Gallery builder configuration module.

Loads settings from environment variables with type validation using
pydantic-settings. Every value has a usable default, so a bare run only
needs the gallery directory.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Builder settings loaded from environment variables and .env file."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ── Output pages ──
    photos_per_page: int = Field(
        default=25,
        description="Number of <img> tags written to each gallery page",
        ge=1,
    )
    gallery_root_name: str = Field(
        default="gallery",
        description="Root name of the page files (gallery_01, gallery_02, ...)",
    )
    output_dir: str = Field(
        default="",
        description="Directory for page files; empty means the gallery directory",
    )

    # ── Legacy metadata ──
    metadata_prefix: str = Field(
        default="photos.dat",
        description="Filename prefix of the legacy metadata files",
    )
    metadata_encoding: str = Field(
        default="latin-1",
        description="Encoding used to read photos.dat files and write pages",
    )

    # ── Pairing ──
    strict_pairing: bool = Field(
        default=False,
        description="Re-synchronise on a missing thumbnail instead of skipping a pair",
    )

    # ── General ──
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR)",
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Ensure log level is valid."""
        valid = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper = v.upper()
        if upper not in valid:
            raise ValueError(f"log_level must be one of {valid}, got '{v}'")
        return upper

    @field_validator("gallery_root_name", "metadata_prefix")
    @classmethod
    def validate_not_blank(cls, v: str) -> str:
        """Reject empty file name parts."""
        if not v.strip():
            raise ValueError("value must not be blank")
        return v

    def resolve_output_dir(self, gallery_dir: str | Path) -> Path:
        """Return the directory pages are written to for a gallery."""
        if self.output_dir:
            return Path(self.output_dir)
        return Path(gallery_dir)


def get_settings(**overrides: str) -> Settings:
    """Create a Settings instance with optional overrides.

    Args:
        **overrides: Key-value pairs to override env/defaults.

    Returns:
        Validated Settings instance.

    Raises:
        ValidationError: If any value fails validation.
    """
    return Settings(**overrides)
