# Path: config/settings.py
# Purpose: Provide typed configuration for the figure studio.
# Layer: config.
# Details: Centralizes project paths, upload folder, image extensions, metadata fields, and logging level.

from __future__ import annotations

from pathlib import Path
from typing import Dict, Tuple

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class StudioSettings(BaseSettings):
    """Top-level settings shared by resolvers, builders, and command line tools.

    Every field can be set through a FIGURE_STUDIO_<NAME> environment variable;
    tuple and mapping fields take JSON values.
    """

    model_config = SettingsConfigDict(env_prefix="FIGURE_STUDIO_", extra="ignore")

    project_dir: Path = Field(default=Path("."), description="Root directory every relative resource path is resolved against.")
    upload_path: str = Field(default="files", description="Project relative folder managed by the file record database.")
    valid_extensions: Tuple[str, ...] = Field(
        default=("jpg", "jpeg", "png", "gif", "webp"),
        description="Image file extensions accepted as lightbox targets.",
    )
    meta_fields: Tuple[str, ...] = Field(
        default=("title", "alt", "link", "caption"),
        description="Metadata fields every derived metadata map is initialized with.",
    )
    database_path: Path = Field(default=Path("var/files.sqlite3"), description="Project relative path of the file record database.")
    cache_dir: Path = Field(default=Path("assets/images"), description="Project relative folder receiving resized images.")
    predefined_sizes: Dict[str, Tuple[int, int, str]] = Field(
        default_factory=dict,
        description="Named image sizes mapped to (width, height, mode).",
    )
    log_level: str = Field(default="INFO", description="Verbosity level for application logs.")

    @property
    def upload_dir(self) -> Path:
        """Return the absolute upload directory."""

        return (self.project_dir / self.upload_path).resolve()

    @property
    def record_database(self) -> Path:
        """Return the absolute location of the record database."""

        if self.database_path.is_absolute():
            return self.database_path
        return self.project_dir.resolve() / self.database_path

    def normalized_extensions(self) -> Tuple[str, ...]:
        """Return lower-cased extensions without a leading dot."""

        return tuple(ext.lower().lstrip(".") for ext in self.valid_extensions)

    @classmethod
    def from_env(cls, **overrides) -> "StudioSettings":
        """Instantiate settings from FIGURE_STUDIO_* environment variables, letting keyword overrides win."""

        return cls(**overrides)


__all__ = ["StudioSettings"]
