"""Storage configuration model."""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, Field


class StorageConfig(BaseModel):
    """Configuration for the filesystem storage backend.

    Attributes:
        root: Base directory holding ``blogs/`` and ``.staging/``.
        max_segment_bytes: Longest encoded name the filesystem accepts
            as a single path segment.
    """

    root: Path = Field(default=Path("./state"), description="Storage root directory")
    max_segment_bytes: int = Field(default=255, ge=4, description="Max encoded name length")
