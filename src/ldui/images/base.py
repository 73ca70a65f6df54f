"""
Data models and errors for inline images.

Provides Pydantic models for image references, cache entries and placement
hints, plus the typed failures raised while fetching, storing and decoding.
"""

from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field


class ImageReference(BaseModel):
    """One qualifying image occurrence in a document's markup."""

    model_config = ConfigDict(frozen=True)

    url: str = Field(description="Image source exactly as written in the markup")
    ordinal: int = Field(description="0-based position among qualifying images, in document order")
    raw_offset: int | None = Field(
        default=None,
        description="UTF-8 byte offset of the opening <img in the markup, if it could be located",
    )


class CacheEntry(BaseModel):
    """A fetched image persisted on disk."""

    model_config = ConfigDict(frozen=True)

    url: str = Field(description="Source URL (exact, case-sensitive key)")
    local_path: Path = Field(description="Absolute path of the cached file")
    size_bytes: int = Field(description="Size of the cached file in bytes")


class PlacementHint(BaseModel):
    """Output line an image reference should be annotated at."""

    model_config = ConfigDict(frozen=True)

    ordinal: int
    line: int


class ImageError(Exception):
    """Base class for image acquisition and display failures."""


class ImageFetchError(ImageError):
    """Network retrieval failed (malformed URL, transport error or non-success status)."""

    def __init__(self, url: str, reason: str, status_code: int | None = None):
        self.url = url
        self.reason = reason
        self.status_code = status_code
        super().__init__(f"Failed to fetch {url}: {reason}")


class ImageStorageError(ImageError):
    """Fetched bytes could not be written to the cache directory."""

    def __init__(self, url: str, reason: str):
        self.url = url
        self.reason = reason
        super().__init__(f"Failed to store {url}: {reason}")


class ImageDecodeError(ImageError):
    """A cached file is not a decodable image."""

    def __init__(self, path: Path | str, reason: str):
        self.path = Path(path)
        self.reason = reason
        super().__init__(f"Failed to decode {path}: {reason}")
