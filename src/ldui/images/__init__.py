"""
Inline image package.

Provides image extraction from post markup, fetching and on-disk caching,
line placement in reflowed text, selection state and terminal previews.
"""

from .base import (
    CacheEntry,
    ImageDecodeError,
    ImageError,
    ImageFetchError,
    ImageReference,
    ImageStorageError,
    PlacementHint,
)
from .cache import ImageCache
from .extract import extract_image_references, markup_length
from .fetch import ImageFetcher
from .placement import map_placements
from .preview import render_image, render_preview
from .selection import SelectionState

__all__ = [
    "CacheEntry",
    "ImageCache",
    "ImageDecodeError",
    "ImageError",
    "ImageFetchError",
    "ImageFetcher",
    "ImageReference",
    "ImageStorageError",
    "PlacementHint",
    "SelectionState",
    "extract_image_references",
    "map_placements",
    "markup_length",
    "render_image",
    "render_preview",
]
