"""Selectable images of the focused document."""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path
from typing import TYPE_CHECKING

from loguru import logger

from .base import ImageReference

if TYPE_CHECKING:
    from .cache import ImageCache


class SelectionState:
    """
    Images of one document that can currently be shown, plus the highlighted one.

    Only references whose URL already resolves in the cache are selectable.
    Paths are never stored; activation asks the cache again.
    """

    def __init__(self, available: Sequence[tuple[int, str]] = (), cache: ImageCache | None = None):
        self.available: list[tuple[int, str]] = list(available)
        self.selected: int | None = None
        self._cache = cache

    @classmethod
    def build(cls, references: Sequence[ImageReference], cache: ImageCache) -> SelectionState:
        """Build the selection for a document from its references."""
        available = [(ref.ordinal, ref.url) for ref in references if cache.lookup(ref.url)]
        logger.debug("{} of {} images selectable", len(available), len(references))
        return cls(available, cache=cache)

    def refresh(self, references: Sequence[ImageReference]) -> None:
        """
        Re-query availability for the same document.

        The highlight follows the image it was on, whose index can shift when
        an earlier image arrives. It is cleared if that image is gone.
        """
        if self._cache is None:
            return
        highlighted = self.selected_ordinal
        self.available = [
            (ref.ordinal, ref.url) for ref in references if self._cache.lookup(ref.url)
        ]
        self.selected = next(
            (index for index, (ordinal, _) in enumerate(self.available) if ordinal == highlighted),
            None,
        )

    def next_index(self, current: int | None) -> int | None:
        """Index that follows ``current``, wrapping around; None if nothing is available."""
        if not self.available:
            return None
        if current is None:
            return 0
        return (current + 1) % len(self.available)

    def cycle(self) -> int | None:
        """Move the highlight to the next available image."""
        self.selected = self.next_index(self.selected)
        return self.selected

    def activate(self, selected: int | None) -> tuple[str, Path] | None:
        """
        Resolve an available image to its URL and cached path.

        Out-of-range indices (e.g. after the document changed) are ignored.
        """
        if selected is None or not 0 <= selected < len(self.available):
            return None
        _, url = self.available[selected]
        path = self._cache.lookup(url) if self._cache is not None else None
        if path is None:
            return None
        return url, path

    @property
    def selected_ordinal(self) -> int | None:
        """Ordinal of the highlighted image, if any."""
        if self.selected is None or self.selected >= len(self.available):
            return None
        return self.available[self.selected][0]
