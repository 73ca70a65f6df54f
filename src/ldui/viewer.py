"""
Post view state for one topic.

Tracks whether the user is browsing the post list, reading one post in full
with its images enumerated, or looking at a single image, and turns key
actions into transitions between those modes.
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path

from loguru import logger

from .discourse import Post
from .images import (
    ImageCache,
    ImageReference,
    PlacementHint,
    SelectionState,
    extract_image_references,
    map_placements,
    markup_length,
)
from .text import clean_markup


class ViewMode(str, Enum):
    """Interactive modes of a document view."""

    BROWSING = "browsing"
    FOCUSED_POST = "focused_post"
    VIEWING = "viewing"


class PostViewer:
    """State machine for reading posts and their inline images."""

    def __init__(self, cache: ImageCache):
        self.cache = cache
        self.mode = ViewMode.BROWSING
        self.post: Post | None = None
        self.references: list[ImageReference] = []
        self.selection = SelectionState()
        self.viewing: tuple[str, Path] | None = None

    def load(self, posts: list[Post]) -> int:
        """
        Start background fetches for every image in ``posts``.

        Must be called from a running event loop.

        Returns:
            Number of image references found
        """
        count = 0
        for post in posts:
            for ref in extract_image_references(post.cooked):
                self.cache.ensure_fetched(ref.url)
                count += 1
        logger.debug("Requested {} images across {} posts", count, len(posts))
        return count

    def open_post(self, post: Post) -> bool:
        """Browsing → FocusedPost: show ``post`` in full."""
        if self.mode is not ViewMode.BROWSING:
            return False
        self.post = post
        self.references = extract_image_references(post.cooked)
        self.selection = SelectionState.build(self.references, self.cache)
        self.mode = ViewMode.FOCUSED_POST
        logger.debug("Focused post {} with {} images", post.id, len(self.references))
        return True

    def refresh(self) -> None:
        """Pick up images whose fetch finished since the post was opened."""
        if self.mode is ViewMode.FOCUSED_POST:
            self.selection.refresh(self.references)

    def cycle(self) -> int | None:
        """Highlight the next available image (FocusedPost only)."""
        if self.mode is not ViewMode.FOCUSED_POST:
            return None
        self.refresh()
        return self.selection.cycle()

    def activate(self) -> bool:
        """FocusedPost → Viewing for the highlighted image."""
        if self.mode is not ViewMode.FOCUSED_POST or not self.selection.available:
            return False
        resolved = self.selection.activate(self.selection.selected)
        if resolved is None:
            return False
        self.viewing = resolved
        self.mode = ViewMode.VIEWING
        logger.debug("Viewing image {}", resolved[0])
        return True

    def dismiss(self) -> bool:
        """Viewing → FocusedPost."""
        if self.mode is not ViewMode.VIEWING:
            return False
        self.viewing = None
        self.mode = ViewMode.FOCUSED_POST
        return True

    def close(self) -> bool:
        """FocusedPost → Browsing."""
        if self.mode is not ViewMode.FOCUSED_POST:
            return False
        self.post = None
        self.references = []
        self.selection = SelectionState()
        self.mode = ViewMode.BROWSING
        return True

    def placements(self, width: int | None = None) -> list[PlacementHint]:
        """Placement hints for the focused post at the given wrap width."""
        if self.post is None:
            return []
        lines = clean_markup(self.post.cooked, width)
        return map_placements(self.references, markup_length(self.post.cooked), len(lines))

    def annotated_lines(self, width: int | None = None) -> list[tuple[str, bool]]:
        """
        Cleaned lines of the focused post with image markers inserted.

        Each item is ``(text, is_marker)``. Only images already in the cache
        get a marker; the highlighted one is flagged with a check mark.
        """
        if self.post is None:
            return []
        lines = clean_markup(self.post.cooked, width)
        hints = map_placements(self.references, markup_length(self.post.cooked), len(lines))
        self.refresh()

        positions = {ordinal: index for index, (ordinal, _) in enumerate(self.selection.available)}
        markers: dict[int, list[str]] = {}
        for hint in hints:
            index = positions.get(hint.ordinal)
            if index is None:
                continue
            check = "✓" if index == self.selection.selected else " "
            markers.setdefault(hint.line, []).append(f"[{check} image #{index + 1}]")

        result = []
        for number, line in enumerate(lines):
            for marker in markers.get(number, []):
                result.append((marker, True))
            result.append((line, False))
        return result
