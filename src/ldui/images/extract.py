"""
Image reference extraction.

Parses post markup and returns the images worth fetching, in document order,
together with the byte offset of each tag in the original markup.
"""

import html
import re

from bs4 import BeautifulSoup
from bs4.builder import ParserRejectedMarkup
from loguru import logger

from .base import ImageReference

DEFAULT_EXCLUDED_CLASSES = frozenset({"avatar", "icon"})

_IMG_OPEN = re.compile(r"<img\b", re.IGNORECASE)


def markup_length(markup: str) -> int:
    """Return the UTF-8 length of markup, the denominator for raw offsets."""
    return len(markup.encode("utf-8"))


def _is_excluded(classes: list[str] | str | None, excluded: frozenset[str]) -> bool:
    if not classes:
        return False
    if isinstance(classes, str):
        classes = classes.split()
    return any(cls in excluded for cls in classes)


def _locate_tag(markup: str, src: str, cursor: int) -> tuple[int | None, int]:
    """
    Find the opening tag carrying ``src`` at or after ``cursor``.

    Returns the character index of ``<img`` (or None) and the new cursor.
    The parser hands back unescaped attribute values, so both the raw and the
    escaped spelling are tried.
    """
    candidates = []
    for value in dict.fromkeys((src, html.escape(src, quote=True), html.escape(src, quote=False))):
        for quote in ('"', "'", ""):
            needle = f"src={quote}{value}{quote}"
            pos = markup.find(needle, cursor)
            if pos != -1:
                candidates.append((pos, len(needle)))

    if not candidates:
        return None, cursor

    pos, length = min(candidates)
    start = None
    for match in _IMG_OPEN.finditer(markup, cursor, pos):
        start = match.start()
    if start is None:
        return None, cursor
    return start, pos + length


def _byte_offset(markup: str, index: int) -> int:
    return len(markup[:index].encode("utf-8"))


def extract_image_references(
    markup: str,
    excluded_classes: frozenset[str] = DEFAULT_EXCLUDED_CLASSES,
) -> list[ImageReference]:
    """
    Extract qualifying image references from markup.

    Skips images tagged with an excluded class (avatars and icons by default),
    images without a source and inline ``data:`` URIs. Never raises on bad
    markup: a rejected document yields an empty list.

    Args:
        markup: HTML-like post body
        excluded_classes: CSS classes that disqualify an image

    Returns:
        References in document order, ordinals counting qualifying images only
    """
    if not markup:
        return []

    try:
        soup = BeautifulSoup(markup, "html.parser")
    except ParserRejectedMarkup as e:
        logger.warning("Could not parse markup ({} chars): {}", len(markup), e)
        return []

    references: list[ImageReference] = []
    cursor = 0

    for tag in soup.find_all("img"):
        src = tag.get("src")
        if isinstance(src, list):
            src = " ".join(src)
        src = (src or "").strip()
        if not src:
            continue

        # Every located tag advances the cursor, qualifying or not, so that a
        # repeated URL is matched against its own occurrence.
        index, cursor = _locate_tag(markup, src, cursor)

        if _is_excluded(tag.get("class"), excluded_classes):
            continue
        if src.lower().startswith("data:"):
            continue

        raw_offset = _byte_offset(markup, index) if index is not None else None
        references.append(
            ImageReference(url=src, ordinal=len(references), raw_offset=raw_offset)
        )

    logger.debug("Extracted {} image references", len(references))
    return references
