"""Convert post markup into plain text lines for display."""

import re
import textwrap

from bs4 import BeautifulSoup
from bs4.builder import ParserRejectedMarkup
from loguru import logger

_BLOCK_TAGS = ["p", "div", "li", "blockquote", "pre", "h1", "h2", "h3", "h4", "h5", "h6", "tr"]
_SIZE_UNITS = (" KB", " MB", " GB", " B ")
_BLANK_RUNS = re.compile(r"\n{2,}")


def is_image_size_info(line: str) -> bool:
    """True for lightbox captions like ``screenshot 1920×1080 245 KB``."""
    return "×" in line and any(unit in line for unit in _SIZE_UNITS)


def clean_markup(markup: str, width: int | None = None) -> list[str]:
    """
    Strip markup down to display lines.

    Line breaks and block ends become newlines, tags are dropped, entities
    unescaped and consecutive newlines collapsed. Image size captions are
    removed. With ``width``, long lines are wrapped.

    Args:
        markup: HTML-like post body
        width: Optional wrap width in columns

    Returns:
        Lines of text (possibly empty)
    """
    if not markup:
        return []

    try:
        soup = BeautifulSoup(markup, "html.parser")
    except ParserRejectedMarkup as e:
        logger.warning("Could not parse markup for display: {}", e)
        return [markup]

    for br in soup.find_all("br"):
        br.replace_with("\n")
    for block in soup.find_all(_BLOCK_TAGS):
        block.append("\n")

    text = _BLANK_RUNS.sub("\n", soup.get_text().replace("\xa0", " "))
    lines = [line for line in text.strip("\n").split("\n") if not is_image_size_info(line)]

    if width and width > 0:
        wrapped = []
        for line in lines:
            wrapped.extend(textwrap.wrap(line, width) or [""])
        lines = wrapped
    return lines
