"""
Terminal previews of cached images.

Decodes a cached file with Pillow and renders it with rich using upper
half-block characters, two pixel rows per terminal line.
"""

from pathlib import Path

from loguru import logger
from PIL import Image as PILImage
from PIL import UnidentifiedImageError
from rich.style import Style
from rich.text import Text

from .base import ImageDecodeError

HALF_BLOCK = "▀"


def load_image(path: Path | str, max_width: int, max_height: int) -> PILImage.Image:
    """
    Decode an image and scale it to fit ``max_width`` x ``max_height`` cells.

    Aspect ratio is preserved. Height is in terminal lines, each holding two
    pixel rows.

    Raises:
        ImageDecodeError: If the file is missing or not a recognized image
    """
    try:
        with PILImage.open(path) as img:
            img.load()
            img = img.convert("RGB")
    except FileNotFoundError as e:
        raise ImageDecodeError(path, "file not found") from e
    except (UnidentifiedImageError, OSError, ValueError) as e:
        raise ImageDecodeError(path, str(e) or type(e).__name__) from e

    width, height = img.size
    max_w = max(1, max_width)
    max_h = max(1, max_height * 2)
    if width > max_w or height > max_h:
        ratio = min(max_w / width, max_h / height)
        new_size = (max(1, int(width * ratio)), max(1, int(height * ratio)))
        img = img.resize(new_size, PILImage.Resampling.LANCZOS)
    return img


def render_image(path: Path | str, max_width: int = 80, max_height: int = 24) -> Text:
    """
    Render an image as rich Text.

    Raises:
        ImageDecodeError: If the file cannot be decoded
    """
    img = load_image(path, max_width, max_height)
    width, height = img.size
    pixels = img.load()

    text = Text()
    for y in range(0, height, 2):
        for x in range(width):
            top = pixels[x, y]
            bottom = pixels[x, y + 1] if y + 1 < height else (0, 0, 0)
            text.append(
                HALF_BLOCK,
                style=Style(color=f"rgb({top[0]},{top[1]},{top[2]})",
                            bgcolor=f"rgb({bottom[0]},{bottom[1]},{bottom[2]})"),
            )
        if y + 2 < height:
            text.append("\n")
    return text


def render_preview(path: Path | str, max_width: int = 80, max_height: int = 24) -> Text:
    """Render an image, or an inline error annotation if it cannot be decoded."""
    try:
        return render_image(path, max_width, max_height)
    except ImageDecodeError as e:
        logger.warning("{}", e)
        return Text(f"[image unavailable: {e.reason}]", style="bold red")
