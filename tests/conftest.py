"""Pytest fixtures and configuration for ldui tests.

This module provides shared fixtures for testing image extraction, the image
cache, the forum client and the post viewer.
"""

import tempfile
from collections.abc import Generator
from io import BytesIO
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import pytest

from ldui.discourse import Post
from ldui.images import ImageCache, ImageFetcher

# --- Temporary Directory Fixtures ---


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for test files."""
    with tempfile.TemporaryDirectory() as tmp:
        yield Path(tmp)


@pytest.fixture
def temp_image_cache_dir(temp_dir: Path) -> Path:
    """Create a temporary directory for image cache."""
    image_dir = temp_dir / "images"
    image_dir.mkdir()
    return image_dir


# --- Sample Data Fixtures ---


@pytest.fixture
def sample_image_bytes() -> bytes:
    """Create sample image bytes for testing."""
    from PIL import Image

    # Create a simple 20x10 red image
    img = Image.new("RGB", (20, 10), color="red")
    buffer = BytesIO()
    img.save(buffer, format="PNG")
    return buffer.getvalue()


@pytest.fixture
def sample_markup() -> str:
    """A post body with two qualifying images and one avatar."""
    return (
        "<p>Intro paragraph about the build.</p>"
        '<p><img class="avatar" src="https://linux.do/avatar.png"></p>'
        "<p>First screenshot below.</p>"
        '<p><img src="https://linux.do/uploads/one.png" alt="one"></p>'
        "<p>Some discussion<br>over two lines.</p>"
        '<p><img src="https://linux.do/uploads/two.jpg" alt="two"></p>'
        "<p>Closing remarks.</p>"
    )


@pytest.fixture
def sample_post(sample_markup: str) -> Post:
    """A post carrying the sample markup."""
    return Post(id=1, topic_id=42, username="alice", cooked=sample_markup)


@pytest.fixture
def sample_posts_payload(sample_markup: str) -> dict:
    """A /t/{id}.json response body."""
    return {
        "id": 42,
        "title": "Build log",
        "post_stream": {
            "posts": [
                {
                    "id": 1,
                    "topic_id": 42,
                    "username": "alice",
                    "cooked": sample_markup,
                    "post_number": 1,
                    "created_at": "2025-01-02T03:04:05.000Z",
                },
                {
                    "id": 2,
                    "topic_id": 42,
                    "username": "bob",
                    "cooked": "<p>Nice!</p>",
                    "post_number": 2,
                },
            ]
        },
    }


@pytest.fixture
def sample_latest_payload() -> dict:
    """A /latest.json response body."""
    return {
        "topic_list": {
            "topics": [
                {"id": 42, "title": "Build log", "posts_count": 2, "views": 10},
                {"id": 43, "title": "Another topic", "posts_count": 5, "views": 99},
            ]
        }
    }


# --- Mock Fetcher Fixtures ---


@pytest.fixture
def mock_fetcher(sample_image_bytes: bytes) -> ImageFetcher:
    """Create a mock fetcher that returns the sample image for any URL."""
    fetcher = MagicMock(spec=ImageFetcher)
    fetcher.fetch = AsyncMock(return_value=sample_image_bytes)
    return fetcher


@pytest.fixture
def image_cache(temp_image_cache_dir: Path, mock_fetcher: ImageFetcher) -> ImageCache:
    """Create an ImageCache backed by the mock fetcher."""
    return ImageCache(cache_dir=temp_image_cache_dir, fetcher=mock_fetcher)


# --- Settings Override Fixtures ---


@pytest.fixture
def mock_settings(temp_dir: Path, monkeypatch):
    """Override settings with test values."""
    monkeypatch.setenv("LDUI_DISCOURSE_URL", "https://forum.example.com")
    monkeypatch.setenv("LDUI_IMAGE_CACHE_PATH", str(temp_dir / "images"))
    monkeypatch.setenv("LDUI_LOG_LEVEL", "DEBUG")

    from ldui.config import Settings

    return Settings()
