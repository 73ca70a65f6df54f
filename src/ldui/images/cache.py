"""
Image caching utilities.

Keeps fetched images on disk, one file per URL, and maps URLs to those files
for the lifetime of the process. Concurrent requests for the same URL share a
single background fetch.
"""

import asyncio
import hashlib
import os
import re
import tempfile
import threading
from pathlib import Path
from urllib.parse import urlsplit

from loguru import logger

from .base import CacheEntry, ImageError, ImageStorageError
from .fetch import ImageFetcher

_EXTENSION = re.compile(r"^[A-Za-z0-9]{1,5}$")


class ImageCache:
    """Manages image fetching and on-disk caching."""

    def __init__(
        self,
        cache_dir: Path | str,
        fetcher: ImageFetcher | None = None,
        default_extension: str = "jpg",
    ):
        """
        Initialize the image cache.

        Files left in ``cache_dir`` by an earlier run are not indexed; the
        URL map always starts empty.

        Args:
            cache_dir: Directory to store cached images
            fetcher: Retrieval backend (defaults to a plain ImageFetcher)
            default_extension: Extension used when the URL does not suggest one
        """
        self.cache_dir = Path(cache_dir)
        self.fetcher = fetcher or ImageFetcher()
        self.default_extension = default_extension
        self._entries: dict[str, CacheEntry] = {}
        self._pending: dict[str, asyncio.Task] = {}
        # Guards _entries and _pending; held only around dict operations.
        self._lock = threading.Lock()

        # Ensure cache directory exists
        try:
            self.cache_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            logger.warning("Could not create image cache directory {}: {}", self.cache_dir, e)
        logger.debug("ImageCache initialized: dir={}", self.cache_dir)

    def lookup(self, url: str) -> Path | None:
        """Return the cached file for ``url``, or None. Never fetches."""
        with self._lock:
            entry = self._entries.get(url)
        return entry.local_path if entry else None

    def get_entry(self, url: str) -> CacheEntry | None:
        """Return the full cache entry for ``url``, or None."""
        with self._lock:
            return self._entries.get(url)

    def entries(self) -> list[CacheEntry]:
        """Snapshot of every cached entry."""
        with self._lock:
            return list(self._entries.values())

    def pending(self) -> list[str]:
        """URLs with a fetch currently in flight."""
        with self._lock:
            return list(self._pending)

    def ensure_fetched(self, url: str) -> None:
        """
        Start a background fetch for ``url`` unless one is cached or in flight.

        Must be called from a running event loop. Returns immediately; the
        result shows up later through ``lookup``.
        """
        loop = asyncio.get_running_loop()
        with self._lock:
            if url in self._entries or url in self._pending:
                return
            task = loop.create_task(self._background_fetch(url))
            self._pending[url] = task
        logger.debug("Scheduled image fetch: {}", url[:80])

    async def join(self) -> None:
        """Wait for every fetch that is pending right now."""
        with self._lock:
            tasks = list(self._pending.values())
        if tasks:
            await asyncio.gather(*tasks)

    async def _background_fetch(self, url: str) -> None:
        try:
            await self.fetch(url)
        except ImageError as e:
            logger.warning("{}", e)
        finally:
            with self._lock:
                self._pending.pop(url, None)

    async def fetch(self, url: str) -> CacheEntry:
        """
        Fetch ``url`` and store it, returning the resulting entry.

        Returns the existing entry without any network access if ``url`` is
        already cached.

        Raises:
            ImageFetchError: If retrieval fails
            ImageStorageError: If the bytes cannot be written
        """
        existing = self.get_entry(url)
        if existing:
            logger.debug("Image already cached: {}", url[:80])
            return existing

        data = await self.fetcher.fetch(url)
        await self.store(url, data)
        entry = self.get_entry(url)
        if entry is None:
            raise ImageStorageError(url, "entry missing after store")
        return entry

    async def store(self, url: str, data: bytes) -> Path:
        """
        Persist ``data`` for ``url`` and publish the cache entry.

        The file is written to a temporary name and renamed into place before
        the entry becomes visible. The first successful store for a URL wins;
        later stores return the existing path untouched.

        Raises:
            ImageStorageError: If the file cannot be written
        """
        existing = self.lookup(url)
        if existing:
            return existing

        path = self.cache_dir / self.filename_for(url)
        try:
            await asyncio.to_thread(self._write_atomic, path, data)
        except OSError as e:
            raise ImageStorageError(url, str(e)) from e

        entry = CacheEntry(url=url, local_path=path, size_bytes=len(data))
        with self._lock:
            entry = self._entries.setdefault(url, entry)
        logger.debug("Saved image to {} ({} bytes)", entry.local_path, entry.size_bytes)
        return entry.local_path

    def _write_atomic(self, path: Path, data: bytes) -> None:
        fd, tmp_name = tempfile.mkstemp(dir=self.cache_dir, prefix=".", suffix=".part")
        try:
            with os.fdopen(fd, "wb") as f:
                f.write(data)
            os.replace(tmp_name, path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

    def filename_for(self, url: str) -> str:
        """Stable cache file name for ``url``."""
        return f"{self._hash_url(url)}.{self._extension_for(url)}"

    def _hash_url(self, url: str) -> str:
        """Generate a hash-based ID from a URL."""
        return hashlib.sha256(url.encode()).hexdigest()[:32]

    def _extension_for(self, url: str) -> str:
        """Infer a file extension from the URL's last path segment."""
        try:
            segment = urlsplit(url).path.rsplit("/", 1)[-1]
        except ValueError:
            return self.default_extension
        if "." in segment:
            ext = segment.rsplit(".", 1)[-1]
            if _EXTENSION.match(ext):
                return ext.lower()
        return self.default_extension
