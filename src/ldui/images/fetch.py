"""
Image retrieval over HTTP.

A single attempt per call; retrying is left to whoever asks again.
"""

import httpx
from loguru import logger

from .base import ImageFetchError


class ImageFetcher:
    """Fetches raw image bytes with httpx."""

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float = 30,
        headers: dict[str, str] | None = None,
        client: httpx.AsyncClient | None = None,
    ):
        """
        Initialize the fetcher.

        Args:
            base_url: Forum root used to resolve relative image sources
            timeout: HTTP request timeout in seconds
            headers: Extra request headers (e.g. API credentials)
            client: Shared client to reuse instead of one per request
        """
        self.base_url = base_url
        self.timeout = timeout
        self.headers = headers or {}
        self._client = client

    def resolve(self, url: str) -> str:
        """Return an absolute URL for ``url``, joined onto ``base_url`` if relative."""
        if url.startswith(("http://", "https://")) or not self.base_url:
            return url
        return str(httpx.URL(self.base_url).join(url))

    async def fetch(self, url: str) -> bytes:
        """
        Fetch the bytes behind an image URL.

        Args:
            url: Image source as found in the markup

        Returns:
            Response body

        Raises:
            ImageFetchError: On a malformed URL, transport failure or a non-2xx status
        """
        try:
            target = self.resolve(url)
            logger.debug("Fetching image: {}", target[:80])
            if self._client is not None:
                response = await self._client.get(target, headers=self.headers)
            else:
                async with httpx.AsyncClient(
                    timeout=self.timeout, follow_redirects=True
                ) as client:
                    response = await client.get(target, headers=self.headers)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise ImageFetchError(
                url, f"HTTP {e.response.status_code}", status_code=e.response.status_code
            ) from e
        except httpx.HTTPError as e:
            raise ImageFetchError(url, str(e) or type(e).__name__) from e
        except httpx.InvalidURL as e:
            raise ImageFetchError(url, f"invalid URL: {e}") from e

        logger.debug("Fetched image: {} bytes from {}", len(response.content), target[:80])
        return response.content
