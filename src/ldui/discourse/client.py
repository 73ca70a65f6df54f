"""Discourse REST API client implementation using httpx."""

from typing import Any

import httpx
from loguru import logger
from pydantic import ValidationError

from .base import DiscourseClient, DiscourseError, Post, Topic


class ApiClient(DiscourseClient):
    """Discourse client talking to the public JSON endpoints."""

    def __init__(
        self,
        base_url: str,
        api_key: str = "",
        api_username: str = "ldui",
        timeout: float = 30,
        client: httpx.AsyncClient | None = None,
    ):
        """
        Initialize the client.

        Args:
            base_url: Forum root, e.g. https://linux.do
            api_key: User API key; anonymous access if empty
            api_username: Username sent alongside the API key
            timeout: HTTP request timeout in seconds
            client: Optional preconfigured httpx client
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.headers: dict[str, str] = {"Accept": "application/json"}
        if api_key:
            self.headers["Api-Key"] = api_key
            self.headers["Api-Username"] = api_username
        self._client = client

    async def _get_json(self, path: str, params: dict[str, Any] | None = None) -> dict:
        url = f"{self.base_url}{path}"
        logger.debug("GET {} params={}", url, params)
        try:
            if self._client is not None:
                response = await self._client.get(url, params=params, headers=self.headers)
            else:
                async with httpx.AsyncClient(
                    timeout=self.timeout, follow_redirects=True
                ) as client:
                    response = await client.get(url, params=params, headers=self.headers)
            response.raise_for_status()
            return response.json()
        except httpx.HTTPStatusError as e:
            logger.error("Request to {} failed with status {}", url, e.response.status_code)
            raise DiscourseError(f"{path} returned HTTP {e.response.status_code}") from e
        except httpx.HTTPError as e:
            logger.error("Request to {} failed: {}", url, e)
            raise DiscourseError(f"Request to {path} failed: {e}") from e
        except ValueError as e:
            logger.error("Invalid JSON from {}: {}", url, e)
            raise DiscourseError(f"Invalid JSON from {path}") from e

    async def get_latest_topics(self, page: int = 1) -> list[Topic]:
        """Fetch a page of the latest topics."""
        data = await self._get_json("/latest.json", params={"page": max(page, 1) - 1})
        try:
            raw = data["topic_list"]["topics"]
            topics = [Topic.model_validate(item) for item in raw]
        except (KeyError, TypeError, ValidationError) as e:
            raise DiscourseError(f"Unexpected topic list payload: {e}") from e
        logger.info("Loaded {} latest topics (page {})", len(topics), page)
        return topics

    async def get_topic_posts(self, topic_id: int, page: int = 1) -> list[Post]:
        """Fetch a page of posts for a topic."""
        data = await self._get_json(f"/t/{topic_id}.json", params={"page": max(page, 1)})
        try:
            raw = data["post_stream"]["posts"]
            posts = [Post.model_validate({"topic_id": topic_id, **item}) for item in raw]
        except (KeyError, TypeError, ValidationError) as e:
            raise DiscourseError(f"Unexpected post stream payload: {e}") from e
        logger.info("Loaded {} posts for topic {} (page {})", len(posts), topic_id, page)
        return posts
