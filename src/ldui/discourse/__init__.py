"""
Forum client package.

Provides a factory function to create the configured forum client.
"""

from .base import DiscourseClient, DiscourseError, Post, Topic
from .client import ApiClient


def create_client(
    base_url: str,
    api_key: str = "",
    api_username: str = "ldui",
    timeout: float = 30,
) -> DiscourseClient:
    """
    Create a forum client.

    Args:
        base_url: Forum root URL
        api_key: Optional user API key
        api_username: Username sent with the API key
        timeout: HTTP request timeout in seconds

    Returns:
        Configured DiscourseClient instance

    Raises:
        ValueError: If base_url is empty
    """
    if not base_url:
        raise ValueError("Forum base URL is required")
    return ApiClient(
        base_url=base_url,
        api_key=api_key,
        api_username=api_username,
        timeout=timeout,
    )


__all__ = [
    "ApiClient",
    "DiscourseClient",
    "DiscourseError",
    "Post",
    "Topic",
    "create_client",
]
