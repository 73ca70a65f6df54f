"""
Abstract base class for forum clients.

Defines the topic and post models the viewer works with.
"""

from abc import ABC, abstractmethod
from datetime import datetime

from pydantic import BaseModel, Field


class DiscourseError(Exception):
    """A forum request failed or returned something unexpected."""


class Topic(BaseModel):
    """A topic in a listing."""

    id: int
    title: str
    posts_count: int = 0
    views: int = 0
    created_at: datetime | None = None
    last_posted_at: datetime | None = None
    tags: list[str] = Field(default_factory=list)


class Post(BaseModel):
    """A single post within a topic."""

    id: int
    topic_id: int
    username: str
    cooked: str = Field(default="", description="Rendered HTML body of the post")
    created_at: datetime | None = None
    post_number: int | None = None


class DiscourseClient(ABC):
    """Abstract interface for forum API clients."""

    @abstractmethod
    async def get_latest_topics(self, page: int = 1) -> list[Topic]:
        """
        Fetch the latest topics.

        Args:
            page: 1-based page number

        Returns:
            Topics on that page
        """
        pass

    @abstractmethod
    async def get_topic_posts(self, topic_id: int, page: int = 1) -> list[Post]:
        """
        Fetch posts of a topic.

        Args:
            topic_id: Topic identifier
            page: 1-based page number

        Returns:
            Posts on that page, in stream order
        """
        pass
