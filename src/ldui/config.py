"""Configuration management using pydantic-settings.

Loads from environment variables (prefixed ``LDUI_``) and .env file.
"""

import os
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


def default_cache_dir() -> str:
    """Return the platform cache location for images.

    Uses ``$XDG_CACHE_HOME`` when set, otherwise ``~/.cache``.

    Returns:
        str: Path of the ``ldui/images`` directory under the cache root.

    """
    root = os.environ.get("XDG_CACHE_HOME") or str(Path.home() / ".cache")
    return str(Path(root) / "ldui" / "images")


class Settings(BaseSettings):
    """Application settings loaded from environment variables and .env file.

    Attributes:
        discourse_url: Root URL of the forum.
        api_key: Discourse user API key (anonymous access if empty).
        api_username: Username sent together with the API key.
        image_cache_path: Directory for cached images.
        image_fetch_timeout: HTTP timeout for image fetching in seconds.
        text_width: Wrap width for post text.
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        log_json: Output logs in JSON format.
        log_file: Optional log file; keeps logs off the terminal.

    """

    model_config = SettingsConfigDict(
        env_prefix="LDUI_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Forum
    discourse_url: str = "https://linux.do"
    api_key: str = ""
    api_username: str = "ldui"

    # Image caching
    image_cache_path: str = Field(default_factory=default_cache_dir)
    image_fetch_timeout: int = 30

    # Display
    text_width: int = 80

    # Logging
    log_level: str = "INFO"
    log_json: bool = False
    log_file: str | None = None

    @property
    def image_path(self) -> Path:
        """Return the image cache directory as a Path object.

        Returns:
            Path: Resolved path to the image cache directory.

        """
        return Path(self.image_cache_path)

    @property
    def has_api_key(self) -> bool:
        """Return whether an API key is configured."""
        return bool(self.api_key)


# Global settings instance
settings = Settings()
