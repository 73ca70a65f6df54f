"""Centralized logging configuration using loguru.

Background image fetches log their failures instead of raising into the
display, so the handlers configured here are where those failures end up.

Example:
    from ldui.logging import setup_logging

    setup_logging(level="DEBUG", log_file="/tmp/ldui.log")

    from loguru import logger
    logger.info("Viewer started")

"""

import sys
from typing import Any

from loguru import logger

CONSOLE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
    "<level>{message}</level>"
)


def setup_logging(
    level: str = "INFO",
    json_output: bool = False,
    log_file: str | None = None,
) -> Any:
    """Configure loguru for the application.

    Should be called once at startup. When ``log_file`` is given, records go
    only to that file so they never interleave with what is drawn on the
    terminal; otherwise they go to stderr.

    Args:
        level: Minimum log level. One of: DEBUG, INFO, WARNING, ERROR, CRITICAL.
        json_output: If True, emit records as JSON lines.
        log_file: Optional path of a log file to write instead of stderr.

    Returns:
        The configured loguru logger instance.

    """
    logger.remove()

    if log_file:
        logger.add(
            log_file,
            format="{message}" if json_output else CONSOLE_FORMAT,
            serialize=json_output,
            level=level,
            rotation="10 MB",
            retention="7 days",
        )
    elif json_output:
        logger.add(sys.stderr, format="{message}", serialize=True, level=level)
    else:
        logger.add(sys.stderr, format=CONSOLE_FORMAT, level=level, colorize=True)

    return logger
