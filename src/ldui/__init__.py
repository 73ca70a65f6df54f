"""
LDUI - terminal client for Discourse forums.

Shows forum posts as reflowed text with their images fetched in the
background and placed inline.

Usage:
    # List latest topics
    ldui latest

    # Read a post with image markers
    ldui topic 12345 --post 0

    # Preview an image of a post
    ldui view 12345 --post 0 --image 0
"""

__version__ = "0.1.0"

from .viewer import PostViewer, ViewMode

__all__ = [
    "PostViewer",
    "ViewMode",
]
