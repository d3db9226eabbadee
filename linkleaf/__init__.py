"""
linkleaf Package

Manage a personal link feed stored as a compact protobuf binary file,
with conversion to and from an editable JSON form.
"""

__version__ = "1.0.0"

# Package-level imports for convenience
from .atomic_store import AtomicStore
from .config_manager import ConfigManager
from .exceptions import (
    FeedDecodeError,
    FeedError,
    FeedIOError,
    FeedNotFoundError,
    FeedValidationError,
)
from .feed_repository import FeedRepository, list_links
from .models import Feed, Link, LinkSummary

__all__ = [
    'AtomicStore',
    'ConfigManager',
    'Feed',
    'FeedDecodeError',
    'FeedError',
    'FeedIOError',
    'FeedNotFoundError',
    'FeedRepository',
    'FeedValidationError',
    'Link',
    'LinkSummary',
    'list_links',
]
