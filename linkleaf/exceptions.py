"""
Exception hierarchy for linkleaf.
Every failure raised by the core is one of these kinds.
"""
from typing import Optional


class FeedError(Exception):
    """
    Base class for all linkleaf errors.
    """

    def __init__(self, message: str, path: Optional[str] = None):
        """
        Args:
            message: Human readable description
            path: Feed file involved in the failure, if any
        """
        super().__init__(message)
        self.path = path


class FeedNotFoundError(FeedError):
    """Raised when a feed file does not exist."""


class FeedIOError(FeedError):
    """Raised on storage failures (permissions, disk full, rename, mkdir)."""


class FeedDecodeError(FeedError):
    """Raised when bytes do not parse as a valid feed encoding."""


class FeedValidationError(FeedError):
    """Raised when a link or feed is missing required values."""
