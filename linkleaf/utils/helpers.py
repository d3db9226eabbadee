"""
Helper functions for linkleaf.
Contains identifier derivation, tag parsing and timestamp handling.
"""
import hashlib
import logging
from datetime import datetime, timezone
from typing import Iterable, List, Optional, Union

logger = logging.getLogger(__name__)

LINK_ID_LENGTH = 12
TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%SZ"


def derive_link_id(url: str, date: str) -> str:
    """
    Derive a short, deterministic identifier for a link.

    The SHA-256 digest is taken over ``url + "|" + date`` and the first
    12 hex characters (48 bits) are kept. Collisions are not detected.

    Args:
        url: Link URL
        date: Link date (YYYY-MM-DD)

    Returns:
        12-character lowercase hex string
    """
    unique_id = f"{url}|{date}"
    link_id = hashlib.sha256(unique_id.encode('utf-8')).hexdigest()[:LINK_ID_LENGTH]

    logger.debug(f"Derived link id {link_id} from '{unique_id}'")
    return link_id


def split_tags(tags: Optional[Union[str, Iterable[str]]]) -> List[str]:
    """
    Normalize tags given as a comma-separated string or an iterable.

    Whitespace is trimmed and empty items are dropped. Order is preserved
    and duplicates are kept.

    Args:
        tags: "a, b,c" style string, list of strings or None

    Returns:
        List of tag strings
    """
    if tags is None:
        return []

    if isinstance(tags, str):
        parts = tags.split(',')
    else:
        parts = list(tags)

    return [part.strip() for part in parts if part and part.strip()]


def utc_now() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def format_timestamp(moment: datetime) -> str:
    """
    Format a datetime as an RFC 3339 UTC timestamp with second precision.

    Naive datetimes are assumed to already be in UTC.

    Args:
        moment: Datetime to format

    Returns:
        Timestamp string such as "2025-08-18T09:30:00Z"
    """
    if moment.tzinfo is not None:
        moment = moment.astimezone(timezone.utc)
    return moment.strftime(TIMESTAMP_FORMAT)
