"""
Feed Repository module for record-level feed operations.

Every operation works on whole feeds: load the file, optionally mutate the
in-memory Feed, and write it back in full through the atomic store.
"""
import logging
import os
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional, Tuple

from linkleaf import codec
from linkleaf.atomic_store import AtomicStore
from linkleaf.exceptions import FeedNotFoundError, FeedValidationError
from linkleaf.models import Feed, Link, LinkSummary
from linkleaf.utils.helpers import derive_link_id, format_timestamp, split_tags, utc_now
from linkleaf.utils.logging_utils import log_feed_loaded, log_feed_saved, log_link_added, log_text_import

logger = logging.getLogger(__name__)

REQUIRED_LINK_FIELDS = ('title', 'url', 'date')


class FeedRepository:
    """
    Load, create, append to and save binary feed files.
    """

    def __init__(self, store: Optional[AtomicStore] = None, clock: Optional[Callable[[], datetime]] = None):
        """
        Initialize the repository.

        Args:
            store: Atomic store used for file access
            clock: Callable returning the current UTC time
        """
        self.store = store or AtomicStore()
        self.clock = clock or utc_now

    def _now(self) -> str:
        return format_timestamp(self.clock())

    def save(self, path: str, feed: Feed) -> None:
        """
        Encode a feed and atomically write it to a path.

        ``generated_at`` is written as-is.

        Args:
            path: Destination file
            feed: Feed to persist

        Raises:
            FeedIOError: If the write fails
            FeedValidationError: If the feed cannot be encoded
        """
        data = codec.encode_binary(feed)
        self.store.write(path, data)
        log_feed_saved(logger, path, len(feed.links), len(data))

    def create(self, path: str, title: str = "", version: int = 1) -> Feed:
        """
        Create an empty feed and persist it, replacing any existing file.

        Args:
            path: Destination file
            title: Feed title
            version: Caller-assigned feed version

        Returns:
            The new Feed

        Raises:
            FeedIOError: If the write fails
        """
        if os.path.exists(path):
            logger.warning(f"Overwriting existing feed at {path}")

        feed = Feed(version=version, title=title, generated_at=self._now())
        self.save(path, feed)
        return feed

    def load(self, path: str) -> Feed:
        """
        Read and decode a feed.

        Args:
            path: Feed file to read

        Returns:
            Decoded Feed

        Raises:
            FeedNotFoundError: If the path does not exist
            FeedIOError: For other read failures
            FeedDecodeError: If the file is not a valid feed encoding
        """
        data = self.store.read(path)
        feed = codec.decode_binary(data)
        log_feed_loaded(logger, path, len(feed.links))
        return feed

    def append(self, path: str, link_fields: Dict[str, Any], explicit_id: Optional[str] = None) -> Tuple[Feed, str]:
        """
        Prepend a new link to the feed at a path, creating the feed if absent.

        The id is derived from url and date when neither ``explicit_id`` nor
        ``link_fields['id']`` is given. Ids are not checked for uniqueness.

        Args:
            path: Feed file to update
            link_fields: Mapping with title, url, date and optionally
                summary, tags, via and id
            explicit_id: Identifier to use instead of a derived one

        Returns:
            Tuple of (updated Feed, assigned id)

        Raises:
            FeedValidationError: If title, url or date is missing
            FeedDecodeError: If the existing file is not a valid feed
            FeedIOError: If reading or writing fails
        """
        link_id = explicit_id or link_fields.get('id') or ""
        link = build_link(link_fields, link_id)

        try:
            feed = self.load(path)
        except FeedNotFoundError:
            logger.info(f"No feed at {path}, starting a new one")
            feed = Feed()

        feed.links.insert(0, link)
        feed.generated_at = self._now()
        self.save(path, feed)

        log_link_added(logger, link.id, link.title, derived=not link_id)
        return feed, link.id

    def export_text(self, path: str) -> bytes:
        """
        Load a binary feed and render its editable text form.

        Args:
            path: Feed file to read

        Returns:
            UTF-8 JSON bytes
        """
        return codec.encode_text(self.load(path))

    def import_text(self, path: str, data: bytes) -> Feed:
        """
        Replace the binary feed at a path with a decoded text-form feed.

        Links with an empty id get a derived one and ``generated_at`` is
        refreshed.

        Args:
            path: Destination feed file
            data: UTF-8 JSON bytes

        Returns:
            The persisted Feed

        Raises:
            FeedDecodeError: If the text is not a valid feed
            FeedIOError: If the write fails
        """
        feed = codec.decode_text(data)

        backfilled = 0
        for link in feed.links:
            if not link.id:
                link.id = derive_link_id(link.url, link.date)
                backfilled += 1

        feed.generated_at = self._now()
        self.save(path, feed)

        log_text_import(logger, path, len(feed.links), backfilled)
        return feed


def build_link(link_fields: Dict[str, Any], link_id: str = "") -> Link:
    """
    Build a Link from user supplied fields.

    Presence of title, url and date is checked; their format is not.
    Empty summary and via are treated as absent. Text must be encodable
    as UTF-8 (no lone surrogates).

    Args:
        link_fields: Mapping of link fields
        link_id: Identifier to assign; derived when empty

    Returns:
        New Link

    Raises:
        FeedValidationError: If a required field is missing or empty, or a
            field holds text that cannot be encoded
    """
    missing = [name for name in REQUIRED_LINK_FIELDS if not link_fields.get(name)]
    if missing:
        raise FeedValidationError(f"Missing required link fields: {', '.join(missing)}")

    link = Link(
        id=link_id,
        title=link_fields['title'],
        url=link_fields['url'],
        date=link_fields['date'],
        summary=link_fields.get('summary') or None,
        tags=split_tags(link_fields.get('tags')),
        via=link_fields.get('via') or None,
    )

    texts = [('id', link.id), ('title', link.title), ('url', link.url), ('date', link.date),
             ('summary', link.summary), ('via', link.via)]
    texts.extend(('tags', tag) for tag in link.tags)
    for name, value in texts:
        if value is None:
            continue
        try:
            value.encode('utf-8')
        except UnicodeEncodeError as e:
            raise FeedValidationError(f"Link {name} is not valid Unicode: {value!r}") from e

    if not link.id:
        link.id = derive_link_id(link.url, link.date)
    return link


def list_links(feed: Feed) -> List[LinkSummary]:
    """
    Project a feed's links into listing rows, in stored (newest-first) order.

    Args:
        feed: Feed to list

    Returns:
        One LinkSummary per link with 1-based positions
    """
    return [
        LinkSummary(
            position=index,
            id=link.id,
            title=link.title,
            url=link.url,
            date=link.date,
            tags=tuple(link.tags),
            summary=link.summary,
            via=link.via,
        )
        for index, link in enumerate(feed.links, start=1)
    ]
