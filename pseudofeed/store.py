"""Flat-file storage for the feed document.

The whole feed lives in one JSON Feed file.  Every mutation reads the file,
changes the parsed document and writes it back in full.  There is no locking
and no atomic rename: two overlapping appends race and the last writer wins,
which is acceptable for a single-user service.
"""

from __future__ import annotations

import logging
from pathlib import Path

from .errors import FeedReadError, FeedWriteError
from .main.models import Feed, Item, new_feed, parse_feed, validate_feed

logger = logging.getLogger(__name__)


class FeedStore:
    """Read and append items to the feed file at ``path``."""

    def __init__(self, path: Path | str, title: str) -> None:
        self.path = Path(path)
        self.title = title

    def initialize_if_absent(self) -> bool:
        """Write an empty feed if no document exists yet.

        Returns ``True`` when a new file was created.  Any ``OSError`` is left
        to propagate; the caller treats it as fatal.
        """
        if self.path.exists():
            return False
        logger.info("Creating new feed file: %s", self.path)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self._write(validate_feed(new_feed(self.title)))
        return True

    def read_raw(self) -> bytes:
        """Return the stored document exactly as it is on disk."""
        try:
            return self.path.read_bytes()
        except OSError as exc:
            raise FeedReadError(str(exc)) from exc

    def load(self) -> Feed:
        """Parse the stored document.

        Raises ``FeedReadError`` (an ``OSError``) if the file cannot be read
        and ``FeedParseError`` if it is not a valid feed.
        """
        return parse_feed(self.read_raw())

    def append(self, item: Item) -> Feed:
        """Append *item* to the end of the feed and rewrite the file."""
        feed = self.load()
        feed.items.append(item)
        feed = validate_feed(feed)
        self._write(feed)
        logger.info("Stored item: %s", item.url)
        return feed

    def _write(self, feed: Feed) -> None:
        try:
            self.path.write_bytes(feed.to_json())
        except OSError as exc:
            raise FeedWriteError(str(exc)) from exc
