"""Turn a share payload into a feed item.

Sharing a page from Chrome on Android (for example through HTTP Shortcuts,
https://http-shortcuts.rmy.ch/) produces a string such as::

    Enver Hoxha - Wikipedia https://en.m.wikipedia.org/wiki/Enver_Hoxha

rather than a bare URL.  The token after the last space is taken to be the
URL and everything before it the title.
"""

from __future__ import annotations

import datetime
import logging
from typing import Optional, Tuple
from urllib.parse import urlparse

from pydantic import ValidationError

from ...errors import FeedValidationError
from ..models import Item

logger = logging.getLogger(__name__)


def parse_shared_text(data: str) -> Tuple[str, str, bool]:
    """Split *data* into ``(title, url, ok)`` at its last space.

    ``ok`` is ``False`` when there is no space or the final token is not an
    absolute URL with a host; the trimmed text is then returned as ``url``.
    """
    data = data.strip()
    last_space = data.rfind(" ")
    if last_space == -1:
        return "", data, False
    title, url = data[:last_space], data[last_space + 1:]

    try:
        parsed = urlparse(url)
    except ValueError as exc:
        logger.info("Failed parsing URL: %s", exc)
        return "", data, False
    if not parsed.netloc:
        logger.info("Failed parsing URL: no host")
        return "", data, False

    return title, url, True


def new_item(data: str, now: Optional[datetime.datetime] = None) -> Item:
    """Build the item stored for a share payload.

    When no URL can be extracted the whole payload is used as both title and
    URL.  The link may be broken, but the submission is never dropped.
    """
    if now is None:
        now = datetime.datetime.now(datetime.timezone.utc).astimezone()
    title, url, ok = parse_shared_text(data)
    if not ok:
        title = url = data.strip()
    try:
        return Item(
            id=url,
            title=title,
            url=url,
            external_url=url,
            date_published=now,
        )
    except ValidationError as exc:
        raise FeedValidationError(str(exc)) from exc
