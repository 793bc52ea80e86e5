"""JSON Feed document models.

The feed file is a JSON Feed 1.1 document (https://jsonfeed.org/version/1.1).
Only the fields pseudofeed writes are modelled explicitly; anything else a
hand-edited or foreign document carries is kept through ``extra="allow"`` so
rewriting the file never drops data.
"""

from __future__ import annotations

import datetime
import json
import re
from typing import List, Optional

from pydantic import AwareDatetime, BaseModel, ConfigDict, Field, ValidationError, field_validator

from ..errors import FeedParseError, FeedValidationError

JSON_FEED_VERSION = "https://jsonfeed.org/version/1.1"
RFC3339_PATTERN = re.compile(
    r"^\d{4}-\d{2}-\d{2}[Tt ]\d{2}:\d{2}:\d{2}(\.\d+)?([Zz]|[+-]\d{2}:\d{2})$"
)


class Item(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: str
    url: str
    title: Optional[str] = None
    external_url: Optional[str] = None
    date_published: Optional[AwareDatetime] = None

    @field_validator("id", "url")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("must not be empty")
        return value

    @field_validator("date_published", mode="before")
    @classmethod
    def _rfc3339(cls, value):
        # Stored dates must be RFC 3339 strings with a time and an offset.
        if value is None or isinstance(value, datetime.datetime):
            return value
        if not isinstance(value, str):
            raise ValueError("date_published must be an RFC 3339 string")
        if not RFC3339_PATTERN.match(value):
            raise ValueError(f"date_published is not RFC 3339: {value!r}")
        return value


class Feed(BaseModel):
    model_config = ConfigDict(extra="allow")

    version: str = JSON_FEED_VERSION
    title: str
    home_page_url: Optional[str] = None
    feed_url: Optional[str] = None
    description: Optional[str] = None
    items: List[Item] = Field(default_factory=list)

    @field_validator("version")
    @classmethod
    def _known_version(cls, value: str) -> str:
        if not value.startswith("https://jsonfeed.org/version/"):
            raise ValueError(f"unsupported JSON Feed version: {value}")
        return value

    def to_json(self) -> bytes:
        """Serialize the feed the way it is stored on disk (tab-indented)."""
        data = self.model_dump(mode="json", exclude_none=True)
        return json.dumps(data, indent="\t", ensure_ascii=False).encode("utf-8")


def new_feed(title: str) -> Feed:
    """Return an empty feed with the given title."""
    return Feed(title=title, items=[])


def parse_feed(raw: bytes | str) -> Feed:
    """Parse stored bytes into a ``Feed``; raise ``FeedParseError`` otherwise."""
    try:
        return Feed.model_validate_json(raw)
    except ValidationError as exc:
        raise FeedParseError(str(exc)) from exc


def validate_feed(feed: Feed) -> Feed:
    """Re-validate a feed built or mutated in memory.

    ``Feed.items.append`` bypasses pydantic, so the whole document is
    round-tripped through validation before it is written.
    """
    try:
        return Feed.model_validate(feed.model_dump())
    except ValidationError as exc:
        raise FeedValidationError(str(exc)) from exc
