"""HTML and bookmarklet rendering.

Templates ship inside the package under ``pseudofeed/templates`` and are
compiled once, when ``FeedRenderer`` is constructed, so a broken template
stops the service at startup rather than on the first request.
"""

from __future__ import annotations

import datetime
import logging
from typing import Dict, List, Optional
from urllib.parse import urlparse

from jinja2 import Environment, PackageLoader, StrictUndefined, TemplateError, select_autoescape

from ...errors import FeedRenderError
from ..models import Feed, Item

logger = logging.getLogger(__name__)

DISPLAY_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
SAFE_URL_SCHEMES = ("http", "https")


def format_date(value: Optional[datetime.datetime]) -> str:
    """Show a stored timestamp as ``YYYY-MM-DD HH:MM:SS`` in its own offset.

    Stored dates are checked against RFC 3339 when the feed is loaded.
    """
    if value is None:
        return ""
    return value.strftime(DISPLAY_DATE_FORMAT)


def safe_href(url: str) -> str:
    """Return *url* for use in an ``href``, or ``#`` unless it is http(s)."""
    try:
        scheme = urlparse(url).scheme.lower()
    except ValueError:
        return "#"
    if scheme not in SAFE_URL_SCHEMES:
        return "#"
    return url


def display_order(feed: Feed) -> List[Item]:
    """Most recent first; the stored order is left untouched."""
    return list(reversed(feed.items))


class FeedRenderer:
    def __init__(self, env: Optional[Environment] = None) -> None:
        if env is None:
            env = Environment(
                loader=PackageLoader("pseudofeed", "templates"),
                autoescape=select_autoescape(["html"]),
                undefined=StrictUndefined,
                trim_blocks=True,
                lstrip_blocks=True,
            )
        self.env = env
        self.page_template = env.get_template("page.html")
        self.bookmarklet_template = env.get_template("bookmarklet.js")

    def render_page(self, items: List[Item], title: str = "") -> str:
        """Render *items*, already in display order, as an HTML page."""
        rows: List[Dict[str, str]] = []
        for item in items:
            rows.append(
                {
                    "title": item.title or item.url,
                    "href": safe_href(item.url),
                    "date_published": format_date(item.date_published),
                }
            )
        try:
            return self.page_template.render(title=title, items=rows)
        except TemplateError as exc:
            logger.error("Failed rendering page: %s", exc)
            raise FeedRenderError(str(exc)) from exc

    def render_bookmarklet(self, base_url: str) -> str:
        """Render the bookmarklet that submits the current page to *base_url*."""
        try:
            return self.bookmarklet_template.render(base_url=base_url)
        except TemplateError as exc:
            logger.error("Failed rendering bookmarklet: %s", exc)
            raise FeedRenderError(str(exc)) from exc
