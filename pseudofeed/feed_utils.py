"""Shared utilities for pseudofeed.

Both the FastAPI HTTP server (`pseudofeed/app_server.py`) and the FastMCP tool
server (`pseudofeed/server.py`) store shared links in the same feed file.  This
module builds the service context they share and wraps the "share a link"
workflow so the two servers reuse the same logic.
"""

from __future__ import annotations

import datetime
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from .main.config import Settings
from .main.models import Item
from .main.tools.renderer import FeedRenderer, display_order
from .main.tools.share_parser import new_item
from .store import FeedStore

logger = logging.getLogger(__name__)


@dataclass
class FeedContext:
    """Process-wide state, resolved once at startup and handed to handlers."""

    store: FeedStore
    renderer: FeedRenderer


def build_context(settings: Settings) -> FeedContext:
    """Resolve the feed file and compile templates.

    Raises on any failure; callers are expected to let that abort startup.
    """
    store = FeedStore(settings.feed_path, settings.feed_title)
    store.initialize_if_absent()
    logger.info("Using feed file: %s", store.path)
    return FeedContext(store=store, renderer=FeedRenderer())


def share_link(context: FeedContext, data: str, now: Optional[datetime.datetime] = None) -> Item:
    """Build an item from a share payload and append it to the feed."""
    item = new_item(data, now)
    context.store.append(item)
    return item


def list_items(context: FeedContext) -> List[Dict[str, Any]]:
    """Return stored items, most recent first, as JSON-ready dicts."""
    feed = context.store.load()
    return [item.model_dump(mode="json", exclude_none=True) for item in display_order(feed)]
