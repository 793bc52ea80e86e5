"""FastMCP server exposing the pseudofeed workflow as tools.

Available tools:
* ``share_link(text: str) -> str`` – store a link (or a ``"<title> <url>"`` share
  payload) in the feed.
* ``list_items() -> str`` – return the stored items, most recent first, as JSON.
"""

import json
import logging

from fastmcp import FastMCP

from pseudofeed.feed_utils import FeedContext, build_context, list_items as list_feed_items, share_link as store_link
from pseudofeed.main.config import Settings

logger = logging.getLogger(__name__)


def create_mcp(context: FeedContext) -> FastMCP:
    """Build a FastMCP server whose tools operate on *context*."""
    mcp = FastMCP("pseudofeed")

    @mcp.tool
    async def share_link(text: str) -> str:
        """Add a link to the feed.

        *text* may be a bare URL or a mobile share payload such as
        ``"Enver Hoxha - Wikipedia https://en.m.wikipedia.org/wiki/Enver_Hoxha"``.
        """
        if not text.strip():
            return "Nothing to store: text is empty."
        item = store_link(context, text)
        return f"Stored: {item.url}"

    @mcp.tool
    async def list_items() -> str:
        """Return all stored items as a JSON string, most recent first."""
        items = list_feed_items(context)
        if not items:
            return "No items stored."
        return json.dumps(items)

    return mcp


def main() -> None:
    """Entry point – start the FastMCP server on stdio transport."""
    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )
    mcp = create_mcp(build_context(Settings.from_env()))
    mcp.run(transport="stdio")


if __name__ == "__main__":
    main()
