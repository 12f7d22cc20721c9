# ABOUTME: Page and block fetching for rendering a single post.
# ABOUTME: Recursively retrieves all blocks within a page under a hard deadline.

import asyncio
import logging
import time
from dataclasses import dataclass

from notion_client.errors import RequestTimeoutError

from ..config import DEFAULT_FETCH_TIMEOUT
from .client import NotionClient

logger = logging.getLogger(__name__)

# Block types that can have children
BLOCKS_WITH_CHILDREN = {
    "paragraph",
    "bulleted_list_item",
    "numbered_list_item",
    "toggle",
    "to_do",
    "quote",
    "callout",
    "synced_block",
    "template",
    "column",
    "column_list",
    "table",
    "table_row",
}


@dataclass
class PageBlocks:
    """Complete page data including properties and all blocks."""
    page: dict
    blocks: list[dict]

    def to_dict(self) -> dict:
        return {"page": self.page, "blocks": self.blocks}


async def fetch_blocks_recursive(client: NotionClient, block_id: str) -> list[dict]:
    """Fetch all blocks under a parent, recursively fetching children.

    Args:
        client: The Notion API client.
        block_id: The ID of the parent block or page.

    Returns:
        List of blocks with their children populated in-place.
    """
    blocks = await client.get_blocks(block_id)

    for block in blocks:
        block_type = block.get("type")
        has_children = block.get("has_children", False)

        if has_children and block_type in BLOCKS_WITH_CHILDREN:
            block["children"] = await fetch_blocks_recursive(client, block["id"])

    return blocks


async def fetch_page_blocks(
    client: NotionClient,
    page_id: str,
    timeout: float = DEFAULT_FETCH_TIMEOUT,
) -> PageBlocks | None:
    """Fetch a page with all its blocks, or None if that is not possible.

    Makes a single attempt. The whole fetch runs under one deadline; when it
    expires the pending request is cancelled, not left running.

    Args:
        client: The Notion API client.
        page_id: The ID of the page to fetch.
        timeout: Deadline for the whole fetch, in seconds.

    Returns:
        PageBlocks on success, None on timeout or any provider error.
    """
    logger.info(f"Fetching page blocks for {page_id}")
    start = time.monotonic()

    try:
        async with asyncio.timeout(timeout):
            page = await client.get_page(page_id)
            blocks = await fetch_blocks_recursive(client, page_id)
    except (TimeoutError, RequestTimeoutError):
        logger.error(f"Timed out fetching page blocks for {page_id} after {timeout:.1f}s")
        return None
    except Exception as e:
        logger.error(f"Error fetching page blocks for {page_id}: {e}")
        return None

    elapsed = time.monotonic() - start
    logger.info(f"Fetched page {page_id} ({len(blocks)} top-level blocks) in {elapsed:.2f}s")
    return PageBlocks(page=page, blocks=blocks)
