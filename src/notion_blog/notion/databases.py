# ABOUTME: Post database queries for the blog.
# ABOUTME: Lists published posts and looks up single post metadata.

import logging

from ..models import PostMeta
from .client import NotionClient
from .properties import page_to_post_meta

logger = logging.getLogger(__name__)

PUBLISHED_FILTER = {
    "property": "isPublished",
    "checkbox": {"equals": True},
}

NEWEST_FIRST = [
    {"property": "createdAt", "direction": "descending"},
]


async def get_post_list(client: NotionClient, database_id: str) -> list[PostMeta]:
    """Fetch metadata for every published post, newest first.

    Args:
        client: The Notion API client.
        database_id: The ID of the posts database.

    Returns:
        List of PostMeta. Rows without properties are skipped.

    Raises:
        Any error from the Notion API; the caller decides how to fail.
    """
    logger.debug(f"Querying posts database {database_id}")

    rows = await client.query_database(
        database_id,
        filter=PUBLISHED_FILTER,
        sorts=NEWEST_FIRST,
    )

    posts = [page_to_post_meta(row) for row in rows if row.get("properties")]

    logger.debug(f"Database {database_id} has {len(posts)} published posts")
    return posts


async def get_post_meta(client: NotionClient, page_id: str) -> PostMeta | None:
    """Fetch metadata for a single post.

    Returns:
        PostMeta, or None if the page has no properties or cannot be fetched.
    """
    try:
        page = await client.get_page(page_id)
        if not page.get("properties"):
            return None
        return page_to_post_meta(page)
    except Exception as e:
        logger.error(f"Error fetching post meta for {page_id}: {e}")
        return None
