# ABOUTME: Notion API integration package.
# ABOUTME: Exports client, page block fetching and post database queries.

from .client import NotionClient
from .pages import PageBlocks, fetch_page_blocks
from .databases import get_post_list, get_post_meta
from .properties import page_to_post_meta

__all__ = [
    "NotionClient",
    "PageBlocks",
    "fetch_page_blocks",
    "get_post_list",
    "get_post_meta",
    "page_to_post_meta",
]
