# ABOUTME: Routes for post metadata and page blocks.
# ABOUTME: Failures are answered with a JSON error body and a status code.

import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from ..config import Config, ConfigError
from ..notion import NotionClient, fetch_page_blocks, get_post_list
from ..posts import (
    MetadataStoreError,
    PostMetaStore,
    find_post_by_slug,
    get_post_list_with_static_fallback,
)
from .dependencies import get_config, get_notion_client, get_store

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api",
    tags=["posts"],
)


def error_response(message: str, status_code: int) -> JSONResponse:
    return JSONResponse(content={"error": message}, status_code=status_code)


@router.get("/posts")
def get_posts(store: PostMetaStore = Depends(get_store)):
    """Return postMeta.json as generated by the build step."""
    try:
        posts = store.read_raw()
    except MetadataStoreError as e:
        logger.error(f"Failed to read post metadata: {e}")
        return error_response("Failed to load posts", 500)

    return JSONResponse(content=posts)


@router.get("/posts/{post_ref}")
async def get_post(
    post_ref: str,
    config: Config = Depends(get_config),
    store: PostMetaStore = Depends(get_store),
    client: NotionClient | None = Depends(get_notion_client),
):
    """Look a post up by id or by its '{id}-{title}' slug.

    Reads postMeta.json; in development an empty file falls back to Notion.
    """

    async def live_posts():
        if client is None:
            raise ConfigError("Notion client not configured")
        return await get_post_list(client, config.notion.get_database_id())

    posts = await get_post_list_with_static_fallback(store, live_posts, config.environment)

    post = next((p for p in posts if p.id == post_ref), None) or find_post_by_slug(posts, post_ref)
    if post is None:
        return error_response("Post not found", 404)
    return post.to_dict()


@router.get("/pages/{page_id}/blocks")
async def get_page_blocks(
    page_id: str,
    config: Config = Depends(get_config),
    client: NotionClient | None = Depends(get_notion_client),
):
    if client is None:
        return error_response("Notion client not configured", 503)

    page_blocks = await fetch_page_blocks(client, page_id, timeout=config.fetch_timeout_seconds)
    if page_blocks is None:
        return error_response("Failed to load page", 404)
    return page_blocks.to_dict()
