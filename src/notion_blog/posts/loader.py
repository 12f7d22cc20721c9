# ABOUTME: Produces the best available post list for rendering.
# ABOUTME: Separates "could not load" from "nothing to show" with a tagged result.

import logging
from dataclasses import dataclass, field
from typing import Awaitable, Callable

import requests

from ..models import PostMeta
from .store import FETCH_TIMEOUT, PostMetaStore, parse_post_list

logger = logging.getLogger(__name__)

POSTS_API_PATH = "/api/posts"
LOAD_ERROR_MESSAGE = "Something went wrong while loading posts."


@dataclass(frozen=True)
class PostsLoaded:
    """The post list was obtained. It may legitimately be empty."""
    posts: list[PostMeta] = field(default_factory=list)
    ok = True


@dataclass(frozen=True)
class PostsUnavailable:
    """The post list could not be obtained; show ``message`` to the reader."""
    error: str
    message: str = LOAD_ERROR_MESSAGE
    ok = False


PostListResult = PostsLoaded | PostsUnavailable


def fetch_posts_from_api(
    site_url: str,
    session: requests.Session | None = None,
    timeout: float = FETCH_TIMEOUT,
) -> list[PostMeta]:
    """Fetch the live post list from the site's /api/posts endpoint.

    Raises:
        requests.RequestException: On network errors or non-2xx status.
        ValueError: If the body is not a JSON array of posts.
    """
    url = site_url.rstrip("/") + POSTS_API_PATH
    http = session or requests
    response = http.get(url, timeout=timeout)
    response.raise_for_status()
    return parse_post_list(response.json())


def load_post_list(source: Callable[[], list[PostMeta]]) -> PostListResult:
    """Call the live source once and wrap the outcome.

    Args:
        source: Zero-argument callable returning the post list.

    Returns:
        PostsLoaded with the posts, or PostsUnavailable if the source raised.
    """
    try:
        posts = source()
    except Exception as e:
        logger.error(f"Failed to load posts: {e}")
        return PostsUnavailable(error=str(e))

    return PostsLoaded(posts=posts)


async def get_post_list_with_static_fallback(
    store: PostMetaStore,
    live_source: Callable[[], Awaitable[list[PostMeta]]],
    environment: str = "production",
) -> list[PostMeta]:
    """Return the static post list, asking Notion only during development.

    Args:
        store: Store holding the generated postMeta.json.
        live_source: Coroutine factory querying Notion for posts.
        environment: "development" allows the live fallback.

    Returns:
        The static posts if any exist, the live posts in development, or an
        empty list.
    """
    static_posts = store.get_static_post_list()
    if static_posts:
        return static_posts

    if environment == "development":
        logger.info("No static post data found, fetching from Notion API...")
        try:
            return await live_source()
        except Exception as e:
            logger.warning(f"Failed to fetch posts from Notion API: {e}")
            return []

    logger.error("No static post data found in production, the build step may have failed")
    return []
