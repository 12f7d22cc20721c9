# ABOUTME: Post metadata package.
# ABOUTME: Exports the static store, the fallback loader, the build step and list helpers.

from .store import MetadataStoreError, PostMetaStore, fetch_post_meta
from .loader import (
    PostListResult,
    PostsLoaded,
    PostsUnavailable,
    fetch_posts_from_api,
    get_post_list_with_static_fallback,
    load_post_list,
)
from .build import BuildResult, build_post_meta
from .utils import (
    ALL_CATEGORY,
    extract_categories,
    extract_tags,
    filter_posts_by_category,
    find_post_by_slug,
    format_post_date,
    generate_post_slug,
    get_adjacent_posts,
    get_related_posts,
    paginate,
    search_posts,
    sort_posts,
)

__all__ = [
    "MetadataStoreError",
    "PostMetaStore",
    "fetch_post_meta",
    "PostListResult",
    "PostsLoaded",
    "PostsUnavailable",
    "fetch_posts_from_api",
    "get_post_list_with_static_fallback",
    "load_post_list",
    "BuildResult",
    "build_post_meta",
    "ALL_CATEGORY",
    "extract_categories",
    "extract_tags",
    "filter_posts_by_category",
    "find_post_by_slug",
    "format_post_date",
    "generate_post_slug",
    "get_adjacent_posts",
    "get_related_posts",
    "paginate",
    "search_posts",
    "sort_posts",
]
