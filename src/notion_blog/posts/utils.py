# ABOUTME: Helpers for listing, filtering and linking posts.
# ABOUTME: Pure functions over PostMeta lists; no I/O.

import re
from datetime import datetime
from typing import Literal

from ..models import PostMeta

ALL_CATEGORY = "All"


def extract_categories(posts: list[PostMeta]) -> list[str]:
    """Unique category names in first-seen order, led by ALL_CATEGORY."""
    categories = list(dict.fromkeys(post.category.text for post in posts))
    if ALL_CATEGORY in categories:
        return categories
    return [ALL_CATEGORY, *categories]


def extract_tags(posts: list[PostMeta]) -> list[str]:
    """Unique tags in first-seen order."""
    return list(dict.fromkeys(tag for post in posts for tag in post.tags))


def filter_posts_by_category(posts: list[PostMeta], category: str | None = None) -> list[PostMeta]:
    if not category or category == ALL_CATEGORY:
        return posts
    return [post for post in posts if post.category.text == category]


def search_posts(posts: list[PostMeta], query: str) -> list[PostMeta]:
    """Case-insensitive search over title, description, category and tags."""
    query = query.strip().lower()
    if not query:
        return posts

    def matches(post: PostMeta) -> bool:
        return (
            query in post.title.lower()
            or query in post.description.lower()
            or query in post.category.text.lower()
            or any(query in tag.lower() for tag in post.tags)
        )

    return [post for post in posts if matches(post)]


def sort_posts(posts: list[PostMeta], direction: Literal["asc", "desc"] = "desc") -> list[PostMeta]:
    """Sort by creation time. ISO-8601 strings sort chronologically."""
    return sorted(posts, key=lambda post: post.created_at, reverse=direction == "desc")


def paginate(posts: list[PostMeta], page: int, per_page: int = 10) -> list[PostMeta]:
    """Return the 1-based page of posts; out-of-range pages are empty."""
    if page < 1 or per_page < 1:
        return []
    start = (page - 1) * per_page
    return posts[start:start + per_page]


def _parse_iso(value: str) -> datetime | None:
    try:
        # fromisoformat only accepts the 'Z' suffix from Python 3.11 on
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None


def format_post_date(value: str) -> str:
    """Format an ISO timestamp as 'Jan 02, 2025'; unparsable input is returned as-is."""
    parsed = _parse_iso(value)
    if parsed is None:
        return value
    return parsed.strftime("%b %d, %Y")


def slugify_title(title: str) -> str:
    """Lowercase, keep word characters (Hangul included), join words with hyphens."""
    slug = title.lower().strip()
    slug = re.sub(r"[^\w\s가-힣-]", "", slug)
    slug = re.sub(r"\s+", "-", slug)
    slug = re.sub(r"-+", "-", slug)
    return slug.strip("-")


def generate_post_slug(post: PostMeta) -> str:
    """Slug in '{id}-{title}' form."""
    return f"{post.id}-{slugify_title(post.title)}"


def extract_post_id_from_slug(slug: str) -> str:
    """The id part of an '{id}-{title}' slug; a slug without hyphen is the id."""
    return slug.split("-", 1)[0]


def find_post_by_slug(posts: list[PostMeta], slug: str) -> PostMeta | None:
    post_id = extract_post_id_from_slug(slug)
    return next((post for post in posts if post.id == post_id), None)


def get_adjacent_posts(
    posts: list[PostMeta], post_id: str
) -> tuple[PostMeta | None, PostMeta | None]:
    """Return (previous, next) neighbours of a post in list order."""
    for index, post in enumerate(posts):
        if post.id == post_id:
            prev_post = posts[index - 1] if index > 0 else None
            next_post = posts[index + 1] if index < len(posts) - 1 else None
            return prev_post, next_post
    return None, None


def get_related_posts(posts: list[PostMeta], post: PostMeta) -> list[PostMeta]:
    """Other posts in the same category."""
    return [p for p in posts if p.id != post.id and p.category.text == post.category.text]
