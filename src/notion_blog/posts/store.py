# ABOUTME: Reads the generated postMeta.json, from disk or over HTTP.
# ABOUTME: Absence of data is always an empty list; only read_raw() raises.

import json
import logging
from pathlib import Path

import requests

from ..models import PostMeta

logger = logging.getLogger(__name__)

POST_META_RELATIVE_PATH = Path("data") / "postMeta.json"
POST_META_URL_PATH = "/data/postMeta.json"

# Timeout for client-side metadata fetches (seconds)
FETCH_TIMEOUT = 10


class MetadataStoreError(Exception):
    """Raised when postMeta.json cannot be read or parsed."""
    pass


def parse_post_list(data) -> list[PostMeta]:
    """Turn a decoded JSON array into PostMeta records, keeping order.

    Raises:
        ValueError: If the payload is not an array or an entry is malformed.
    """
    if not isinstance(data, list):
        raise ValueError(f"Expected a JSON array of posts, got {type(data).__name__}")
    return [PostMeta.from_dict(entry) for entry in data]


class PostMetaStore:
    """Build-time access to the post metadata written under the public directory."""

    def __init__(self, public_dir: Path):
        """Initialize the store.

        Args:
            public_dir: Root of the static site (e.g., ./public).
        """
        self.public_dir = public_dir
        self.path = public_dir / POST_META_RELATIVE_PATH

    def read_raw(self) -> list:
        """Read and decode postMeta.json exactly as stored.

        Raises:
            MetadataStoreError: If the file is missing, unreadable, not valid
                JSON or not a JSON array.
        """
        try:
            with open(self.path, encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            raise MetadataStoreError(f"Failed to read {self.path}: {e}") from e

        if not isinstance(data, list):
            raise MetadataStoreError(f"{self.path} does not contain a JSON array")
        return data

    def get_static_post_list(self) -> list[PostMeta]:
        """Return all posts from postMeta.json in file order.

        Never raises: a missing or broken file yields an empty list.
        """
        if not self.path.exists():
            logger.warning(f"{self.path} not found, run the build command first")
            return []

        try:
            return parse_post_list(self.read_raw())
        except (MetadataStoreError, ValueError) as e:
            logger.error(f"Error reading static post list: {e}")
            return []

    def get_static_post_meta(self, post_id: str) -> PostMeta | None:
        """Find one post in the static list by id."""
        for post in self.get_static_post_list():
            if post.id == post_id:
                return post
        return None


def fetch_post_meta(
    site_url: str,
    session: requests.Session | None = None,
    timeout: float = FETCH_TIMEOUT,
) -> list[PostMeta]:
    """Fetch postMeta.json from a running site, as a browser would.

    Args:
        site_url: Base URL of the site (e.g., https://example.com).
        session: Optional requests session to reuse.
        timeout: Request timeout in seconds.

    Returns:
        List of PostMeta; empty on any HTTP, network or parse failure.
    """
    url = site_url.rstrip("/") + POST_META_URL_PATH
    http = session or requests

    try:
        response = http.get(url, timeout=timeout)
        response.raise_for_status()
        return parse_post_list(response.json())
    except requests.RequestException as e:
        logger.error(f"Error fetching post meta from {url}: {e}")
        return []
    except ValueError as e:
        logger.error(f"Invalid post meta received from {url}: {e}")
        return []
