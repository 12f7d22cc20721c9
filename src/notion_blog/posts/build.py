# ABOUTME: Build-time generation of postMeta.json and local cover images.
# ABOUTME: Downloads covers concurrently and rewrites posts to point at the local copies.

import json
import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, replace
from pathlib import Path
from urllib.parse import quote, urlparse

import requests

from ..models import PostMeta
from .store import POST_META_RELATIVE_PATH

logger = logging.getLogger(__name__)

COVERS_RELATIVE_PATH = Path("images") / "blog" / "covers"
COVERS_URL_PREFIX = "/images/blog/covers/"

SUPPORTED_IMAGE_EXTENSIONS = {".jpg", ".jpeg", ".png", ".webp", ".gif"}
DEFAULT_IMAGE_EXTENSION = ".jpg"

# Number of concurrent cover downloads
MAX_DOWNLOAD_WORKERS = 5

# Timeout for cover downloads (seconds)
DOWNLOAD_TIMEOUT = 30

# Characters left untouched by JavaScript's encodeURIComponent
_URI_COMPONENT_SAFE = "-_.!~*'()"


@dataclass
class BuildResult:
    """Summary of one postMeta.json build."""
    path: Path
    total_posts: int
    images_downloaded: int
    file_size: int


def encode_slug(slug: str) -> str:
    """Percent-encode a slug so it is safe in URLs and file names."""
    return quote(slug, safe=_URI_COMPONENT_SAFE)


def get_image_extension(url: str) -> str:
    """Extension of the image in the URL path, or .jpg if unsupported."""
    try:
        suffix = Path(urlparse(url).path).suffix.lower()
    except ValueError:
        return DEFAULT_IMAGE_EXTENSION
    return suffix if suffix in SUPPORTED_IMAGE_EXTENSIONS else DEFAULT_IMAGE_EXTENSION


def download_cover(
    url: str,
    destination: Path,
    session: requests.Session | None = None,
) -> bool:
    """Download a cover image to destination.

    Returns:
        True if the file was written, False otherwise.
    """
    http = session or requests
    try:
        response = http.get(url, timeout=DOWNLOAD_TIMEOUT, stream=True)
        response.raise_for_status()

        destination.parent.mkdir(parents=True, exist_ok=True)
        with open(destination, "wb") as f:
            for chunk in response.iter_content(chunk_size=8192):
                f.write(chunk)
        return True

    except (requests.RequestException, OSError) as e:
        logger.error(f"Failed to download cover {destination.name}: {e}")
        return False


def _localize_cover(
    post: PostMeta,
    covers_dir: Path,
    session: requests.Session | None,
) -> PostMeta:
    """Download the post's cover and point the post at the local file.

    A failed download keeps the original URL.
    """
    file_name = f"{post.slug or post.id}{get_image_extension(post.cover)}"
    logger.debug(f"Downloading cover {file_name}")

    if download_cover(post.cover, covers_dir / file_name, session):
        return replace(post, cover=COVERS_URL_PREFIX + file_name)
    return post


def write_post_meta(posts: list[PostMeta], public_dir: Path) -> Path:
    """Write posts to public_dir/data/postMeta.json.

    Returns:
        Path to the saved file.
    """
    file_path = public_dir / POST_META_RELATIVE_PATH
    file_path.parent.mkdir(parents=True, exist_ok=True)
    with open(file_path, "w", encoding="utf-8") as f:
        json.dump([post.to_dict() for post in posts], f, indent=2, ensure_ascii=False)
    return file_path


def build_post_meta(
    posts: list[PostMeta],
    public_dir: Path,
    download_covers: bool = True,
    session: requests.Session | None = None,
) -> BuildResult:
    """Prepare posts for static export and write postMeta.json.

    Slugs are percent-encoded, remote covers are downloaded under
    public_dir/images/blog/covers, and the result is written in the
    original post order.

    Args:
        posts: Posts as returned by the Notion database query.
        public_dir: Root of the static site.
        download_covers: Whether to fetch remote cover images.
        session: Optional requests session for downloads.

    Returns:
        BuildResult with the output path and statistics.
    """
    prepared = []
    for post in posts:
        slug = encode_slug(post.slug)
        prepared.append(replace(post, slug=slug, encoded_slug=slug))

    covers_dir = public_dir / COVERS_RELATIVE_PATH
    to_download = [
        i for i, post in enumerate(prepared)
        if download_covers and post.cover.startswith("http")
    ]

    if to_download:
        logger.info(f"Downloading {len(to_download)} cover images...")
        with ThreadPoolExecutor(max_workers=MAX_DOWNLOAD_WORKERS) as executor:
            futures = {
                executor.submit(_localize_cover, prepared[i], covers_dir, session): i
                for i in to_download
            }
            for future in as_completed(futures):
                prepared[futures[future]] = future.result()

    file_path = write_post_meta(prepared, public_dir)

    images_downloaded = sum(1 for post in prepared if post.cover.startswith(COVERS_URL_PREFIX))
    result = BuildResult(
        path=file_path,
        total_posts=len(prepared),
        images_downloaded=images_downloaded,
        file_size=file_path.stat().st_size,
    )

    logger.info(f"Post metadata saved to: {file_path}")
    logger.info(
        f"Build complete: {result.total_posts} posts, "
        f"{result.images_downloaded} images downloaded, "
        f"{result.file_size} bytes"
    )
    return result
