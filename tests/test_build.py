import json
from unittest.mock import Mock

import requests

from notion_blog.models import PostMeta
from notion_blog.posts.build import (
    build_post_meta,
    encode_slug,
    get_image_extension,
)


def image_response(content: bytes = b"\x89PNG data") -> Mock:
    response = Mock()
    response.iter_content.return_value = [content]
    return response


def test_encode_slug_matches_uri_component_encoding() -> None:
    assert encode_slug("hello-world") == "hello-world"
    assert encode_slug("a b/c") == "a%20b%2Fc"
    assert encode_slug("노션") == "%EB%85%B8%EC%85%98"
    assert encode_slug("it's(ok)!") == "it's(ok)!"


def test_get_image_extension() -> None:
    assert get_image_extension("https://x.example/a/cover.PNG?sig=1") == ".png"
    assert get_image_extension("https://x.example/a/cover.webp") == ".webp"
    assert get_image_extension("https://x.example/a/cover.bmp") == ".jpg"
    assert get_image_extension("https://x.example/a/cover") == ".jpg"


def test_build_writes_post_meta_without_covers(public_dir) -> None:
    posts = [
        PostMeta(id="a", title="첫 번째 포스트", slug="first post"),
        PostMeta(id="b", title="Second", cover="https://example.com/b.jpg"),
    ]

    result = build_post_meta(posts, public_dir, download_covers=False)

    written = json.loads(result.path.read_text(encoding="utf-8"))
    assert result.path == public_dir / "data" / "postMeta.json"
    assert result.total_posts == 2
    assert result.images_downloaded == 0
    assert result.file_size == result.path.stat().st_size
    assert [p["id"] for p in written] == ["a", "b"]
    assert written[0]["title"] == "첫 번째 포스트"
    assert written[0]["slug"] == "first%20post"
    assert written[0]["encodedSlug"] == "first%20post"
    assert written[1]["cover"] == "https://example.com/b.jpg"
    # Non-ASCII is written as-is
    assert "첫 번째 포스트" in result.path.read_text(encoding="utf-8")


def test_build_downloads_covers_and_rewrites_paths(public_dir) -> None:
    session = Mock()
    session.get.return_value = image_response()
    posts = [
        PostMeta(id="a", slug="first-post", cover="https://files.example/a.png?X-Amz=1"),
        PostMeta(id="b", slug="", cover="https://files.example/b"),
        PostMeta(id="c", slug="local", cover="/images/already-local.jpg"),
    ]

    result = build_post_meta(posts, public_dir, session=session)

    written = json.loads(result.path.read_text(encoding="utf-8"))
    assert [p["cover"] for p in written] == [
        "/images/blog/covers/first-post.png",
        "/images/blog/covers/b.jpg",
        "/images/already-local.jpg",
    ]
    covers_dir = public_dir / "images" / "blog" / "covers"
    assert (covers_dir / "first-post.png").read_bytes() == b"\x89PNG data"
    assert (covers_dir / "b.jpg").exists()
    assert result.images_downloaded == 2
    assert session.get.call_count == 2


def test_build_keeps_remote_cover_when_download_fails(public_dir, caplog) -> None:
    failing = Mock()
    failing.raise_for_status.side_effect = requests.HTTPError("403 Forbidden")
    session = Mock()
    session.get.return_value = failing
    posts = [PostMeta(id="a", slug="a", cover="https://files.example/a.jpg")]

    result = build_post_meta(posts, public_dir, session=session)

    written = json.loads(result.path.read_text(encoding="utf-8"))
    assert written[0]["cover"] == "https://files.example/a.jpg"
    assert result.images_downloaded == 0
    assert "Failed to download cover a.jpg" in caplog.text


def test_build_with_no_posts_writes_empty_array(public_dir) -> None:
    result = build_post_meta([], public_dir)

    assert json.loads(result.path.read_text(encoding="utf-8")) == []
    assert result.total_posts == 0
