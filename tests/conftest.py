import asyncio
import json
from pathlib import Path
from typing import Any

import pytest

from notion_blog.config import Config


class FakeNotionClient:
    """Stands in for NotionClient, serving canned pages and blocks."""

    def __init__(
        self,
        pages: dict[str, dict] | None = None,
        blocks: dict[str, list[dict]] | None = None,
        rows: list[dict] | None = None,
        delay: float = 0.0,
        error: Exception | None = None,
    ) -> None:
        self.pages = pages or {}
        self.blocks = blocks or {}
        self.rows = rows or []
        self.delay = delay
        self.error = error
        self.calls: list[tuple[str, Any]] = []
        self.cancelled = False

    async def _respond(self) -> None:
        try:
            await asyncio.sleep(self.delay)
        except asyncio.CancelledError:
            self.cancelled = True
            raise
        if self.error is not None:
            raise self.error

    async def get_page(self, page_id: str) -> dict:
        self.calls.append(("get_page", page_id))
        await self._respond()
        return self.pages[page_id]

    async def get_blocks(self, block_id: str) -> list[dict]:
        self.calls.append(("get_blocks", block_id))
        await self._respond()
        return [dict(block) for block in self.blocks.get(block_id, [])]

    async def query_database(self, database_id: str, **kwargs: Any) -> list[dict]:
        self.calls.append(("query_database", {"database_id": database_id, **kwargs}))
        await self._respond()
        return self.rows

    async def aclose(self) -> None:
        pass


SAMPLE_POSTS = [
    {
        "id": "a",
        "title": "First post",
        "description": "Hello",
        "createdAt": "2025-01-02T00:00:00.000Z",
        "lastEditedAt": "2025-01-03T00:00:00.000Z",
        "category": {"text": "Tech", "color": "blue"},
        "tags": ["python", "notion"],
        "slug": "first-post",
        "cover": "",
    },
    {
        "id": "b",
        "title": "Second post",
        "description": "",
        "createdAt": "2025-02-01T00:00:00.000Z",
        "lastEditedAt": "2025-02-01T00:00:00.000Z",
        "category": {"text": "Life", "color": "green"},
        "tags": ["notion"],
        "slug": "second-post",
        "cover": "/images/blog/covers/second-post.jpg",
    },
]


@pytest.fixture
def public_dir(tmp_path: Path) -> Path:
    return tmp_path / "public"


@pytest.fixture
def write_post_meta(public_dir: Path):
    """Write raw text or JSON-serialisable data to public/data/postMeta.json."""

    def _write(content: Any) -> Path:
        path = public_dir / "data" / "postMeta.json"
        path.parent.mkdir(parents=True, exist_ok=True)
        text = content if isinstance(content, str) else json.dumps(content)
        path.write_text(text, encoding="utf-8")
        return path

    return _write


@pytest.fixture
def config(public_dir: Path) -> Config:
    return Config(public_dir=public_dir, site_url="https://blog.example.com")
