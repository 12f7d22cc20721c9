import logging

import httpx
from notion_client.errors import RequestTimeoutError
import pytest

from conftest import FakeNotionClient
from notion_blog.notion.pages import PageBlocks, fetch_blocks_recursive, fetch_page_blocks

PAGE = {"object": "page", "id": "page-1", "properties": {}}

BLOCKS = {
    "page-1": [
        {"id": "b1", "type": "paragraph", "has_children": False},
        {"id": "b2", "type": "toggle", "has_children": True},
        {"id": "b3", "type": "child_page", "has_children": True},
    ],
    "b2": [
        {"id": "b2-1", "type": "bulleted_list_item", "has_children": True},
    ],
    "b2-1": [
        {"id": "b2-1-1", "type": "paragraph", "has_children": False},
    ],
}


async def test_fetch_blocks_recursive_nests_children() -> None:
    client = FakeNotionClient(blocks=BLOCKS)

    blocks = await fetch_blocks_recursive(client, "page-1")

    assert [b["id"] for b in blocks] == ["b1", "b2", "b3"]
    assert "children" not in blocks[0]
    assert blocks[1]["children"][0]["id"] == "b2-1"
    assert blocks[1]["children"][0]["children"][0]["id"] == "b2-1-1"
    # Child pages are separate posts, not nested content
    assert "children" not in blocks[2]
    assert ("get_blocks", "b3") not in client.calls


async def test_fetch_page_blocks_success(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.INFO, logger="notion_blog")
    client = FakeNotionClient(pages={"page-1": PAGE}, blocks=BLOCKS)

    result = await fetch_page_blocks(client, "page-1")

    assert isinstance(result, PageBlocks)
    assert result.page == PAGE
    assert [b["id"] for b in result.blocks] == ["b1", "b2", "b3"]
    assert client.calls[0] == ("get_page", "page-1")
    assert "Fetching page blocks for page-1" in caplog.text
    assert "Fetched page page-1" in caplog.text


async def test_fetch_page_blocks_empty_page() -> None:
    client = FakeNotionClient(pages={"empty": PAGE})

    result = await fetch_page_blocks(client, "empty")

    assert result is not None
    assert result.blocks == []
    assert result.to_dict() == {"page": PAGE, "blocks": []}


async def test_fetch_page_blocks_makes_single_attempt_on_error(
    caplog: pytest.LogCaptureFixture,
) -> None:
    client = FakeNotionClient(error=RuntimeError("Notion API Error"))

    result = await fetch_page_blocks(client, "error-page")

    assert result is None
    assert client.calls == [("get_page", "error-page")]
    assert "Error fetching page blocks for error-page: Notion API Error" in caplog.text


async def test_fetch_page_blocks_network_error_returns_none(caplog: pytest.LogCaptureFixture) -> None:
    client = FakeNotionClient(error=httpx.ConnectError("Connection refused"))

    assert await fetch_page_blocks(client, "offline") is None
    assert "Connection refused" in caplog.text


async def test_fetch_page_blocks_unknown_page_returns_none() -> None:
    # Malformed provider data (KeyError) is handled like any other failure
    client = FakeNotionClient()

    assert await fetch_page_blocks(client, "") is None


async def test_fetch_page_blocks_times_out_and_cancels(caplog: pytest.LogCaptureFixture) -> None:
    client = FakeNotionClient(pages={"slow": PAGE}, delay=5.0)

    result = await fetch_page_blocks(client, "slow", timeout=0.05)

    assert result is None
    assert client.cancelled is True
    assert "Timed out fetching page blocks for slow" in caplog.text


async def test_fetch_page_blocks_deadline_covers_block_fetches() -> None:
    class SlowBlocksClient(FakeNotionClient):
        async def get_page(self, page_id: str) -> dict:
            self.calls.append(("get_page", page_id))
            return PAGE

    client = SlowBlocksClient(blocks=BLOCKS, delay=5.0)

    assert await fetch_page_blocks(client, "page-1", timeout=0.05) is None
    assert client.cancelled is True


async def test_fetch_page_blocks_request_timeout_logged_as_timeout(caplog: pytest.LogCaptureFixture) -> None:
    client = FakeNotionClient(pages={"page-1": PAGE}, error=RequestTimeoutError())

    assert await fetch_page_blocks(client, "page-1", timeout=0.5) is None
    assert "Timed out fetching page blocks for page-1" in caplog.text
    assert "Error fetching page blocks" not in caplog.text
