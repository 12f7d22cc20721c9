# ABOUTME: Wrapper around the official Notion Python SDK (async flavour).
# ABOUTME: Provides an explicitly constructed, rate-limited client for pages, blocks and databases.

import logging

from notion_client import AsyncClient
from notion_client.helpers import async_collect_paginated_api

from ..concurrency import RateLimiter
from ..config import Config

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_MS = 60_000


class NotionClient:
    """Wrapper around the Notion SDK client.

    Every API call first takes a slot from the rate limiter. The underlying
    HTTP client is created with ``timeout_ms`` so no single request can run
    longer than that.
    """

    def __init__(
        self,
        token: str,
        rate_limiter: RateLimiter | None = None,
        timeout_ms: int = DEFAULT_TIMEOUT_MS,
    ):
        self._client = AsyncClient(auth=token, timeout_ms=timeout_ms)
        self._rate_limiter = rate_limiter or RateLimiter()

    @classmethod
    def from_config(cls, config: Config) -> "NotionClient":
        """Create a client using the token and limits from configuration.

        Raises:
            ConfigError: If the token environment variable is not set.
        """
        return cls(
            config.notion.get_token(),
            rate_limiter=RateLimiter(calls_per_second=config.notion.calls_per_second),
            timeout_ms=int(config.fetch_timeout_seconds * 1000),
        )

    async def get_page(self, page_id: str) -> dict:
        """Retrieve a page by ID."""
        await self._rate_limiter.acquire()
        return await self._client.pages.retrieve(page_id=page_id)

    async def get_blocks(self, block_id: str) -> list[dict]:
        """Retrieve all child blocks of a block/page."""
        await self._rate_limiter.acquire()
        return await async_collect_paginated_api(
            self._client.blocks.children.list,
            block_id=block_id,
        )

    async def query_database(self, database_id: str, **kwargs) -> list[dict]:
        """Query all rows from a database, passing filters and sorts through."""
        await self._rate_limiter.acquire()
        return await async_collect_paginated_api(
            self._client.databases.query,
            database_id=database_id,
            **kwargs,
        )

    async def aclose(self) -> None:
        """Close the underlying HTTP connection pool."""
        await self._client.aclose()

    async def __aenter__(self) -> "NotionClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()
