# ABOUTME: FastAPI application factory for the posts API.
# ABOUTME: Owns the Notion client lifecycle and serves the generated data directory.

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles

from ..config import Config, ConfigError
from ..notion import NotionClient
from ..posts.store import POST_META_RELATIVE_PATH
from .router import router

logger = logging.getLogger(__name__)


def create_app(config: Config, notion_client: NotionClient | None = None) -> FastAPI:
    """Build the API application.

    Args:
        config: Application configuration.
        notion_client: Client to use for page fetches. When omitted, one is
            created on startup if a Notion token is available, and closed on
            shutdown.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        owned_client = None

        if notion_client is None:
            try:
                owned_client = NotionClient.from_config(config)
            except ConfigError as e:
                logger.warning(f"Page blocks endpoint disabled: {e}")
            app.state.notion_client = owned_client

        if config.is_development:
            logger.info("Development mode: post lookups fall back to Notion while postMeta.json is empty")

        yield

        if owned_client is not None:
            await owned_client.aclose()

    app = FastAPI(title="notion-blog", lifespan=lifespan)
    app.state.config = config
    app.state.notion_client = notion_client
    app.include_router(router)

    data_dir = config.public_dir / POST_META_RELATIVE_PATH.parent
    app.mount("/data", StaticFiles(directory=data_dir, check_dir=False), name="data")

    return app
