# ABOUTME: Request-scoped dependencies for the API routes.
# ABOUTME: Reads configuration, the store and the Notion client from app state.

from fastapi import Request

from ..config import Config
from ..notion import NotionClient
from ..posts import PostMetaStore


def get_config(request: Request) -> Config:
    return request.app.state.config


def get_store(request: Request) -> PostMetaStore:
    return PostMetaStore(request.app.state.config.public_dir)


def get_notion_client(request: Request) -> NotionClient | None:
    return request.app.state.notion_client
