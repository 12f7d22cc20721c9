# ABOUTME: CLI entry point for notion-blog.
# ABOUTME: Provides 'build', 'serve', 'posts' and 'schedule' commands.

import argparse
import asyncio
import logging
from logging.handlers import RotatingFileHandler
import sys
import time
from pathlib import Path

import uvicorn

from .api import create_app
from .config import Config, ConfigError, load_config
from .models import PostMeta
from .notion import NotionClient, get_post_list
from .posts import (
    BuildResult,
    PostListResult,
    build_post_meta,
    fetch_post_meta,
    fetch_posts_from_api,
    format_post_date,
    generate_post_slug,
    load_post_list,
)
from .scheduler import run_scheduler

DEFAULT_CONFIG_PATH = Path("config.yaml")


def setup_logging(log_path: Path | None = None, verbose: bool = False) -> None:
    """Configure logging for the application.

    Args:
        log_path: Optional path for log file. If provided, enables rotating file logging.
        verbose: Log at DEBUG instead of INFO.
    """
    log_format = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
    date_format = "%Y-%m-%d %H:%M:%S"

    # Configure root logger
    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG if verbose else logging.INFO)

    # Console handler (stdout)
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(logging.Formatter(log_format, date_format))
    root_logger.addHandler(console_handler)

    # File handler with rotation (if log_path provided)
    if log_path:
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            log_path,
            maxBytes=10 * 1024 * 1024,  # 10 MB
            backupCount=5,
            encoding="utf-8",
        )
        file_handler.setFormatter(logging.Formatter(log_format, date_format))
        root_logger.addHandler(file_handler)

    # Suppress noisy third-party loggers
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)


def resolve_config(config_path: Path | None) -> Config:
    """Load the config file, or defaults if the implicit one is absent.

    Raises:
        ConfigError: If an explicitly given file is missing or any file is invalid.
    """
    if config_path is None:
        if not DEFAULT_CONFIG_PATH.exists():
            return Config()
        config_path = DEFAULT_CONFIG_PATH
    return load_config(config_path)


async def fetch_posts(config: Config) -> list[PostMeta]:
    """Query the Notion posts database with a short-lived client."""
    database_id = config.notion.get_database_id()
    async with NotionClient.from_config(config) as client:
        return await get_post_list(client, database_id)


def run_build(config: Config, download_covers: bool = True) -> BuildResult:
    """Fetch posts from Notion and write postMeta.json.

    Raises:
        ConfigError: If Notion credentials are not configured.
        Any error from the Notion API or the filesystem.
    """
    logger = logging.getLogger(__name__)
    start = time.monotonic()

    logger.info("Fetching posts from Notion API...")
    posts = asyncio.run(fetch_posts(config))
    logger.info(f"Found {len(posts)} posts")

    result = build_post_meta(posts, config.public_dir, download_covers=download_covers)

    logger.info(f"Build finished in {time.monotonic() - start:.1f}s")
    return result


def list_posts(config: Config, static: bool = False) -> PostListResult:
    """Load the post list from the site at ``config.site_url``.

    Args:
        config: Application configuration.
        static: Read /data/postMeta.json instead of /api/posts.
    """
    if static:
        return load_post_list(lambda: fetch_post_meta(config.site_url))
    return load_post_list(lambda: fetch_posts_from_api(config.site_url))


def cmd_build(args: argparse.Namespace, config: Config) -> None:
    """Build post metadata once."""
    logger = logging.getLogger(__name__)

    try:
        run_build(config, download_covers=not args.no_covers)
    except ConfigError as e:
        logger.error(f"Configuration error: {e}")
        sys.exit(1)
    except Exception as e:
        logger.error(f"Build failed: {e}")
        sys.exit(1)


def cmd_serve(args: argparse.Namespace, config: Config) -> None:
    """Serve the posts API and static data."""
    uvicorn.run(create_app(config), host=args.host, port=args.port, log_config=None)


def cmd_posts(args: argparse.Namespace, config: Config) -> None:
    """Log the posts a running site serves."""
    logger = logging.getLogger(__name__)

    result = list_posts(config, static=args.static)
    if not result.ok:
        logger.error(result.message)
        sys.exit(1)

    if not result.posts:
        logger.info(f"No posts published at {config.site_url}")
        return

    for post in result.posts:
        logger.info(f"{format_post_date(post.created_at):>12}  {generate_post_slug(post)}  [{post.category.text}]")
    logger.info(f"{len(result.posts)} posts at {config.site_url}")


def cmd_schedule(args: argparse.Namespace, config: Config) -> None:
    """Run the scheduler and rebuild on cron triggers."""
    logger = logging.getLogger(__name__)

    try:
        run_scheduler(config, run_build, run_now=args.run_now)
    except ConfigError as e:
        logger.error(f"Configuration error: {e}")
        sys.exit(1)


def main() -> None:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        prog="notion-blog",
        description="Notion-backed post metadata for a static blog",
    )
    parser.add_argument(
        "--config", "-c",
        type=Path,
        default=None,
        help=f"Path to config file (default: {DEFAULT_CONFIG_PATH} if present)",
    )
    parser.add_argument(
        "--log-file",
        type=Path,
        default=None,
        help="Also write logs to this file (rotated at 10 MB)",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable debug logging",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    # build command
    build_parser = subparsers.add_parser(
        "build",
        help="Fetch posts from Notion and write postMeta.json",
    )
    build_parser.add_argument(
        "--no-covers",
        action="store_true",
        help="Keep remote cover URLs instead of downloading them",
    )

    # serve command
    serve_parser = subparsers.add_parser(
        "serve",
        help="Serve /api/posts and the generated data",
    )
    serve_parser.add_argument("--host", default="127.0.0.1")
    serve_parser.add_argument("--port", type=int, default=8000)

    # posts command
    posts_parser = subparsers.add_parser(
        "posts",
        help="List the posts served by the site at site_url",
    )
    posts_parser.add_argument(
        "--static",
        action="store_true",
        help="Read /data/postMeta.json instead of /api/posts",
    )

    # schedule command
    schedule_parser = subparsers.add_parser(
        "schedule",
        help="Rebuild post metadata on the configured cron schedule",
    )
    schedule_parser.add_argument(
        "--run-now",
        action="store_true",
        help="Build once immediately before waiting for the schedule",
    )

    args = parser.parse_args()

    setup_logging(args.log_file, verbose=args.verbose)
    logger = logging.getLogger(__name__)

    try:
        config = resolve_config(args.config)
    except ConfigError as e:
        logger.error(f"Configuration error: {e}")
        sys.exit(1)

    if args.command == "build":
        cmd_build(args, config)
    elif args.command == "serve":
        cmd_serve(args, config)
    elif args.command == "posts":
        cmd_posts(args, config)
    elif args.command == "schedule":
        cmd_schedule(args, config)


if __name__ == "__main__":
    main()
