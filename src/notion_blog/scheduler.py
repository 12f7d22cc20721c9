# ABOUTME: Cron-driven rebuilds of postMeta.json using APScheduler.
# ABOUTME: Each run logs its build statistics; a failed run waits for the next trigger.

import logging
import signal
import sys
from dataclasses import dataclass
from typing import Callable

from apscheduler.schedulers.blocking import BlockingScheduler
from apscheduler.triggers.cron import CronTrigger

from .config import Config, ConfigError
from .posts import BuildResult

logger = logging.getLogger(__name__)

JOB_ID = "post_meta_build"


@dataclass
class BuildJob:
    """A scheduled rebuild that keeps count of its runs."""
    config: Config
    build_fn: Callable[[Config], BuildResult]
    runs: int = 0
    failures: int = 0
    last_result: BuildResult | None = None

    def __call__(self) -> BuildResult | None:
        self.runs += 1
        try:
            result = self.build_fn(self.config)
        except Exception as e:
            self.failures += 1
            logger.error(f"Scheduled build failed ({self.failures}/{self.runs} runs failed): {e}")
            return None

        self.last_result = result
        logger.info(
            f"Scheduled build wrote {result.total_posts} posts to {result.path} "
            f"({result.images_downloaded} covers downloaded, {result.file_size:,} bytes)"
        )
        return result


def create_scheduler(
    config: Config,
    build_fn: Callable[[Config], BuildResult],
) -> tuple[BlockingScheduler, BuildJob]:
    """Create a scheduler with the rebuild job registered on the configured cron.

    Raises:
        ConfigError: If no schedule is configured or it is not a valid crontab.
    """
    if not config.schedule:
        raise ConfigError("No 'schedule' configured")

    try:
        trigger = CronTrigger.from_crontab(config.schedule)
    except ValueError as e:
        raise ConfigError(f"Invalid schedule '{config.schedule}': {e}") from e

    job = BuildJob(config, build_fn)
    scheduler = BlockingScheduler()
    # Overlapping or missed runs collapse into one rebuild
    scheduler.add_job(job, trigger, id=JOB_ID, max_instances=1, coalesce=True)
    return scheduler, job


def run_scheduler(
    config: Config,
    build_fn: Callable[[Config], BuildResult],
    run_now: bool = False,
) -> None:
    """Rebuild post metadata on the configured schedule until a signal arrives.

    Args:
        config: Application configuration with schedule.
        build_fn: Builds postMeta.json and returns its statistics.
        run_now: Also build once before waiting for the first trigger.

    Raises:
        ConfigError: If the schedule is missing or invalid.
    """
    scheduler, job = create_scheduler(config, build_fn)

    def shutdown(signum, frame):
        logger.info(f"Received shutdown signal after {job.runs} builds, stopping scheduler...")
        scheduler.shutdown(wait=False)
        sys.exit(0)

    signal.signal(signal.SIGTERM, shutdown)
    signal.signal(signal.SIGINT, shutdown)

    if run_now:
        job()

    logger.info(f"Rebuilding post metadata on schedule: {config.schedule}")
    scheduler.start()
