from pathlib import Path

import pytest
from apscheduler.triggers.cron import CronTrigger

from notion_blog.config import Config, ConfigError
from notion_blog.posts import BuildResult
from notion_blog.scheduler import JOB_ID, BuildJob, create_scheduler

RESULT = BuildResult(path=Path("public/data/postMeta.json"), total_posts=3, images_downloaded=2, file_size=1536)


def test_build_job_logs_build_statistics(caplog) -> None:
    job = BuildJob(Config(), lambda config: RESULT)

    assert job() is RESULT
    assert job.runs == 1
    assert job.failures == 0
    assert job.last_result is RESULT
    assert "Scheduled build wrote 3 posts" in caplog.text
    assert "2 covers downloaded, 1,536 bytes" in caplog.text


def test_build_job_survives_failed_build(caplog) -> None:
    def failing_build(config: Config) -> BuildResult:
        raise ConfigError("NOTION_API_KEY not set")

    job = BuildJob(Config(), failing_build)
    job.last_result = RESULT

    assert job() is None
    assert job() is None
    assert (job.runs, job.failures) == (2, 2)
    assert job.last_result is RESULT
    assert "Scheduled build failed (2/2 runs failed): NOTION_API_KEY not set" in caplog.text


def test_build_job_passes_config_to_build() -> None:
    seen: list[Config] = []
    config = Config(schedule="*/5 * * * *")

    BuildJob(config, lambda c: seen.append(c) or RESULT)()

    assert seen == [config]


def test_create_scheduler_registers_cron_job() -> None:
    scheduler, job = create_scheduler(Config(schedule="0 * * * *"), lambda config: RESULT)

    [registered] = scheduler.get_jobs()
    assert registered.id == JOB_ID
    assert registered.func is job
    assert registered.max_instances == 1
    assert registered.coalesce is True
    assert isinstance(registered.trigger, CronTrigger)


@pytest.mark.parametrize("schedule, message", [(None, "No 'schedule' configured"), ("every hour", "Invalid schedule")])
def test_create_scheduler_rejects_bad_schedule(schedule, message) -> None:
    with pytest.raises(ConfigError, match=message):
        create_scheduler(Config(schedule=schedule), lambda config: RESULT)
