"""Scheduled task definitions."""

import logging

from apscheduler.schedulers.asyncio import AsyncIOScheduler

from newsdesk.config import Settings
from newsdesk.core.gateways import FeedUnavailable
from newsdesk.core.sync import SyncOrchestrator

logger = logging.getLogger(__name__)

_scheduler: AsyncIOScheduler | None = None


async def sync_task(orchestrator: SyncOrchestrator) -> None:
    """Sync task: pull the latest posts if the cooldown has passed."""
    try:
        result = await orchestrator.run(force=False)
    except FeedUnavailable as e:
        logger.error(f"Scheduled sync failed: {e}")
        return

    logger.info(
        f"Scheduled sync {result.status}: "
        f"fetched={result.fetched}, inserted={result.inserted}"
    )


def create_scheduler(
    settings: Settings, orchestrator: SyncOrchestrator
) -> AsyncIOScheduler:
    """Create and start the scheduler."""
    global _scheduler

    _scheduler = AsyncIOScheduler()

    _scheduler.add_job(
        sync_task,
        "interval",
        minutes=settings.sync_interval_minutes,
        args=[orchestrator],
        id="sync_task",
        name="Facebook sync",
        replace_existing=True,
        max_instances=1,
        coalesce=True,
    )

    # Run once at startup
    _scheduler.add_job(
        sync_task,
        "date",
        args=[orchestrator],
        id="sync_task_initial",
        name="Initial Facebook sync",
    )

    _scheduler.start()
    logger.info(
        f"Scheduler started, sync interval: {settings.sync_interval_minutes} min"
    )

    return _scheduler


async def shutdown_scheduler() -> None:
    """Shut down the scheduler."""
    global _scheduler
    if _scheduler:
        _scheduler.shutdown(wait=False)
        logger.info("Scheduler stopped")
        _scheduler = None
