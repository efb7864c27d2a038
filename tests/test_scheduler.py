"""Tests for scheduled tasks."""

import logging

import pytest

from newsdesk.core.gateways import FeedUnavailable
from newsdesk.core.sync import SyncOrchestrator
from newsdesk.scheduler.tasks import sync_task
from tests.conftest import COOLDOWN_MS, FakeClock, FakeFeedSource, make_post


class TestSyncTask:
    """sync_task."""

    async def test_runs_when_due(
        self, orchestrator: SyncOrchestrator, feed: FakeFeedSource
    ) -> None:
        feed.items = [make_post("A")]
        await sync_task(orchestrator)
        assert feed.calls == 1

    async def test_respects_cooldown(
        self,
        orchestrator: SyncOrchestrator,
        feed: FakeFeedSource,
        clock: FakeClock,
    ) -> None:
        await sync_task(orchestrator)
        clock.advance(COOLDOWN_MS - 1)
        await sync_task(orchestrator)
        assert feed.calls == 1

        clock.advance(1)
        await sync_task(orchestrator)
        assert feed.calls == 2

    async def test_feed_failure_is_logged(
        self,
        orchestrator: SyncOrchestrator,
        feed: FakeFeedSource,
        caplog: pytest.LogCaptureFixture,
    ) -> None:
        feed.error = FeedUnavailable("Graph API down")

        with caplog.at_level(logging.ERROR, logger="newsdesk.scheduler.tasks"):
            await sync_task(orchestrator)

        assert "Scheduled sync failed: Graph API down" in caplog.text

