"""Sync service - pulls recent page posts into the article store."""

import asyncio
import logging
import time
from collections.abc import Callable
from dataclasses import asdict, dataclass
from typing import Any

from fastapi import Request

from newsdesk.core.gateways import FeedSource, RecordStore
from newsdesk.core.parser import parse_post

logger = logging.getLogger(__name__)

DEFAULT_COOLDOWN_MS = 10 * 60 * 1000
DEFAULT_BATCH_SIZE = 20


def now_ms() -> int:
    """Current wall-clock time in epoch milliseconds."""
    return int(time.time() * 1000)


class SyncRunStatus:
    """Run outcome."""

    COMPLETED = "completed"
    SKIPPED = "skipped"


@dataclass
class SyncRunResult:
    """Summary of one sync run."""

    status: str = SyncRunStatus.COMPLETED
    fetched: int = 0
    inserted: int = 0
    skipped_duplicate: int = 0
    skipped_unparseable: int = 0
    timestamp: int = 0  # epoch ms
    retry_after_ms: int = 0  # remaining cooldown, skipped runs only

    @property
    def skipped(self) -> int:
        return self.skipped_duplicate + self.skipped_unparseable

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["skipped"] = self.skipped
        return data


class SyncOrchestrator:
    """
    Cooldown-gated, single-flight sync of the feed into the record store.

    One instance is shared by every trigger path. At most one run is in flight;
    callers that arrive while it runs either wait for its result (``run``) or
    return straight away (``trigger``).
    """

    def __init__(
        self,
        source: FeedSource,
        store: RecordStore,
        cooldown_ms: int = DEFAULT_COOLDOWN_MS,
        batch_size: int = DEFAULT_BATCH_SIZE,
        clock: Callable[[], int] = now_ms,
    ) -> None:
        self.source = source
        self.store = store
        self.cooldown_ms = cooldown_ms
        self.batch_size = batch_size
        self._clock = clock
        self._last_sync_ms = 0
        self._inflight: asyncio.Task[SyncRunResult] | None = None

    @property
    def last_sync_ms(self) -> int:
        return self._last_sync_ms

    @property
    def is_running(self) -> bool:
        return self._inflight is not None

    async def load_state(self) -> None:
        """Load the last sync time from the store."""
        self._last_sync_ms = await self.store.get_last_sync_time()
        logger.info(f"Last sync at {self._last_sync_ms} (epoch ms)")

    def remaining_cooldown_ms(self) -> int:
        """Milliseconds until the next run is due, 0 if due now."""
        elapsed = self._clock() - self._last_sync_ms
        return max(0, self.cooldown_ms - elapsed)

    def is_due(self) -> bool:
        """Whether the cooldown since the last sync has passed."""
        return self._clock() - self._last_sync_ms >= self.cooldown_ms

    async def run(self, force: bool = False) -> SyncRunResult:
        """
        Run a sync, or join the one already in flight.

        Args:
            force: ignore the cooldown

        Returns:
            SyncRunResult: counters of the run, or a skipped result while the
            cooldown is active

        Raises:
            FeedUnavailable: the feed could not be fetched
        """
        if not force and not self.is_due():
            remaining = self.remaining_cooldown_ms()
            logger.info(f"Sync skipped, cooldown active for {remaining} ms")
            return SyncRunResult(
                status=SyncRunStatus.SKIPPED,
                timestamp=self._clock(),
                retry_after_ms=remaining,
            )

        task = self._inflight
        if task is None:
            task = self._start()
        else:
            logger.info("Sync already running, waiting for it")

        # A cancelled waiter must not cancel the shared run
        return await asyncio.shield(task)

    def trigger(self) -> bool:
        """
        Start a background sync if one is due and none is running.

        Never waits for the run and never raises its errors.

        Returns:
            whether a run was started
        """
        if not self.is_due() or self._inflight is not None:
            return False

        elapsed_min = (self._clock() - self._last_sync_ms) // 60000
        logger.info(f"Auto-sync triggered ({elapsed_min} min since last sync)")
        task = self._start()
        task.add_done_callback(self._log_background_result)
        return True

    async def wait(self) -> None:
        """Wait for the in-flight run, if any, ignoring its outcome."""
        task = self._inflight
        if task is not None:
            await asyncio.wait([task])

    def _start(self) -> asyncio.Task[SyncRunResult]:
        # No await between the check in the callers and this assignment, so
        # the slot cannot be claimed twice on the event loop.
        task = asyncio.create_task(self._execute())
        # Every waiter may be gone by the time the run fails
        task.add_done_callback(self._retrieve_result)
        self._inflight = task
        return task

    async def _execute(self) -> SyncRunResult:
        """Ingestion loop."""
        try:
            logger.info("Starting Facebook sync...")
            known_ids = await self.store.list_known_external_ids()
            items = await self.source.fetch_recent(self.batch_size)

            result = SyncRunResult(fetched=len(items))
            for item in items:
                if item.id in known_ids:
                    result.skipped_duplicate += 1
                    continue

                record = parse_post(item)
                if record is None:
                    result.skipped_unparseable += 1
                    continue

                if await self.store.insert_if_absent(record):
                    result.inserted += 1
                    known_ids.add(item.id)
                else:
                    result.skipped_duplicate += 1

            # An empty run still counts as a sync
            finished_at = self._clock()
            await self.store.set_last_sync_time(finished_at)
            self._last_sync_ms = finished_at
            result.timestamp = finished_at

            logger.info(
                f"Sync complete: fetched={result.fetched}, "
                f"inserted={result.inserted}, "
                f"duplicates={result.skipped_duplicate}, "
                f"unparseable={result.skipped_unparseable}"
            )
            return result
        finally:
            self._inflight = None

    @staticmethod
    def _retrieve_result(task: "asyncio.Task[SyncRunResult]") -> None:
        if not task.cancelled():
            task.exception()

    @staticmethod
    def _log_background_result(task: "asyncio.Task[SyncRunResult]") -> None:
        if task.cancelled():
            logger.warning("Auto-sync cancelled")
            return
        exc = task.exception()
        if exc is not None:
            logger.error(f"Auto-sync failed: {exc}", exc_info=exc)


def get_orchestrator(request: Request) -> SyncOrchestrator:
    """Get the process-wide orchestrator (dependency injection)."""
    return request.app.state.orchestrator
