"""Sync API."""

import logging

from fastapi import APIRouter, Depends, HTTPException, Query

from newsdesk.api.security import require_admin_token
from newsdesk.core.gateways import FeedUnavailable
from newsdesk.core.sync import SyncOrchestrator, get_orchestrator

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/sync",
    tags=["sync"],
    dependencies=[Depends(require_admin_token)],
)


@router.post("")
async def trigger_sync(
    force: bool = Query(True, description="Ignore the cooldown"),
    orchestrator: SyncOrchestrator = Depends(get_orchestrator),
) -> dict:
    """Run a sync and wait for its result."""
    try:
        result = await orchestrator.run(force=force)
    except FeedUnavailable as e:
        logger.error(f"Sync failed: {e}")
        raise HTTPException(status_code=502, detail=str(e)) from e

    return {"success": True, **result.to_dict()}


@router.get("/status")
async def get_sync_status(
    orchestrator: SyncOrchestrator = Depends(get_orchestrator),
) -> dict:
    """Current sync state."""
    return {
        "last_sync_at": orchestrator.last_sync_ms,
        "is_running": orchestrator.is_running,
        "is_due": orchestrator.is_due(),
        "retry_after_ms": orchestrator.remaining_cooldown_ms(),
    }
