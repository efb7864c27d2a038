"""NewsDesk application entry point."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from newsdesk.api import admin, articles, sync
from newsdesk.config import Settings, get_settings
from newsdesk.core.facebook import FacebookClient, FacebookConfig
from newsdesk.core.store import SQLRecordStore
from newsdesk.core.sync import SyncOrchestrator
from newsdesk.models.database import async_session_maker, close_db, init_db
from newsdesk.scheduler import create_scheduler, shutdown_scheduler

# Logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


def build_orchestrator(
    settings: Settings, client: FacebookClient
) -> SyncOrchestrator:
    """Wire the orchestrator to the Facebook page and the database."""
    return SyncOrchestrator(
        source=client,
        store=SQLRecordStore(async_session_maker()),
        cooldown_ms=settings.sync_cooldown_minutes * 60 * 1000,
        batch_size=settings.fb_fetch_limit,
    )


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Application lifecycle."""
    app_settings = get_settings()

    logger.info("Initialising database...")
    await init_db(app_settings.database_url)

    client = FacebookClient(
        FacebookConfig(
            page_id=app_settings.fb_page_id,
            page_token=app_settings.fb_page_token,
            graph_version=app_settings.fb_graph_version,
            timeout=app_settings.feed_timeout_seconds,
        )
    )
    if not client.is_configured:
        logger.warning("FB_PAGE_ID or FB_PAGE_TOKEN missing, syncs will fail")

    orchestrator = build_orchestrator(app_settings, client)
    await orchestrator.load_state()
    app.state.orchestrator = orchestrator

    logger.info("Starting scheduler...")
    create_scheduler(app_settings, orchestrator)

    logger.info("NewsDesk started")
    yield

    logger.info("Shutting down...")
    await shutdown_scheduler()
    await orchestrator.wait()
    await client.close()
    await close_db()
    logger.info("NewsDesk stopped")


app = FastAPI(
    title="NewsDesk",
    description="News site backend fed by a Facebook page",
    version="0.1.0",
    lifespan=lifespan,
)

# CORS: local dev servers, Vercel previews and configured origins
app.add_middleware(
    CORSMiddleware,
    allow_origins=get_settings().cors_origin_list,
    allow_origin_regex=r"^(http://localhost:\d+|https://.*\.vercel\.app)$",
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(articles.router)
app.include_router(sync.router)
app.include_router(admin.router)


@app.get("/health")
async def health() -> dict:
    """Health check."""
    return {"status": "ok"}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "newsdesk.main:app",
        host="0.0.0.0",
        port=3000,
        reload=True,
    )
