import asyncio
import logging
from contextlib import asynccontextmanager
from contextlib import suppress

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy import text

from fantasy_league.config import get_settings
from fantasy_league.database import AsyncSessionLocal, engine
from fantasy_league.logging_config import setup_logging
from fantasy_league.services.sync import SyncOrchestrator

settings = get_settings()
logger = logging.getLogger(__name__)


async def run_startup_sync() -> None:
    """One sync sweep at process start; fresh entity types are skipped."""
    try:
        async with AsyncSessionLocal() as db:
            await SyncOrchestrator(db).run_full()
    except Exception:
        logger.exception("Startup sync sweep failed")


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    setup_logging(settings.log_level)

    # Without a database there is nothing to serve or sync into
    async with engine.connect() as conn:
        await conn.execute(text("SELECT 1"))
    logger.info("Database connection established")

    sync_task = None
    if settings.sync_on_startup:
        sync_task = asyncio.create_task(run_startup_sync())

    yield
    # Shutdown
    if sync_task is not None and not sync_task.done():
        sync_task.cancel()
        with suppress(asyncio.CancelledError):
            await sync_task

    await engine.dispose()


app = FastAPI(
    title="Fantasy League Backend",
    description="Football reference data sync and fantasy club API",
    version="1.0.0",
    lifespan=lifespan,
)

# CORS
_origins = (
    settings.allowed_origins.split(",")
    if settings.allowed_origins != "*"
    else ["*"]
)
app.add_middleware(
    CORSMiddleware,
    allow_origins=_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/health")
async def health_check():
    return {"status": "healthy"}


# Import and include routers after app is created
from fantasy_league.api.router import api_router
app.include_router(api_router, prefix="/api/v1")
