import asyncio

from fantasy_league.tasks import celery_app
from fantasy_league.database import AsyncSessionLocal
from fantasy_league.services.sync import SyncOrchestrator


def run_async(coro):
    """Helper to run async code in sync context."""
    loop = asyncio.new_event_loop()
    asyncio.set_event_loop(loop)
    try:
        return loop.run_until_complete(coro)
    finally:
        loop.close()


async def _sync_weekly(force: bool = False):
    async with AsyncSessionLocal() as db:
        return await SyncOrchestrator(db).run_weekly(force=force)


async def _sync_semi_annual(force: bool = False):
    async with AsyncSessionLocal() as db:
        return await SyncOrchestrator(db).run_semi_annual(force=force)


async def _full_sync(force: bool = False):
    async with AsyncSessionLocal() as db:
        return await SyncOrchestrator(db).run_full(force=force)


@celery_app.task(name="fantasy_league.tasks.sync_tasks.sync_weekly")
def sync_weekly(force: bool = False):
    """Celery task: Sync fixtures and players."""
    return run_async(_sync_weekly(force))


@celery_app.task(name="fantasy_league.tasks.sync_tasks.sync_semi_annual")
def sync_semi_annual(force: bool = False):
    """Celery task: Sync leagues, seasons, clubs, types and countries."""
    return run_async(_sync_semi_annual(force))


@celery_app.task(name="fantasy_league.tasks.sync_tasks.full_sync")
def full_sync(force: bool = False):
    """Celery task: Full synchronization in dependency order."""
    return run_async(_full_sync(force))
