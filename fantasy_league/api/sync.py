import logging

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from fantasy_league.api.deps import get_db
from fantasy_league.models import EntityType, SyncStatus
from fantasy_league.schemas.sync import SyncResponse, SyncResultStatus, SyncStatusResponse
from fantasy_league.services.sync import OutcomeStatus, SyncOrchestrator

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/sync", tags=["sync"])


def _response_status(results: dict) -> SyncResultStatus:
    """Any failed type makes the run partial; all failed makes it failed."""
    statuses = [outcome["status"] for outcome in results.values()]
    failed = statuses.count(OutcomeStatus.FAILED.value)
    if failed == 0:
        return SyncResultStatus.SUCCESS
    if failed == len(statuses):
        return SyncResultStatus.FAILED
    return SyncResultStatus.PARTIAL


@router.post("/full", response_model=SyncResponse)
async def sync_full(
    force: bool = Query(default=False),
    db: AsyncSession = Depends(get_db),
):
    """Run the sync sweep over every entity type in dependency order."""
    try:
        results = await SyncOrchestrator(db).run_full(force=force)
    except Exception as e:
        logger.exception("Full synchronization failed")
        return SyncResponse(
            status=SyncResultStatus.FAILED,
            message=f"Synchronization failed: {str(e)}",
            details=None,
        )

    result_status = _response_status(results)
    return SyncResponse(
        status=result_status,
        message=f"Full synchronization finished: {result_status.value}",
        details=results,
    )


@router.get("/status", response_model=list[SyncStatusResponse])
async def get_sync_status(db: AsyncSession = Depends(get_db)):
    result = await db.execute(select(SyncStatus).order_by(SyncStatus.entity_type))
    return [
        SyncStatusResponse(entity_type=row.entity_type.value, last_synced_at=row.last_synced_at)
        for row in result.scalars().all()
    ]


@router.post("/{entity_type}", response_model=SyncResponse)
async def sync_entity_type(
    entity_type: str,
    force: bool = Query(default=False),
    db: AsyncSession = Depends(get_db),
):
    """Sync a single entity type (leagues, seasons, clubs, ...)."""
    try:
        target = EntityType(entity_type)
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Unknown entity type: {entity_type}",
        )

    outcome = await SyncOrchestrator(db).sync_entity(target, force=force)
    if outcome.status == OutcomeStatus.FAILED:
        return SyncResponse(
            status=SyncResultStatus.FAILED,
            message=f"{target.value} synchronization failed: {outcome.error}",
            details=outcome.as_dict(),
        )

    return SyncResponse(
        status=SyncResultStatus.SUCCESS,
        message=f"{target.value} synchronization finished: {outcome.status.value}",
        details=outcome.as_dict(),
    )
