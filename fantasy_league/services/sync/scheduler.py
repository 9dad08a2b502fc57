"""
Per entity type sync scheduling.

Each entity type has one SyncStatus row holding the time of its last
successful sync. A type is synced again once that time is older than the
configured interval; a failed sync leaves the timestamp alone so the next
cycle retries.
"""
import enum
import logging
from collections.abc import Awaitable, Callable, Iterable
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from fantasy_league.config import get_settings
from fantasy_league.models import EntityType, SyncStatus
from fantasy_league.services.sync.base import BaseSyncService, upsert_statement
from fantasy_league.services.sync.entity_saver import SaveResult
from fantasy_league.utils.timestamps import as_utc, utcnow

SaveFunction = Callable[..., Awaitable[SaveResult | None]]
IdGetter = Callable[[], Awaitable[Iterable[int]]]


class SyncState(str, enum.Enum):
    NEVER_SYNCED = "never_synced"
    STALE = "stale"
    FRESH = "fresh"


class OutcomeStatus(str, enum.Enum):
    SYNCED = "synced"
    SKIPPED_FRESH = "skipped_fresh"
    SKIPPED_NO_IDS = "skipped_no_ids"
    FAILED = "failed"


@dataclass
class SyncOutcome:
    entity_type: EntityType
    status: OutcomeStatus
    result: SaveResult | None = None
    error: str | None = None

    def as_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"status": self.status.value}
        if self.result is not None:
            data.update(self.result.as_dict())
        if self.error:
            data["error"] = self.error
        return data


class SyncScheduler(BaseSyncService):
    """
    Decides whether an entity type is due and runs its sync.

    Args:
        db: SQLAlchemy async session
        interval: Minimum age of the last sync before the next one runs
            (settings.sync_interval_days if not provided)
        clock: Returns the current UTC time
        log: Logger to report to
    """

    def __init__(
        self,
        db: AsyncSession,
        interval: timedelta | None = None,
        clock: Callable[[], datetime] = utcnow,
        log: logging.Logger | None = None,
    ):
        super().__init__(db, log)
        self.interval = interval or timedelta(days=get_settings().sync_interval_days)
        self.clock = clock

    async def get_last_synced_at(self, entity_type: EntityType) -> datetime | None:
        """Read the last sync time, creating the status row on first use."""
        await self.db.execute(
            upsert_statement(self.db, SyncStatus, "entity_type", {"entity_type": entity_type})
        )
        await self.db.commit()

        result = await self.db.execute(
            select(SyncStatus.last_synced_at).where(SyncStatus.entity_type == entity_type)
        )
        last_synced_at = result.scalar_one_or_none()
        return as_utc(last_synced_at) if last_synced_at is not None else None

    async def get_state(self, entity_type: EntityType) -> SyncState:
        last_synced_at = await self.get_last_synced_at(entity_type)
        if last_synced_at is None:
            return SyncState.NEVER_SYNCED
        if self.clock() - last_synced_at >= self.interval:
            return SyncState.STALE
        return SyncState.FRESH

    async def should_sync(self, entity_type: EntityType) -> bool:
        """True unless the last sync is younger than the interval. Errors count as due."""
        try:
            state = await self.get_state(entity_type)
        except SQLAlchemyError as e:
            await self.db.rollback()
            self.log.error(f"Error checking sync status for {entity_type.value}: {e}")
            return True

        if state == SyncState.NEVER_SYNCED:
            self.log.info(f"{entity_type.value} has never been synced. Syncing...")
        elif state == SyncState.STALE:
            self.log.info(f"Last {entity_type.value} sync is older than {self.interval}. Syncing...")
        else:
            self.log.info(f"Last {entity_type.value} sync is within {self.interval}. No sync needed.")
        return state != SyncState.FRESH

    async def mark_synced(self, entity_type: EntityType) -> datetime:
        now = self.clock()
        await self.db.execute(
            upsert_statement(
                self.db,
                SyncStatus,
                "entity_type",
                {"entity_type": entity_type, "last_synced_at": now},
            )
        )
        await self.db.commit()
        self.log.info(f"Updated sync status for {entity_type.value} to {now.isoformat()}")
        return now

    async def handle(
        self,
        entity_type: EntityType,
        save_fn: SaveFunction,
        id_getter: IdGetter | None = None,
        force: bool = False,
    ) -> SyncOutcome:
        """
        Run one entity type's sync if it is due.

        With ``id_getter`` the working ids are resolved first and an empty set
        skips the type for this cycle. ``force`` bypasses the freshness check.
        Failures are logged and returned, never raised.
        """
        ids: list[int] | None = None
        if id_getter is not None:
            try:
                ids = sorted(await id_getter())
            except Exception as e:
                await self.db.rollback()
                self.log.error(f"Error retrieving {entity_type.value} ids: {e}")
                return SyncOutcome(entity_type, OutcomeStatus.FAILED, error=str(e))

            if not ids:
                self.log.warning(f"No {entity_type.value} ids found. Skipping {entity_type.value} sync.")
                return SyncOutcome(entity_type, OutcomeStatus.SKIPPED_NO_IDS)
            self.log.info(f"Retrieved {len(ids)} ids for {entity_type.value}")

        if not force and not await self.should_sync(entity_type):
            return SyncOutcome(entity_type, OutcomeStatus.SKIPPED_FRESH)

        self.log.info(f"Initiating {entity_type.value} sync...")
        try:
            result = await (save_fn(ids) if ids is not None else save_fn())
            await self.mark_synced(entity_type)
        except Exception as e:
            await self.db.rollback()
            self.log.exception(f"Error during {entity_type.value} sync: {e}")
            return SyncOutcome(entity_type, OutcomeStatus.FAILED, error=str(e))

        self.log.info(f"Successfully completed {entity_type.value} sync")
        return SyncOutcome(entity_type, OutcomeStatus.SYNCED, result=result)
