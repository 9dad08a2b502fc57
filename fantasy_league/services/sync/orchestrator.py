"""
Sync orchestrator service.

Coordinates sync operations across all sync services,
ensuring correct order of operations and handling dependencies.
"""
import logging
from collections.abc import Iterable
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from fantasy_league.config import get_settings
from fantasy_league.models import EntityType
from fantasy_league.services.sportmonks_client import SportmonksApi, get_sportmonks_api
from fantasy_league.services.sync.discovery import IdDiscoveryService
from fantasy_league.services.sync.player_sync import PlayerSyncService
from fantasy_league.services.sync.reference_sync import ReferenceSyncService
from fantasy_league.services.sync.scheduler import SyncOutcome, SyncScheduler

logger = logging.getLogger(__name__)

# Discovery for each type reads what the previous types stored
SYNC_ORDER: tuple[EntityType, ...] = (
    EntityType.LEAGUES,
    EntityType.SEASONS,
    EntityType.CLUBS,
    EntityType.FIXTURES,
    EntityType.PLAYERS,
    EntityType.TYPES,
    EntityType.COUNTRIES,
)

WEEKLY_ENTITY_TYPES = frozenset({EntityType.FIXTURES, EntityType.PLAYERS})
SEMI_ANNUAL_ENTITY_TYPES = frozenset({
    EntityType.LEAGUES,
    EntityType.SEASONS,
    EntityType.CLUBS,
    EntityType.TYPES,
    EntityType.COUNTRIES,
})


class SyncOrchestrator:
    """
    Orchestrates sync operations across all sync services.

    Ensures operations are executed in the correct order to
    satisfy discovery dependencies:
    1. Leagues - no dependencies, provide current season ids
    2. Seasons - provide club and fixture ids
    3. Clubs and fixtures - clubs provide player ids
    4. Players - depend on clubs
    5. Types and countries - no dependencies

    Types run after players, so on the very first sweep player position names
    and statistic labels stay empty. They fill in on the next player sync.
    """

    def __init__(
        self,
        db: AsyncSession,
        api: SportmonksApi | None = None,
        scheduler: SyncScheduler | None = None,
        log: logging.Logger | None = None,
        concurrency: int | None = None,
    ):
        """
        Initialize the orchestrator with all sync services.

        Args:
            db: SQLAlchemy async session
            api: Optional Sportmonks API (uses singleton if not provided)
            scheduler: Optional scheduler (default interval from settings)
            log: Logger shared by every sync component
            concurrency: Cap on in-flight per-id fetches
                (settings.sync_fetch_concurrency if not provided)
        """
        self.db = db
        self.log = log or logger
        self.api = api or get_sportmonks_api()
        self.scheduler = scheduler or SyncScheduler(db, log=self.log)

        self.discovery = IdDiscoveryService(db, self.log)
        if concurrency is None:
            concurrency = get_settings().sync_fetch_concurrency
        self.reference = ReferenceSyncService(db, self.api, self.log, concurrency=concurrency)
        self.player = PlayerSyncService(db, self.api, self.log, concurrency=concurrency)

    async def _save_players(self, player_ids: list[int]):
        current_season_ids = await self.discovery.get_saved_season_ids()
        return await self.player.save_players(player_ids, current_season_ids)

    def _handlers(self) -> dict[EntityType, tuple]:
        """Entity type → (save function, id getter or None)."""
        return {
            EntityType.LEAGUES: (self.reference.save_leagues, None),
            EntityType.SEASONS: (self.reference.save_seasons, self.discovery.get_saved_season_ids),
            EntityType.CLUBS: (self.reference.save_clubs, self.discovery.get_saved_club_ids),
            EntityType.FIXTURES: (self.reference.save_fixtures, self.discovery.get_saved_fixture_ids),
            EntityType.PLAYERS: (self._save_players, self.discovery.get_saved_player_ids),
            EntityType.TYPES: (self.reference.save_types, None),
            EntityType.COUNTRIES: (self.reference.save_countries, None),
        }

    async def sync_entity(self, entity_type: EntityType, force: bool = False) -> SyncOutcome:
        """Sync one entity type through the scheduler."""
        save_fn, id_getter = self._handlers()[entity_type]
        return await self.scheduler.handle(entity_type, save_fn, id_getter, force=force)

    async def run(
        self,
        entity_types: Iterable[EntityType] | None = None,
        force: bool = False,
    ) -> dict[str, Any]:
        """
        Sync the given entity types (all of them by default) in dependency order.

        A failing type is recorded and the sweep moves on to the next one.

        Returns:
            Dict of entity type → outcome dict
        """
        selected = set(entity_types) if entity_types is not None else set(SYNC_ORDER)
        ordered = [entity_type for entity_type in SYNC_ORDER if entity_type in selected]

        self.log.info(f"Starting sync sweep: {', '.join(t.value for t in ordered)}")
        results: dict[str, Any] = {}
        for entity_type in ordered:
            outcome = await self.sync_entity(entity_type, force=force)
            results[entity_type.value] = outcome.as_dict()

        self.log.info(f"Sync sweep complete: {results}")
        return results

    async def run_full(self, force: bool = False) -> dict[str, Any]:
        return await self.run(SYNC_ORDER, force=force)

    async def run_weekly(self, force: bool = False) -> dict[str, Any]:
        """Fixtures and players, the data that changes every matchday."""
        return await self.run(WEEKLY_ENTITY_TYPES, force=force)

    async def run_semi_annual(self, force: bool = False) -> dict[str, Any]:
        """Leagues, seasons, clubs and lookup tables, which change between seasons."""
        return await self.run(SEMI_ANNUAL_ENTITY_TYPES, force=force)
