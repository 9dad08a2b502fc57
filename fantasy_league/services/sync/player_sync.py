"""
Player sync service.

Fetches players one by one, keeps only their current-season statistics and
links each player to the club they currently play for.
"""
import logging
from collections.abc import Callable, Iterable
from datetime import datetime

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from fantasy_league.models import Player, TypeDefinition
from fantasy_league.services.sportmonks_client import SportmonksApi, get_sportmonks_api
from fantasy_league.services.sync.base import BaseSyncService
from fantasy_league.services.sync.discovery import IdDiscoveryService
from fantasy_league.services.sync.entity_saver import EntitySaver, SaveResult
from fantasy_league.services.sync.mappers import PlayerMappingContext, map_player
from fantasy_league.utils.timestamps import utcnow


class PlayerSyncService(BaseSyncService):
    """Service for syncing player data."""

    def __init__(
        self,
        db: AsyncSession,
        api: SportmonksApi | None = None,
        log: logging.Logger | None = None,
        clock: Callable[[], datetime] = utcnow,
        concurrency: int | None = None,
    ):
        super().__init__(db, log)
        self.api = api or get_sportmonks_api()
        self.clock = clock
        self.saver = EntitySaver(db, self.log, concurrency=concurrency)

    async def get_type_names(self) -> dict[int, str]:
        """Type id → name for every stored type."""
        result = await self.db.execute(
            select(TypeDefinition.id, TypeDefinition.name).where(TypeDefinition.name.is_not(None))
        )
        return {type_id: name for type_id, name in result.all()}

    async def save_players(
        self,
        player_ids: Iterable[int],
        current_season_ids: Iterable[int],
    ) -> SaveResult:
        """
        Sync players.

        Args:
            player_ids: Players to fetch
            current_season_ids: Seasons whose statistics are kept on the player

        Returns:
            SaveResult for the batch
        """
        current_season_ids = frozenset(current_season_ids)
        if not current_season_ids:
            self.log.warning("No current season ids provided, player statistics will be empty")

        context = PlayerMappingContext(
            current_season_ids=current_season_ids,
            now=self.clock(),
            type_names=await self.get_type_names(),
            club_ids=frozenset(await IdDiscoveryService(self.db, self.log).get_stored_club_ids()),
        )

        return await self.saver.save_entities(
            self.api.get_player,
            Player,
            "id",
            lambda player: map_player(player, context),
            ids=player_ids,
            entity_name="player",
        )
