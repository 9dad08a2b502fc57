"""
Reference data sync service.

Handles synchronization of leagues, seasons, clubs, fixtures, types and
countries from the Sportmonks API.
"""
import logging
from collections.abc import Iterable

from sqlalchemy.ext.asyncio import AsyncSession

from fantasy_league.models import Club, Country, Fixture, League, Season, TypeDefinition
from fantasy_league.services.sportmonks_client import SportmonksApi, get_sportmonks_api
from fantasy_league.services.sync.base import BaseSyncService
from fantasy_league.services.sync.discovery import IdDiscoveryService
from fantasy_league.services.sync.entity_saver import EntitySaver, SaveResult
from fantasy_league.services.sync.mappers import (
    map_club,
    map_country,
    map_fixture,
    map_league,
    map_season,
    map_type,
)


class ReferenceSyncService(BaseSyncService):
    """
    Service for syncing reference data.

    Leagues, types and countries are fetched in bulk; seasons, clubs and
    fixtures are fetched one id at a time from the ids the caller discovered.
    """

    def __init__(
        self,
        db: AsyncSession,
        api: SportmonksApi | None = None,
        log: logging.Logger | None = None,
        concurrency: int | None = None,
    ):
        super().__init__(db, log)
        self.api = api or get_sportmonks_api()
        self.saver = EntitySaver(db, self.log, concurrency=concurrency)

    async def save_leagues(self) -> SaveResult:
        """
        Sync domestic leagues with their current season snapshot.

        Cups and international competitions are filtered out before saving.
        """
        leagues = await self.api.get_leagues()
        if not leagues:
            self.log.warning("No leagues data found to save from the API response")
            return SaveResult(entity_name="league")

        domestic = [league for league in leagues if league.get("sub_type") == "domestic"]
        self.log.info(f"Fetched {len(leagues)} leagues from API, {len(domestic)} are domestic")
        if not domestic:
            self.log.warning("No domestic leagues found after filtering, skipping save")
            return SaveResult(entity_name="league", fetched=len(leagues))

        async def fetch_domestic():
            return domestic

        return await self.saver.save_entities(
            fetch_domestic, League, "id", map_league, entity_name="league"
        )

    async def save_seasons(self, season_ids: Iterable[int]) -> SaveResult:
        return await self.saver.save_entities(
            self.api.get_season, Season, "id", map_season, ids=season_ids, entity_name="season"
        )

    async def save_clubs(self, club_ids: Iterable[int]) -> SaveResult:
        """Sync clubs, taking each club's league from the stored seasons."""
        league_by_club = await IdDiscoveryService(self.db, self.log).get_club_league_map()

        return await self.saver.save_entities(
            self.api.get_club,
            Club,
            "id",
            lambda club: map_club(club, league_by_club),
            ids=club_ids,
            entity_name="club",
        )

    async def save_fixtures(self, fixture_ids: Iterable[int]) -> SaveResult:
        return await self.saver.save_entities(
            self.api.get_fixture, Fixture, "id", map_fixture, ids=fixture_ids, entity_name="fixture"
        )

    async def save_types(self) -> SaveResult:
        return await self.saver.save_entities(
            self.api.get_types, TypeDefinition, "id", map_type, entity_name="type"
        )

    async def save_countries(self) -> SaveResult:
        return await self.saver.save_entities(
            self.api.get_countries, Country, "id", map_country, entity_name="country"
        )
