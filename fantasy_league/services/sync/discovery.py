"""
ID discovery.

Derives the foreign-key ids already referenced by stored parent entities.
These sets drive the next sync tier's fetch scope.
"""
from sqlalchemy import select

from fantasy_league.database import Base
from fantasy_league.models import Club, League, Season
from fantasy_league.services.sync.base import BaseSyncService


class IdDiscoveryService(BaseSyncService):

    async def extract_ids(
        self,
        model: type[Base],
        id_field: str,
        is_array_field: bool = False,
    ) -> set[int]:
        """
        Collect the unique ids stored in ``model.id_field``.

        With ``is_array_field`` the column holds a list of ids and every
        non-empty list is flattened. Returns an empty set when nothing matches.
        """
        column = getattr(model, id_field)
        table = model.__tablename__

        if is_array_field:
            result = await self.db.execute(select(column).where(column.is_not(None)))
            ids = {
                int(value)
                for values in result.scalars()
                if isinstance(values, list)
                for value in values
                if value is not None
            }
        else:
            result = await self.db.execute(
                select(column).where(column.is_not(None)).distinct()
            )
            ids = {int(value) for value in result.scalars()}

        if ids:
            self.log.info(f"Found {len(ids)} unique {id_field} values in the {table} table")
        else:
            self.log.warning(f"No {id_field} values stored in the {table} table yet")
        return ids

    async def get_saved_season_ids(self) -> set[int]:
        """Current season ids referenced by leagues."""
        return await self.extract_ids(League, "season_id")

    async def get_saved_club_ids(self) -> set[int]:
        return await self.extract_ids(Season, "club_ids", is_array_field=True)

    async def get_saved_fixture_ids(self) -> set[int]:
        return await self.extract_ids(Season, "fixture_ids", is_array_field=True)

    async def get_saved_player_ids(self) -> set[int]:
        return await self.extract_ids(Club, "roster", is_array_field=True)

    async def get_stored_club_ids(self) -> set[int]:
        """Ids of clubs that already exist as rows."""
        result = await self.db.execute(select(Club.id))
        return set(result.scalars())

    async def get_club_league_map(self) -> dict[int, int]:
        """Map each club id to the league of a season it takes part in."""
        result = await self.db.execute(
            select(Season.league_id, Season.club_ids).where(Season.league_id.is_not(None))
        )
        league_by_club: dict[int, int] = {}
        for league_id, club_ids in result.all():
            for club_id in club_ids or []:
                league_by_club.setdefault(int(club_id), league_id)
        return league_by_club
