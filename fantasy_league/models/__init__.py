from fantasy_league.models.league import League
from fantasy_league.models.season import Season
from fantasy_league.models.club import Club
from fantasy_league.models.fixture import Fixture
from fantasy_league.models.player import Player
from fantasy_league.models.type_definition import TypeDefinition
from fantasy_league.models.country import Country
from fantasy_league.models.sync_status import EntityType, SyncStatus

# Fantasy
from fantasy_league.models.user import User
from fantasy_league.models.fantasy_club import FantasyClub

__all__ = [
    "League",
    "Season",
    "Club",
    "Fixture",
    "Player",
    "TypeDefinition",
    "Country",
    "EntityType",
    "SyncStatus",
    # Fantasy
    "User",
    "FantasyClub",
]
