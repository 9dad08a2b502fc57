from fastapi import APIRouter

from fantasy_league.api.users import router as users_router
from fantasy_league.api.fantasy_clubs import router as fantasy_clubs_router
from fantasy_league.api.players import router as players_router
from fantasy_league.api.sync import router as sync_router

api_router = APIRouter()

# Fantasy
api_router.include_router(users_router)
api_router.include_router(fantasy_clubs_router)

# Synchronized data
api_router.include_router(players_router)
api_router.include_router(sync_router)
