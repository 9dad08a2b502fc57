from fastapi import APIRouter, Depends, Query
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from fantasy_league.api.deps import get_current_user, get_db
from fantasy_league.models import Player, User
from fantasy_league.schemas.player import PlayerListResponse, PlayerResponse

router = APIRouter(prefix="/players", tags=["players"])


@router.get("", response_model=PlayerListResponse)
async def get_players(
    limit: int = Query(default=50, ge=1, le=200),
    offset: int = Query(default=0, ge=0),
    _current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """List synchronized players with their current club."""
    total = (await db.execute(select(func.count()).select_from(Player))).scalar() or 0

    result = await db.execute(
        select(Player)
        .options(selectinload(Player.club))
        .order_by(Player.id)
        .offset(offset)
        .limit(limit)
    )
    players = result.scalars().all()

    return PlayerListResponse(
        items=[PlayerResponse.model_validate(player) for player in players],
        total=total,
    )
