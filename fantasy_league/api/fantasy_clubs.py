import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from fantasy_league.api.deps import get_current_user, get_db
from fantasy_league.models import FantasyClub, Player, User
from fantasy_league.schemas.fantasy_club import FantasyClubCreate, FantasyClubResponse

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/fantasy-clubs", tags=["fantasy-clubs"])


@router.post("", response_model=FantasyClubResponse, status_code=status.HTTP_201_CREATED)
async def create_fantasy_club(
    payload: FantasyClubCreate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Create the authenticated user's fantasy club. One club per user."""
    existing = await db.execute(select(FantasyClub.id).where(FantasyClub.owner_id == current_user.id))
    if existing.first():
        logger.warning(f"User {current_user.id} attempted to create a second club")
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="User already has a fantasy club")

    name = payload.name.strip()
    taken = await db.execute(select(FantasyClub.id).where(FantasyClub.name == name))
    if taken.first():
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Fantasy club name is already taken")

    roster = list(dict.fromkeys(payload.roster))
    if roster:
        result = await db.execute(select(Player.id).where(Player.id.in_(roster)))
        unknown = sorted(set(roster) - set(result.scalars()))
        if unknown:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Unknown player ids: {unknown}",
            )

    club = FantasyClub(name=name, owner_id=current_user.id, roster=roster)
    db.add(club)
    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Fantasy club already exists")
    await db.refresh(club)

    logger.info(f"User {current_user.id} created fantasy club {club.id} ({club.name})")
    return club


@router.get("/me", response_model=FantasyClubResponse)
async def get_my_fantasy_club(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    result = await db.execute(select(FantasyClub).where(FantasyClub.owner_id == current_user.id))
    club = result.scalar_one_or_none()
    if not club:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Fantasy club not found")
    return club
