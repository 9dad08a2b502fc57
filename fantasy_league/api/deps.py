from collections.abc import AsyncGenerator

from fastapi import Depends, HTTPException, Request, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from fantasy_league.config import get_settings
from fantasy_league.database import AsyncSessionLocal
from fantasy_league.models import User
from fantasy_league.security.jwt import AccessTokenError, decode_access_token


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    async with AsyncSessionLocal() as session:
        yield session


def _unauthorized(detail: str = "Unauthorized") -> HTTPException:
    return HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=detail)


async def get_current_user(
    request: Request,
    db: AsyncSession = Depends(get_db),
) -> User:
    """Resolve the user from the session cookie."""
    token = request.cookies.get(get_settings().auth_cookie_name)
    if not token:
        raise _unauthorized("Not authenticated")

    try:
        user_id = decode_access_token(token)
    except AccessTokenError:
        raise _unauthorized("Invalid or expired session")

    result = await db.execute(select(User).where(User.id == user_id))
    user = result.scalar_one_or_none()
    if not user:
        raise _unauthorized("User not found")

    return user
