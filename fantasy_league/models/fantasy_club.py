from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from fantasy_league.database import Base
from fantasy_league.models.sql_types import JSON_DOCUMENT
from fantasy_league.utils.timestamps import utcnow


class FantasyClub(Base):
    __tablename__ = "fantasy_clubs"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(100), unique=True, nullable=False)
    owner_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), unique=True, nullable=False
    )
    roster: Mapped[list[int]] = mapped_column(JSON_DOCUMENT, default=list)  # player ids
    fantasy_points: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)

    # Relationships
    owner: Mapped["User"] = relationship("User", back_populates="fantasy_club")
