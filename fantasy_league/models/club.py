from datetime import datetime

from sqlalchemy import DateTime, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from fantasy_league.database import Base
from fantasy_league.models.sql_types import JSON_DOCUMENT
from fantasy_league.utils.timestamps import utcnow


class Club(Base):
    __tablename__ = "clubs"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=False)
    country_id: Mapped[int | None] = mapped_column(Integer)
    name: Mapped[str | None] = mapped_column(String(255))
    short_code: Mapped[str | None] = mapped_column(String(20))
    logo: Mapped[str | None] = mapped_column(String(500))
    league_id: Mapped[int | None] = mapped_column(Integer, index=True)
    roster: Mapped[list[int]] = mapped_column(JSON_DOCUMENT, default=list)  # player ids

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, onupdate=utcnow
    )

    # Relationships
    players: Mapped[list["Player"]] = relationship("Player", back_populates="club")
