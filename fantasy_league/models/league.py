from datetime import date, datetime

from sqlalchemy import Date, DateTime, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from fantasy_league.database import Base
from fantasy_league.utils.timestamps import utcnow


class League(Base):
    __tablename__ = "leagues"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=False)
    country_id: Mapped[int | None] = mapped_column(Integer, index=True)
    name: Mapped[str | None] = mapped_column(String(255))
    short_code: Mapped[str | None] = mapped_column(String(20))
    logo: Mapped[str | None] = mapped_column(String(500))

    # Snapshot of the league's current season, replaced on every sync
    season_id: Mapped[int | None] = mapped_column(Integer, index=True)
    season_name: Mapped[str | None] = mapped_column(String(100))
    season_start: Mapped[date | None] = mapped_column(Date)
    season_end: Mapped[date | None] = mapped_column(Date)

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, onupdate=utcnow
    )
