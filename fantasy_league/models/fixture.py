from datetime import datetime

from sqlalchemy import DateTime, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from fantasy_league.database import Base
from fantasy_league.models.sql_types import JSON_DOCUMENT
from fantasy_league.utils.timestamps import utcnow


class Fixture(Base):
    __tablename__ = "fixtures"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=False)
    name: Mapped[str | None] = mapped_column(String(255))
    league_id: Mapped[int | None] = mapped_column(Integer, index=True)
    season_id: Mapped[int | None] = mapped_column(Integer, index=True)
    stage_id: Mapped[int | None] = mapped_column(Integer)
    round_id: Mapped[int | None] = mapped_column(Integer)
    start_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    home_team_id: Mapped[int | None] = mapped_column(Integer)
    away_team_id: Mapped[int | None] = mapped_column(Integer)
    lineups: Mapped[list[int]] = mapped_column(JSON_DOCUMENT, default=list)  # player ids

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, onupdate=utcnow
    )
