from datetime import date, datetime

from sqlalchemy import Date, DateTime, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from fantasy_league.database import Base
from fantasy_league.models.sql_types import JSON_DOCUMENT
from fantasy_league.utils.timestamps import utcnow


class Season(Base):
    __tablename__ = "seasons"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=False)
    name: Mapped[str | None] = mapped_column(String(100))
    start_date: Mapped[date | None] = mapped_column(Date)
    end_date: Mapped[date | None] = mapped_column(Date)
    league_id: Mapped[int | None] = mapped_column(Integer, index=True)

    # Recomputed in full on every season sync
    club_ids: Mapped[list[int]] = mapped_column(JSON_DOCUMENT, default=list)
    fixture_ids: Mapped[list[int]] = mapped_column(JSON_DOCUMENT, default=list)

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, onupdate=utcnow
    )
