from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from fantasy_league.database import Base
from fantasy_league.models.sql_types import JSON_DOCUMENT
from fantasy_league.utils.timestamps import utcnow


class Player(Base):
    __tablename__ = "players"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=False)
    position_id: Mapped[int | None] = mapped_column(Integer)
    position_name: Mapped[str | None] = mapped_column(String(100))
    detailed_position_id: Mapped[int | None] = mapped_column(Integer)
    detailed_position_name: Mapped[str | None] = mapped_column(String(100))
    type_id: Mapped[int | None] = mapped_column(Integer)

    first_name: Mapped[str | None] = mapped_column(String(100))
    last_name: Mapped[str | None] = mapped_column(String(100))
    common_name: Mapped[str | None] = mapped_column(String(100))
    name: Mapped[str | None] = mapped_column(String(255))
    display_name: Mapped[str | None] = mapped_column(String(255))
    photo: Mapped[str | None] = mapped_column(String(500))

    country_name: Mapped[str | None] = mapped_column(String(100))
    country_flag: Mapped[str | None] = mapped_column(String(500))
    country_fifa_name: Mapped[str | None] = mapped_column(String(10))
    country_iso3: Mapped[str | None] = mapped_column(String(3))

    # Current-season statistics: {"id", "season_id", "team_id", "details": [...]}
    statistics: Mapped[dict | None] = mapped_column(JSON_DOCUMENT)

    club_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("clubs.id", ondelete="SET NULL"), index=True
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, onupdate=utcnow
    )

    # Relationships
    club: Mapped["Club | None"] = relationship("Club", back_populates="players")
