from datetime import datetime

from sqlalchemy import DateTime, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from fantasy_league.database import Base
from fantasy_league.utils.timestamps import utcnow


class Country(Base):
    """Country reference data from the core API."""
    __tablename__ = "countries"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=False)
    name: Mapped[str | None] = mapped_column(String(100))
    fifa_name: Mapped[str | None] = mapped_column(String(10))
    iso3: Mapped[str | None] = mapped_column(String(3))
    flag: Mapped[str | None] = mapped_column(String(500))

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, onupdate=utcnow
    )
