import enum
from datetime import datetime

from sqlalchemy import DateTime, Enum, Integer
from sqlalchemy.orm import Mapped, mapped_column

from fantasy_league.database import Base


class EntityType(str, enum.Enum):
    LEAGUES = "leagues"
    SEASONS = "seasons"
    CLUBS = "clubs"
    FIXTURES = "fixtures"
    PLAYERS = "players"
    TYPES = "types"
    COUNTRIES = "countries"


class SyncStatus(Base):
    """Last successful sync per entity type. Rows are created on first use."""
    __tablename__ = "sync_statuses"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    entity_type: Mapped[EntityType] = mapped_column(
        Enum(
            EntityType,
            name="sync_entity_type",
            native_enum=False,
            values_callable=lambda members: [m.value for m in members],
        ),
        unique=True,
        nullable=False,
    )
    last_synced_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
