"""
Base class and utilities for sync services.

Contains the shared session/logger wiring and the upsert statement builder
used by every sync service.
"""
import logging
from typing import Any

from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql.dml import Insert

from fantasy_league.database import Base

logger = logging.getLogger(__name__)


def upsert_statement(
    db: AsyncSession,
    model: type[Base],
    unique_key: str,
    values: dict[str, Any],
) -> Insert:
    """
    Build ``INSERT ... ON CONFLICT (unique_key) DO UPDATE`` for ``values``.

    Only the columns present in ``values`` are overwritten on conflict.
    PostgreSQL in production, SQLite in tests.
    """
    dialect = db.get_bind().dialect.name
    insert = sqlite.insert if dialect == "sqlite" else postgresql.insert

    stmt = insert(model).values(**values)
    update_columns = {
        column: stmt.excluded[column] for column in values if column != unique_key
    }
    if not update_columns:
        return stmt.on_conflict_do_nothing(index_elements=[unique_key])
    return stmt.on_conflict_do_update(index_elements=[unique_key], set_=update_columns)


class BaseSyncService:
    """
    Base class for all sync services.

    Holds the database session and the logger every sync component writes to.
    """

    def __init__(self, db: AsyncSession, log: logging.Logger | None = None):
        """
        Initialize the sync service.

        Args:
            db: SQLAlchemy async session
            log: Logger to report progress to (module logger if not provided)
        """
        self.db = db
        self.log = log or logging.getLogger(type(self).__module__)
