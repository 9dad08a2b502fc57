"""
Generic fetch → map → upsert engine shared by every entity type.

The fetch strategy, target model, unique key and mapper are all injected, so
the same loop serves leagues, seasons, clubs, fixtures, players, types and
countries.
"""
import asyncio
import logging
from collections.abc import Awaitable, Callable, Iterable
from dataclasses import dataclass
from typing import Any

from sqlalchemy.exc import SQLAlchemyError
from tenacity import (
    retry,
    stop_after_attempt,
    wait_exponential,
    retry_if_exception_type,
    before_sleep_log,
)

from fantasy_league.database import Base
from fantasy_league.services.sportmonks_client import RETRYABLE_EXCEPTIONS, normalize_data
from fantasy_league.services.sync.base import BaseSyncService, upsert_statement
from fantasy_league.services.sync.errors import MappingError
from fantasy_league.utils.timestamps import utcnow

logger = logging.getLogger(__name__)

RawItem = dict[str, Any]
FetchFunction = Callable[..., Awaitable[Any]]
MapFunction = Callable[[RawItem], dict[str, Any]]


@dataclass
class SaveResult:
    entity_name: str
    fetched: int = 0
    saved: int = 0
    failed: int = 0

    def as_dict(self) -> dict[str, int]:
        return {"fetched": self.fetched, "saved": self.saved, "failed": self.failed}


@retry(
    stop=stop_after_attempt(3),
    wait=wait_exponential(multiplier=1, min=2, max=30),
    retry=retry_if_exception_type(RETRYABLE_EXCEPTIONS),
    before_sleep=before_sleep_log(logger, logging.WARNING),
    reraise=True,
)
async def fetch_with_retry(fetch: FetchFunction, entity_id: int) -> Any:
    """
    Call ``fetch(entity_id)``, retrying transient transport failures.

    Retries up to 3 times with exponential backoff (2s, 4s, 8s...) on
    connection/read timeouts and connection errors. HTTP status errors and
    anything else propagate immediately.
    """
    return await fetch(entity_id)


class EntitySaver(BaseSyncService):
    """
    Fetches raw entities and upserts each one into its table.

    Failures are contained per item: a failed per-id fetch, a mapping error or
    a rejected write is logged and skipped without aborting the batch.
    """

    def __init__(self, db, log: logging.Logger | None = None, concurrency: int | None = None):
        super().__init__(db, log)
        self.concurrency = concurrency

    async def save_entities(
        self,
        fetch: FetchFunction,
        model: type[Base],
        unique_key: str,
        map_to_schema: MapFunction,
        ids: Iterable[int] | None = None,
        entity_name: str | None = None,
    ) -> SaveResult:
        """
        Fetch and upsert entities.

        Args:
            fetch: ``fetch()`` returning the whole collection (bulk mode), or
                ``fetch(id)`` returning one entity (per-id mode)
            model: Target ORM model
            unique_key: Field of the raw item (and column) the upsert keys on
            map_to_schema: Maps one raw item to the column values to set
            ids: Entity ids to fetch one by one; bulk mode when None
            entity_name: Singular name used in log lines

        Returns:
            SaveResult with fetched/saved/failed counts

        Raises:
            Whatever the bulk fetch raises. Per-id fetch failures are only
            counted.
        """
        name = entity_name or model.__tablename__
        result = SaveResult(entity_name=name)

        if ids is None:
            self.log.info(f"Fetching {name} entities in bulk")
            items = normalize_data(await fetch())
        else:
            id_list = list(dict.fromkeys(ids))
            if not id_list:
                self.log.warning(f"No {name} ids provided, skipping fetch")
                return result
            items = await self._fetch_many(fetch, id_list, name, result)

        result.fetched = len(items)
        if not items:
            self.log.warning(f"No {name} entities found for saving after fetching from API")
            return result

        self.log.info(f"Fetched {len(items)} {name} entities from API for saving")

        has_updated_at = "updated_at" in model.__table__.columns
        for item in items:
            key = item.get(unique_key) if isinstance(item, dict) else None
            try:
                if key is None:
                    raise MappingError(name, key, f"missing unique key '{unique_key}'")
                values = dict(map_to_schema(item))
            except Exception as exc:
                self.log.error(f"Error mapping {name} (ID: {key}): {exc}")
                result.failed += 1
                continue

            values[unique_key] = key
            if has_updated_at:
                values["updated_at"] = utcnow()

            try:
                async with self.db.begin_nested():
                    await self.db.execute(upsert_statement(self.db, model, unique_key, values))
            except SQLAlchemyError as exc:
                self.log.error(f"Error saving/updating {name} (ID: {key}): {exc}")
                result.failed += 1
                continue

            result.saved += 1

        await self.db.commit()
        self.log.info(
            f"Saved {result.saved} {name} entities ({result.failed} failed, {result.fetched} fetched)"
        )
        return result

    async def _fetch_many(
        self,
        fetch: FetchFunction,
        ids: list[int],
        name: str,
        result: SaveResult,
    ) -> list[RawItem]:
        """Fetch every id concurrently; failed ids contribute nothing."""
        self.log.info(f"Starting to fetch {name} data for {len(ids)} ids")
        semaphore = asyncio.Semaphore(self.concurrency) if self.concurrency else None

        async def fetch_id(entity_id: int) -> list[RawItem] | None:
            try:
                if semaphore is None:
                    data = await fetch_with_retry(fetch, entity_id)
                else:
                    async with semaphore:
                        data = await fetch_with_retry(fetch, entity_id)
            except Exception as exc:
                self.log.error(f"Failed to fetch {name} ID {entity_id}: {type(exc).__name__}: {exc}")
                return None
            return normalize_data(data)

        fetched = await asyncio.gather(*(fetch_id(entity_id) for entity_id in ids))

        result.failed += sum(1 for batch in fetched if batch is None)

        return [item for batch in fetched if batch for item in batch]
