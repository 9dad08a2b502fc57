from unittest.mock import AsyncMock

import httpx
import pytest
from sqlalchemy import select

from fantasy_league.models import Country, Season, User
from fantasy_league.services.sync.entity_saver import EntitySaver
from fantasy_league.services.sync.mappers import map_country, map_season


def _country(country_id: int, name: str) -> dict:
    return {"id": country_id, "name": name, "fifa_name": name[:3].upper(), "iso3": name[:3].upper()}


async def _countries(session) -> dict[int, Country]:
    result = await session.execute(select(Country))
    return {country.id: country for country in result.scalars().all()}


@pytest.mark.asyncio
class TestBulkMode:
    async def test_upsert_is_idempotent_and_last_write_wins(self, test_session):
        saver = EntitySaver(test_session)
        first = AsyncMock(return_value=[_country(1, "England"), _country(2, "Spain")])
        second = AsyncMock(return_value=[_country(1, "England and Wales"), _country(2, "Spain")])

        await saver.save_entities(first, Country, "id", map_country)
        result = await saver.save_entities(second, Country, "id", map_country)

        countries = await _countries(test_session)
        assert sorted(countries) == [1, 2]
        assert countries[1].name == "England and Wales"
        assert result.saved == 2
        assert result.failed == 0

    async def test_single_object_payload_is_saved(self, test_session):
        saver = EntitySaver(test_session)
        fetch = AsyncMock(return_value=_country(5, "Brazil"))

        result = await saver.save_entities(fetch, Country, "id", map_country)

        assert result.fetched == 1
        assert (await _countries(test_session))[5].name == "Brazil"
        fetch.assert_awaited_once_with()

    async def test_bulk_fetch_failure_propagates(self, test_session):
        saver = EntitySaver(test_session)
        fetch = AsyncMock(side_effect=httpx.ConnectError("unreachable"))

        with pytest.raises(httpx.ConnectError):
            await saver.save_entities(fetch, Country, "id", map_country)

    async def test_mapping_failure_skips_only_that_item(self, test_session):
        def mapper(raw):
            if raw["id"] == 2:
                raise KeyError("country")
            return map_country(raw)

        saver = EntitySaver(test_session)
        fetch = AsyncMock(return_value=[_country(1, "England"), _country(2, "Spain"), _country(3, "Italy")])

        result = await saver.save_entities(fetch, Country, "id", mapper)

        assert sorted(await _countries(test_session)) == [1, 3]
        assert result.saved == 2
        assert result.failed == 1

    async def test_item_without_unique_key_is_skipped(self, test_session):
        saver = EntitySaver(test_session)
        fetch = AsyncMock(return_value=[{"name": "Nowhere"}, _country(4, "France")])

        result = await saver.save_entities(fetch, Country, "id", map_country)

        assert sorted(await _countries(test_session)) == [4]
        assert result.failed == 1

    async def test_write_failure_skips_only_that_item(self, test_session):
        def mapper(raw):
            values = {"username": raw["username"], "password_hash": "x"}
            if raw.get("email"):
                values["email"] = raw["email"]
            return values

        saver = EntitySaver(test_session)
        fetch = AsyncMock(return_value=[
            {"id": 1, "username": "one", "email": "one@example.com"},
            {"id": 2, "username": "two"},  # email is NOT NULL
            {"id": 3, "username": "three", "email": "three@example.com"},
        ])

        result = await saver.save_entities(fetch, User, "id", mapper, entity_name="user")

        users = (await test_session.execute(select(User.id).order_by(User.id))).scalars().all()
        assert users == [1, 3]
        assert result.saved == 2
        assert result.failed == 1


@pytest.mark.asyncio
class TestPerIdMode:
    async def test_failed_fetch_does_not_abort_batch(self, test_session):
        async def fetch(country_id):
            if country_id == 3:
                raise httpx.HTTPStatusError(
                    "server error",
                    request=httpx.Request("GET", "https://api.test"),
                    response=httpx.Response(500),
                )
            return _country(country_id, f"Country {country_id}")

        saver = EntitySaver(test_session)
        result = await saver.save_entities(fetch, Country, "id", map_country, ids=[1, 2, 3, 4, 5])

        assert sorted(await _countries(test_session)) == [1, 2, 4, 5]
        assert result.fetched == 4
        assert result.saved == 4
        assert result.failed == 1

    async def test_missing_entity_contributes_nothing(self, test_session):
        fetch = AsyncMock(side_effect=[_country(1, "England"), None])

        result = await EntitySaver(test_session).save_entities(
            fetch, Country, "id", map_country, ids=[1, 2]
        )

        assert result.saved == 1
        assert result.failed == 0

    async def test_every_fetch_failing_is_absorbed(self, test_session):
        fetch = AsyncMock(side_effect=RuntimeError("boom"))

        result = await EntitySaver(test_session).save_entities(
            fetch, Country, "id", map_country, ids=[1, 2]
        )

        assert result.as_dict() == {"fetched": 0, "saved": 0, "failed": 2}
        assert await _countries(test_session) == {}

    async def test_empty_ids_skip_fetching(self, test_session):
        fetch = AsyncMock()

        result = await EntitySaver(test_session).save_entities(
            fetch, Country, "id", map_country, ids=[]
        )

        assert result.as_dict() == {"fetched": 0, "saved": 0, "failed": 0}
        fetch.assert_not_awaited()

    async def test_duplicate_ids_are_fetched_once(self, test_session):
        fetch = AsyncMock(side_effect=lambda country_id: _country(country_id, "Spain"))

        await EntitySaver(test_session).save_entities(
            fetch, Country, "id", map_country, ids=[7, 7, 7]
        )

        assert fetch.await_count == 1

    async def test_concurrency_cap(self, test_session):
        fetch = AsyncMock(side_effect=lambda country_id: _country(country_id, f"Country {country_id}"))

        result = await EntitySaver(test_session, concurrency=2).save_entities(
            fetch, Country, "id", map_country, ids=range(1, 7)
        )

        assert result.saved == 6

    async def test_transient_error_is_retried(self, test_session):
        fetch = AsyncMock(side_effect=[httpx.ConnectTimeout("timeout"), _country(1, "England")])

        result = await EntitySaver(test_session).save_entities(
            fetch, Country, "id", map_country, ids=[1]
        )

        assert result.saved == 1
        assert fetch.await_count == 2

    async def test_derived_arrays_are_replaced_in_full(self, test_session):
        saver = EntitySaver(test_session)
        season = {"id": 10, "name": "2024/2025", "league_id": 8, "teams": [{"id": 1}, {"id": 2}], "fixtures": []}

        await saver.save_entities(AsyncMock(return_value=[season]), Season, "id", map_season)
        season["teams"] = [{"id": 3}]
        await saver.save_entities(AsyncMock(return_value=[season]), Season, "id", map_season)

        stored = (await test_session.execute(select(Season))).scalar_one()
        await test_session.refresh(stored)
        assert stored.club_ids == [3]
