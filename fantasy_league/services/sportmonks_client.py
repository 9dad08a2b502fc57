import logging
from collections.abc import AsyncIterator, Iterable
from typing import Any
from urllib.parse import urlencode

import httpx

from fantasy_league.config import get_settings

logger = logging.getLogger(__name__)

# Transport failures worth retrying. HTTP status errors are never retried.
RETRYABLE_EXCEPTIONS = (
    httpx.ConnectTimeout,
    httpx.ReadTimeout,
    httpx.ConnectError,
    httpx.RemoteProtocolError,
)


def join_includes(includes: str | Iterable[str] | None) -> str | None:
    """Join related-resource names with the API's ";" separator."""
    if not includes:
        return None
    if isinstance(includes, str):
        return includes
    names = [name for name in includes if name]
    return ";".join(names) or None


def normalize_data(data: Any) -> list[dict[str, Any]]:
    """A list payload is used as is, a single object is wrapped, anything else is empty."""
    if isinstance(data, list):
        return data
    if data:
        return [data]
    return []


class EndpointBuilder:
    """Builds request URLs for one API base (football or core)."""

    def __init__(self, base_url: str, api_token: str):
        self.base_url = base_url if base_url.endswith("/") else f"{base_url}/"
        self.api_token = api_token

    def build(
        self,
        entity_path: str,
        unique_id: int | str | None = None,
        includes: str | Iterable[str] | None = None,
        page: int = 1,
    ) -> str:
        url = f"{self.base_url}{entity_path.strip('/')}"
        if unique_id is not None:
            url += f"/{unique_id}"

        params: dict[str, Any] = {"api_token": self.api_token}
        include_value = join_includes(includes)
        if include_value:
            params["includes"] = include_value
        if page > 1:
            params["page"] = page

        return f"{url}?{urlencode(params, safe=';')}"


class SportmonksClient:
    """
    Paginated fetcher bound to one API base.

    Pages are requested strictly in sequence; the ``pagination.has_more`` flag
    of each response gates the next request. Any transport failure or
    non-success status aborts the whole fetch and propagates to the caller.
    """

    def __init__(
        self,
        endpoints: EndpointBuilder,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
        log: logging.Logger | None = None,
    ):
        self.endpoints = endpoints
        self.timeout = timeout
        self._transport = transport
        self.log = log or logger

    async def iter_all(
        self,
        entity_path: str,
        includes: str | Iterable[str] | None = None,
        unique_id: int | str | None = None,
    ) -> AsyncIterator[dict[str, Any]]:
        """Yield every item of every page, in page order."""
        page = 1
        async with httpx.AsyncClient(
            timeout=self.timeout,
            transport=self._transport,
            follow_redirects=True,
        ) as client:
            while True:
                url = self.endpoints.build(entity_path, unique_id, includes, page)
                response = await client.get(url, headers={"Accept": "application/json"})
                response.raise_for_status()

                payload = response.json()
                items = normalize_data(payload.get("data") if isinstance(payload, dict) else None)
                for item in items:
                    yield item

                self.log.info(f"Fetched {len(items)} {entity_path} items from page {page}")

                pagination = payload.get("pagination") if isinstance(payload, dict) else None
                if not (pagination or {}).get("has_more"):
                    break
                page += 1

    async def fetch_all(
        self,
        entity_path: str,
        includes: str | Iterable[str] | None = None,
        unique_id: int | str | None = None,
    ) -> list[dict[str, Any]]:
        """Collect ``iter_all`` into a list."""
        return [item async for item in self.iter_all(entity_path, includes, unique_id)]

    async def fetch_one(
        self,
        entity_path: str,
        unique_id: int | str,
        includes: str | Iterable[str] | None = None,
    ) -> dict[str, Any] | None:
        items = await self.fetch_all(entity_path, includes, unique_id)
        return items[0] if items else None


class SportmonksApi:
    """Entity-level calls over the football and core API clients."""

    LEAGUE_INCLUDES = ("currentSeason",)
    SEASON_INCLUDES = ("teams", "fixtures")
    CLUB_INCLUDES = ("players",)
    FIXTURE_INCLUDES = ("lineups", "participants")
    PLAYER_INCLUDES = ("country", "statistics.details", "teams")

    def __init__(self, football: SportmonksClient, core: SportmonksClient):
        self.football = football
        self.core = core

    async def get_leagues(self) -> list[dict[str, Any]]:
        return await self.football.fetch_all("leagues", self.LEAGUE_INCLUDES)

    async def get_season(self, season_id: int) -> dict[str, Any] | None:
        return await self.football.fetch_one("seasons", season_id, self.SEASON_INCLUDES)

    async def get_club(self, club_id: int) -> dict[str, Any] | None:
        return await self.football.fetch_one("teams", club_id, self.CLUB_INCLUDES)

    async def get_fixture(self, fixture_id: int) -> dict[str, Any] | None:
        return await self.football.fetch_one("fixtures", fixture_id, self.FIXTURE_INCLUDES)

    async def get_player(self, player_id: int) -> dict[str, Any] | None:
        return await self.football.fetch_one("players", player_id, self.PLAYER_INCLUDES)

    async def get_types(self) -> list[dict[str, Any]]:
        return await self.core.fetch_all("types")

    async def get_countries(self) -> list[dict[str, Any]]:
        return await self.core.fetch_all("countries")


def build_sportmonks_api(transport: httpx.AsyncBaseTransport | None = None) -> SportmonksApi:
    settings = get_settings()
    token = settings.sportmonks_api_token
    timeout = settings.http_timeout_seconds
    return SportmonksApi(
        football=SportmonksClient(
            EndpointBuilder(settings.football_api_base_url, token), timeout, transport
        ),
        core=SportmonksClient(
            EndpointBuilder(settings.core_api_base_url, token), timeout, transport
        ),
    )


# Singleton instance
_sportmonks_api: SportmonksApi | None = None


def get_sportmonks_api() -> SportmonksApi:
    global _sportmonks_api
    if _sportmonks_api is None:
        _sportmonks_api = build_sportmonks_api()
    return _sportmonks_api
