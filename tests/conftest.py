import pytest
from datetime import date, datetime, timezone
from typing import AsyncGenerator

import httpx
from httpx import AsyncClient, ASGITransport
from sqlalchemy import event
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.pool import StaticPool

from fantasy_league.main import app
from fantasy_league.database import Base
from fantasy_league.api.deps import get_db  # Import from where routes actually use it
from fantasy_league.models import Club, League, Player, Season, TypeDefinition, User
from fantasy_league.security import hash_password
from fantasy_league.services.sportmonks_client import (
    EndpointBuilder,
    SportmonksApi,
    SportmonksClient,
)


TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"
FOOTBALL_BASE = "https://api.test/v3/football/"
CORE_BASE = "https://api.test/v3/core/"


# Note: Using pytest-asyncio's built-in event_loop fixture (asyncio_mode = auto)


@pytest.fixture(scope="function")
async def test_engine():
    """Create test database engine."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    # pysqlite's own transaction handling breaks SAVEPOINT; let SQLAlchemy emit BEGIN
    @event.listens_for(engine.sync_engine, "connect")
    def do_connect(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(engine.sync_engine, "begin")
    def do_begin(conn):
        conn.exec_driver_sql("BEGIN")

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest.fixture(scope="function")
async def test_session(test_engine) -> AsyncGenerator[AsyncSession, None]:
    """Create test database session."""
    async_session = async_sessionmaker(
        test_engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )

    async with async_session() as session:
        yield session


@pytest.fixture(scope="function")
async def client(test_session) -> AsyncGenerator[AsyncClient, None]:
    """Create test client with overridden database dependency."""

    async def override_get_db():
        yield test_session

    app.dependency_overrides[get_db] = override_get_db

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test"
    ) as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture
async def auth_client(client, sample_user) -> AsyncClient:
    """Client carrying the session cookie of ``sample_user``."""
    response = await client.post(
        "/api/v1/users/login",
        json={"username": sample_user.username, "password": "secret-password"},
    )
    assert response.status_code == 200
    return client


# --- Fake upstream ---

class FakeSportmonks:
    """
    In-memory Sportmonks API behind an ``httpx.MockTransport``.

    ``pages`` maps a path (relative to the API base, e.g. "football/leagues")
    to the list of pages returned for it; ``failures`` maps a path to the
    status code it answers with. Every request is recorded.
    """

    def __init__(self):
        self.pages: dict[str, list[list[dict] | dict]] = {}
        self.failures: dict[str, int] = {}
        self.requests: list[httpx.Request] = []

    def add(self, path: str, *pages):
        self.pages[path] = list(pages)

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path.removeprefix("/v3/")
        if path in self.failures:
            return httpx.Response(self.failures[path], json={"message": "error"})
        if path not in self.pages:
            return httpx.Response(404, json={"message": "not found"})

        pages = self.pages[path]
        page = int(request.url.params.get("page", "1"))
        body = {"data": pages[page - 1]}
        body["pagination"] = {"current_page": page, "has_more": page < len(pages)}
        return httpx.Response(200, json=body)

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    def api(self) -> SportmonksApi:
        transport = self.transport()
        return SportmonksApi(
            football=SportmonksClient(EndpointBuilder(FOOTBALL_BASE, "test-token"), transport=transport),
            core=SportmonksClient(EndpointBuilder(CORE_BASE, "test-token"), transport=transport),
        )


@pytest.fixture
def fake_sportmonks() -> FakeSportmonks:
    return FakeSportmonks()


# --- Data Fixtures ---

@pytest.fixture
async def sample_user(test_session) -> User:
    """Create a sample user (password: secret-password)."""
    user = User(
        email="manager@example.com",
        username="manager",
        password_hash=hash_password("secret-password"),
    )
    test_session.add(user)
    await test_session.commit()
    await test_session.refresh(user)
    return user


@pytest.fixture
async def sample_league(test_session) -> League:
    league = League(
        id=8,
        country_id=462,
        name="Premier League",
        short_code="UK PL",
        season_id=23614,
        season_name="2024/2025",
        season_start=date(2024, 8, 16),
        season_end=date(2025, 5, 25),
    )
    test_session.add(league)
    await test_session.commit()
    return league


@pytest.fixture
async def sample_season(test_session, sample_league) -> Season:
    season = Season(
        id=23614,
        name="2024/2025",
        league_id=sample_league.id,
        start_date=date(2024, 8, 16),
        end_date=date(2025, 5, 25),
        club_ids=[1, 9],
        fixture_ids=[19134454],
    )
    test_session.add(season)
    await test_session.commit()
    return season


@pytest.fixture
async def sample_club(test_session, sample_league) -> Club:
    club = Club(
        id=9,
        country_id=462,
        name="Manchester City",
        short_code="MCI",
        logo="https://cdn.test/teams/9.png",
        league_id=sample_league.id,
        roster=[154421],
    )
    test_session.add(club)
    await test_session.commit()
    return club


@pytest.fixture
async def sample_players(test_session, sample_club) -> list[Player]:
    players = [
        Player(id=154421, name="Erling Haaland", display_name="Erling Haaland", club_id=sample_club.id),
        Player(id=96611, name="Kevin De Bruyne", display_name="Kevin De Bruyne", club_id=sample_club.id),
        Player(id=31000, name="Free Agent", display_name="Free Agent"),
    ]
    test_session.add_all(players)
    await test_session.commit()
    return players


@pytest.fixture
async def sample_types(test_session) -> list[TypeDefinition]:
    types = [
        TypeDefinition(id=24, name="Goalkeeper", code="goalkeeper", model_type="position"),
        TypeDefinition(id=27, name="Attacker", code="attacker", model_type="position"),
        TypeDefinition(id=52, name="Goals", code="goals", model_type="statistic", stat_group="offensive"),
    ]
    test_session.add_all(types)
    await test_session.commit()
    return types


@pytest.fixture
def fixed_now() -> datetime:
    return datetime(2025, 3, 1, 12, 0, tzinfo=timezone.utc)
