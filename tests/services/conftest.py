"""Service test fixtures - async DB + FastAPI test client.

Invariants:
    - Every test gets a fresh in-memory SQLite database
    - get_db dependency overridden to use test DB session
    - db_manager patched so the readiness probe sees the test engine
    - The in-memory game table and the remote search client are reset per test

Design Decisions:
    - SQLite in-memory: fast, no external dependency, sufficient for route tests
    - Lifespan is not run by ASGITransport: logging, tables and the remote client
      are set up here instead
"""

import httpx
import pytest
from sqlalchemy.ext.asyncio import (
    AsyncSession, create_async_engine, async_sessionmaker,
)
from httpx import ASGITransport, AsyncClient

import tour_scorecard.infrastructure.course_search_client as course_search
import tour_scorecard.infrastructure.database as db_module
from tour_scorecard.db.base import Base
from tour_scorecard.infrastructure.course_search_client import (
    CourseSearchCache, CourseSearchClient,
)
from tour_scorecard.infrastructure.database import get_db, DatabaseSessionManager
from tour_scorecard.main import app
from tour_scorecard.services import handle_game
import tour_scorecard.models  # noqa: F401  (registers tables on Base.metadata)


@pytest.fixture(autouse=True)
def _reset_games():
    handle_game._games.clear()
    yield
    handle_game._games.clear()


@pytest.fixture
async def test_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:", echo=False,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
async def test_session_factory(test_engine):
    return async_sessionmaker(
        test_engine, class_=AsyncSession, expire_on_commit=False,
    )


@pytest.fixture
async def test_db(test_session_factory):
    async with test_session_factory() as session:
        yield session


@pytest.fixture
async def client(test_engine, test_session_factory):
    """FastAPI test client with DB dependency overridden."""
    async def override_get_db():
        async with test_session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db

    original_manager = db_module.db_manager
    fake_manager = DatabaseSessionManager.__new__(DatabaseSessionManager)
    fake_manager.engine = test_engine
    fake_manager._session_factory = test_session_factory
    db_module.db_manager = fake_manager

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()
    db_module.db_manager = original_manager


def _tee(par: int = 4, holes: int = 18) -> dict:
    return {
        "tee_name": "Blue",
        "total_yards": 400 * holes,
        "holes": [{"par": par, "yardage": 400, "handicap": n} for n in range(1, holes + 1)],
    }


def _remote_course(course_id: int = 42, holes: int = 18) -> dict:
    return {
        "id": course_id,
        "club_name": "Pine Club",
        "course_name": "North",
        "location": {"city": "Aiken", "state": "SC"},
        "tees": {"male": [_tee(holes=holes)]},
    }


@pytest.fixture
def remote_course():
    """Factory for one course record in the remote directory's response format."""
    return _remote_course


@pytest.fixture
def remote_api():
    """Fake course directory: records requests, answers from `responses` in order.

    Each entry in responses is an httpx.Response or an exception to raise;
    once a single entry is left it is reused for every further request.
    """
    calls: list[httpx.Request] = []
    responses: list = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        result = responses.pop(0) if len(responses) > 1 else responses[0]
        if isinstance(result, Exception):
            raise result
        return result

    return {"calls": calls, "responses": responses, "transport": httpx.MockTransport(handler)}


@pytest.fixture
async def search_client(remote_api):
    """CourseSearchClient on the fake transport with zero backoff."""
    c = CourseSearchClient(
        "https://courses.test/v1", "test-key", CourseSearchCache(ttl_seconds=60),
        base_delay_ms=0, transport=remote_api["transport"],
    )
    yield c
    await c.aclose()


@pytest.fixture
def configured_search(monkeypatch, search_client):
    """Install search_client as the app-wide remote course search."""
    monkeypatch.setattr(course_search, "search_client", search_client)
    return search_client
