from typing import AsyncGenerator

import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from libs.db.base import Base
from libs.db.config import build_engine, build_session_factory
from services.market_service.app.main import create_app
from services.market_service.services.market import MarketState
from services.market_service.services.persistence import SqlSnapshotStore
from sqlalchemy.ext.asyncio import AsyncEngine

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

BUYER = ("buyer@example.com", "password123")
FARMER = ("farmer@example.com", "password123")
OWNER = ("owner@example.com", "password123")
ADMIN = ("admin@example.com", "admin@123")


@pytest_asyncio.fixture
async def test_engine() -> AsyncGenerator[AsyncEngine, None]:
    """
    A fresh in-memory SQLite database per test, with the snapshot table created.
    """
    engine = build_engine(TEST_DATABASE_URL)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture
async def snapshot_store(test_engine) -> SqlSnapshotStore:
    return SqlSnapshotStore(build_session_factory(test_engine))


@pytest_asyncio.fixture
async def market(snapshot_store) -> MarketState:
    """Market state loaded from an empty database, i.e. from seed data."""
    return await MarketState.open(snapshot_store)


@pytest_asyncio.fixture
async def buyer_session(market) -> str:
    """Session id of the seeded buyer (wallet 100, Bengaluru address)."""
    _, session = await market.accounts.login(*BUYER)
    return session.id


@pytest_asyncio.fixture
async def client(market) -> AsyncGenerator[AsyncClient, None]:
    """
    Yield an AsyncClient bound to an app serving the ``market`` fixture.
    """
    app = create_app(market)
    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test"
    ) as ac:
        yield ac


async def login(client: AsyncClient, email: str, password: str) -> dict:
    """Log in through the API and return bearer headers."""
    response = await client.post(
        "/auth/login", json={"email": email, "password": password}
    )
    assert response.status_code == 200, response.text
    return {"Authorization": f"Bearer {response.json()['access_token']}"}


@pytest_asyncio.fixture
async def buyer_headers(client) -> dict:
    return await login(client, *BUYER)


@pytest_asyncio.fixture
async def farmer_headers(client) -> dict:
    return await login(client, *FARMER)


@pytest_asyncio.fixture
async def admin_headers(client) -> dict:
    return await login(client, *ADMIN)
