# tests/conftest.py
from datetime import datetime, timedelta, timezone

import pytest
from httpx import AsyncClient, ASGITransport
from asgi_lifespan import LifespanManager
from foodmatch.main import app

NOW = datetime(2025, 3, 1, 12, 0, tzinfo=timezone.utc)
RECIPIENT = {"lat": 12.9716, "lng": 77.5946}

@pytest.fixture(scope="session")
def anyio_backend():
    # keep AnyIO on asyncio for the whole test session
    return "asyncio"

@pytest.fixture(scope="session")
async def test_client():
    # Start FastAPI lifespan once for the whole session
    async with LifespanManager(app):
        transport = ASGITransport(app=app, raise_app_exceptions=True)
        async with AsyncClient(transport=transport, base_url="http://test") as ac:
            yield ac

@pytest.fixture
def now():
    return NOW

@pytest.fixture
def recipient():
    return dict(RECIPIENT)

def offset_north(km: float) -> float:
    """Latitude of a point `km` due north of the recipient (1 deg lat ~ 111.195 km)."""
    return RECIPIENT["lat"] + km / 111.19492664455873

def expiring_in(minutes: float) -> str:
    return (NOW + timedelta(minutes=minutes)).isoformat()
