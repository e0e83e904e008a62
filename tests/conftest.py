from __future__ import annotations

from collections.abc import AsyncIterator
from pathlib import Path
import sys
from typing import Any, Dict, Optional

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from mongomock_motor import AsyncMongoMockClient

SERVICE_ROOT = Path(__file__).resolve().parents[1]
if str(SERVICE_ROOT) not in sys.path:
    sys.path.insert(0, str(SERVICE_ROOT))

from calvincrush.main import app
from calvincrush.db import close_mongo_connection, connect_to_mongo
from calvincrush.config import get_settings
from calvincrush.integrations.zip_lookup import ZipCodeLookup, get_zip_code_lookup


class FakeZipCodeLookup(ZipCodeLookup):
    """In-memory ZIP table so distance tests do not depend on the bundled dataset."""

    def __init__(self, table: Dict[str, tuple[float, float]]) -> None:
        self.table = table

    def lookup(self, zip_code: Optional[str]) -> Optional[tuple[float, float]]:
        if not isinstance(zip_code, str):
            return None
        return self.table.get(zip_code.strip())


ZIP_TABLE = {
    "10001": (40.7506, -73.9972),
    "10002": (40.7157, -73.9863),
    "60601": (41.8858, -87.6181),
}


@pytest.fixture(autouse=True)
def _env_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("MONGO_URI", "mongodb://localhost:27017/test")
    monkeypatch.setenv("MONGO_DB_NAME", "calvincrush-test")
    get_settings.cache_clear()  # type: ignore[attr-defined]


@pytest_asyncio.fixture
async def mongo_client(monkeypatch: pytest.MonkeyPatch) -> AsyncIterator[AsyncMongoMockClient]:
    client = AsyncMongoMockClient()

    def _client_factory(*_args, **_kwargs) -> AsyncMongoMockClient:
        return client

    monkeypatch.setattr("calvincrush.db.AsyncIOMotorClient", _client_factory)
    yield client
    client.close()


@pytest.fixture
def zip_lookup() -> FakeZipCodeLookup:
    return FakeZipCodeLookup(dict(ZIP_TABLE))


@pytest_asyncio.fixture
async def api_client(
    mongo_client: AsyncMongoMockClient,
    zip_lookup: FakeZipCodeLookup,
) -> AsyncIterator[AsyncClient]:
    await connect_to_mongo()
    app.dependency_overrides[get_zip_code_lookup] = lambda: zip_lookup
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://testserver") as client:
        yield client
    app.dependency_overrides.clear()
    await close_mongo_connection()


_counter = {"n": 0}


def _next_email(prefix: str) -> str:
    _counter["n"] += 1
    return f"{prefix}{_counter['n']}@example.com"


@pytest_asyncio.fixture
async def create_user(api_client: AsyncClient):
    async def _create(**overrides: Any) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "email": _next_email(overrides.get("name", "user").lower()),
            "password": "s3cret-pass",
            "gender": "male",
            "name": "User",
            "age": 25,
        }
        payload.update(overrides)
        response = await api_client.post("/api/users", json=payload)
        assert response.status_code == 201, response.text
        return response.json()

    return _create
