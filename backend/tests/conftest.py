from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

import pytest
from httpx import ASGITransport, AsyncClient

from leave_desk.api.deps import get_request_store
from leave_desk.main import app
from leave_desk.services.storage import InMemoryKeyValueStorage
from leave_desk.services.store import RequestStore

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

STORAGE_KEY = "leave-desk:requests:test"


class SlowStorage(InMemoryKeyValueStorage):
    """Storage that yields to other tasks before every write."""

    async def set(self, key: str, value: str) -> None:
        await asyncio.sleep(0.01)
        await super().set(key, value)


@pytest.fixture
def storage() -> InMemoryKeyValueStorage:
    return InMemoryKeyValueStorage()


@pytest.fixture
async def store(storage: InMemoryKeyValueStorage) -> RequestStore:
    """An empty store persisted to in-memory storage."""
    return await RequestStore.open(storage, STORAGE_KEY, seed=list)


@pytest.fixture
async def slow_store() -> RequestStore:
    """An empty store whose writes suspend, so concurrent mutations interleave."""
    return await RequestStore.open(SlowStorage(), STORAGE_KEY, seed=list)


@pytest.fixture
async def async_client(store: RequestStore) -> AsyncIterator[AsyncClient]:
    """Async HTTP client with the request store dependency overridden."""
    app.dependency_overrides[get_request_store] = lambda: store
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()
