from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Protocol, runtime_checkable

from sqlalchemy import text

from leave_desk.models.storage import StorageEntry

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

logger = logging.getLogger(__name__)


@runtime_checkable
class KeyValueStorage(Protocol):
    """Durable string key-value store backing the request store."""

    async def get(self, key: str) -> str | None:
        """Return the stored value, or None if the key is absent."""
        ...

    async def set(self, key: str, value: str) -> None:
        """Write value under key, replacing any previous value."""
        ...

    async def delete(self, key: str) -> bool:
        """Remove key. Returns True if something was deleted."""
        ...

    async def ping(self) -> None:
        """Raise if the backend is unreachable."""
        ...


class InMemoryKeyValueStorage:
    """In-memory implementation for development and tests."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._values: dict[str, str] = dict(initial or {})

    def keys(self) -> list[str]:
        return list(self._values)

    async def get(self, key: str) -> str | None:
        return self._values.get(key)

    async def set(self, key: str, value: str) -> None:
        self._values[key] = value

    async def delete(self, key: str) -> bool:
        return self._values.pop(key, None) is not None

    async def ping(self) -> None:
        return None


class DatabaseKeyValueStorage:
    """Key-value storage over the ``storage_entry`` table.

    Each call opens its own session and commits before returning.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def get(self, key: str) -> str | None:
        async with self._session_factory() as session:
            entry = await session.get(StorageEntry, key)
            return entry.value if entry is not None else None

    async def set(self, key: str, value: str) -> None:
        async with self._session_factory() as session:
            entry = await session.get(StorageEntry, key)
            if entry is None:
                session.add(StorageEntry(key=key, value=value))
            else:
                entry.value = value
            await session.commit()
        logger.debug("Stored %d bytes under %s", len(value), key)

    async def delete(self, key: str) -> bool:
        async with self._session_factory() as session:
            entry = await session.get(StorageEntry, key)
            if entry is None:
                return False
            await session.delete(entry)
            await session.commit()
            return True

    async def ping(self) -> None:
        async with self._session_factory() as session:
            await session.execute(text("SELECT 1"))
