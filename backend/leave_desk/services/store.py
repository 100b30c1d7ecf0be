"""Authoritative collection of leave requests, persisted as one JSON array."""

from __future__ import annotations

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING, Any

from pydantic import TypeAdapter, ValidationError

from leave_desk.exceptions import (
    ConcurrencyConflictError,
    DuplicateRequestError,
    RequestNotFoundError,
    ValidationFailure,
)
from leave_desk.schemas.request import LeaveRequest, format_request_id, request_sequence

if TYPE_CHECKING:
    from collections.abc import AsyncIterator, Callable, Iterable, Mapping, Sequence

    from leave_desk.services.storage import KeyValueStorage

logger = logging.getLogger(__name__)

_requests_adapter: TypeAdapter[list[LeaveRequest]] = TypeAdapter(list[LeaveRequest])

_IMMUTABLE_FIELDS = frozenset({"id", "created_at", "version"})
_UPDATABLE_FIELDS = frozenset(LeaveRequest.model_fields) - _IMMUTABLE_FIELDS


def _load(raw: str) -> list[LeaveRequest] | None:
    """Parse a stored array. Returns None when the value is unusable."""
    try:
        requests = _requests_adapter.validate_json(raw)
    except ValidationError:
        return None
    if len({r.id for r in requests}) != len(requests):
        return None
    return requests


def _apply(current: LeaveRequest, fields: Mapping[str, Any]) -> LeaveRequest:
    """Merge fields into a copy of current and validate the result."""
    immutable = _IMMUTABLE_FIELDS.intersection(fields)
    if immutable:
        raise ValidationFailure(f"Fields cannot be updated: {', '.join(sorted(immutable))}")
    unknown = set(fields) - _UPDATABLE_FIELDS
    if unknown:
        raise ValidationFailure(f"Unknown fields: {', '.join(sorted(unknown))}")

    merged = current.model_dump()
    if ("start_date" in fields or "end_date" in fields) and "total_days" not in fields:
        merged.pop("total_days")
    merged.update(fields)
    merged["version"] = current.version + 1
    try:
        return LeaveRequest.model_validate(merged)
    except ValidationError as exc:
        raise ValidationFailure(f"Invalid update for {current.id}: {exc.errors()[0]['msg']}") from exc


class RequestStore:
    """Ordered, durable collection of leave requests (newest first).

    Construct with :meth:`open`, which loads the collection from storage or
    seeds it. Every mutation rewrites the full collection under ``key``; the
    in-memory state only changes after the write succeeds.

    Mutations are serialized by a lock held from the read of the current
    collection until the new one is swapped in. Callers that check state
    before mutating wrap both steps in :meth:`transaction`.
    """

    def __init__(self, storage: KeyValueStorage, key: str, requests: Iterable[LeaveRequest] = ()) -> None:
        self._storage = storage
        self._key = key
        self._requests: list[LeaveRequest] = list(requests)
        self._lock = asyncio.Lock()
        self._lock_owner: asyncio.Task[Any] | None = None

    @classmethod
    async def open(
        cls,
        storage: KeyValueStorage,
        key: str,
        *,
        seed: Callable[[], Iterable[LeaveRequest]],
        deprecated_keys: Iterable[str] = (),
    ) -> RequestStore:
        """Purge deprecated keys, then load the collection or reseed it.

        A missing or corrupt value is replaced with ``seed()``, which is
        persisted immediately.
        """
        for old_key in deprecated_keys:
            if old_key != key and await storage.delete(old_key):
                logger.info("Purged deprecated storage key %s", old_key)

        raw = await storage.get(key)
        requests = _load(raw) if raw is not None else None
        if requests is not None:
            logger.info("Loaded %d requests from %s", len(requests), key)
            return cls(storage, key, requests)

        if raw is None:
            logger.info("No requests stored under %s, seeding", key)
        else:
            logger.warning("Discarding corrupt data stored under %s, reseeding", key)

        seeded = list(seed())
        if len({r.id for r in seeded}) != len(seeded):
            msg = "Seed data contains duplicate request ids"
            raise ValueError(msg)
        store = cls(storage, key)
        await store._commit(seeded)
        return store

    @property
    def storage(self) -> KeyValueStorage:
        return self._storage

    @property
    def key(self) -> str:
        return self._key

    def __len__(self) -> int:
        return len(self._requests)

    def list(self) -> list[LeaveRequest]:
        """All requests in store order. The returned list is a copy."""
        return list(self._requests)

    def get(self, request_id: str) -> LeaveRequest:
        return self._requests[self._index(self._requests, request_id)]

    def next_id(self, band_start: int = 1, band_end: int | None = None) -> str:
        """Next unused id in the band [band_start, band_end), e.g. ``REQ005`` after ``REQ004``.

        Ids outside the band are ignored. Raises ValidationFailure when the band is full.
        """
        used = {request_sequence(r.id) for r in self._requests}
        in_band = (s for s in used if s >= band_start and (band_end is None or s < band_end))
        sequence = max(in_band, default=band_start - 1) + 1
        while sequence in used:
            sequence += 1
        if band_end is not None and sequence >= band_end:
            raise ValidationFailure(f"No free request ids left between {band_start} and {band_end - 1}")
        return format_request_id(sequence)

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[RequestStore]:
        """Hold the store lock for a read-check-write sequence.

        Re-entrant within the owning task, so ``create`` and ``update_many``
        can be called inside the block.
        """
        task = asyncio.current_task()
        if task is not None and self._lock_owner is task:
            yield self
            return
        async with self._lock:
            self._lock_owner = task
            try:
                yield self
            finally:
                self._lock_owner = None

    async def create(self, request: LeaveRequest) -> LeaveRequest:
        """Insert a request at the head of the collection.

        The record is re-validated, so ``total_days`` must match its dates.
        """
        async with self.transaction():
            if any(r.id == request.id for r in self._requests):
                raise DuplicateRequestError(request.id)
            try:
                validated = LeaveRequest.model_validate(request.model_dump())
            except ValidationError as exc:
                raise ValidationFailure(f"Invalid request {request.id}: {exc.errors()[0]['msg']}") from exc
            await self._commit([validated, *self._requests])
        return validated

    async def update(
        self,
        request_id: str,
        fields: Mapping[str, Any],
        expected_version: int | None = None,
    ) -> LeaveRequest:
        """Merge fields into the request with the given id.

        Raises RequestNotFoundError for an unknown id and ConcurrencyConflictError
        when expected_version is given and does not match.
        """
        updated = await self.update_many([(request_id, fields, expected_version)])
        return updated[0]

    async def update_many(
        self,
        changes: Sequence[tuple[str, Mapping[str, Any], int | None]],
    ) -> list[LeaveRequest]:
        """Apply several updates atomically: all are validated before any is stored."""
        async with self.transaction():
            working = list(self._requests)
            updated: list[LeaveRequest] = []
            for request_id, fields, expected_version in changes:
                index = self._index(working, request_id)
                current = working[index]
                if expected_version is not None and expected_version != current.version:
                    raise ConcurrencyConflictError(request_id, expected_version, current.version)
                working[index] = _apply(current, fields)
                updated.append(working[index])
            await self._commit(working)
        return updated

    async def reload(self) -> None:
        """Re-read the collection from storage, discarding in-memory state."""
        async with self.transaction():
            raw = await self._storage.get(self._key)
            requests = _load(raw) if raw is not None else None
            if requests is None:
                msg = f"No valid requests stored under {self._key}"
                raise ValueError(msg)
            self._requests = requests

    @staticmethod
    def _index(requests: Sequence[LeaveRequest], request_id: str) -> int:
        for index, request in enumerate(requests):
            if request.id == request_id:
                return index
        raise RequestNotFoundError(request_id)

    async def _commit(self, requests: list[LeaveRequest]) -> None:
        await self._storage.set(self._key, _requests_adapter.dump_json(requests).decode())
        self._requests = requests
        logger.debug("Persisted %d requests to %s", len(requests), self._key)
