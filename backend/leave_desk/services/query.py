# ruff: noqa: TC001, TC003
"""Filtering, sorting and pagination over a snapshot of the request store.

Every function here is pure: inputs are never mutated.
"""

from __future__ import annotations

import math
from collections.abc import Callable, Iterable, Sequence
from datetime import date
from typing import Any, Self

from pydantic import BaseModel, ConfigDict, Field, model_validator

from leave_desk.models.enums import RequestScope, RequestStatus, SortDirection, SortKey
from leave_desk.schemas.request import LeaveRequest, RequestListResponse
from leave_desk.services.duration import month_bucket

DEFAULT_PAGE_SIZE = 5
MONTH_PATTERN = r"^\d{4}-(0[1-9]|1[0-2])$"

Predicate = Callable[[LeaveRequest], bool]


class RequestFilter(BaseModel):
    """Filter criteria. Unset criteria match everything; set ones are ANDed."""

    owner_id: str | None = None
    scope: RequestScope | None = None
    month: str | None = Field(default=None, pattern=MONTH_PATTERN)
    status: RequestStatus | None = None
    work_site: str | None = None
    start: date | None = None
    end: date | None = None
    search: str | None = None

    @model_validator(mode="after")
    def _validate_scope(self) -> Self:
        if self.scope is not None and not self.owner_id:
            msg = "scope requires owner_id"
            raise ValueError(msg)
        return self


class SortState(BaseModel):
    """Active sort column and direction."""

    model_config = ConfigDict(frozen=True)

    key: SortKey | None = None
    direction: SortDirection = SortDirection.ASC

    def toggle(self, key: SortKey) -> SortState:
        """Selecting the active key flips direction; a new key starts ascending."""
        if key == self.key:
            flipped = SortDirection.DESC if self.direction == SortDirection.ASC else SortDirection.ASC
            return SortState(key=key, direction=flipped)
        return SortState(key=key, direction=SortDirection.ASC)


class Page(BaseModel):
    items: list[LeaveRequest]
    total: int
    page: int
    page_size: int
    total_pages: int


def _predicates(flt: RequestFilter) -> list[Predicate]:
    predicates: list[Predicate] = []

    if flt.scope == RequestScope.MINE:
        predicates.append(lambda r: r.employee_id == flt.owner_id)
    elif flt.scope == RequestScope.TEAM:
        predicates.append(lambda r: r.employee_id != flt.owner_id)

    if flt.month is not None:
        predicates.append(lambda r: month_bucket(r.created_at) == flt.month)
    if flt.status is not None:
        predicates.append(lambda r: r.status == flt.status)
    if flt.work_site is not None:
        predicates.append(lambda r: r.work_site == flt.work_site)
    if flt.start is not None:
        start = flt.start
        predicates.append(lambda r: r.created_at >= start)
    if flt.end is not None:
        end = flt.end
        predicates.append(lambda r: r.created_at <= end)

    needle = (flt.search or "").strip().casefold()
    if needle:
        predicates.append(
            lambda r: needle in r.id.casefold() or needle in r.type.casefold() or needle in r.work_site.casefold()
        )

    return predicates


def matches(request: LeaveRequest, flt: RequestFilter) -> bool:
    return all(predicate(request) for predicate in _predicates(flt))


def filter_requests(requests: Iterable[LeaveRequest], flt: RequestFilter) -> list[LeaveRequest]:
    """Keep requests that satisfy every set criterion, preserving order."""
    predicates = _predicates(flt)
    return [r for r in requests if all(predicate(r) for predicate in predicates)]


def _sort_value(key: SortKey) -> Callable[[LeaveRequest], Any]:
    def value(request: LeaveRequest) -> Any:
        field = getattr(request, key.value)
        if isinstance(field, str):
            return field.casefold()
        return field

    return value


def sort_requests(requests: Iterable[LeaveRequest], state: SortState) -> list[LeaveRequest]:
    """Stable sort by the active key.

    Descending is the exact reverse of ascending, ties included. With no active
    key the input order is kept.
    """
    ordered = list(requests)
    if state.key is None:
        return ordered
    ordered.sort(key=_sort_value(state.key))
    if state.direction == SortDirection.DESC:
        ordered.reverse()
    return ordered


def paginate(items: Sequence[LeaveRequest], page: int, page_size: int = DEFAULT_PAGE_SIZE) -> Page:
    """Slice one 1-indexed page. Out-of-range pages clamp to the nearest valid page."""
    if page_size < 1:
        msg = "page_size must be positive"
        raise ValueError(msg)
    total = len(items)
    total_pages = math.ceil(total / page_size)
    current = min(max(page, 1), max(total_pages, 1))
    offset = (current - 1) * page_size
    return Page(
        items=list(items[offset : offset + page_size]),
        total=total,
        page=current,
        page_size=page_size,
        total_pages=total_pages,
    )


def query_requests(
    requests: Iterable[LeaveRequest],
    flt: RequestFilter,
    sort: SortState,
    page: int = 1,
    page_size: int = DEFAULT_PAGE_SIZE,
) -> RequestListResponse:
    """Filter, sort, then paginate."""
    result = paginate(sort_requests(filter_requests(requests, flt), sort), page, page_size)
    return RequestListResponse(
        items=result.items,
        total=result.total,
        page=result.page,
        page_size=result.page_size,
        total_pages=result.total_pages,
        sort_key=sort.key,
        sort_direction=sort.direction,
    )
