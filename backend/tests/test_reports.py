"""Tests for report aggregates: status counts and month buckets."""

from __future__ import annotations

from datetime import date
from typing import TYPE_CHECKING

from leave_desk.models.enums import LeaveType, RequestStatus
from leave_desk.schemas.report import StatusSummary
from leave_desk.schemas.request import LeaveRequest, format_request_id
from leave_desk.services.report import month_buckets, status_summary

if TYPE_CHECKING:
    from httpx import AsyncClient

    from leave_desk.services.store import RequestStore

EMPLOYEE_HEADERS = {"X-User-Id": "emp001", "X-Role": "employee"}
MANAGER_HEADERS = {"X-User-Id": "mgr001", "X-Role": "manager"}


def _request(sequence: int, status: RequestStatus, created_at: date, employee_id: str = "emp001") -> LeaveRequest:
    return LeaveRequest(
        id=format_request_id(sequence),
        employee_id=employee_id,
        employee_name="Test Employee",
        type=LeaveType.PERSONAL_LEAVE,
        start_date=created_at,
        end_date=created_at,
        work_site="Main Office",
        status=status,
        created_at=created_at,
    )


SAMPLE = [
    _request(1, RequestStatus.PENDING, date(2025, 11, 14)),
    _request(2, RequestStatus.APPROVED, date(2025, 11, 2)),
    _request(3, RequestStatus.APPROVED, date(2024, 12, 31)),
    _request(4, RequestStatus.REJECTED, date(2025, 3, 9)),
    _request(101, RequestStatus.PENDING, date(2025, 10, 1), employee_id="emp002"),
]


# ---------------------------------------------------------------------------
# Services
# ---------------------------------------------------------------------------


def test_status_summary_counts_each_status() -> None:
    assert status_summary(SAMPLE) == StatusSummary(approved=2, pending=2, rejected=1, total=5)


def test_status_summary_empty() -> None:
    assert status_summary([]) == StatusSummary(approved=0, pending=0, rejected=0, total=0)


def test_month_buckets_distinct_newest_first() -> None:
    assert month_buckets(SAMPLE) == ["2025-11", "2025-10", "2025-03", "2024-12"]


def test_month_buckets_empty() -> None:
    assert month_buckets([]) == []


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------


async def _load(store: RequestStore) -> None:
    for request in SAMPLE:
        await store.create(request)


async def test_status_summary_endpoint_uses_own_scope(async_client: AsyncClient, store: RequestStore) -> None:
    await _load(store)
    resp = await async_client.get("/reports/status-summary", headers=EMPLOYEE_HEADERS)
    assert resp.status_code == 200
    assert resp.json() == {"approved": 2, "pending": 1, "rejected": 1, "total": 4}


async def test_status_summary_endpoint_team_scope(async_client: AsyncClient, store: RequestStore) -> None:
    await _load(store)
    resp = await async_client.get("/reports/status-summary", headers=MANAGER_HEADERS)
    assert resp.json()["total"] == 5


async def test_employee_cannot_summarise_team(async_client: AsyncClient) -> None:
    resp = await async_client.get("/reports/status-summary", params={"scope": "team"}, headers=EMPLOYEE_HEADERS)
    assert resp.status_code == 403


async def test_months_endpoint(async_client: AsyncClient, store: RequestStore) -> None:
    await _load(store)
    resp = await async_client.get("/reports/months", headers=EMPLOYEE_HEADERS)
    assert resp.status_code == 200
    assert resp.json() == {"items": ["2025-11", "2025-03", "2024-12"], "total": 3}
