"""Tests for balance derivation and the balance endpoint."""

from __future__ import annotations

from datetime import date, timedelta
from typing import TYPE_CHECKING

import pytest

from leave_desk.config import Settings
from leave_desk.exceptions import InsufficientBalanceError
from leave_desk.models.enums import LeaveType, RequestStatus
from leave_desk.schemas.balance import BalanceAllotment, EmployeeBalance
from leave_desk.schemas.request import LeaveRequest, format_request_id
from leave_desk.services.balance import (
    allotment_from_settings,
    available_days,
    compute_balance,
    ensure_sufficient_balance,
)

if TYPE_CHECKING:
    from httpx import AsyncClient

    from leave_desk.services.store import RequestStore

EMPLOYEE_ID = "emp001"
OTHER_ID = "emp002"
ALLOTMENT = BalanceAllotment(vacation_days=15, compensatory_days=4)

EMPLOYEE_HEADERS = {"X-User-Id": EMPLOYEE_ID, "X-Role": "employee"}
OTHER_HEADERS = {"X-User-Id": OTHER_ID, "X-Role": "employee"}
MANAGER_HEADERS = {"X-User-Id": "mgr001", "X-Role": "manager"}

_sequence = iter(range(1, 1000))


def _request(
    days: int,
    leave_type: LeaveType = LeaveType.VACATION,
    status: RequestStatus = RequestStatus.APPROVED,
    employee_id: str = EMPLOYEE_ID,
) -> LeaveRequest:
    start = date(2025, 6, 2)
    return LeaveRequest(
        id=format_request_id(next(_sequence)),
        employee_id=employee_id,
        employee_name="Test Employee",
        type=leave_type,
        start_date=start,
        end_date=start + timedelta(days=days - 1),
        work_site="Main Office",
        status=status,
        created_at=date(2025, 5, 20),
    )


# ---------------------------------------------------------------------------
# compute_balance
# ---------------------------------------------------------------------------


def test_no_history_returns_allotment() -> None:
    balance = compute_balance(EMPLOYEE_ID, [], ALLOTMENT)
    assert balance == EmployeeBalance(vacation_days=15, compensatory_days=4)


def test_pending_and_approved_both_reserve_days() -> None:
    requests = [
        _request(3, status=RequestStatus.PENDING),
        _request(2, status=RequestStatus.APPROVED),
        _request(1, LeaveType.COMPENSATORY, status=RequestStatus.PENDING),
    ]
    balance = compute_balance(EMPLOYEE_ID, requests, ALLOTMENT)
    assert balance.vacation_days == 10
    assert balance.compensatory_days == 3


def test_rejected_requests_do_not_reserve() -> None:
    requests = [_request(5, status=RequestStatus.REJECTED), _request(1, LeaveType.COMPENSATORY, RequestStatus.REJECTED)]
    balance = compute_balance(EMPLOYEE_ID, requests, ALLOTMENT)
    assert balance == EmployeeBalance(vacation_days=15, compensatory_days=4)


@pytest.mark.parametrize("leave_type", [LeaveType.SICK_LEAVE, LeaveType.PERSONAL_LEAVE])
def test_unbalanced_types_never_deduct(leave_type: LeaveType) -> None:
    balance = compute_balance(EMPLOYEE_ID, [_request(10, leave_type)], ALLOTMENT)
    assert balance == EmployeeBalance(vacation_days=15, compensatory_days=4)


def test_other_employees_are_ignored() -> None:
    balance = compute_balance(EMPLOYEE_ID, [_request(5, employee_id=OTHER_ID)], ALLOTMENT)
    assert balance.vacation_days == 15


def test_three_five_day_vacations_exhaust_balance_exactly() -> None:
    requests = [_request(5), _request(5), _request(5)]
    balance = compute_balance(EMPLOYEE_ID, requests, ALLOTMENT)
    assert balance.vacation_days == 0


def test_overdraft_history_is_clamped_at_zero() -> None:
    requests = [_request(10), _request(10), _request(2, LeaveType.COMPENSATORY), _request(3, LeaveType.COMPENSATORY)]
    balance = compute_balance(EMPLOYEE_ID, requests, ALLOTMENT)
    assert balance.vacation_days == 0
    assert balance.compensatory_days == 0


def test_balance_is_idempotent() -> None:
    requests = [_request(4), _request(1, LeaveType.COMPENSATORY, RequestStatus.PENDING)]
    first = compute_balance(EMPLOYEE_ID, requests, ALLOTMENT)
    second = compute_balance(EMPLOYEE_ID, requests, ALLOTMENT)
    assert first == second
    assert first.vacation_days == 11


def test_balance_accepts_generators() -> None:
    balance = compute_balance(EMPLOYEE_ID, (r for r in [_request(2)]), ALLOTMENT)
    assert balance.vacation_days == 13


# ---------------------------------------------------------------------------
# available_days / ensure_sufficient_balance
# ---------------------------------------------------------------------------


def test_available_days_per_type() -> None:
    balance = EmployeeBalance(vacation_days=7, compensatory_days=2)
    assert available_days(balance, LeaveType.VACATION) == 7
    assert available_days(balance, LeaveType.COMPENSATORY) == 2
    assert available_days(balance, LeaveType.SICK_LEAVE) is None
    assert available_days(balance, LeaveType.PERSONAL_LEAVE) is None


def test_request_within_balance_passes() -> None:
    ensure_sufficient_balance(EmployeeBalance(vacation_days=5, compensatory_days=0), LeaveType.VACATION, 5)


def test_request_over_balance_fails() -> None:
    balance = EmployeeBalance(vacation_days=5, compensatory_days=0)
    with pytest.raises(InsufficientBalanceError, match="balance of 5 days"):
        ensure_sufficient_balance(balance, LeaveType.VACATION, 6)


def test_unlimited_type_never_fails() -> None:
    ensure_sufficient_balance(EmployeeBalance(vacation_days=0, compensatory_days=0), LeaveType.SICK_LEAVE, 30)


def test_allotment_comes_from_settings() -> None:
    settings = Settings(base_vacation_days=12, base_compensatory_days=3)
    assert allotment_from_settings(settings) == BalanceAllotment(vacation_days=12, compensatory_days=3)


# ---------------------------------------------------------------------------
# GET /employees/{employee_id}/balance
# ---------------------------------------------------------------------------


async def test_balance_endpoint_reflects_store(async_client: AsyncClient, store: RequestStore) -> None:
    await store.create(_request(3, status=RequestStatus.PENDING))
    await store.create(_request(1, LeaveType.COMPENSATORY))

    resp = await async_client.get(f"/employees/{EMPLOYEE_ID}/balance", headers=EMPLOYEE_HEADERS)
    assert resp.status_code == 200
    data = resp.json()
    assert data["employee_id"] == EMPLOYEE_ID
    assert data["vacation_days"] == 12
    assert data["compensatory_days"] == 3
    assert data["allotment"] == {"vacation_days": 15, "compensatory_days": 4}


async def test_balance_endpoint_forbids_other_employee(async_client: AsyncClient) -> None:
    resp = await async_client.get(f"/employees/{EMPLOYEE_ID}/balance", headers=OTHER_HEADERS)
    assert resp.status_code == 403
    assert resp.json()["error"] == "ForbiddenError"


async def test_manager_can_view_any_balance(async_client: AsyncClient) -> None:
    resp = await async_client.get(f"/employees/{EMPLOYEE_ID}/balance", headers=MANAGER_HEADERS)
    assert resp.status_code == 200
    assert resp.json()["vacation_days"] == 15
