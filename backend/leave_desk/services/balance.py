from __future__ import annotations

from typing import TYPE_CHECKING

from leave_desk.exceptions import InsufficientBalanceError
from leave_desk.models.enums import LeaveType, RequestStatus
from leave_desk.schemas.balance import BalanceAllotment, EmployeeBalance

if TYPE_CHECKING:
    from collections.abc import Iterable

    from leave_desk.config import Settings
    from leave_desk.schemas.request import LeaveRequest

# Statuses that hold days against the balance. Pending reserves days while
# the request is under review so they cannot be booked twice.
RESERVING_STATUSES = frozenset({RequestStatus.PENDING, RequestStatus.APPROVED})

# Leave types deducted from a balance. Other types are unlimited.
BALANCED_TYPES = frozenset({LeaveType.VACATION, LeaveType.COMPENSATORY})


def allotment_from_settings(settings: Settings) -> BalanceAllotment:
    """Build the base allotment from configuration."""
    return BalanceAllotment(
        vacation_days=settings.base_vacation_days,
        compensatory_days=settings.base_compensatory_days,
    )


def compute_balance(
    employee_id: str,
    requests: Iterable[LeaveRequest],
    allotment: BalanceAllotment,
) -> EmployeeBalance:
    """Derive an employee's available balance from their request history.

    Pending and Approved Vacation/Compensatory requests are deducted from the
    allotment. Each result is floored at zero.
    """
    vacation = allotment.vacation_days
    compensatory = allotment.compensatory_days

    for request in requests:
        if request.employee_id != employee_id or request.status not in RESERVING_STATUSES:
            continue
        if request.type == LeaveType.VACATION:
            vacation -= request.total_days
        elif request.type == LeaveType.COMPENSATORY:
            compensatory -= request.total_days

    return EmployeeBalance(vacation_days=max(0, vacation), compensatory_days=max(0, compensatory))


def available_days(balance: EmployeeBalance, leave_type: LeaveType) -> int | None:
    """Days available for a leave type, or None when the type has no balance limit."""
    if leave_type == LeaveType.VACATION:
        return balance.vacation_days
    if leave_type == LeaveType.COMPENSATORY:
        return balance.compensatory_days
    return None


def ensure_sufficient_balance(balance: EmployeeBalance, leave_type: LeaveType, requested_days: int) -> None:
    """Raise InsufficientBalanceError if requested_days exceed the available balance."""
    available = available_days(balance, leave_type)
    if available is not None and requested_days > available:
        raise InsufficientBalanceError(
            f"Requested {requested_days} days exceed the current {leave_type} balance of {available} days"
        )
