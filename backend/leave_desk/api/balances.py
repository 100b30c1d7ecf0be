from __future__ import annotations

from fastapi import APIRouter

from leave_desk.api.deps import AllotmentDep, AuthDep, StoreDep
from leave_desk.exceptions import ForbiddenError
from leave_desk.schemas.balance import BalanceResponse
from leave_desk.services.balance import compute_balance

employee_balance_router = APIRouter(
    prefix="/employees/{employee_id}/balance",
    tags=["balances"],
)


@employee_balance_router.get("", response_model=BalanceResponse)
async def get_employee_balance(
    employee_id: str,
    store: StoreDep,
    auth: AuthDep,
    allotment: AllotmentDep,
) -> BalanceResponse:
    """Get the remaining vacation and compensatory days for an employee."""
    if employee_id != auth.user_id and not auth.is_manager:
        raise ForbiddenError("Not authorized to view this balance")
    balance = compute_balance(employee_id, store.list(), allotment)
    return BalanceResponse(
        employee_id=employee_id,
        vacation_days=balance.vacation_days,
        compensatory_days=balance.compensatory_days,
        allotment=allotment,
    )
