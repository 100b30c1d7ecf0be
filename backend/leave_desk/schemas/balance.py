from __future__ import annotations

from pydantic import BaseModel, Field


class BalanceAllotment(BaseModel):
    """Base days granted per leave type before any request is deducted."""

    vacation_days: int = Field(ge=0)
    compensatory_days: int = Field(ge=0)


class EmployeeBalance(BaseModel):
    """Days still available to an employee. Derived, never stored."""

    vacation_days: int = Field(ge=0)
    compensatory_days: int = Field(ge=0)


class BalanceResponse(BaseModel):
    employee_id: str
    vacation_days: int
    compensatory_days: int
    allotment: BalanceAllotment
