from __future__ import annotations

from pydantic import BaseModel


class StatusSummary(BaseModel):
    """Request counts per status."""

    approved: int
    pending: int
    rejected: int
    total: int


class MonthBucketsResponse(BaseModel):
    """Distinct ``YYYY-MM`` creation months, newest first."""

    items: list[str]
    total: int
