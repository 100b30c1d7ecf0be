"""Aggregate views over a request snapshot: status counts and month buckets."""

from __future__ import annotations

from collections import Counter
from typing import TYPE_CHECKING

from leave_desk.models.enums import RequestStatus
from leave_desk.schemas.report import StatusSummary
from leave_desk.services.duration import month_bucket

if TYPE_CHECKING:
    from collections.abc import Iterable

    from leave_desk.schemas.request import LeaveRequest


def status_summary(requests: Iterable[LeaveRequest]) -> StatusSummary:
    counts = Counter(r.status for r in requests)
    return StatusSummary(
        approved=counts[RequestStatus.APPROVED],
        pending=counts[RequestStatus.PENDING],
        rejected=counts[RequestStatus.REJECTED],
        total=sum(counts.values()),
    )


def month_buckets(requests: Iterable[LeaveRequest]) -> list[str]:
    """Distinct creation months (``YYYY-MM``), newest first."""
    return sorted({month_bucket(r.created_at) for r in requests}, reverse=True)
