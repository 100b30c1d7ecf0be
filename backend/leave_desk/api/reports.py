# ruff: noqa: B008, TC001
from __future__ import annotations

from fastapi import APIRouter, Query

from leave_desk.api.deps import AuthDep, StoreDep
from leave_desk.api.requests import resolve_scope
from leave_desk.models.enums import RequestScope
from leave_desk.schemas.report import MonthBucketsResponse, StatusSummary
from leave_desk.services import report as report_service
from leave_desk.services.query import RequestFilter, filter_requests

reports_router = APIRouter(prefix="/reports", tags=["reports"])


@reports_router.get("/status-summary", response_model=StatusSummary)
async def get_status_summary(
    store: StoreDep,
    auth: AuthDep,
    scope: RequestScope | None = Query(default=None),
) -> StatusSummary:
    """Count requests per status within the caller's scope."""
    flt = RequestFilter(owner_id=auth.user_id, scope=resolve_scope(auth, scope))
    return report_service.status_summary(filter_requests(store.list(), flt))


@reports_router.get("/months", response_model=MonthBucketsResponse)
async def get_months(
    store: StoreDep,
    auth: AuthDep,
    scope: RequestScope | None = Query(default=None),
) -> MonthBucketsResponse:
    """List the creation months available for filtering, newest first."""
    flt = RequestFilter(owner_id=auth.user_id, scope=resolve_scope(auth, scope))
    items = report_service.month_buckets(filter_requests(store.list(), flt))
    return MonthBucketsResponse(items=items, total=len(items))
