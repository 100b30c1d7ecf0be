# ruff: noqa: B008, TC001, TC003
from __future__ import annotations

from datetime import date

from fastapi import APIRouter, Query, status

from leave_desk.api.deps import AllotmentDep, AuthDep, ManagerDep, SettingsDep, StoreDep
from leave_desk.exceptions import ForbiddenError
from leave_desk.models.enums import RequestScope, RequestStatus, SortDirection, SortKey
from leave_desk.schemas.auth import AuthContext
from leave_desk.schemas.request import (
    BulkReviewPayload,
    BulkReviewResponse,
    DecisionPayload,
    LeaveRequest,
    RequestListResponse,
    ReviewPayload,
    SubmitRequestPayload,
)
from leave_desk.services import lifecycle
from leave_desk.services.query import MONTH_PATTERN, RequestFilter, SortState, query_requests

requests_router = APIRouter(prefix="/requests", tags=["requests"])


def resolve_scope(auth: AuthContext, scope: RequestScope | None) -> RequestScope:
    """Employees only see their own requests; managers default to their team."""
    if scope is None:
        return RequestScope.TEAM if auth.is_manager else RequestScope.MINE
    if scope == RequestScope.TEAM and not auth.is_manager:
        raise ForbiddenError("Manager access required to list team requests")
    return scope


@requests_router.post("", response_model=LeaveRequest, status_code=status.HTTP_201_CREATED)
async def submit_request(
    payload: SubmitRequestPayload,
    store: StoreDep,
    auth: AuthDep,
    allotment: AllotmentDep,
    settings: SettingsDep,
) -> LeaveRequest:
    """Submit a new leave request for the caller."""
    return await lifecycle.submit_request(store, auth, payload, allotment, owner_id=settings.owner_employee_id)


@requests_router.get("", response_model=RequestListResponse)
async def list_requests(
    store: StoreDep,
    auth: AuthDep,
    settings: SettingsDep,
    scope: RequestScope | None = Query(default=None),
    month: str | None = Query(default=None, pattern=MONTH_PATTERN),
    status_filter: RequestStatus | None = Query(default=None, alias="status"),
    work_site: str | None = Query(default=None),
    start: date | None = Query(default=None),
    end: date | None = Query(default=None),
    search: str | None = Query(default=None, max_length=200),
    sort: SortKey | None = Query(default=None),
    direction: SortDirection = Query(default=SortDirection.ASC),
    page: int = Query(default=1),
    page_size: int | None = Query(default=None, ge=1, le=100),
) -> RequestListResponse:
    """List leave requests with filters, a sort column and pagination."""
    flt = RequestFilter(
        owner_id=auth.user_id,
        scope=resolve_scope(auth, scope),
        month=month,
        status=status_filter,
        work_site=work_site,
        start=start,
        end=end,
        search=search,
    )
    return query_requests(
        store.list(),
        flt,
        SortState(key=sort, direction=direction),
        page=page,
        page_size=page_size or settings.page_size,
    )


@requests_router.post("/bulk-review", response_model=BulkReviewResponse)
async def bulk_review(
    payload: BulkReviewPayload,
    store: StoreDep,
    auth: ManagerDep,
) -> BulkReviewResponse:
    """Approve or reject several pending requests at once (manager only)."""
    items = await lifecycle.bulk_review(
        store,
        auth,
        payload.ids,
        payload.decision,
        payload.note,
        expected_versions=payload.expected_versions,
    )
    return BulkReviewResponse(items=items, total=len(items))


@requests_router.get("/{request_id}", response_model=LeaveRequest)
async def get_request(
    request_id: str,
    store: StoreDep,
    auth: AuthDep,
) -> LeaveRequest:
    """Get a single leave request."""
    request = store.get(request_id)
    if request.employee_id != auth.user_id and not auth.is_manager:
        raise ForbiddenError("Not authorized to view this request")
    return request


@requests_router.post("/{request_id}/review", response_model=LeaveRequest)
async def review_request(
    request_id: str,
    payload: ReviewPayload,
    store: StoreDep,
    auth: ManagerDep,
    allotment: AllotmentDep,
) -> LeaveRequest:
    """Apply an approve, reject or return decision (manager only)."""
    return await lifecycle.review_request(store, auth, request_id, payload.decision, allotment, payload)


@requests_router.post("/{request_id}/approve", response_model=LeaveRequest)
async def approve_request(
    request_id: str,
    store: StoreDep,
    auth: ManagerDep,
    payload: DecisionPayload | None = None,
) -> LeaveRequest:
    """Approve a pending request (manager only)."""
    return await lifecycle.approve_request(store, auth, request_id, payload)


@requests_router.post("/{request_id}/reject", response_model=LeaveRequest)
async def reject_request(
    request_id: str,
    store: StoreDep,
    auth: ManagerDep,
    payload: DecisionPayload | None = None,
) -> LeaveRequest:
    """Reject a pending request with a justification (manager only)."""
    return await lifecycle.reject_request(store, auth, request_id, payload)


@requests_router.post("/{request_id}/return", response_model=LeaveRequest)
async def return_request(
    request_id: str,
    store: StoreDep,
    auth: ManagerDep,
    allotment: AllotmentDep,
    payload: DecisionPayload | None = None,
) -> LeaveRequest:
    """Send a request back to Pending for correction (manager only)."""
    return await lifecycle.return_request(store, auth, request_id, allotment, payload)
