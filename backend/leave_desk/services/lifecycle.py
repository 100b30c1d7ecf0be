"""Request lifecycle: submission and manager decisions.

States: Pending (initial), Approved (terminal), Rejected. A Rejected request can
be returned to Pending for correction; nothing leaves Approved.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import TYPE_CHECKING, Any

from leave_desk.exceptions import ForbiddenError, InvalidTransitionError, ValidationFailure
from leave_desk.models.enums import RequestStatus, ReviewDecision
from leave_desk.schemas.request import DecisionPayload, LeaveRequest, id_band
from leave_desk.services.balance import compute_balance, ensure_sufficient_balance
from leave_desk.services.duration import day_span

if TYPE_CHECKING:
    from collections.abc import Mapping

    from leave_desk.schemas.auth import AuthContext
    from leave_desk.schemas.balance import BalanceAllotment
    from leave_desk.schemas.request import SubmitRequestPayload
    from leave_desk.services.store import RequestStore

logger = logging.getLogger(__name__)

_APPROVABLE = frozenset({RequestStatus.PENDING})
_REJECTABLE = frozenset({RequestStatus.PENDING})
_RETURNABLE = frozenset({RequestStatus.PENDING, RequestStatus.REJECTED})


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _ensure_status(request: LeaveRequest, allowed: frozenset[RequestStatus], action: str) -> None:
    if request.status not in allowed:
        raise InvalidTransitionError(f"Cannot {action} request {request.id} in status {request.status}")


def _ensure_not_own(auth: AuthContext, request: LeaveRequest) -> None:
    if request.employee_id == auth.user_id:
        raise ForbiddenError(f"Request {request.id} belongs to the reviewer and cannot be self-reviewed")


def _justification(note: str | None) -> str:
    """Return the stripped note, failing when it is empty or whitespace."""
    text = (note or "").strip()
    if not text:
        raise ValidationFailure("A justification is required to reject a request")
    return text


def _optional_note(note: str | None) -> dict[str, Any]:
    text = (note or "").strip()
    return {"manager_notes": text} if text else {}


def _approve_fields(note: str | None, today: date) -> dict[str, Any]:
    return {"status": RequestStatus.APPROVED, "reviewed_at": today, **_optional_note(note)}


def _reject_fields(note: str | None, today: date) -> dict[str, Any]:
    return {"status": RequestStatus.REJECTED, "reviewed_at": today, "manager_notes": _justification(note)}


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


async def submit_request(
    store: RequestStore,
    auth: AuthContext,
    payload: SubmitRequestPayload,
    allotment: BalanceAllotment,
    today: date | None = None,
    *,
    owner_id: str | None = None,
) -> LeaveRequest:
    """Submit a leave request for the caller.

    Flow:
    1. Compute total_days from the calendar dates
    2. Lock the store
    3. Derive the caller's balance and reject requests that exceed it
    4. Take the next id from the caller's band (own or team, when owner_id is given)
    5. Create the request (Pending) at the head of the store
    """
    today = today or date.today()

    total_days = day_span(payload.start_date, payload.end_date)
    band_start, band_end = id_band(auth.user_id, owner_id) if owner_id is not None else (1, None)

    async with store.transaction():
        balance = compute_balance(auth.user_id, store.list(), allotment)
        ensure_sufficient_balance(balance, payload.type, total_days)

        request = LeaveRequest(
            id=store.next_id(band_start, band_end),
            employee_id=auth.user_id,
            employee_name=auth.user_name or auth.user_id,
            type=payload.type,
            start_date=payload.start_date,
            end_date=payload.end_date,
            total_days=total_days,
            work_site=payload.work_site,
            status=RequestStatus.PENDING,
            created_at=today,
            observations=payload.observations,
            evidence=payload.evidence,
        )
        created = await store.create(request)
    logger.info(
        "Request %s submitted by %s: %s %s..%s (%d days)",
        created.id,
        auth.user_id,
        created.type,
        created.start_date,
        created.end_date,
        created.total_days,
    )
    return created


async def approve_request(
    store: RequestStore,
    auth: AuthContext,
    request_id: str,
    payload: DecisionPayload | None = None,
    today: date | None = None,
) -> LeaveRequest:
    """Approve a Pending request. No justification is needed."""
    payload = payload or DecisionPayload()
    fields = _approve_fields(payload.note, today or date.today())
    async with store.transaction():
        request = store.get(request_id)
        _ensure_not_own(auth, request)
        _ensure_status(request, _APPROVABLE, "approve")
        updated = await store.update(request_id, fields, payload.expected_version)
    logger.info("Request %s approved by %s", request_id, auth.user_id)
    return updated


async def reject_request(
    store: RequestStore,
    auth: AuthContext,
    request_id: str,
    payload: DecisionPayload | None = None,
    today: date | None = None,
) -> LeaveRequest:
    """Reject a Pending request. The note is the mandatory justification."""
    payload = payload or DecisionPayload()
    async with store.transaction():
        request = store.get(request_id)
        _ensure_not_own(auth, request)
        _ensure_status(request, _REJECTABLE, "reject")
        fields = _reject_fields(payload.note, today or date.today())
        updated = await store.update(request_id, fields, payload.expected_version)
    logger.info("Request %s rejected by %s", request_id, auth.user_id)
    return updated


async def return_request(
    store: RequestStore,
    auth: AuthContext,
    request_id: str,
    allotment: BalanceAllotment,
    payload: DecisionPayload | None = None,
    today: date | None = None,
) -> LeaveRequest:
    """Return a request to Pending for correction.

    A Rejected request reserves its days again, so the requester's balance is
    re-checked first.
    """
    payload = payload or DecisionPayload()
    fields = {"status": RequestStatus.PENDING, "reviewed_at": today or date.today(), **_optional_note(payload.note)}
    async with store.transaction():
        request = store.get(request_id)
        _ensure_not_own(auth, request)
        _ensure_status(request, _RETURNABLE, "return")

        if request.status == RequestStatus.REJECTED:
            balance = compute_balance(request.employee_id, store.list(), allotment)
            ensure_sufficient_balance(balance, request.type, request.total_days)

        updated = await store.update(request_id, fields, payload.expected_version)
    logger.info("Request %s returned for correction by %s", request_id, auth.user_id)
    return updated


async def review_request(
    store: RequestStore,
    auth: AuthContext,
    request_id: str,
    decision: ReviewDecision,
    allotment: BalanceAllotment,
    payload: DecisionPayload | None = None,
    today: date | None = None,
) -> LeaveRequest:
    """Dispatch a single review decision."""
    if decision == ReviewDecision.APPROVE:
        return await approve_request(store, auth, request_id, payload, today)
    if decision == ReviewDecision.REJECT:
        return await reject_request(store, auth, request_id, payload, today)
    return await return_request(store, auth, request_id, allotment, payload, today)


async def bulk_review(
    store: RequestStore,
    auth: AuthContext,
    request_ids: list[str],
    decision: ReviewDecision,
    note: str | None = None,
    today: date | None = None,
    expected_versions: Mapping[str, int] | None = None,
) -> list[LeaveRequest]:
    """Approve or reject several Pending requests at once.

    All-or-nothing: every id must exist and be Pending, and match its entry in
    expected_versions when one is given, otherwise nothing is committed. Bulk
    rejection requires one justification, applied to every item.
    """
    if decision == ReviewDecision.RETURN:
        raise ValidationFailure("Bulk review supports approve and reject only")
    if len(set(request_ids)) != len(request_ids):
        raise ValidationFailure("Bulk review ids must be unique")
    expected_versions = expected_versions or {}

    today = today or date.today()
    if decision == ReviewDecision.APPROVE:
        fields = _approve_fields(note, today)
        allowed = _APPROVABLE
    else:
        fields = _reject_fields(note, today)
        allowed = _REJECTABLE

    async with store.transaction():
        for request_id in request_ids:
            request = store.get(request_id)
            _ensure_not_own(auth, request)
            _ensure_status(request, allowed, decision.value)

        updated = await store.update_many(
            [(request_id, fields, expected_versions.get(request_id)) for request_id in request_ids]
        )
    logger.info("Bulk %s of %d requests by %s", decision.value, len(updated), auth.user_id)
    return updated
