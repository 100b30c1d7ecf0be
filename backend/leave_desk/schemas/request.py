# ruff: noqa: TC001, TC003
from __future__ import annotations

from datetime import date
from typing import Annotated, Any, Self

from pydantic import BaseModel, Field, StringConstraints, field_validator, model_validator

from leave_desk.models.enums import LeaveType, RequestStatus, ReviewDecision, SortDirection, SortKey
from leave_desk.services.duration import day_span, parse_calendar_date

REQUEST_ID_PREFIX = "REQ"
REQUEST_ID_WIDTH = 3
OWN_BAND_START = 1
TEAM_BAND_START = 101

NonBlankStr = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]

# ---------------------------------------------------------------------------
# Entity
# ---------------------------------------------------------------------------


class LeaveRequest(BaseModel):
    """A single leave request as held by the request store.

    ``total_days`` is derived from the date range. When omitted it is computed;
    when supplied it must match, so a forged value cannot bypass the balance check.
    """

    id: str = Field(pattern=rf"^{REQUEST_ID_PREFIX}\d{{{REQUEST_ID_WIDTH},}}$")
    employee_id: str = Field(min_length=1)
    employee_name: str
    type: LeaveType
    start_date: date
    end_date: date
    total_days: int = Field(ge=0)
    work_site: str
    status: RequestStatus = RequestStatus.PENDING
    created_at: date
    observations: str = ""
    manager_notes: str | None = None
    reviewed_at: date | None = None
    evidence: bool = False
    version: int = Field(default=1, ge=1)

    @model_validator(mode="before")
    @classmethod
    def _derive_total_days(cls, data: Any) -> Any:
        if isinstance(data, dict) and data.get("total_days") is None:
            try:
                start = parse_calendar_date(data["start_date"])
                end = parse_calendar_date(data["end_date"])
            except (KeyError, TypeError, ValueError):
                # Leave the field errors to regular validation.
                return data
            data = {**data, "total_days": day_span(start, end)}
        return data

    @model_validator(mode="after")
    def _validate_dates(self) -> Self:
        if self.end_date < self.start_date:
            msg = "end_date must not be before start_date"
            raise ValueError(msg)
        expected = day_span(self.start_date, self.end_date)
        if self.total_days != expected:
            msg = f"total_days must be {expected} for {self.start_date}..{self.end_date}"
            raise ValueError(msg)
        return self


def format_request_id(sequence: int) -> str:
    """``REQ`` plus the zero-padded sequence number, e.g. ``REQ001``."""
    return f"{REQUEST_ID_PREFIX}{sequence:0{REQUEST_ID_WIDTH}d}"


def request_sequence(request_id: str) -> int:
    return int(request_id.removeprefix(REQUEST_ID_PREFIX))


def id_band(employee_id: str, owner_id: str) -> tuple[int, int | None]:
    """The ``[start, end)`` sequence band for new requests by employee_id.

    The owner numbers from ``REQ001`` up to the team band; everyone else from ``REQ101``.
    """
    if employee_id == owner_id:
        return OWN_BAND_START, TEAM_BAND_START
    return TEAM_BAND_START, None


# ---------------------------------------------------------------------------
# Request payloads
# ---------------------------------------------------------------------------


class SubmitRequestPayload(BaseModel):
    """Form values for a new leave request. The requester comes from the auth context."""

    type: LeaveType
    start_date: date
    end_date: date
    work_site: NonBlankStr
    observations: str = Field(default="", max_length=2000)
    evidence: bool = False

    @field_validator("start_date", "end_date", mode="before")
    @classmethod
    def _parse_date(cls, value: Any) -> Any:
        if isinstance(value, str):
            return parse_calendar_date(value)
        return value

    @model_validator(mode="after")
    def _validate_dates(self) -> Self:
        if self.end_date < self.start_date:
            msg = "end_date must not be before start_date"
            raise ValueError(msg)
        return self


class DecisionPayload(BaseModel):
    """Request body for approve/reject/return actions."""

    note: str | None = Field(default=None, max_length=1000)
    expected_version: int | None = Field(default=None, ge=1)


class ReviewPayload(DecisionPayload):
    """A single review decision chosen from the review form."""

    decision: ReviewDecision


class BulkReviewPayload(BaseModel):
    """Apply one decision to several requests at once."""

    ids: list[str] = Field(min_length=1)
    decision: ReviewDecision
    note: str | None = Field(default=None, max_length=1000)
    # Optional optimistic-concurrency versions, keyed by request id.
    expected_versions: dict[str, Annotated[int, Field(ge=1)]] = Field(default_factory=dict)

    @model_validator(mode="after")
    def _versions_match_ids(self) -> Self:
        unknown = set(self.expected_versions) - set(self.ids)
        if unknown:
            msg = f"expected_versions names ids not under review: {', '.join(sorted(unknown))}"
            raise ValueError(msg)
        return self


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------


class RequestListResponse(BaseModel):
    """A filtered, sorted page of leave requests."""

    items: list[LeaveRequest]
    total: int
    page: int
    page_size: int
    total_pages: int
    sort_key: SortKey | None
    sort_direction: SortDirection


class BulkReviewResponse(BaseModel):
    items: list[LeaveRequest]
    total: int
