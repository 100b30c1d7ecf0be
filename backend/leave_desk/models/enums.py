from __future__ import annotations

import enum


class LeaveType(enum.StrEnum):
    """Kind of leave being requested."""

    VACATION = "Vacation"
    SICK_LEAVE = "Sick Leave"
    COMPENSATORY = "Compensatory"
    PERSONAL_LEAVE = "Personal Leave"


class RequestStatus(enum.StrEnum):
    """State machine for leave requests."""

    PENDING = "Pending"
    APPROVED = "Approved"
    REJECTED = "Rejected"


class ReviewDecision(enum.StrEnum):
    """Decision a manager can take on a request."""

    APPROVE = "approve"
    REJECT = "reject"
    RETURN = "return"


class RequestScope(enum.StrEnum):
    """Owner scope of a request listing."""

    MINE = "mine"
    TEAM = "team"


class SortDirection(enum.StrEnum):
    ASC = "asc"
    DESC = "desc"


class SortKey(enum.StrEnum):
    """Request fields a listing can be sorted by."""

    ID = "id"
    EMPLOYEE_NAME = "employee_name"
    TYPE = "type"
    START_DATE = "start_date"
    END_DATE = "end_date"
    TOTAL_DAYS = "total_days"
    WORK_SITE = "work_site"
    STATUS = "status"
    CREATED_AT = "created_at"


class Role(enum.StrEnum):
    EMPLOYEE = "employee"
    MANAGER = "manager"
