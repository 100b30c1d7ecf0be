from sqlmodel import SQLModel

from leave_desk.models.enums import (
    LeaveType,
    RequestScope,
    RequestStatus,
    ReviewDecision,
    Role,
    SortDirection,
    SortKey,
)
from leave_desk.models.storage import StorageEntry

__all__ = [
    "LeaveType",
    "RequestScope",
    "RequestStatus",
    "ReviewDecision",
    "Role",
    "SQLModel",
    "SortDirection",
    "SortKey",
    "StorageEntry",
]
