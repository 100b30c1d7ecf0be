# ruff: noqa: TC001
from __future__ import annotations

from pydantic import BaseModel

from leave_desk.models.enums import Role


class AuthContext(BaseModel):
    """Dev auth context extracted from request headers."""

    user_id: str
    user_name: str = ""
    role: Role = Role.EMPLOYEE

    @property
    def is_manager(self) -> bool:
        return self.role == Role.MANAGER
