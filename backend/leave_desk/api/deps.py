# ruff: noqa: B008
from __future__ import annotations

from typing import Annotated

from fastapi import Depends, Header, Request

from leave_desk.config import Settings, get_settings
from leave_desk.exceptions import ForbiddenError
from leave_desk.models.enums import Role
from leave_desk.schemas.auth import AuthContext
from leave_desk.schemas.balance import BalanceAllotment
from leave_desk.services.balance import allotment_from_settings
from leave_desk.services.store import RequestStore


async def get_auth_context(
    x_user_id: str = Header(min_length=1),
    x_user_name: str = Header(default=""),
    x_role: Role = Header(default=Role.EMPLOYEE),
) -> AuthContext:
    """Extract dev auth context from request headers."""
    return AuthContext(user_id=x_user_id, user_name=x_user_name, role=x_role)


AuthDep = Annotated[AuthContext, Depends(get_auth_context)]


async def require_manager(
    auth: AuthDep,
) -> AuthContext:
    """Require manager role for the request."""
    if not auth.is_manager:
        raise ForbiddenError("Manager access required")
    return auth


ManagerDep = Annotated[AuthContext, Depends(require_manager)]


def get_request_store(request: Request) -> RequestStore:
    """The store opened by the application lifespan."""
    store: RequestStore = request.app.state.request_store
    return store


StoreDep = Annotated[RequestStore, Depends(get_request_store)]

SettingsDep = Annotated[Settings, Depends(get_settings)]


def get_allotment(settings: SettingsDep) -> BalanceAllotment:
    return allotment_from_settings(settings)


AllotmentDep = Annotated[BalanceAllotment, Depends(get_allotment)]
