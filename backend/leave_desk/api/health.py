import logging
from typing import Literal

from fastapi import APIRouter
from pydantic import BaseModel

from leave_desk.api.deps import StoreDep
from leave_desk.config import get_settings

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])


class HealthResponse(BaseModel):
    """Service status. ``requests`` is the size of the in-memory collection."""

    status: Literal["ok", "degraded"]
    version: str
    environment: str
    requests: int


@router.get("/health", response_model=HealthResponse)
async def health(store: StoreDep) -> HealthResponse:
    """Report whether the request storage backend answers. Needs no auth headers."""
    settings = get_settings()
    try:
        await store.storage.ping()
    except Exception:
        logger.exception("Health check: request storage %s is unreachable", store.key)
        status: Literal["ok", "degraded"] = "degraded"
    else:
        status = "ok"

    return HealthResponse(
        status=status,
        version=settings.app_version,
        environment=settings.environment,
        requests=len(store),
    )
