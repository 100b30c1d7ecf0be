from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi.middleware.cors import CORSMiddleware

if TYPE_CHECKING:
    from fastapi import FastAPI

    from leave_desk.config import Settings

# Dev auth headers sent by the front-end alongside the usual ones.
AUTH_HEADERS = ["X-User-Id", "X-User-Name", "X-Role"]


def setup_middleware(app: FastAPI, settings: Settings) -> None:
    """Allow the front-end origins to call the API with the dev auth headers."""
    app.add_middleware(
        CORSMiddleware,  # ty: ignore[invalid-argument-type]
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Content-Type", *AUTH_HEADERS],
    )
