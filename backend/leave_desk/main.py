from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from datetime import date
from typing import TYPE_CHECKING

from fastapi import FastAPI

from leave_desk.api.health import router as health_router
from leave_desk.api.router import api_router
from leave_desk.config import get_settings
from leave_desk.db import create_tables, dispose_engine, get_session_factory
from leave_desk.exceptions import setup_exception_handlers
from leave_desk.middleware import setup_middleware
from leave_desk.services.mock_data import generate_mock_requests
from leave_desk.services.storage import DatabaseKeyValueStorage
from leave_desk.services.store import RequestStore

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    from leave_desk.config import Settings
    from leave_desk.services.storage import KeyValueStorage

logger = logging.getLogger(__name__)


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )


async def open_request_store(settings: Settings, storage: KeyValueStorage) -> RequestStore:
    """Open the store under the current key, purging deprecated keys and seeding if empty."""
    return await RequestStore.open(
        storage,
        settings.storage_key,
        deprecated_keys=settings.deprecated_storage_keys,
        seed=lambda: generate_mock_requests(
            settings.mock_seed,
            settings.owner_employee_id,
            settings.owner_employee_name,
            date.today(),
        ),
    )


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Application lifespan manager for startup and shutdown."""
    settings = get_settings()
    configure_logging(settings)
    logger.info("Starting %s v%s [%s]", settings.app_name, settings.app_version, settings.environment)

    if settings.auto_create_tables:
        await create_tables()
    storage = DatabaseKeyValueStorage(get_session_factory())
    app.state.request_store = await open_request_store(settings, storage)

    yield

    logger.info("Shutting down %s", settings.app_name)
    await dispose_engine()


def create_app() -> FastAPI:
    """Application factory."""
    settings = get_settings()

    application = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        debug=settings.debug,
        lifespan=lifespan,
        docs_url="/docs" if settings.environment != "production" else None,
        redoc_url="/redoc" if settings.environment != "production" else None,
    )

    setup_middleware(application, settings)
    setup_exception_handlers(application)

    application.include_router(health_router)
    application.include_router(api_router)

    return application


app = create_app()
