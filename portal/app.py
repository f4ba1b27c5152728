"""FastAPI application wiring the record store, services and routers."""
from __future__ import annotations

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from portal.core.config import Settings, get_settings
from portal.core.logging_setup import configure_logging
from portal.repositories.kv_storage import KeyValueStorage, build_storage
from portal.repositories.persistence import CollectionPersistence
from portal.repositories.record_store import RecordStore
from portal.routers import auth as auth_router
from portal.routers import dashboard as dashboard_router
from portal.routers import data as data_router
from portal.routers.records import students_router, teachers_router
from portal.services.record_service import PortalDataService
from portal.services.session_service import SessionService
from portal.services.signup_service import SignupService

logger = logging.getLogger(__name__)

DEV_ORIGINS = {
    "http://localhost:5173",
    "http://127.0.0.1:5173",
    "http://localhost:8000",
    "http://127.0.0.1:8000",
}


def build_services(settings: Settings, storage: KeyValueStorage) -> tuple[PortalDataService, SignupService, SessionService]:
    persistence = CollectionPersistence(storage)
    store = RecordStore.from_persistence(persistence)
    data = PortalDataService(store, persistence, strict=settings.strict_persistence)
    signups = SignupService(persistence)
    sessions = SessionService(data, signups, persistence, settings=settings)
    return data, signups, sessions


def create_app(settings: Settings | None = None, storage: KeyValueStorage | None = None) -> FastAPI:
    """Factory compatible with uvicorn/gunicorn (``--factory``)."""
    settings = settings or get_settings()
    configure_logging(settings)
    storage = storage if storage is not None else build_storage(settings)

    app = FastAPI(title="OutcomeTracker Portal API")
    data, signups, sessions = build_services(settings, storage)
    app.state.settings = settings
    app.state.data_service = data
    app.state.signup_service = signups
    app.state.session_service = sessions

    if settings.app_env != "prod":
        app.add_middleware(
            CORSMiddleware,
            allow_origins=sorted(DEV_ORIGINS),
            allow_credentials=True,
            allow_methods=["GET", "POST", "PATCH", "DELETE", "OPTIONS"],
            allow_headers=["*"],
        )

    app.include_router(auth_router.router)
    app.include_router(data_router.router)
    app.include_router(students_router)
    app.include_router(teachers_router)
    app.include_router(dashboard_router.router)

    logger.info(
        "Portal ready (%s): %d students, %d teachers",
        type(storage).__name__,
        data.students.count(),
        data.teachers.count(),
    )
    return app
