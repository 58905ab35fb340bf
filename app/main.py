import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from app.api.errors import request_validation_exception_handler
from app.api.router import api_router
from app.core.config import Settings, settings as default_settings
from app.core.logging import setup_logging
from app.db import session as db_session
from app.db.init_db import create_tables, seed_demo_data
from app.repositories.notification_repository import NotificationRepository
from app.services.auth_client import AuthClient
from app.services.notification_service import NotificationService

logger = logging.getLogger(__name__)


def _prepare_storage(settings: Settings, engine: Optional[Engine], session_factory: Optional[sessionmaker]):
    """Create the table and seed the demo inbox if enabled.

    A storage failure here is logged, not raised: requests then fail one by one with 500.
    """
    if engine is None or session_factory is None:
        logger.warning("No database configured, skipping table creation")
        return
    try:
        if settings.auto_create_tables:
            create_tables(engine)
        if settings.is_dev and settings.seed_demo_notifications:
            seed_demo_data(session_factory)
    except SQLAlchemyError as exc:
        logger.error("Storage preparation failed: %s", exc)


def create_app(
    settings: Optional[Settings] = None,
    session_factory: Optional[sessionmaker] = None,
    engine: Optional[Engine] = None,
    auth_client: Optional[AuthClient] = None,
) -> FastAPI:
    """Build the application and wire its dependencies once for the process lifetime."""
    settings = settings or default_settings
    if session_factory is None and engine is None:
        engine, session_factory = db_session.engine, db_session.SessionLocal

    setup_logging(settings.log_level, settings.log_json)

    if auth_client is None and settings.auth_service_url:
        auth_client = AuthClient(settings.auth_service_url, timeout=settings.auth_timeout_seconds)
    if auth_client is None:
        logger.warning("No identity service configured; bearer tokens cannot be resolved")
    if settings.demo_identity_fallback:
        logger.warning("DEMO_IDENTITY_FALLBACK is on: unresolved callers act as user %s", settings.default_user_id)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        _prepare_storage(settings, engine, session_factory)
        yield

    app = FastAPI(title=settings.app_name, version="0.1.0", lifespan=lifespan)
    app.state.settings = settings
    app.state.auth_client = auth_client
    app.state.notification_service = NotificationService(
        NotificationRepository(session_factory),
        default_user_id=settings.default_user_id,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(RequestValidationError, request_validation_exception_handler)
    app.include_router(api_router, prefix=settings.api_prefix.rstrip("/"))
    return app


app = create_app()
