import os

# Module-level app in app.main is built on import; keep it off any real database.
os.environ["DATABASE_URL"] = "sqlite+pysqlite:///:memory:"
os.environ["ENV"] = "test"

from datetime import datetime

import pytest
from fastapi.testclient import TestClient

from app.core.config import Settings
from app.db.init_db import create_tables
from app.db.session import build_engine, build_session_factory
from app.main import create_app
from app.models.notification import Notification
from app.repositories.notification_repository import NotificationRepository
from app.services.auth_client import AuthServiceError, AuthUser
from app.services.notification_service import NotificationService

TOKENS = {"alice-token": "1", "bob-token": "2", "zero-token": "0"}


class FakeAuthClient:
    def __init__(self, users: dict[str, str]):
        self.users = users
        self.tokens: list[str] = []

    async def get_me(self, token: str) -> AuthUser:
        self.tokens.append(token)
        if token not in self.users:
            raise AuthServiceError("invalid or expired token")
        return AuthUser(id=self.users[token], username=f"user{self.users[token]}")


def _build_settings(**overrides) -> Settings:
    values = {
        "ENV": "test",
        "DEMO_IDENTITY_FALLBACK": True,
        "DEFAULT_USER_ID": 1,
        "AUTO_CREATE_TABLES": False,
        "SEED_DEMO_NOTIFICATIONS": False,
    }
    values.update(overrides)
    return Settings(**values)


@pytest.fixture
def make_settings():
    """Settings for tests; keyword overrides use the env var names."""
    return _build_settings


@pytest.fixture
def engine():
    engine = build_engine("sqlite+pysqlite:///:memory:")
    create_tables(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return build_session_factory(engine)


@pytest.fixture
def repository(session_factory):
    return NotificationRepository(session_factory)


@pytest.fixture
def service(repository):
    return NotificationService(repository, default_user_id=1)


@pytest.fixture
def auth_client():
    return FakeAuthClient(TOKENS)


@pytest.fixture
def insert_row(session_factory):
    """Insert a raw row, bypassing the repository (NULL columns, fixed timestamps)."""
    def _insert(user_id: int = 1, title=None, message=None, type=None, read: bool = False, created_at: datetime | None = None) -> int:
        db = session_factory()
        try:
            row = Notification(user_id=user_id, title=title, message=message, type=type, read=read)
            if created_at is not None:
                row.created_at = created_at
            db.add(row)
            db.commit()
            return row.id
        finally:
            db.close()
    return _insert


@pytest.fixture
def app_factory(engine, session_factory, auth_client):
    def _build(**setting_overrides):
        return create_app(
            _build_settings(**setting_overrides),
            session_factory=session_factory,
            engine=engine,
            auth_client=auth_client,
        )
    return _build


@pytest.fixture
def client(app_factory):
    with TestClient(app_factory()) as c:
        yield c
