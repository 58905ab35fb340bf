import logging

from fastapi.testclient import TestClient

from app.core.logging import JsonFormatter
from app.db.init_db import DEMO_NOTIFICATIONS, seed_demo_data
from app.db.session import normalize_database_url
from app.repositories.notification_repository import NotificationRepository


def test_cors_origins_parsing(make_settings):
    assert make_settings(CORS_ORIGINS="http://localhost:3000").cors_origins == [
        "http://127.0.0.1:3000",
        "http://localhost:3000",
    ]
    assert make_settings(CORS_ORIGINS='["https://a.example", "https://b.example"]').cors_origins == [
        "https://a.example",
        "https://b.example",
    ]
    assert make_settings(CORS_ORIGINS="https://a.example https://b.example").cors_origins == [
        "https://a.example",
        "https://b.example",
    ]
    assert make_settings().cors_origins == ["http://localhost:5173", "http://127.0.0.1:5173"]


def test_normalize_database_url(monkeypatch):
    monkeypatch.setattr("importlib.util.find_spec", lambda name: None)
    assert normalize_database_url("postgres://u:p@db/n") == "postgresql+psycopg://u:p@db/n"
    assert normalize_database_url("postgresql://u:p@db/n") == "postgresql+psycopg://u:p@db/n"
    assert normalize_database_url("postgresql+psycopg://u:p@db/n") == "postgresql+psycopg://u:p@db/n"
    assert normalize_database_url("sqlite:///x.db") == "sqlite:///x.db"


def test_seed_demo_data_once(session_factory):
    assert seed_demo_data(session_factory) == len(DEMO_NOTIFICATIONS)
    assert seed_demo_data(session_factory) == 0

    repo = NotificationRepository(session_factory)
    alice = repo.list_by_user_id(1)
    assert [n.title for n in alice] == ["Order Shipped", "Leave a Review", "Order Completed"]
    assert repo.count_unread_by_user_id(1) == 2
    assert repo.count_unread_by_user_id(4) == 1


def test_dev_startup_seeds_demo_inbox(app_factory):
    with TestClient(app_factory(ENV="dev", SEED_DEMO_NOTIFICATIONS=True, AUTO_CREATE_TABLES=True)) as client:
        r = client.get("/notifications/count", headers={"Authorization": "Bearer bob-token"})
        assert r.json() == {"count": 2}


def test_non_dev_startup_does_not_seed(app_factory):
    with TestClient(app_factory(ENV="prod", SEED_DEMO_NOTIFICATIONS=True)) as client:
        assert client.get("/notifications").json() == []


def test_json_formatter():
    record = logging.LogRecord("app.test", logging.INFO, __file__, 1, "hello %s", ("world",), None)
    line = JsonFormatter().format(record)
    assert '"message": "hello world"' in line
    assert '"level": "INFO"' in line
