import importlib.util
import logging

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.core.config import settings

logger = logging.getLogger(__name__)


def normalize_database_url(url: str) -> str:
    """Point plain Postgres URLs at the psycopg (v3) driver when psycopg2 is absent.

    SQLAlchemy loads psycopg2 for 'postgresql://' (or legacy 'postgres://') URLs,
    while this service only depends on psycopg[binary].
    """
    psycopg2_present = importlib.util.find_spec("psycopg2") is not None
    if psycopg2_present or "+psycopg" in url or not url.startswith(("postgres://", "postgresql://")):
        return url
    if url.startswith("postgres://"):
        url = "postgresql://" + url[len("postgres://"):]
    return url.replace("postgresql://", "postgresql+psycopg://", 1)


def build_engine(database_url: str, connect_timeout: int | None = None) -> Engine:
    url = normalize_database_url(database_url)
    if url.startswith("sqlite"):
        kwargs = {"connect_args": {"check_same_thread": False}}
        if ":memory:" in url or url.rstrip("/") in {"sqlite:", "sqlite+pysqlite:"}:
            # Single shared connection, otherwise every checkout sees an empty database
            kwargs["poolclass"] = StaticPool
        return create_engine(url, **kwargs)
    connect_args = {}
    if connect_timeout:
        connect_args["connect_timeout"] = connect_timeout
    return create_engine(url, pool_pre_ping=True, connect_args=connect_args)


def build_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(autocommit=False, autoflush=False, expire_on_commit=False, bind=engine)


# No DATABASE_URL is not fatal: the app still starts and every storage call
# fails with StorageUnavailableError.
engine: Engine | None = None
SessionLocal: sessionmaker | None = None
if settings.database_url:
    engine = build_engine(settings.database_url, settings.db_connect_timeout_seconds)
    SessionLocal = build_session_factory(engine)
else:
    logger.warning("DATABASE_URL is not set; storage operations will fail until it is configured")
