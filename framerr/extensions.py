"""
Database engine, session factories and the background scheduler.

The database URL is resolved from the environment:
    DATABASE_URL=sqlite:////data/framerr.db        (default)
    POSTGRES_HOST=db POSTGRES_USER=framerr ...      (PostgreSQL)
"""

import os
from urllib.parse import quote_plus

from apscheduler.schedulers.background import BackgroundScheduler
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

DEFAULT_SQLITE_URL = "sqlite:////data/framerr.db"


def _build_database_url() -> str:
    """Build the SQLAlchemy URL from environment variables."""
    host = os.getenv("POSTGRES_HOST")
    if not host:
        return os.getenv("DATABASE_URL", DEFAULT_SQLITE_URL)

    user = quote_plus(os.getenv("POSTGRES_USER", "framerr"))
    password = os.getenv("POSTGRES_PASSWORD", "")
    database = os.getenv("POSTGRES_DB", "framerr")
    port = os.getenv("POSTGRES_PORT", "5432")

    credentials = f"{user}:{quote_plus(password)}" if password else user
    return f"postgresql+psycopg2://{credentials}@{host}:{port}/{database}"


def _engine_kwargs(url: str) -> dict:
    if not url.startswith("sqlite"):
        return {"pool_pre_ping": True}

    kwargs: dict = {"connect_args": {"check_same_thread": False}}
    # In-memory databases only exist per connection, so share a single one
    if url in ("sqlite://", "sqlite:///:memory:"):
        kwargs["poolclass"] = StaticPool
    return kwargs


DATABASE_URL = _build_database_url()
engine = create_engine(DATABASE_URL, **_engine_kwargs(DATABASE_URL))
DB_DIALECT = engine.dialect.name

SQLITE_NETWORK_SHARE = os.getenv("SQLITE_NETWORK_SHARE", "false").lower() == "true"


def _set_sqlite_pragma(dbapi_connection, connection_record) -> None:
    """Apply SQLite pragmas on every new connection."""
    cursor = dbapi_connection.cursor()
    if SQLITE_NETWORK_SHARE:
        # WAL needs shared memory, which network filesystems don't provide
        cursor.execute("PRAGMA journal_mode=DELETE")
        cursor.execute("PRAGMA locking_mode=EXCLUSIVE")
    else:
        cursor.execute("PRAGMA journal_mode=WAL")
        cursor.execute("PRAGMA synchronous=NORMAL")
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


if DB_DIALECT == "sqlite":
    event.listen(engine, "connect", _set_sqlite_pragma)

SessionLocal = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)

scheduler = BackgroundScheduler()


def get_db():
    """FastAPI dependency yielding a database session."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
