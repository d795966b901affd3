"""Database engine setup for SQLite with WAL mode.

SQLite is the shared persistent store: WAL mode lets readers run beside a
writer, and the busy timeout makes concurrent writers queue for the write
lock instead of failing immediately. The default DB lives at
``{data_root}/.skillswap/skillswap.db``.

SQLAlchemy Core (not ORM) is used because every operation is a short,
request-scoped read or guarded write; no identity map is wanted.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine

from skillswap.infrastructure.database.schema import metadata

DEFAULT_BUSY_TIMEOUT_S = 30.0


def create_db_engine(db_path: Path, *, busy_timeout_s: float = DEFAULT_BUSY_TIMEOUT_S) -> Engine:
    """Create a SQLite engine with WAL mode and foreign keys enabled."""
    engine = create_engine(
        f"sqlite:///{db_path}",
        echo=False,
        connect_args={"timeout": busy_timeout_s},
    )

    @event.listens_for(engine, "connect")
    def _set_sqlite_pragma(dbapi_conn: Any, _: Any) -> None:
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA journal_mode=WAL")
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    return engine


def init_database(db_path: Path, *, busy_timeout_s: float = DEFAULT_BUSY_TIMEOUT_S) -> Engine:
    """Initialize the skillswap database at *db_path*.

    Creates the parent directory and all tables from :data:`schema.metadata`.
    Idempotent — safe to call on an existing database.

    Returns the engine ready for use.
    """
    db_path.parent.mkdir(parents=True, exist_ok=True)
    engine = create_db_engine(db_path, busy_timeout_s=busy_timeout_s)
    metadata.create_all(engine)
    return engine
