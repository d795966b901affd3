"""Store — the explicit persistence handle passed into every service.

The Store owns the SQLAlchemy engine and the read-side repositories. There
is no process-wide store: callers construct one from settings and hand it
to each service.

Write paths go through :meth:`Store.transaction`, which wraps
``engine.begin()`` (auto-commit on success, auto-rollback on exception).
Guarded writes live in :mod:`skillswap.infrastructure.database.counters`.
Reads go through ``engine.connect()`` via the repositories, outside any
write transaction, so a compare-and-swap read never holds a snapshot
that a concurrent writer could invalidate.
"""

from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

import structlog

from skillswap.infrastructure.database.engine import init_database
from skillswap.infrastructure.repositories.swaps import SwapRepository
from skillswap.infrastructure.repositories.users import UserRepository

if TYPE_CHECKING:
    from collections.abc import Iterator

    from sqlalchemy import Connection
    from sqlalchemy.engine import Engine

    from skillswap.config.settings import SkillSwapSettings

logger = structlog.get_logger(__name__)


@dataclass
class StoreTransaction:
    """Active write transaction."""

    conn: Connection


class Store:
    """Repository handle encapsulating database access.

    Constructed once per CLI invocation (or per test) from
    :class:`SkillSwapSettings`. Services receive it via their
    :class:`BaseService` constructor.
    """

    def __init__(self, settings: SkillSwapSettings) -> None:
        self._settings = settings
        self._engine: Engine = init_database(
            self.db_path,
            busy_timeout_s=settings.store.busy_timeout_s,
        )
        self._users = UserRepository(self._engine)
        self._swaps = SwapRepository(self._engine)
        logger.debug("store.opened", db_path=str(self.db_path))

    @property
    def db_path(self) -> Path:
        """Resolved path of the SQLite database file."""
        return self._settings.resolved_db_path()

    @property
    def engine(self) -> Engine:
        """The underlying SQLAlchemy engine (for direct access when needed)."""
        return self._engine

    @property
    def settings(self) -> SkillSwapSettings:
        """The resolved settings for this store."""
        return self._settings

    @property
    def users(self) -> UserRepository:
        """User lookups (existence check, field read, candidate pool)."""
        return self._users

    @property
    def swaps(self) -> SwapRepository:
        """Swap lookups by id and by participant."""
        return self._swaps

    @contextmanager
    def transaction(self) -> Iterator[StoreTransaction]:
        """Atomic write unit.

        Usage::

            with store.transaction() as txn:
                txn.conn.execute(insert(swaps).values(...))
        """
        with self._engine.begin() as conn:
            yield StoreTransaction(conn=conn)

    def close(self) -> None:
        """Release pooled connections."""
        self._engine.dispose()
