"""Read-oriented repository for user profiles."""

from __future__ import annotations

from typing import Any

from sqlalchemy import select
from sqlalchemy.engine import Engine

from skillswap.domain.skills import from_storage
from skillswap.infrastructure.database.schema import users

_PUBLIC_COLUMNS = (
    users.c.id,
    users.c.name,
    users.c.email,
    users.c.bio,
    users.c.avatar_url,
    users.c.skills_teach,
    users.c.skills_learn,
    users.c.rating,
    users.c.swaps_done,
    users.c.created_at,
)


def _row_to_user(row: Any) -> dict[str, Any]:
    user = dict(row)
    user["skills_teach"] = sorted(from_storage(user["skills_teach"]))
    user["skills_learn"] = sorted(from_storage(user["skills_learn"]))
    user["rating"] = float(user["rating"] or 0.0)
    user["swaps_done"] = int(user["swaps_done"] or 0)
    return user


class UserRepository:
    """Encapsulates SQL for user lookups."""

    def __init__(self, engine: Engine) -> None:
        self._engine = engine

    def exists(self, user_id: str) -> bool:
        """Check whether *user_id* resolves to a user."""
        with self._engine.connect() as conn:
            row = conn.execute(select(users.c.id).where(users.c.id == user_id)).first()
        return row is not None

    def get(self, user_id: str) -> dict[str, Any] | None:
        """Fetch one user as a dict, with skill lists decoded."""
        with self._engine.connect() as conn:
            stmt = select(*_PUBLIC_COLUMNS).where(users.c.id == user_id)
            row = conn.execute(stmt).mappings().first()
        return _row_to_user(row) if row is not None else None

    def get_counters(self, user_id: str) -> tuple[float, int] | None:
        """Return ``(rating, swaps_done)`` exactly as stored, or None."""
        with self._engine.connect() as conn:
            row = conn.execute(
                select(users.c.rating, users.c.swaps_done).where(users.c.id == user_id)
            ).first()
        if row is None:
            return None
        return row.rating, row.swaps_done

    def list_others(self, viewer_id: str) -> list[dict[str, Any]]:
        """Every user except *viewer_id*, in id order."""
        with self._engine.connect() as conn:
            rows = (
                conn.execute(
                    select(*_PUBLIC_COLUMNS).where(users.c.id != viewer_id).order_by(users.c.id)
                )
                .mappings()
                .all()
            )
        return [_row_to_user(r) for r in rows]

    def email_taken(self, email: str, *, exclude_id: str | None = None) -> bool:
        """Check whether another user already registered *email*."""
        stmt = select(users.c.id).where(users.c.email == email)
        if exclude_id is not None:
            stmt = stmt.where(users.c.id != exclude_id)
        with self._engine.connect() as conn:
            return conn.execute(stmt).first() is not None
