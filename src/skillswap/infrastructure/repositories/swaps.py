"""Read-oriented repository for swap records."""

from __future__ import annotations

from typing import Any

from sqlalchemy import and_, or_, select
from sqlalchemy.engine import Engine

from skillswap.infrastructure.database.schema import swaps


class SwapRepository:
    """Encapsulates SQL for swap lookups by id and by participant."""

    def __init__(self, engine: Engine) -> None:
        self._engine = engine

    def get(self, swap_id: str) -> dict[str, Any] | None:
        """Fetch one swap as a dict."""
        with self._engine.connect() as conn:
            row = conn.execute(select(swaps).where(swaps.c.id == swap_id)).mappings().first()
        return dict(row) if row is not None else None

    def list_for_user(self, user_id: str) -> list[dict[str, Any]]:
        """Swaps where *user_id* is sender or receiver, newest first."""
        stmt = (
            select(swaps)
            .where(or_(swaps.c.sender_id == user_id, swaps.c.receiver_id == user_id))
            .order_by(swaps.c.created_at.desc(), swaps.c.id)
        )
        with self._engine.connect() as conn:
            return [dict(r) for r in conn.execute(stmt).mappings().all()]

    def has_completed_between(self, user_a: str, user_b: str) -> bool:
        """Check for a completed swap between two users in either role."""
        stmt = (
            select(swaps.c.id)
            .where(
                swaps.c.status == "completed",
                or_(
                    and_(swaps.c.sender_id == user_a, swaps.c.receiver_id == user_b),
                    and_(swaps.c.sender_id == user_b, swaps.c.receiver_id == user_a),
                ),
            )
            .limit(1)
        )
        with self._engine.connect() as conn:
            return conn.execute(stmt).first() is not None
