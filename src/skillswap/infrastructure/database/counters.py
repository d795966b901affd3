"""Atomic per-row updates for user counters and swap status.

Every helper here is a single guarded write, so its check and its effect
land in one statement:

- ``swaps_done`` is incremented in SQL (``swaps_done + 1``), never from a
  value read earlier, so concurrent completions cannot lose an update.
- ``rating`` and ``status`` use compare-and-swap: the UPDATE only matches
  when the row still holds the value the caller read. A ``False`` return
  means another writer got there first.

The caller owns the transaction — pass a ``Connection`` obtained from
``engine.begin()`` so the write participates in the surrounding unit.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import select, update
from sqlalchemy.dialects.sqlite import insert as sqlite_insert

from skillswap.infrastructure.database.schema import completion_credits, swaps, users

if TYPE_CHECKING:
    from sqlalchemy import Connection


def increment_swaps_done(conn: Connection, user_id: str) -> int | None:
    """Atomically add one to ``users.swaps_done`` for *user_id*.

    Returns:
        The new counter value, or None if no such user exists.
    """
    result = conn.execute(
        update(users).where(users.c.id == user_id).values(swaps_done=users.c.swaps_done + 1)
    )
    if result.rowcount == 0:
        return None
    return int(conn.execute(select(users.c.swaps_done).where(users.c.id == user_id)).scalar_one())


def claim_completion_credit(conn: Connection, swap_id: str, user_id: str, now: str) -> bool:
    """Record that *user_id* has been credited for *swap_id*.

    Returns:
        True if the credit is new, False if it was already claimed.
    """
    stmt = (
        sqlite_insert(completion_credits)
        .values(swap_id=swap_id, user_id=user_id, credited_at=now)
        .on_conflict_do_nothing(index_elements=["swap_id", "user_id"])
    )
    return conn.execute(stmt).rowcount == 1


def compare_and_set_rating(
    conn: Connection,
    user_id: str,
    *,
    expected_rating: float,
    expected_swaps_done: int,
    new_rating: float,
) -> bool:
    """Write *new_rating* only if the row still matches what the caller read.

    Both ``rating`` and ``swaps_done`` are compared, since the new average
    was weighted by the ``swaps_done`` value the caller observed.
    """
    result = conn.execute(
        update(users)
        .where(
            users.c.id == user_id,
            users.c.rating == expected_rating,
            users.c.swaps_done == expected_swaps_done,
        )
        .values(rating=new_rating)
    )
    return result.rowcount == 1


def transition_status(
    conn: Connection,
    swap_id: str,
    *,
    expected: str,
    target: str,
    now: str,
) -> bool:
    """Move swap *swap_id* from *expected* to *target* status.

    Returns:
        True if this call performed the transition, False if the swap was
        no longer in *expected* status.
    """
    result = conn.execute(
        update(swaps)
        .where(swaps.c.id == swap_id, swaps.c.status == expected)
        .values(status=target, updated_at=now)
    )
    return result.rowcount == 1
