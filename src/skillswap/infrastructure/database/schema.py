"""SQLAlchemy Core table definitions for the skillswap database.

Swaps are append-only history: rows are inserted by the lifecycle engine,
their ``status`` is advanced in place, and they are never deleted.
``rating`` and ``swaps_done`` on ``users`` are written only by the ledger.
"""

from __future__ import annotations

from sqlalchemy import (
    REAL,
    CheckConstraint,
    Column,
    ForeignKey,
    Index,
    Integer,
    MetaData,
    PrimaryKeyConstraint,
    Table,
    Text,
    UniqueConstraint,
)

from skillswap.domain.reputation import MAX_RATING

metadata = MetaData()

users = Table(
    "users",
    metadata,
    Column("id", Text, primary_key=True),
    Column("name", Text, nullable=False),
    Column("email", Text, unique=True),
    Column("bio", Text, nullable=False, default="", server_default=""),
    Column("avatar_url", Text),
    Column("skills_teach", Text, nullable=False, default="[]", server_default="[]"),  # JSON array
    Column("skills_learn", Text, nullable=False, default="[]", server_default="[]"),  # JSON array
    Column("rating", REAL, nullable=False, default=0.0, server_default="0.0"),
    Column("swaps_done", Integer, nullable=False, default=0, server_default="0"),
    Column("created_at", Text, nullable=False),
    CheckConstraint(f"rating >= 0 AND rating <= {MAX_RATING}", name="ck_users_rating_range"),
    CheckConstraint("swaps_done >= 0", name="ck_users_swaps_done_nonneg"),
)

swaps = Table(
    "swaps",
    metadata,
    Column("id", Text, primary_key=True),
    Column("sender_id", Text, ForeignKey("users.id"), nullable=False),
    Column("receiver_id", Text, ForeignKey("users.id"), nullable=False),
    Column("skill_offered", Text, nullable=False),
    Column("skill_requested", Text, nullable=False),
    Column("status", Text, nullable=False, default="pending", server_default="pending"),
    Column("created_at", Text, nullable=False),
    Column("updated_at", Text),
    UniqueConstraint("sender_id", "receiver_id", "created_at"),
    CheckConstraint("sender_id != receiver_id", name="ck_swaps_distinct_parties"),
)

# One row per participant per completed swap; guards against double-counting
# when a completion is replayed.
completion_credits = Table(
    "completion_credits",
    metadata,
    Column("swap_id", Text, ForeignKey("swaps.id"), nullable=False),
    Column("user_id", Text, ForeignKey("users.id"), nullable=False),
    Column("credited_at", Text, nullable=False),
    PrimaryKeyConstraint("swap_id", "user_id"),
)

# ---------------------------------------------------------------------------
# Indexes for participant lookups
# ---------------------------------------------------------------------------

Index("ix_swaps_sender", swaps.c.sender_id)
Index("ix_swaps_receiver", swaps.c.receiver_id)
Index("ix_swaps_status", swaps.c.status)
