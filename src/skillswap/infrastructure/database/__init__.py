"""SQLite database engine, schema, and atomic row updates via SQLAlchemy Core."""

from skillswap.infrastructure.database.counters import (
    claim_completion_credit,
    compare_and_set_rating,
    increment_swaps_done,
    transition_status,
)
from skillswap.infrastructure.database.engine import create_db_engine, init_database
from skillswap.infrastructure.database.schema import (
    completion_credits,
    metadata,
    swaps,
    users,
)

__all__ = [
    "claim_completion_credit",
    "compare_and_set_rating",
    "completion_credits",
    "create_db_engine",
    "increment_swaps_done",
    "init_database",
    "metadata",
    "swaps",
    "transition_status",
    "users",
]
