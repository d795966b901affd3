"""Tests for atomic counter and compare-and-swap helpers."""

from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

from sqlalchemy import insert, select
from sqlalchemy.engine import Engine

from skillswap.infrastructure.database.counters import (
    claim_completion_credit,
    compare_and_set_rating,
    increment_swaps_done,
    transition_status,
)
from skillswap.infrastructure.database.engine import init_database
from skillswap.infrastructure.database.schema import completion_credits, swaps, users

NOW = "2026-01-01T00:00:00.000000+00:00"


def _seed_user(engine: Engine, user_id: str, *, rating: float = 0.0, swaps_done: int = 0) -> None:
    with engine.begin() as conn:
        conn.execute(
            insert(users).values(
                id=user_id,
                name=user_id,
                rating=rating,
                swaps_done=swaps_done,
                created_at=NOW,
            )
        )


def _seed_swap(engine: Engine, swap_id: str, status: str = "pending") -> None:
    _seed_user(engine, f"{swap_id}-a")
    _seed_user(engine, f"{swap_id}-b")
    with engine.begin() as conn:
        conn.execute(
            insert(swaps).values(
                id=swap_id,
                sender_id=f"{swap_id}-a",
                receiver_id=f"{swap_id}-b",
                skill_offered="python",
                skill_requested="guitar",
                status=status,
                created_at=NOW,
            )
        )


def _swaps_done(engine: Engine, user_id: str) -> int:
    with engine.connect() as conn:
        return conn.execute(select(users.c.swaps_done).where(users.c.id == user_id)).scalar_one()


class TestIncrementSwapsDone:
    def test_increments(self, db_engine: Engine) -> None:
        _seed_user(db_engine, "u1")
        with db_engine.begin() as conn:
            assert increment_swaps_done(conn, "u1") == 1
            assert increment_swaps_done(conn, "u1") == 2
        assert _swaps_done(db_engine, "u1") == 2

    def test_unknown_user(self, db_engine: Engine) -> None:
        with db_engine.begin() as conn:
            assert increment_swaps_done(conn, "ghost") is None

    def test_concurrent_increments_are_not_lost(self, tmp_path: Path) -> None:
        engine = init_database(tmp_path / "race.db")
        try:
            _seed_user(engine, "u1")

            def bump() -> None:
                with engine.begin() as conn:
                    increment_swaps_done(conn, "u1")

            with ThreadPoolExecutor(max_workers=8) as pool:
                for future in [pool.submit(bump) for _ in range(40)]:
                    future.result()

            assert _swaps_done(engine, "u1") == 40
        finally:
            engine.dispose()


class TestCompletionCredit:
    def test_first_claim_wins(self, db_engine: Engine) -> None:
        _seed_swap(db_engine, "s1", status="completed")
        with db_engine.begin() as conn:
            assert claim_completion_credit(conn, "s1", "s1-a", NOW) is True
            assert claim_completion_credit(conn, "s1", "s1-a", NOW) is False
            assert claim_completion_credit(conn, "s1", "s1-b", NOW) is True
        with db_engine.connect() as conn:
            rows = conn.execute(select(completion_credits)).fetchall()
        assert len(rows) == 2


class TestCompareAndSetRating:
    def test_matching_snapshot_writes(self, db_engine: Engine) -> None:
        _seed_user(db_engine, "u1", rating=4.0, swaps_done=3)
        with db_engine.begin() as conn:
            assert compare_and_set_rating(
                conn, "u1", expected_rating=4.0, expected_swaps_done=3, new_rating=4.25
            )
        with db_engine.connect() as conn:
            rating = conn.execute(select(users.c.rating).where(users.c.id == "u1")).scalar_one()
        assert rating == 4.25

    def test_stale_rating_is_refused(self, db_engine: Engine) -> None:
        _seed_user(db_engine, "u1", rating=4.0, swaps_done=3)
        with db_engine.begin() as conn:
            assert not compare_and_set_rating(
                conn, "u1", expected_rating=3.0, expected_swaps_done=3, new_rating=5.0
            )

    def test_stale_weight_is_refused(self, db_engine: Engine) -> None:
        _seed_user(db_engine, "u1", rating=4.0, swaps_done=4)
        with db_engine.begin() as conn:
            assert not compare_and_set_rating(
                conn, "u1", expected_rating=4.0, expected_swaps_done=3, new_rating=4.25
            )


class TestTransitionStatus:
    def test_applies_when_expected_matches(self, db_engine: Engine) -> None:
        _seed_swap(db_engine, "s1")
        with db_engine.begin() as conn:
            assert transition_status(conn, "s1", expected="pending", target="active", now=NOW)
        with db_engine.connect() as conn:
            row = conn.execute(select(swaps).where(swaps.c.id == "s1")).one()
        assert row.status == "active"
        assert row.updated_at == NOW

    def test_second_transition_from_same_state_loses(self, db_engine: Engine) -> None:
        _seed_swap(db_engine, "s1")
        with db_engine.begin() as conn:
            assert transition_status(conn, "s1", expected="pending", target="active", now=NOW)
            assert not transition_status(
                conn, "s1", expected="pending", target="rejected", now=NOW
            )
        with db_engine.connect() as conn:
            status = conn.execute(select(swaps.c.status).where(swaps.c.id == "s1")).scalar_one()
        assert status == "active"

    def test_unknown_swap(self, db_engine: Engine) -> None:
        with db_engine.begin() as conn:
            assert not transition_status(conn, "nope", expected="pending", target="active", now=NOW)
