"""Shared pytest fixtures and test helpers for skillswap tests."""

from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path
from typing import Any

import pytest
from click.testing import CliRunner
from sqlalchemy.engine import Engine

from skillswap.config.settings import SkillSwapSettings
from skillswap.infrastructure.database.engine import init_database
from skillswap.infrastructure.store import Store


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def db_engine(tmp_path: Path) -> Iterator[Engine]:
    """Initialized SQLite engine with all tables created."""
    engine = init_database(tmp_path / "test.db")
    try:
        yield engine
    finally:
        engine.dispose()


@pytest.fixture
def settings(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> SkillSwapSettings:
    """Settings rooted at a temp directory, isolated from the environment."""
    monkeypatch.delenv("SKILLSWAP_CONFIG", raising=False)
    monkeypatch.delenv("SKILLSWAP_DB_PATH", raising=False)
    return SkillSwapSettings.from_cli(data_root=tmp_path)


@pytest.fixture
def store(settings: SkillSwapSettings) -> Iterator[Store]:
    """Fully initialized store on a temp directory."""
    s = Store(settings)
    try:
        yield s
    finally:
        s.close()


@pytest.fixture(autouse=True)
def _reset_telemetry() -> Iterator[None]:
    """Keep a verbose CLI run from leaking telemetry into later tests."""
    yield
    from skillswap.services.telemetry import disable_telemetry

    disable_telemetry()


@pytest.fixture
def _isolated_store(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Change CWD to a temp directory so the CLI creates an isolated database.

    Use via ``@pytest.mark.usefixtures("_isolated_store")`` on command test
    classes.
    """
    monkeypatch.delenv("SKILLSWAP_CONFIG", raising=False)
    monkeypatch.delenv("SKILLSWAP_DB_PATH", raising=False)
    monkeypatch.chdir(tmp_path)


# ---------------------------------------------------------------------------
# Shared test helpers (used across service test modules)
# ---------------------------------------------------------------------------


def register_user(store: Store, name: str, **kwargs: Any) -> dict[str, Any]:
    """Register a user via ProfileService, asserting success."""
    from skillswap.services.profile import ProfileService

    result = ProfileService(store).register(name, **kwargs)
    assert result.ok, result.error
    return result.data


def request_swap(
    store: Store,
    sender_id: str,
    receiver_id: str,
    offered: str = "python",
    requested: str = "guitar",
) -> dict[str, Any]:
    """Open a pending swap via SwapService, asserting success."""
    from skillswap.services.swap import SwapService

    result = SwapService(store).request(sender_id, receiver_id, offered, requested)
    assert result.ok, result.error
    return result.data


def active_swap(store: Store, sender_id: str, receiver_id: str) -> dict[str, Any]:
    """Open a swap and have the receiver accept it."""
    from skillswap.services.swap import SwapService

    swap = request_swap(store, sender_id, receiver_id)
    result = SwapService(store).respond(swap["id"], receiver_id, "accept")
    assert result.ok, result.error
    return result.data


def completed_swap(store: Store, sender_id: str, receiver_id: str) -> dict[str, Any]:
    """Open, accept, and complete a swap."""
    from skillswap.services.swap import SwapService

    swap = active_swap(store, sender_id, receiver_id)
    result = SwapService(store).complete(swap["id"], sender_id)
    assert result.ok, result.error
    return result.data


def set_counters(store: Store, user_id: str, *, rating: float, swaps_done: int) -> None:
    """Seed ledger-owned columns directly (test setup only)."""
    from sqlalchemy import update

    from skillswap.infrastructure.database.schema import users

    with store.transaction() as txn:
        txn.conn.execute(
            update(users).where(users.c.id == user_id).values(rating=rating, swaps_done=swaps_done)
        )
