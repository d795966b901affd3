"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, skillswap.toml only contains
overrides. A fresh install needs no config file at all.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

# --- skillswap.toml sections ---


class StoreConfig(BaseModel):
    """[store] section."""

    model_config = {"frozen": True}

    db_path: str | None = None  # default: {data_root}/.skillswap/skillswap.db
    busy_timeout_s: float = 30.0


class SkillsConfig(BaseModel):
    """[skills] section."""

    model_config = {"frozen": True}

    max_entries: int = 20


class ProfileConfig(BaseModel):
    """[profile] section."""

    model_config = {"frozen": True}

    name_min_length: int = 2
    bio_max_length: int = 200


class FeedConfig(BaseModel):
    """[feed] section."""

    model_config = {"frozen": True}

    default_limit: int = 0  # 0 = unlimited


class LedgerConfig(BaseModel):
    """[ledger] section."""

    model_config = {"frozen": True}

    max_cas_retries: int = Field(default=16, ge=1)

