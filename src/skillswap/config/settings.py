"""Unified settings — CLI flags, env vars, and TOML config in one object.

Priority chain (highest to lowest):
  1. Init kwargs  — CLI flags passed by Click
  2. Env vars     — ``SKILLSWAP_*`` prefix
  3. TOML file    — ``skillswap.toml`` discovered via walk-up
  4. Code defaults — baked into the section models

Uses Pydantic Settings v2 with a custom :class:`TomlSettingsSource` that
reuses the ``find_config`` walk-up discovery from
:mod:`skillswap.config.discovery`.
"""

from __future__ import annotations

import threading
import tomllib
from pathlib import Path
from typing import Any

from pydantic import Field
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource

from skillswap.config.discovery import find_config
from skillswap.config.models import (
    FeedConfig,
    LedgerConfig,
    ProfileConfig,
    SkillsConfig,
    StoreConfig,
)

DATA_DIRNAME = ".skillswap"
DB_FILENAME = "skillswap.db"


class TomlSettingsSource(PydanticBaseSettingsSource):
    """Read settings from a ``skillswap.toml`` file discovered via walk-up."""

    def __init__(self, settings_cls: type[BaseSettings], toml_path: Path | None) -> None:
        super().__init__(settings_cls)
        self._data: dict[str, Any] = {}
        if toml_path and toml_path.is_file():
            raw = toml_path.read_text(encoding="utf-8")
            try:
                self._data = tomllib.loads(raw)
            except tomllib.TOMLDecodeError as exc:
                import click

                msg = f"Invalid TOML in {toml_path}: {exc}"
                raise click.ClickException(msg) from exc

    def get_field_value(self, field: Any, field_name: str) -> tuple[Any, str, bool]:
        """Return ``(value, field_name, value_is_complex)``."""
        val = self._data.get(field_name)
        return val, field_name, field_name in self._data

    def __call__(self) -> dict[str, Any]:
        """Return the full TOML data dict for Pydantic to merge."""
        return self._data


# Thread-local storage for TOML path during construction.
_tls = threading.local()


class SkillSwapSettings(BaseSettings):
    """Unified settings for the skillswap core and CLI.

    Attributes:
        data_root: Directory holding ``.skillswap/`` (parent of
            ``skillswap.toml``, or CWD if no config found).
        config_path: The TOML file in effect, or None.
        db_path: Explicit ``--db`` override; wins over ``[store] db_path``.
    """

    model_config = {
        "frozen": True,
        "env_prefix": "SKILLSWAP_",
        "env_nested_delimiter": "__",
    }

    # --- Resolved paths (not in TOML, derived from config location) ---
    data_root: Path = Field(default_factory=Path.cwd)
    config_path: Path | None = None
    db_path: Path | None = None

    # --- CLI flags ---
    json_output: bool = False
    quiet: bool = False
    verbose: bool = False
    log_json: bool = False

    # --- TOML sections ---
    store: StoreConfig = Field(default_factory=StoreConfig)
    skills: SkillsConfig = Field(default_factory=SkillsConfig)
    profile: ProfileConfig = Field(default_factory=ProfileConfig)
    feed: FeedConfig = Field(default_factory=FeedConfig)
    ledger: LedgerConfig = Field(default_factory=LedgerConfig)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Insert TOML source between env vars and defaults."""
        toml_path = getattr(_tls, "toml_path", None)
        return (
            init_settings,
            env_settings,
            TomlSettingsSource(settings_cls, toml_path),
        )

    def resolved_db_path(self) -> Path:
        """The SQLite file to open.

        ``--db`` beats ``[store] db_path``; relative TOML paths resolve
        against *data_root*.
        """
        if self.db_path is not None:
            return self.db_path
        if self.store.db_path:
            p = Path(self.store.db_path)
            return p if p.is_absolute() else self.data_root / p
        return self.data_root / DATA_DIRNAME / DB_FILENAME

    @classmethod
    def from_cli(
        cls,
        *,
        config_path: str | None = None,
        data_root: Path | None = None,
        **cli_flags: Any,
    ) -> SkillSwapSettings:
        """Construct settings from CLI invocation.

        Discovers ``skillswap.toml`` via walk-up (or explicit *config_path*),
        resolves *data_root* from the config file's parent directory,
        and merges CLI flags as highest-priority overrides.
        """
        toml_path: Path | None = None
        if config_path:
            p = Path(config_path)
            if p.is_file():
                toml_path = p
        else:
            toml_path = find_config(data_root)

        resolved_root = data_root
        if resolved_root is None:
            resolved_root = toml_path.parent if toml_path else Path.cwd()

        # None-valued flags fall through to env/TOML/defaults.
        overrides = {k: v for k, v in cli_flags.items() if v is not None}

        _tls.toml_path = toml_path
        try:
            return cls(
                data_root=resolved_root,
                config_path=toml_path,
                **overrides,
            )
        finally:
            _tls.toml_path = None
