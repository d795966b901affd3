"""Tests for SkillSwapSettings — priority chain and path resolution."""

from __future__ import annotations

from pathlib import Path

import click
import pytest
from pydantic import ValidationError

from skillswap.config.settings import SkillSwapSettings


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for var in (
        "SKILLSWAP_CONFIG",
        "SKILLSWAP_DB_PATH",
        "SKILLSWAP_VERBOSE",
        "SKILLSWAP_LEDGER__MAX_CAS_RETRIES",
    ):
        monkeypatch.delenv(var, raising=False)


class TestDefaults:
    def test_code_defaults(self, tmp_path: Path) -> None:
        s = SkillSwapSettings.from_cli(data_root=tmp_path)
        assert s.config_path is None
        assert s.skills.max_entries == 20
        assert s.profile.bio_max_length == 200
        assert s.ledger.max_cas_retries == 16
        assert s.feed.default_limit == 0
        assert s.json_output is False

    def test_default_db_path(self, tmp_path: Path) -> None:
        s = SkillSwapSettings.from_cli(data_root=tmp_path)
        assert s.resolved_db_path() == tmp_path / ".skillswap" / "skillswap.db"

    def test_frozen(self, tmp_path: Path) -> None:
        s = SkillSwapSettings.from_cli(data_root=tmp_path)
        with pytest.raises(ValidationError):
            s.verbose = True  # type: ignore[misc]


class TestPriority:
    def test_toml_overrides_defaults(self, tmp_path: Path) -> None:
        (tmp_path / "skillswap.toml").write_text(
            '[ledger]\nmax_cas_retries = 4\n\n[feed]\ndefault_limit = 10\n'
        )
        s = SkillSwapSettings.from_cli(data_root=tmp_path)
        assert s.config_path == tmp_path / "skillswap.toml"
        assert s.ledger.max_cas_retries == 4
        assert s.feed.default_limit == 10

    def test_env_overrides_toml(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        (tmp_path / "skillswap.toml").write_text("[ledger]\nmax_cas_retries = 4\n")
        monkeypatch.setenv("SKILLSWAP_LEDGER__MAX_CAS_RETRIES", "9")
        s = SkillSwapSettings.from_cli(data_root=tmp_path)
        assert s.ledger.max_cas_retries == 9

    def test_cli_flag_overrides_env(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("SKILLSWAP_VERBOSE", "true")
        s = SkillSwapSettings.from_cli(data_root=tmp_path, verbose=False)
        assert s.verbose is False

    def test_none_flags_fall_through(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("SKILLSWAP_VERBOSE", "true")
        s = SkillSwapSettings.from_cli(data_root=tmp_path, verbose=None)
        assert s.verbose is True

    def test_explicit_config_path(self, tmp_path: Path) -> None:
        cfg = tmp_path / "custom.toml"
        cfg.write_text("[skills]\nmax_entries = 5\n")
        s = SkillSwapSettings.from_cli(config_path=str(cfg), data_root=tmp_path)
        assert s.skills.max_entries == 5

    def test_toml_values_are_validated(self, tmp_path: Path) -> None:
        (tmp_path / "skillswap.toml").write_text("[ledger]\nmax_cas_retries = 0\n")
        with pytest.raises(ValidationError):
            SkillSwapSettings.from_cli(data_root=tmp_path)

    def test_invalid_toml(self, tmp_path: Path) -> None:
        (tmp_path / "skillswap.toml").write_text("[ledger\n")
        with pytest.raises(click.ClickException, match="Invalid TOML"):
            SkillSwapSettings.from_cli(data_root=tmp_path)


class TestDbPath:
    def test_cli_db_wins(self, tmp_path: Path) -> None:
        (tmp_path / "skillswap.toml").write_text('[store]\ndb_path = "toml.db"\n')
        s = SkillSwapSettings.from_cli(data_root=tmp_path, db_path=tmp_path / "cli.db")
        assert s.resolved_db_path() == tmp_path / "cli.db"

    def test_relative_toml_db_resolves_against_root(self, tmp_path: Path) -> None:
        (tmp_path / "skillswap.toml").write_text('[store]\ndb_path = "data/app.db"\n')
        s = SkillSwapSettings.from_cli(data_root=tmp_path)
        assert s.resolved_db_path() == tmp_path / "data" / "app.db"

    def test_data_root_from_config_location(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        (tmp_path / "skillswap.toml").write_text("")
        nested = tmp_path / "a" / "b"
        nested.mkdir(parents=True)
        monkeypatch.chdir(nested)
        s = SkillSwapSettings.from_cli()
        assert s.data_root.resolve() == tmp_path.resolve()
