"""Tests for ServicekitSettings — unified settings with TOML source."""

from __future__ import annotations

from pathlib import Path

import click
import pytest

from servicekit.config.settings import ServicekitSettings


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("SERVICEKIT_CONFIG", raising=False)
    monkeypatch.delenv("SERVICEKIT_QUEUE__ADAPTER", raising=False)


class TestDefaults:
    def test_all_defaults(self, tmp_path: Path) -> None:
        """With no TOML and no env vars, all fields use code defaults."""
        settings = ServicekitSettings.from_cli(project_root=tmp_path)
        assert settings.project_root == tmp_path
        assert settings.config_path is None
        assert settings.json_output is False
        assert settings.queue.adapter == "inline"
        assert settings.queue.max_attempts == 3
        assert settings.plugins.enabled is True

    def test_frozen(self, tmp_path: Path) -> None:
        settings = ServicekitSettings.from_cli(project_root=tmp_path)
        with pytest.raises(Exception):
            settings.verbose = True  # type: ignore[misc]

    def test_database_path_relative_to_root(self, tmp_path: Path) -> None:
        settings = ServicekitSettings.from_cli(project_root=tmp_path)
        assert settings.database_path == tmp_path / ".servicekit" / "jobs.db"


class TestTomlSource:
    def test_loads_from_toml(self, tmp_path: Path) -> None:
        toml = tmp_path / "servicekit.toml"
        toml.write_text('[queue]\nadapter = "database"\nmax_attempts = 5\n')
        settings = ServicekitSettings.from_cli(project_root=tmp_path)
        assert settings.config_path is not None
        assert settings.config_path.resolve() == toml.resolve()
        assert settings.queue.adapter == "database"
        assert settings.queue.max_attempts == 5
        assert settings.queue.default_queue == "default"  # default preserved

    def test_walk_up_sets_project_root(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        (tmp_path / "servicekit.toml").write_text("")
        nested = tmp_path / "app" / "services"
        nested.mkdir(parents=True)
        monkeypatch.chdir(nested)
        settings = ServicekitSettings.from_cli()
        assert settings.project_root == tmp_path.resolve()

    def test_explicit_config_path(self, tmp_path: Path) -> None:
        toml = tmp_path / "custom.toml"
        toml.write_text('[queue]\ndefault_queue = "low"\n')
        settings = ServicekitSettings.from_cli(config_path=str(toml))
        assert settings.queue.default_queue == "low"
        assert settings.project_root == tmp_path

    def test_invalid_toml(self, tmp_path: Path) -> None:
        (tmp_path / "servicekit.toml").write_text("[queue\n")
        with pytest.raises(click.ClickException, match="Invalid TOML"):
            ServicekitSettings.from_cli(project_root=tmp_path)

    def test_invalid_value(self, tmp_path: Path) -> None:
        (tmp_path / "servicekit.toml").write_text("[queue]\nmax_workers = 0\n")
        with pytest.raises(ValueError, match="must be at least 1"):
            ServicekitSettings.from_cli(project_root=tmp_path)


class TestPriority:
    def test_env_overrides_toml(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        (tmp_path / "servicekit.toml").write_text('[queue]\nadapter = "database"\n')
        monkeypatch.setenv("SERVICEKIT_QUEUE__ADAPTER", "test")
        settings = ServicekitSettings.from_cli(project_root=tmp_path)
        assert settings.queue.adapter == "test"

    def test_cli_flags_override_everything(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("SERVICEKIT_VERBOSE", "false")
        settings = ServicekitSettings.from_cli(project_root=tmp_path, verbose=True)
        assert settings.verbose is True
