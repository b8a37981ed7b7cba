"""Tests for the call and enqueue CLI commands."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from click.testing import CliRunner

from servicekit.cli import cli
from servicekit.domain.fields import Input, Output
from servicekit.domain.rules import Presence
from servicekit.services.base import Service

GREETED: list[str] = []


class Greet(Service):
    name = Input(str, rules=[Presence()])
    age = Input(int)
    greeting = Output(str)

    def perform(self) -> str:
        GREETED.append(self.name)
        self.greeting = f"Hello, {self.name}!"
        return self.greeting


@pytest.fixture(autouse=True)
def _isolated_project(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Run every command from an empty project directory."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("SERVICEKIT_CONFIG", raising=False)
    GREETED.clear()


class TestCallCommand:
    def test_success(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["call", Greet.service_path(), "name=Ada", "age=36"])
        assert result.exit_code == 0, result.output
        assert "OK:" in result.output
        assert "data: Hello, Ada!" in result.output
        assert "greeting: Hello, Ada!" in result.output

    def test_json_output(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["--json", "call", Greet.service_path(), "name=Ada"])
        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert data["success"] is True
        assert data["data"] == "Hello, Ada!"
        assert data["fields"]["greeting"] == "Hello, Ada!"

    def test_values_parsed_as_json(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["call", Greet.service_path(), "name=Ada", 'age="36"'])
        assert result.exit_code == 1
        assert "Age must be a int" in result.output

    def test_validation_failure_exits_1(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["call", Greet.service_path(), "name="])
        assert result.exit_code == 1
        assert "FAILED:" in result.output
        assert "Name can't be blank" in result.output
        assert GREETED == []

    def test_undeclared_argument(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["call", Greet.service_path(), "name=Ada", "nick=A"])
        assert result.exit_code == 1
        assert "Cannot set 'nick'" in result.output

    def test_unknown_service(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["call", "nowhere.Missing"])
        assert result.exit_code == 1
        assert "Failed to resolve service class: nowhere.Missing" in result.output

    def test_bad_assignment(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["call", Greet.service_path(), "name"])
        assert result.exit_code == 2
        assert "expected KEY=VALUE" in result.output


class TestEnqueueCommand:
    def test_inline_adapter_runs_now(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["enqueue", Greet.service_path(), "name=Ada"])
        assert result.exit_code == 0, result.output
        assert "[completed]" in result.output
        assert GREETED == ["Ada"]

    def test_inline_failure_exits_1(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["enqueue", Greet.service_path(), "name="])
        assert result.exit_code == 1
        assert "failed with errors" in result.output

    def test_database_adapter_defers(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        (tmp_path / "servicekit.toml").write_text(
            '[queue]\nadapter = "database"\nsync = true\n[plugins]\nenabled = false\n'
        )
        result = cli_runner.invoke(
            cli,
            ["--json", "enqueue", Greet.service_path(), "name=Ada", "--queue", "greetings"],
        )
        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert data["status"] == "pending"
        assert data["queue"] == "greetings"
        assert data["args"] == {"name": "Ada"}
        assert GREETED == []
