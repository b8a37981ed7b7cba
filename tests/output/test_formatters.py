"""Tests for Outcome formatting."""

from __future__ import annotations

import json

from servicekit.domain.errors import ErrorCollection
from servicekit.output.formatters import format_outcome
from servicekit.services.result import Outcome


def _ok(**fields: object) -> Outcome:
    return Outcome(service="app.Greet", success=True, data="hi", result="hi", fields=dict(fields))


def _err() -> Outcome:
    errors = ErrorCollection()
    errors.add("name", "can't be blank")
    return Outcome(
        service="app.Greet",
        success=False,
        errors=errors,
        error_messages=errors.full_messages(),
    )


class TestHumanFormat:
    def test_success(self) -> None:
        output = format_outcome(_ok(name="Ada", tags=["a", "b"]))
        assert output.splitlines() == [
            "OK: app.Greet",
            "  data: hi",
            "  name: Ada",
            '  tags: ["a","b"]',
        ]

    def test_failure(self) -> None:
        assert format_outcome(_err()) == "FAILED: app.Greet\n  - Name can't be blank"


class TestJSONFormat:
    def test_success(self) -> None:
        data = json.loads(format_outcome(_ok(name="Ada"), json_output=True))
        assert data["success"] is True
        assert data["fields"] == {"name": "Ada"}

    def test_failure_serializes_errors(self) -> None:
        data = json.loads(format_outcome(_err(), json_output=True))
        assert data["errors"] == {"name": ["can't be blank"]}
        assert data["error_messages"] == ["Name can't be blank"]

    def test_non_json_values_rendered_as_text(self) -> None:
        from datetime import date

        data = json.loads(format_outcome(_ok(when=date(2024, 1, 1)), json_output=True))
        assert data["fields"]["when"] == "2024-01-01"
