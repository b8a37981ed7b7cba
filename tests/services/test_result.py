"""Tests for Outcome — the uniform invocation result."""

from __future__ import annotations

import json

import pytest
from pydantic import ValidationError

from servicekit.domain.errors import ErrorCollection
from servicekit.services.result import Outcome


def _errors() -> ErrorCollection:
    errors = ErrorCollection()
    errors.add("name", "can't be blank")
    return errors


class TestOutcome:
    def test_success_construction(self) -> None:
        outcome = Outcome(service="app.CreateUser", success=True, data={"id": 1})
        assert outcome.success
        assert not outcome.failure
        assert outcome.data == {"id": 1}
        assert outcome.errors is None

    def test_failure_construction(self) -> None:
        outcome = Outcome(
            service="app.CreateUser",
            success=False,
            errors=_errors(),
            error_messages=["Name can't be blank"],
        )
        assert outcome.failure
        assert outcome.errors == {"name": ["can't be blank"]}

    def test_field_attributes(self) -> None:
        outcome = Outcome(service="s", success=True, fields={"greeting": "hi"})
        assert outcome.greeting == "hi"

    def test_unknown_attribute_raises(self) -> None:
        outcome = Outcome(service="s", success=True)
        with pytest.raises(AttributeError):
            outcome.nope  # noqa: B018

    def test_payload_serializes_errors(self) -> None:
        outcome = Outcome(service="s", success=False, errors=_errors())
        payload = outcome.to_payload()
        assert payload["errors"] == {"name": ["can't be blank"]}
        assert json.loads(json.dumps(payload))["success"] is False

    def test_frozen(self) -> None:
        outcome = Outcome(service="s", success=True)
        with pytest.raises(ValidationError):
            outcome.success = False  # type: ignore[misc]
