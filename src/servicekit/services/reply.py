"""Framework-agnostic response formatting for HTTP handlers.

``reply`` turns a condition and a record into a status code and a JSON-ready
body; web frameworks render the :class:`Reply` however they render JSON::

    outcome = CreateUser.call(**payload)
    r = reply_with(outcome, success=201)
    return JSONResponse(r.body, status_code=r.status)
"""

from __future__ import annotations

from http import HTTPStatus
from typing import Any

from pydantic import BaseModel, ConfigDict

from servicekit.services.result import Outcome

UNKNOWN_ERROR = "Unknown error"
MESSAGE_SEPARATOR = " -- "


class Reply(BaseModel):
    """Status code plus body."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    status: int
    body: Any


def _full_messages(source: Any) -> list[str] | None:
    full_messages = getattr(source, "full_messages", None)
    if callable(full_messages):
        messages = list(full_messages())
        return messages or None
    return None


def _as_list(errors: Any) -> list[str] | None:
    if isinstance(errors, str):
        return [errors]
    if isinstance(errors, (list, tuple)):
        return [str(e) for e in errors] or None
    return None


def error_list(errors: Any, record: Any) -> list[str]:
    """Pick the error messages to show, most specific source first."""
    return (
        _full_messages(errors)
        or _full_messages(getattr(record, "errors", None))
        or _as_list(errors)
        or [UNKNOWN_ERROR]
    )


def format_errors(messages: list[str]) -> str:
    """``["Error one", "Error two"]`` -> ``"Error one -- error two"``."""
    return MESSAGE_SEPARATOR.join(messages).capitalize()


def reply(
    *,
    condition: bool,
    record: Any,
    errors: Any = None,
    success: int = HTTPStatus.OK,
    failure: int = HTTPStatus.UNPROCESSABLE_ENTITY,
) -> Reply:
    if condition:
        return Reply(status=int(success), body=record)
    return Reply(status=int(failure), body={"errors": format_errors(error_list(errors, record))})


rejoin = reply


def reply_with(
    outcome: Outcome,
    *,
    success: int = HTTPStatus.OK,
    failure: int = HTTPStatus.UNPROCESSABLE_ENTITY,
) -> Reply:
    """Reply from an Outcome: its success, data, and errors."""
    return reply(
        condition=outcome.success,
        record=outcome.data,
        errors=outcome.errors,
        success=success,
        failure=failure,
    )
