"""ErrorCollection — field-keyed validation messages.

An empty collection is the valid state. Messages keep insertion order per
field, and fields keep the order in which they first failed.
"""

from __future__ import annotations

from collections.abc import Iterator

BASE_KEY = "base"


def humanize(name: str) -> str:
    """``"date_value"`` -> ``"Date value"``."""
    text = name.replace("_", " ").strip()
    return text[:1].upper() + text[1:]


class ErrorCollection:
    """Mapping from field name (or :data:`BASE_KEY`) to ordered messages."""

    def __init__(self) -> None:
        self._messages: dict[str, list[str]] = {}

    def add(self, name: str, message: str) -> None:
        self._messages.setdefault(name, []).append(message)

    def __getitem__(self, name: str) -> list[str]:
        return list(self._messages.get(name, []))

    def __contains__(self, name: object) -> bool:
        return name in self._messages

    def __iter__(self) -> Iterator[str]:
        return iter(self._messages)

    def __len__(self) -> int:
        return sum(len(messages) for messages in self._messages.values())

    def __bool__(self) -> bool:
        return bool(self._messages)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, ErrorCollection):
            return self._messages == other._messages
        if isinstance(other, dict):
            return self._messages == other
        return NotImplemented

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"ErrorCollection({self._messages!r})"

    def is_empty(self) -> bool:
        return not self._messages

    def keys(self) -> list[str]:
        return list(self._messages)

    def to_dict(self) -> dict[str, list[str]]:
        return {name: list(messages) for name, messages in self._messages.items()}

    def full_messages(self) -> list[str]:
        """Messages prefixed with their humanized field name.

        Messages under :data:`BASE_KEY` are returned as-is.
        """
        full: list[str] = []
        for name, messages in self._messages.items():
            for message in messages:
                if name == BASE_KEY:
                    full.append(message)
                else:
                    full.append(f"{humanize(name)} {message}")
        return full

