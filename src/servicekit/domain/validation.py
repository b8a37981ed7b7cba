"""ValidationEngine — collect-all validation over a context.

Rules run in declaration order and every rule runs, even after an earlier
one has failed, so one pass reports every violation.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from servicekit.domain.context import Context
from servicekit.domain.errors import ErrorCollection
from servicekit.domain.rules import Rule, TypeRule
from servicekit.domain.types import TypeSpec


class ValidationEngine:
    """Runs rules and type constraints and reports an ErrorCollection."""

    def validate(
        self,
        context: Context,
        rules: Iterable[Rule],
        constraints: Mapping[str, TypeSpec] | None = None,
        *,
        subject: Any = None,
    ) -> ErrorCollection:
        """Apply *rules* in order, then any extra *constraints*.

        Registered type constraints normally arrive inside *rules* as
        :class:`TypeRule` entries, interleaved with the field rules declared
        around them. *constraints* covers ad-hoc checks outside a registry.
        """
        errors = ErrorCollection()
        for rule in rules:
            rule.apply(context, errors, subject)
        for name, spec in (constraints or {}).items():
            TypeRule(name, spec).apply(context, errors, subject)
        return errors


default_engine = ValidationEngine()
