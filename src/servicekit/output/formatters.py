"""Human/JSON formatting for Outcomes.

The CLI renders an Outcome for humans (key-value lines) or machines
(``--json``). Values that JSON cannot represent are rendered with ``str``.
"""

from __future__ import annotations

import json as _json
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from servicekit.services.result import Outcome


def _format_value(value: Any) -> str:
    if isinstance(value, (dict, list)):
        return _json.dumps(value, separators=(",", ":"), default=str)
    return str(value)


def format_outcome(outcome: Outcome, *, json_output: bool = False) -> str:
    """Format an Outcome for display.

    Args:
        outcome: The outcome to format.
        json_output: If True, return JSON; otherwise return human-readable text.
    """
    if json_output:
        return _json.dumps(outcome.to_payload(), indent=2, default=str)
    if outcome.success:
        lines = [f"OK: {outcome.service}"]
        if outcome.data is not None:
            lines.append(f"  data: {_format_value(outcome.data)}")
        for key, value in outcome.fields.items():
            lines.append(f"  {key}: {_format_value(value)}")
        return "\n".join(lines)
    lines = [f"FAILED: {outcome.service}"]
    lines.extend(f"  - {message}" for message in outcome.error_messages or [])
    return "\n".join(lines)
