"""Extension layer — job lifecycle plugins via pluggy.

INVARIANT: Plugin failures are warnings, never errors.
"""

from servicekit.plugins.hookspecs import hookimpl
from servicekit.plugins.manager import PluginManager

__all__ = ["PluginManager", "hookimpl"]
