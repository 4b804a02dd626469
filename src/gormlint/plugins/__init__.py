"""Extension layer — plugin system via pluggy.

Discovery: entry_points (pip-installed) plus single-file local plugins.
INVARIANT: Plugin failures are warnings, never errors.
"""

from gormlint.plugins.hookspecs import hookimpl
from gormlint.plugins.manager import PluginManager

__all__ = ["PluginManager", "hookimpl"]
