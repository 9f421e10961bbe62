"""
Errors -- Exception taxonomy for lintloop

Everything here is fatal for the run. Merge conflicts and a fix loop that
runs out of attempts are results, not errors, and never raise.
"""

from typing import Optional


class LintloopError(Exception):
    """Base class for errors reported to the user as 'Error: <cause>'."""


class ConfigError(LintloopError):
    """Missing or invalid project/config file, or an unresolvable input."""


class DocumentNotFoundError(LintloopError):
    """A requested file has no document in the project."""

    def __init__(self, path: str):
        super().__init__(f"No source file found for {path}")
        self.path = path


class PluginError(LintloopError):
    """
    A plugin raised while resolving rules, linting or producing fixes.

    Always raised with the original exception chained as __cause__.
    """

    def __init__(
        self,
        plugin: str,
        operation: str,
        path: Optional[str] = None,
        cause: Optional[BaseException] = None
    ):
        where = f" on {path}" if path else ""
        message = f"Plugin '{plugin}' failed in {operation}{where}"
        if cause is not None:
            message += f": {cause}"
        super().__init__(message)
        self.plugin = plugin
        self.operation = operation
        self.path = path
