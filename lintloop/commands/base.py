"""
BaseCommand -- Shared foundation for all CLI commands

Commands receive the CLI instance and access its resources through
properties instead of building their own.
"""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ..cli import LintCLI


class BaseCommand:
    """Base class for CLI commands with access to shared resources."""

    def __init__(self, cli: 'LintCLI'):
        self._cli = cli

    @property
    def config(self):
        """Application configuration."""
        return self._cli.config

    @property
    def config_manager(self):
        return self._cli.config_manager

    @property
    def symbols(self):
        """Symbol set for display (Unicode/ASCII)."""
        return self._cli.symbols

    @property
    def engine(self):
        """Lint engine (built on first access)."""
        return self._cli.engine

    @property
    def provider(self):
        """Document provider over the project's files."""
        return self._cli.engine.provider
