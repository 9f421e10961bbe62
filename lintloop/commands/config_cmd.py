"""
ConfigCommand -- Show or change project configuration
"""

import sys

from ..commands.base import BaseCommand
from ..presentation.symbols import safe_print


class ConfigCommand(BaseCommand):
    """Display or update lintloop.yaml settings."""

    def show(self) -> int:
        safe_print(self.config_manager.display())
        return 0

    def get(self, key: str) -> int:
        value = self.config_manager.get(key)
        if value is None:
            safe_print(f"Unknown or unset key: {key}", file=sys.stderr)
            return 1
        safe_print(value)
        return 0

    def set(self, key: str, value: str) -> int:
        error = self.config_manager.set(key, value)
        if error:
            safe_print(f"Error: {error}", file=sys.stderr)
            return 1
        safe_print(f"Set {key} = {value}")
        return 0


def register_parser(subparsers):
    """Register config command parser."""
    p = subparsers.add_parser('config', help='Show or change configuration')
    p.add_argument('--get', metavar='KEY', help='Print one value (e.g., fix.max_attempts)')
    p.add_argument('--set', nargs=2, metavar=('KEY', 'VALUE'),
                   help='Set a value in lintloop.yaml (e.g., rules.no-tabs warning)')
    return p


def handle(cli, args):
    """Handle config command dispatch."""
    if args.set:
        return cli._config_cmd.set(*args.set)
    if args.get:
        return cli._config_cmd.get(args.get)
    return cli._config_cmd.show()
