"""
RulesCommand -- List built-in rules and how they are configured
"""

from ..commands.base import BaseCommand
from ..core.diagnostics import Severity
from ..presentation.symbols import safe_print
from ..rules import BUILTIN_RULES, effective_severity


class RulesCommand(BaseCommand):
    """Show every built-in rule with its effective severity."""

    def list_rules(self, enabled_only: bool = False) -> int:
        rules = self.config.rules
        width = max(len(name) for name in BUILTIN_RULES)

        for name, rule in BUILTIN_RULES.items():
            severity = effective_severity(rule, rules[name]) if name in rules else Severity.OFF
            if enabled_only and severity is Severity.OFF:
                continue
            safe_print(f"{name:<{width}}  {severity.value:<7}  {rule.description}")

        unknown = [name for name in rules if name not in BUILTIN_RULES]
        if unknown:
            safe_print("")
            safe_print(f"Handled by plugins: {', '.join(unknown)}")
        return 0


def register_parser(subparsers):
    """Register rules command parser."""
    p = subparsers.add_parser('rules', help='List built-in rules')
    p.add_argument('--enabled', action='store_true',
                   help='Only show rules that are turned on')
    return p


def handle(cli, args):
    """Handle rules command dispatch."""
    return cli._rules_cmd.list_rules(enabled_only=args.enabled)
