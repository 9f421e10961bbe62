"""
Built-in rules.

Order matters: rules run in table order, and fixes are enumerated in that
order, so earlier rules win ties between identical fix spans.
"""

from typing import Dict

from .base import (
    Rule,
    RuleContext,
    Report,
    RulePlugin,
    BUILTIN_PLUGIN_NAME,
    create_rule_plugin,
    effective_severity,
)
from .whitespace import TRAILING_WHITESPACE, FINAL_NEWLINE, NO_TABS
from .python import NO_BARE_EXCEPT, NO_BREAKPOINT


BUILTIN_RULES: Dict[str, Rule] = {
    rule.name: rule
    for rule in (
        TRAILING_WHITESPACE,
        FINAL_NEWLINE,
        NO_TABS,
        NO_BARE_EXCEPT,
        NO_BREAKPOINT,
    )
}

__all__ = [
    'Rule', 'RuleContext', 'Report', 'RulePlugin',
    'BUILTIN_PLUGIN_NAME', 'BUILTIN_RULES',
    'create_rule_plugin', 'effective_severity',
]
