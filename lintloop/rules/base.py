"""
Rules -- The built-in plugin that runs configured lint rules.

A Rule is a named check over one ParsedDocument. It reports findings
through a RuleContext and may attach fixes to each report:

    def check(ctx):
        for start, end in find_problems(ctx.text):
            ctx.report("Problem here", start, end).with_fix(
                "Remove it", TextEdit.delete(start, end)
            )

The RulePlugin lints with every enabled rule, caches the reports of the
version it linted, and serves their fixes from get_fixes. If asked for
fixes of a version it has not linted yet, it lints that version first
with the last rule config it saw.
"""

from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Sequence, Set, Tuple

from ..core.diagnostics import Diagnostic, Severity
from ..core.edits import FixCandidate, TextEdit
from ..core.parsing import ParsedDocument
from ..core.plugins import Plugin, PluginContext, RuleConfig


BUILTIN_PLUGIN_NAME = "lintloop"


@dataclass
class Rule:
    """
    A lint rule.

    Attributes:
        name: Config key (e.g., "trailing-whitespace")
        description: One-line summary for `lintloop rules`
        check: Callable receiving a RuleContext
        default_severity: Used when the rule config says `true`/`on`
        languages: LanguageConfig names the rule applies to (None = any file)
        needs_tree: Skip documents without a syntax tree
    """
    name: str
    description: str
    check: Callable[['RuleContext'], None]
    default_severity: Severity = Severity.ERROR
    languages: Optional[Set[str]] = None
    needs_tree: bool = False

    def applies_to(self, document: ParsedDocument) -> bool:
        if self.needs_tree and document.tree is None:
            return False
        if self.languages is not None and document.language not in self.languages:
            return False
        return True


@dataclass
class Report:
    """One finding plus the fixes offered for it."""
    diagnostic: Diagnostic
    fixes: List[FixCandidate] = field(default_factory=list)

    def with_fix(self, description: str, *edits: TextEdit) -> 'Report':
        """Attach an atomic fix made of edits to this report's file."""
        self.fixes.append(
            FixCandidate.for_file(description, self.diagnostic.path, *edits, rule=self.diagnostic.rule)
        )
        return self


class RuleContext:
    """What a rule sees while checking one document."""

    def __init__(self, document: ParsedDocument, rule: Rule, severity: Severity):
        self.document = document
        self.rule = rule
        self.severity = severity
        self.reports: List[Report] = []

    @property
    def text(self) -> str:
        return self.document.text

    @property
    def path(self) -> str:
        return self.document.path

    def report(self, message: str, start: int, end: Optional[int] = None) -> Report:
        """Record a finding at [start, end) and return it for fix chaining."""
        report = Report(diagnostic=Diagnostic(
            path=self.document.path,
            start=start,
            end=start if end is None else end,
            message=message,
            rule=self.rule.name,
            severity=self.severity,
            source=BUILTIN_PLUGIN_NAME,
        ))
        self.reports.append(report)
        return report


def effective_severity(rule: Rule, setting) -> Severity:
    """Severity for a rule given its config value (`true` means default)."""
    if setting is True or (isinstance(setting, str) and setting.lower() == "on"):
        return rule.default_severity
    return Severity.parse(setting)


class RulePlugin:
    """
    Runs a table of rules as one plugin.

    Rules run in table order; a rule missing from the rule config is off.
    Names in the config that are not in the table are left for other
    plugins.
    """

    def __init__(self, table: Dict[str, Rule], context: Optional[PluginContext] = None):
        self.table = table
        self.context = context
        self._rules: RuleConfig = {}
        self._reports: Dict[str, Tuple[str, List[Report]]] = {}  # path -> (version, reports)

    def lint(self, document: ParsedDocument, rules: RuleConfig) -> List[Diagnostic]:
        self._rules = dict(rules)
        reports: List[Report] = []
        for name, rule in self.table.items():
            if name not in rules or not rule.applies_to(document):
                continue
            severity = effective_severity(rule, rules[name])
            if severity is Severity.OFF:
                continue
            ctx = RuleContext(document, rule, severity)
            rule.check(ctx)
            reports.extend(ctx.reports)

        self._reports[document.path] = (document.version, reports)
        return [report.diagnostic for report in reports]

    def get_fixes(self, path: str, start: int, end: int) -> List[FixCandidate]:
        reports = self._current_reports(path)
        fixes = []
        for report in reports:
            for fix in report.fixes:
                if all(start <= e.start and e.end <= end for e in fix.edits_for(path)):
                    fixes.append(fix)
        return fixes

    def _current_reports(self, path: str) -> Sequence[Report]:
        cached = self._reports.get(path)
        if self.context is None:
            return cached[1] if cached else []

        document = self.context.parser.get_document(path)
        if cached is None or cached[0] != document.version:
            self.lint(document, self._rules)
            cached = self._reports[path]
        return cached[1]

    def as_plugin(self, name: str = BUILTIN_PLUGIN_NAME) -> Plugin:
        return Plugin(name=name, lint=self.lint, get_fixes=self.get_fixes)


def create_rule_plugin(context: Optional[PluginContext] = None, table: Optional[Dict[str, Rule]] = None) -> Plugin:
    """Build the built-in rule plugin (all built-in rules by default)."""
    if table is None:
        from . import BUILTIN_RULES
        table = BUILTIN_RULES
    return RulePlugin(table, context).as_plugin()
