"""
Plugin factories loaded by spec string in plugin and CLI tests.

    plugins:
      - tests.sample_plugins              # create_plugin
      - tests.sample_plugins:semicolon
"""

from lintloop.core.diagnostics import Diagnostic, Severity
from lintloop.core.edits import FixCandidate, TextEdit
from lintloop.core.plugins import Plugin


def create_plugin(context):
    """Rule config rewriter: turns on final-newline."""
    return Plugin(
        name="sample",
        resolve_rules=lambda rules: {**rules, "final-newline": rules.get("final-newline", "error")},
    )


def semicolon(context):
    """Reports and fixes .ts files that don't end with ';' (before any newline)."""
    provider = context.provider

    def find(text):
        body = text.rstrip("\n")
        if not body or body.endswith(";"):
            return None
        return len(body)

    def lint(document, rules):
        if not document.path.endswith(".ts") or "semicolon" not in rules:
            return []
        offset = find(document.text)
        if offset is None:
            return []
        return [Diagnostic(
            path=document.path, start=offset, end=offset,
            message="Missing semicolon", rule="semicolon",
            severity=Severity.parse(rules["semicolon"]), source="semicolon",
        )]

    def get_fixes(path, start, end):
        if not path.endswith(".ts"):
            return []
        offset = find(provider.get_text(path))
        if offset is None or not start <= offset <= end:
            return []
        return [FixCandidate.for_file("Add semicolon", path, TextEdit.insert(offset, ";"), rule="semicolon")]

    return Plugin(name="semicolon", lint=lint, get_fixes=get_fixes)


def not_a_plugin(context):
    return {"name": "dict"}


def broken(context):
    raise RuntimeError("factory exploded")


NOT_CALLABLE = "just a string"


def prepend(context):
    """Never converges: always proposes another leading '#'."""
    return Plugin(
        name="prepend",
        get_fixes=lambda path, start, end: [FixCandidate.for_file("Prepend", path, TextEdit.insert(0, "#"))],
    )
