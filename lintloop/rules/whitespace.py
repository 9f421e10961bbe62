"""
Whitespace rules -- text-only checks that work for any file.
"""

import re

from .base import Rule, RuleContext
from ..core.diagnostics import Severity
from ..core.edits import TextEdit


_TRAILING_RE = re.compile(r"[ \t]+(?=\r?\n|\Z)")
_LEADING_TABS_RE = re.compile(r"^[ \t]*\t[ \t]*", re.MULTILINE)

TAB_WIDTH = 4


def check_trailing_whitespace(ctx: RuleContext) -> None:
    for match in _TRAILING_RE.finditer(ctx.text):
        ctx.report("Trailing whitespace", match.start(), match.end()).with_fix(
            "Remove trailing whitespace", TextEdit.delete(match.start(), match.end())
        )


def check_final_newline(ctx: RuleContext) -> None:
    text = ctx.text
    if not text or text.endswith("\n"):
        return
    newline = "\r\n" if "\r\n" in text else "\n"
    ctx.report("File does not end with a newline", len(text)).with_fix(
        "Add final newline", TextEdit.insert(len(text), newline)
    )


def check_no_tabs(ctx: RuleContext) -> None:
    for match in _LEADING_TABS_RE.finditer(ctx.text):
        indent = match.group(0)
        ctx.report("Tab used for indentation", match.start(), match.end()).with_fix(
            "Indent with spaces",
            TextEdit(match.start(), match.end(), indent.expandtabs(TAB_WIDTH)),
        )


TRAILING_WHITESPACE = Rule(
    name="trailing-whitespace",
    description="Disallow spaces and tabs at the end of lines",
    check=check_trailing_whitespace,
)

FINAL_NEWLINE = Rule(
    name="final-newline",
    description="Require a newline at the end of non-empty files",
    check=check_final_newline,
)

NO_TABS = Rule(
    name="no-tabs",
    description="Disallow tabs in indentation",
    check=check_no_tabs,
    default_severity=Severity.WARNING,
)
