"""
Formatters -- Diagnostics and fix results as terminal text.

Diagnostics are printed compiler-style, with the offending source line
and an underline:

    src/app.py:3:10 - error trailing-whitespace: Trailing whitespace

      3 | x = 1
        |      ~~~
"""

from typing import List, Optional, Sequence

from .symbols import SymbolSet, get_symbols
from ..core.diagnostics import Diagnostic, Severity, offset_to_position
from ..core.engine import FixOutcome


def _line_bounds(text: str, offset: int):
    start = text.rfind("\n", 0, offset) + 1
    end = text.find("\n", offset)
    if end == -1:
        end = len(text)
    return start, end


def format_diagnostic(diagnostic: Diagnostic, text: str, symbols: Optional[SymbolSet] = None) -> str:
    """
    Format one diagnostic with its source context.

    Args:
        diagnostic: Finding to format
        text: Text of the snapshot the diagnostic was computed against
        symbols: SymbolSet for visual elements (auto-detect if None)
    """
    symbols = symbols or get_symbols()
    line, column = offset_to_position(text, diagnostic.start)
    severity = diagnostic.severity.value if isinstance(diagnostic.severity, Severity) else str(diagnostic.severity)
    rule = f" {diagnostic.rule}" if diagnostic.rule else ""

    header = f"{diagnostic.path}:{line}:{column} - {severity}{rule}: {diagnostic.message}"

    line_start, line_end = _line_bounds(text, min(diagnostic.start, len(text)))
    source_line = text[line_start:line_end].rstrip("\r")
    underline_start = diagnostic.start - line_start
    # Multi-line spans are underlined to the end of the first line
    underline_end = min(diagnostic.end, line_start + len(source_line))
    width = max(1, underline_end - diagnostic.start)

    number = str(line)
    pad = " " * len(number)
    return "\n".join([
        header,
        "",
        f"  {number} {symbols.gutter} {source_line.expandtabs(1)}",
        f"  {pad} {symbols.gutter} {' ' * underline_start}{symbols.underline * width}",
    ])


def format_diagnostics(diagnostics: Sequence[Diagnostic], text: str, symbols: Optional[SymbolSet] = None) -> str:
    """Format all diagnostics of one file, blank line separated."""
    symbols = symbols or get_symbols()
    return "\n\n".join(format_diagnostic(d, text, symbols) for d in diagnostics)


def format_summary(diagnostics: Sequence[Diagnostic], symbols: Optional[SymbolSet] = None) -> str:
    """One-line totals, e.g. '✗ 3 errors, ⚠ 1 warning'."""
    symbols = symbols or get_symbols()
    errors = sum(1 for d in diagnostics if d.severity == Severity.ERROR)
    warnings = len(diagnostics) - errors
    parts = []
    if errors:
        parts.append(f"{symbols.error} {errors} error{'s' if errors != 1 else ''}")
    if warnings:
        parts.append(f"{symbols.warning} {warnings} warning{'s' if warnings != 1 else ''}")
    return ", ".join(parts)


def format_fix_outcomes(outcomes: Sequence[FixOutcome], symbols: Optional[SymbolSet] = None) -> List[str]:
    """
    Lines describing a fix run: one per rewritten file, plus one per file
    that stopped with fixes still pending.
    """
    symbols = symbols or get_symbols()
    lines = []
    for outcome in outcomes:
        if not outcome.written:
            continue
        passes = f"{outcome.commits} pass{'es' if outcome.commits != 1 else ''}"
        line = f"{symbols.fixed} {outcome.path}: {outcome.applied} fix(es) applied in {passes}"
        if outcome.budget_exhausted:
            line += f" {symbols.pending} fixes still pending after {outcome.attempts} attempts"
        lines.append(line)
    return lines
