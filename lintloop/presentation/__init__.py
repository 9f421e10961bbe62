"""
Presentation layer -- symbols and text formatting for the CLI.
"""

from .symbols import SymbolSet, UNICODE, ASCII, get_symbols, safe_print
from .formatters import format_diagnostic, format_diagnostics, format_summary, format_fix_outcomes

__all__ = [
    'SymbolSet', 'UNICODE', 'ASCII', 'get_symbols', 'safe_print',
    'format_diagnostic', 'format_diagnostics', 'format_summary', 'format_fix_outcomes',
]
