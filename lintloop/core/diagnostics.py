"""
Diagnostics -- Located problems reported by plugins.

The engine only counts and forwards diagnostics. Location fields are read
by the formatter when printing.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple


class Severity(str, Enum):
    """How a rule's findings are reported. OFF disables the rule."""
    ERROR = "error"
    WARNING = "warning"
    OFF = "off"

    @classmethod
    def parse(cls, value) -> 'Severity':
        """
        Parse a config value into a Severity.

        Accepts severity names and booleans (true = error, false = off).

        Raises:
            ValueError: For anything else
        """
        if isinstance(value, Severity):
            return value
        if value is True:
            return cls.ERROR
        if value is False or value is None:
            return cls.OFF
        try:
            return cls(str(value).lower())
        except ValueError:
            valid = ", ".join(s.value for s in cls)
            raise ValueError(f"Unknown severity '{value}'. Valid: {valid}") from None


@dataclass(frozen=True)
class Diagnostic:
    """
    One finding in one file.

    Attributes:
        path: File the finding is in
        start: Character offset where the problem starts
        end: Character offset where it ends (== start for a point)
        message: What is wrong
        rule: Rule name (e.g., "trailing-whitespace")
        severity: Severity.ERROR or Severity.WARNING
        source: Plugin that reported it
    """
    path: str
    start: int
    end: int
    message: str
    rule: Optional[str] = None
    severity: Severity = Severity.ERROR
    source: Optional[str] = None


def offset_to_position(text: str, offset: int) -> Tuple[int, int]:
    """
    Convert a character offset into a 1-based (line, column) pair.

    Offsets past the end of text clamp to the last position.
    """
    offset = max(0, min(offset, len(text)))
    line = text.count("\n", 0, offset) + 1
    line_start = text.rfind("\n", 0, offset) + 1
    return line, offset - line_start + 1
