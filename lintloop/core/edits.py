"""
Edit data structures -- What plugins propose and the merge engine applies.

TextEdit offsets are absolute character offsets into the text of the
snapshot the edit was computed against. They are only valid against that
exact version.
"""

from dataclasses import dataclass, field
from typing import List, Optional, Tuple


@dataclass(frozen=True)
class TextEdit:
    """
    Replace text[start:end] with new_text.

    A zero-width edit (start == end) is an insertion.
    """
    start: int
    end: int
    new_text: str = ""

    @property
    def length(self) -> int:
        return self.end - self.start

    @classmethod
    def insert(cls, offset: int, text: str) -> 'TextEdit':
        return cls(start=offset, end=offset, new_text=text)

    @classmethod
    def delete(cls, start: int, end: int) -> 'TextEdit':
        return cls(start=start, end=end, new_text="")

    def is_within(self, text_length: int) -> bool:
        """Check the edit addresses a valid range of a text of this length."""
        return 0 <= self.start <= self.end <= text_length


@dataclass(frozen=True)
class FileChange:
    """The edits one fix makes to one file."""
    path: str
    edits: Tuple[TextEdit, ...] = ()

    def __post_init__(self):
        # Accept lists from callers; keep the value hashable
        object.__setattr__(self, "edits", tuple(self.edits))


@dataclass
class FixCandidate:
    """
    A named group of edits applied all-or-nothing.

    Attributes:
        description: Human-readable fix name (e.g., "Remove trailing whitespace")
        changes: Per-file edit groups; mergeable only if all target one file
        plugin: Name of the plugin that proposed it (filled in by the engine)
        rule: Rule that produced it, when known
    """
    description: str
    changes: List[FileChange] = field(default_factory=list)
    plugin: Optional[str] = None
    rule: Optional[str] = None

    @classmethod
    def for_file(cls, description: str, path: str, *edits: TextEdit, rule: str = None) -> 'FixCandidate':
        """Build a single-file candidate from edits."""
        return cls(description=description, changes=[FileChange(path, edits)], rule=rule)

    @property
    def paths(self) -> List[str]:
        """Distinct paths touched by changes that carry edits."""
        seen = []
        for change in self.changes:
            if change.edits and change.path not in seen:
                seen.append(change.path)
        return seen

    @property
    def is_empty(self) -> bool:
        return not any(change.edits for change in self.changes)

    def targets_only(self, path: str) -> bool:
        """True if every edit of this candidate targets path."""
        return all(change.path == path for change in self.changes if change.edits)

    def edits_for(self, path: str) -> List[TextEdit]:
        """Flattened edits that target path."""
        edits: List[TextEdit] = []
        for change in self.changes:
            if change.path == path:
                edits.extend(change.edits)
        return edits
