"""
Snapshots -- Immutable per-file text values.

A DocumentSnapshot is never mutated. Committing a fix replaces the
snapshot held by the store with a new one carrying version + 1.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class DocumentSnapshot:
    """
    Text of one file at one point in time.

    Attributes:
        path: File path as listed by the project
        text: Full file content
        version: 0 when read from storage, +1 per committed fix pass
    """
    path: str
    text: str
    version: int = 0

    def __len__(self) -> int:
        return len(self.text)

    def replace(self, new_text: str) -> 'DocumentSnapshot':
        """Next snapshot in this file's history."""
        return DocumentSnapshot(path=self.path, text=new_text, version=self.version + 1)
