"""
Fix Merge & Apply Engine -- Pick a non-conflicting subset of fixes and apply it.

Candidates come from plugins that know nothing about each other, so their
edits may overlap. One merge pass:

  1. Rejects candidates that touch any file other than the snapshot's.
  2. Orders the rest by their rightmost edit, right to left.
  3. Walks them with a `boundary` cursor starting at the end of the text.
     A candidate is accepted only if its rightmost edit ends at or before
     the boundary. Accepted candidates are applied immediately (their own
     edits right to left) and the boundary moves to their leftmost edit.
  4. Skips any candidate that would cross the boundary, whole.

Working right to left means no accepted edit ever shifts the offsets of an
edit still to be applied, so nothing needs re-basing.

Usage:
    result = merge_fixes(snapshot, candidates)
    if result.changed:
        store.set_snapshot(snapshot.path, result.text)
"""

import logging
from dataclasses import dataclass, field
from typing import Iterable, List, Sequence, Tuple

from .edits import FixCandidate, TextEdit
from .snapshot import DocumentSnapshot

logger = logging.getLogger(__name__)


@dataclass
class MergeResult:
    """
    Outcome of one merge pass over one file.

    Attributes:
        path: File the pass ran against
        text: Resulting text (the input text when nothing was applied)
        applied: Candidates applied, in application order (right to left)
        skipped: Candidates dropped because they overlap an applied one
        rejected: Cross-file or malformed candidates, never applicable
    """
    path: str
    text: str
    applied: List[FixCandidate] = field(default_factory=list)
    skipped: List[FixCandidate] = field(default_factory=list)
    rejected: List[FixCandidate] = field(default_factory=list)

    @property
    def changed(self) -> bool:
        return bool(self.applied)


def _sort_edits(edits: Iterable[TextEdit]) -> List[TextEdit]:
    """Rightmost first. A replacement sorts before an insertion at its start."""
    return sorted(edits, key=lambda e: (e.start, e.end), reverse=True)


def _edits_overlap(edits: Sequence[TextEdit]) -> bool:
    """Check a right-to-left sorted edit list for internal overlap."""
    for right, left in zip(edits, edits[1:]):
        if left.end > right.start:
            return True
        # Two insertions at one offset have no defined order
        if left.length == 0 and right.length == 0 and left.start == right.start:
            return True
    return False


def apply_edits(text: str, edits: Iterable[TextEdit]) -> str:
    """
    Apply non-overlapping edits to text.

    Edits are applied right to left, so each one is addressed against the
    original text regardless of the order given.

    Raises:
        ValueError: If edits overlap or fall outside the text
    """
    ordered = _sort_edits(edits)
    if any(not edit.is_within(len(text)) for edit in ordered):
        raise ValueError("Edit range outside of text")
    if _edits_overlap(ordered):
        raise ValueError("Overlapping edits")
    for edit in ordered:
        text = text[:edit.start] + edit.new_text + text[edit.end:]
    return text


def _prepare(
    candidates: Iterable[FixCandidate],
    path: str,
    text_length: int,
    rejected: List[FixCandidate],
) -> List[Tuple[FixCandidate, List[TextEdit]]]:
    """Drop unusable candidates and pair the rest with their sorted edits."""
    prepared = []
    for candidate in candidates:
        if candidate.is_empty:
            continue
        if not candidate.targets_only(path):
            logger.debug("Rejected cross-file fix %r (%s)", candidate.description, ", ".join(candidate.paths))
            rejected.append(candidate)
            continue
        edits = _sort_edits(candidate.edits_for(path))
        if any(not edit.is_within(text_length) for edit in edits) or _edits_overlap(edits):
            logger.debug("Rejected malformed fix %r", candidate.description)
            rejected.append(candidate)
            continue
        prepared.append((candidate, edits))
    return prepared


def merge_fixes(snapshot: DocumentSnapshot, candidates: Iterable[FixCandidate]) -> MergeResult:
    """
    Select and apply a maximal non-overlapping subset of candidates.

    Deterministic: the result depends only on edit spans and on the order
    candidates are given in. Among candidates whose rightmost edits start
    at the same offset, the earlier one wins.

    Args:
        snapshot: Current snapshot of the file being fixed
        candidates: Fix candidates in stable enumeration order

    Returns:
        MergeResult; result.changed is False when nothing applied
    """
    result = MergeResult(path=snapshot.path, text=snapshot.text)
    prepared = _prepare(candidates, snapshot.path, len(snapshot.text), result.rejected)

    # Stable sort keeps enumeration order among equal rightmost starts
    prepared.sort(key=lambda item: item[1][0].start, reverse=True)

    text = snapshot.text
    boundary = len(text)
    boundary_is_insertion = False

    for candidate, edits in prepared:
        last_edit = edits[0]
        first_edit = edits[-1]

        fits = boundary >= last_edit.start + last_edit.length
        if fits and boundary_is_insertion and last_edit.length == 0 and last_edit.start == boundary:
            fits = False  # same-offset insertion: identical span

        if not fits:
            logger.debug("Skipped overlapping fix %r at %d", candidate.description, last_edit.start)
            result.skipped.append(candidate)
            continue

        for edit in edits:
            text = text[:edit.start] + edit.new_text + text[edit.end:]
        boundary = first_edit.start
        boundary_is_insertion = first_edit.length == 0
        result.applied.append(candidate)

    result.text = text
    return result
