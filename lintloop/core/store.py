"""
VersionedDocumentStore -- Current text of every file touched in a run.

Holds, per path, the current immutable snapshot and the one before it,
plus a project version counter. Re-analysis after a fix reads from here,
never from storage.

Usage:
    store = VersionedDocumentStore(FileStorage(project_dir))
    snap = store.get_snapshot("src/app.py")        # version 0, read lazily
    snap = store.set_snapshot("src/app.py", fixed)  # version 1
    store.project_version                           # 1

Not thread-safe. A caller that processes files in parallel must serialize
set_snapshot per path (or give each worker its own store).
"""

from typing import Dict, List, Optional

from .snapshot import DocumentSnapshot
from ..errors import DocumentNotFoundError


class VersionedDocumentStore:
    """
    Snapshot cache over a storage collaborator.

    Invariants:
    - A path's version and the project version only ever grow by 1 per
      set_snapshot call.
    - The project version changes iff some snapshot was replaced.
    """

    def __init__(self, storage):
        """
        Args:
            storage: Object exposing file_exists, read_file and write_file
        """
        self.storage = storage
        self._snapshots: Dict[str, DocumentSnapshot] = {}
        self._previous: Dict[str, DocumentSnapshot] = {}
        self._project_version = 0

    @property
    def project_version(self) -> int:
        return self._project_version

    def version(self, path: str) -> int:
        """Current version of a path, 0 if it was never replaced."""
        snapshot = self._snapshots.get(path)
        return snapshot.version if snapshot else 0

    def get_snapshot(self, path: str) -> DocumentSnapshot:
        """
        Get the current snapshot, reading storage on first access.

        Raises:
            DocumentNotFoundError: If storage has no such file
        """
        snapshot = self._snapshots.get(path)
        if snapshot is not None:
            return snapshot

        if not self.storage.file_exists(path):
            raise DocumentNotFoundError(path)

        snapshot = DocumentSnapshot(path=path, text=self.storage.read_file(path), version=0)
        self._snapshots[path] = snapshot
        return snapshot

    def set_snapshot(self, path: str, new_text: str) -> DocumentSnapshot:
        """
        Replace a path's snapshot with new text.

        The new snapshot has version = previous + 1 and the project
        version is bumped by exactly 1.
        """
        current = self._snapshots.get(path)
        if current is None:
            current = DocumentSnapshot(path=path, text="", version=0)
        else:
            self._previous[path] = current

        snapshot = current.replace(new_text)
        self._snapshots[path] = snapshot
        self._project_version += 1
        return snapshot

    def previous_snapshot(self, path: str) -> Optional[DocumentSnapshot]:
        """The snapshot replaced by the last set_snapshot call, if any."""
        return self._previous.get(path)

    def dirty_paths(self) -> List[str]:
        """Paths whose snapshot differs from what was read from storage."""
        return [path for path, snap in self._snapshots.items() if snap.version > 0]

    def flush(self, path: str) -> bool:
        """
        Write the current snapshot of a path back to storage.

        Returns:
            True if written, False if the path has no committed changes
        """
        snapshot = self._snapshots.get(path)
        if snapshot is None or snapshot.version == 0:
            return False
        self.storage.write_file(path, snapshot.text)
        return True
