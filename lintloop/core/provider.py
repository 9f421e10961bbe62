"""
DocumentProvider -- Pull-based view of the project for analyzers.

Plays the role of a language-service host: answers which files make up
the project, what their current text is, and which versions they are at.
Versions are strings so that caches compare them by equality only.
"""

from typing import Any, Dict, Iterable, Optional, Tuple

from .snapshot import DocumentSnapshot
from .store import VersionedDocumentStore
from ..errors import DocumentNotFoundError


class DocumentProvider:
    """
    Read-only facade over a VersionedDocumentStore.

    The file list is fixed when the provider is created and never changes
    during a run.
    """

    def __init__(
        self,
        store: VersionedDocumentStore,
        files: Iterable[str],
        settings: Optional[Dict[str, Any]] = None
    ):
        """
        Args:
            store: Snapshot store backing every text/version answer
            files: The project's input files, in processing order
            settings: Parser-level options handed through to analyzers
        """
        self.store = store
        self._files: Tuple[str, ...] = tuple(dict.fromkeys(files))
        self._file_set = frozenset(self._files)
        self._settings = dict(settings or {})

    def list_files(self) -> Tuple[str, ...]:
        return self._files

    def has_file(self, path: str) -> bool:
        return path in self._file_set

    def get_compilation_settings(self) -> Dict[str, Any]:
        return dict(self._settings)

    def get_project_version(self) -> str:
        return str(self.store.project_version)

    def get_version(self, path: str) -> str:
        return str(self.store.version(path))

    def get_snapshot(self, path: str) -> DocumentSnapshot:
        """
        Current snapshot of a project file.

        Raises:
            DocumentNotFoundError: If path is not one of the project's files
        """
        if not self.has_file(path):
            raise DocumentNotFoundError(path)
        return self.store.get_snapshot(path)

    def get_text(self, path: str) -> str:
        return self.get_snapshot(path).text
