"""
Storage -- Backing file storage collaborators.

The store reads a file once (lazily) and writes it at most once per fix
run. Anything exposing file_exists / read_file / write_file can back it.
"""

from pathlib import Path
from typing import Dict, Optional


class FileStorage:
    """
    Disk-backed storage.

    Reads and writes UTF-8 without newline translation so that offsets
    computed against a snapshot stay valid for the bytes on disk.
    """

    def __init__(self, root: Optional[Path] = None, encoding: str = "utf-8"):
        self.root = Path(root) if root else None
        self.encoding = encoding

    def _resolve(self, path: str) -> Path:
        p = Path(path)
        if self.root is not None and not p.is_absolute():
            return self.root / p
        return p

    def file_exists(self, path: str) -> bool:
        return self._resolve(path).is_file()

    def read_file(self, path: str) -> str:
        with open(self._resolve(path), encoding=self.encoding, newline="") as f:
            return f.read()

    def write_file(self, path: str, text: str) -> None:
        with open(self._resolve(path), "w", encoding=self.encoding, newline="") as f:
            f.write(text)


class MemoryStorage:
    """
    Dict-backed storage with write tracking.

    Used for embedding and tests. `writes` records every write_file call
    in order, so callers can assert how often a path was persisted.
    """

    def __init__(self, files: Optional[Dict[str, str]] = None):
        self.files: Dict[str, str] = dict(files or {})
        self.reads: list = []
        self.writes: list = []

    def file_exists(self, path: str) -> bool:
        return path in self.files

    def read_file(self, path: str) -> str:
        self.reads.append(path)
        return self.files[path]

    def write_file(self, path: str, text: str) -> None:
        self.writes.append((path, text))
        self.files[path] = text
