"""
Parser Registry -- Which grammar parses which file.

The DocumentParser asks it for a path's LanguageConfig; the CLI asks it for
the exclude patterns of every language when resolving the file list.

Usage:
    registry = ParserRegistry()
    registry.register(PYTHON_CONFIG)
    registry.get_config(Path("src/app.py"))   # PYTHON_CONFIG
"""

from pathlib import Path
from typing import Dict, List, Optional

from .config import LanguageConfig


class ParserRegistry:
    """Language configs keyed by lower-cased file extension."""

    def __init__(self):
        self._by_extension: Dict[str, LanguageConfig] = {}

    def register(self, config: LanguageConfig) -> None:
        """
        Route every extension of config to it.

        Raises:
            ValueError: If an extension already belongs to another language
        """
        for ext in config.extensions:
            owner = self._by_extension.get(ext.lower())
            if owner is not None and owner.name != config.name:
                raise ValueError(
                    f"Extension {ext} already registered to {owner.name}, "
                    f"cannot register to {config.name}"
                )
        for ext in config.extensions:
            self._by_extension[ext.lower()] = config

    def get_config(self, file_path: Path) -> Optional[LanguageConfig]:
        """Language config for a path by its extension, or None."""
        return self._by_extension.get(Path(file_path).suffix.lower())

    def all_exclude_patterns(self) -> List[str]:
        """Sorted, deduplicated exclude patterns of every registered language."""
        patterns = set()
        for config in self._by_extension.values():
            patterns.update(config.exclude_patterns)
        return sorted(patterns)
