"""
Parsing configuration data structures.

A LanguageConfig tells the DocumentParser which tree-sitter grammar to use
for which file extensions. New languages are added via config, not code
changes.
"""

from dataclasses import dataclass, field
from typing import List, Set


@dataclass
class LanguageConfig:
    """
    Configuration for parsing one programming language.

    Attributes:
        name: Human-readable name (e.g., "Python", "TypeScript")
        tree_sitter_name: Grammar name for tree-sitter (e.g., "python")
        extensions: File extensions this config handles (e.g., {'.py'})
        max_file_size: Files longer than this (characters) are not parsed
        exclude_patterns: Glob patterns never linted for this language
    """
    name: str
    tree_sitter_name: str
    extensions: Set[str]
    max_file_size: int = 300_000
    exclude_patterns: List[str] = field(default_factory=list)
