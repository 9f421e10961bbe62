"""
Built-in language configurations.

Only the grammar routing lives here. What a rule looks for in the tree is
the rule's business (see lintloop.rules).
"""

from dataclasses import replace
from typing import Optional

from .config import LanguageConfig
from .registry import ParserRegistry


# Shared exclusions: vendored and generated code is never linted
COMMON_EXCLUDES = [
    "**/.git/**",
    "**/node_modules/**",
    "**/__pycache__/**",
    "**/.venv/**",
    "**/venv/**",
]

PYTHON_CONFIG = LanguageConfig(
    name="Python",
    tree_sitter_name="python",
    extensions={'.py', '.pyi'},
    exclude_patterns=COMMON_EXCLUDES + ["**/*.egg-info/**"],
)

JAVASCRIPT_CONFIG = LanguageConfig(
    name="JavaScript",
    tree_sitter_name="javascript",
    extensions={'.js', '.jsx', '.mjs', '.cjs'},
    exclude_patterns=COMMON_EXCLUDES + ["**/dist/**", "**/*.min.js"],
)

TYPESCRIPT_CONFIG = LanguageConfig(
    name="TypeScript",
    tree_sitter_name="typescript",
    extensions={'.ts', '.mts', '.cts'},
    exclude_patterns=COMMON_EXCLUDES + ["**/dist/**", "**/*.d.ts"],
)

TSX_CONFIG = LanguageConfig(
    name="TSX",
    tree_sitter_name="tsx",
    extensions={'.tsx'},
    exclude_patterns=COMMON_EXCLUDES + ["**/dist/**"],
)

BUILTIN_LANGUAGES = [
    PYTHON_CONFIG,
    JAVASCRIPT_CONFIG,
    TYPESCRIPT_CONFIG,
    TSX_CONFIG,
]


def default_registry(max_file_size: Optional[int] = None) -> ParserRegistry:
    """
    A registry with every built-in language registered.

    Args:
        max_file_size: Override the per-language parse size limit
    """
    registry = ParserRegistry()
    for config in BUILTIN_LANGUAGES:
        if max_file_size is not None:
            config = replace(config, max_file_size=max_file_size)
        registry.register(config)
    return registry
