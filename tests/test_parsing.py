"""
Tests for the parsing layer -- language routing and version-keyed caching.

Tests validate:
- ParserRegistry extension routing
- DocumentParser cache keyed by provider version strings
- Character offsets for tree-sitter nodes

Core tests work WITHOUT tree-sitter-language-pack installed.
Tree-sitter dependent tests are marked and skipped when unavailable.
"""

import pytest
from pathlib import Path

from lintloop.core.parsing import (
    BUILTIN_LANGUAGES,
    LanguageConfig,
    ParserRegistry,
    PYTHON_CONFIG,
    default_registry,
)

# Check if tree-sitter-language-pack is available
try:
    import tree_sitter_language_pack  # noqa: F401
    TREE_SITTER_AVAILABLE = True
except ImportError:
    TREE_SITTER_AVAILABLE = False

requires_tree_sitter = pytest.mark.skipif(
    not TREE_SITTER_AVAILABLE,
    reason="tree-sitter-language-pack not installed"
)


# =============================================================================
# LanguageConfig / ParserRegistry
# =============================================================================

class TestParserRegistry:

    def test_routes_by_extension(self):
        registry = default_registry()
        assert registry.get_config(Path("src/app.py")).name == "Python"
        assert registry.get_config(Path("web/App.tsx")).name == "TSX"
        assert registry.get_config(Path("README.md")) is None

    def test_extension_case_insensitive(self):
        assert default_registry().get_config(Path("LEGACY.PY")) is PYTHON_CONFIG

    def test_all_builtins_registered(self):
        registry = default_registry()
        names = {registry.get_config(Path(f"x{ext}")).name
                 for config in BUILTIN_LANGUAGES for ext in config.extensions}
        assert names == {config.name for config in BUILTIN_LANGUAGES}

    def test_extension_conflict_raises(self):
        registry = ParserRegistry()
        registry.register(PYTHON_CONFIG)
        with pytest.raises(ValueError, match="already registered"):
            registry.register(LanguageConfig(name="Other", tree_sitter_name="other", extensions={".py"}))

    def test_max_file_size_override(self):
        registry = default_registry(max_file_size=10)
        assert registry.get_config(Path("a.py")).max_file_size == 10
        assert PYTHON_CONFIG.max_file_size == 300_000

    def test_exclude_patterns_deduplicated(self):
        patterns = default_registry().all_exclude_patterns()
        assert patterns == sorted(set(patterns))
        assert "**/node_modules/**" in patterns


# =============================================================================
# DocumentParser caching
# =============================================================================

class TestDocumentCache:
    """Parses are reused until the file's version moves."""

    def test_same_version_same_document(self, lint_factory):
        lint_factory.provider_for({"a.txt": "x"})
        parser = lint_factory.parser
        assert parser.get_document("a.txt") is parser.get_document("a.txt")

    def test_commit_invalidates_file(self, lint_factory):
        lint_factory.provider_for({"a.txt": "x"})
        parser = lint_factory.parser
        before = parser.get_document("a.txt")

        lint_factory.store.set_snapshot("a.txt", "y")
        after = parser.get_document("a.txt")

        assert after is not before
        assert after.text == "y"
        assert after.version == "1"

    def test_other_file_commit_keeps_document(self, lint_factory):
        lint_factory.provider_for({"a.txt": "x", "b.txt": "y"})
        parser = lint_factory.parser
        before = parser.get_document("a.txt")

        lint_factory.store.set_snapshot("b.txt", "z")

        assert parser.get_document("a.txt") is before

    def test_commit_after_other_file_validated(self, lint_factory):
        """Validating one file must not mask a later commit to another."""
        lint_factory.provider_for({"a.txt": "x", "b.txt": "y"})
        parser = lint_factory.parser
        parser.get_document("a.txt")
        parser.get_document("b.txt")

        lint_factory.store.set_snapshot("a.txt", "x2")
        parser.get_document("b.txt")

        assert parser.get_document("a.txt").text == "x2"

    def test_unknown_language_has_no_tree(self, lint_factory):
        lint_factory.provider_for({"notes.md": "# hi\n"}, languages=True)
        document = lint_factory.parser.get_document("notes.md")
        assert document.tree is None
        assert document.language is None
        assert list(document.walk()) == []


@requires_tree_sitter
class TestTreeSitterDocuments:
    """Real parses."""

    def test_parses_once_per_version(self, lint_factory):
        lint_factory.provider_for({"a.py": "x = 1\n"}, languages=True)
        parser = lint_factory.parser

        parser.get_document("a.py")
        parser.get_document("a.py")
        assert parser.parse_count == 1

        lint_factory.store.set_snapshot("a.py", "x = 2\n")
        parser.get_document("a.py")
        assert parser.parse_count == 2

    def test_node_range_in_characters(self, lint_factory):
        text = "s = 'ñ'\nvalue = 1\n"
        lint_factory.provider_for({"a.py": text}, languages=True)
        document = lint_factory.parser.get_document("a.py")

        names = [document.node_text(n) for n in document.walk("identifier")]
        assert names == ["s", "value"]

        value = list(document.walk("identifier"))[1]
        assert document.node_range(value) == (text.index("value"), text.index("value") + 5)

    def test_oversized_file_not_parsed(self, lint_factory):
        lint_factory.provider_for({"a.py": "x = 1\n"}, languages=True)
        lint_factory.parser.registry = default_registry(max_file_size=3)

        document = lint_factory.parser.get_document("a.py")

        assert document.tree is None
        assert document.language == "Python"
        assert lint_factory.parser.parse_count == 0
