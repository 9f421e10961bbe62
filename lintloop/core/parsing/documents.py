"""
DocumentParser -- Parsed documents on top of the DocumentProvider.

Turns the provider's current snapshot of a file into a ParsedDocument
(text + tree-sitter tree). Parses are cached per path and keyed by the
provider's version string, so a committed fix invalidates exactly the file
it touched. When the project version has not moved since a document was
last validated, it is returned without looking at its file version.

Usage:
    parser = DocumentParser(provider, default_registry())
    doc = parser.get_document("src/app.py")
    for node in doc.walk("except_clause"):
        start, end = doc.node_range(node)
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterator, Optional, Tuple, TYPE_CHECKING

from .registry import ParserRegistry
from ..provider import DocumentProvider

if TYPE_CHECKING:
    from tree_sitter import Parser, Node, Tree

logger = logging.getLogger(__name__)


@dataclass
class ParsedDocument:
    """
    One version of one file, with its syntax tree when available.

    Attributes:
        path: File path
        text: Snapshot text the tree was built from
        version: Provider version string of that snapshot
        tree: tree-sitter Tree, or None (unknown language, too large,
              grammar unavailable)
        language: LanguageConfig name, or None
    """
    path: str
    text: str
    version: str
    tree: Optional['Tree'] = None
    language: Optional[str] = None
    _encoded: Optional[bytes] = field(default=None, repr=False, compare=False)

    @property
    def root_node(self) -> Optional['Node']:
        return self.tree.root_node if self.tree is not None else None

    def _bytes(self) -> bytes:
        if self._encoded is None:
            self._encoded = self.text.encode("utf-8")
        return self._encoded

    def char_offset(self, byte_offset: int) -> int:
        """Convert a tree-sitter byte offset into a character offset."""
        return len(self._bytes()[:byte_offset].decode("utf-8", errors="ignore"))

    def node_range(self, node: 'Node') -> Tuple[int, int]:
        """Character (start, end) of a node."""
        return self.char_offset(node.start_byte), self.char_offset(node.end_byte)

    def node_text(self, node: 'Node') -> str:
        return self._bytes()[node.start_byte:node.end_byte].decode("utf-8", errors="replace")

    def walk(self, *node_types: str) -> Iterator['Node']:
        """
        Yield nodes in document order, optionally filtered by type.

        Iterative so deep trees don't hit the recursion limit.
        """
        root = self.root_node
        if root is None:
            return
        stack = [root]
        while stack:
            node = stack.pop()
            if not node_types or node.type in node_types:
                yield node
            stack.extend(reversed(node.children))


class DocumentParser:
    """
    Cached parsing layer, the consumer of provider version strings.

    Holds one ParsedDocument per path (the latest). Never reads storage
    itself: all text comes from the provider.
    """

    def __init__(self, provider: DocumentProvider, registry: ParserRegistry):
        self.provider = provider
        self.registry = registry
        self._parsers: Dict[str, Any] = {}  # Lazy-loaded parsers
        self._documents: Dict[str, ParsedDocument] = {}
        self._validated_at: Dict[str, str] = {}  # path -> project version
        self.parse_count = 0

    def _get_parser(self, tree_sitter_name: str) -> Optional['Parser']:
        """
        Get tree-sitter parser for a language (lazy-loaded).

        Returns:
            Parser instance or None if the grammar is not available
        """
        if tree_sitter_name in self._parsers:
            return self._parsers[tree_sitter_name]

        from tree_sitter_language_pack import get_parser
        try:
            parser = get_parser(tree_sitter_name)
        except Exception as e:
            logger.debug("No tree-sitter grammar for %s: %s", tree_sitter_name, e)
            parser = None
        self._parsers[tree_sitter_name] = parser
        return parser

    def get_document(self, path: str) -> ParsedDocument:
        """
        Parsed document for the current snapshot of path.

        Raises:
            DocumentNotFoundError: If path is not a project file
        """
        project_version = self.provider.get_project_version()
        cached = self._documents.get(path)

        # Nothing was committed anywhere since this document was validated
        if cached is not None and self._validated_at.get(path) == project_version:
            return cached

        version = self.provider.get_version(path)
        if cached is None or cached.version != version:
            cached = self._parse(path, version)
            self._documents[path] = cached

        self._validated_at[path] = project_version
        return cached

    def _parse(self, path: str, version: str) -> ParsedDocument:
        text = self.provider.get_text(path)
        config = self.registry.get_config(Path(path))
        if config is None:
            return ParsedDocument(path=path, text=text, version=version)

        if len(text) > config.max_file_size:
            logger.debug("Not parsing %s: %d chars exceeds %d", path, len(text), config.max_file_size)
            return ParsedDocument(path=path, text=text, version=version, language=config.name)

        parser = self._get_parser(config.tree_sitter_name)
        if parser is None:
            return ParsedDocument(path=path, text=text, version=version, language=config.name)

        document = ParsedDocument(path=path, text=text, version=version, language=config.name)
        document.tree = parser.parse(document._bytes())
        self.parse_count += 1
        logger.debug("Parsed %s at version %s", path, version)
        return document
