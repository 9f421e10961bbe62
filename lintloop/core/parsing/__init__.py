"""
Parsing module -- tree-sitter backed documents for plugins.

- LanguageConfig: Per-language grammar routing
- ParserRegistry: Extension-based routing
- DocumentParser: Version-keyed parse cache over the DocumentProvider

Usage:
    from lintloop.core.parsing import DocumentParser, default_registry

    parser = DocumentParser(provider, default_registry())
    document = parser.get_document("src/app.py")
"""

from .config import LanguageConfig
from .registry import ParserRegistry
from .documents import DocumentParser, ParsedDocument
from .languages import BUILTIN_LANGUAGES, PYTHON_CONFIG, default_registry

__all__ = [
    'LanguageConfig',
    'ParserRegistry',
    'DocumentParser',
    'ParsedDocument',
    'BUILTIN_LANGUAGES',
    'PYTHON_CONFIG',
    'default_registry',
]
