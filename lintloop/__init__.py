"""
lintloop -- Rule-based linter with iterative auto-fix

Runs pluggable analyzers over a project's files. With --fix, applies their
proposed edits, re-analyzing against the updated text until nothing more
applies or the attempt budget runs out.

Usage:
    lintloop check
    lintloop check --fix
    lintloop rules
    lintloop config
"""

__version__ = "0.1.0"

# Core layer
from .core.snapshot import DocumentSnapshot
from .core.storage import FileStorage, MemoryStorage
from .core.store import VersionedDocumentStore
from .core.provider import DocumentProvider
from .core.edits import TextEdit, FileChange, FixCandidate
from .core.merge import MergeResult, merge_fixes, apply_edits
from .core.diagnostics import Diagnostic, Severity
from .core.plugins import Plugin, PluginContext, load_plugins
from .core.engine import LintEngine, FixOutcome, RunResult
from .core.parsing import DocumentParser, ParsedDocument, default_registry

# Rules
from .rules import Rule, RuleContext, BUILTIN_RULES, create_rule_plugin

# Config and errors
from .config import Config, ConfigManager, get_config
from .errors import LintloopError, ConfigError, DocumentNotFoundError, PluginError

__all__ = [
    # Core
    'DocumentSnapshot', 'FileStorage', 'MemoryStorage',
    'VersionedDocumentStore', 'DocumentProvider',
    'TextEdit', 'FileChange', 'FixCandidate',
    'MergeResult', 'merge_fixes', 'apply_edits',
    'Diagnostic', 'Severity',
    'Plugin', 'PluginContext', 'load_plugins',
    'LintEngine', 'FixOutcome', 'RunResult',
    'DocumentParser', 'ParsedDocument', 'default_registry',
    # Rules
    'Rule', 'RuleContext', 'BUILTIN_RULES', 'create_rule_plugin',
    # Config
    'Config', 'ConfigManager', 'get_config',
    # Errors
    'LintloopError', 'ConfigError', 'DocumentNotFoundError', 'PluginError',
]
