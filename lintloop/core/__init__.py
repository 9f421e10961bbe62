"""
Core layer -- versioned documents, plugins, merge engine and fix loop.
"""

from .snapshot import DocumentSnapshot
from .storage import FileStorage, MemoryStorage
from .store import VersionedDocumentStore
from .provider import DocumentProvider
from .edits import TextEdit, FileChange, FixCandidate
from .merge import MergeResult, merge_fixes, apply_edits
from .diagnostics import Diagnostic, Severity, offset_to_position
from .plugins import Plugin, PluginContext, load_plugins, resolve_rules, run_lint, collect_fixes
from .engine import LintEngine, FixOutcome, FixState, RunResult, DEFAULT_MAX_ATTEMPTS

__all__ = [
    'DocumentSnapshot',
    'FileStorage', 'MemoryStorage',
    'VersionedDocumentStore',
    'DocumentProvider',
    'TextEdit', 'FileChange', 'FixCandidate',
    'MergeResult', 'merge_fixes', 'apply_edits',
    'Diagnostic', 'Severity', 'offset_to_position',
    'Plugin', 'PluginContext', 'load_plugins', 'resolve_rules', 'run_lint', 'collect_fixes',
    'LintEngine', 'FixOutcome', 'FixState', 'RunResult', 'DEFAULT_MAX_ATTEMPTS',
]
