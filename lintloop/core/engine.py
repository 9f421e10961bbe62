"""
LintEngine -- Drives plugins over the project's files.

Report mode runs every plugin's lint once per file and hands the
diagnostics to a reporter. Fix mode runs, per file:

    Analyzing -> Merging -> Committed -> Analyzing ...
                    |            \\-> Idle (budget spent)
                    \\-> Idle (nothing applied)

Each pass re-reads the current snapshot (so it sees the previous pass's
commit), lints, collects fixes for the whole file from every plugin,
merges them, and commits the merged text when anything was applied. The
loop stops when a pass applies nothing (converged) or after max_attempts
passes (budget exhausted; not an error). A file whose loop committed
anything is written to storage once, at the end.

Files are processed one at a time and plugins one after another. The merge
engine's offset guarantees depend on a single mutator per snapshot.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Dict, List, Optional, Sequence

from .diagnostics import Diagnostic
from .merge import merge_fixes
from .parsing import DocumentParser, ParsedDocument
from .plugins import Plugin, RuleConfig, collect_fixes, resolve_rules, run_lint
from .provider import DocumentProvider
from ..errors import DocumentNotFoundError

logger = logging.getLogger(__name__)

DEFAULT_MAX_ATTEMPTS = 3

Reporter = Callable[[str, List[Diagnostic]], None]


class FixState(str, Enum):
    """States of one file's fix loop."""
    ANALYZING = "analyzing"
    MERGING = "merging"
    COMMITTED = "committed"
    IDLE = "idle"


@dataclass
class FixOutcome:
    """
    Final state of one file's fix loop.

    Attributes:
        path: File that was fixed
        attempts: Passes run (at most the engine's max_attempts)
        commits: Passes that changed the text
        converged: True if the last pass found nothing to apply
        written: True if the fixed text was persisted
        applied: Fix candidates applied over all passes
        skipped: Candidates dropped as conflicting over all passes
        rejected: Cross-file or malformed candidates over all passes
        state: Current loop state, IDLE once fix_file returns
        history: Every state entered, in order
    """
    path: str
    attempts: int = 0
    commits: int = 0
    converged: bool = False
    written: bool = False
    applied: int = 0
    skipped: int = 0
    rejected: int = 0
    state: FixState = FixState.IDLE
    history: List[FixState] = field(default_factory=list)

    @property
    def changed(self) -> bool:
        return self.commits > 0

    @property
    def budget_exhausted(self) -> bool:
        """Stopped while fixes were still being applied."""
        return not self.converged


@dataclass
class RunResult:
    """Outcome of one run over the project."""
    fix: bool
    diagnostics: Dict[str, List[Diagnostic]] = field(default_factory=dict)
    outcomes: List[FixOutcome] = field(default_factory=list)

    @property
    def has_diagnostics(self) -> bool:
        return any(self.diagnostics.values())

    @property
    def diagnostic_count(self) -> int:
        return sum(len(diags) for diags in self.diagnostics.values())

    @property
    def fixed_files(self) -> List[str]:
        return [outcome.path for outcome in self.outcomes if outcome.written]

    @property
    def unconverged_files(self) -> List[str]:
        return [outcome.path for outcome in self.outcomes if outcome.changed and outcome.budget_exhausted]


class LintEngine:
    """
    Orchestrates lint and fix passes over a DocumentProvider.

    The rule config is resolved through every plugin's resolve_rules once,
    at construction, before any lint call.
    """

    def __init__(
        self,
        provider: DocumentProvider,
        parser: DocumentParser,
        plugins: Sequence[Plugin],
        rules: Optional[RuleConfig] = None,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    ):
        if max_attempts < 1:
            raise ValueError("max_attempts must be >= 1")
        self.provider = provider
        self.store = provider.store
        self.parser = parser
        self.plugins: List[Plugin] = list(plugins)
        self.max_attempts = max_attempts
        self.rules = resolve_rules(self.plugins, rules or {})

    def _document(self, path: str) -> ParsedDocument:
        if not self.provider.has_file(path):
            raise DocumentNotFoundError(path)
        return self.parser.get_document(path)

    def lint_file(self, path: str) -> List[Diagnostic]:
        """Single report-mode pass over one file."""
        return run_lint(self.plugins, self._document(path), self.rules)

    def _enter(self, outcome: FixOutcome, state: FixState) -> None:
        outcome.state = state
        outcome.history.append(state)
        logger.debug("%s: %s (pass %d)", outcome.path, state.value, outcome.attempts)

    def fix_file(self, path: str) -> FixOutcome:
        """
        Run the fix loop for one file to a terminal state.

        Every state the loop passes through is appended to
        outcome.history, ending with IDLE.

        Returns:
            FixOutcome; outcome.converged is False when the budget ran out
            while passes were still changing the text
        """
        outcome = FixOutcome(path=path)
        self._enter(outcome, FixState.ANALYZING)

        while True:
            outcome.attempts += 1

            document = self._document(path)
            # Lint results only prime plugins; fixes are collected by range
            run_lint(self.plugins, document, self.rules)
            candidates = collect_fixes(self.plugins, path, 0, len(document.text))

            self._enter(outcome, FixState.MERGING)
            result = merge_fixes(self.store.get_snapshot(path), candidates)
            outcome.skipped += len(result.skipped)
            outcome.rejected += len(result.rejected)

            if not result.changed:
                outcome.converged = True
                break

            snapshot = self.store.set_snapshot(path, result.text)
            outcome.commits += 1
            outcome.applied += len(result.applied)
            logger.debug(
                "%s: pass %d applied %d fix(es), skipped %d, now version %d",
                path, outcome.attempts, len(result.applied), len(result.skipped), snapshot.version,
            )
            self._enter(outcome, FixState.COMMITTED)

            if outcome.attempts >= self.max_attempts:
                logger.debug("%s: stopped after %d pass(es) with fixes pending", path, outcome.attempts)
                break
            self._enter(outcome, FixState.ANALYZING)

        self._enter(outcome, FixState.IDLE)

        if outcome.commits:
            outcome.written = self.store.flush(path)
        return outcome

    def run(self, fix: bool = False, reporter: Optional[Reporter] = None) -> RunResult:
        """
        Process every project file in order.

        Args:
            fix: Run the fix loop instead of reporting
            reporter: Called per file with its diagnostics (report mode,
                      files with at least one diagnostic only)
        """
        result = RunResult(fix=fix)
        for path in self.provider.list_files():
            if fix:
                result.outcomes.append(self.fix_file(path))
                continue
            diagnostics = self.lint_file(path)
            if diagnostics:
                result.diagnostics[path] = diagnostics
                if reporter is not None:
                    reporter(path, diagnostics)
        return result
