"""
Tests for LintEngine -- report mode and the fix loop.

Tests validate:
- Convergence when a pass applies nothing
- Retry budget: at most max_attempts passes, never an error
- One storage write per fixed file, after the loop
- Conflicting fixes resolved over successive passes
- PluginError propagation and resolve_rules chaining
"""

import logging

import pytest

from lintloop.core.diagnostics import Diagnostic
from lintloop.core.edits import TextEdit
from lintloop.core.engine import FixState
from lintloop.core.plugins import Plugin
from lintloop.errors import DocumentNotFoundError, PluginError
from tests.factories import fix_plugin, insert_at, replace_at, static_plugin


def semicolon_fixes(path, text):
    """Append ';' unless the text already ends with one."""
    if text.endswith(";"):
        return []
    return [insert_at(path, len(text), ";", "Add semicolon")]


class TestFixLoopConvergence:
    """Loops that reach a fixed point."""

    def test_single_fix_converges(self, lint_factory):
        """'let x=1' gains ';' on pass 1; pass 2 finds nothing."""
        plugin = fix_plugin("semi", semicolon_fixes, lint_factory)
        engine = lint_factory.engine({"a.ts": "let x=1"}, plugins=[plugin], builtin=False)

        outcome = engine.fix_file("a.ts")

        assert outcome.converged
        assert outcome.attempts == 2
        assert outcome.commits == 1
        assert outcome.state is FixState.IDLE
        assert lint_factory.storage.writes == [("a.ts", "let x=1;")]
        assert outcome.history == [
            FixState.ANALYZING, FixState.MERGING, FixState.COMMITTED,
            FixState.ANALYZING, FixState.MERGING, FixState.IDLE,
        ]

    def test_transitions_logged(self, lint_factory, caplog):
        caplog.set_level(logging.DEBUG, logger="lintloop.core.engine")
        plugin = fix_plugin("semi", semicolon_fixes, lint_factory)
        engine = lint_factory.engine({"a.ts": "let x=1"}, plugins=[plugin], builtin=False)

        engine.fix_file("a.ts")

        assert "a.ts: merging (pass 1)" in caplog.text
        assert "a.ts: committed (pass 1)" in caplog.text
        assert "a.ts: idle (pass 2)" in caplog.text

    def test_clean_file_not_written(self, lint_factory):
        plugin = fix_plugin("semi", semicolon_fixes, lint_factory)
        engine = lint_factory.engine({"a.ts": "let x=1;"}, plugins=[plugin], builtin=False)

        outcome = engine.fix_file("a.ts")

        assert outcome.converged
        assert outcome.attempts == 1
        assert not outcome.changed
        assert not outcome.written
        assert lint_factory.storage.writes == []
        assert lint_factory.store.version("a.ts") == 0

    def test_builtin_rules_fix_together(self, lint_factory):
        """Trailing whitespace removal and final newline land in one pass."""
        engine = lint_factory.engine(
            {"a.txt": "x  "},
            rules={"trailing-whitespace": "error", "final-newline": "error"},
        )

        outcome = engine.fix_file("a.txt")

        assert outcome.commits == 1
        assert outcome.applied == 2
        assert lint_factory.storage.files["a.txt"] == "x\n"

    def test_conflict_resolved_across_passes(self, lint_factory):
        """The losing plugin's fix is re-proposed and applied next pass."""
        def wrap(path, text):
            if text.startswith("("):
                return []
            return [replace_at(path, 0, len(text), f"({text})", "Wrap")]

        def upper(path, text):
            idx = text.find("a")
            if idx < 0:
                return []
            return [replace_at(path, idx, idx + 1, "A", "Upper")]

        engine = lint_factory.engine(
            {"a.txt": "a"},
            plugins=[fix_plugin("wrap", wrap, lint_factory), fix_plugin("upper", upper, lint_factory)],
            builtin=False,
        )

        outcome = engine.fix_file("a.txt")

        assert outcome.converged
        assert outcome.attempts == 3
        assert outcome.commits == 2
        assert outcome.skipped == 1
        assert lint_factory.storage.files["a.txt"] == "(A)"

    def test_identical_span_earlier_rule_wins(self, lint_factory):
        """trailing-whitespace runs before no-tabs, so the tab is deleted."""
        engine = lint_factory.engine(
            {"a.txt": "x\n\t\n"},
            rules={"trailing-whitespace": "error", "no-tabs": "warning"},
        )

        outcome = engine.fix_file("a.txt")

        assert outcome.converged
        assert outcome.skipped == 1
        assert lint_factory.storage.files["a.txt"] == "x\n\n"

    def test_plugins_see_previous_commit(self, lint_factory):
        seen = []

        def record(path, text):
            seen.append(text)
            return semicolon_fixes(path, text)

        engine = lint_factory.engine(
            {"a.ts": "x"}, plugins=[fix_plugin("semi", record, lint_factory)], builtin=False
        )
        engine.fix_file("a.ts")

        assert seen == ["x", "x;"]


class TestFixLoopBudget:
    """Loops that keep changing the text."""

    def test_budget_exhausted_after_three_commits(self, lint_factory):
        calls = []

        def always(path, start, end):
            calls.append((path, start, end))
            return [insert_at(path, 0, "x", "Prepend")]

        engine = lint_factory.engine(
            {"a.txt": "abc"}, plugins=[Plugin(name="always", get_fixes=always)], builtin=False
        )

        outcome = engine.fix_file("a.txt")

        assert len(calls) == 3
        assert outcome.attempts == 3
        assert outcome.commits == 3
        assert not outcome.converged
        assert outcome.budget_exhausted
        assert outcome.state is FixState.IDLE
        assert lint_factory.store.version("a.txt") == 3
        assert outcome.history == [FixState.ANALYZING, FixState.MERGING, FixState.COMMITTED] * 3 + [FixState.IDLE]
        assert lint_factory.storage.writes == [("a.txt", "xxxabc")]

    def test_fixes_requested_for_whole_file(self, lint_factory):
        calls = []

        def record(path, start, end):
            calls.append((start, end))
            return []

        engine = lint_factory.engine(
            {"a.txt": "hello"}, plugins=[Plugin(name="rec", get_fixes=record)], builtin=False
        )
        engine.fix_file("a.txt")

        assert calls == [(0, 5)]

    def test_custom_budget(self, lint_factory):
        plugin = Plugin(name="always", get_fixes=lambda path, start, end: [insert_at(path, 0, "x")])
        engine = lint_factory.engine({"a.txt": ""}, plugins=[plugin], builtin=False, max_attempts=5)

        outcome = engine.fix_file("a.txt")

        assert outcome.attempts == 5
        assert lint_factory.storage.files["a.txt"] == "xxxxx"

    def test_invalid_budget_raises(self, lint_factory):
        with pytest.raises(ValueError):
            lint_factory.engine({"a.txt": ""}, max_attempts=0)

    def test_unconverged_files_in_run(self, lint_factory):
        plugin = Plugin(name="always", get_fixes=lambda path, start, end: [insert_at(path, 0, "x")])
        engine = lint_factory.engine({"a.txt": "", "b.txt": ""}, plugins=[plugin], builtin=False)

        result = engine.run(fix=True)

        assert result.fixed_files == ["a.txt", "b.txt"]
        assert result.unconverged_files == ["a.txt", "b.txt"]
        assert len(lint_factory.storage.writes) == 2


class TestFixLoopRejections:
    """Candidates the merge engine never applies."""

    def test_cross_file_candidate_never_applies(self, lint_factory):
        from lintloop.core.edits import FileChange, FixCandidate

        cross = FixCandidate(description="both", changes=[
            FileChange("a.txt", [TextEdit(0, 0, "x")]),
            FileChange("b.txt", [TextEdit(0, 0, "y")]),
        ])
        engine = lint_factory.engine(
            {"a.txt": "a", "b.txt": "b"}, plugins=[static_plugin("cross", [cross])], builtin=False
        )

        outcome = engine.fix_file("a.txt")

        assert outcome.converged
        assert outcome.rejected == 1
        assert lint_factory.storage.writes == []


class TestPluginErrors:
    """Plugin exceptions abort the run."""

    def test_get_fixes_error_propagates(self, lint_factory):
        def boom(path, start, end):
            raise RuntimeError("kaboom")

        engine = lint_factory.engine({"a.txt": "a"}, plugins=[Plugin(name="bad", get_fixes=boom)], builtin=False)

        with pytest.raises(PluginError) as exc_info:
            engine.fix_file("a.txt")

        assert exc_info.value.plugin == "bad"
        assert exc_info.value.operation == "get_fixes"
        assert isinstance(exc_info.value.__cause__, RuntimeError)
        assert "kaboom" in str(exc_info.value)
        assert lint_factory.storage.writes == []

    def test_lint_error_propagates(self, lint_factory):
        def boom(document, rules):
            raise KeyError("missing")

        engine = lint_factory.engine({"a.txt": "a"}, plugins=[Plugin(name="bad", lint=boom)], builtin=False)

        with pytest.raises(PluginError) as exc_info:
            engine.lint_file("a.txt")
        assert exc_info.value.path == "a.txt"

    def test_error_after_commit_does_not_write(self, lint_factory):
        calls = []

        def flaky(path, start, end):
            calls.append(path)
            if len(calls) > 1:
                raise RuntimeError("second pass")
            return [insert_at(path, 0, "x")]

        engine = lint_factory.engine({"a.txt": "a"}, plugins=[Plugin(name="flaky", get_fixes=flaky)], builtin=False)

        with pytest.raises(PluginError):
            engine.fix_file("a.txt")
        assert lint_factory.storage.writes == []

    def test_resolve_rules_error_raised_at_construction(self, lint_factory):
        def boom(rules):
            raise ValueError("bad rules")

        with pytest.raises(PluginError):
            lint_factory.engine({"a.txt": ""}, plugins=[Plugin(name="bad", resolve_rules=boom)])


class TestResolveRules:
    """Rule config rewriting before the first lint."""

    def test_chained_in_registration_order(self, lint_factory):
        seen = []

        def enable_newline(rules):
            seen.append(dict(rules))
            return {**rules, "final-newline": "error"}

        def record(rules):
            seen.append(dict(rules))
            return rules

        engine = lint_factory.engine(
            {"a.txt": "x"},
            plugins=[Plugin(name="first", resolve_rules=enable_newline), Plugin(name="second", resolve_rules=record)],
            rules={"trailing-whitespace": "error"},
        )

        assert seen[0] == {"trailing-whitespace": "error"}
        assert seen[1] == {"trailing-whitespace": "error", "final-newline": "error"}
        assert [d.rule for d in engine.lint_file("a.txt")] == ["final-newline"]


class TestReportMode:
    """Single lint pass, nothing written."""

    def test_lint_file_returns_rule_diagnostics(self, lint_factory):
        engine = lint_factory.engine({"a.txt": "x  \n"}, rules={"trailing-whitespace": "error"})

        diagnostics = engine.lint_file("a.txt")

        assert len(diagnostics) == 1
        assert diagnostics[0].rule == "trailing-whitespace"
        assert (diagnostics[0].start, diagnostics[0].end) == (1, 3)

    def test_run_reports_only_files_with_findings(self, lint_factory):
        engine = lint_factory.engine(
            {"clean.txt": "ok\n", "dirty.txt": "ok"},
            rules={"final-newline": "error"},
        )
        reported = []

        result = engine.run(reporter=lambda path, diags: reported.append(path))

        assert reported == ["dirty.txt"]
        assert result.diagnostic_count == 1
        assert result.has_diagnostics
        assert lint_factory.storage.writes == []

    def test_plugin_diagnostics_follow_plugin_order(self, lint_factory):
        def lint(document, rules):
            return [Diagnostic(path=document.path, start=0, end=0, message="custom", source="extra")]

        engine = lint_factory.engine(
            {"a.txt": "x"}, plugins=[Plugin(name="extra", lint=lint)], rules={"final-newline": "error"}
        )

        assert [d.message for d in engine.lint_file("a.txt")] == [
            "File does not end with a newline",
            "custom",
        ]

    def test_unknown_file_raises(self, lint_factory):
        engine = lint_factory.engine({"a.txt": ""})
        with pytest.raises(DocumentNotFoundError, match="No source file found for missing.txt"):
            engine.lint_file("missing.txt")

    def test_disabled_rule_reports_nothing(self, lint_factory):
        engine = lint_factory.engine({"a.txt": "x  "}, rules={"trailing-whitespace": "off"})
        assert engine.lint_file("a.txt") == []
