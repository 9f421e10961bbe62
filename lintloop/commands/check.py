"""
CheckCommand -- Lint the project, or fix it with --fix

Report mode prints every file's diagnostics with source context and exits
non-zero when anything was reported. A clean run prints nothing.

Fix mode runs the fix loop on every file and prints one line per file it
rewrote. Files that ran out of attempts while still changing are flagged,
but the exit status stays 0: their remaining findings surface on the next
report run.
"""

from typing import List

from ..commands.base import BaseCommand
from ..core.diagnostics import Diagnostic
from ..presentation.formatters import format_diagnostics, format_fix_outcomes, format_summary
from ..presentation.symbols import safe_print


class CheckCommand(BaseCommand):
    """Report or fix lint findings across the project."""

    def check(self, fix: bool = False) -> int:
        """
        Run the engine over every project file.

        Args:
            fix: Apply fixes instead of reporting

        Returns:
            Process exit status (0 = clean or fixed, 1 = diagnostics remain)
        """
        if fix:
            return self._fix()
        return self._report()

    def _report(self) -> int:
        reported: List[Diagnostic] = []

        def reporter(path: str, diagnostics: List[Diagnostic]) -> None:
            text = self.provider.get_text(path)
            safe_print(format_diagnostics(diagnostics, text, self.symbols))
            safe_print("")
            reported.extend(diagnostics)

        result = self.engine.run(fix=False, reporter=reporter)
        if not result.has_diagnostics:
            return 0

        files = len(result.diagnostics)
        safe_print(f"{format_summary(reported, self.symbols)} in {files} file{'s' if files != 1 else ''}")
        safe_print("Use --fix to apply fixes.")
        return 1

    def _fix(self) -> int:
        result = self.engine.run(fix=True)
        for line in format_fix_outcomes(result.outcomes, self.symbols):
            safe_print(line)
        return 0


# =============================================================================
# Command Registration (Self-Registration Pattern)
# =============================================================================

def register_parser(subparsers):
    """Register check command parser."""
    p = subparsers.add_parser('check', help='Lint project files (report or fix)')
    p.add_argument('--fix', action='store_true',
                   help='Apply fixes and write changed files')
    return p


def handle(cli, args):
    """Handle check command dispatch."""
    return cli._check_cmd.check(fix=args.fix)
