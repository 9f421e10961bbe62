"""
CLI -- Command interface

    lintloop check            report diagnostics, exit 1 if any remain
    lintloop check --fix      apply fixes until nothing changes
    lintloop rules            list built-in rules
    lintloop config           show configuration

The project config (lintloop.yaml) is taken from --project or found by
walking up from the working directory. Configuration errors abort the run
before any file is read.
"""

import argparse
import logging
import os
import sys
from pathlib import Path
from typing import List, Optional

from .config import ConfigManager
from .core.engine import LintEngine
from .core.parsing import DocumentParser, default_registry
from .core.plugins import PluginContext, load_plugins
from .core.provider import DocumentProvider
from .core.storage import FileStorage
from .core.store import VersionedDocumentStore
from .commands.check import CheckCommand
from .commands.config_cmd import ConfigCommand
from .commands.rules_cmd import RulesCommand
from .errors import LintloopError
from .presentation.symbols import get_symbols, safe_print
from .rules import create_rule_plugin
from . import __version__


class LintCLI:
    """Holds the resources shared by every command."""

    def __init__(self, project_dir: Path, config_path: Optional[Path] = None):
        self.project_dir = Path(project_dir)
        self.config_manager = ConfigManager(self.project_dir, config_path)
        self.config = self.config_manager.load()
        self.symbols = get_symbols(self.config.display.symbols)

        self._engine: Optional[LintEngine] = None

        self._check_cmd = CheckCommand(self)
        self._rules_cmd = RulesCommand(self)
        self._config_cmd = ConfigCommand(self)

    @property
    def engine(self) -> LintEngine:
        """
        Lint engine over the project (lazy initialization).

        Building it resolves the file list and loads plugins, so commands
        that only read config never touch project files.
        """
        if self._engine is None:
            self._engine = self._build_engine()
        return self._engine

    def _build_engine(self) -> LintEngine:
        config = self.config
        root = self.config_manager.root

        registry = default_registry(max_file_size=config.parser.get("max_file_size"))
        files = self.config_manager.resolve_files(extra_excludes=registry.all_exclude_patterns())

        store = VersionedDocumentStore(FileStorage(root))
        provider = DocumentProvider(store, files, settings=config.parser)
        parser = DocumentParser(provider, registry)

        context = PluginContext(
            project_dir=root,
            provider=provider,
            parser=parser,
            config=config,
            config_file=self.config_manager.config_path,
        )
        plugins = load_plugins(config.plugins, context, builtin=[create_rule_plugin(context)])

        return LintEngine(
            provider=provider,
            parser=parser,
            plugins=plugins,
            rules=config.rules,
            max_attempts=config.fix.max_attempts,
        )


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main entry point for the lintloop CLI.

    Returns:
        Exit status: 0 clean, 1 diagnostics remain, 2 fatal error
    """
    parser = argparse.ArgumentParser(
        prog="lintloop",
        description="lintloop -- rule-based linter with iterative auto-fix",
    )

    parser.add_argument(
        '--project', '-p',
        default=os.environ.get("LINTLOOP_PROJECT"),
        help='Path to lintloop.yaml or its directory (default: search upward from cwd)'
    )

    parser.add_argument(
        '--verbose', '-v',
        action='store_true',
        help='Log every fix pass to stderr'
    )

    parser.add_argument(
        '--version', '-V',
        action='version',
        version=f'lintloop {__version__}'
    )

    subparsers = parser.add_subparsers(dest='command', help='Commands')

    from .commands import register_all, dispatch
    register_all(subparsers)

    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 0

    _configure_logging(args.verbose)

    try:
        cli = LintCLI(Path.cwd(), Path(args.project) if args.project else None)
        return dispatch(args.command, cli, args)
    except LintloopError as e:
        safe_print(f"Error: {e}", file=sys.stderr)
        return 2


if __name__ == '__main__':
    sys.exit(main())
