"""
Plugin Protocol -- The capability contract every analyzer implements.

A plugin is a record of optional capabilities, not a subclass:

    Plugin(
        name="my-plugin",
        lint=lambda document, rules: [...],          # -> Diagnostics
        get_fixes=lambda path, start, end: [...],    # -> FixCandidates
        resolve_rules=lambda rules: {...},           # -> new rule config
    )

Plugins are created by factories that receive a PluginContext (project
directory, config, document provider and parser), the same way every
analyzer gets handed the language service it runs against.

Aggregation helpers (resolve_rules, run_lint, collect_fixes) call plugins
in registration order and turn any exception into a PluginError. A
plugin that crashed cannot be trusted to have produced a consistent set of
diagnostics or fixes, so nothing here is ever swallowed.
"""

import importlib
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Sequence, TYPE_CHECKING

from .diagnostics import Diagnostic
from .edits import FixCandidate
from ..errors import ConfigError, PluginError

if TYPE_CHECKING:
    from .parsing import DocumentParser, ParsedDocument
    from .provider import DocumentProvider
    from ..config import Config


logger = logging.getLogger(__name__)

RuleConfig = Dict[str, Any]

# Factory attribute looked up when a spec names a module only
DEFAULT_FACTORY = "create_plugin"


@dataclass
class Plugin:
    """
    An analyzer, identified by name, with zero or more capabilities.

    Attributes:
        name: Unique plugin name (shown in diagnostics and errors)
        lint: (document, rules) -> diagnostics. Must not mutate the document.
        get_fixes: (path, start, end) -> fix candidates within the range
        resolve_rules: (rules) -> rules, applied once before any lint call
    """
    name: str
    lint: Optional[Callable[['ParsedDocument', RuleConfig], Sequence[Diagnostic]]] = None
    get_fixes: Optional[Callable[[str, int, int], Sequence[FixCandidate]]] = None
    resolve_rules: Optional[Callable[[RuleConfig], RuleConfig]] = None

    @property
    def capabilities(self) -> List[str]:
        """Names of the capabilities this plugin provides."""
        return [
            cap for cap in ("lint", "get_fixes", "resolve_rules")
            if getattr(self, cap) is not None
        ]


@dataclass
class PluginContext:
    """Everything a plugin factory may need to build its plugin."""
    project_dir: Path
    provider: 'DocumentProvider'
    parser: 'DocumentParser'
    config: Optional['Config'] = None
    config_file: Optional[Path] = None
    extra: Dict[str, Any] = field(default_factory=dict)


def _import_factory(spec: str) -> Callable[[PluginContext], Plugin]:
    """Resolve "package.module:factory" (or "package.module") to a callable."""
    module_name, _, attr = spec.partition(":")
    attr = attr or DEFAULT_FACTORY
    try:
        module = importlib.import_module(module_name)
    except ImportError as e:
        raise ConfigError(f"Could not load plugin '{spec}': {e}") from e

    factory = getattr(module, attr, None)
    if not callable(factory):
        raise ConfigError(f"Plugin '{spec}' has no callable '{attr}'")
    return factory


def load_plugins(
    specs: Sequence[str],
    context: PluginContext,
    builtin: Sequence[Plugin] = ()
) -> List[Plugin]:
    """
    Instantiate configured plugins after the built-in ones.

    Args:
        specs: "module:factory" strings in configuration order
        context: Passed to every factory
        builtin: Already-built plugins placed first

    Returns:
        Plugins in registration order

    Raises:
        ConfigError: Unimportable spec, factory failure, non-Plugin result
                     or duplicate plugin name
    """
    plugins: List[Plugin] = list(builtin)

    for spec in specs:
        factory = _import_factory(spec)
        try:
            plugin = factory(context)
        except Exception as e:
            raise ConfigError(f"Plugin factory '{spec}' failed: {e}") from e
        if not isinstance(plugin, Plugin):
            raise ConfigError(f"Plugin factory '{spec}' returned {type(plugin).__name__}, expected Plugin")
        plugins.append(plugin)
        logger.debug("Loaded plugin %s (%s)", plugin.name, ", ".join(plugin.capabilities) or "no capabilities")

    names = [plugin.name for plugin in plugins]
    duplicates = sorted({name for name in names if names.count(name) > 1})
    if duplicates:
        raise ConfigError(f"Duplicate plugin name(s): {', '.join(duplicates)}")

    return plugins


def resolve_rules(plugins: Sequence[Plugin], rules: RuleConfig) -> RuleConfig:
    """
    Let each plugin rewrite the rule config, in registration order.

    Each plugin sees the previous plugin's output.
    """
    resolved = dict(rules)
    for plugin in plugins:
        if plugin.resolve_rules is None:
            continue
        try:
            resolved = plugin.resolve_rules(resolved)
        except Exception as e:
            raise PluginError(plugin.name, "resolve_rules", cause=e) from e
        if not isinstance(resolved, dict):
            raise PluginError(plugin.name, "resolve_rules",
                              cause=TypeError(f"returned {type(resolved).__name__}, expected dict"))
    return resolved


def run_lint(plugins: Sequence[Plugin], document: 'ParsedDocument', rules: RuleConfig) -> List[Diagnostic]:
    """Diagnostics from every plugin, in plugin order."""
    diagnostics: List[Diagnostic] = []
    for plugin in plugins:
        if plugin.lint is None:
            continue
        try:
            diagnostics.extend(plugin.lint(document, rules) or [])
        except Exception as e:
            raise PluginError(plugin.name, "lint", document.path, cause=e) from e
    return diagnostics


def collect_fixes(plugins: Sequence[Plugin], path: str, start: int, end: int) -> List[FixCandidate]:
    """
    Fix candidates from every plugin, in stable enumeration order.

    Order is plugin registration order, then each plugin's own order. The
    merge engine relies on this order to break ties.
    """
    candidates: List[FixCandidate] = []
    for plugin in plugins:
        if plugin.get_fixes is None:
            continue
        try:
            fixes = list(plugin.get_fixes(path, start, end) or [])
        except Exception as e:
            raise PluginError(plugin.name, "get_fixes", path, cause=e) from e
        for fix in fixes:
            if fix.plugin is None:
                fix.plugin = plugin.name
        candidates.extend(fixes)
    return candidates
