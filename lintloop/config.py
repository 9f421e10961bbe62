"""
Configuration -- Centralized settings management

Config hierarchy (highest to lowest priority):
  1. Environment variables
  2. Project config (lintloop.yaml, found upward from the working directory)
  3. User config (~/.lintloop/config.yaml)
  4. Defaults

The project config also defines the run's input files (include/exclude
globs, relative to the config file's directory). The resolved file list
is fixed for the whole run.
"""

import os
from dataclasses import dataclass, field
from fnmatch import fnmatch
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import yaml

from .core.diagnostics import Severity
from .core.engine import DEFAULT_MAX_ATTEMPTS
from .errors import ConfigError


CONFIG_FILE_NAMES = ("lintloop.yaml", "lintloop.yml")

DEFAULT_INCLUDE = ["**/*.py"]

DEFAULT_RULES = {
    "trailing-whitespace": "error",
    "final-newline": "error",
}


@dataclass
class FilesConfig:
    """Which files make up the project."""
    include: List[str] = field(default_factory=lambda: list(DEFAULT_INCLUDE))
    exclude: List[str] = field(default_factory=list)

    def validate(self) -> Optional[str]:
        """Validate config. Returns error message or None if valid."""
        if not self.include:
            return "files.include must list at least one glob pattern"
        for pattern in self.include + self.exclude:
            if not isinstance(pattern, str) or not pattern:
                return f"Invalid file pattern: {pattern!r}"
            if Path(pattern).is_absolute():
                return f"File pattern must be relative to the config directory: {pattern!r}"
        return None


@dataclass
class FixConfig:
    """Fix loop settings."""
    max_attempts: int = DEFAULT_MAX_ATTEMPTS

    def validate(self) -> Optional[str]:
        if not isinstance(self.max_attempts, int) or isinstance(self.max_attempts, bool):
            return f"fix.max_attempts must be an integer, got {self.max_attempts!r}"
        if self.max_attempts < 1:
            return "fix.max_attempts must be >= 1"
        return None


@dataclass
class DisplayConfig:
    """Display preferences."""
    symbols: str = "auto"  # "unicode" | "ascii" | "auto"

    def validate(self) -> Optional[str]:
        valid_symbols = ("unicode", "ascii", "auto")
        if self.symbols not in valid_symbols:
            return f"Unknown symbols setting '{self.symbols}'. Valid: {', '.join(valid_symbols)}"
        return None


@dataclass
class Config:
    """Application configuration."""
    files: FilesConfig = field(default_factory=FilesConfig)
    rules: Dict[str, Any] = field(default_factory=lambda: dict(DEFAULT_RULES))
    plugins: List[str] = field(default_factory=list)
    parser: Dict[str, Any] = field(default_factory=dict)
    fix: FixConfig = field(default_factory=FixConfig)
    display: DisplayConfig = field(default_factory=DisplayConfig)

    def validate(self) -> Optional[str]:
        """Validate every section. Returns the first error or None."""
        for section in (self.files, self.fix, self.display):
            error = section.validate()
            if error:
                return error

        for name, setting in self.rules.items():
            if setting is True or (isinstance(setting, str) and setting.lower() == "on"):
                continue
            try:
                Severity.parse(setting)
            except ValueError as e:
                return f"Rule '{name}': {e}"

        max_size = self.parser.get("max_file_size")
        if max_size is not None and (not isinstance(max_size, int) or isinstance(max_size, bool) or max_size < 1):
            return f"parser.max_file_size must be a positive integer, got {max_size!r}"

        for spec in self.plugins:
            if not isinstance(spec, str) or not spec.split(":")[0]:
                return f"Invalid plugin spec: {spec!r}. Use 'package.module:factory'"
        return None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "include": list(self.files.include),
            "exclude": list(self.files.exclude),
            "rules": dict(self.rules),
            "plugins": list(self.plugins),
            "parser": dict(self.parser),
            "fix": {
                "max_attempts": self.fix.max_attempts
            },
            "display": {
                "symbols": self.display.symbols
            }
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Config':
        """Create from dictionary."""
        fix_data = data.get("fix") or {}
        display_data = data.get("display") or {}
        rules = data.get("rules")

        return cls(
            files=FilesConfig(
                include=list(data.get("include") or DEFAULT_INCLUDE),
                exclude=list(data.get("exclude") or [])
            ),
            rules=dict(DEFAULT_RULES) if rules is None else dict(rules),
            plugins=list(data.get("plugins") or []),
            parser=dict(data.get("parser") or {}),
            fix=FixConfig(
                max_attempts=fix_data.get("max_attempts", DEFAULT_MAX_ATTEMPTS)
            ),
            display=DisplayConfig(
                symbols=display_data.get("symbols", "auto")
            )
        )


def find_config_file(start: Path, names: Sequence[str] = CONFIG_FILE_NAMES) -> Optional[Path]:
    """Walk up from start looking for a project config file."""
    current = Path(start).resolve()
    if current.is_file():
        current = current.parent
    for directory in (current, *current.parents):
        for name in names:
            candidate = directory / name
            if candidate.is_file():
                return candidate
    return None


LIST_SECTIONS = ("include", "exclude", "plugins")
MAPPING_SECTIONS = ("rules", "parser", "fix", "display")


def check_section_types(data: Dict[str, Any]) -> Optional[str]:
    """
    Check the shape of raw config data before it reaches Config.from_dict.

    Returns:
        Error message or None if every present section has the right type
    """
    for key in LIST_SECTIONS:
        value = data.get(key)
        if value is None:
            continue
        if not isinstance(value, list):
            return f"'{key}' must be a list, got {type(value).__name__}"
        for item in value:
            if not isinstance(item, str):
                return f"'{key}' entries must be strings, got {item!r}"
    for key in MAPPING_SECTIONS:
        value = data.get(key)
        if value is not None and not isinstance(value, dict):
            return f"'{key}' must be a mapping, got {type(value).__name__}"
    return None


def _matches_any(rel_path: str, patterns: Sequence[str]) -> bool:
    # "**/x/**" must also match "x/..." at the root
    return any(fnmatch(rel_path, p) or fnmatch("/" + rel_path, p) for p in patterns)


class ConfigManager:
    """
    Manages configuration loading and persistence.

    Hierarchy:
      1. Environment
      2. Project config (lintloop.yaml)
      3. User config (~/.lintloop/config.yaml)
      4. Defaults
    """

    USER_CONFIG_DIR = Path.home() / ".lintloop"
    USER_CONFIG_FILE = USER_CONFIG_DIR / "config.yaml"

    def __init__(self, project_dir: Optional[Path] = None, config_path: Optional[Path] = None):
        """
        Args:
            project_dir: Where to start looking for lintloop.yaml (default: cwd)
            config_path: Explicit project config file or directory (--project)
        """
        self.project_dir = Path(project_dir) if project_dir else Path.cwd()
        self._explicit_path = Path(config_path) if config_path else None
        self._config_path: Optional[Path] = None
        self._config: Optional[Config] = None

    @property
    def user_config_path(self) -> Path:
        return self.USER_CONFIG_FILE

    @property
    def config_path(self) -> Path:
        """
        Resolved project config file.

        Raises:
            ConfigError: If no config file can be found
        """
        if self._config_path is not None:
            return self._config_path

        if self._explicit_path is not None:
            path = self._explicit_path
            if not path.is_absolute():
                path = self.project_dir / path
            if path.is_dir():
                found = [path / name for name in CONFIG_FILE_NAMES if (path / name).is_file()]
                if not found:
                    raise ConfigError(f"No {CONFIG_FILE_NAMES[0]} file found in {self._explicit_path}")
                path = found[0]
            elif not path.is_file():
                raise ConfigError(f"Config file not found: {self._explicit_path}")
        else:
            path = find_config_file(self.project_dir)
            if path is None:
                raise ConfigError(f"No {CONFIG_FILE_NAMES[0]} file found!")

        self._config_path = path.resolve()
        return self._config_path

    @property
    def root(self) -> Path:
        """Directory include/exclude globs are relative to."""
        return self.config_path.parent

    def load(self) -> Config:
        """
        Load configuration from all sources.

        Raises:
            ConfigError: Missing or malformed project config, invalid values
        """
        if self._config is not None:
            return self._config

        config_data: Dict[str, Any] = {}

        # Layer 1: User config
        if self.user_config_path.exists():
            try:
                with open(self.user_config_path) as f:
                    user_data = yaml.safe_load(f) or {}
                if isinstance(user_data, dict) and check_section_types(user_data) is None:
                    config_data = self._merge(config_data, user_data)
            except (OSError, yaml.YAMLError):
                pass  # Ignore malformed user config

        # Layer 2: Project config (higher priority, must be valid)
        try:
            with open(self.config_path) as f:
                project_data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigError(f"Malformed config file {self.config_path}: {e}") from e
        if not isinstance(project_data, dict):
            raise ConfigError(f"Config file {self.config_path} must contain a mapping")
        error = check_section_types(project_data)
        if error:
            raise ConfigError(f"{self.config_path.name}: {error}")
        config_data = self._merge(config_data, project_data)

        # Layer 3: Environment overrides
        if os.environ.get("LINTLOOP_MAX_FIX_ATTEMPTS"):
            try:
                attempts = int(os.environ["LINTLOOP_MAX_FIX_ATTEMPTS"])
            except ValueError:
                raise ConfigError("LINTLOOP_MAX_FIX_ATTEMPTS must be an integer") from None
            config_data.setdefault("fix", {})["max_attempts"] = attempts
        if os.environ.get("LINTLOOP_SYMBOLS"):
            config_data.setdefault("display", {})["symbols"] = os.environ["LINTLOOP_SYMBOLS"]

        config = Config.from_dict(config_data)
        error = config.validate()
        if error:
            raise ConfigError(f"{self.config_path.name}: {error}")

        self._config = config
        return self._config

    def resolve_files(self, extra_excludes: Sequence[str] = ()) -> List[str]:
        """
        Expand include/exclude globs into the run's file list.

        Returns:
            Sorted, deduplicated POSIX paths relative to the config directory

        Raises:
            ConfigError: If no file matches
        """
        config = self.load()
        root = self.root
        excludes = list(config.files.exclude) + list(extra_excludes)

        files = set()
        for pattern in config.files.include:
            for path in root.glob(pattern):
                if not path.is_file():
                    continue
                rel = path.relative_to(root).as_posix()
                if not _matches_any(rel, excludes):
                    files.add(rel)

        if not files:
            raise ConfigError(f"No input files found in {self.config_path.name}!")
        return sorted(files)

    def save_project(self, config: Config):
        """Save configuration to the project config file."""
        with open(self.config_path, 'w') as f:
            yaml.safe_dump(config.to_dict(), f, default_flow_style=False, sort_keys=False)
        self._config = config

    def set(self, key: str, value: str) -> Optional[str]:
        """
        Set a configuration value in the project config.

        Args:
            key: Dot-separated key (e.g., "fix.max_attempts", "rules.no-tabs")
            value: Value to set

        Returns:
            Error message or None if successful
        """
        config = self.load()

        parts = key.split(".", 1)
        if len(parts) != 2:
            return f"Invalid key format: {key}. Use 'section.setting' (e.g., 'fix.max_attempts')"

        section, setting = parts

        if section == "fix":
            if setting != "max_attempts":
                return f"Unknown fix setting: {setting}. Valid: max_attempts"
            try:
                candidate = FixConfig(max_attempts=int(value))
            except ValueError:
                return f"fix.max_attempts must be an integer, got '{value}'"
            error = candidate.validate()
            if not error:
                config.fix = candidate
        elif section == "display":
            if setting != "symbols":
                return f"Unknown display setting: {setting}. Valid: symbols"
            candidate = DisplayConfig(symbols=value)
            error = candidate.validate()
            if not error:
                config.display = candidate
        elif section == "rules":
            try:
                Severity.parse(value)
            except ValueError as e:
                return str(e)
            config.rules[setting] = value.lower()
            error = None
        else:
            return f"Unknown section: {section}. Valid: fix, display, rules"

        if error:
            return error

        self.save_project(config)
        return None

    def get(self, key: str) -> Optional[str]:
        """Get a configuration value."""
        config = self.load()

        parts = key.split(".", 1)
        if len(parts) != 2:
            return None

        section, setting = parts
        if section == "fix" and setting == "max_attempts":
            return str(config.fix.max_attempts)
        if section == "display" and setting == "symbols":
            return config.display.symbols
        if section == "rules" and setting in config.rules:
            value = config.rules[setting]
            return value.value if isinstance(value, Severity) else str(value).lower()
        return None

    def _merge(self, base: Dict, override: Dict) -> Dict:
        """Deep merge two dicts, override wins."""
        result = base.copy()
        for key, value in override.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._merge(result[key], value)
            else:
                result[key] = value
        return result

    def display(self) -> str:
        """Format config for display."""
        config = self.load()

        lines = [
            "Configuration:",
            "",
            "Files:",
            f"  Include: {', '.join(config.files.include)}",
            f"  Exclude: {', '.join(config.files.exclude) or '(none)'}",
            "",
            "Rules:",
        ]
        if config.rules:
            lines.extend(f"  {name}: {setting}" for name, setting in config.rules.items())
        else:
            lines.append("  (none)")

        lines.extend([
            "",
            "Plugins:",
        ])
        lines.extend(f"  {spec}" for spec in config.plugins)
        if not config.plugins:
            lines.append("  (built-in only)")

        lines.extend([
            "",
            "Fix:",
            f"  Max attempts: {config.fix.max_attempts}",
            "",
            "Display:",
            f"  Symbols: {config.display.symbols}",
            "",
            "Config files:",
            f"  User: {self.user_config_path}",
            f"  Project: {self.config_path}",
        ])

        return "\n".join(lines)


# Convenience function
def get_config(project_dir: Optional[Path] = None) -> Config:
    """Load configuration for a project."""
    return ConfigManager(project_dir).load()
