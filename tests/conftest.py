"""
Shared pytest fixtures for the lintloop test suite.

Usage in tests:
    def test_something(lint_factory):
        engine = lint_factory.engine({"a.txt": "x"}, rules={"final-newline": "error"})
        ...

    def test_cli(project):
        root = project({"a.py": "x = 1  \\n"}, {"rules": {"trailing-whitespace": "error"}})
"""

import pytest

from tests.factories import LintTestFactory


@pytest.fixture
def lint_factory(tmp_path):
    """Empty LintTestFactory bound to the test's tmp_path."""
    return LintTestFactory(tmp_path)


@pytest.fixture
def project(tmp_path, monkeypatch):
    """
    Write an on-disk project and chdir into it.

    Returns a function (files, config) -> project root. Also isolates the
    user config directory so ~/.lintloop never leaks into tests.
    """
    from lintloop.config import ConfigManager

    user_dir = tmp_path / "home" / ".lintloop"
    monkeypatch.setattr(ConfigManager, "USER_CONFIG_DIR", user_dir)
    monkeypatch.setattr(ConfigManager, "USER_CONFIG_FILE", user_dir / "config.yaml")
    monkeypatch.delenv("LINTLOOP_MAX_FIX_ATTEMPTS", raising=False)
    monkeypatch.delenv("LINTLOOP_SYMBOLS", raising=False)
    monkeypatch.delenv("LINTLOOP_PROJECT", raising=False)

    factory = LintTestFactory(tmp_path)

    def make(files, config=None):
        root = factory.write_project(files, config if config is not None else {})
        monkeypatch.chdir(root)
        return root

    return make
