"""
Pytest configuration and shared fixtures for all modlang tests.

Every test gets a fresh Session (own search path, own library registry);
the process-wide default session is reset after each test so module-level
modlang.module()/modlang.use() calls never leak between tests.
"""

import sys
import pytest
from pathlib import Path
from typing import Callable

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))
from modlang.frontend.parser import Parser
from modlang.module_system.registry import LibraryRegistry
from modlang.runtime import session as session_module
from modlang.runtime.session import Session


# =============================================================================
# Session-scoped fixtures (shared across all tests)
# =============================================================================

@pytest.fixture(scope="session")
def parser():
    """
    Session-scoped parser shared across ALL tests.

    Parser is stateless; the Lark instance is built once (with Lark's cache file).
    """
    return Parser()


# =============================================================================
# Function-scoped fixtures (default - one per test)
# =============================================================================

@pytest.fixture
def session(parser, monkeypatch):
    """Fresh session; MODLANG_PATH is cleared so the host environment cannot leak in."""
    monkeypatch.delenv("MODLANG_PATH", raising=False)
    return Session(parser=parser)


@pytest.fixture
def registry(monkeypatch):
    monkeypatch.delenv("MODLANG_PATH", raising=False)
    return LibraryRegistry()


@pytest.fixture
def write_module(tmp_path) -> Callable[..., Path]:
    """
    Factory writing a modlang file under tmp_path.

    write_module("lib.mdl", "a = 1;") -> tmp_path / "lib.mdl"
    write_module("mathx/stats.mdl", ...) creates intermediate directories.
    """
    def _write(relative: str, source: str) -> Path:
        path = tmp_path / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(source, encoding="utf-8")
        return path

    return _write


@pytest.fixture(autouse=True)
def reset_default_session():
    """Drop the process-wide default session after each test."""
    yield
    session_module._default_session = None


def pytest_configure(config):
    """Register custom markers for test organization."""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests"
    )
    config.addinivalue_line(
        "markers", "unit: marks tests as unit tests"
    )
