"""
Shared pytest fixtures and configuration for bitcolumn tests.

This module provides:
- Settings cache isolation
- An in-memory SQLite engine with the shared models created
- A session bound to that engine
- A statement recorder for counting SQL round trips
"""

import sys
from pathlib import Path
from typing import Any, Generator

import pytest
from sqlalchemy import event

# Ensure bitcolumn and the test support package are importable
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))
sys.path.insert(0, str(Path(__file__).parent))

from bitcolumn.core.settings import clear_settings_cache
from bitcolumn.orm import BitColumnBase, BitColumnSession, create_bitcolumn_engine

from _support import models  # noqa: F401  (registers the shared tables)


# =============================================================================
# Settings Isolation
# =============================================================================


@pytest.fixture(autouse=True)
def _isolated_settings() -> Generator[None, None, None]:
    """Every test starts and ends with a fresh settings cache."""
    clear_settings_cache()
    yield
    clear_settings_cache()


# =============================================================================
# Database Fixtures
# =============================================================================


@pytest.fixture
def engine():
    """In-memory SQLite engine with all shared tables created."""
    eng = create_bitcolumn_engine("sqlite:///:memory:")
    BitColumnBase.metadata.create_all(eng)
    yield eng
    eng.dispose()


@pytest.fixture
def session(engine) -> Generator[BitColumnSession, None, None]:
    """BitColumnSession bound to the in-memory engine."""
    with BitColumnSession(bind=engine) as sess:
        yield sess


class StatementRecorder:
    """Collects every SQL statement sent to the database."""

    def __init__(self) -> None:
        self.statements: list[str] = []

    def __call__(self, conn: Any, cursor: Any, statement: str, *args: Any) -> None:
        self.statements.append(statement)

    def count(self, verb: str) -> int:
        return sum(1 for s in self.statements if s.lstrip().upper().startswith(verb.upper()))

    def clear(self) -> None:
        self.statements.clear()


@pytest.fixture
def statements(engine) -> Generator[StatementRecorder, None, None]:
    """Record statements executed on the test engine."""
    recorder = StatementRecorder()
    event.listen(engine, "before_cursor_execute", recorder)
    yield recorder
    event.remove(engine, "before_cursor_execute", recorder)
