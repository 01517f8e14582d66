"""Test configuration and fixtures for the library ledger.

Fixtures provide:
1. Isolated configuration - no LIBRARY_LEDGER_* variables leak into tests
2. In-memory world states with contracts bound to them
3. An in-memory SQLite ledger installed as the global database manager
4. Fixed timestamps so stored bytes are predictable
"""

import logging
import os
from collections.abc import Generator
from datetime import UTC, datetime

import pytest

from library_ledger.config import reset_config
from library_ledger.contract import LibraryContract
from library_ledger.models import Timestamp
from library_ledger.world_state import (
    LedgerDatabase,
    MemoryWorldState,
    get_db_manager,
    reset_db_manager,
)

# === Environment Fixtures ===


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> Generator[None, None, None]:
    """Start every test without LIBRARY_LEDGER_* variables or cached config."""
    for key in list(os.environ):
        if key.startswith("LIBRARY_LEDGER_"):
            monkeypatch.delenv(key)

    reset_config()
    yield
    reset_config()


@pytest.fixture
def restore_logging() -> Generator[None, None, None]:
    """Undo configure_logging() so later tests keep pytest's handlers."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    engine_level = logging.getLogger("sqlalchemy.engine").level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
    logging.getLogger("sqlalchemy.engine").setLevel(engine_level)


# === World State Fixtures ===


@pytest.fixture
def world_state() -> MemoryWorldState:
    """Provide an empty in-memory world state."""
    return MemoryWorldState()


@pytest.fixture
def contract(world_state: MemoryWorldState) -> LibraryContract:
    """Provide a contract bound to the in-memory world state."""
    return LibraryContract(world_state)


@pytest.fixture
def seeded_contract(contract: LibraryContract) -> LibraryContract:
    """Provide a contract whose world state holds the starter catalog."""
    contract.init_ledger()
    return contract


@pytest.fixture
def ledger_db() -> Generator[LedgerDatabase, None, None]:
    """Install an in-memory SQLite ledger as the global database manager.

    Operation handlers open their transactions through the global manager,
    so this is the fixture handler tests depend on.
    """
    reset_db_manager()
    db = get_db_manager("sqlite:///:memory:")
    db.init_database()
    yield db
    reset_db_manager()


# === Test Data Fixtures ===


@pytest.fixture
def t0() -> Timestamp:
    return Timestamp(datetime(2024, 3, 1, 9, 30, tzinfo=UTC))


@pytest.fixture
def t1() -> Timestamp:
    return Timestamp(datetime(2024, 3, 15, 17, 45, 30, 250000, tzinfo=UTC))
