"""
World-state package for the library ledger.

This package provides:
- The world-state contract the ledger consumes (base.py)
- An in-memory implementation with snapshot rollback (memory.py)
- A SQLAlchemy-backed implementation (schema.py, sql.py)
- Session management that makes each invocation one transaction (session.py)
"""

from .base import StateEntry, StateIterator, WorldState
from .memory import MemoryStateIterator, MemoryWorldState
from .schema import Base, WorldStateEntry
from .session import (
    LedgerDatabase,
    get_db_manager,
    reset_db_manager,
    safe_state_call,
    session_scope,
)
from .sql import SqlStateIterator, SqlWorldState

__all__ = [
    "Base",
    "LedgerDatabase",
    "MemoryStateIterator",
    "MemoryWorldState",
    "SqlStateIterator",
    "SqlWorldState",
    "StateEntry",
    "StateIterator",
    "WorldState",
    "WorldStateEntry",
    "get_db_manager",
    "reset_db_manager",
    "safe_state_call",
    "session_scope",
]
