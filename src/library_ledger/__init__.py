"""
Library Ledger Package.

A lending ledger for a library: a catalog of books and a history of loans,
kept as key-value entries in a transactional world state.

Key Components:
- models: Pydantic models for books, records and timestamps
- codec: Deterministic byte encoding of entities
- world_state: The store contract and its in-memory and SQL implementations
- stores: CRUD primitives over books and records
- lending: The borrow/return state machine
- queries: Whole-catalog scans
- contract: The invocable operations
- tools: Argument-validating handlers for each operation
- config: Configuration management with pydantic-settings
"""

__version__ = "0.1.0"

from .contract import LibraryContract
from .errors import (
    AlreadyExistsError,
    DecodeError,
    InvalidTransitionError,
    LedgerException,
    NotFoundError,
    StorageError,
)
from .models import LIBRARY_OWNER, Book, Record, Timestamp

__all__ = [
    "LIBRARY_OWNER",
    "AlreadyExistsError",
    "Book",
    "DecodeError",
    "InvalidTransitionError",
    "LedgerException",
    "LibraryContract",
    "NotFoundError",
    "Record",
    "StorageError",
    "Timestamp",
    "__version__",
]
