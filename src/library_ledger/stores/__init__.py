"""Entity stores: CRUD primitives over books and records in the world state."""

from .base import EntityStore
from .book_store import BookStore
from .record_store import RecordStore

__all__ = [
    "BookStore",
    "EntityStore",
    "RecordStore",
]
