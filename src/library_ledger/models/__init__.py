"""
Library ledger models.

Pydantic models for the two entities kept in the world state:

- Book: one copy in the catalog, with its lending state
- Record: one loan of a book, open until the book comes back

and the Timestamp value type used for loan start and end times.
"""

from .book import LIBRARY_OWNER, Book
from .record import Record
from .timestamp import Timestamp

__all__ = [
    "LIBRARY_OWNER",
    "Book",
    "Record",
    "Timestamp",
]
