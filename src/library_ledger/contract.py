"""
Library contract: the operations a caller can invoke against the ledger.

One LibraryContract serves one invocation. It is bound to the world state the
host supplies for that invocation and composes the stores, the lending
workflow and the query engine over it. Every operation takes only strings,
integers and timestamps, and returns a model, a primitive, or raises one of
the exceptions in ``library_ledger.errors``.
"""

import logging

from .lending import LendingWorkflow
from .models import Book, Record, Timestamp
from .queries import QueryEngine
from .stores import BookStore, RecordStore
from .world_state import WorldState

logger = logging.getLogger(__name__)

# Starter catalog written by init_ledger
SEED_CATALOG: tuple[Book, ...] = (
    Book(book_id="book1", name="Journey to the West", author="WuChengEn", price=20),
    Book(book_id="book2", name="A Dream of Red Mansions", author="CaoXueQin", price=21),
    Book(book_id="book3", name="Three Kingdoms", author="LuoGuanZhong", price=22),
    Book(book_id="book4", name="Water Margin", author="ShiNaiAn", price=23),
)


class LibraryContract:
    """The invocable surface of the library ledger."""

    def __init__(self, world_state: WorldState):
        self.world_state = world_state
        self.books = BookStore(world_state)
        self.records = RecordStore(world_state)
        self.lending = LendingWorkflow(self.books, self.records)
        self.queries = QueryEngine(world_state)

    # === Catalog ===

    def init_ledger(self) -> list[Book]:
        """Write the starter catalog, replacing any copies with the same ids."""
        seeded = [self.books.put(book) for book in SEED_CATALOG]
        logger.info("Seeded %d books", len(seeded))
        return seeded

    def add_book(self, book_id: str, name: str, author: str, price: int) -> Book:
        return self.books.add(book_id, name, author, price)

    def query_book(self, book_id: str) -> Book:
        logger.debug("Query book %s", book_id)
        return self.books.get(book_id)

    def delete_book(self, book_id: str) -> None:
        self.books.delete(book_id)

    def book_exists(self, book_id: str) -> bool:
        return self.books.exists(book_id)

    # === Records ===

    def add_record(
        self, record_id: str, book_id: str, start_time: Timestamp, borrower: str
    ) -> Record:
        """
        Open a record without touching the book.

        This is the primitive borrow_book builds on. Called on its own it
        does not mark the book as lent.
        """
        return self.records.add(record_id, book_id, start_time, borrower)

    def query_record(self, record_id: str) -> Record:
        logger.debug("Query record %s", record_id)
        return self.records.get(record_id)

    def record_exists(self, record_id: str) -> bool:
        return self.records.exists(record_id)

    # === Lending ===

    def borrow_book(
        self, record_id: str, book_id: str, new_owner: str, start_time: Timestamp
    ) -> Record:
        _, record = self.lending.borrow(record_id, book_id, new_owner, start_time)
        return record

    def return_book(self, record_id: str, book_id: str, end_time: Timestamp) -> Record:
        _, record = self.lending.return_book(record_id, book_id, end_time)
        return record

    # === Queries ===

    def get_all_books(self) -> dict[str, int]:
        """Count copies per title, ordered by title."""
        return self.queries.aggregate_by_title()

    def get_borrow_list(self, name: str) -> list[Book]:
        """List every copy of a title, including those on loan."""
        return self.queries.borrow_list_by_title(name)
