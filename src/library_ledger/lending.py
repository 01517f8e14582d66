"""
Lending workflow for the library ledger.

Each book moves through a two-state cycle:

    AVAILABLE (Valid=True, no open record)
        -- borrow -->  ON_LOAN (Valid=False, one open record)
        -- return -->  AVAILABLE

A transition writes both the book and a record. The workflow performs those
writes in order and does not undo the first if the second fails; it relies on
the host running the whole invocation as one transaction, so a failure part
way through discards every write the invocation made.
"""

import logging
from enum import Enum

from .errors import InvalidTransitionError
from .models import LIBRARY_OWNER, Book, Record, Timestamp
from .stores import BookStore, RecordStore

logger = logging.getLogger(__name__)


class LendingState(str, Enum):
    """Lending state of a book."""

    AVAILABLE = "available"
    ON_LOAN = "on_loan"

    @classmethod
    def of(cls, book: Book) -> "LendingState":
        return cls.AVAILABLE if book.valid else cls.ON_LOAN


class LendingWorkflow:
    """
    Coordinates the book and record writes of a loan.

    The workflow holds no state of its own; it is built per invocation over
    stores that share that invocation's world state.
    """

    def __init__(self, books: BookStore, records: RecordStore):
        self.books = books
        self.records = records

    def borrow(
        self, record_id: str, book_id: str, borrower: str, start_time: Timestamp
    ) -> tuple[Book, Record]:
        """
        Lend an available book and open its record.

        Steps:
        1. Read the book
        2. Mark it on loan to ``borrower`` and persist it
        3. Open the record

        Returns:
            Tuple of (updated book, new open record)

        Raises:
            NotFoundError: If the book does not exist
            InvalidTransitionError: If the book is already on loan, or the
                borrower is the library itself
            AlreadyExistsError: If ``record_id`` is taken (after the book
                write; the host transaction discards it)
        """
        book = self.books.get(book_id)

        if LendingState.of(book) is not LendingState.AVAILABLE:
            raise InvalidTransitionError(
                f"the book {book_id} is already on loan to {book.owner}", key=book_id
            )
        if borrower == LIBRARY_OWNER:
            raise InvalidTransitionError(
                f"the book {book_id} cannot be borrowed by {LIBRARY_OWNER!r}", key=book_id
            )

        lent = self.books.put(book.lend_to(borrower))
        record = self.records.add(record_id, book_id, start_time, borrower)

        logger.info("Book %s borrowed by %s under record %s", book_id, borrower, record_id)
        return lent, record

    def return_book(
        self, record_id: str, book_id: str, end_time: Timestamp
    ) -> tuple[Book, Record]:
        """
        Put a book back on the shelf and close its record.

        Steps:
        1. Read the book
        2. Mark it available and owned by the library, persist it
        3. Read the record
        4. Set its end time and persist it

        The caller is trusted to pair ``record_id`` with ``book_id``: neither
        the record's BookID nor whether it is still open is checked.

        Returns:
            Tuple of (updated book, closed record)

        Raises:
            NotFoundError: If the book or the record does not exist
        """
        book = self.books.get(book_id)
        returned = self.books.put(book.return_to_library())

        record = self.records.get(record_id)
        closed = self.records.put(record.closed_at(end_time))

        logger.info("Book %s returned, record %s closed", book_id, record_id)
        return returned, closed
