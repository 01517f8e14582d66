"""
Book store for the library ledger.

Catalog primitives over Book entities keyed by BookID:

1. **add**: create an available copy owned by the library
2. **get / exists**: read access
3. **delete**: remove a copy from the catalog
"""

import logging

from ..codec import decode_book, decode_entity, encode_book
from ..errors import NotFoundError
from ..models import LIBRARY_OWNER, Book
from .base import EntityStore

logger = logging.getLogger(__name__)


class BookStore(EntityStore[Book]):
    """Store for catalog entries."""

    entity_label = "book"

    def encode(self, entity: Book) -> bytes:
        return encode_book(entity)

    def decode(self, key: str, raw: bytes) -> Book:
        return decode_book(key, raw)

    def key_of(self, entity: Book) -> str:
        return entity.book_id

    def add(self, book_id: str, name: str, author: str, price: int) -> Book:
        """
        Add a new copy to the catalog, available to borrow.

        Args:
            book_id: Key of the new copy
            name: Title
            author: Author
            price: Replacement price, non-negative

        Returns:
            The stored book

        Raises:
            AlreadyExistsError: If ``book_id`` is taken
            ValidationError: If the fields do not form a valid book
        """
        book = Book(
            book_id=book_id,
            name=name,
            author=author,
            valid=True,
            price=price,
            owner=LIBRARY_OWNER,
        )
        stored = self.create(book)
        logger.info("Added book %s (%r by %s)", book_id, name, author)
        return stored

    def delete(self, book_id: str) -> None:
        """
        Remove a copy from the catalog.

        Loan state is not checked: deleting a copy that is out on loan leaves
        its open record pointing at a missing book. Records share the keyspace
        but are never deleted, so a key holding a record counts as absent.

        Raises:
            NotFoundError: If no book is stored under ``book_id``
            DecodeError: If the stored value is neither a book nor a record
        """
        raw = self._read(book_id)
        if raw is None or not isinstance(decode_entity(book_id, raw), Book):
            raise NotFoundError(f"the book {book_id} does not exist", key=book_id)
        self.world_state.del_state(book_id)
        logger.info("Deleted book %s", book_id)
