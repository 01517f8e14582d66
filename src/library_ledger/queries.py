"""
Catalog queries for the library ledger.

Both queries walk the entire keyspace once with a single range cursor. Books
and records share the keyspace; records are skipped, and any value that is
neither a record nor a valid book aborts the query with DecodeError.

Results must not depend on dict ordering: title counts are returned sorted
by title so that serializing them gives the same bytes on every execution.
"""

import logging
from collections import Counter
from collections.abc import Iterator

from .codec import decode_entity
from .models import Book
from .world_state import WorldState

logger = logging.getLogger(__name__)

# Empty bounds scan the whole keyspace
_FULL_RANGE = ("", "")


class QueryEngine:
    """Read-only scans over the whole catalog."""

    def __init__(self, world_state: WorldState):
        self.world_state = world_state

    def _scan_books(self) -> Iterator[Book]:
        # The with block closes the cursor however the consumer exits
        with self.world_state.get_state_by_range(*_FULL_RANGE) as entries:
            for entry in entries:
                entity = decode_entity(entry.key, entry.value)
                if isinstance(entity, Book):
                    yield entity

    def aggregate_by_title(self) -> dict[str, int]:
        """
        Count the copies of each title in the catalog.

        Returns:
            Mapping of title to number of copies, ordered by title
        """
        counts = Counter(book.name for book in self._scan_books())
        logger.debug("Aggregated %d titles", len(counts))
        return dict(sorted(counts.items()))

    def borrow_list_by_title(self, name: str) -> list[Book]:
        """
        List every copy with the given title, in key order.

        Copies out on loan have ``Valid=False`` and the borrower as owner.
        """
        books = [book for book in self._scan_books() if book.name == name]
        logger.debug("Found %d copies of %r", len(books), name)
        return books
