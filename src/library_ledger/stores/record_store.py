"""Record store for the library ledger."""

import logging

from ..codec import decode_record, encode_record
from ..models import Record, Timestamp
from .base import EntityStore

logger = logging.getLogger(__name__)


class RecordStore(EntityStore[Record]):
    """Store for lending records. Records are never deleted."""

    entity_label = "record"

    def encode(self, entity: Record) -> bytes:
        return encode_record(entity)

    def decode(self, key: str, raw: bytes) -> Record:
        return decode_record(key, raw)

    def key_of(self, entity: Record) -> str:
        return entity.record_id

    def add(self, record_id: str, book_id: str, start_time: Timestamp, borrower: str) -> Record:
        """
        Open a new lending record.

        ``book_id`` is stored as given; checking that the book exists is the
        caller's job.

        Raises:
            AlreadyExistsError: If ``record_id`` is taken
        """
        record = Record(
            record_id=record_id,
            book_id=book_id,
            start_time=start_time,
            end_time=Timestamp.unset(),
            borrower=borrower,
        )
        stored = self.create(record)
        logger.info("Opened record %s for book %s (borrower %s)", record_id, book_id, borrower)
        return stored
