"""
Tests for the Book and Record models.

These tests verify that the models:
1. Enforce the Valid/Owner invariant of a book
2. Reject coerced or out-of-range values
3. Produce new, validated instances for lending transitions
"""

from datetime import datetime, timedelta, timezone

import pytest
from pydantic import ValidationError

from library_ledger.models import LIBRARY_OWNER, Book, Record, Timestamp


def make_book(**overrides) -> Book:
    fields = {
        "book_id": "book1",
        "name": "Journey to the West",
        "author": "WuChengEn",
        "price": 20,
    }
    fields.update(overrides)
    return Book(**fields)


class TestBookModel:
    """Test suite for the Book model."""

    def test_new_book_is_on_the_shelf(self):
        book = make_book()

        assert book.valid is True
        assert book.owner == LIBRARY_OWNER
        assert book.is_available is True

    def test_accepts_persisted_names(self):
        book = Book.model_validate(
            {
                "BookID": "book2",
                "Name": "Water Margin",
                "Author": "ShiNaiAn",
                "Valid": True,
                "Price": 23,
                "Owner": "library",
            }
        )
        assert book.book_id == "book2"
        assert book.price == 23

    def test_on_loan_book_must_not_be_valid(self):
        with pytest.raises(ValidationError, match="inconsistent"):
            make_book(valid=True, owner="alice")

    def test_library_copy_must_be_valid(self):
        with pytest.raises(ValidationError, match="inconsistent"):
            make_book(valid=False, owner=LIBRARY_OWNER)

    def test_negative_price_rejected(self):
        with pytest.raises(ValidationError) as exc_info:
            make_book(price=-1)

        errors = exc_info.value.errors()
        assert any(error["loc"][0] in ("Price", "price") for error in errors)

    def test_price_is_not_coerced(self):
        with pytest.raises(ValidationError):
            make_book(price="20")

    def test_empty_id_rejected(self):
        with pytest.raises(ValidationError):
            make_book(book_id="")

    def test_books_are_frozen(self):
        book = make_book()
        with pytest.raises(ValidationError):
            book.owner = "alice"

    def test_lend_and_return(self):
        book = make_book()

        lent = book.lend_to("alice")
        assert lent.valid is False
        assert lent.owner == "alice"
        assert book.valid is True  # receiver untouched

        returned = lent.return_to_library()
        assert returned == book

    def test_cannot_lend_to_the_library(self):
        with pytest.raises(ValidationError):
            make_book().lend_to(LIBRARY_OWNER)


class TestRecordModel:
    """Test suite for the Record model."""

    def test_new_record_is_open(self, t0):
        record = Record(record_id="r1", book_id="book1", start_time=t0, borrower="alice")

        assert record.is_open is True
        assert record.end_time == Timestamp.unset()
        assert record.start_time == t0

    def test_closed_at(self, t0, t1):
        record = Record(record_id="r1", book_id="book1", start_time=t0, borrower="alice")

        closed = record.closed_at(t1)

        assert closed.is_open is False
        assert closed.end_time == t1
        assert closed.start_time == t0
        assert record.is_open is True

    def test_timestamps_accept_text(self):
        record = Record.model_validate(
            {
                "RecordID": "r1",
                "BookID": "book1",
                "StartTime": "2024-03-01T09:30:00Z",
                "EndTime": "0001-01-01T00:00:00Z",
                "Borrower": "alice",
            }
        )
        assert record.start_time.isoformat() == "2024-03-01T09:30:00Z"
        assert record.is_open is True

    def test_invalid_timestamp_rejected(self):
        with pytest.raises(ValidationError):
            Record(record_id="r1", book_id="book1", start_time="soon", borrower="alice")

    def test_datetime_before_utc_year_one_rejected(self):
        just_after_midnight = datetime(1, 1, 1, 0, 30, tzinfo=timezone(timedelta(hours=1)))

        with pytest.raises(ValidationError):
            Record(
                record_id="r1", book_id="book1", start_time=just_after_midnight, borrower="alice"
            )

    def test_json_dump_uses_text_timestamps(self, t0):
        record = Record(record_id="r1", book_id="book1", start_time=t0, borrower="alice")

        dumped = record.model_dump(mode="json", by_alias=True)

        assert dumped == {
            "RecordID": "r1",
            "BookID": "book1",
            "StartTime": "2024-03-01T09:30:00Z",
            "EndTime": "0001-01-01T00:00:00Z",
            "Borrower": "alice",
        }
