"""
Lending operation handlers.

Handlers for the operations that move books in and out of the library:
1. borrow_book: lend a copy and open its record
2. return_book: take a copy back and close its record
3. add_record / query_record / record_exists: record primitives
"""

from typing import Any

from pydantic import BaseModel, Field

from ..contract import LibraryContract
from ..models import Timestamp
from .responses import execute, success_response


class RecordIdInput(BaseModel):
    """Arguments naming one record."""

    record_id: str = Field(
        ...,
        description="Key of the lending record",
        min_length=1,
        examples=["record1"],
    )


class BorrowBookInput(RecordIdInput):
    """Arguments of borrow_book."""

    book_id: str = Field(..., description="Key of the book to lend", min_length=1)
    new_owner: str = Field(
        ...,
        description="Identifier of the borrower",
        min_length=1,
        examples=["alice"],
    )
    start_time: Timestamp = Field(..., description="When the loan starts (RFC 3339)")


class AddRecordInput(RecordIdInput):
    """Arguments of add_record."""

    book_id: str = Field(..., description="Key of the lent book", min_length=1)
    start_time: Timestamp = Field(..., description="When the loan starts (RFC 3339)")
    borrower: str = Field(..., description="Identifier of the borrower", min_length=1)


class ReturnBookInput(RecordIdInput):
    """
    Arguments of return_book.

    The record and the book are taken as given; the caller is responsible
    for passing the record that belongs to the book.
    """

    book_id: str = Field(..., description="Key of the returned book", min_length=1)
    end_time: Timestamp = Field(..., description="When the loan ended (RFC 3339)")


def borrow_book_handler(arguments: dict[str, Any]) -> dict[str, Any]:
    def operation(contract: LibraryContract, params: BorrowBookInput) -> dict[str, Any]:
        record = contract.borrow_book(
            params.record_id, params.book_id, params.new_owner, params.start_time
        )
        return success_response(
            f"Book '{record.book_id}' borrowed by '{record.borrower}' "
            f"under record '{record.record_id}'",
            {"record": record.model_dump(mode="json", by_alias=True)},
        )

    return execute("borrow_book", BorrowBookInput, arguments, operation)


def return_book_handler(arguments: dict[str, Any]) -> dict[str, Any]:
    def operation(contract: LibraryContract, params: ReturnBookInput) -> dict[str, Any]:
        record = contract.return_book(params.record_id, params.book_id, params.end_time)
        return success_response(
            f"Book '{params.book_id}' returned, record '{record.record_id}' closed "
            f"at {record.end_time}",
            {"record": record.model_dump(mode="json", by_alias=True)},
        )

    return execute("return_book", ReturnBookInput, arguments, operation)


def add_record_handler(arguments: dict[str, Any]) -> dict[str, Any]:
    def operation(contract: LibraryContract, params: AddRecordInput) -> dict[str, Any]:
        record = contract.add_record(
            params.record_id, params.book_id, params.start_time, params.borrower
        )
        return success_response(
            f"Opened record '{record.record_id}' for book '{record.book_id}'",
            {"record": record.model_dump(mode="json", by_alias=True)},
        )

    return execute("add_record", AddRecordInput, arguments, operation)


def query_record_handler(arguments: dict[str, Any]) -> dict[str, Any]:
    def operation(contract: LibraryContract, params: RecordIdInput) -> dict[str, Any]:
        record = contract.query_record(params.record_id)
        status = "open" if record.is_open else f"closed at {record.end_time}"
        return success_response(
            f"Record '{record.record_id}' for book '{record.book_id}' is {status}",
            {"record": record.model_dump(mode="json", by_alias=True)},
        )

    return execute("query_record", RecordIdInput, arguments, operation)


def record_exists_handler(arguments: dict[str, Any]) -> dict[str, Any]:
    def operation(contract: LibraryContract, params: RecordIdInput) -> dict[str, Any]:
        exists = contract.record_exists(params.record_id)
        verb = "exists" if exists else "does not exist"
        return success_response(
            f"Record '{params.record_id}' {verb}",
            {"record_id": params.record_id, "exists": exists},
        )

    return execute("record_exists", RecordIdInput, arguments, operation)


# =============================================================================
# OPERATION DESCRIPTORS
# =============================================================================

borrow_book = {
    "name": "borrow_book",
    "description": (
        "Lend an available copy to a borrower and open a lending record. "
        "Fails if the copy is already on loan or the record id is taken."
    ),
    "inputSchema": BorrowBookInput.model_json_schema(),
    "handler": borrow_book_handler,
}

return_book = {
    "name": "return_book",
    "description": (
        "Put a copy back on the shelf and close the given record with the end time."
    ),
    "inputSchema": ReturnBookInput.model_json_schema(),
    "handler": return_book_handler,
}

add_record = {
    "name": "add_record",
    "description": (
        "Open a lending record without changing the book. "
        "borrow_book should be preferred; this leaves the copy marked available."
    ),
    "inputSchema": AddRecordInput.model_json_schema(),
    "handler": add_record_handler,
}

query_record = {
    "name": "query_record",
    "description": "Read one lending record.",
    "inputSchema": RecordIdInput.model_json_schema(),
    "handler": query_record_handler,
}

record_exists = {
    "name": "record_exists",
    "description": "Check whether a lending record with the given id exists.",
    "inputSchema": RecordIdInput.model_json_schema(),
    "handler": record_exists_handler,
}

lending_tools = [
    borrow_book,
    return_book,
    add_record,
    query_record,
    record_exists,
]
