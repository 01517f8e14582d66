"""
Catalog operation handlers.

Handlers for the operations that manage and inspect books:
1. init_ledger: seed the starter catalog
2. add_book / delete_book: change the catalog
3. query_book / book_exists: read one copy
4. get_all_books / get_borrow_list: scan the whole catalog
"""

from typing import Any

from pydantic import BaseModel, Field

from ..contract import LibraryContract
from .responses import execute, success_response


class BookIdInput(BaseModel):
    """Arguments naming one copy."""

    book_id: str = Field(
        ...,
        description="Key of the book",
        min_length=1,
        examples=["book1"],
    )


class AddBookInput(BookIdInput):
    """Arguments of add_book."""

    name: str = Field(..., description="Title of the book", examples=["Journey to the West"])
    author: str = Field(..., description="Author of the book", examples=["WuChengEn"])
    price: int = Field(..., description="Replacement price", ge=0, examples=[20])


class TitleInput(BaseModel):
    """Arguments of get_borrow_list."""

    name: str = Field(..., description="Title to list copies of", examples=["Water Margin"])


class NoInput(BaseModel):
    """Operations that take no arguments."""


def init_ledger_handler(arguments: dict[str, Any]) -> dict[str, Any]:
    def operation(contract: LibraryContract, params: NoInput) -> dict[str, Any]:
        books = contract.init_ledger()
        return success_response(
            f"Seeded {len(books)} books",
            {"books": [book.model_dump(mode="json", by_alias=True) for book in books]},
        )

    return execute("init_ledger", NoInput, arguments, operation)


def add_book_handler(arguments: dict[str, Any]) -> dict[str, Any]:
    def operation(contract: LibraryContract, params: AddBookInput) -> dict[str, Any]:
        book = contract.add_book(params.book_id, params.name, params.author, params.price)
        return success_response(
            f"Added book '{book.book_id}' ({book.name} by {book.author})",
            {"book": book.model_dump(mode="json", by_alias=True)},
        )

    return execute("add_book", AddBookInput, arguments, operation)


def query_book_handler(arguments: dict[str, Any]) -> dict[str, Any]:
    def operation(contract: LibraryContract, params: BookIdInput) -> dict[str, Any]:
        book = contract.query_book(params.book_id)
        status = "available" if book.valid else f"on loan to {book.owner}"
        return success_response(
            f"Book '{book.book_id}' ({book.name}) is {status}",
            {"book": book.model_dump(mode="json", by_alias=True)},
        )

    return execute("query_book", BookIdInput, arguments, operation)


def delete_book_handler(arguments: dict[str, Any]) -> dict[str, Any]:
    def operation(contract: LibraryContract, params: BookIdInput) -> dict[str, Any]:
        contract.delete_book(params.book_id)
        return success_response(
            f"Deleted book '{params.book_id}'", {"book_id": params.book_id}
        )

    return execute("delete_book", BookIdInput, arguments, operation)


def book_exists_handler(arguments: dict[str, Any]) -> dict[str, Any]:
    def operation(contract: LibraryContract, params: BookIdInput) -> dict[str, Any]:
        exists = contract.book_exists(params.book_id)
        verb = "exists" if exists else "does not exist"
        return success_response(
            f"Book '{params.book_id}' {verb}",
            {"book_id": params.book_id, "exists": exists},
        )

    return execute("book_exists", BookIdInput, arguments, operation)


def get_all_books_handler(arguments: dict[str, Any]) -> dict[str, Any]:
    def operation(contract: LibraryContract, params: NoInput) -> dict[str, Any]:
        titles = contract.get_all_books()
        return success_response(
            f"Catalog holds {sum(titles.values())} copies of {len(titles)} titles",
            {"titles": titles},
        )

    return execute("get_all_books", NoInput, arguments, operation)


def get_borrow_list_handler(arguments: dict[str, Any]) -> dict[str, Any]:
    def operation(contract: LibraryContract, params: TitleInput) -> dict[str, Any]:
        books = contract.get_borrow_list(params.name)
        on_loan = sum(1 for book in books if not book.valid)
        return success_response(
            f"Found {len(books)} copies of '{params.name}', {on_loan} on loan",
            {"books": [book.model_dump(mode="json", by_alias=True) for book in books]},
        )

    return execute("get_borrow_list", TitleInput, arguments, operation)


# =============================================================================
# OPERATION DESCRIPTORS
# =============================================================================

init_ledger = {
    "name": "init_ledger",
    "description": "Seed the catalog with the four starter books, replacing copies with the same ids.",
    "inputSchema": NoInput.model_json_schema(),
    "handler": init_ledger_handler,
}

add_book = {
    "name": "add_book",
    "description": "Add a new copy to the catalog. The copy starts on the shelf, owned by the library.",
    "inputSchema": AddBookInput.model_json_schema(),
    "handler": add_book_handler,
}

query_book = {
    "name": "query_book",
    "description": "Read one copy, including whether it is on loan and to whom.",
    "inputSchema": BookIdInput.model_json_schema(),
    "handler": query_book_handler,
}

delete_book = {
    "name": "delete_book",
    "description": "Remove a copy from the catalog. Loan records that reference it are kept.",
    "inputSchema": BookIdInput.model_json_schema(),
    "handler": delete_book_handler,
}

book_exists = {
    "name": "book_exists",
    "description": "Check whether a copy with the given id is in the catalog.",
    "inputSchema": BookIdInput.model_json_schema(),
    "handler": book_exists_handler,
}

get_all_books = {
    "name": "get_all_books",
    "description": "Count the copies of every title in the catalog, ordered by title.",
    "inputSchema": NoInput.model_json_schema(),
    "handler": get_all_books_handler,
}

get_borrow_list = {
    "name": "get_borrow_list",
    "description": "List every copy of a title in key order, showing which are on loan.",
    "inputSchema": TitleInput.model_json_schema(),
    "handler": get_borrow_list_handler,
}

catalog_tools = [
    init_ledger,
    add_book,
    query_book,
    delete_book,
    book_exists,
    get_all_books,
    get_borrow_list,
]
