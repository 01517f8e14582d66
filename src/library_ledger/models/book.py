"""
Book model for the library ledger.

A book is one physical copy in the catalog, stored under its ``BookID`` key.
Its lending state is carried by two fields that must always agree:

- ``Valid=True, Owner="library"``: on the shelf and available to borrow
- ``Valid=False, Owner=<borrower>``: on loan to that borrower

Field aliases are the persisted names and their declaration order is the
order in which they are written, which keeps encoded bytes identical across
executions.
"""

from pydantic import BaseModel, ConfigDict, Field, model_validator

LIBRARY_OWNER = "library"


class Book(BaseModel):
    """
    Represents one copy of a book in the catalog.

    Instances are immutable; the lending transitions return new instances
    that have passed the same validation as a freshly decoded book.
    """

    book_id: str = Field(
        ...,
        alias="BookID",
        description="Unique key of the book in the world state",
        min_length=1,
        examples=["book1", "book42"],
    )

    name: str = Field(
        ...,
        alias="Name",
        description="Title of the book, shared by every copy of it",
        examples=["Journey to the West", "Water Margin"],
    )

    author: str = Field(
        ...,
        alias="Author",
        description="Author of the book",
        examples=["WuChengEn", "ShiNaiAn"],
    )

    valid: bool = Field(
        default=True,
        alias="Valid",
        description="Whether the copy is on the shelf and can be borrowed",
    )

    price: int = Field(
        ...,
        alias="Price",
        description="Replacement price of the copy",
        ge=0,
        examples=[20, 23],
    )

    owner: str = Field(
        default=LIBRARY_OWNER,
        alias="Owner",
        description="Current holder: 'library' or the borrower's identifier",
        examples=[LIBRARY_OWNER, "alice"],
    )

    @model_validator(mode="after")
    def validate_ownership(self) -> "Book":
        """Ensure the availability flag agrees with the owner."""
        if self.valid != (self.owner == LIBRARY_OWNER):
            raise ValueError(
                f"book {self.book_id} is inconsistent: Valid={self.valid} with Owner={self.owner!r}"
            )
        return self

    @property
    def is_available(self) -> bool:
        return self.valid

    def lend_to(self, borrower: str) -> "Book":
        """Return this book as held by ``borrower``."""
        return self._with(valid=False, owner=borrower)

    def return_to_library(self) -> "Book":
        """Return this book back on the shelf."""
        return self._with(valid=True, owner=LIBRARY_OWNER)

    def _with(self, **changes) -> "Book":
        return type(self).model_validate({**self.model_dump(), **changes})

    model_config = ConfigDict(
        # Accept both persisted names (BookID) and attribute names (book_id)
        populate_by_name=True,
        # Stored bytes must not be coerced, e.g. "20" is not a price
        strict=True,
        frozen=True,
        json_schema_extra={
            "example": {
                "BookID": "book1",
                "Name": "Journey to the West",
                "Author": "WuChengEn",
                "Valid": True,
                "Price": 20,
                "Owner": "library",
            }
        },
    )
