"""
Lending record model for the library ledger.

A record is the permanent history entry of one loan. It is created open
(``EndTime`` unset) when a book is borrowed and closed exactly once when the
book is returned. Records are never deleted.
"""

from pydantic import BaseModel, ConfigDict, Field

from .timestamp import Timestamp


class Record(BaseModel):
    """Represents one loan of one book to one borrower."""

    record_id: str = Field(
        ...,
        alias="RecordID",
        description="Unique key of the record in the world state",
        min_length=1,
        examples=["record1", "loan-2024-0001"],
    )

    book_id: str = Field(
        ...,
        alias="BookID",
        description="Key of the borrowed book",
        examples=["book1"],
    )

    start_time: Timestamp = Field(
        ...,
        alias="StartTime",
        description="When the loan started",
    )

    end_time: Timestamp = Field(
        default_factory=Timestamp.unset,
        alias="EndTime",
        description="When the loan ended; unset while the book is still out",
    )

    borrower: str = Field(
        ...,
        alias="Borrower",
        description="Identifier of the borrower",
        examples=["alice"],
    )

    @property
    def is_open(self) -> bool:
        """Check if the loan is still active."""
        return not self.end_time.is_set

    def closed_at(self, end_time: Timestamp) -> "Record":
        """Return this record with its end time set."""
        return type(self).model_validate({**self.model_dump(), "end_time": end_time})

    model_config = ConfigDict(
        populate_by_name=True,
        strict=True,
        frozen=True,
        json_schema_extra={
            "example": {
                "RecordID": "record1",
                "BookID": "book1",
                "StartTime": "2024-03-01T09:30:00Z",
                "EndTime": "0001-01-01T00:00:00Z",
                "Borrower": "alice",
            }
        },
    )
