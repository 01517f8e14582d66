"""
Error taxonomy for the library ledger.

Every failure a ledger operation can report is one of these exceptions.
Nothing is recovered locally: the exception propagates to the caller, and the
host transaction discards whatever the failed invocation had already written.
Each exception carries a ``kind`` that callers report verbatim, and the key
of the offending entity when there is one.
"""


class LedgerException(Exception):
    """Base exception for ledger operations."""

    kind = "LedgerError"

    def __init__(self, message: str, key: str | None = None):
        super().__init__(message)
        self.key = key


class NotFoundError(LedgerException):
    """Raised when a referenced entity is absent from the world state."""

    kind = "NotFound"


class AlreadyExistsError(LedgerException):
    """Raised when creating an entity under a key that is already taken."""

    kind = "AlreadyExists"


class DecodeError(LedgerException):
    """Raised when stored bytes do not have the expected entity shape."""

    kind = "DecodeError"


class StorageError(LedgerException):
    """Raised when the underlying world state fails to read or write."""

    kind = "StorageError"


class InvalidTransitionError(LedgerException):
    """Raised when a lending transition is requested from the wrong state."""

    kind = "InvalidTransition"
