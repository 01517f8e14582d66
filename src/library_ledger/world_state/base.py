"""
World-state contract consumed by the ledger.

The ledger never owns its storage. The host supplies a key-value store with
per-invocation atomicity, and the ledger only needs four operations from it:

1. ``get_state``: read one value, or None when the key is absent
2. ``put_state``: write one value
3. ``del_state``: remove one key, failing when it is absent
4. ``get_state_by_range``: an ordered cursor over a key range

Range cursors are the one resource the ledger holds open, so StateIterator is
a context manager and must be closed on every exit path.
"""

from abc import ABC, abstractmethod
from typing import NamedTuple, Self

from ..errors import StorageError


class StateEntry(NamedTuple):
    """One key/value pair yielded by a range scan."""

    key: str
    value: bytes


class StateIterator(ABC):
    """
    Ordered cursor over world-state entries.

    Use as a context manager so the cursor is released even when the
    consumer raises part way through:

    ```python
    with world_state.get_state_by_range("", "") as entries:
        for entry in entries:
            ...
    ```
    """

    def __init__(self):
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    @abstractmethod
    def _next_entry(self) -> StateEntry | None:
        """Return the next entry, or None when the range is exhausted."""

    def _release(self) -> None:
        """Free the underlying cursor. Called once by close()."""

    def close(self) -> None:
        if not self._closed:
            self._closed = True
            self._release()

    def __iter__(self) -> Self:
        return self

    def __next__(self) -> StateEntry:
        if self._closed:
            raise StorageError("range iterator is already closed")
        entry = self._next_entry()
        if entry is None:
            raise StopIteration
        return entry

    def __enter__(self) -> Self:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


class WorldState(ABC):
    """Key-value store supplied by the host for one invocation."""

    @abstractmethod
    def get_state(self, key: str) -> bytes | None:
        """Return the value stored under ``key``, or None when absent.

        Raises:
            StorageError: On read failure
        """

    @abstractmethod
    def put_state(self, key: str, value: bytes) -> None:
        """Store ``value`` under ``key``, replacing any existing value.

        Raises:
            StorageError: On write failure or an empty key
        """

    @abstractmethod
    def del_state(self, key: str) -> None:
        """Remove ``key``.

        Raises:
            NotFoundError: If the key is absent
            StorageError: On write failure
        """

    @abstractmethod
    def get_state_by_range(self, start_key: str, end_key: str) -> StateIterator:
        """
        Open a cursor over ``start_key <= key < end_key`` in key order.

        An empty ``start_key`` or ``end_key`` leaves that side of the range
        open, so ``("", "")`` scans the whole keyspace.
        """

    @staticmethod
    def _check_key(key: str) -> None:
        if not key:
            raise StorageError("world state keys must be non-empty")
