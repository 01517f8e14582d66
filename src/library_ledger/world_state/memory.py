"""
In-memory world state.

A dict-backed implementation of the world-state contract for embedding the
ledger in a process and for tests. ``transaction()`` gives it the same
all-or-nothing behaviour a ledger host provides: if the block raises, every
write made inside it is discarded.
"""

import logging
from collections.abc import Generator
from contextlib import contextmanager
from typing import Self

from ..errors import NotFoundError
from .base import StateEntry, StateIterator, WorldState

logger = logging.getLogger(__name__)


def _in_range(key: str, start_key: str, end_key: str) -> bool:
    # Keys are ordered by their UTF-8 bytes, as a ledger host orders them
    encoded = key.encode("utf-8")
    if start_key and encoded < start_key.encode("utf-8"):
        return False
    if end_key and encoded >= end_key.encode("utf-8"):
        return False
    return True


class MemoryStateIterator(StateIterator):
    """Cursor over a snapshot of the entries taken when the scan opened."""

    def __init__(self, owner: "MemoryWorldState", entries: list[StateEntry]):
        super().__init__()
        self._owner = owner
        self._entries = entries
        self._position = 0

    def _next_entry(self) -> StateEntry | None:
        if self._position >= len(self._entries):
            return None
        entry = self._entries[self._position]
        self._position += 1
        return entry

    def _release(self) -> None:
        self._entries = []
        self._owner.open_iterators -= 1


class MemoryWorldState(WorldState):
    """World state held in a plain dict."""

    def __init__(self, entries: dict[str, bytes] | None = None):
        self._entries: dict[str, bytes] = dict(entries or {})
        self.open_iterators = 0

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: str) -> bool:
        return key in self._entries

    def get_state(self, key: str) -> bytes | None:
        return self._entries.get(key)

    def put_state(self, key: str, value: bytes) -> None:
        self._check_key(key)
        self._entries[key] = bytes(value)

    def del_state(self, key: str) -> None:
        if key not in self._entries:
            raise NotFoundError(f"the key {key} does not exist", key=key)
        del self._entries[key]

    def get_state_by_range(self, start_key: str, end_key: str) -> StateIterator:
        keys = sorted(
            (key for key in self._entries if _in_range(key, start_key, end_key)),
            key=lambda key: key.encode("utf-8"),
        )
        self.open_iterators += 1
        return MemoryStateIterator(self, [StateEntry(key, self._entries[key]) for key in keys])

    @contextmanager
    def transaction(self) -> Generator[Self, None, None]:
        """
        Run one invocation against this state.

        Writes made inside the block are kept when it completes and rolled
        back when it raises.
        """
        snapshot = dict(self._entries)
        try:
            yield self
        except Exception:
            logger.debug("Invocation failed, restoring %d entries", len(snapshot))
            self._entries = snapshot
            raise

