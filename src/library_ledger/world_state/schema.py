"""
SQLAlchemy schema backing the world state.

The world state is a flat keyspace, so it is one table of key/value rows.
Books and records live side by side in it, keyed by their own identifiers.
Keys are TEXT and SQLite compares TEXT byte-wise by default, which gives
range scans the same key order a ledger host uses.
"""

from sqlalchemy import CheckConstraint, Column, LargeBinary, String
from sqlalchemy.orm import declarative_base

Base = declarative_base()


class WorldStateEntry(Base):
    """One world-state key and its encoded entity."""

    __tablename__ = "world_state"

    key = Column(String(256), primary_key=True)
    value = Column(LargeBinary, nullable=False)

    __table_args__ = (CheckConstraint("length(key) > 0", name="check_key_not_empty"),)

    def __repr__(self) -> str:
        return f"<WorldStateEntry key={self.key!r} bytes={len(self.value or b'')}>"
