"""
Timestamp value type for ledger records.

Record start and end times are persisted as text and compared across
independent executions, so they need a representation that is:

1. Explicit about "no value yet" (an open loan has no end time)
2. Totally ordered, with the unset value sorting first
3. Rendered the same way every time it is written

The unset sentinel is written as ``0001-01-01T00:00:00Z`` so stored values
stay readable by peers that use that zero time to mean "unset".
"""

import re
from datetime import UTC, datetime
from functools import total_ordering
from typing import Any

from pydantic import GetCoreSchemaHandler, GetJsonSchemaHandler
from pydantic.json_schema import JsonSchemaValue
from pydantic_core import core_schema

UNSET_TEXT = "0001-01-01T00:00:00Z"

_ISO_PATTERN = re.compile(
    r"^(?P<date>\d{4}-\d{2}-\d{2})T(?P<time>\d{2}:\d{2}:\d{2})"
    r"(?:\.(?P<fraction>\d{1,9}))?"
    r"(?P<offset>Z|[+-]\d{2}:\d{2})$"
)


@total_ordering
class Timestamp:
    """
    A UTC instant with microsecond precision, or the explicit unset value.

    Instances are immutable and hashable. Use ``Timestamp.unset()`` rather
    than ``None`` wherever a record has no end time.
    """

    __slots__ = ("_value",)

    def __init__(self, value: datetime | None = None):
        if value is not None:
            if value.tzinfo is None:
                value = value.replace(tzinfo=UTC)
            else:
                try:
                    value = value.astimezone(UTC)
                except OverflowError as e:
                    raise ValueError(f"{value.isoformat()} is out of range in UTC") from e
            # The zero instant is how the sentinel is written, so it reads back unset
            if value == _ZERO_INSTANT:
                value = None
        object.__setattr__(self, "_value", value)

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError("Timestamp is immutable")

    def __reduce__(self):
        return (Timestamp.parse, (self.isoformat(),))

    # === Constructors ===

    @classmethod
    def unset(cls) -> "Timestamp":
        """Return the sentinel for a missing timestamp."""
        return _UNSET

    @classmethod
    def now(cls) -> "Timestamp":
        return cls(datetime.now(UTC))

    @classmethod
    def parse(cls, text: str) -> "Timestamp":
        """
        Parse the textual form written by ``isoformat``.

        Accepts a ``Z`` or ``+HH:MM`` offset and up to nine fractional digits;
        digits beyond microseconds are truncated.

        Raises:
            ValueError: If the text is not an RFC 3339 timestamp
        """
        match = _ISO_PATTERN.match(text)
        if match is None:
            raise ValueError(f"invalid timestamp {text!r}")
        if text == UNSET_TEXT:
            return _UNSET

        fraction = (match["fraction"] or "").ljust(6, "0")[:6]
        offset = "+00:00" if match["offset"] == "Z" else match["offset"]
        candidate = f"{match['date']}T{match['time']}.{fraction}{offset}"
        try:
            parsed = cls(datetime.fromisoformat(candidate))
        except (ValueError, OverflowError) as e:
            raise ValueError(f"invalid timestamp {text!r}: {e}") from e

        return _UNSET if parsed._value is None else parsed

    # === Accessors ===

    @property
    def is_set(self) -> bool:
        return self._value is not None

    @property
    def value(self) -> datetime:
        """The wrapped UTC datetime.

        Raises:
            ValueError: If the timestamp is unset
        """
        if self._value is None:
            raise ValueError("timestamp is unset")
        return self._value

    def isoformat(self) -> str:
        """Render as ``YYYY-MM-DDTHH:MM:SS[.fraction]Z`` in UTC."""
        v = self._value
        if v is None:
            return UNSET_TEXT
        text = (
            f"{v.year:04d}-{v.month:02d}-{v.day:02d}"
            f"T{v.hour:02d}:{v.minute:02d}:{v.second:02d}"
        )
        if v.microsecond:
            text += "." + f"{v.microsecond:06d}".rstrip("0")
        return text + "Z"

    # === Ordering ===

    def _sort_key(self) -> tuple[int, datetime | None]:
        return (0, None) if self._value is None else (1, self._value)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Timestamp):
            return NotImplemented
        return self._value == other._value

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Timestamp):
            return NotImplemented
        if self._value is None or other._value is None:
            return self._value is None and other._value is not None
        return self._value < other._value

    def __hash__(self) -> int:
        return hash(self._sort_key())

    def __repr__(self) -> str:
        if self._value is None:
            return "Timestamp.unset()"
        return f"Timestamp({self.isoformat()!r})"

    def __str__(self) -> str:
        return self.isoformat()

    # === Pydantic integration ===

    @classmethod
    def _coerce(cls, value: Any) -> "Timestamp":
        if isinstance(value, Timestamp):
            return value
        if value is None:
            return _UNSET
        if isinstance(value, datetime):
            return cls(value)
        if isinstance(value, str):
            return cls.parse(value)
        raise ValueError(f"cannot interpret {type(value).__name__} as a timestamp")

    @classmethod
    def __get_pydantic_core_schema__(
        cls, source_type: Any, handler: GetCoreSchemaHandler
    ) -> core_schema.CoreSchema:
        return core_schema.no_info_plain_validator_function(
            cls._coerce,
            serialization=core_schema.plain_serializer_function_ser_schema(
                lambda ts: ts.isoformat(), when_used="json"
            ),
        )

    @classmethod
    def __get_pydantic_json_schema__(
        cls, schema: core_schema.CoreSchema, handler: GetJsonSchemaHandler
    ) -> JsonSchemaValue:
        return {
            "type": "string",
            "format": "date-time",
            "examples": ["2024-03-01T09:30:00Z"],
        }


_UNSET = object.__new__(Timestamp)
object.__setattr__(_UNSET, "_value", None)

_ZERO_INSTANT = datetime(1, 1, 1, tzinfo=UTC)
