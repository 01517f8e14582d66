"""
Entity codec for world-state values.

Books and records are stored as compact UTF-8 JSON objects whose keys appear
in the entity's declared field order:

    Book:   {"BookID", "Name", "Author", "Valid", "Price", "Owner"}
    Record: {"RecordID", "BookID", "StartTime", "EndTime", "Borrower"}

Independent executions of the same operation must write byte-identical
values, so encoding never depends on dict ordering, whitespace settings or
locale. Decoding is strict: malformed bytes raise DecodeError naming the key.
"""

import json
from typing import TypeVar

from pydantic import ValidationError

from .errors import DecodeError
from .models import Book, Record

EntityT = TypeVar("EntityT", Book, Record)

RECORD_MARKER = "RecordID"

# Peers escape these inside JSON strings; they never occur outside one
_ESCAPES = (
    (b"<", b"\\u003c"),
    (b">", b"\\u003e"),
    (b"&", b"\\u0026"),
    ("\u2028".encode(), b"\\u2028"),
    ("\u2029".encode(), b"\\u2029"),
)


def _escape(raw: bytes) -> bytes:
    for char, escaped in _ESCAPES:
        raw = raw.replace(char, escaped)
    return raw


def encode_book(book: Book) -> bytes:
    return _escape(book.model_dump_json(by_alias=True).encode("utf-8"))


def encode_record(record: Record) -> bytes:
    return _escape(record.model_dump_json(by_alias=True).encode("utf-8"))


def decode_book(key: str, raw: bytes) -> Book:
    """Decode the value stored under ``key`` as a Book.

    Raises:
        DecodeError: If the bytes are not a valid book
    """
    return _decode(Book, key, _load_object(key, raw))


def decode_record(key: str, raw: bytes) -> Record:
    """Decode the value stored under ``key`` as a Record.

    Raises:
        DecodeError: If the bytes are not a valid record
    """
    return _decode(Record, key, _load_object(key, raw))


def decode_entity(key: str, raw: bytes) -> Book | Record:
    """
    Decode a value whose entity type is not known in advance.

    Books and records share one keyspace, so a full scan sees both. A value
    carrying a ``RecordID`` field is a record; any other value must be a book.
    """
    payload = _load_object(key, raw)
    if RECORD_MARKER in payload:
        return _decode(Record, key, payload)
    return _decode(Book, key, payload)


def _load_object(key: str, raw: bytes) -> dict:
    try:
        payload = json.loads(raw)
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise DecodeError(f"value of {key} is not valid JSON: {e}", key=key) from e
    if not isinstance(payload, dict):
        raise DecodeError(f"value of {key} is not a JSON object", key=key)
    return payload


def _decode(model: type[EntityT], key: str, payload: dict) -> EntityT:
    try:
        return model.model_validate(payload)
    except ValidationError as e:
        raise DecodeError(
            f"value of {key} is not a valid {model.__name__.lower()}: {e}", key=key
        ) from e
