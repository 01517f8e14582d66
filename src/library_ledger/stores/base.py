"""
Entity store base for the library ledger.

Stores are the only code that touches world-state bytes for a single entity
type. Workflows and the contract deal in Book and Record models and never see
the codec or raw keys. The base class supplies the primitives every entity
store shares: read, existence check, overwrite and create-if-absent.
"""

import logging
from abc import ABC, abstractmethod
from typing import Generic, TypeVar

from pydantic import BaseModel

from ..errors import AlreadyExistsError, NotFoundError, StorageError
from ..world_state import WorldState

logger = logging.getLogger(__name__)

EntityT = TypeVar("EntityT", bound=BaseModel)


class EntityStore(ABC, Generic[EntityT]):
    """
    CRUD primitives for one entity type keyed by its identifier.

    Subclasses name the entity (for error messages) and provide its codec
    and key. Each public call performs at most one world-state write.
    """

    #: Used in messages such as "the book book1 does not exist"
    entity_label: str

    def __init__(self, world_state: WorldState):
        self.world_state = world_state

    @abstractmethod
    def encode(self, entity: EntityT) -> bytes:
        """Serialize the entity to its stored bytes."""

    @abstractmethod
    def decode(self, key: str, raw: bytes) -> EntityT:
        """Deserialize stored bytes, raising DecodeError if malformed."""

    @abstractmethod
    def key_of(self, entity: EntityT) -> str:
        """Return the world-state key of the entity."""

    def _read(self, key: str) -> bytes | None:
        try:
            return self.world_state.get_state(key)
        except StorageError:
            raise
        except Exception as e:
            raise StorageError(f"failed to read from world state: {e!s}", key=key) from e

    def _write(self, key: str, raw: bytes) -> None:
        try:
            self.world_state.put_state(key, raw)
        except StorageError:
            raise
        except Exception as e:
            raise StorageError(f"failed to put to world state: {e!s}", key=key) from e

    def get(self, key: str) -> EntityT:
        """
        Read and decode the entity stored under ``key``.

        Raises:
            NotFoundError: If the key is absent
            DecodeError: If the stored bytes are not this entity
            StorageError: On read failure
        """
        raw = self._read(key)
        if raw is None:
            raise NotFoundError(f"the {self.entity_label} {key} does not exist", key=key)
        return self.decode(key, raw)

    def exists(self, key: str) -> bool:
        return self._read(key) is not None

    def put(self, entity: EntityT) -> EntityT:
        """Persist the entity, replacing any stored value."""
        key = self.key_of(entity)
        self._write(key, self.encode(entity))
        logger.debug("Stored %s %s", self.entity_label, key)
        return entity

    def create(self, entity: EntityT) -> EntityT:
        """
        Persist a new entity.

        Raises:
            AlreadyExistsError: If an entity is already stored under its key
        """
        key = self.key_of(entity)
        if self.exists(key):
            raise AlreadyExistsError(f"the {self.entity_label} {key} already exists", key=key)
        return self.put(entity)
