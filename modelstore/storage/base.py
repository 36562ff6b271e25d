"""Storage strategy interface definitions.

Defines the `StorageStrategy` abstract class every backend implements.
Backends persist serialized model records under a collection name and a
string key; reading a record back goes through the model registry so
callers always receive typed instances.
"""
from __future__ import annotations
from abc import ABC, abstractmethod
import json
from typing import Optional, TypedDict

from modelstore.errors import MalformedRecordError
from modelstore.models import AbstractModel, registry
from modelstore.models.registry import ModelTypeLike


class StorageResponse(TypedDict):
    message: str


SAVED = "Obj saved successfully!"
UPDATED = "Object updated successfully!"
DELETED = "Object deleted successfully!"


def parse_record(data: str) -> dict:
    """Decode stored text into a record mapping.

    Raises `MalformedRecordError` when the text is not a JSON object.
    """
    try:
        record = json.loads(data)
    except (TypeError, ValueError) as e:
        raise MalformedRecordError(f"Stored record is not valid JSON: {e}") from e
    if not isinstance(record, dict):
        raise MalformedRecordError(f"Stored record must be a JSON object, got {type(record).__name__}")
    return record


class StorageStrategy(ABC):
    """Abstract storage strategy.

    All operations are coroutines. Backends that can mint their own ids may
    additionally define ``generate_id() -> str``; the facade falls back to a
    UUID when it is absent.
    """

    @abstractmethod
    async def save(self, collection: str, key: str, data: str) -> StorageResponse:
        """Persist `data` under `collection`/`key`, overwriting any previous value."""

    @abstractmethod
    async def get(self, model_type: ModelTypeLike, collection: str, key: str) -> Optional[AbstractModel]:
        """Return the deserialized record or ``None`` when the key is absent."""

    @abstractmethod
    async def update(self, collection: str, key: str, data: str) -> StorageResponse:
        """Replace the record under `collection`/`key` (upsert)."""

    @abstractmethod
    async def delete(self, collection: str, key: str) -> StorageResponse:
        """Remove the record. Deleting an absent key is not an error."""

    async def deserialize(self, model_type: ModelTypeLike, data: Optional[str]) -> Optional[AbstractModel]:
        # None short-circuits so the factory's required-field checks never
        # run against an empty record.
        if data is None:
            return None
        return registry.build(model_type, parse_record(data))

    async def open(self) -> None:
        """Acquire backend resources ahead of the first call. Optional."""

    async def close(self) -> None:
        """Release backend resources. Optional."""
