"""Flat key-value storage strategy backed by a single file.

`FileKeyValueStore` behaves like a synchronous string-to-string store
(``get_item``/``set_item``/``remove_item``) whose whole contents live in one
file encoded by a `Serializer`. `KeyValueStorageStrategy` wraps it in the
async strategy contract and addresses records as ``<collection>/<id>``.
"""
from __future__ import annotations
import logging
import os
from pathlib import Path
from typing import Dict, Iterable, Optional

import yaml
from cryptography.fernet import InvalidToken

from modelstore.errors import MalformedRecordError
from modelstore.models import AbstractModel
from modelstore.models.registry import ModelTypeLike
from .base import DELETED, SAVED, UPDATED, StorageResponse, StorageStrategy
from .serializer import JSONSerializer, Serializer

logger = logging.getLogger(__name__)


class FileKeyValueStore:
    """String store persisted to `file_path`.

    Every call reads the file again so several stores opened on the same
    path observe each other's writes. Writes go to a temporary file that is
    renamed into place.
    """

    def __init__(self, file_path: str | Path, serializer: Optional[Serializer] = None) -> None:
        self.file_path = Path(file_path)
        self.serializer = serializer or JSONSerializer()
        if not self.file_path.parent.exists():
            os.makedirs(self.file_path.parent, exist_ok=True)

    def _read(self) -> Dict[str, str]:
        if not self.file_path.exists():
            return {}
        with open(self.file_path, "rb") as f:
            data = f.read()
        if not data:
            return {}
        logger.debug("FileKeyValueStore loaded %s (%d bytes)", self.file_path, len(data))
        try:
            items = self.serializer.load(data)
        except (ValueError, KeyError, yaml.YAMLError, InvalidToken) as e:
            raise MalformedRecordError(f"Cannot decode key-value store {self.file_path}: {e!r}") from e
        if not isinstance(items, dict):
            raise MalformedRecordError(
                f"Key-value store {self.file_path} must hold a mapping, got {type(items).__name__}"
            )
        return items

    def _write(self, items: Dict[str, str]) -> None:
        tmp = self.file_path.with_suffix(self.file_path.suffix + ".tmp")
        with open(tmp, "wb") as f:
            f.write(self.serializer.dump(items))
            f.flush()
            os.fsync(f.fileno())
        tmp.replace(self.file_path)

    def get_item(self, key: str) -> Optional[str]:
        return self._read().get(key)

    def set_item(self, key: str, value: str) -> None:
        items = self._read()
        items[key] = value
        self._write(items)

    def remove_item(self, key: str) -> None:
        items = self._read()
        if items.pop(key, None) is not None:
            self._write(items)

    def keys(self) -> Iterable[str]:
        return list(self._read().keys())

    def clear(self) -> None:
        self._write({})


class KeyValueStorageStrategy(StorageStrategy):
    def __init__(self, store: Optional[FileKeyValueStore] = None, *, file_path: str | Path | None = None,
                 serializer: Optional[Serializer] = None) -> None:
        if store is None:
            serializer = serializer or JSONSerializer()
            store = FileKeyValueStore(file_path or Path("data") / f"modelstore{serializer.extension}", serializer)
        self.store = store

    @staticmethod
    def storage_key(collection: str, key: str) -> str:
        return f"{collection}/{key}"

    async def save(self, collection: str, key: str, data: str) -> StorageResponse:
        self.store.set_item(self.storage_key(collection, key), data)
        return {"message": SAVED}

    async def get(self, model_type: ModelTypeLike, collection: str, key: str) -> Optional[AbstractModel]:
        data = self.store.get_item(self.storage_key(collection, key))
        return await self.deserialize(model_type, data)

    async def update(self, collection: str, key: str, data: str) -> StorageResponse:
        self.store.set_item(self.storage_key(collection, key), data)
        return {"message": UPDATED}

    async def delete(self, collection: str, key: str) -> StorageResponse:
        self.store.remove_item(self.storage_key(collection, key))
        return {"message": DELETED}
