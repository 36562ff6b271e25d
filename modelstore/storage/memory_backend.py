"""Simple memory-backed storage strategy

This backend stores serialized records in memory as a data structure
`[<collection>][<key>]`. Nothing survives the process.
"""
from typing import Dict, Optional

from modelstore.models import AbstractModel
from modelstore.models.registry import ModelTypeLike
from .base import DELETED, SAVED, UPDATED, StorageResponse, StorageStrategy


class InMemoryStorageStrategy(StorageStrategy):
    def __init__(self) -> None:
        self._store: Dict[str, Dict[str, str]] = {}

    def _put(self, collection: str, key: str, data: str) -> None:
        if collection not in self._store:
            self._store[collection] = {}
        self._store[collection][key] = data

    async def save(self, collection: str, key: str, data: str) -> StorageResponse:
        self._put(collection, key, data)
        return {"message": SAVED}

    async def get(self, model_type: ModelTypeLike, collection: str, key: str) -> Optional[AbstractModel]:
        data = self._store.get(collection, {}).get(key)
        return await self.deserialize(model_type, data)

    async def update(self, collection: str, key: str, data: str) -> StorageResponse:
        self._put(collection, key, data)
        return {"message": UPDATED}

    async def delete(self, collection: str, key: str) -> StorageResponse:
        self._store.get(collection, {}).pop(key, None)
        return {"message": DELETED}

