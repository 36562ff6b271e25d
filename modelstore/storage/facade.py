"""Backend-agnostic CRUD over the active storage strategy.

`Storage` resolves collections through the model registry, serializes
model instances and delegates to exactly one active `StorageStrategy`.
"""
from __future__ import annotations
import logging
import uuid
from typing import Optional

from modelstore.models import AbstractModel, registry
from modelstore.models.registry import ModelTypeLike
from .base import StorageResponse, StorageStrategy
from .memory_backend import InMemoryStorageStrategy

logger = logging.getLogger(__name__)


class Storage:
    def __init__(self, strategy: Optional[StorageStrategy] = None) -> None:
        self._strategy: StorageStrategy = strategy or InMemoryStorageStrategy()

    @property
    def strategy(self) -> StorageStrategy:
        return self._strategy

    async def save(self, model: AbstractModel) -> StorageResponse:
        collection = registry.collection_for(registry.type_tag_of(model))
        logger.debug("Saving %s/%s", collection, model.id)
        return await self._strategy.save(collection, model.id, model.serialize())

    async def get(self, model_type: ModelTypeLike, id: str) -> Optional[AbstractModel]:
        collection = registry.collection_for(model_type)
        return await self._strategy.get(model_type, collection, id)

    async def update(self, model: AbstractModel, updated_by: Optional[str] = None) -> StorageResponse:
        """Stamp update metadata on `model` and persist it.

        Writes are upserts: updating an id that was never saved stores it.
        The stamp is copied onto `model` only once the write succeeded.
        """
        collection = registry.collection_for(registry.type_tag_of(model))
        stamped = model.model_copy().touch(updated_by)
        logger.debug("Updating %s/%s", collection, model.id)
        response = await self._strategy.update(collection, model.id, stamped.serialize())
        model.updated_on = stamped.updated_on
        model.updated_by = stamped.updated_by
        return response

    async def delete(self, model_type: ModelTypeLike, id: str) -> StorageResponse:
        collection = registry.collection_for(model_type)
        logger.debug("Deleting %s/%s", collection, id)
        return await self._strategy.delete(collection, id)

    async def set_strategy(self, strategy: StorageStrategy) -> None:
        """Make `strategy` the active backend.

        The new strategy is opened first (a transactional store establishes
        its schema here); if that fails the current strategy stays active.
        The previous strategy is closed once the swap is done.
        """
        if strategy is self._strategy:
            return
        await strategy.open()
        previous, self._strategy = self._strategy, strategy
        logger.info("Storage strategy switched from %s to %s",
                    type(previous).__name__, type(strategy).__name__)
        await previous.close()

    def generate_id(self) -> str:
        generate = getattr(self._strategy, "generate_id", None)
        if callable(generate):
            return generate()
        return str(uuid.uuid4())

    async def close(self) -> None:
        await self._strategy.close()
