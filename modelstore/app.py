"""Application-facing convenience wrapper around `Storage`."""
from __future__ import annotations
from typing import Any, Dict, Optional

from modelstore.models import AbstractModel, registry
from modelstore.models.registry import ModelTypeLike
from modelstore.storage import Storage, StorageResponse


class App:
    def __init__(self, storage: Optional[Storage] = None) -> None:
        self.storage = storage or Storage()

    def generate_id(self) -> str:
        return self.storage.generate_id()

    async def create(self, model_type: ModelTypeLike, state: Dict[str, Any],
                     save_to_storage: bool = False) -> AbstractModel:
        """Build a model from `state`, assigning an id when none is given.

        `state` is not modified. With `save_to_storage` the model is saved
        before it is returned.
        """
        state = dict(state)
        if not state.get("id"):
            state["id"] = self.generate_id()
        model = registry.build(model_type, state)
        if save_to_storage:
            await self.storage.save(model)
        return model

    async def get(self, model_type: ModelTypeLike, id: str) -> Optional[AbstractModel]:
        return await self.storage.get(model_type, id)

    async def update(self, model: AbstractModel, updated_by: Optional[str] = None) -> StorageResponse:
        return await self.storage.update(model, updated_by)

    async def delete(self, model_type: ModelTypeLike, id: str) -> StorageResponse:
        return await self.storage.delete(model_type, id)
