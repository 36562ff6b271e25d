"""Registry of storable model types.

Maps each type tag to the class that rehydrates it and the collection its
records live in. Populated once at import and read-only afterwards.
"""
from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Any, Callable, Mapping, Tuple, Type, Union

from modelstore.errors import UnknownModelTypeError
from .base import AbstractModel
from .user import User


class ModelType(str, Enum):
    USER = "User"


ModelTypeLike = Union[ModelType, str]


@dataclass(frozen=True)
class RegistryEntry:
    model_type: ModelType
    model_class: Type[AbstractModel]
    collection: str

    @property
    def factory(self) -> Callable[[Mapping[str, Any]], AbstractModel]:
        return self.model_class.from_record


REGISTRY: Mapping[ModelType, RegistryEntry] = MappingProxyType({
    ModelType.USER: RegistryEntry(ModelType.USER, User, "users"),
})

_BY_CLASS: Mapping[type, RegistryEntry] = MappingProxyType(
    {entry.model_class: entry for entry in REGISTRY.values()}
)

assert len({e.collection for e in REGISTRY.values()}) == len(REGISTRY), "collection names must be unique"
assert all(e.model_class.type_tag == e.model_type.value for e in REGISTRY.values())


def resolve(model_type: ModelTypeLike) -> RegistryEntry:
    """Return the registry entry for `model_type`.

    Raises `UnknownModelTypeError` for tags that are not registered.
    """
    try:
        return REGISTRY[ModelType(model_type)]
    except (ValueError, KeyError):
        raise UnknownModelTypeError(model_type) from None


def collection_for(model_type: ModelTypeLike) -> str:
    return resolve(model_type).collection


def factory_for(model_type: ModelTypeLike) -> Callable[[Mapping[str, Any]], AbstractModel]:
    return resolve(model_type).factory


def build(model_type: ModelTypeLike, record: Mapping[str, Any]) -> AbstractModel:
    return resolve(model_type).factory(record)


def type_tag_of(instance: AbstractModel) -> ModelType:
    entry = _BY_CLASS.get(type(instance))
    if entry is None:
        raise UnknownModelTypeError(type(instance).__name__)
    return entry.model_type


def collections() -> Tuple[str, ...]:
    return tuple(entry.collection for entry in REGISTRY.values())
