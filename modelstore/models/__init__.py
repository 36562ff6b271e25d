"""Domain models and the registry that maps type tags to them."""

from .base import AbstractModel
from .user import User
from .registry import (
    REGISTRY,
    ModelType,
    RegistryEntry,
    build,
    collection_for,
    collections,
    factory_for,
    resolve,
    type_tag_of,
)

__all__ = [
    "AbstractModel",
    "User",
    "REGISTRY",
    "ModelType",
    "RegistryEntry",
    "build",
    "collection_for",
    "collections",
    "factory_for",
    "resolve",
    "type_tag_of",
]
