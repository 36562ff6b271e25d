"""modelstore: typed domain models over interchangeable storage backends."""

from modelstore.errors import (
    BackendError,
    MalformedRecordError,
    ModelStoreError,
    ModelValidationError,
    UnknownModelTypeError,
)
from modelstore.models import AbstractModel, ModelType, User
from modelstore.storage import (
    InMemoryStorageStrategy,
    KeyValueStorageStrategy,
    Storage,
    StorageBackendKind,
    StorageStrategy,
    TransactionalStorageStrategy,
    create_strategy,
)
from modelstore.app import App

__all__ = [
    "App",
    "AbstractModel",
    "ModelType",
    "User",
    "Storage",
    "StorageStrategy",
    "StorageBackendKind",
    "InMemoryStorageStrategy",
    "KeyValueStorageStrategy",
    "TransactionalStorageStrategy",
    "create_strategy",
    "BackendError",
    "MalformedRecordError",
    "ModelStoreError",
    "ModelValidationError",
    "UnknownModelTypeError",
]
