"""Storage strategies for modelstore.

The set of backends is closed: `StorageBackendKind` enumerates it and
`create_strategy` builds one of them by kind.
"""
from __future__ import annotations
from enum import Enum
from pathlib import Path
from typing import Optional, Union

from .base import StorageResponse, StorageStrategy
from .memory_backend import InMemoryStorageStrategy
from .key_value_backend import FileKeyValueStore, KeyValueStorageStrategy
from .transactional_backend import TransactionalStorageStrategy
from .serializer import get_serializer
from .facade import Storage


class StorageBackendKind(str, Enum):
    MEMORY = "memory"
    KEY_VALUE = "key_value"
    TRANSACTIONAL = "transactional"


def create_strategy(
    backend: Union[StorageBackendKind, str] = StorageBackendKind.MEMORY,
    *,
    db_name: str = "modelstore",
    data_dir: str | Path = "data",
    serializer: str = "json",
    password: Optional[str] = None,
    key: Optional[bytes] = None,
    database_url: Optional[str] = None,
    schema_version: Optional[int] = None,
) -> StorageStrategy:
    """Build a storage strategy.

    `serializer`, `password` and `key` only apply to the key-value backend;
    `database_url` and `schema_version` only to the transactional one.
    """
    kind = StorageBackendKind(backend)
    if kind is StorageBackendKind.MEMORY:
        return InMemoryStorageStrategy()
    if kind is StorageBackendKind.KEY_VALUE:
        ser = get_serializer(serializer, password=password, key=key)
        return KeyValueStorageStrategy(FileKeyValueStore(Path(data_dir) / f"{db_name}{ser.extension}", ser))
    if kind is StorageBackendKind.TRANSACTIONAL:
        options = {} if schema_version is None else {"version": schema_version}
        return TransactionalStorageStrategy(db_name, data_dir=data_dir, url=database_url, **options)
    raise ValueError(f"Unknown storage backend: {backend!r}")


__all__ = [
    "StorageResponse",
    "StorageStrategy",
    "StorageBackendKind",
    "InMemoryStorageStrategy",
    "FileKeyValueStore",
    "KeyValueStorageStrategy",
    "TransactionalStorageStrategy",
    "Storage",
    "create_strategy",
    "get_serializer",
]
