"""Storage configuration loaded from a YAML file.

Example ``data/config/storage.yml``::

    backend: transactional
    db_name: modelstore
    data_dir: data
    log_level: INFO
"""
from __future__ import annotations
from dataclasses import dataclass, fields
import logging
from pathlib import Path
from typing import Optional

import yaml

from modelstore.storage import StorageStrategy, create_strategy

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path("data/config/storage.yml")


@dataclass
class StorageConfig:
    backend: str = "memory"
    db_name: str = "modelstore"
    data_dir: str = "data"
    serializer: str = "json"
    password: Optional[str] = None
    key: Optional[str] = None
    database_url: Optional[str] = None
    schema_version: Optional[int] = None
    log_level: str = "WARNING"


def load_config(path: Optional[Path] = None) -> StorageConfig:
    """Read a `StorageConfig` from YAML. A missing file yields the defaults."""
    cfg_path = Path(path) if path is not None else DEFAULT_CONFIG_PATH
    if not cfg_path.exists():
        logger.debug("No storage config at %s; using defaults", cfg_path)
        return StorageConfig()
    with cfg_path.open("r", encoding="utf-8") as f:
        raw = yaml.safe_load(f) or {}
    if not isinstance(raw, dict):
        raise ValueError(f"Storage config {cfg_path} must be a mapping")
    known = {f.name for f in fields(StorageConfig)}
    unknown = sorted(set(raw) - known)
    if unknown:
        logger.warning("Ignoring unknown storage config keys in %s: %s", cfg_path, ", ".join(unknown))
    return StorageConfig(**{k: v for k, v in raw.items() if k in known})


def create_strategy_from_config(config: StorageConfig) -> StorageStrategy:
    return create_strategy(
        config.backend,
        db_name=config.db_name,
        data_dir=config.data_dir,
        serializer=config.serializer,
        password=config.password,
        key=config.key.encode("ascii") if config.key else None,
        database_url=config.database_url,
        schema_version=config.schema_version,
    )
