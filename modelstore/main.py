"""Command line demo: create, read, update and delete a User.

    python -m modelstore --backend transactional --data-dir /tmp/demo
"""
from __future__ import annotations
import argparse
import asyncio
import logging
from pathlib import Path
from typing import Iterable, Optional

from modelstore.app import App
from modelstore.config import create_strategy_from_config, load_config
from modelstore.logging_config import configure_logging
from modelstore.storage import Storage, StorageBackendKind

logger = logging.getLogger(__name__)


def get_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="modelstore-demo", description=__doc__.splitlines()[0])
    p.add_argument("--config", type=Path, default=None, help="YAML storage config file")
    p.add_argument("--backend", choices=[k.value for k in StorageBackendKind], default=None,
                   help="Override the configured backend")
    p.add_argument("--data-dir", default=None, help="Override the configured data directory")
    return p


async def run_demo(app: App) -> None:
    user = await app.create("User", {"name": "John Doe", "email": "john.doe@example.com"}, save_to_storage=True)
    logger.info("User created: %s", user.serialize())

    retrieved = await app.get("User", user.id)
    logger.info("User retrieved: %s", retrieved.serialize() if retrieved else None)

    if retrieved is not None:
        retrieved.name = "Jane Doe"
        await app.update(retrieved)
        logger.info("User updated: %s", retrieved.serialize())

    updated = await app.get("User", user.id)
    logger.info("Updated user retrieved: %s", updated.serialize() if updated else None)

    await app.delete("User", user.id)
    logger.info("User deleted")

    deleted = await app.get("User", user.id)
    logger.info("Deleted user retrieved: %s", deleted)


async def _main(config_path: Optional[Path], backend: Optional[str], data_dir: Optional[str]) -> None:
    config = load_config(config_path)
    if backend:
        config.backend = backend
    if data_dir:
        config.data_dir = data_dir
    storage = Storage()
    await storage.set_strategy(create_strategy_from_config(config))
    try:
        await run_demo(App(storage))
    finally:
        await storage.close()


def main(argv: Optional[Iterable[str]] = None) -> int:
    args = get_parser().parse_args(list(argv) if argv is not None else None)
    configure_logging(args.config)
    logging.getLogger("modelstore").setLevel(logging.INFO)
    asyncio.run(_main(args.config, args.backend, args.data_dir))
    return 0
