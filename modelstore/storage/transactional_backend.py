"""Transactional storage strategy on SQLAlchemy's asyncio engine.

Each registry collection is a table of ``(id, data)`` rows. The engine is
opened lazily; opening runs a schema upgrade step that creates every
missing collection table whenever the recorded schema version is behind.
Each operation runs in its own transaction.
"""
from __future__ import annotations
import asyncio
from contextlib import asynccontextmanager
import logging
from pathlib import Path
from typing import AsyncIterator, Dict, Iterable, Optional

from sqlalchemy import Column, Integer, MetaData, String, Table, Text, delete, insert, inspect, select
from sqlalchemy.engine import Connection, make_url
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncConnection, AsyncEngine, create_async_engine

from modelstore.errors import BackendError
from modelstore.models import AbstractModel, registry
from modelstore.models.registry import ModelTypeLike
from .base import DELETED, SAVED, UPDATED, StorageResponse, StorageStrategy, parse_record

logger = logging.getLogger(__name__)

SCHEMA_TABLE = "modelstore_schema"
SCHEMA_VERSION = 1


class TransactionalStorageStrategy(StorageStrategy):
    """Parameters
    - db_name: database name; with the default SQLite driver the file is
      ``<data_dir>/<db_name>.db``.
    - url: any SQLAlchemy async database URL, overrides `db_name`/`data_dir`.
    - version: schema version this strategy expects.
    - collections: collection tables to manage; defaults to every collection
      in the model registry.
    """

    def __init__(
        self,
        db_name: str = "modelstore",
        *,
        data_dir: str | Path = "data",
        url: Optional[str] = None,
        version: int = SCHEMA_VERSION,
        collections: Optional[Iterable[str]] = None,
    ) -> None:
        self.db_name = db_name
        self.url = url or f"sqlite+aiosqlite:///{Path(data_dir) / f'{db_name}.db'}"
        self.version = version
        self._metadata = MetaData()
        self._schema = Table(SCHEMA_TABLE, self._metadata, Column("version", Integer, nullable=False))
        names = registry.collections() if collections is None else tuple(collections)
        self._tables: Dict[str, Table] = {
            name: Table(
                name,
                self._metadata,
                Column("id", String, primary_key=True),
                Column("data", Text, nullable=False),
            )
            for name in names
        }
        self._opening: Optional[asyncio.Task] = None

    @property
    def collections(self) -> tuple:
        return tuple(self._tables)

    async def open(self) -> None:
        await self._engine()

    def _engine(self) -> "asyncio.Future[AsyncEngine]":
        # Concurrent first callers share one open; shield keeps a cancelled
        # caller from cancelling the open for everyone else.
        if self._opening is None:
            self._opening = asyncio.ensure_future(self._open())
        return asyncio.shield(self._opening)

    async def _open(self) -> AsyncEngine:
        url = make_url(self.url)
        logger.info("Opening transactional store %s", url.render_as_string(hide_password=True))
        try:
            if url.get_backend_name() == "sqlite" and url.database and url.database != ":memory:":
                Path(url.database).parent.mkdir(parents=True, exist_ok=True)
            engine = create_async_engine(url)
        except (SQLAlchemyError, OSError) as e:
            raise BackendError(f"Failed to open {self.db_name}: {e}", e) from e
        try:
            async with engine.begin() as conn:
                await conn.run_sync(self._upgrade)
        except (SQLAlchemyError, OSError) as e:
            await engine.dispose()
            raise BackendError(f"Failed to open {self.db_name}: {e}", e) from e
        except BackendError:
            await engine.dispose()
            raise
        return engine

    def _upgrade(self, conn: Connection) -> None:
        existing = set(inspect(conn).get_table_names())
        current = 0
        if SCHEMA_TABLE in existing:
            current = conn.execute(select(self._schema.c.version)).scalar() or 0
        if current > self.version:
            raise BackendError(
                f"{self.db_name} is at schema version {current}, newer than requested version {self.version}"
            )
        missing = [name for name in self._tables if name not in existing]
        if current == self.version and not missing:
            return
        logger.info("Upgrading %s schema %s -> %s, creating %s", self.db_name, current, self.version, missing)
        self._metadata.create_all(conn, checkfirst=True)
        conn.execute(delete(self._schema))
        conn.execute(insert(self._schema).values(version=self.version))

    def _table(self, collection: str) -> Table:
        table = self._tables.get(collection)
        if table is None:
            raise BackendError(f"No collection {collection!r} in {self.db_name}")
        return table

    @asynccontextmanager
    async def _transaction(self, collection: str) -> AsyncIterator[AsyncConnection]:
        engine = await self._engine()
        try:
            async with engine.begin() as conn:
                yield conn
        except SQLAlchemyError as e:
            raise BackendError(f"Transaction on {collection!r} aborted: {e}", e) from e

    async def _put(self, collection: str, key: str, data: str) -> None:
        table = self._table(collection)
        parse_record(data)
        async with self._transaction(collection) as conn:
            await conn.execute(delete(table).where(table.c.id == key))
            await conn.execute(insert(table).values(id=key, data=data))
        logger.debug("Stored %s/%s in %s", collection, key, self.db_name)

    async def save(self, collection: str, key: str, data: str) -> StorageResponse:
        await self._put(collection, key, data)
        return {"message": SAVED}

    async def get(self, model_type: ModelTypeLike, collection: str, key: str) -> Optional[AbstractModel]:
        table = self._table(collection)
        async with self._transaction(collection) as conn:
            result = await conn.execute(select(table.c.data).where(table.c.id == key))
            data = result.scalar_one_or_none()
        return await self.deserialize(model_type, data)

    async def update(self, collection: str, key: str, data: str) -> StorageResponse:
        await self._put(collection, key, data)
        return {"message": UPDATED}

    async def delete(self, collection: str, key: str) -> StorageResponse:
        table = self._table(collection)
        async with self._transaction(collection) as conn:
            await conn.execute(delete(table).where(table.c.id == key))
        return {"message": DELETED}

    async def close(self) -> None:
        opening, self._opening = self._opening, None
        if opening is None:
            return
        try:
            engine = await opening
        except Exception as e:
            # the failure already reached whoever awaited the open
            logger.debug("Store %s failed to open (%s); nothing to release", self.db_name, e)
            return
        await engine.dispose()
        logger.info("Closed transactional store %s", self.db_name)
