"""RecordStore: unified entry point for reading and writing records."""
from __future__ import annotations

import asyncio
from collections.abc import Iterable
from typing import Any

from record_store.backends.base import Backend, R
from record_store.backends.database import DatabaseStore
from record_store.backends.file import FileStore
from record_store.config import StoreConfig, is_database_uri
from record_store.drivers import DocumentDriver, create_driver
from record_store.errors import InvalidIdError, NotSavedError, UndefinedIdError
from record_store.models import Record
from record_store.observability import get_logger

logger = get_logger(__name__)


class RecordStore:
    """Dispatches record operations to the backend selected by configuration.

    ``config.database_uri`` is read on every call: a database URI selects
    :class:`DatabaseStore`, anything else is the root directory of a
    :class:`FileStore`.
    """

    def __init__(
        self,
        config: StoreConfig | None = None,
        *,
        driver: DocumentDriver | None = None,
    ) -> None:
        self.config = config if config is not None else StoreConfig()
        self._driver = driver
        self._drivers: dict[str, DocumentDriver] = {}

    def is_database_backend(self) -> bool:
        return is_database_uri(self.config.database_uri)

    def backend(self) -> Backend:
        """Return the backend for the current configuration."""
        if self.is_database_backend():
            return DatabaseStore(self._get_driver())
        return FileStore(self.config.database_uri)

    def _get_driver(self) -> DocumentDriver:
        if self._driver is not None:
            return self._driver
        uri = self.config.database_uri
        driver = self._drivers.get(uri)
        if driver is None:
            driver = create_driver(self.config)
            self._drivers[uri] = driver
            logger.info("driver_created", uri=uri.split("@")[-1])
        return driver

    def get_folder_paths(self, record_cls: type[Record]) -> list[str]:
        """Directories of the file layout for ``record_cls``, parent first."""
        return record_cls.folder_paths(self.config.database_uri)

    async def get(self, record_cls: type[R], record_id: Any = None) -> R | None:
        """Load a record by ID. Returns None if not found."""
        if record_id is None:
            raise UndefinedIdError()
        if not isinstance(record_id, str):
            raise InvalidIdError()
        return await self.backend().get(record_cls, record_id)

    async def get_by(self, record_cls: type[R], field: str, value: Any) -> R | None:
        """Load the first record whose ``field`` equals ``value``."""
        return await self.backend().get_by(record_cls, field, value)

    async def get_many(
        self, record_cls: type[R], record_ids: Iterable[Any]
    ) -> list[R | None]:
        """Load several records concurrently, in input order.

        Missing records appear as None at their position.
        """
        return list(
            await asyncio.gather(*(self.get(record_cls, i) for i in record_ids))
        )

    async def get_all(self, record_cls: type[R]) -> list[R]:
        """Load every record of ``record_cls``."""
        return await self.backend().get_all(record_cls)

    async def save(self, record: R) -> R:
        """Persist a record, returning it for chaining."""
        return await self.backend().save(record)

    async def delete(self, record: Record) -> None:
        """Remove a record's backing storage."""
        if not self.is_saved(record):
            raise NotSavedError()
        await self.backend().delete(record)

    def is_saved(self, record: Record) -> bool:
        return self.backend().is_saved(record)

    async def close(self) -> None:
        """Close drivers created by this store."""
        drivers = list(self._drivers.values())
        self._drivers.clear()
        for driver in drivers:
            await driver.close()
