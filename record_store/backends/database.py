"""Document database implementation of Backend."""
from __future__ import annotations

from typing import Any

from record_store.backends.base import Backend, R
from record_store.drivers.base import Document, DocumentDriver, Model
from record_store.errors import NotSavedError
from record_store.models import ABSENT, Record, strip_absent, to_plain
from record_store.observability import get_logger

logger = get_logger(__name__)


class DatabaseStore(Backend):
    """Reads and writes records through a DocumentDriver.

    A record loaded or saved here keeps its live ``Document`` in
    ``record.document``; later saves apply field updates to that handle.
    """

    def __init__(self, driver: DocumentDriver) -> None:
        self._driver = driver

    @property
    def driver(self) -> DocumentDriver:
        return self._driver

    def model(self, record_cls: type[Record]) -> Model:
        return self._driver.model(record_cls.collection)

    @staticmethod
    def _wrap(record_cls: type[R], document: Document) -> R:
        return record_cls(to_plain(document.to_dict()), document=document)

    async def get(self, record_cls: type[R], record_id: str) -> R | None:
        document = await self.model(record_cls).find_by_id(record_id)
        if document is None:
            return None
        return self._wrap(record_cls, document)

    async def get_by(self, record_cls: type[R], field: str, value: Any) -> R | None:
        document = await self.model(record_cls).find_one(
            {field: value}, record_cls.find_projection
        )
        if document is None:
            return None
        return self._wrap(record_cls, document)

    async def get_all(self, record_cls: type[R]) -> list[R]:
        documents = await self.model(record_cls).find({}, record_cls.find_projection)
        return [self._wrap(record_cls, document) for document in documents]

    async def save(self, record: R) -> R:
        if not self.is_saved(record):
            payload = strip_absent(record.to_object())
            document = await self.model(type(record)).new(payload).save()
            record.id = document.id
            record.document = document
        else:
            document = record.document
            for key, value in record.to_object().items():
                if key == "_id":
                    continue
                if value is ABSENT:
                    document.unset(key)
                else:
                    document.set(key, value)
            await document.save()
            record.data = to_plain(document.to_dict())
        logger.debug(
            "record_saved",
            backend="database",
            collection=record.collection,
            record_id=record.id,
        )
        return record

    async def delete(self, record: Record) -> None:
        if not self.is_saved(record):
            raise NotSavedError()
        await record.document.remove()
        logger.debug(
            "record_deleted",
            backend="database",
            collection=record.collection,
            record_id=record.id,
        )

    def is_saved(self, record: Record) -> bool:
        return record.id is not None and record.document is not None
