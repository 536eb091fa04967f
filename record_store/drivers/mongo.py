"""MongoDB driver backed by motor."""
from __future__ import annotations

from typing import Any

from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorCollection

from record_store.drivers.base import Document, DocumentDriver, Model


def _coerce_id(document_id: Any) -> Any:
    """Query ObjectId-shaped string ids as ObjectId, others as-is."""
    if isinstance(document_id, str) and ObjectId.is_valid(document_id):
        return ObjectId(document_id)
    return document_id


class MongoDocument(Document):
    """A document in a motor collection with staged field changes."""

    def __init__(
        self,
        collection: AsyncIOMotorCollection,
        data: dict[str, Any],
        *,
        stored: bool = False,
    ) -> None:
        self._collection = collection
        self._data = dict(data)
        self._stored = stored
        self._changed: dict[str, Any] = {}
        self._removed: set[str] = set()

    @property
    def id(self) -> str | None:
        document_id = self._data.get("_id")
        return None if document_id is None else str(document_id)

    def set(self, key: str, value: Any) -> None:
        self._data[key] = value
        self._changed[key] = value
        self._removed.discard(key)

    def unset(self, key: str) -> None:
        self._data.pop(key, None)
        self._changed.pop(key, None)
        self._removed.add(key)

    async def save(self) -> MongoDocument:
        if not self._stored:
            result = await self._collection.insert_one(self._data)
            self._data["_id"] = result.inserted_id
            self._stored = True
        elif self._changed or self._removed:
            update: dict[str, Any] = {}
            if self._changed:
                update["$set"] = dict(self._changed)
            if self._removed:
                update["$unset"] = {key: "" for key in self._removed}
            await self._collection.update_one({"_id": self._data["_id"]}, update)
        self._changed.clear()
        self._removed.clear()
        return self

    async def remove(self) -> None:
        await self._collection.delete_one({"_id": self._data["_id"]})

    def to_dict(self) -> dict[str, Any]:
        return dict(self._data)


class MongoModel(Model):
    """Model over one motor collection."""

    def __init__(self, collection: AsyncIOMotorCollection) -> None:
        self._collection = collection

    @property
    def collection_name(self) -> str:
        return self._collection.name

    def new(self, data: dict[str, Any]) -> MongoDocument:
        data = dict(data)
        if "_id" in data:
            data["_id"] = _coerce_id(data["_id"])
        return MongoDocument(self._collection, data)

    def _wrap(self, raw: dict[str, Any] | None) -> MongoDocument | None:
        if raw is None:
            return None
        return MongoDocument(self._collection, raw, stored=True)

    async def find_by_id(self, document_id: str) -> MongoDocument | None:
        raw = await self._collection.find_one({"_id": _coerce_id(document_id)})
        return self._wrap(raw)

    async def find_one(
        self, query: dict[str, Any], projection: dict[str, int] | None = None
    ) -> MongoDocument | None:
        raw = await self._collection.find_one(query, projection)
        return self._wrap(raw)

    async def find(
        self, query: dict[str, Any], projection: dict[str, int] | None = None
    ) -> list[MongoDocument]:
        cursor = self._collection.find(query, projection)
        raws = await cursor.to_list(length=None)
        return [MongoDocument(self._collection, raw, stored=True) for raw in raws]


class MongoDriver(DocumentDriver):
    """Serves one MongoModel per collection of a single database."""

    def __init__(self, client: AsyncIOMotorClient, database_name: str = "rss") -> None:
        self._client = client
        self._database = client.get_default_database(default=database_name)

    @classmethod
    def from_url(
        cls,
        url: str,
        *,
        database_name: str = "rss",
        **client_kwargs: Any,
    ) -> MongoDriver:
        """Create a driver from a ``mongodb://`` or ``mongodb+srv://`` URL.

        The database named in the URL path wins over ``database_name``.
        """
        client = AsyncIOMotorClient(url, **client_kwargs)
        return cls(client, database_name=database_name)

    def model(self, collection: str) -> MongoModel:
        return MongoModel(self._database[collection])

    async def close(self) -> None:
        """Close the underlying MongoDB connection."""
        self._client.close()
