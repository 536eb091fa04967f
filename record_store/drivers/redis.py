"""Redis driver storing each document as a JSON string."""
from __future__ import annotations

import json
from typing import Any

from bson import ObjectId
from redis.asyncio import Redis

from record_store.drivers.base import Document, DocumentDriver, Model
from record_store.observability import get_logger

logger = get_logger(__name__)


def _loads(raw: bytes | str | None) -> dict[str, Any] | None:
    if raw is None:
        return None
    try:
        data = json.loads(raw)
    except (json.JSONDecodeError, UnicodeDecodeError):
        logger.warning("record_parse_failed", backend="redis")
        return None
    return data if isinstance(data, dict) else None


def _project(data: dict[str, Any], projection: dict[str, int] | None) -> dict[str, Any]:
    if not projection:
        return data
    included = {key for key, flag in projection.items() if flag}
    if included:
        included.add("_id")
        return {key: value for key, value in data.items() if key in included}
    return {key: value for key, value in data.items() if key not in projection}


class RedisDocument(Document):
    """A JSON document at ``{prefix}:{collection}:{id}``.

    Saving a stored document re-reads it and applies only the staged
    changes, so fields left out by a projection survive the update.
    """

    def __init__(
        self, model: RedisModel, data: dict[str, Any], *, stored: bool = False
    ) -> None:
        self._model = model
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

    async def save(self) -> RedisDocument:
        if not self._stored:
            self._data.setdefault("_id", str(ObjectId()))
            await self._model.write(self.id, self._data)
            self._stored = True
        elif self._changed or self._removed:
            current = await self._model.read(self.id) or {"_id": self._data["_id"]}
            current.update(self._changed)
            for key in self._removed:
                current.pop(key, None)
            await self._model.write(self.id, current)
        self._changed.clear()
        self._removed.clear()
        return self

    async def remove(self) -> None:
        await self._model.erase(self.id)

    def to_dict(self) -> dict[str, Any]:
        return dict(self._data)


class RedisModel(Model):
    """Model over the keys of one collection."""

    def __init__(self, redis_client: Redis, collection: str, prefix: str = "records") -> None:
        self._redis = redis_client
        self._collection = collection
        self._prefix = prefix

    @property
    def collection_name(self) -> str:
        return self._collection

    def _key(self, document_id: str) -> str:
        return f"{self._prefix}:{self._collection}:{document_id}"

    async def read(self, document_id: str) -> dict[str, Any] | None:
        return _loads(await self._redis.get(self._key(document_id)))

    async def write(self, document_id: str, data: dict[str, Any]) -> None:
        await self._redis.set(self._key(document_id), json.dumps(data, default=str))

    async def erase(self, document_id: str) -> None:
        await self._redis.delete(self._key(document_id))

    def new(self, data: dict[str, Any]) -> RedisDocument:
        return RedisDocument(self, data)

    async def find_by_id(self, document_id: str) -> RedisDocument | None:
        data = await self.read(document_id)
        if data is None:
            return None
        return RedisDocument(self, data, stored=True)

    async def _scan(
        self, query: dict[str, Any], projection: dict[str, int] | None
    ) -> list[RedisDocument]:
        pattern = self._key("*")
        keys = sorted([key async for key in self._redis.scan_iter(match=pattern)])
        if not keys:
            return []
        documents = []
        for raw in await self._redis.mget(keys):
            data = _loads(raw)
            if data is None:
                continue
            if all(field in data and data[field] == value for field, value in query.items()):
                documents.append(RedisDocument(self, _project(data, projection), stored=True))
        return documents

    async def find_one(
        self, query: dict[str, Any], projection: dict[str, int] | None = None
    ) -> RedisDocument | None:
        documents = await self._scan(query, projection)
        return documents[0] if documents else None

    async def find(
        self, query: dict[str, Any], projection: dict[str, int] | None = None
    ) -> list[RedisDocument]:
        return await self._scan(query, projection)


class RedisDriver(DocumentDriver):
    """Serves one RedisModel per collection under a shared key prefix."""

    def __init__(self, redis_client: Redis, prefix: str = "records") -> None:
        self._redis = redis_client
        self._prefix = prefix

    @classmethod
    def from_url(
        cls,
        url: str,
        *,
        prefix: str = "records",
        ssl_cert_reqs: str | None = None,
        **redis_kwargs: Any,
    ) -> RedisDriver:
        """Create a driver from a Redis URL.

        Supports ``redis://`` and ``rediss://`` (TLS) schemes.

        Args:
            url: Redis connection URL.
            prefix: Key prefix for Redis keys.
            ssl_cert_reqs: SSL certificate verification mode. Pass ``"none"``
                to skip certificate verification (useful for endpoints with
                self-signed certs). Defaults to ``None`` which uses the
                system default.
            **redis_kwargs: Extra keyword arguments forwarded to
                ``Redis.from_url()``, e.g. ``password``.
        """
        kwargs: dict[str, Any] = {**redis_kwargs}

        if url.startswith("rediss://") and ssl_cert_reqs == "none":
            kwargs.setdefault("ssl_cert_reqs", "none")
            kwargs.setdefault("ssl_check_hostname", False)

        client = Redis.from_url(url, **kwargs)
        return cls(client, prefix=prefix)

    def model(self, collection: str) -> RedisModel:
        return RedisModel(self._redis, collection, prefix=self._prefix)

    async def close(self) -> None:
        """Close the underlying Redis connection."""
        await self._redis.aclose()
