"""Record base class and serialization helpers."""
from __future__ import annotations

import inspect
import json
import os
from abc import ABC, abstractmethod
from collections.abc import Mapping
from typing import Any, ClassVar


class _Absent:
    """Marks a serialized field that must not be persisted."""

    _instance: _Absent | None = None

    def __new__(cls) -> _Absent:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "ABSENT"


ABSENT: Any = _Absent()


def strip_absent(mapping: Mapping[str, Any]) -> dict[str, Any]:
    """Return a copy of ``mapping`` without ABSENT values."""
    return {key: value for key, value in mapping.items() if value is not ABSENT}


def resolve_object(obj: Mapping[str, Any] | None) -> Any:
    """Return ABSENT for an empty (or missing) mapping, else the mapping."""
    if not obj:
        return ABSENT
    return obj


def to_plain(mapping: Mapping[str, Any]) -> dict[str, Any]:
    """Normalize backend values (ObjectId, datetime, ...) to plain JSON data."""
    return json.loads(json.dumps(mapping, default=str))


class Record(ABC):
    """A persisted entity.

    Subclasses name their ``collection`` (database collection and directory
    name) and implement ``to_object``. Reads and writes go through
    :class:`record_store.store.RecordStore`.
    """

    collection: ClassVar[str]

    # Fixed read projection for database lookups
    find_projection: ClassVar[dict[str, int]] = {"__v": 0}

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        if inspect.isabstract(cls):
            return
        collection = getattr(cls, "collection", None)
        if not isinstance(collection, str) or not collection:
            raise TypeError(f"{cls.__name__} must define a collection name")

    def __init__(self, data: Any = None, document: Any = None) -> None:
        self.data = {} if data is None else data
        self.document = document
        record_id = self.data.get("_id") if isinstance(self.data, Mapping) else None
        self.id: str | None = None if record_id is None else str(record_id)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(id={self.id!r})"

    @abstractmethod
    def to_object(self) -> dict[str, Any]:
        """Return the mapping to persist. Use ABSENT for fields to omit."""

    def get_field(self, name: str) -> Any:
        if isinstance(self.data, Mapping):
            return self.data.get(name)
        return None

    @classmethod
    def folder_paths(cls, root: str) -> list[str]:
        """Directories holding this collection, parent before child."""
        return [root, os.path.join(root, cls.collection)]
