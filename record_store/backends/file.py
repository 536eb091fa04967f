"""Flat-file JSON implementation of Backend.

Structure on disk:
  <root>/
    <collection>/<id>.json
"""
from __future__ import annotations

import asyncio
import json
import os
import uuid
from pathlib import Path
from typing import Any

from bson import ObjectId

from record_store.backends.base import Backend, R
from record_store.errors import NotSavedError
from record_store.models import Record, strip_absent
from record_store.observability import get_logger

logger = get_logger(__name__)

JSON_SUFFIX = ".json"
TEMP_SUFFIX = ".tmp"


def _read(path: Path) -> Any | None:
    try:
        with open(path, "r", encoding="utf-8") as f:
            return json.load(f)
    except FileNotFoundError:
        return None
    except (json.JSONDecodeError, UnicodeDecodeError):
        logger.warning("record_parse_failed", path=str(path))
        return None


def _write(path: Path, data: dict[str, Any]) -> None:
    # Unique per write so concurrent saves of one id never share a temp file.
    tmp = path.with_name(f"{path.name}.{uuid.uuid4().hex}{TEMP_SUFFIX}")
    try:
        with open(tmp, "w", encoding="utf-8") as f:
            json.dump(data, f, ensure_ascii=False, indent=2)
        os.replace(tmp, path)
    except BaseException:
        tmp.unlink(missing_ok=True)
        raise


def _list(directory: Path) -> list[str] | None:
    try:
        return sorted(
            entry.name
            for entry in directory.iterdir()
            if entry.is_file() and not entry.name.endswith(TEMP_SUFFIX)
        )
    except FileNotFoundError:
        return None


class FileStore(Backend):
    """Stores each record as a JSON file named after its id."""

    def __init__(self, root: str | os.PathLike[str]) -> None:
        self._root = os.fspath(root)

    @property
    def root(self) -> str:
        return self._root

    def folder_paths(self, record_cls: type[Record]) -> list[str]:
        return record_cls.folder_paths(self._root)

    def _directory(self, record_cls: type[Record]) -> Path:
        return Path(self.folder_paths(record_cls)[-1])

    def _path(self, record_cls: type[Record], record_id: str) -> Path:
        return self._directory(record_cls) / f"{record_id}{JSON_SUFFIX}"

    async def get(self, record_cls: type[R], record_id: str) -> R | None:
        data = await asyncio.to_thread(_read, self._path(record_cls, record_id))
        if not isinstance(data, dict):
            return None
        return record_cls(data)

    async def get_by(self, record_cls: type[R], field: str, value: Any) -> R | None:
        directory = self._directory(record_cls)
        names = await asyncio.to_thread(_list, directory)
        if names is None:
            return None
        for name in names:
            data = await asyncio.to_thread(_read, directory / name)
            if isinstance(data, dict) and field in data and data[field] == value:
                return record_cls(data)
        return None

    async def get_all(self, record_cls: type[R]) -> list[R]:
        """Load every record in the collection directory.

        Entries that vanish or fail to parse between listing and reading are
        left out, so the result never contains None.
        """
        names = await asyncio.to_thread(_list, self._directory(record_cls))
        if names is None:
            return []
        ids = [name[: -len(JSON_SUFFIX)] for name in names if name.endswith(JSON_SUFFIX)]
        records = await asyncio.gather(*(self.get(record_cls, i) for i in ids))
        return [record for record in records if record is not None]

    async def save(self, record: R) -> R:
        for folder in self.folder_paths(type(record)):
            await asyncio.to_thread(self._ensure_directory, folder)
        payload = strip_absent(record.to_object())
        if not self.is_saved(record):
            record.id = str(ObjectId())
        payload["_id"] = record.id
        path = self._path(type(record), record.id)
        await asyncio.to_thread(_write, path, payload)
        record.data = payload
        logger.debug(
            "record_saved",
            backend="file",
            collection=record.collection,
            record_id=record.id,
        )
        return record

    async def delete(self, record: Record) -> None:
        if not self.is_saved(record):
            raise NotSavedError()
        path = self._path(type(record), record.id)
        await asyncio.to_thread(path.unlink, missing_ok=True)
        logger.debug(
            "record_deleted",
            backend="file",
            collection=record.collection,
            record_id=record.id,
        )

    def is_saved(self, record: Record) -> bool:
        return record.id is not None

    @staticmethod
    def _ensure_directory(folder: str) -> None:
        path = Path(folder)
        if path.is_dir():
            return
        path.mkdir(parents=True, exist_ok=True)
        logger.info("directory_created", path=folder)
