"""Abstract base class for record backends."""
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, TypeVar

from record_store.models import Record

R = TypeVar("R", bound=Record)


class Backend(ABC):
    """Abstract interface for persisting records."""

    @abstractmethod
    async def get(self, record_cls: type[R], record_id: str) -> R | None:
        """Load a record by ID. Returns None if not found."""

    @abstractmethod
    async def get_by(self, record_cls: type[R], field: str, value: Any) -> R | None:
        """Load the first record whose ``field`` equals ``value``."""

    @abstractmethod
    async def get_all(self, record_cls: type[R]) -> list[R]:
        """Load every record of a collection."""

    @abstractmethod
    async def save(self, record: R) -> R:
        """Persist a record and return it."""

    @abstractmethod
    async def delete(self, record: Record) -> None:
        """Remove a saved record's backing storage."""

    @abstractmethod
    def is_saved(self, record: Record) -> bool:
        """Whether the record is backed by storage."""
