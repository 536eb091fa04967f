"""Abstract interfaces for document database drivers.

A driver hands out one ``Model`` per collection. A model creates, finds and
wraps ``Document`` handles, which are the live objects a saved record keeps
for incremental updates and removal.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any


class Document(ABC):
    """A live handle to one stored document."""

    @property
    @abstractmethod
    def id(self) -> str | None:
        """The document identifier, once assigned."""

    @abstractmethod
    def set(self, key: str, value: Any) -> None:
        """Stage a field update, applied by the next ``save``."""

    @abstractmethod
    def unset(self, key: str) -> None:
        """Stage a field removal, applied by the next ``save``."""

    @abstractmethod
    async def save(self) -> Document:
        """Insert the document, or apply staged changes if already stored."""

    @abstractmethod
    async def remove(self) -> None:
        """Delete the stored document."""

    @abstractmethod
    def to_dict(self) -> dict[str, Any]:
        """The document's current fields, including ``_id``."""


class Model(ABC):
    """Backend-model descriptor for one collection."""

    @property
    @abstractmethod
    def collection_name(self) -> str:
        """Name of the collection this model reads and writes."""

    @abstractmethod
    def new(self, data: dict[str, Any]) -> Document:
        """Create an unsaved document from ``data``."""

    @abstractmethod
    async def find_by_id(self, document_id: str) -> Document | None:
        """Look a document up by primary key."""

    @abstractmethod
    async def find_one(
        self, query: dict[str, Any], projection: dict[str, int] | None = None
    ) -> Document | None:
        """First document matching an equality query."""

    @abstractmethod
    async def find(
        self, query: dict[str, Any], projection: dict[str, int] | None = None
    ) -> list[Document]:
        """Every document matching an equality query."""


class DocumentDriver(ABC):
    """Connection to a document database."""

    @abstractmethod
    def model(self, collection: str) -> Model:
        """Return the model for ``collection``."""

    @abstractmethod
    async def close(self) -> None:
        """Close the underlying connection."""
