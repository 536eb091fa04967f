"""Record backends: document database and flat-file JSON."""
from record_store.backends.base import Backend
from record_store.backends.database import DatabaseStore
from record_store.backends.file import FileStore

__all__ = ["Backend", "DatabaseStore", "FileStore"]
