"""record-store: typed records over a document database or a JSON directory."""
from record_store.backends import Backend, DatabaseStore, FileStore
from record_store.config import (
    DATABASE_URI_PREFIXES,
    StoreConfig,
    is_database_uri,
    resolve_database_uri,
)
from record_store.defaults import create_record_store
from record_store.drivers import Document, DocumentDriver, Model, create_driver
from record_store.entities import GuildProfile, Supporter
from record_store.errors import (
    InvalidIdError,
    NotSavedError,
    RecordStoreError,
    UndefinedIdError,
    UnsupportedDatabaseError,
)
from record_store.models import ABSENT, Record, resolve_object, strip_absent, to_plain
from record_store.store import RecordStore

__all__ = [
    # Records
    "ABSENT",
    "Record",
    "resolve_object",
    "strip_absent",
    "to_plain",
    # Entities
    "GuildProfile",
    "Supporter",
    # Configuration
    "StoreConfig",
    "DATABASE_URI_PREFIXES",
    "is_database_uri",
    "resolve_database_uri",
    # Storage
    "RecordStore",
    "Backend",
    "DatabaseStore",
    "FileStore",
    # Drivers
    "Document",
    "DocumentDriver",
    "Model",
    "create_driver",
    # Errors
    "RecordStoreError",
    "UndefinedIdError",
    "InvalidIdError",
    "NotSavedError",
    "UnsupportedDatabaseError",
    # Defaults
    "create_record_store",
]
