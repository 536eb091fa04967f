"""Store configuration and backend selection."""
from __future__ import annotations

import os
from dataclasses import dataclass

# URIs starting with one of these select the document database backend.
# Anything else is treated as a filesystem directory.
DATABASE_URI_PREFIXES: tuple[str, ...] = (
    "mongodb://",
    "mongodb+srv://",
    "redis://",
    "rediss://",
)

DEFAULT_DATABASE_URI = "mongodb://localhost:27017/rss"

DATABASE_URI_ENV = "RECORD_STORE_DATABASE_URI"


@dataclass
class StoreConfig:
    """Configuration for a RecordStore.

    ``database_uri`` is either a database connection string or the root
    directory of the flat-file backend. It is read on every store operation,
    so it may be changed between calls.
    """

    database_uri: str = DEFAULT_DATABASE_URI

    # Mongo database used when the URI does not name one
    database_name: str = "rss"

    # Redis key namespace: {redis_prefix}:{collection}:{id}
    redis_prefix: str = "records"

    # "none" skips certificate verification for rediss:// endpoints
    ssl_cert_reqs: str | None = None


def is_database_uri(uri: str) -> bool:
    """Return True when ``uri`` names a document database."""
    return uri.startswith(DATABASE_URI_PREFIXES)


def resolve_database_uri(url: str | None = None) -> str:
    """Resolve the database URI.

    Resolution order:
      1. Explicit ``url`` parameter
      2. ``RECORD_STORE_DATABASE_URI`` environment variable
      3. Built-in default (local MongoDB)
    """
    return url or os.environ.get(DATABASE_URI_ENV) or DEFAULT_DATABASE_URI
