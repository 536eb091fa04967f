"""Pre-configured defaults for record-store."""
from __future__ import annotations

from record_store.config import StoreConfig, resolve_database_uri
from record_store.store import RecordStore


def create_record_store(
    *,
    url: str | None = None,
    database_name: str = "rss",
    redis_prefix: str = "records",
    ssl_cert_reqs: str | None = None,
) -> RecordStore:
    """Create a RecordStore from the environment.

    Resolution order for the database URI:
      1. Explicit ``url`` parameter
      2. ``RECORD_STORE_DATABASE_URI`` environment variable
      3. Built-in default (local MongoDB)

    A URI that is not a database URI is used as the root directory of the
    flat-file backend.

    Args:
        url: Override the database URI or directory.
        database_name: Mongo database used when the URI names none.
        redis_prefix: Key prefix for Redis keys.
        ssl_cert_reqs: Pass ``"none"`` to skip TLS verification on rediss://.
    """
    config = StoreConfig(
        database_uri=resolve_database_uri(url),
        database_name=database_name,
        redis_prefix=redis_prefix,
        ssl_cert_reqs=ssl_cert_reqs,
    )
    return RecordStore(config)
