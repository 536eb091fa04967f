"""Document database drivers."""
from __future__ import annotations

from record_store.config import StoreConfig
from record_store.drivers.base import Document, DocumentDriver, Model
from record_store.errors import UnsupportedDatabaseError


def create_driver(config: StoreConfig) -> DocumentDriver:
    """Create the driver matching the scheme of ``config.database_uri``."""
    uri = config.database_uri
    if uri.startswith(("mongodb://", "mongodb+srv://")):
        from record_store.drivers.mongo import MongoDriver

        return MongoDriver.from_url(uri, database_name=config.database_name)
    if uri.startswith(("redis://", "rediss://")):
        from record_store.drivers.redis import RedisDriver

        return RedisDriver.from_url(
            uri, prefix=config.redis_prefix, ssl_cert_reqs=config.ssl_cert_reqs
        )
    raise UnsupportedDatabaseError(f"No driver for database URI {uri.split('@')[-1]!r}")


__all__ = ["Document", "DocumentDriver", "Model", "create_driver"]
