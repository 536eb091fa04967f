"""Logging for record_store."""
from record_store.observability.logging import get_logger, setup_logging

__all__ = ["get_logger", "setup_logging"]
