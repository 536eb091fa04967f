"""Exceptions raised by the record store.

Missing records are not errors: read operations return ``None`` instead.
Backend I/O failures (pymongo, redis, OSError) propagate unchanged.
"""


class RecordStoreError(Exception):
    """Base class for record store errors."""


class UndefinedIdError(RecordStoreError, ValueError):
    """A read was attempted without an id."""

    def __init__(self, message: str = "Undefined id") -> None:
        super().__init__(message)


class InvalidIdError(RecordStoreError, TypeError):
    """A read was attempted with an id that is not a string."""

    def __init__(self, message: str = "id must be a string") -> None:
        super().__init__(message)


class NotSavedError(RecordStoreError):
    """The record has no backing storage yet."""

    def __init__(self, message: str = "Data has not been saved") -> None:
        super().__init__(message)


class UnsupportedDatabaseError(RecordStoreError, ValueError):
    """The database URI scheme has no matching driver."""
