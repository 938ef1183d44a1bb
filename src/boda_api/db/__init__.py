"""DB package exports."""

from .base import NAMING_CONVENTION, Base, TimestampMixin, UUIDPrimaryKeyMixin, metadata, utc_now
from .database import (
    Database,
    DatabaseConfig,
    build_async_url,
    build_sync_url,
    db,
    get_db_session,
    schema_is_current,
    session_scope,
)
from .enums import enum_values
from .types import GUID, UTCDateTime

__all__ = [
    "Base",
    "metadata",
    "NAMING_CONVENTION",
    "utc_now",
    "UUIDPrimaryKeyMixin",
    "TimestampMixin",
    "GUID",
    "UTCDateTime",
    "Database",
    "DatabaseConfig",
    "db",
    "session_scope",
    "get_db_session",
    "schema_is_current",
    "build_sync_url",
    "build_async_url",
    "enum_values",
]
