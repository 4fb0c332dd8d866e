# vegist/models/storage.py
from datetime import datetime, timezone

from sqlmodel import SQLModel, Field


class StorageEntry(SQLModel, table=True):
    """
    One key of one client's key-value store.

    This is the server-side stand-in for a browser's local storage:
    values are opaque strings (JSON documents written by the services).
    """

    __tablename__ = "storage_entries"

    client_id: str = Field(primary_key=True, max_length=64)
    key: str = Field(primary_key=True, max_length=100)
    value: str

    updated_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
    )
