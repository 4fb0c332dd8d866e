# vegist/repositories/storage_repo.py
from datetime import datetime, timezone
from typing import Protocol

from sqlmodel import Session

from vegist.core.errors import QuotaError, remote_errors
from vegist.models.storage import StorageEntry


class KeyValueStore(Protocol):
    """
    Local-storage style interface used for client state.

    `set` may raise QuotaError when the value is too large.
    """

    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...

    def remove(self, key: str) -> None: ...


class DatabaseStorage:
    """
    KeyValueStore backed by the `storage_entries` table, scoped to one client.

    Every call commits immediately, like a local storage write.
    """

    def __init__(self, session: Session, client_id: str, quota_bytes: int | None = None):
        self.session = session
        self.client_id = client_id
        self.quota_bytes = quota_bytes

    def _entry(self, key: str) -> StorageEntry | None:
        return self.session.get(StorageEntry, (self.client_id, key))

    def get(self, key: str) -> str | None:
        with remote_errors("Storage read"):
            entry = self._entry(key)
        return entry.value if entry else None

    def set(self, key: str, value: str) -> None:
        if self.quota_bytes is not None and len(value.encode("utf-8")) > self.quota_bytes:
            raise QuotaError(f"Value for '{key}' exceeds {self.quota_bytes} bytes")

        with remote_errors("Storage write", self.session):
            entry = self._entry(key)
            if entry is None:
                entry = StorageEntry(client_id=self.client_id, key=key, value=value)
            else:
                entry.value = value
                entry.updated_at = datetime.now(timezone.utc)
            self.session.add(entry)
            self.session.commit()

    def remove(self, key: str) -> None:
        with remote_errors("Storage delete", self.session):
            entry = self._entry(key)
            if entry is not None:
                self.session.delete(entry)
                self.session.commit()
