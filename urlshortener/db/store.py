"""Record store interface shared by the SQL and Redis backends."""

from abc import ABC, abstractmethod
from typing import Optional

from urlshortener.schemas.url import UrlRecord


class RecordStore(ABC):
    """Persistent mapping from short id to :class:`UrlRecord`.

    Only single-key operations are exposed. Implementations must be safe to
    share between request threads and raise ``StoreError`` for any backend
    failure.
    """

    backend: str = "unknown"

    @abstractmethod
    def select(self, short_id: str) -> Optional[UrlRecord]:
        """Return the record stored under `short_id`, or None."""

    @abstractmethod
    def create(self, record: UrlRecord) -> Optional[UrlRecord]:
        """Insert `record` unless its key is taken.

        Returns the stored record, or None when a record with the same
        short id already exists. Existing records are never overwritten.
        """

    @abstractmethod
    def update(self, record: UrlRecord) -> UrlRecord:
        """Replace the full content stored under ``record.short_id``."""

    @abstractmethod
    def ping(self) -> bool:
        """Return True if the backend answers."""

    def init_schema(self) -> None:
        pass

    def close(self) -> None:
        pass
