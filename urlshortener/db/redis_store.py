import logging
from typing import Optional

import redis
import redis.exceptions
from pydantic import ValidationError as SchemaError

from urlshortener.core.exceptions import StoreError
from urlshortener.db.store import RecordStore
from urlshortener.schemas.url import UrlRecord

logger = logging.getLogger(__name__)


class RedisRecordStore(RecordStore):
    """Record store keeping each record as a JSON string in Redis.

    Keys look like ``<namespace>:<database>:urls:<short_id>``.
    """

    backend = "redis"

    def __init__(self, client: redis.Redis, namespace: str = "urlshortener", database: str = "urlshortener"):
        self.client = client
        self.prefix = f"{namespace}:{database}:urls:"

    def key(self, short_id: str) -> str:
        return f"{self.prefix}{short_id}"

    def select(self, short_id: str) -> Optional[UrlRecord]:
        try:
            raw = self.client.get(self.key(short_id))
        except redis.exceptions.RedisError as e:
            raise StoreError(f"select {short_id!r} failed: {e}") from e
        if raw is None:
            return None
        try:
            return UrlRecord.model_validate_json(raw)
        except SchemaError as e:
            raise StoreError(f"corrupt record under {self.key(short_id)!r}: {e}") from e

    def create(self, record: UrlRecord) -> Optional[UrlRecord]:
        try:
            # SET NX only writes when the key is absent
            created = self.client.set(self.key(record.short_id), record.model_dump_json(), nx=True)
        except redis.exceptions.RedisError as e:
            raise StoreError(f"create {record.short_id!r} failed: {e}") from e
        if not created:
            logger.warning("Key already present for short_id=%s", record.short_id)
            return None
        return record

    def update(self, record: UrlRecord) -> UrlRecord:
        try:
            self.client.set(self.key(record.short_id), record.model_dump_json())
        except redis.exceptions.RedisError as e:
            raise StoreError(f"update {record.short_id!r} failed: {e}") from e
        return record

    def ping(self) -> bool:
        try:
            self.client.ping()
            return True
        except redis.exceptions.RedisError as e:
            logger.warning(f"Redis connection failed: {e}")
            return False

    def close(self) -> None:
        self.client.close()
