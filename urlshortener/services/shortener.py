import logging
from datetime import datetime, timezone
from typing import Optional
from urllib.parse import quote

from urlshortener.core.exceptions import ConflictError, NotFoundError, StoreError, ValidationError
from urlshortener.db.store import RecordStore
from urlshortener.schemas.url import CreateUrlResponse, UrlRecord, UrlStats
from urlshortener.utils.encoding import generate_short_id
from urlshortener.utils.validators import is_valid_custom_id, is_valid_url

logger = logging.getLogger(__name__)


class URLService:
    """Create, redirect and stats operations over a record store.

    One instance is built at startup and shared by every request. It only
    reads its store handle and base URL.
    """

    def __init__(self, store: RecordStore, base_url: str, max_id_retries: int = 5):
        self.store = store
        self.base_url = base_url.rstrip("/")
        self.max_id_retries = max(1, max_id_retries)

    def short_url(self, short_id: str) -> str:
        # custom ids may hold characters that are reserved in a URL path
        return f"{self.base_url}/{quote(short_id, safe='')}"

    def create_short_url(self, url: str, custom_id: Optional[str] = None) -> CreateUrlResponse:
        if not is_valid_url(url):
            raise ValidationError("Invalid URL format")

        if custom_id is not None:
            if not is_valid_custom_id(custom_id):
                raise ValidationError("Custom ID must be between 1 and 50 characters")
            record = self._create_with_custom_id(custom_id, url)
        else:
            record = self._create_with_generated_id(url)

        logger.info("Created short URL: %s -> %s", record.short_id, record.original_url[:50])
        return CreateUrlResponse(
            short_url=self.short_url(record.short_id),
            original_url=record.original_url,
            id=record.short_id,
            created_at=record.created_at,
        )

    def _new_record(self, short_id: str, url: str) -> UrlRecord:
        return UrlRecord(
            short_id=short_id,
            original_url=url,
            click_count=0,
            created_at=datetime.now(timezone.utc),
            last_accessed=None,
        )

    def _create_with_custom_id(self, custom_id: str, url: str) -> UrlRecord:
        try:
            existing = self.store.select(custom_id)
        except StoreError as e:
            raise StoreError(e.message, client_message="Database error") from e
        if existing is not None:
            logger.warning("Custom ID collision: '%s'", custom_id)
            raise ConflictError("Custom ID already exists")

        created = self.store.create(self._new_record(custom_id, url))
        if created is None:
            # Taken between the lookup and the insert
            raise ConflictError("Custom ID already exists")
        return created

    def _create_with_generated_id(self, url: str) -> UrlRecord:
        for attempt in range(self.max_id_retries):
            created = self.store.create(self._new_record(generate_short_id(), url))
            if created is not None:
                return created
            logger.info(f"Short id collision on attempt {attempt + 1}/{self.max_id_retries}")

        raise StoreError(f"Failed to generate unique short id after {self.max_id_retries} attempts")

    def resolve_redirect(self, short_id: str) -> str:
        """Count a visit to `short_id` and return the URL to redirect to.

        The counter update is best effort: if persisting it fails the error
        is logged and the caller still gets the target URL.
        """
        record = self.store.select(short_id)
        if record is None:
            logger.warning(f"Redirect 404: Short id not found: {short_id}")
            raise NotFoundError("Short URL not found")

        record.click_count += 1
        record.last_accessed = datetime.now(timezone.utc)
        try:
            self.store.update(record)
        except StoreError:
            logger.exception("Failed to record click for %s", short_id)

        logger.info("Redirecting %s to %s", short_id, record.original_url[:50])
        return record.original_url

    def get_stats(self, short_id: str) -> UrlStats:
        record = self.store.select(short_id)
        if record is None:
            logger.warning(f"Stats 404: Short id not found: {short_id}")
            raise NotFoundError("Short URL not found")

        return UrlStats(
            id=record.short_id,
            original_url=record.original_url,
            short_url=self.short_url(record.short_id),
            click_count=record.click_count,
            created_at=record.created_at,
            last_accessed=record.last_accessed,
        )
