import logging
from datetime import timezone
from typing import Optional

from sqlalchemy import text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from urlshortener.core.exceptions import StoreError
from urlshortener.db.models import Base, URLItem
from urlshortener.db.store import RecordStore
from urlshortener.schemas.url import UrlRecord

logger = logging.getLogger(__name__)


def _as_utc(value):
    # SQLite hands back naive datetimes even for timezone-aware columns
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def _to_record(row: URLItem) -> UrlRecord:
    return UrlRecord(
        short_id=row.short_id,
        original_url=row.original_url,
        click_count=row.click_count,
        created_at=_as_utc(row.created_at),
        last_accessed=_as_utc(row.last_accessed),
    )


def _to_row(record: UrlRecord) -> URLItem:
    return URLItem(
        short_id=record.short_id,
        original_url=record.original_url,
        click_count=record.click_count,
        created_at=record.created_at,
        last_accessed=record.last_accessed,
    )


class SqlRecordStore(RecordStore):
    """Record store backed by a single SQL table through SQLAlchemy."""

    def __init__(self, engine: Engine):
        self.engine = engine
        self.backend = engine.dialect.name
        self.SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

    def init_schema(self) -> None:
        try:
            Base.metadata.create_all(bind=self.engine)
        except SQLAlchemyError as e:
            raise StoreError(f"Failed to create tables: {e}") from e
        logger.info("Database models initialized/checked.")

    def select(self, short_id: str) -> Optional[UrlRecord]:
        try:
            with self.SessionLocal() as db:
                row = db.get(URLItem, short_id)
                return _to_record(row) if row else None
        except SQLAlchemyError as e:
            raise StoreError(f"select {short_id!r} failed: {e}") from e

    def create(self, record: UrlRecord) -> Optional[UrlRecord]:
        try:
            with self.SessionLocal() as db:
                db_url = _to_row(record)
                try:
                    db.add(db_url)
                    db.commit()
                except IntegrityError as e:
                    db.rollback()
                    logger.warning("IntegrityError creating short_id=%s: %s", record.short_id, str(e.orig))
                    return None
                db.refresh(db_url)
                return _to_record(db_url)
        except SQLAlchemyError as e:
            raise StoreError(f"create {record.short_id!r} failed: {e}") from e

    def update(self, record: UrlRecord) -> UrlRecord:
        try:
            with self.SessionLocal() as db:
                db_url = db.merge(_to_row(record))
                db.commit()
                db.refresh(db_url)
                return _to_record(db_url)
        except SQLAlchemyError as e:
            raise StoreError(f"update {record.short_id!r} failed: {e}") from e

    def ping(self) -> bool:
        try:
            with self.engine.connect() as conn:
                conn.execute(text("SELECT 1"))
            return True
        except SQLAlchemyError as e:
            logger.error(f"Database connection failed: {e}")
            return False

    def close(self) -> None:
        self.engine.dispose()
