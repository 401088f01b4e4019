from sqlalchemy import Column, String, Integer, DateTime
from sqlalchemy.orm import declarative_base

Base = declarative_base()


class URLItem(Base):
    __tablename__ = "urls"

    short_id = Column(String(50), primary_key=True, index=True)
    original_url = Column(String, nullable=False)
    click_count = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), nullable=False)
    last_accessed = Column(DateTime(timezone=True), nullable=True)
