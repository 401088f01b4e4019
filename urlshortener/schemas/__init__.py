# re-export common schemas for simpler imports
from .url import UrlRecord, CreateUrlRequest, CreateUrlResponse, UrlStats

__all__ = [
    "UrlRecord",
    "CreateUrlRequest",
    "CreateUrlResponse",
    "UrlStats",
]
