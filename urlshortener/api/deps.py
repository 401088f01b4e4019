from fastapi import Request

from urlshortener.db.store import RecordStore
from urlshortener.services.shortener import URLService


def get_url_service(request: Request) -> URLService:
    return request.app.state.url_service


def get_store(request: Request) -> RecordStore:
    return request.app.state.store
