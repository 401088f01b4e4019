from fastapi import APIRouter, Depends, status
from fastapi.responses import RedirectResponse

from urlshortener.api.deps import get_url_service
from urlshortener.schemas.url import CreateUrlRequest, CreateUrlResponse, UrlStats
from urlshortener.services.shortener import URLService


router = APIRouter()


@router.post("/", response_model=CreateUrlResponse, status_code=status.HTTP_201_CREATED, tags=["urls"])
def create_short_url_endpoint(url_request: CreateUrlRequest, service: URLService = Depends(get_url_service)):
    return service.create_short_url(url_request.url, url_request.custom_id)


@router.get("/api/stats/{short_id}", response_model=UrlStats, tags=["stats"])
def get_url_stats_endpoint(short_id: str, service: URLService = Depends(get_url_service)):
    return service.get_stats(short_id)


@router.get("/{short_id}", tags=["redirect"])
def redirect_endpoint(short_id: str, service: URLService = Depends(get_url_service)):
    """
    Access the shortened URL and get permanently redirected to the original URL.
    """
    original_url = service.resolve_redirect(short_id)
    return RedirectResponse(url=original_url, status_code=status.HTTP_308_PERMANENT_REDIRECT)
