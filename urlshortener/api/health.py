from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from urlshortener.api.deps import get_store
from urlshortener.db.store import RecordStore

router = APIRouter(tags=["health"])


# simple liveness, never touches the store
@router.get("/health")
def health(store: RecordStore = Depends(get_store)):
    return {"status": "healthy", "service": "url-shortener", "database": store.backend}


# readiness: check store connectivity
@router.get("/ready")
def readiness(store: RecordStore = Depends(get_store)):
    if store.ping():
        return {"ready": True, "database": "ok"}
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={"ready": False, "database": "unavailable"},
    )
