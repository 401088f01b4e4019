import logging
import time
from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from urlshortener.api import health, shortener
from urlshortener.core.config import Settings, get_settings
from urlshortener.core.exceptions import ShortenerError, StoreError
from urlshortener.core.logging_config import configure_logging
from urlshortener.db.database import build_store
from urlshortener.db.store import RecordStore
from urlshortener.services.shortener import URLService

logger = logging.getLogger("urlshortener")


@asynccontextmanager
async def lifespan(app: FastAPI):
    store = app.state.store
    store.init_schema()
    logger.info("Record store ready (%s)", store.backend)
    yield
    logger.info("Shutting down gracefully...")
    store.close()


def create_app(settings: Optional[Settings] = None, store: Optional[RecordStore] = None) -> FastAPI:
    settings = settings or get_settings()
    store = store or build_store(settings)

    app = FastAPI(
        title=settings.PROJECT_NAME,
        description="URL shortener with click tracking",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.store = store
    app.state.url_service = URLService(store, settings.BASE_URL, settings.MAX_ID_RETRIES)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        start = time.perf_counter()
        response = await call_next(request)
        duration_ms = (time.perf_counter() - start) * 1000
        logger.info(f"{request.method} {request.url.path} -> {response.status_code} ({duration_ms:.2f}ms)")
        return response

    @app.exception_handler(ShortenerError)
    async def shortener_error_handler(request: Request, exc: ShortenerError):
        if isinstance(exc, StoreError):
            logger.error(f"Store error on {request.method} {request.url.path}: {exc.message}", exc_info=exc)
            message = exc.client_message or (
                "Failed to create short URL" if request.method == "POST" else "Internal server error"
            )
            return JSONResponse(status_code=exc.status_code, content={"error": message})
        return JSONResponse(status_code=exc.status_code, content={"error": exc.message})

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        logger.warning(f"Rejected request body on {request.url.path}: {exc.errors()}")
        return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"error": "Invalid request body"})

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        logger.error(f"Unhandled exception: {exc}", exc_info=True)
        return JSONResponse(status_code=500, content={"error": "Internal server error"})

    # health first so /health and /ready are not taken as short ids
    app.include_router(health.router)
    app.include_router(shortener.router)

    return app


def run():
    settings = get_settings()
    configure_logging(settings.LOG_LEVEL)
    logger.info(f"Application '{settings.PROJECT_NAME}' starting up.")

    app = create_app(settings)
    uvicorn.run(
        app,
        host=settings.bind_host,
        port=settings.bind_port,
        log_level=settings.LOG_LEVEL.lower(),
        access_log=False,
    )


if __name__ == "__main__":
    run()
