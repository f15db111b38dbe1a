from __future__ import annotations

import logging
import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from campuskit.api.routers import auth, gwa, me
from campuskit.domain.exceptions import StoreUnavailableError
from campuskit.infrastructure.db.engine import create_schema, get_engine
from campuskit.shared.config import get_settings
from campuskit.shared.logging_config import setup_logging


settings = get_settings()
setup_logging(settings.log_level)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_app: FastAPI):
    if settings.auto_create_schema and settings.postgres_dsn:
        create_schema(get_engine(settings.postgres_dsn))
        logger.info("Database schema ensured")
    yield


app = FastAPI(title="campuskit API", lifespan=lifespan)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_allow_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    started = time.perf_counter()
    response = await call_next(request)
    logger.info(
        "%s %s -> %s (%.1f ms)",
        request.method,
        request.url.path,
        response.status_code,
        (time.perf_counter() - started) * 1000,
        extra={
            "path": request.url.path,
            "method": request.method,
            "status_code": response.status_code,
        },
    )
    return response


@app.exception_handler(StoreUnavailableError)
async def store_unavailable_handler(_request: Request, _exc: StoreUnavailableError):
    return JSONResponse(status_code=503, content={"detail": "Service temporarily unavailable."})


@app.get("/health")
def health():
    return {"status": "ok"}


app.include_router(auth.router)
app.include_router(me.router)
app.include_router(gwa.router)
