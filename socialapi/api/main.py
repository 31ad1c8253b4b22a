"""Social API: FastAPI application with DB-backed storage."""
from __future__ import annotations

import logging

from socialapi.logging_config import setup_logging
setup_logging()
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from config.settings import settings
from socialapi.api import auth, posts, users
from socialapi.db.engine import engine
from socialapi.db.tables import Base
from socialapi.errors import SocialError

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Validate config and create tables on startup."""
    from socialapi.startup_checks import validate_settings
    validate_settings()

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database tables ready")

    yield

    logger.info("Shutting down, draining connections...")
    await engine.dispose()
    logger.info("Shutdown complete")


app = FastAPI(
    title="Social API",
    version="0.1.0",
    description="Users, posts, comments, likes, follows and a home feed",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Per-request deadline
from socialapi.middleware.timeout import TimeoutMiddleware
app.add_middleware(TimeoutMiddleware, timeout=settings.REQUEST_TIMEOUT_SECONDS)

# Request ID tracing, outermost so timeouts still carry the header
from socialapi.middleware.request_id import RequestIDMiddleware
app.add_middleware(RequestIDMiddleware)


app.include_router(auth.router)
app.include_router(users.router)
app.include_router(posts.router)


@app.get("/health")
async def health():
    return {"status": "ok"}


# ── Error handlers ───────────────────────────────────────────────────────────


@app.exception_handler(SocialError)
async def social_error_handler(request: Request, exc: SocialError):
    """Map domain errors onto their HTTP status. Opaque failures stay opaque."""
    if type(exc) is SocialError:
        logger.error("Internal error on %s %s: %s", request.method, request.url.path, exc)
        return JSONResponse(status_code=500, content={
            "error": "internal_error",
            "message": "Something went wrong. Please try again.",
        })
    return JSONResponse(status_code=exc.status_code, content={
        "error": exc.code,
        "message": exc.message,
    })


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    """Return clean, structured validation errors instead of raw Pydantic output."""
    errors = []
    for err in exc.errors():
        field = " → ".join(str(loc) for loc in err["loc"]) if err.get("loc") else "unknown"
        errors.append({"field": field, "message": err["msg"]})
    return JSONResponse(status_code=400, content={
        "error": "validation_error",
        "message": "Invalid request data",
        "details": errors,
    })


@app.exception_handler(HTTPException)
async def http_error_handler(request: Request, exc: HTTPException):
    """Consistent error envelope for all HTTP errors."""
    return JSONResponse(status_code=exc.status_code, content={
        "error": exc.detail if isinstance(exc.detail, str) else "error",
        "message": exc.detail,
    }, headers=getattr(exc, "headers", None))


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    """Catch-all for unhandled exceptions. Never leak stack traces."""
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={
        "error": "internal_error",
        "message": "Something went wrong. Please try again.",
    })


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("socialapi.api.main:app", host=settings.API_HOST, port=settings.API_PORT)
