"""Per-request wall-clock timeout."""
from __future__ import annotations

import asyncio
import logging

from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

logger = logging.getLogger(__name__)


class TimeoutMiddleware(BaseHTTPMiddleware):
    """Abort requests that run longer than ``timeout`` seconds with a 503."""

    def __init__(self, app: ASGIApp, timeout: float = 60.0):
        super().__init__(app)
        self.timeout = timeout

    async def dispatch(self, request: Request, call_next) -> Response:
        try:
            return await asyncio.wait_for(call_next(request), timeout=self.timeout)
        except asyncio.TimeoutError:
            logger.warning("Request timed out after %.1fs: %s %s", self.timeout, request.method, request.url.path)
            return JSONResponse(status_code=503, content={
                "error": "timeout",
                "message": "Request timed out",
            })
