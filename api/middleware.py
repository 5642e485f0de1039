"""
Global middleware and exception handlers.
"""

from __future__ import annotations

import logging
import time

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from core.errors import TaskManagerError, UnauthorizedError

logger = logging.getLogger(__name__)


async def task_manager_error_handler(request: Request, exc: TaskManagerError) -> JSONResponse:
    """Map a service error to its HTTP status with a ``{"detail": ...}`` body."""
    headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, UnauthorizedError) else None
    logger.debug("%s %s -> %d %s", request.method, request.url.path, exc.status_code, exc.message)
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.message},
        headers=headers,
    )


def register_middleware(app: FastAPI) -> None:
    """Attach app-level middleware and exception handlers."""

    app.add_exception_handler(TaskManagerError, task_manager_error_handler)

    @app.middleware("http")
    async def request_timer(request: Request, call_next):
        start = time.perf_counter()
        response = await call_next(request)
        elapsed = time.perf_counter() - start
        response.headers["X-Process-Time"] = f"{elapsed:.4f}"
        logger.debug("%s %s — %.3fs", request.method, request.url.path, elapsed)
        return response
