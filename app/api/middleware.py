"""Request correlation middleware.

Unhandled errors are rendered by the exception handlers registered in
``app.main``; this module only tags each request with an ID.
"""

import time
from typing import Callable
from uuid import uuid4

import structlog
from fastapi import FastAPI, Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

logger = structlog.get_logger()


class RequestIdMiddleware(BaseHTTPMiddleware):
    """Tag every request with an ``X-Request-ID``.

    A caller-supplied ID is reused, otherwise a UUID is generated. The ID
    lands on ``request.state`` (the error envelope and ``ProductService``
    read it from there), in the structlog context and on the response.
    """

    HEADER_NAME = "X-Request-ID"

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = request.headers.get(self.HEADER_NAME) or str(uuid4())
        request.state.request_id = request_id
        structlog.contextvars.bind_contextvars(request_id=request_id)

        start_time = time.perf_counter()
        try:
            response = await call_next(request)
        finally:
            structlog.contextvars.unbind_contextvars("request_id")

        logger.info(
            "Request completed",
            method=request.method,
            path=request.url.path,
            status_code=response.status_code,
            duration_ms=round((time.perf_counter() - start_time) * 1000, 2),
            request_id=request_id,
        )
        response.headers[self.HEADER_NAME] = request_id
        return response


def setup_middleware(app: FastAPI) -> None:
    """Install request correlation on the application."""
    app.add_middleware(RequestIdMiddleware)
