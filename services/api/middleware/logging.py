"""Request/response logging middleware"""

import logging
import time
import uuid
from typing import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

logger = logging.getLogger(__name__)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Logs one line per request and tags it with a request ID.

    The ID is taken from the incoming ``X-Request-ID`` header when an
    upstream proxy set one, generated otherwise, and echoed back on the
    response together with ``X-Process-Time`` (seconds).
    """

    def __init__(self, app: ASGIApp, header_name: str = "X-Request-ID"):
        super().__init__(app)
        self.header_name = header_name

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = request.headers.get(self.header_name) or str(uuid.uuid4())
        request.state.request_id = request_id

        start_time = time.perf_counter()
        response = await call_next(request)
        process_time = time.perf_counter() - start_time

        response.headers[self.header_name] = request_id
        response.headers["X-Process-Time"] = f"{process_time:.4f}"

        logger.info(
            "%s %s -> %d (%.1f ms) [%s]",
            request.method,
            request.url.path,
            response.status_code,
            process_time * 1000,
            request_id,
        )
        return response
