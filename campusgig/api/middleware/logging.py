"""
Request/Response logging middleware.
"""

import time
import uuid
from typing import Callable

from fastapi import FastAPI, Request, Response

from campusgig.config.logging import (
    bind_request_context,
    clear_request_context,
    get_logger,
)

logger = get_logger(__name__)

QUIET_PATH_PARTS = ("/health",)


class LoggingMiddleware:
    """Logs each request with its id, caller and timing."""

    def __init__(self, app: FastAPI):
        self.app = app
        self.add_logging_middleware()

    def add_logging_middleware(self) -> None:
        """Add request/response logging middleware."""
        user_header = self.app.state.settings.USER_ID_HEADER

        @self.app.middleware("http")
        async def logging_middleware(request: Request, call_next: Callable) -> Response:
            request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
            request.state.request_id = request_id
            start_time = time.perf_counter()

            # Probes hit health endpoints constantly
            quiet = any(part in request.url.path for part in QUIET_PATH_PARTS)
            bind_request_context(
                request_id=request_id,
                user_id=request.headers.get(user_header),
            )
            log = logger.bind(method=request.method, path=request.url.path)

            try:
                response = await call_next(request)
            except Exception as e:
                log.error(
                    "Request failed",
                    error=str(e),
                    process_time=f"{time.perf_counter() - start_time:.4f}s",
                )
                raise
            else:
                process_time = time.perf_counter() - start_time
                (log.debug if quiet else log.info)(
                    "Request completed",
                    status_code=response.status_code,
                    process_time=f"{process_time:.4f}s",
                )
            finally:
                clear_request_context()

            response.headers["X-Request-ID"] = request_id
            response.headers["X-Process-Time"] = f"{process_time:.4f}"
            return response
