"""Request correlation and access logging middleware."""

import time
from typing import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from .logging_config import get_logger
from .request_id import REQUEST_ID_HEADER, get_request_id, request_id_var, set_request_id

logger = get_logger(__name__)

# Probe endpoints are polled constantly; they are logged at DEBUG
QUIET_PATHS = frozenset({"/health", "/ready", "/metrics"})


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Bind a request id for each request and log one line when it completes.

    The incoming X-Request-ID header is reused when present so ids can be
    followed from the dashboard through to this service.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        token = set_request_id(request.headers.get(REQUEST_ID_HEADER))
        request_id = get_request_id()
        started = time.perf_counter()
        path = request.url.path

        try:
            response = await call_next(request)
        except Exception as e:
            logger.error(
                f"{request.method} {path} failed: {e}",
                extra={
                    "method": request.method,
                    "path": path,
                    "error_type": type(e).__name__,
                    "duration_ms": round((time.perf_counter() - started) * 1000, 2),
                },
                exc_info=True,
            )
            raise
        else:
            level = "debug" if path in QUIET_PATHS else "info"
            getattr(logger, level)(
                f"{request.method} {path} -> {response.status_code}",
                extra={
                    "method": request.method,
                    "path": path,
                    "status_code": response.status_code,
                    "duration_ms": round((time.perf_counter() - started) * 1000, 2),
                },
            )
            response.headers[REQUEST_ID_HEADER] = request_id
            return response
        finally:
            request_id_var.reset(token)
