"""Request logging with X-Correlation-ID propagation.

A caller-supplied ID is reused only when it looks like an opaque token
(letters, digits, ``-``, ``_``, ``.``, ``:``; at most 128 chars);
anything else is replaced with a fresh UUID so header content never
reaches the logs verbatim. The ID is scoped to the request and echoed
in the response.
"""

import re
import time
from collections.abc import Awaitable, Callable

import structlog
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from secure_estate.bootstrap.correlation import (
    correlation_scope,
    generate_correlation_id,
)

CORRELATION_HEADER = "X-Correlation-ID"

_VALID_CORRELATION_ID = re.compile(r"[A-Za-z0-9._:\-]{1,128}")

# Liveness probes hit these every few seconds; keep them out of INFO.
_QUIET_PATHS = frozenset({"/v1/health"})

logger = structlog.get_logger()


def _incoming_correlation_id(request: Request) -> str:
    supplied = request.headers.get(CORRELATION_HEADER, "")
    if _VALID_CORRELATION_ID.fullmatch(supplied):
        return supplied
    return generate_correlation_id()


class LoggingMiddleware(BaseHTTPMiddleware):
    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        path = request.url.path
        log = logger.bind(method=request.method, path=path)
        emit = log.debug if path in _QUIET_PATHS else log.info

        with correlation_scope(_incoming_correlation_id(request)) as correlation_id:
            started = time.perf_counter()
            try:
                response = await call_next(request)
            except Exception as exc:
                log.exception(
                    "request_failed",
                    duration_ms=round((time.perf_counter() - started) * 1000, 2),
                    error_type=type(exc).__name__,
                )
                raise
            emit(
                "request_completed",
                status_code=response.status_code,
                duration_ms=round((time.perf_counter() - started) * 1000, 2),
                client_host=request.client.host if request.client else None,
            )

        response.headers[CORRELATION_HEADER] = correlation_id
        return response
