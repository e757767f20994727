"""
RoomLedger Backend — Request Logging Middleware
=================================================

What:  One access-log line per HTTP request.
How:   Measures handler duration and logs method, path, household, status,
       duration, request id and client ip on the `roomledger.access` logger.

Level by status class:
    5xx → ERROR, 4xx → WARNING, everything else → INFO

Request bodies are never logged.
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from roomledger.middleware.request_id import request_id_var

logger = logging.getLogger("roomledger.access")

# Probes hit this every few seconds
SKIPPED_PATHS = {"/health"}


def level_for_status(status: int) -> int:
    if status >= 500:
        return logging.ERROR
    if status >= 400:
        return logging.WARNING
    return logging.INFO


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Logs every request except health probes."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        path = request.url.path
        if path in SKIPPED_PATHS:
            return await call_next(request)

        start_time = time.perf_counter()
        response = await call_next(request)
        duration_ms = (time.perf_counter() - start_time) * 1000

        client_ip = request.client.host if request.client else "unknown"
        household = request.query_params.get("hid") or "default"
        rid = request_id_var.get("")
        status = response.status_code

        logger.log(
            level_for_status(status),
            "%s %s hid=%s %d %.1fms [%s] from %s",
            request.method,
            path,
            household,
            status,
            duration_ms,
            rid,
            client_ip,
            extra={
                "request_id": rid,
                "method": request.method,
                "path": path,
                "household": household,
                "status": status,
                "duration_ms": round(duration_ms, 2),
                "client_ip": client_ip,
            },
        )
        return response
