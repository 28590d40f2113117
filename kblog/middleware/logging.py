"""
KBlog Backend — Request Logging Middleware
===========================================

What:  One access log line per request: method, path, status, duration,
       request ID and client IP.
How:   Times the downstream call and logs at a level chosen from the status
       class (5xx → ERROR, 4xx → WARNING, otherwise INFO).

Missing records:
    A missing post or comment answers 500 by default, which would otherwise
    read as a server fault. The NotFoundError handler records what was
    missing on request.state.missing_resource; when it is set the line is
    logged at WARNING and names the record, e.g.
    "GET /posts/1000 500 0.4ms [a1b2c3d4] from 127.0.0.1 (post 1000 not found)".

What we DON'T log: request bodies (post and comment text).
"""

import logging
import time
from typing import Optional, Tuple

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from kblog.middleware.request_id import request_id_var

logger = logging.getLogger("kblog.access")


def _status_log_level(status: int, missing: Optional[Tuple[str, object]]) -> int:
    if missing is not None:
        return logging.WARNING
    if status >= 500:
        return logging.ERROR
    if status >= 400:
        return logging.WARNING
    return logging.INFO


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Logs one line per post/comment request."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        # Health checks are polled constantly; keep them out of the log
        if request.url.path == "/health":
            return await call_next(request)

        start_time = time.perf_counter()
        response = await call_next(request)
        duration_ms = (time.perf_counter() - start_time) * 1000

        # request.client may be None in testing
        client_ip = request.client.host if request.client else "unknown"
        rid = request_id_var.get("")
        status = response.status_code
        missing = getattr(request.state, "missing_resource", None)

        message = "%s %s %d %.1fms [%s] from %s"
        args = [request.method, request.url.path, status, duration_ms, rid, client_ip]
        if missing is not None:
            message += " (%s %s not found)"
            args.extend(missing)

        logger.log(
            _status_log_level(status, missing),
            message,
            *args,
            extra={
                "request_id": rid,
                "method": request.method,
                "path": request.url.path,
                "status": status,
                "duration_ms": round(duration_ms, 2),
                "client_ip": client_ip,
                "missing_resource": missing,
            },
        )

        return response
