"""
KBlog Backend — Request ID Middleware
======================================

What:  Assigns a short correlation ID to each request and returns it in the
       X-Request-ID response header.
How:   Uses the client's X-Request-ID when it is a plausible token (letters,
       digits, '.', '_' or '-', at most 64 characters), otherwise the first
       8 characters of a UUID4. The ID is stored in a ContextVar so the
       access logger and the exception handlers can include it.

The ID ends up in every access log line and in error bodies, so arbitrary
header text (newlines, very long values) is never echoed back.
"""

import re
import uuid
from contextvars import ContextVar
from typing import Optional

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

# Coroutine-local: concurrent requests on the same thread each see their own ID
request_id_var: ContextVar[str] = ContextVar("request_id", default="")

REQUEST_ID_PATTERN = re.compile(r"^[A-Za-z0-9._-]{1,64}$")


def resolve_request_id(header_value: Optional[str]) -> str:
    """The client's ID if it is acceptable, else a fresh one."""
    if header_value and REQUEST_ID_PATTERN.match(header_value):
        return header_value
    return str(uuid.uuid4())[:8]


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Tags every request and response with a request ID."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        rid = resolve_request_id(request.headers.get("X-Request-ID"))
        request_id_var.set(rid)
        request.state.request_id = rid

        response = await call_next(request)
        response.headers["X-Request-ID"] = rid
        return response
