# Middleware package init
"""
KBlog Backend — Middleware Package
===================================

Middleware Chain (order matters!):
    Request → [Request ID] → [Logging] → [GZip] → [CORS] → Route Handler

    1. Request ID: correlation ID stored in a ContextVar and echoed back in
       the X-Request-ID response header
    2. Logging: one access log line per request, tagged with that ID
"""
