"""
KBlog Backend — Health Check Route
===================================

What:  Health check endpoint for monitoring and load balancer health checks.
How:   Counts the records in both repositories. For the SQL backend this is a
       real round trip to the database; a failure marks the service unhealthy
       (HTTP 503) instead of raising.
"""

import logging
import time

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from kblog import __version__
from kblog.exceptions import StorageError
from kblog.repositories.store import BlogStore, get_store
from kblog.schemas.blog import HealthResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

# Initialized once when the module loads
_start_time = time.time()


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Service health check",
    responses={503: {"description": "Storage unreachable", "model": HealthResponse}},
)
def health_check(store: BlogStore = Depends(get_store)):
    posts = comments = 0
    status = "healthy"
    try:
        posts = store.posts.count()
        comments = store.comments.count()
    except StorageError as e:
        status = "unhealthy"
        logger.warning("Health check: storage unreachable: %s", e.context)

    body = HealthResponse(
        status=status,
        version=__version__,
        storage=store.backend,
        posts=posts,
        comments=comments,
        uptime_seconds=round(time.time() - _start_time, 2),
    )
    if status != "healthy":
        return JSONResponse(status_code=503, content=body.model_dump())
    return body
