"""
KBlog Backend — Blog Store
===========================

What:  The pair of repositories (posts, comments) the API works against.
Why:   Replaces process-wide repository singletons with one explicitly built
       object, handed to the app by create_app() and to routes through a
       dependency. Tests build their own store and clear it between cases.
How:   build_store(settings) picks the backend named by STORAGE_BACKEND.

The two repositories are independent: nothing here checks that a comment's
post_id refers to a stored post, and removing a post leaves its comments.
"""

import logging
import threading
from dataclasses import dataclass, field
from typing import Callable, Optional

from fastapi import Request

from kblog.config import Settings
from kblog.repositories.base import RelationalRepository, Repository
from kblog.repositories.memory import InMemoryRepository
from kblog.schemas.blog import Comment, Post

logger = logging.getLogger(__name__)


@dataclass
class BlogStore:
    """
    Posts and comments repositories plus their lifecycle.

    Attributes:
        posts:     Repository[Post]
        comments:  RelationalRepository[Comment], filterable by post_id
        backend:   "memory" or "sql", reported by /health
        on_close:  Releases backend resources (disposes the SQL engine)
    """
    posts: Repository[Post]
    comments: RelationalRepository[Comment]
    backend: str = "memory"
    on_close: Optional[Callable[[], None]] = field(default=None, repr=False)

    def comments_for_post(self, post_id: int) -> list:
        return self.comments.get_by_foreign_key("post_id", post_id)

    def clear(self) -> None:
        """Remove every post and comment (test reset hook)."""
        self.comments.clear()
        self.posts.clear()

    def close(self) -> None:
        if self.on_close is not None:
            self.on_close()
            self.on_close = None


def build_memory_store() -> BlogStore:
    return BlogStore(
        posts=InMemoryRepository(Post),
        comments=InMemoryRepository(Comment),
        backend="memory",
    )


def build_sql_store(database_url: str, echo: bool = False) -> BlogStore:
    """SQLAlchemy-backed store; creates the tables if needed."""
    from kblog.database import build_engine, build_session_factory
    from kblog.models.blog import CommentRecord, PostRecord
    from kblog.repositories.sql import SqlRepository

    engine = build_engine(database_url, echo=echo)
    session_factory = build_session_factory(engine)
    # One lock per engine: both tables may share a single connection
    engine_lock = threading.RLock()
    return BlogStore(
        posts=SqlRepository(session_factory, Post, PostRecord, lock=engine_lock),
        comments=SqlRepository(session_factory, Comment, CommentRecord, lock=engine_lock),
        backend="sql",
        on_close=engine.dispose,
    )


def build_store(settings: Settings) -> BlogStore:
    """Build the store selected by settings.storage_backend."""
    if settings.storage_backend == "sql":
        store = build_sql_store(settings.database_url, echo=settings.log_level == "DEBUG")
    else:
        store = build_memory_store()
    logger.info("Blog store initialized (backend=%s)", store.backend)
    return store


# ── Route Dependency ──────────────────────────────────────────────────────
def get_store(request: Request) -> BlogStore:
    """
    FastAPI dependency returning the store attached by create_app().

    Example usage in a route:
        @router.get("/posts")
        def list_posts(store: BlogStore = Depends(get_store)):
            return store.posts.get_all()
    """
    return request.app.state.store
