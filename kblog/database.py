"""
KBlog Backend — Database Engine and Session Factory
====================================================

What:  SQLAlchemy engine construction, session factory and declarative Base
       for the "sql" storage backend.
Why:   Centralizes all database connection logic in one place.
How:   build_engine() creates an engine from settings.database_url and
       creates the tables; the SqlRepository instances share one sessionmaker.
When:  Only when STORAGE_BACKEND=sql. The default in-memory backend never
       imports an engine.

Architecture Decision:
    The route handlers are sync functions run on FastAPI's thread pool, so
    the SQL backend uses synchronous SQLAlchemy sessions: a repository call
    from a handler is a plain function call, same as for the in-memory store.

SQLite Notes:
    An in-memory SQLite database lives inside a single connection, so for
    ":memory:" URLs the engine uses StaticPool (one shared connection) and
    disables the same-thread check. Repository locks serialize access to it.
"""

import logging

from sqlalchemy import Engine, create_engine
from sqlalchemy.engine import make_url
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker
from sqlalchemy.pool import StaticPool

logger = logging.getLogger(__name__)


# ── Base Model ────────────────────────────────────────────────────────────
class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy ORM models.

    Every table registers on Base.metadata, which build_engine() uses to
    create the schema.
    """
    pass


def build_engine(database_url: str, echo: bool = False) -> Engine:
    """
    Create an engine for `database_url` and make sure the tables exist.

    Args:
        database_url: SQLAlchemy URL, e.g. sqlite+pysqlite:///./kblog.db
        echo:         Log every SQL statement (used when LOG_LEVEL=DEBUG)
    """
    # Import registers the tables on Base.metadata
    from kblog.models import blog  # noqa: F401

    url = make_url(database_url)
    kwargs = {"echo": echo}
    if url.get_backend_name() == "sqlite":
        kwargs["connect_args"] = {"check_same_thread": False}
        if url.database in (None, "", ":memory:"):
            kwargs["poolclass"] = StaticPool
    else:
        kwargs["pool_pre_ping"] = True

    engine = create_engine(url, **kwargs)
    Base.metadata.create_all(engine)
    logger.info("Database ready: %s", url.render_as_string(hide_password=True))
    return engine


def build_session_factory(engine: Engine) -> sessionmaker[Session]:
    """
    Session factory shared by the post and comment repositories.

    expire_on_commit=False: records are converted to entities after commit,
    without another round trip.
    """
    return sessionmaker(engine, expire_on_commit=False)
