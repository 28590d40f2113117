"""
KBlog Backend — SQLAlchemy Repository
======================================

What:  Repository backed by an ORM table, used when STORAGE_BACKEND=sql.
Why:   Same contract as InMemoryRepository, so routes and tests do not care
       which backend the BlogStore was built with.
How:   One short session per operation from the shared sessionmaker; rows
       are converted to frozen pydantic entities before leaving the method.

Ordering:
    get_all() and get_by_foreign_key() order by id. Ids are assigned in
    insertion order, so this matches insertion order except when a caller
    upserts with an explicit, smaller id.

Error Handling:
    Any SQLAlchemyError is logged with its details and re-raised as
    StorageError (generic 500 for the client).
"""

import logging
import threading
from typing import Any, Callable, Generic, List, Optional, Type, TypeVar

from sqlalchemy import delete, func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from kblog.database import Base
from kblog.exceptions import StorageError
from kblog.repositories.base import EntityT

logger = logging.getLogger(__name__)

RecordT = TypeVar("RecordT", bound=Base)


class SqlRepository(Generic[EntityT, RecordT]):
    """
    SQL-backed store for one entity type.

    Args:
        session_factory: sessionmaker shared with the other repository
        entity_type:     pydantic model returned to callers (Post, Comment)
        record_type:     ORM class of the table (PostRecord, CommentRecord)
        lock:            Lock shared by every repository on the same engine.
                         An in-memory SQLite engine has one connection, so
                         posts and comments must not open transactions on it
                         at the same time.
    """

    def __init__(
        self,
        session_factory: Callable[[], Session],
        entity_type: Type[EntityT],
        record_type: Type[RecordT],
        lock: Optional["threading.RLock"] = None,
    ):
        self._session_factory = session_factory
        self.entity_type = entity_type
        self.record_type = record_type
        self._fields = list(entity_type.model_fields)
        self._lock = lock if lock is not None else threading.RLock()
        self._name = entity_type.__name__.lower()

    # ── Conversion ────────────────────────────────────────────────────────

    def _to_entity(self, record: RecordT) -> EntityT:
        return self.entity_type(**{name: getattr(record, name) for name in self._fields})

    def _to_record(self, entity: EntityT) -> RecordT:
        values = entity.model_dump(exclude={"id"} if entity.id is None else None)
        return self.record_type(**values)

    def _run(self, operation: str, fn: Callable[[Session], Any]) -> Any:
        """Run `fn` in a committed session, wrapping database failures."""
        with self._lock:
            try:
                with self._session_factory() as session:
                    with session.begin():
                        return fn(session)
            except SQLAlchemyError as e:
                logger.error("Storage error during %s on %s: %s", operation, self._name, e)
                raise StorageError(
                    context={
                        "operation": operation,
                        "entity": self._name,
                        "original_error": type(e).__name__,
                    },
                ) from e

    # ── Repository contract ───────────────────────────────────────────────

    def get_all(self) -> List[EntityT]:
        def query(session: Session) -> List[EntityT]:
            rows = session.scalars(select(self.record_type).order_by(self.record_type.id))
            return [self._to_entity(row) for row in rows]
        return self._run("get_all", query)

    def get_by_id(self, entity_id: int) -> Optional[EntityT]:
        def query(session: Session) -> Optional[EntityT]:
            record = session.get(self.record_type, entity_id)
            return self._to_entity(record) if record is not None else None
        return self._run("get_by_id", query)

    def save(self, entity: EntityT) -> EntityT:
        def write(session: Session) -> EntityT:
            record = self._to_record(entity)
            if entity.id is None:
                session.add(record)
            else:
                record = session.merge(record)
            session.flush()  # Assigns the autoincrement id
            return self._to_entity(record)
        saved = self._run("save", write)
        logger.debug("Saved %s %d", self._name, saved.id)
        return saved

    def remove(self, entity_id: int) -> bool:
        def write(session: Session) -> bool:
            result = session.execute(
                delete(self.record_type).where(self.record_type.id == entity_id)
            )
            return result.rowcount > 0
        removed = self._run("remove", write)
        if removed:
            logger.info("Removed %s %d", self._name, entity_id)
        return removed

    def get_by_foreign_key(self, key: str, value: Any) -> List[EntityT]:
        """
        Records whose `key` column equals `value`, ordered by id.

        Raises:
            ValueError: `key` is not a field of the stored entity type
        """
        if key not in self._fields:
            raise ValueError(f"{self.entity_type.__name__} has no field '{key}'")
        column = getattr(self.record_type, key)

        def query(session: Session) -> List[EntityT]:
            rows = session.scalars(
                select(self.record_type).where(column == value).order_by(self.record_type.id)
            )
            return [self._to_entity(row) for row in rows]
        return self._run("get_by_foreign_key", query)

    def count(self) -> int:
        return self._run(
            "count",
            lambda session: session.scalar(select(func.count()).select_from(self.record_type)),
        )

    def clear(self) -> None:
        """Delete every row. AUTOINCREMENT keeps counting, so ids stay unique."""
        self._run("clear", lambda session: session.execute(delete(self.record_type)))
