"""
KBlog Backend — In-Memory Repository
=====================================

What:  Generic ordered-dict repository, instantiated once for Post and once
       for Comment.
Why:   The default storage backend: no external service, O(1) lookup and
       removal by id, insertion order preserved for listing.
How:   OrderedDict keyed by id plus an integer counter, both guarded by one
       re-entrant lock per instance.

Identity Assignment:
    - save() of an entity without id takes the next counter value
    - The counter only moves forward: removed ids are never handed out again,
      and clear() drops records without resetting it
    - save() of an entity WITH id upserts at that id; the counter is moved
      past it so a later assigned id cannot collide

Concurrency:
    FastAPI runs the (sync) route handlers on a thread pool, so two requests
    can hit the same repository at once. Every operation, reads included,
    takes the instance lock: listing never sees a half-applied save and two
    concurrent creates never receive the same id.
"""

import logging
import threading
from collections import OrderedDict
from typing import Any, Dict, Generic, List, Optional, Type

from kblog.repositories.base import EntityT

logger = logging.getLogger(__name__)


class InMemoryRepository(Generic[EntityT]):
    """
    Thread-safe in-memory store for one entity type.

    Args:
        entity_type: The pydantic model stored here (Post or Comment); used
                     for log messages and by get_by_foreign_key validation.
        start_id:    First id handed out (default 1).
    """

    def __init__(self, entity_type: Type[EntityT], start_id: int = 1):
        self.entity_type = entity_type
        self._records: "OrderedDict[int, EntityT]" = OrderedDict()
        self._next_id = start_id
        self._lock = threading.RLock()
        self._name = entity_type.__name__.lower()

    def get_all(self) -> List[EntityT]:
        with self._lock:
            return list(self._records.values())

    def get_by_id(self, entity_id: int) -> Optional[EntityT]:
        with self._lock:
            return self._records.get(entity_id)

    def save(self, entity: EntityT) -> EntityT:
        with self._lock:
            entity_id = entity.id
            if entity_id is None:
                entity_id = self._next_id
                entity = entity.model_copy(update={"id": entity_id})
            # Keep the counter strictly ahead of every id ever stored
            self._next_id = max(self._next_id, entity_id + 1)
            self._records[entity_id] = entity
        logger.debug("Saved %s %d", self._name, entity_id)
        return entity

    def remove(self, entity_id: int) -> bool:
        with self._lock:
            removed = self._records.pop(entity_id, None) is not None
        if removed:
            logger.info("Removed %s %d", self._name, entity_id)
        return removed

    def get_by_foreign_key(self, key: str, value: Any) -> List[EntityT]:
        """
        Linear scan for records whose `key` field equals `value`.

        Used on the comment repository as get_by_foreign_key("post_id", id).
        No secondary index is kept; the scan is O(n) over all records.

        Raises:
            ValueError: `key` is not a field of the stored entity type
        """
        fields: Dict[str, Any] = self.entity_type.model_fields
        if key not in fields:
            raise ValueError(f"{self.entity_type.__name__} has no field '{key}'")
        with self._lock:
            return [record for record in self._records.values()
                    if getattr(record, key) == value]

    def count(self) -> int:
        with self._lock:
            return len(self._records)

    def clear(self) -> None:
        """Drop every record. The id counter is kept, so ids stay unique."""
        with self._lock:
            self._records.clear()
