"""
KBlog Backend — Repository Protocols
=====================================

What:  The capability interface every repository offers.
How:   typing.Protocol, so the in-memory and SQL implementations share a
       contract without sharing a base class.

Absence is reported by return value (None from get_by_id, False from
remove). Translating absence into an HTTP status is the route handler's job.
"""

from typing import Any, List, Optional, Protocol, TypeVar

EntityT = TypeVar("EntityT")


class Repository(Protocol[EntityT]):
    """CRUD contract shared by the post and comment repositories."""

    def get_all(self) -> List[EntityT]:
        """All live records in insertion order."""
        ...

    def get_by_id(self, entity_id: int) -> Optional[EntityT]:
        """The record with this id, or None."""
        ...

    def save(self, entity: EntityT) -> EntityT:
        """Insert (assigning an id) or upsert at entity.id; returns the stored record."""
        ...

    def remove(self, entity_id: int) -> bool:
        """Delete by id; True only if a record was actually removed."""
        ...

    def count(self) -> int:
        ...

    def clear(self) -> None:
        ...


class RelationalRepository(Repository[EntityT], Protocol[EntityT]):
    """Repository whose records point at another entity through a key field."""

    def get_by_foreign_key(self, key: str, value: Any) -> List[EntityT]:
        """Records whose `key` field equals `value`, in insertion order."""
        ...
