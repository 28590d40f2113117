"""
KBlog Backend — Post / Comment SQLAlchemy Models
=================================================

What:  ORM tables backing the "sql" storage backend.
Why:   Maps entity records to rows; the repository converts between these
       records and the pydantic Post / Comment entities.

Table Design Rationale:
    - Integer primary key with sqlite_autoincrement: SQLite then never hands
      out an id that was used before, even after the row is deleted
    - comments.post_id is a plain indexed integer, NOT a ForeignKey: comments
      may point at posts that do not exist, and deleting a post leaves its
      comments in place
    - created_at is ISO 8601 text (IsoTimestamp), so an offset-aware value
      reads back with its offset
"""

from datetime import datetime
from typing import Optional

from sqlalchemy import Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.types import TypeDecorator

from kblog.database import Base


class IsoTimestamp(TypeDecorator):
    """
    Datetime stored as ISO 8601 text, offset included.

    SQLite has no timezone-aware column type: DateTime(timezone=True) drops
    the offset and hands back a naive value. Keeping the isoformat() text
    returns exactly what was stored, naive or aware.
    """

    impl = String(40)
    cache_ok = True

    def process_bind_param(self, value: Optional[datetime], dialect) -> Optional[str]:
        return value.isoformat() if value is not None else None

    def process_result_value(self, value: Optional[str], dialect) -> Optional[datetime]:
        return datetime.fromisoformat(value) if value is not None else None


class PostRecord(Base):
    """A row of the posts table."""

    __tablename__ = "posts"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column(Text, nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(IsoTimestamp, nullable=False)

    __table_args__ = {"sqlite_autoincrement": True}

    def __repr__(self) -> str:
        return f"<PostRecord(id={self.id}, title='{self.title}')>"


class CommentRecord(Base):
    """A row of the comments table."""

    __tablename__ = "comments"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    post_id: Mapped[int] = mapped_column(Integer, nullable=False)
    author: Mapped[str] = mapped_column(Text, nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(IsoTimestamp, nullable=False)

    # Speeds up GET /posts/{id}/comments
    __table_args__ = (
        Index("idx_comments_post_id", "post_id"),
        {"sqlite_autoincrement": True},
    )

    def __repr__(self) -> str:
        return f"<CommentRecord(id={self.id}, post_id={self.post_id})>"
