"""SQLAlchemy table backing the ``posts`` document collection."""

import uuid
from datetime import UTC, datetime

from sqlalchemy import JSON, DateTime, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from blog_api.db.base import Base


def new_post_id() -> str:
    """Mint a fresh post identifier (UUID4, 32 lowercase hex chars)."""
    return uuid.uuid4().hex


def utc_now() -> datetime:
    return datetime.now(UTC)


class PostRecord(Base):
    """One blog post document. ``author`` stays a nested JSON document."""

    __tablename__ = "posts"
    __table_args__ = (
        Index("ix_posts_created", "created"),
    )

    id: Mapped[str] = mapped_column(
        String(32), primary_key=True, default=new_post_id,
    )
    title: Mapped[str] = mapped_column(Text, nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    author: Mapped[dict[str, str]] = mapped_column(JSON, nullable=False)
    created: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utc_now,
    )

    def to_document(self) -> dict[str, object]:
        """Return the stored shape as a plain dict."""
        return {
            "id": self.id,
            "title": self.title,
            "content": self.content,
            "author": dict(self.author),
            "created": self.created,
        }
