"""Document store adapter for blog posts.

The store is constructed explicitly, opened and closed by the application
lifespan, and handed to route handlers as a dependency. Each public method
runs in its own transaction and works on plain ``dict`` documents in the
stored shape (see :mod:`blog_api.models.post`). Lookups return ``None``
rather than raising when nothing matches.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator, Mapping
from contextlib import contextmanager
from typing import Any

from sqlalchemy import delete, func, select, update
from sqlalchemy.engine import Engine
from sqlalchemy.exc import OperationalError, SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from blog_api.core.logging import (
    EVENT_POSTS_SEEDED,
    EVENT_STORE_CLOSED,
    EVENT_STORE_OPENED,
    EVENT_STORE_READ_FAILED,
    EVENT_STORE_WRITE_FAILED,
    log_event,
)
from blog_api.core.settings import Settings
from blog_api.db.engine import DatabaseInitError, create_store_engine, init_db
from blog_api.models.post import parse_post_id
from blog_api.models.post_record import PostRecord, new_post_id, utc_now

logger = logging.getLogger(__name__)

REPLACEABLE_FIELDS = ("title", "content", "author")


class StoreError(Exception):
    """Raised when an underlying store operation fails."""

    def __init__(
        self, message: str, *, operation: str, retryable: bool = False,
    ) -> None:
        super().__init__(message)
        self.operation = operation
        self.retryable = retryable


def _to_store_error(exc: SQLAlchemyError, operation: str, *, write: bool) -> StoreError:
    """Categorize a SQLAlchemy failure; locked/busy databases are retryable."""
    msg = str(exc).lower()
    retryable = isinstance(exc, OperationalError) and (
        "locked" in msg or "busy" in msg
    )
    log_event(
        logger, "warning" if retryable else "error",
        EVENT_STORE_WRITE_FAILED if write else EVENT_STORE_READ_FAILED,
        operation=operation,
        retryable=retryable,
        error_type=type(exc).__name__,
    )
    return StoreError(
        f"Store operation '{operation}' failed: {type(exc).__name__}",
        operation=operation,
        retryable=retryable,
    )


def _document_id(doc: Mapping[str, Any]) -> str:
    """Canonical id for a document being inserted; mint one when absent.

    Raises:
        PostValidationError: If a supplied id is not a well-formed post id.
    """
    supplied = doc.get("id")
    if not supplied:
        return new_post_id()
    return parse_post_id(str(supplied))


class PostStore:
    """Post collection backed by a SQLAlchemy engine."""

    def __init__(self, database_url: str, *, echo: bool = False) -> None:
        self._database_url = database_url
        self._echo = echo
        self._engine: Engine | None = None
        self._session_factory: sessionmaker[Session] | None = None

    @classmethod
    def from_settings(cls, settings: Settings) -> PostStore:
        return cls(settings.database_url, echo=settings.debug)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    @property
    def is_open(self) -> bool:
        return self._engine is not None

    def open(self) -> None:
        """Create the engine, verify connectivity and ensure the schema.

        Calling ``open`` on an already open store is a no-op.

        Raises:
            StoreError: If the database cannot be reached or initialized.
        """
        if self._engine is not None:
            return
        engine = create_store_engine(self._database_url, echo=self._echo)
        try:
            init_db(engine)
        except DatabaseInitError as exc:
            engine.dispose()
            raise StoreError(str(exc), operation="open") from exc
        self._engine = engine
        self._session_factory = sessionmaker(bind=engine, expire_on_commit=False)
        log_event(
            logger, "info", EVENT_STORE_OPENED,
            url=engine.url.render_as_string(hide_password=True),
        )

    def close(self) -> None:
        """Dispose of the engine. Safe to call on a closed store."""
        if self._engine is None:
            return
        self._engine.dispose()
        self._engine = None
        self._session_factory = None
        log_event(logger, "info", EVENT_STORE_CLOSED)

    @contextmanager
    def _session(self, operation: str, *, write: bool = False) -> Iterator[Session]:
        if self._session_factory is None:
            raise StoreError(
                f"Post store is not open (operation '{operation}')",
                operation=operation,
            )
        session = self._session_factory()
        try:
            yield session
            if write:
                session.commit()
        except SQLAlchemyError as exc:
            session.rollback()
            raise _to_store_error(exc, operation, write=write) from exc
        finally:
            session.close()

    # ------------------------------------------------------------------
    # Collection operations
    # ------------------------------------------------------------------

    def insert_one(self, doc: Mapping[str, Any]) -> dict[str, Any]:
        """Insert one post document; the store mints ``id`` and ``created``."""
        return self.insert_many([doc])[0]

    def insert_many(self, docs: Iterable[Mapping[str, Any]]) -> list[dict[str, Any]]:
        """Insert post documents in one transaction and return them as stored.

        An ``id`` already present on a document is kept in canonical form
        (fixtures may seed known ids); ``created`` is always stamped at
        insertion.

        Raises:
            PostValidationError: If a supplied id is malformed.
        """
        with self._session("insert_many", write=True) as session:
            records = [
                PostRecord(
                    id=_document_id(doc),
                    title=doc["title"],
                    content=doc["content"],
                    author=dict(doc["author"]),
                    created=utc_now(),
                )
                for doc in docs
            ]
            session.add_all(records)
            session.flush()
            inserted = [record.to_document() for record in records]
        if len(inserted) > 1:
            log_event(logger, "info", EVENT_POSTS_SEEDED, count=len(inserted))
        return inserted

    def find_all(self) -> list[dict[str, Any]]:
        """Return every post in insertion order."""
        with self._session("find_all") as session:
            rows = session.scalars(
                select(PostRecord).order_by(PostRecord.created, PostRecord.id)
            ).all()
            return [row.to_document() for row in rows]

    def find_by_id(self, post_id: str) -> dict[str, Any] | None:
        """Return the post with *post_id*, or ``None`` when absent."""
        with self._session("find_by_id") as session:
            row = session.get(PostRecord, post_id)
            return row.to_document() if row is not None else None

    def update_fields_by_id(
        self, post_id: str, fields: Mapping[str, Any],
    ) -> dict[str, Any] | None:
        """Overwrite ``title``, ``content`` and ``author`` of one post.

        All three fields are required and are written in a single UPDATE;
        ``id`` and ``created`` are never touched. Returns the document as
        persisted, or ``None`` when no post has *post_id*.

        Raises:
            ValueError: If any replaceable field is missing from *fields*.
        """
        missing = [name for name in REPLACEABLE_FIELDS if name not in fields]
        if missing:
            raise ValueError(f"update_fields_by_id requires fields: {missing}")

        with self._session("update_fields_by_id", write=True) as session:
            result = session.execute(
                update(PostRecord)
                .where(PostRecord.id == post_id)
                .values(
                    title=fields["title"],
                    content=fields["content"],
                    author=dict(fields["author"]),
                )
                .execution_options(synchronize_session=False)
            )
            if result.rowcount == 0:
                return None
            row = session.get(PostRecord, post_id, populate_existing=True)
            updated = row.to_document() if row is not None else None
        return updated

    def delete_by_id(self, post_id: str) -> bool:
        """Remove the post with *post_id*. Returns whether a post was removed."""
        with self._session("delete_by_id", write=True) as session:
            result = session.execute(
                delete(PostRecord).where(PostRecord.id == post_id)
            )
            deleted = result.rowcount > 0
        return deleted

    def count(self) -> int:
        with self._session("count") as session:
            return session.scalar(select(func.count()).select_from(PostRecord)) or 0

    def drop_all(self) -> int:
        """Remove every post. Returns the number of posts removed."""
        with self._session("drop_all", write=True) as session:
            result = session.execute(delete(PostRecord))
            removed = result.rowcount
        return removed
