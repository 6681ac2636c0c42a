"""SQLAlchemy engine construction for the post store."""

import logging

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.pool import StaticPool

from blog_api.db.base import Base

logger = logging.getLogger(__name__)


class DatabaseInitError(Exception):
    """Raised when the database cannot be initialized."""


def create_store_engine(database_url: str, *, echo: bool = False) -> Engine:
    """Build an engine for *database_url*.

    SQLite connections are shared across FastAPI's worker threads, and an
    in-memory SQLite database must live on a single connection.
    """
    url = make_url(database_url)
    kwargs: dict[str, object] = {"echo": echo}
    if url.get_backend_name() == "sqlite":
        kwargs["connect_args"] = {"check_same_thread": False}
        if url.database in (None, "", ":memory:"):
            kwargs["poolclass"] = StaticPool
    return create_engine(url, **kwargs)


def init_db(engine: Engine) -> None:
    """Verify the database is reachable and create missing tables.

    Raises :class:`DatabaseInitError` with actionable guidance on failure.
    """
    safe_url = engine.url.render_as_string(hide_password=True)
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        Base.metadata.create_all(engine)
    except Exception as exc:
        msg = (
            f"Cannot open database at '{safe_url}': {exc}. "
            f"Check file permissions or set APP_DB_PATH to a writable location."
        )
        logger.error("db_init_failed: %s", msg)
        raise DatabaseInitError(msg) from exc
    logger.info("db_init_verified: url=%s", safe_url)
