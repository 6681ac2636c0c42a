"""Structured logging baseline and event taxonomy.

Event taxonomy (minimum set)::

    app_start            — application process starting
    config_loaded        — settings resolved successfully
    store_opened         — engine created, schema ensured, store reachable
    store_closed         — engine disposed at shutdown
    store_read_failed    — store lookup error
    store_write_failed   — store insert/update/delete error
    post_created         — new post inserted through the API
    post_replaced        — post title/content/author overwritten
    post_deleted         — delete request processed (found or not)
    posts_seeded         — batch of posts inserted directly into the store
    unknown_error        — unexpected exception reached the app boundary

Rules:
    - Never log database credentials.
    - Log post ids and content *lengths*, not raw content.

Usage::

    from blog_api.core.logging import log_event
    log_event(logger, "info", "post_deleted", post_id=post_id, deleted=True)
"""

import logging
import sys

# Canonical event names for grep-ability and observability.
EVENT_APP_START = "app_start"
EVENT_CONFIG_LOADED = "config_loaded"
EVENT_STORE_OPENED = "store_opened"
EVENT_STORE_CLOSED = "store_closed"
EVENT_STORE_READ_FAILED = "store_read_failed"
EVENT_STORE_WRITE_FAILED = "store_write_failed"
EVENT_POST_CREATED = "post_created"
EVENT_POST_REPLACED = "post_replaced"
EVENT_POST_DELETED = "post_deleted"
EVENT_POSTS_SEEDED = "posts_seeded"
EVENT_UNKNOWN_ERROR = "unknown_error"


_HANDLER_ATTR = "_blog_api"


def setup_logging(level: int = logging.INFO) -> None:
    """Configure root logger with a simple structured format.

    Safe to call multiple times — only adds the handler once.
    """
    root = logging.getLogger()
    root.setLevel(level)

    for h in root.handlers:
        if getattr(h, _HANDLER_ATTR, False):
            return

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        logging.Formatter(
            fmt="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    )
    setattr(handler, _HANDLER_ATTR, True)
    root.addHandler(handler)


def log_event(
    logger: logging.Logger,
    level: str,
    event_name: str,
    **kwargs: object,
) -> None:
    """Emit a structured log line with consistent ``event_name: key=value`` format.

    Parameters
    ----------
    logger:
        The logger instance (provides the component via ``logger.name``).
    level:
        Log level name — ``"info"``, ``"warning"``, ``"error"``, or ``"exception"``.
    event_name:
        Canonical event name (e.g. ``"store_write_failed"``).
    **kwargs:
        Arbitrary key-value pairs appended as ``key=value``.
    """
    parts = " ".join(f"{k}={v}" for k, v in kwargs.items())
    message = f"{event_name}: {parts}" if parts else event_name
    log_fn = getattr(logger, level, logger.info)
    log_fn(message)
