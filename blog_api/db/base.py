"""SQLAlchemy declarative base for stored documents."""

from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """Base class for document tables."""
