"""Pydantic models for blog posts: author value type, write payload, public shape.

Stored shape (what the post store holds)::

    {"id", "title", "content", "author": {"firstName", "lastName"}, "created"}

Public shape (what API clients receive)::

    {"id", "title", "content", "author": "<firstName> <lastName>", "created"}
"""

import re
from collections.abc import Mapping
from datetime import UTC, datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

_POST_ID_PATTERN = re.compile(r"^[0-9a-f]{32}$")


class PostValidationError(Exception):
    """Raised when post input is malformed or incomplete."""

    def __init__(self, messages: list[str]) -> None:
        self.messages = messages
        super().__init__("; ".join(messages))


class PostNotFoundError(Exception):
    """Raised when no post exists for a requested id."""


def _strip(v: object) -> object:
    if isinstance(v, str):
        return v.strip()
    return v


class Author(BaseModel):
    """A post's author. Both names are required; there is no partial author."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    first_name: str = Field(..., alias="firstName", min_length=1)
    last_name: str = Field(..., alias="lastName", min_length=1)

    @field_validator("first_name", "last_name", mode="before")
    @classmethod
    def strip_name(cls, v: object) -> object:
        return _strip(v)

    @property
    def display_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    def to_document(self) -> dict[str, str]:
        """Nested document shape kept by the store."""
        return {"firstName": self.first_name, "lastName": self.last_name}


class PostWrite(BaseModel):
    """Fields a client supplies when creating or replacing a post.

    Unknown keys (including ``id`` and ``created``) are ignored here; the
    replace handler checks ``id`` separately.
    """

    title: str = Field(..., min_length=1)
    content: str = Field(..., min_length=1)
    author: Author

    @field_validator("title", mode="before")
    @classmethod
    def strip_title(cls, v: object) -> object:
        return _strip(v)

    @field_validator("content")
    @classmethod
    def content_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("content must not be blank")
        return v


class PostPublic(BaseModel):
    """Public representation returned by every post endpoint."""

    id: str
    title: str
    content: str
    author: str
    created: datetime


class PostList(BaseModel):
    """Envelope for ``GET /posts``."""

    posts: list[PostPublic]


def _error_messages(exc: ValidationError) -> list[str]:
    messages = []
    for err in exc.errors():
        loc = ".".join(str(part) for part in err["loc"]) or "body"
        messages.append(f"{loc}: {err['msg']}")
    return messages


def validate_for_create_or_replace(payload: object) -> dict[str, Any]:
    """Validate a create/replace body and return the normalized stored shape.

    Raises:
        PostValidationError: If ``title``, ``content``, ``author.firstName``
            or ``author.lastName`` is missing or empty.
    """
    if not isinstance(payload, Mapping):
        raise PostValidationError(["body: must be a JSON object"])
    try:
        post = PostWrite.model_validate(payload)
    except ValidationError as exc:
        raise PostValidationError(_error_messages(exc)) from exc
    return {
        "title": post.title,
        "content": post.content,
        "author": post.author.to_document(),
    }


def parse_post_id(raw: str) -> str:
    """Return the canonical form of *raw* or raise if it is not a post id.

    Raises:
        PostValidationError: If *raw* is not 32 hex characters.
    """
    candidate = raw.strip().lower()
    if not _POST_ID_PATTERN.match(candidate):
        raise PostValidationError([f"id: malformed post id '{raw}'"])
    return candidate


def to_public_representation(doc: Mapping[str, Any]) -> PostPublic:
    """Map a stored post document to its public shape.

    Stored documents are not re-validated; the author is rendered as stored.
    """
    created: datetime = doc["created"]
    if created.tzinfo is None:
        # SQLite drops tzinfo; values are always written in UTC
        created = created.replace(tzinfo=UTC)
    author = doc["author"]
    return PostPublic(
        id=doc["id"],
        title=doc["title"],
        content=doc["content"],
        author=f"{author['firstName']} {author['lastName']}",
        created=created,
    )
