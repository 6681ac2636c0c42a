"""CRUD endpoints for blog posts.

Store failures are not caught here: :class:`StoreError` propagates to the
application-level handler, which maps it to a 5xx response.
"""

import logging
from typing import Any

from fastapi import APIRouter, Body, Depends, HTTPException, Response

from blog_api.api.deps import get_store
from blog_api.core.logging import (
    EVENT_POST_CREATED,
    EVENT_POST_DELETED,
    EVENT_POST_REPLACED,
    log_event,
)
from blog_api.models.post import (
    PostList,
    PostNotFoundError,
    PostPublic,
    PostValidationError,
    parse_post_id,
    to_public_representation,
    validate_for_create_or_replace,
)
from blog_api.services.post_store import PostStore

logger = logging.getLogger(__name__)

router = APIRouter()


def _check_body_id(post_id: str, body: Any) -> None:
    """The replace body must carry the same id as the path."""
    body_id = body.get("id") if isinstance(body, dict) else None
    if not isinstance(body_id, str) or body_id.strip().lower() != post_id:
        raise PostValidationError(
            [f"id: request path id ({post_id}) and body id ({body_id}) must match"]
        )


def _require(doc: dict[str, Any] | None, post_id: str) -> dict[str, Any]:
    if doc is None:
        raise PostNotFoundError(f"Post not found: {post_id}")
    return doc


@router.get("/posts", response_model=PostList)
def list_posts(store: PostStore = Depends(get_store)) -> PostList:
    """Return every post, wrapped in a ``posts`` envelope."""
    return PostList(
        posts=[to_public_representation(doc) for doc in store.find_all()],
    )


@router.get("/posts/{post_id}", response_model=PostPublic)
def get_post(post_id: str, store: PostStore = Depends(get_store)) -> PostPublic:
    """Return a single post by id."""
    try:
        post_id = parse_post_id(post_id)
        doc = _require(store.find_by_id(post_id), post_id)
    except PostValidationError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    except PostNotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc))
    return to_public_representation(doc)


@router.post("/posts", response_model=PostPublic, status_code=201)
def create_post(
    body: Any = Body(...), store: PostStore = Depends(get_store),
) -> PostPublic:
    """Create a post; the store assigns ``id`` and ``created``."""
    try:
        fields = validate_for_create_or_replace(body)
    except PostValidationError as exc:
        raise HTTPException(status_code=400, detail=str(exc))

    doc = store.insert_one(fields)
    log_event(
        logger, "info", EVENT_POST_CREATED,
        post_id=doc["id"], content_len=len(doc["content"]),
    )
    return to_public_representation(doc)


@router.put("/posts/{post_id}", response_model=PostPublic, status_code=201)
def replace_post(
    post_id: str,
    body: Any = Body(...),
    store: PostStore = Depends(get_store),
) -> PostPublic:
    """Overwrite title, content and author of an existing post.

    The post must already exist; this endpoint never creates posts.
    """
    try:
        post_id = parse_post_id(post_id)
        _check_body_id(post_id, body)
        fields = validate_for_create_or_replace(body)
        doc = _require(store.update_fields_by_id(post_id, fields), post_id)
    except PostValidationError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    except PostNotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc))

    log_event(
        logger, "info", EVENT_POST_REPLACED,
        post_id=post_id, content_len=len(doc["content"]),
    )
    return to_public_representation(doc)


@router.delete("/posts/{post_id}", status_code=204)
def delete_post(post_id: str, store: PostStore = Depends(get_store)) -> Response:
    """Delete a post. Deleting an absent post still succeeds."""
    try:
        post_id = parse_post_id(post_id)
    except PostValidationError as exc:
        raise HTTPException(status_code=400, detail=str(exc))

    deleted = store.delete_by_id(post_id)
    log_event(logger, "info", EVENT_POST_DELETED, post_id=post_id, deleted=deleted)
    return Response(status_code=204)
