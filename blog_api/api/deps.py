"""FastAPI dependencies shared by the route modules."""

from fastapi import Request

from blog_api.services.post_store import PostStore


def get_store(request: Request) -> PostStore:
    """Return the post store the application was composed with."""
    return request.app.state.store
