"""API routers for the preview FastAPI application."""

from . import posts, status

__all__ = ["posts", "status"]
