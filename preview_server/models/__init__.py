"""Pydantic models for settings and data-store records."""

from .config import PreviewSettings
from .post import Community, MediaKind, Post, Profile

__all__ = ["Community", "MediaKind", "Post", "PreviewSettings", "Profile"]
