"""Records read from the data store.

Rows come straight from a REST response, so every field except the post id
is optional and coerced leniently: ``null``, wrong types and blank strings all
collapse to the field default instead of failing validation.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Mapping, Optional

from pydantic import BaseModel, ConfigDict, field_validator


def _text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, (dict, list, tuple, set)):
        return ""
    return str(value).strip()


class MediaKind(str, Enum):
    IMAGE = "image"
    VIDEO = "video"


class _Record(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True)

    @classmethod
    def from_row(cls, row: Mapping[str, Any]):
        return cls.model_validate(dict(row))


class Post(_Record):
    id: str
    title: str = ""
    body: str = ""
    thumbnail_url: str = ""
    media_url: str = ""
    media_type: Optional[MediaKind] = None
    is_nsfw: bool = False
    is_spoiler: bool = False
    link_url: str = ""
    created_at: str = ""
    user_id: str = ""
    community_id: str = ""

    @field_validator("id", mode="before")
    @classmethod
    def _require_id(cls, value: Any) -> str:
        text = _text(value)
        if not text:
            raise ValueError("post id is required")
        return text

    @field_validator(
        "title",
        "thumbnail_url",
        "media_url",
        "link_url",
        "created_at",
        "user_id",
        "community_id",
        mode="before",
    )
    @classmethod
    def _coerce_text(cls, value: Any) -> str:
        return _text(value)

    @field_validator("body", mode="before")
    @classmethod
    def _coerce_body(cls, value: Any) -> str:
        # body keeps its inner whitespace; the card renders it pre-wrapped
        if value is None or isinstance(value, (dict, list, tuple, set)):
            return ""
        return str(value)

    @field_validator("media_type", mode="before")
    @classmethod
    def _coerce_media_type(cls, value: Any) -> Optional[MediaKind]:
        text = _text(value).lower()
        try:
            return MediaKind(text)
        except ValueError:
            return None

    @field_validator("is_nsfw", "is_spoiler", mode="before")
    @classmethod
    def _coerce_flag(cls, value: Any) -> bool:
        if isinstance(value, str):
            return value.strip().lower() in {"1", "true", "t", "yes"}
        return bool(value)


class Profile(_Record):
    id: str = ""
    username: str = ""
    display_name: str = ""
    full_name: str = ""
    avatar_url: str = ""

    @field_validator("*", mode="before")
    @classmethod
    def _coerce_text(cls, value: Any) -> str:
        return _text(value)


class Community(_Record):
    id: str = ""
    name: str = ""
    handle: str = ""
    icon_url: str = ""
    banner_url: str = ""
    description: str = ""

    @field_validator("*", mode="before")
    @classmethod
    def _coerce_text(cls, value: Any) -> str:
        return _text(value)


POST_FIELDS = (
    "id,title,body,thumbnail_url,media_url,media_type,is_nsfw,is_spoiler,"
    "link_url,created_at,user_id,community_id"
)
PROFILE_FIELDS = "id,username,display_name,full_name,avatar_url"
COMMUNITY_FIELDS = "id,name,handle,icon_url,banner_url,description"


__all__ = [
    "COMMUNITY_FIELDS",
    "Community",
    "MediaKind",
    "POST_FIELDS",
    "PROFILE_FIELDS",
    "Post",
    "Profile",
]
