"""Turn data-store records into the fields shown on a preview page."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Iterable, List, Optional, Tuple
from urllib.parse import quote

from dateutil import parser as date_parser

from ..models.config import PreviewSettings
from ..models.post import Community, MediaKind, Post, Profile

DESCRIPTION_LIMIT = 160
ELLIPSIS = "…"
TAG_SEPARATOR = " · "
DEFAULT_USERNAME = "User"

_MARKUP = re.compile(r"<[^>]*>")
_WHITESPACE = re.compile(r"\s+")

TIME_UNITS: Tuple[Tuple[str, int], ...] = (
    ("year", 31536000),
    ("month", 2592000),
    ("day", 86400),
    ("hour", 3600),
    ("minute", 60),
)


@dataclass(frozen=True)
class Hero:
    kind: MediaKind
    url: str
    poster: str

    @property
    def is_video(self) -> bool:
        return self.kind is MediaKind.VIDEO


@dataclass(frozen=True)
class PreviewBundle:
    """Everything the page template needs, already resolved to plain strings."""

    post_id: str
    title: str
    description: str
    body: str
    hero: Hero
    og_image: str
    username: str
    user_avatar: str
    community_name: str
    community_handle: str
    community_icon: str
    community_url: str
    time_ago: str
    deep_link: str
    page_url: str
    store_url: str
    cta_label: str
    cta_href: str
    tags: List[str] = field(default_factory=list)


def http_url(value: Optional[str]) -> str:
    """Return ``value`` trimmed when it is an absolute http(s) URL, else ``""``."""

    text = (value or "").strip()
    if text.startswith("http://") or text.startswith("https://"):
        return text
    return ""


def first_non_empty(values: Iterable[Optional[str]], default: str = "") -> str:
    for value in values:
        text = (value or "").strip()
        if text:
            return text
    return default


def strip_and_trim(text: str, max_length: int = DESCRIPTION_LIMIT) -> str:
    """Drop markup, collapse whitespace and cut to ``max_length`` characters.

    A cut result ends in an ellipsis and is exactly ``max_length`` long.
    """

    cleaned = _WHITESPACE.sub(" ", _MARKUP.sub(" ", text)).strip()
    if len(cleaned) <= max_length:
        return cleaned
    return cleaned[: max_length - 1] + ELLIPSIS


def content_tags(post: Post) -> List[str]:
    tags: List[str] = []
    if post.is_nsfw:
        tags.append("NSFW")
    if post.is_spoiler:
        tags.append("Spoiler")
    return tags


def build_description(post: Post, app_name: str) -> str:
    tags = content_tags(post)
    prefix = f"[{TAG_SEPARATOR.join(tags)}] " if tags else ""
    text = strip_and_trim(post.body) if post.body.strip() else ""
    if not text:
        text = f"Bekijk deze post op {app_name}."
    return prefix + text


def pick_hero(post: Post, default_image: str) -> Hero:
    media_url = http_url(post.media_url)
    thumbnail = http_url(post.thumbnail_url)

    if post.media_type is MediaKind.VIDEO and media_url:
        return Hero(MediaKind.VIDEO, media_url, thumbnail or default_image)
    if post.media_type is MediaKind.IMAGE and media_url:
        return Hero(MediaKind.IMAGE, media_url, media_url)
    if thumbnail:
        return Hero(MediaKind.IMAGE, thumbnail, thumbnail)
    return Hero(MediaKind.IMAGE, default_image, default_image)


def parse_timestamp(value: Optional[str]) -> Optional[datetime]:
    text = (value or "").strip()
    if not text:
        return None
    try:
        parsed = date_parser.isoparse(text)
        if parsed.tzinfo is None:
            parsed = parsed.replace(tzinfo=timezone.utc)
        return parsed.astimezone(timezone.utc)
    except (ValueError, OverflowError):
        return None


def time_ago(value: Optional[str], now: Optional[datetime] = None) -> str:
    """Render ``value`` as ``"3 hours ago"``; ``""`` when it cannot be parsed."""

    created = parse_timestamp(value)
    if created is None:
        return ""
    now = now or datetime.now(timezone.utc)
    seconds = max(0, int((now - created).total_seconds()))
    for name, size in TIME_UNITS:
        count = seconds // size
        if count >= 1:
            return f"{count} {name}{'' if count == 1 else 's'} ago"
    return "just now"


def deep_link(app_scheme: str, post_id: str) -> str:
    return f"{app_scheme}://p/{quote(post_id, safe='')}"


def page_url(site_url: str, post_id: str) -> str:
    return f"{site_url}/p/{quote(post_id, safe='')}"


def build_bundle(
    post: Post,
    profile: Optional[Profile],
    community: Optional[Community],
    settings: PreviewSettings,
    now: Optional[datetime] = None,
) -> PreviewBundle:
    profile = profile or Profile()
    community = community or Community()

    hero = pick_hero(post, settings.default_image_url)
    link = deep_link(settings.app_scheme, post.id)
    store_url = settings.store_link

    tags = content_tags(post)
    if post.media_type is not None:
        tags.append(post.media_type.value)
    if post.link_url:
        tags.append("Link")

    handle = community.handle
    return PreviewBundle(
        post_id=post.id,
        title=post.title or settings.app_name,
        description=build_description(post, settings.app_name),
        body=post.body,
        hero=hero,
        og_image=hero.poster or settings.default_image_url,
        username=first_non_empty(
            (profile.display_name, profile.username, profile.full_name),
            DEFAULT_USERNAME,
        ),
        user_avatar=http_url(profile.avatar_url) or settings.default_avatar_url,
        community_name=community.name or settings.app_name,
        community_handle=handle,
        community_icon=http_url(community.icon_url) or settings.default_community_icon_url,
        community_url=f"{settings.site_url}/{handle.lstrip('/')}" if handle else settings.site_url,
        time_ago=time_ago(post.created_at, now),
        deep_link=link,
        page_url=page_url(settings.site_url, post.id),
        store_url=store_url,
        cta_label="Get" if store_url else "Open",
        cta_href=store_url or link,
        tags=tags,
    )


__all__ = [
    "DESCRIPTION_LIMIT",
    "Hero",
    "PreviewBundle",
    "build_bundle",
    "build_description",
    "content_tags",
    "deep_link",
    "first_non_empty",
    "http_url",
    "page_url",
    "parse_timestamp",
    "pick_hero",
    "strip_and_trim",
    "time_ago",
]
