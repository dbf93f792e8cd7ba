"""Request lifecycle of a preview page.

``validate -> fetch post -> fetch profile/community -> derive -> render``.
Failures on the post itself raise a :class:`~preview_server.errors.PreviewError`;
failures on the related records only degrade the page.
"""

from __future__ import annotations

import asyncio
import logging
import uuid
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

import httpx
from pydantic import ValidationError

from .errors import ConfigurationError, InvalidInput, NotFound, UpstreamError
from .models.config import PreviewSettings
from .models.post import COMMUNITY_FIELDS, POST_FIELDS, PROFILE_FIELDS, Community, Post, Profile
from .rendering.derive import build_bundle
from .rendering.page import PageRenderer
from .store.client import Lookup, RecordStore

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class LoadedPost:
    post: Post
    profile: Lookup
    community: Lookup

    def profile_record(self) -> Optional[Profile]:
        return Profile.from_row(self.profile.record) if self.profile.found else None

    def community_record(self) -> Optional[Community]:
        return Community.from_row(self.community.record) if self.community.found else None


class PreviewService:
    def __init__(
        self,
        settings: PreviewSettings,
        renderer: Optional[PageRenderer] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.settings = settings
        self.renderer = renderer or PageRenderer()
        self._transport = transport

    def validate_id(self, raw: Optional[str]) -> str:
        post_id = (raw or "").strip()
        if not post_id:
            raise InvalidInput("Missing post id")
        if self.settings.validate_ids:
            try:
                canonical = str(uuid.UUID(post_id))
            except ValueError as exc:
                raise InvalidInput("Invalid post id") from exc
            # uuid.UUID also accepts braces, urn: prefixes and bare hex
            if canonical != post_id.lower():
                raise InvalidInput("Invalid post id")
        return post_id

    def check_configuration(self) -> None:
        missing = self.settings.missing_required()
        if missing:
            raise ConfigurationError(f"Missing required setting: {', '.join(missing)}")

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            timeout=httpx.Timeout(self.settings.store_timeout),
            transport=self._transport,
        )

    async def load(self, post_id: str) -> LoadedPost:
        async with self._client() as client:
            store = RecordStore(client, self.settings.store_url, self.settings.store_key)
            try:
                result = await store.fetch_one("posts", {"id": post_id}, POST_FIELDS)
            except UpstreamError as exc:
                LOGGER.warning("Fetching post %s failed (upstream status %s)", post_id, exc.upstream_status)
                raise
            if result.record is None:
                raise NotFound(
                    "Post not found",
                    upstream_status=result.status_code,
                    upstream_body=result.body,
                )

            row = dict(result.record)
            if not str(row.get("id") or "").strip():
                row["id"] = post_id
            try:
                post = Post.from_row(row)
            except ValidationError as exc:
                raise UpstreamError(
                    "Data store returned an unreadable post",
                    upstream_status=result.status_code,
                    upstream_body=result.body,
                ) from exc

            profile, community = await asyncio.gather(
                self._related(store, "profiles", post.user_id, PROFILE_FIELDS),
                self._related(store, "communities", post.community_id, COMMUNITY_FIELDS),
            )
        return LoadedPost(post=post, profile=profile, community=community)

    async def _related(self, store: RecordStore, table: str, record_id: str, select: str) -> Lookup:
        if not record_id:
            return Lookup.skipped()
        return await store.lookup(table, {"id": record_id}, select)

    async def render(self, raw_id: Optional[str], now: Optional[datetime] = None) -> str:
        post_id = self.validate_id(raw_id)
        self.check_configuration()
        loaded = await self.load(post_id)
        bundle = build_bundle(
            loaded.post,
            loaded.profile_record(),
            loaded.community_record(),
            self.settings,
            now=now,
        )
        return self.renderer.render(bundle, self.settings)


__all__ = ["LoadedPost", "PreviewService"]
