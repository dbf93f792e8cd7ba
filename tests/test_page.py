from __future__ import annotations

from datetime import datetime, timezone

from fakes import make_settings
from preview_server.models.post import Community, Post, Profile
from preview_server.rendering.derive import build_bundle
from preview_server.rendering.page import PageRenderer

NOW = datetime(2024, 6, 1, 12, 0, 0, tzinfo=timezone.utc)


def _render(post: Post, profile=None, community=None, **settings_overrides) -> str:
    settings = make_settings(**settings_overrides)
    bundle = build_bundle(post, profile, community, settings, now=NOW)
    return PageRenderer().render(bundle, settings)


def test_rendering_is_deterministic() -> None:
    post = Post(id="p1", title="Same", body="Body", created_at="2024-06-01T11:00:00Z")
    profile = Profile(display_name="Sam")
    community = Community(name="Cats", handle="/cats")

    assert _render(post, profile, community) == _render(post, profile, community)


def test_video_hero_renders_video_element() -> None:
    post = Post(
        id="p1",
        media_type="video",
        media_url="https://cdn.example.test/v.mp4",
        thumbnail_url="https://cdn.example.test/t.jpg",
    )

    html = _render(post)

    assert 'poster="https://cdn.example.test/t.jpg" src="https://cdn.example.test/v.mp4"></video>' in html
    assert 'alt="Post media"' not in html
    assert '<meta property="og:image" content="https://cdn.example.test/t.jpg" />' in html


def test_relative_time_is_omitted_when_unknown() -> None:
    html = _render(Post(id="p1", created_at="yesterday-ish"))

    assert "time-ago" not in html


def test_relative_time_is_shown() -> None:
    html = _render(Post(id="p1", created_at="2024-06-01T11:00:00Z"))

    assert '<span class="muted time-ago">1 hour ago</span>' in html


def test_status_pills_and_tag_prefix() -> None:
    post = Post(id="p1", body="Careful", is_nsfw=True, is_spoiler=True, link_url="https://x.test")

    html = _render(post)

    assert '<span class="pill danger">NSFW</span>' in html
    assert '<span class="pill danger">Spoiler</span>' in html
    assert '<span class="pill">Link</span>' in html
    assert 'content="[NSFW · Spoiler] Careful"' in html


def test_attribute_values_are_escaped() -> None:
    post = Post(id="p1", thumbnail_url='https://cdn.example.test/a.jpg?x="><script>')
    community = Community(name="A & B", handle='/"quoted"')

    html = _render(post, community=community)

    assert "<script>x" not in html
    assert 'src="https://cdn.example.test/a.jpg?x=&#34;&gt;&lt;script&gt;"' in html
    assert "A &amp; B" in html
    assert "&#34;quoted&#34;" in html


def test_banner_dismissal_key_uses_app_scheme() -> None:
    html = _render(Post(id="p1"), app_scheme="exampleapp")

    assert 'var storageKey = "exampleapp_banner_closed";' in html
    assert "Open Example website" in html
    assert 'href="https://www.example.test/login"' in html
