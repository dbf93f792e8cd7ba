from __future__ import annotations

from typing import Any, List, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

_SCHEME_PATTERN = r"^[A-Za-z][A-Za-z0-9+.-]*$"


def _text(value: Any) -> str:
    return "" if value is None else str(value).strip()


class PreviewSettings(BaseModel):
    """Deployment settings for the preview renderer.

    Only ``store_url`` and ``store_key`` are required to serve pages; they are
    checked per request so a misconfigured deployment answers with a 500
    instead of refusing to start.
    """

    store_url: str = Field("", description="Base URL of the REST data store")
    store_key: str = Field("", description="Access key sent as apikey and bearer token", repr=False)
    site_url: str = Field("https://ozvion.app", description="Host of the share pages and default assets")
    web_url: str = Field("https://ozvion.com", description="Marketing site used by the website buttons")
    app_scheme: str = Field("ozvion", pattern=_SCHEME_PATTERN, description="URL scheme of the mobile app")
    app_name: str = Field("Ozvion", min_length=1, description="Display name of the app")
    app_icon_url: str = Field("", description="Icon shown in the app banner")
    ios_app_id: str = Field("", description="Numeric App Store id for the smart banner")
    ios_store_url: str = Field("", description="App Store listing")
    android_store_url: str = Field("", description="Play Store listing")
    cache_seconds: int = Field(60, ge=10, le=600, description="max-age for rendered pages")
    store_timeout: float = Field(8.0, gt=0, le=60, description="Timeout in seconds per data-store call")
    validate_ids: bool = Field(True, description="Reject ids that are not UUIDs")

    @field_validator("store_url", "site_url", "web_url", "app_icon_url", mode="before")
    @classmethod
    def _strip_trailing_slash(cls, value: Any) -> str:
        return _text(value).rstrip("/")

    @field_validator(
        "store_key", "ios_app_id", "ios_store_url", "android_store_url", "app_name", "app_scheme", mode="before"
    )
    @classmethod
    def _strip(cls, value: Any) -> str:
        return _text(value)

    @model_validator(mode="after")
    def _default_icon(self) -> "PreviewSettings":
        if not self.app_icon_url:
            self.app_icon_url = f"{self.site_url}/app-icon.png"
        return self

    @property
    def store_link(self) -> str:
        return self.ios_store_url or self.android_store_url

    @property
    def default_image_url(self) -> str:
        return f"{self.site_url}/og-default.png"

    @property
    def default_avatar_url(self) -> str:
        return f"{self.site_url}/avatar-default.png"

    @property
    def default_community_icon_url(self) -> str:
        return f"{self.site_url}/community-default.png"

    def missing_required(self) -> List[str]:
        """Names of required settings that are not configured."""

        missing: List[str] = []
        if not self.store_url:
            missing.append("store_url")
        if not self.store_key:
            missing.append("store_key")
        return missing

    def scrub(self, text: Optional[str]) -> Optional[str]:
        """Remove the access key from text that may be echoed to a client."""

        if not text or not self.store_key:
            return text
        return text.replace(self.store_key, "***")
