from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, Optional

from fastapi.templating import Jinja2Templates

from ..models.config import PreviewSettings
from .derive import PreviewBundle

_LOGGER = logging.getLogger(__name__)

TEMPLATE_DIR = Path(__file__).resolve().parent.parent / "templates"
PAGE_TEMPLATE = "post.html"


class PageRenderer:
    """Render a :class:`PreviewBundle` into a complete HTML document.

    Output depends only on the bundle and the settings. Autoescaping is on for
    ``.html`` templates, so every interpolated value (URLs in attributes
    included) is escaped.
    """

    def __init__(self, templates: Optional[Jinja2Templates] = None) -> None:
        self.templates = templates or Jinja2Templates(directory=str(TEMPLATE_DIR))

    def context(self, bundle: PreviewBundle, settings: PreviewSettings) -> Dict[str, Any]:
        return {
            "post": bundle,
            "hero": bundle.hero,
            "app_name": settings.app_name,
            "app_icon_url": settings.app_icon_url,
            "ios_app_id": settings.ios_app_id,
            "web_url": settings.web_url,
            "login_url": f"{settings.web_url}/login",
            "banner_storage_key": f"{settings.app_scheme}_banner_closed",
        }

    def render(self, bundle: PreviewBundle, settings: PreviewSettings) -> str:
        template = self.templates.get_template(PAGE_TEMPLATE)
        html = template.render(self.context(bundle, settings))
        _LOGGER.debug("Rendered preview for %s (%d bytes)", bundle.post_id, len(html))
        return html


__all__ = ["PAGE_TEMPLATE", "PageRenderer", "TEMPLATE_DIR"]
