from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import httpx
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, PlainTextResponse, Response

from .config import load_settings
from .errors import PreviewError
from .models.config import PreviewSettings
from .rendering.page import PageRenderer
from .service import PreviewService

DEFAULT_HOST = "0.0.0.0"
DEFAULT_PORT = 8080
DEBUG_VALUES = frozenset({"1", "true", "yes", "on"})
ERROR_HEADERS = {"Cache-Control": "no-store"}


@dataclass
class ServerConfig:
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    config_path: Optional[Path] = None
    log_path: Optional[Path] = None
    log_level: str = "info"


@dataclass
class AppState:
    """Container for FastAPI state shared across request handlers.

    Everything here is immutable after startup; requests never write to it.
    """

    settings: PreviewSettings
    service: PreviewService


def get_app_state(request: Request) -> AppState:
    state = getattr(request.app.state, "preview", None)
    if state is None:
        raise RuntimeError("Application state has not been initialised")
    return state


def is_debug(value: Optional[str]) -> bool:
    return (value or "").strip().lower() in DEBUG_VALUES


def error_response(exc: PreviewError, settings: PreviewSettings, debug: bool = False) -> Response:
    """Convert a :class:`PreviewError` into the client-facing response.

    Debug responses echo the upstream status and body with the access key
    scrubbed; the key itself never reaches a client.
    """

    if debug:
        payload = exc.debug_payload()
        payload["error"] = settings.scrub(payload["error"])
        payload["upstream_body"] = settings.scrub(payload["upstream_body"])
        return JSONResponse(payload, status_code=exc.status_code, headers=ERROR_HEADERS)
    return PlainTextResponse(
        settings.scrub(exc.message) or "",
        status_code=exc.status_code,
        headers=ERROR_HEADERS,
    )


def create_app(
    config: Optional[ServerConfig] = None,
    settings: Optional[PreviewSettings] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> FastAPI:
    config = config or ServerConfig()
    settings = settings or load_settings(config.config_path)

    app = FastAPI(title="Post Preview", version="1.0.0")
    app.state.preview = AppState(
        settings=settings,
        service=PreviewService(settings, renderer=PageRenderer(), transport=transport),
    )

    @app.exception_handler(PreviewError)
    async def preview_error_handler(request: Request, exc: PreviewError) -> Response:
        return error_response(exc, settings, debug=is_debug(request.query_params.get("debug")))

    from .api import posts, status

    app.include_router(status.router)
    app.include_router(posts.router)

    return app


__all__ = [
    "DEFAULT_HOST",
    "DEFAULT_PORT",
    "AppState",
    "ServerConfig",
    "create_app",
    "error_response",
    "get_app_state",
    "is_debug",
]
