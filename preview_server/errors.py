"""Errors raised while producing a post preview.

Each error carries the HTTP status it maps to. The application converts
them into plain-text responses (or JSON in debug mode) at the router seam.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

__all__ = [
    "PreviewError",
    "ConfigurationError",
    "InvalidInput",
    "NotFound",
    "UpstreamError",
]


class PreviewError(RuntimeError):
    """Base class for errors that terminate a preview request."""

    status_code = 500

    def __init__(
        self,
        message: str,
        *,
        upstream_status: Optional[int] = None,
        upstream_body: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.upstream_status = upstream_status
        self.upstream_body = upstream_body

    def debug_payload(self) -> Dict[str, Any]:
        return {
            "error": self.message,
            "status": self.status_code,
            "upstream_status": self.upstream_status,
            "upstream_body": self.upstream_body,
        }


class ConfigurationError(PreviewError):
    """A required deployment setting is missing."""

    status_code = 500


class InvalidInput(PreviewError):
    status_code = 400


class NotFound(PreviewError):
    status_code = 404


class UpstreamError(PreviewError):
    """The data store could not answer the primary lookup."""

    status_code = 502
