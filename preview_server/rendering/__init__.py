"""Derivation of preview fields and HTML rendering."""

from .derive import Hero, PreviewBundle, build_bundle
from .page import PageRenderer

__all__ = ["Hero", "PageRenderer", "PreviewBundle", "build_bundle"]
