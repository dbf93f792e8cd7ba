from __future__ import annotations

import pytest

from fakes import FakeStore, make_settings
from preview_server.models.config import PreviewSettings


@pytest.fixture
def store() -> FakeStore:
    return FakeStore()


@pytest.fixture
def settings() -> PreviewSettings:
    return make_settings()
