from __future__ import annotations

import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from component_preview import settings
from component_preview.models.config import PreviewConfig
from component_preview.previews import Preview

FIXTURES = Path(__file__).resolve().parent / "fixtures"
PREVIEWS = FIXTURES / "previews"


@pytest.fixture(autouse=True)
def _reset_previews():
    Preview.clear()
    settings.reset()
    yield
    Preview.clear()
    settings.reset()


@pytest.fixture
def fixture_previews() -> PreviewConfig:
    """Point the preview settings at the fixture preview tree."""

    return settings.configure(PreviewConfig(preview_paths=[PREVIEWS]))
