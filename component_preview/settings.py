"""Process-wide preview settings shared by previews, the loader and the app."""

from __future__ import annotations

import logging
import threading
from pathlib import Path
from typing import List, Optional

from .models.config import PreviewConfig

LOGGER = logging.getLogger(__name__)

__all__ = ["configure", "get_settings", "preview_paths", "reset"]

_lock = threading.Lock()
_settings: Optional[PreviewConfig] = None


def configure(config: PreviewConfig) -> PreviewConfig:
    global _settings
    with _lock:
        _settings = config
    LOGGER.debug("Preview paths set to %s", [str(path) for path in config.preview_paths])
    return config


def get_settings() -> PreviewConfig:
    global _settings
    with _lock:
        if _settings is None:
            _settings = PreviewConfig().resolve_paths(Path.cwd())
        return _settings


def preview_paths() -> List[Path]:
    return list(get_settings().preview_paths)


def reset() -> None:
    global _settings
    with _lock:
        _settings = None
