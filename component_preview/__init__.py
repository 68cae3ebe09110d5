from __future__ import annotations

from .app import (
    DEFAULT_CONFIG_PATH,
    DEFAULT_HOST,
    DEFAULT_PORT,
    AppState,
    ServerConfig,
    create_app,
    get_app_state,
)
from .components import Component, ComponentError
from .previews import ExampleNotFoundError, Preview, PreviewError, PreviewTemplateError

__all__ = [
    "DEFAULT_CONFIG_PATH",
    "DEFAULT_HOST",
    "DEFAULT_PORT",
    "AppState",
    "Component",
    "ComponentError",
    "ExampleNotFoundError",
    "Preview",
    "PreviewError",
    "PreviewTemplateError",
    "ServerConfig",
    "create_app",
    "get_app_state",
]
