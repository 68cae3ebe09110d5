from __future__ import annotations

import logging
import threading
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, AsyncIterator, Dict, List, Optional, Sequence

from fastapi import FastAPI, Request
from fastapi.responses import RedirectResponse
from fastapi.staticfiles import StaticFiles
from fastapi.templating import Jinja2Templates
from jinja2 import Environment

from . import settings
from .config import ConfigError, YamlConfigLoader
from .models.config import PreviewConfig
from .previews import Preview
from .rendering import build_environment
from .rendering.preview import PreviewRenderer

LOGGER = logging.getLogger(__name__)

DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 8080
DEFAULT_CONFIG_PATH = Path("component_preview.yaml")
STATIC_ROUTE = "/static"


@dataclass
class ServerConfig:
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    config_path: Optional[Path] = None
    preview_paths: Sequence[Path] = ()
    static_dir: Optional[Path] = None
    watch_config: bool = False
    log_path: Optional[Path] = None


@dataclass
class AppState:
    """Container for FastAPI state shared across request handlers.

    ``preview_config`` mirrors the process-wide settings consulted by
    :class:`~component_preview.previews.Preview`; replacing it through
    :meth:`set_preview_config` also rebuilds the template environment and
    forgets previously discovered previews.
    """

    config: ServerConfig
    config_loader: YamlConfigLoader[PreviewConfig]
    preview_config: PreviewConfig
    templates: Jinja2Templates
    renderer: PreviewRenderer
    static_dir: Path
    route: str
    _lock: threading.Lock = field(default_factory=threading.Lock)

    def set_preview_config(self, config: PreviewConfig) -> None:
        with self._lock:
            self.preview_config = _apply_preview_config(config)
            environment = _build_environment(self.preview_config)
            self.templates = Jinja2Templates(env=environment)
            self.renderer = PreviewRenderer(environment, self.preview_config.default_preview_layout)
        LOGGER.info("Preview configuration reloaded from %s", self.config_loader.path)

    def describe_previews(self) -> List[Dict[str, Any]]:
        return [
            {
                "name": preview.preview_name(),
                "examples": preview.examples(),
                "layout": preview.layout_name(),
            }
            for preview in sorted(Preview.all(), key=lambda item: item.preview_name())
        ]


def get_app_state(request: Request) -> AppState:
    state = getattr(request.app.state, "component_preview", None)
    if state is None:
        raise RuntimeError("Application state has not been initialised")
    return state


def _apply_preview_config(config: PreviewConfig) -> PreviewConfig:
    settings.configure(config)
    Preview.clear()
    return config


def _build_environment(config: PreviewConfig) -> Environment:
    return build_environment([*config.template_dirs, *config.preview_paths], asset_prefix=STATIC_ROUTE)


def load_preview_config(config: ServerConfig) -> tuple[YamlConfigLoader[PreviewConfig], PreviewConfig]:
    config_path = (config.config_path or DEFAULT_CONFIG_PATH).expanduser().resolve()
    loader: YamlConfigLoader[PreviewConfig] = YamlConfigLoader(config_path, PreviewConfig)
    try:
        preview_config = loader.load()
    except ConfigError:
        LOGGER.exception("Invalid preview configuration in %s", config_path)
        raise
    return loader, _with_cli_paths(config, preview_config).resolve_paths(config_path.parent)


def _with_cli_paths(config: ServerConfig, preview_config: PreviewConfig) -> PreviewConfig:
    if not config.preview_paths:
        return preview_config
    paths = [Path(path).expanduser().resolve() for path in config.preview_paths]
    return preview_config.model_copy(update={"preview_paths": paths})


def create_app(config: Optional[ServerConfig] = None) -> FastAPI:
    config = config or ServerConfig()
    loader, preview_config = load_preview_config(config)
    preview_config = _apply_preview_config(preview_config)

    base_dir = Path(__file__).resolve().parent
    static_dir = config.static_dir or (base_dir / "static")
    environment = _build_environment(preview_config)
    route = preview_config.preview_route.rstrip("/")

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        if config.watch_config:
            base = loader.path.parent

            def _reload(new_config: PreviewConfig) -> None:
                app.state.component_preview.set_preview_config(
                    _with_cli_paths(config, new_config).resolve_paths(base)
                )

            loader.start(_reload)
        try:
            yield
        finally:
            loader.stop()

    app = FastAPI(title="Component previews", version="1.0.0", lifespan=lifespan)
    app.mount(STATIC_ROUTE, StaticFiles(directory=str(static_dir)), name="static")

    state = AppState(
        config=config,
        config_loader=loader,
        preview_config=preview_config,
        templates=Jinja2Templates(env=environment),
        renderer=PreviewRenderer(environment, preview_config.default_preview_layout),
        static_dir=static_dir,
        route=route,
    )
    app.state.component_preview = state

    @app.get("/", include_in_schema=False)
    async def root() -> RedirectResponse:
        return RedirectResponse(route)

    from .api import previews as preview_routes

    app.include_router(preview_routes.api_router)
    app.include_router(preview_routes.router, prefix=route)

    LOGGER.info(
        "Serving previews from %s under %s",
        ", ".join(str(path) for path in preview_config.preview_paths),
        preview_config.preview_route,
    )
    return app


__all__ = [
    "DEFAULT_HOST",
    "DEFAULT_PORT",
    "DEFAULT_CONFIG_PATH",
    "ServerConfig",
    "AppState",
    "create_app",
    "get_app_state",
    "load_preview_config",
]
