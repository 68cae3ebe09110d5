"""Utilities for loading and watching preview configuration files."""

from __future__ import annotations

import logging
import threading
from copy import deepcopy
from pathlib import Path
from typing import Any, Callable, Dict, Generic, Mapping, Optional, Tuple, Type, TypeVar

import yaml
from pydantic import BaseModel, ValidationError

T = TypeVar("T", bound=BaseModel)


logger = logging.getLogger(__name__)


class ConfigError(RuntimeError):
    """Base exception for loader errors."""


class ConfigValidationError(ConfigError):
    """Raised when the configuration on disk is invalid."""

    def __init__(self, message: str, errors: Any) -> None:
        super().__init__(message)
        self.errors = errors


def deep_merge(base: Mapping[str, Any], update: Mapping[str, Any]) -> Dict[str, Any]:
    """Recursively merge ``update`` into ``base`` without mutating either."""

    merged: Dict[str, Any] = deepcopy(dict(base))
    for key, value in update.items():
        if key in merged and isinstance(merged[key], Mapping) and isinstance(value, Mapping):
            merged[key] = deep_merge(merged[key], value)
        else:
            merged[key] = deepcopy(value)
    return merged


def normalise_preview_config_payload(raw: Mapping[str, Any]) -> Dict[str, Any]:
    """Map the legacy single ``preview_path`` key onto ``preview_paths``."""

    data: Dict[str, Any] = deepcopy(dict(raw))
    legacy = data.pop("preview_path", None)
    if legacy is not None:
        paths = list(data.get("preview_paths") or [])
        if legacy not in paths:
            paths.insert(0, legacy)
        data["preview_paths"] = paths
    for key in ("preview_paths", "template_dirs"):
        if isinstance(data.get(key), str):
            data[key] = [data[key]]
    return data


class YamlConfigLoader(Generic[T]):
    """Load and watch YAML configuration files for runtime changes."""

    def __init__(
        self,
        path: Path,
        model: Type[T],
        poll_interval: float = 2.0,
        log: Optional[logging.Logger] = None,
    ) -> None:
        self.path = path
        self.model = model
        self.poll_interval = max(0.5, float(poll_interval))
        self._lock = threading.Lock()
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None
        self._callback: Optional[Callable[[T], None]] = None
        self._last_payload: Optional[Dict[str, Any]] = None
        self._last_mtime: Optional[float] = None
        self._log = log or logger

    # ------------------------------------------------------------------
    # public API
    # ------------------------------------------------------------------
    def load(self) -> T:
        """Load configuration from disk, merging defaults from the schema."""

        with self._lock:
            config, payload = self._load_from_disk()
            self._last_payload = payload
            self._last_mtime = self._get_mtime()
        return config

    def start(self, callback: Callable[[T], None]) -> None:
        """Start watching the file for on-disk modifications."""

        with self._lock:
            self._callback = callback
            if self._thread and self._thread.is_alive():
                return
            self._stop.clear()
            self._thread = threading.Thread(target=self._watch_loop, daemon=True)
            self._thread.start()

    def stop(self) -> None:
        with self._lock:
            self._stop.set()
        if self._thread:
            self._thread.join(timeout=2)
            self._thread = None

    # ------------------------------------------------------------------
    # helpers
    # ------------------------------------------------------------------
    def _load_from_disk(self) -> Tuple[T, Dict[str, Any]]:
        defaults = self.model().model_dump(mode="json")
        data: Dict[str, Any] = {}
        if self.path.exists():
            try:
                raw = yaml.safe_load(self.path.read_text(encoding="utf-8"))
            except yaml.YAMLError as exc:
                raise ConfigError(f"Could not parse configuration: {exc}") from exc
            if raw is None:
                raw = {}
            if not isinstance(raw, Mapping):
                raise ConfigError("Configuration file must contain a YAML mapping")
            data = normalise_preview_config_payload(raw)
        merged = deep_merge(defaults, data)
        try:
            config = self.model(**merged)
        except ValidationError as exc:
            raise ConfigValidationError("Configuration does not match the schema", exc.errors()) from exc
        payload = config.model_dump(mode="json")
        return config, payload

    def _get_mtime(self) -> Optional[float]:
        try:
            return self.path.stat().st_mtime
        except FileNotFoundError:
            return None

    def _watch_loop(self) -> None:
        self._log.debug("Start watching %s", self.path)
        while not self._stop.wait(self.poll_interval):
            current_mtime = self._get_mtime()
            with self._lock:
                last_mtime = self._last_mtime
            if current_mtime == last_mtime:
                continue
            try:
                config, payload = self._load_from_disk()
            except ConfigError as exc:
                self._log.warning("Could not reload preview configuration: %s", exc)
                with self._lock:
                    self._last_mtime = current_mtime
                continue
            changed = False
            with self._lock:
                self._last_mtime = current_mtime
                callback = self._callback
                if self._last_payload != payload:
                    self._last_payload = deepcopy(payload)
                    changed = True
            if changed and callback:
                try:
                    callback(config)
                except Exception:  # pragma: no cover - safeguard user callbacks
                    self._log.exception("Preview configuration callback raised")
        self._log.debug("Stop watching %s", self.path)


__all__ = [
    "ConfigError",
    "ConfigValidationError",
    "YamlConfigLoader",
    "deep_merge",
    "normalise_preview_config_payload",
]
