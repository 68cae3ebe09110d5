from __future__ import annotations

import importlib.util
import logging
import sys
from importlib import metadata
from pathlib import Path
from typing import Any, Dict, Iterable, List

from .errors import PreviewError

LOGGER = logging.getLogger(__name__)

__all__ = [
    "PREVIEW_MODULE_PACKAGE",
    "PREVIEW_FILE_GLOB",
    "forget_loaded",
    "load_entry_points",
    "load_previews",
    "loaded_files",
    "module_name_for",
]

PREVIEW_MODULE_PACKAGE = "_component_previews"
PREVIEW_FILE_GLOB = "*_preview.py"

_loaded: Dict[Path, str] = {}


def module_name_for(path: Path, root: Path) -> str:
    """Module name under which the preview file ``path`` below ``root`` is imported."""

    relative = path.relative_to(root).with_suffix("")
    return ".".join((PREVIEW_MODULE_PACKAGE, *relative.parts))


def loaded_files() -> List[Path]:
    return list(_loaded)


def load_previews(paths: Iterable[Path]) -> List[str]:
    """Import every ``*_preview.py`` file below ``paths`` exactly once.

    Files are imported in sorted order per preview path. Sub-directories
    become part of the module name so previews can recover their
    namespace from ``__module__``. Returns the names of modules imported
    by this call.
    """

    imported: List[str] = []
    for root in paths:
        root = Path(root)
        if not root.is_dir():
            LOGGER.debug("Skipping missing preview path %s", root)
            continue
        for file in sorted(root.rglob(PREVIEW_FILE_GLOB)):
            if not file.is_file():
                continue
            resolved = file.resolve()
            if resolved in _loaded:
                continue
            module_name = module_name_for(file, root)
            existing = sys.modules.get(module_name)
            if existing is not None:
                LOGGER.warning(
                    "Skipping %s: module %s already loaded from %s",
                    file,
                    module_name,
                    getattr(existing, "__file__", "?"),
                )
                continue
            _import_file(module_name, resolved)
            _loaded[resolved] = module_name
            imported.append(module_name)
    if imported:
        LOGGER.info("Loaded %d preview module(s)", len(imported))
    return imported


def _import_file(module_name: str, path: Path) -> None:
    spec = importlib.util.spec_from_file_location(module_name, path)
    if spec is None or spec.loader is None:
        raise PreviewError(f"Cannot import preview file {path}")
    module = importlib.util.module_from_spec(spec)
    sys.modules[module_name] = module
    try:
        spec.loader.exec_module(module)
    except Exception as exc:
        sys.modules.pop(module_name, None)
        LOGGER.exception("Failed to import preview file '%s'", path)
        raise PreviewError(f"Failed to import preview file {path}: {exc}") from exc
    LOGGER.debug("Imported preview module %s from %s", module_name, path)


def load_entry_points(group: str) -> List[Any]:
    """Load the objects published by installed distributions under ``group``.

    An entry point may reference a module or a preview class. Modules stay
    cached in ``sys.modules`` across loads, so callers register the preview
    classes found in the returned objects. Broken entry points are logged
    and skipped.
    """

    try:
        entry_points = metadata.entry_points()
    except Exception:  # pragma: no cover - defensive logging
        LOGGER.exception("Unable to load preview entry points")
        return []

    if hasattr(entry_points, "select"):
        candidates = entry_points.select(group=group)
    else:
        candidates = entry_points.get(group, [])  # type: ignore[assignment]

    loaded: List[Any] = []
    for entry_point in candidates:
        try:
            loaded.append(entry_point.load())
        except Exception:  # pragma: no cover - defensive logging
            LOGGER.exception("Failed to load previews from entry point '%s'", entry_point.name)
    return loaded


def forget_loaded() -> None:
    """Drop imported preview modules so the next load imports them again."""

    for module_name in _loaded.values():
        sys.modules.pop(module_name, None)
    _loaded.clear()
