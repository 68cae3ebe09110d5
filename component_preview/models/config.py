from __future__ import annotations

from pathlib import Path
from typing import List, Optional

from pydantic import BaseModel, Field

_ROUTE_PATTERN = r"^(/[A-Za-z0-9_\-]+)+$"


class PreviewConfig(BaseModel):
    """Settings that control preview discovery and the preview routes."""

    preview_paths: List[Path] = Field(
        default_factory=lambda: [Path("previews")],
        description="Directories searched for *_preview.py files and example templates",
    )
    preview_route: str = Field(
        "/previews",
        pattern=_ROUTE_PATTERN,
        description="URL prefix under which previews are served",
    )
    default_preview_layout: Optional[str] = Field(
        default=None,
        description="Layout template used when a preview does not set its own",
    )
    show_previews: bool = Field(
        True,
        description="Expose the preview routes",
    )
    template_dirs: List[Path] = Field(
        default_factory=list,
        description="Additional directories searched for layouts and component templates",
    )
    entry_point_group: str = Field(
        "component_preview.previews",
        description="Entry point group scanned for previews shipped by installed packages",
    )

    def resolve_paths(self, base_dir: Path) -> "PreviewConfig":
        """Return a copy with relative directories anchored at ``base_dir``."""

        def _resolve(path: Path) -> Path:
            path = Path(path).expanduser()
            if not path.is_absolute():
                path = base_dir / path
            return path.resolve()

        return self.model_copy(
            update={
                "preview_paths": [_resolve(path) for path in self.preview_paths],
                "template_dirs": [_resolve(path) for path in self.template_dirs],
            }
        )


class PreviewConfigResponse(BaseModel):
    config: PreviewConfig
