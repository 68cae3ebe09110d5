from __future__ import annotations

__all__ = ["PreviewError", "PreviewTemplateError", "ExampleNotFoundError"]


class PreviewError(RuntimeError):
    """Raised when previews fail to load or render."""


class PreviewTemplateError(PreviewError):
    """Raised when an example has no template and did not name one."""


class ExampleNotFoundError(PreviewError):
    """Raised when a preview does not define the requested example."""
