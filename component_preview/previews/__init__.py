"""Preview classes, their discovery and name conventions."""

from .base import PREVIEW_TEMPLATE, Preview
from .errors import ExampleNotFoundError, PreviewError, PreviewTemplateError
from .loader import load_entry_points, load_previews
from .naming import chomp_suffix, underscore

__all__ = [
    "PREVIEW_TEMPLATE",
    "Preview",
    "PreviewError",
    "PreviewTemplateError",
    "ExampleNotFoundError",
    "chomp_suffix",
    "load_entry_points",
    "load_previews",
    "underscore",
]
