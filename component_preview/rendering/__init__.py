"""Template environment and HTML helpers used to render previews."""

from .environment import BUILTIN_TEMPLATE_DIR, ConventionLoader, build_environment
from .helpers import TagHelpers

__all__ = ["BUILTIN_TEMPLATE_DIR", "ConventionLoader", "TagHelpers", "build_environment"]
