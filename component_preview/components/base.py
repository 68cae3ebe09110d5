from __future__ import annotations

import inspect
import logging
from pathlib import Path
from typing import Any, ClassVar, Dict, Optional

from jinja2 import Environment, Template
from markupsafe import Markup

from ..previews.naming import underscore
from ..rendering.helpers import TagHelpers

LOGGER = logging.getLogger(__name__)

__all__ = ["Component", "ComponentError"]


class ComponentError(RuntimeError):
    """Raised when a component cannot be rendered."""


class Component(TagHelpers):
    """Base class for UI components rendered by previews.

    A component renders through ``call()`` when a subclass defines it,
    otherwise through ``template_name`` (looked up in the environment) or
    a sidecar template next to the module, ``button_component.html`` for
    ``ButtonComponent``.
    """

    template_name: ClassVar[Optional[str]] = None

    def should_render(self) -> bool:
        return True

    def template_context(self) -> Dict[str, Any]:
        return {name: value for name, value in vars(self).items() if not name.startswith("_")}

    def render_in(self, environment: Environment, content: Any = None) -> Markup:
        if not self.should_render():
            return Markup("")
        call = getattr(self, "call", None)
        if callable(call):
            self.content = content
            return Markup(call())

        context = self.template_context()
        context.update(component=self, content=content)
        return Markup(self._template(environment).render(context))

    @classmethod
    def sidecar_template(cls) -> Optional[Path]:
        try:
            module_file = Path(inspect.getfile(cls))
        except TypeError:
            return None
        name = underscore(cls.__name__)
        candidates = [module_file.parent / f"{name}.html"]
        candidates.extend(sorted(module_file.parent.glob(f"{name}.html.*")))
        for candidate in candidates:
            if candidate.is_file():
                return candidate
        return None

    def _template(self, environment: Environment) -> Template:
        if self.template_name:
            return environment.get_template(self.template_name)
        sidecar = self.sidecar_template()
        if sidecar is None:
            raise ComponentError(
                f"{type(self).__name__} has no template. Define call(), set template_name "
                f"or add {underscore(type(self).__name__)}.html next to its module."
            )
        LOGGER.debug("Rendering %s with sidecar template %s", type(self).__name__, sidecar)
        return environment.from_string(sidecar.read_text(encoding="utf-8"))
