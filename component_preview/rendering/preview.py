from __future__ import annotations

import inspect
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional, Type

from jinja2 import Environment
from markupsafe import Markup

from ..components import Component, ComponentError
from ..previews.base import Preview

_LOGGER = logging.getLogger(__name__)

DEFAULT_LAYOUT = "component_preview/layouts/default"


@dataclass
class RenderedExample:
    """Result of rendering one example inside its layout."""

    preview: str
    example: str
    html: str
    template: str
    layout: Optional[str]
    render_args: Dict[str, Any] = field(default_factory=dict)


class PreviewRenderer:
    """Turns the render descriptor of an example into HTML."""

    def __init__(self, environment: Environment, default_layout: Optional[str] = None) -> None:
        self.environment = environment
        self.default_layout = default_layout or DEFAULT_LAYOUT

    def render(
        self,
        preview: Type[Preview],
        example: str,
        params: Optional[Mapping[str, Any]] = None,
    ) -> RenderedExample:
        args = preview.render_args(example, params=params or {})
        body = self.render_body(args)
        layout = self.resolve_layout(args.get("layout"))
        if layout is None:
            html = str(body)
        else:
            html = self.environment.get_template(layout).render(
                content=body,
                preview=preview,
                preview_name=preview.preview_name(),
                example=example,
            )
        _LOGGER.debug("Rendered %s/%s with template %s", preview.preview_name(), example, args["template"])
        return RenderedExample(
            preview=preview.preview_name(),
            example=example,
            html=html,
            template=args["template"],
            layout=layout,
            render_args=args,
        )

    def resolve_layout(self, layout: Any) -> Optional[str]:
        if layout is False:
            return None
        if layout:
            return str(layout)
        return self.default_layout

    def render_body(self, args: Mapping[str, Any]) -> Markup:
        context: Dict[str, Any] = dict(args.get("locals") or {})
        if args.get("component") is not None:
            context["rendered_component"] = self.render_component(
                args["component"], args.get("args") or {}, args.get("block")
            )
        template = self.environment.get_template(args["template"])
        return Markup(template.render(context))

    def render_component(self, component: Any, args: Mapping[str, Any], block: Any = None) -> Markup:
        if inspect.isclass(component):
            component = component(**args)
        elif args:
            raise ComponentError(
                f"Arguments {sorted(args)} given for an already constructed {type(component).__name__}"
            )
        content = block() if callable(block) else block
        if isinstance(component, Component):
            return component.render_in(self.environment, content)
        render_in = getattr(component, "render_in", None)
        if callable(render_in):
            return Markup(render_in(self.environment, content))
        raise ComponentError(f"Cannot render {component!r}: it does not provide render_in()")


__all__ = ["DEFAULT_LAYOUT", "PreviewRenderer", "RenderedExample"]
