"""HTML tag and asset helpers shared by previews, components and templates."""

from __future__ import annotations

from typing import Any, Iterator, Mapping, Optional, Tuple

from markupsafe import Markup, escape

__all__ = [
    "DEFAULT_ASSET_PREFIX",
    "VOID_ELEMENTS",
    "TagHelpers",
    "asset_path",
    "content_tag",
    "image_tag",
    "javascript_include_tag",
    "stylesheet_link_tag",
    "tag",
    "tag_attributes",
]

DEFAULT_ASSET_PREFIX = "/static"

VOID_ELEMENTS = frozenset(
    {"area", "base", "br", "col", "embed", "hr", "img", "input", "link", "meta", "source", "track", "wbr"}
)
_PREFIXED_ATTRIBUTES = ("data", "aria")


def _attribute_items(attributes: Mapping[str, Any]) -> Iterator[Tuple[str, Any]]:
    for key, value in attributes.items():
        name = str(key).rstrip("_").replace("_", "-")
        if name in _PREFIXED_ATTRIBUTES and isinstance(value, Mapping):
            for sub_key, sub_value in value.items():
                yield f"{name}-{str(sub_key).replace('_', '-')}", sub_value
        else:
            yield name, value


def tag_attributes(attributes: Mapping[str, Any]) -> Markup:
    """Render ``attributes`` as a space-prefixed HTML attribute string.

    ``class_`` style keys lose the trailing underscore, ``True`` renders a
    bare attribute, ``None`` and ``False`` drop the attribute, and nested
    ``data``/``aria`` mappings expand to prefixed attributes.
    """

    parts = []
    for name, value in _attribute_items(attributes):
        if value is None or value is False:
            continue
        if value is True:
            parts.append(f" {name}")
            continue
        if isinstance(value, (list, tuple, set)):
            value = " ".join(str(item) for item in value)
        parts.append(f' {name}="{escape(value)}"')
    return Markup("".join(parts))


def tag(name: str, **attributes: Any) -> Markup:
    """Render an opening tag; void elements are emitted without a closing tag."""

    return Markup(f"<{name}{tag_attributes(attributes)}>")


def content_tag(name: str, content: Any = None, **attributes: Any) -> Markup:
    if callable(content):
        content = content()
    body = escape(content) if content is not None else Markup("")
    return Markup(f"<{name}{tag_attributes(attributes)}>{body}</{name}>")


def asset_path(source: str, prefix: str = DEFAULT_ASSET_PREFIX) -> str:
    if "://" in source or source.startswith(("/", "data:")):
        return source
    return f"{prefix.rstrip('/')}/{source.lstrip('/')}"


def stylesheet_link_tag(*sources: str, prefix: str = DEFAULT_ASSET_PREFIX, **attributes: Any) -> Markup:
    links = [
        tag("link", rel="stylesheet", href=asset_path(_with_extension(source, ".css"), prefix), **attributes)
        for source in sources
    ]
    return Markup("\n").join(links)


def javascript_include_tag(*sources: str, prefix: str = DEFAULT_ASSET_PREFIX, **attributes: Any) -> Markup:
    scripts = [
        content_tag("script", None, src=asset_path(_with_extension(source, ".js"), prefix), **attributes)
        for source in sources
    ]
    return Markup("\n").join(scripts)


def image_tag(source: str, alt: Optional[str] = None, prefix: str = DEFAULT_ASSET_PREFIX, **attributes: Any) -> Markup:
    if alt is None:
        stem = source.rsplit("/", 1)[-1].split(".", 1)[0]
        alt = stem.replace("_", " ").replace("-", " ").capitalize()
    return tag("img", src=asset_path(source, prefix), alt=alt, **attributes)


def _with_extension(source: str, extension: str) -> str:
    if "://" in source or source.endswith(extension) or "?" in source:
        return source
    return f"{source}{extension}"


class TagHelpers:
    """Mixin exposing the helpers as methods."""

    asset_prefix: str = DEFAULT_ASSET_PREFIX

    def tag(self, name: str, **attributes: Any) -> Markup:
        return tag(name, **attributes)

    def content_tag(self, name: str, content: Any = None, **attributes: Any) -> Markup:
        return content_tag(name, content, **attributes)

    def asset_path(self, source: str) -> str:
        return asset_path(source, self.asset_prefix)

    def stylesheet_link_tag(self, *sources: str, **attributes: Any) -> Markup:
        return stylesheet_link_tag(*sources, prefix=self.asset_prefix, **attributes)

    def javascript_include_tag(self, *sources: str, **attributes: Any) -> Markup:
        return javascript_include_tag(*sources, prefix=self.asset_prefix, **attributes)

    def image_tag(self, source: str, alt: Optional[str] = None, **attributes: Any) -> Markup:
        return image_tag(source, alt=alt, prefix=self.asset_prefix, **attributes)
