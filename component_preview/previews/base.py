from __future__ import annotations

import ast
import inspect
import logging
import textwrap
import threading
from pathlib import Path
from typing import Any, Callable, Dict, List, Mapping, Optional, Type, Union

from .. import settings
from ..rendering.helpers import TagHelpers
from .errors import ExampleNotFoundError, PreviewError, PreviewTemplateError
from .loader import PREVIEW_MODULE_PACKAGE, forget_loaded, load_entry_points, load_previews
from .naming import chomp_suffix, underscore

LOGGER = logging.getLogger(__name__)

__all__ = ["Preview", "PREVIEW_TEMPLATE", "LayoutName"]

PREVIEW_TEMPLATE = "component_preview/preview"

LayoutName = Union[str, bool, None]

_descendants: List[Type["Preview"]] = []
_descendants_lock = threading.RLock()

_PARAMETER_KINDS = (inspect.Parameter.POSITIONAL_OR_KEYWORD, inspect.Parameter.KEYWORD_ONLY)


class Preview(TagHelpers):
    """Base class for component previews.

    Every public method defined on a subclass is an example. An example
    returns a render descriptor (see :meth:`render` and
    :meth:`render_with_template`) or ``None`` to render its template
    ``<preview path>/<preview name>_preview/<example>.html.*``.
    """

    _layout: LayoutName = None

    def __init_subclass__(cls, layout: LayoutName = None, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        cls._layout = layout
        cls._track()

    @classmethod
    def _track(cls) -> None:
        with _descendants_lock:
            for index, known in enumerate(_descendants):
                if known.__module__ == cls.__module__ and known.__qualname__ == cls.__qualname__:
                    _descendants[index] = cls
                    break
            else:
                _descendants.append(cls)

    # ------------------------------------------------------------------
    # example helpers
    # ------------------------------------------------------------------
    def render(self, component: Any, block: Any = None, **args: Any) -> Dict[str, Any]:
        return {
            "args": args,
            "block": block,
            "component": component,
            "locals": {},
            "template": PREVIEW_TEMPLATE,
        }

    render_component = render

    def render_with_template(
        self,
        template: Optional[str] = None,
        locals: Optional[Mapping[str, Any]] = None,
    ) -> Dict[str, Any]:
        return {"template": template, "locals": dict(locals or {})}

    # ------------------------------------------------------------------
    # discovery
    # ------------------------------------------------------------------
    @classmethod
    def descendants(cls) -> List[Type["Preview"]]:
        with _descendants_lock:
            return [preview for preview in _descendants if issubclass(preview, cls) and preview is not cls]

    @classmethod
    def all(cls) -> List[Type["Preview"]]:
        """Return all preview classes, loading them from the preview paths if none are known."""

        with _descendants_lock:
            if not cls.descendants():
                cls.load_previews()
            return cls.descendants()

    @classmethod
    def clear(cls) -> None:
        """Forget every tracked preview and the preview files imported so far."""

        with _descendants_lock:
            _descendants.clear()
            forget_loaded()

    @classmethod
    def load_previews(cls) -> None:
        config = settings.get_settings()
        with _descendants_lock:
            load_previews(config.preview_paths)
            for loaded in load_entry_points(config.entry_point_group):
                for preview in _previews_in(loaded):
                    preview._track()

    @classmethod
    def preview_paths(cls) -> List[Path]:
        return settings.preview_paths()

    @classmethod
    def exists(cls, preview: str) -> bool:
        return any(candidate.preview_name() == preview for candidate in cls.all())

    @classmethod
    def find(cls, preview: str) -> Optional[Type["Preview"]]:
        """Find a preview by its underscored name, e.g. ``admin/icon_button``."""

        for candidate in cls.all():
            if candidate.preview_name() == preview:
                return candidate
        return None

    # ------------------------------------------------------------------
    # naming
    # ------------------------------------------------------------------
    @classmethod
    def preview_name(cls) -> str:
        """Underscored name of the preview without the ``Preview`` suffix."""

        qualname = cls.__qualname__.rsplit("<locals>.", 1)[-1]
        parts = qualname.split(".")
        parts[-1] = chomp_suffix(parts[-1], "Preview")
        namespace: List[str] = []
        module_parts = cls.__module__.split(".")
        if module_parts[0] == PREVIEW_MODULE_PACKAGE:
            namespace = module_parts[1:-1]
        return "/".join([*namespace, underscore(".".join(parts))])

    @classmethod
    def layout(cls, layout_name: LayoutName) -> None:
        cls._layout = layout_name

    @classmethod
    def layout_name(cls) -> LayoutName:
        return cls.__dict__.get("_layout")

    @classmethod
    def examples(cls) -> List[str]:
        """Names of the public methods defined directly on this preview, sorted."""

        return sorted(
            name
            for name, value in vars(cls).items()
            if not name.startswith("_") and not hasattr(Preview, name) and inspect.isfunction(value)
        )

    # ------------------------------------------------------------------
    # rendering
    # ------------------------------------------------------------------
    @classmethod
    def example_method(cls, example: str) -> Callable[..., Any]:
        if example.startswith("_") or hasattr(Preview, example):
            raise ExampleNotFoundError(f"{cls.__name__} has no example '{example}'")
        method = getattr(cls, example, None)
        if not inspect.isfunction(method):
            raise ExampleNotFoundError(f"{cls.__name__} has no example '{example}'")
        return method

    @classmethod
    def render_args(cls, example: str, params: Optional[Mapping[str, Any]] = None) -> Dict[str, Any]:
        """Return the arguments for rendering ``example`` inside its layout.

        Only the entries of ``params`` that match a parameter of the
        example are passed to it. The descriptor always carries a
        ``template`` and the preview's ``layout``.
        """

        method = cls.example_method(example)
        parameters = list(inspect.signature(method).parameters.values())[1:]
        names = [parameter.name for parameter in parameters if parameter.kind in _PARAMETER_KINDS]
        params = params or {}
        provided = {name: params[name] for name in names if name in params}

        instance = cls()
        bound = getattr(instance, example)
        result = bound(**provided) if provided else bound()

        args: Dict[str, Any] = dict(result) if result is not None else {}
        if args.get("template") is None:
            args["template"] = cls.preview_example_template_path(example)
        args["layout"] = cls.layout_name()
        return args

    @classmethod
    def preview_example_template_path(cls, example: str) -> str:
        """Template path of ``example`` relative to its preview path, without extensions."""

        pattern = f"{cls.preview_name()}_preview/{example}.html.*"
        for preview_path in cls.preview_paths():
            matches = sorted(path for path in Path(preview_path).glob(pattern) if path.is_file())
            if matches:
                relative = matches[0].relative_to(preview_path)
                stem = relative.name.split(".", 1)[0]
                return (relative.parent / stem).as_posix()

        raise PreviewTemplateError(
            f"A preview template for example {example} doesn't exist.\n\n"
            "To fix this issue, create a template for the example."
        )

    @classmethod
    def preview_source(cls, example: str) -> str:
        """Return the body of the example method as written in the preview file."""

        method = cls.example_method(example)
        source = textwrap.dedent(inspect.getsource(method))
        node = ast.parse(source).body[0]
        if not isinstance(node, (ast.FunctionDef, ast.AsyncFunctionDef)):
            raise PreviewError(f"Cannot read the source of {cls.__name__}.{example}")
        lines = source.splitlines()
        first = node.body[0]
        body = lines[first.lineno - 1 : node.body[-1].end_lineno]
        if first.lineno == node.lineno:
            # one-line definition: "def example(self): return ..."
            body[0] = body[0][first.col_offset :]
        return textwrap.dedent("\n".join(body))


def _previews_in(loaded: Any) -> List[Type[Preview]]:
    """Preview classes published by an entry point: the class itself or a module's classes."""

    if inspect.isclass(loaded):
        return [loaded] if issubclass(loaded, Preview) and loaded is not Preview else []
    if inspect.ismodule(loaded):
        return [
            member
            for _, member in inspect.getmembers(loaded, inspect.isclass)
            if issubclass(member, Preview) and member is not Preview
        ]
    LOGGER.warning("Ignoring preview entry point object %r", loaded)
    return []
