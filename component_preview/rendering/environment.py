from __future__ import annotations

import functools
from pathlib import Path
from typing import Callable, Iterable, List, Sequence, Tuple

from jinja2 import Environment, FileSystemLoader, TemplateNotFound

from . import helpers

__all__ = ["BUILTIN_TEMPLATE_DIR", "ConventionLoader", "build_environment"]

BUILTIN_TEMPLATE_DIR = Path(__file__).resolve().parent.parent / "templates"


class ConventionLoader(FileSystemLoader):
    """File system loader that also resolves extension-less template names.

    ``button_preview/default`` is looked up as given, then as
    ``button_preview/default.html`` and finally as the first match of
    ``button_preview/default.html.*`` in each search path.
    """

    def get_source(
        self, environment: Environment, template: str
    ) -> Tuple[str, str, Callable[[], bool]]:
        try:
            return super().get_source(environment, template)
        except TemplateNotFound:
            candidates = self._candidates(template)
        for candidate in candidates:
            try:
                return super().get_source(environment, candidate)
            except TemplateNotFound:
                continue
        raise TemplateNotFound(template)

    def _candidates(self, template: str) -> List[str]:
        parts = template.split("/")
        if ".." in parts or "." in parts[-1]:
            return []
        names = [f"{template}.html"]
        for searchpath in self.searchpath:
            root = Path(searchpath)
            names.extend(
                path.relative_to(root).as_posix()
                for path in sorted(root.glob(f"{template}.html.*"))
                if path.is_file()
            )
        return names


def build_environment(
    search_paths: Iterable[Path],
    asset_prefix: str = helpers.DEFAULT_ASSET_PREFIX,
) -> Environment:
    """Create the Jinja2 environment used for previews, layouts and components.

    The package templates come last so applications can override the
    built-in layout and index pages.
    """

    paths: Sequence[str] = [str(path) for path in (*search_paths, BUILTIN_TEMPLATE_DIR)]
    environment = Environment(loader=ConventionLoader(paths), autoescape=True)
    environment.globals.update(
        tag=helpers.tag,
        content_tag=helpers.content_tag,
        asset_path=functools.partial(helpers.asset_path, prefix=asset_prefix),
        stylesheet_link_tag=functools.partial(helpers.stylesheet_link_tag, prefix=asset_prefix),
        javascript_include_tag=functools.partial(helpers.javascript_include_tag, prefix=asset_prefix),
        image_tag=functools.partial(helpers.image_tag, prefix=asset_prefix),
    )
    return environment
