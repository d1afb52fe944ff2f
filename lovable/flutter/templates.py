"""Named Flutter code templates and their substitution grammar.

Templates use a small mustache-like grammar:

* ``{{key}}`` is replaced by the configured value, or left untouched when the
  key is not configured.
* ``{{#key}}...{{/key}}`` is a block. A sequence value repeats the block once
  per item with the item's fields bound on top of the outer configuration; a
  scalar item is exposed as ``{{.}}``. Any other truthy value includes the
  block once, and a falsy or missing value drops it. Blocks nest.

Template text is looked up through a Jinja2 loader search path so a project
can shadow individual templates from its own templates directory.
"""

from __future__ import annotations

import re
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Mapping, Sequence, Tuple, Union

from jinja2 import Environment, FileSystemLoader, TemplateNotFound

from ..logging import get_logger

TemplateScalar = Union[str, int, float, bool, None]
TemplateValue = Union[TemplateScalar, Sequence[Union[TemplateScalar, Mapping[str, Any]]]]
TemplateConfig = Mapping[str, TemplateValue]

DEFAULT_TEMPLATES_DIR = Path(__file__).resolve().parent.parent / "templates" / "flutter"

_TOKEN = re.compile(r"\{\{#([^}]+)\}\}([\s\S]*?)\{\{/\1\}\}|\{\{([^#/}][^}]*)\}\}")

logger = get_logger("flutter.templates")


class TemplateNotFoundError(RuntimeError):
    """Raised when a named template cannot be loaded."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Template not found: {name}")
        self.name = name


@lru_cache(maxsize=None)
def _environment(search_path: Tuple[str, ...]) -> Environment:
    return Environment(
        loader=FileSystemLoader(list(search_path)),
        autoescape=False,
        keep_trailing_newline=True,
    )


@lru_cache(maxsize=None)
def _load_source(search_path: Tuple[str, ...], name: str) -> str:
    env = _environment(search_path)
    source, filename, _ = env.loader.get_source(env, name)  # type: ignore[union-attr]
    logger.debug("Loaded template %s from %s", name, filename)
    return source


class TemplateStore:
    """Loads template text by name, caching it for the life of the process."""

    def __init__(self, templates_dir: Path | None = None) -> None:
        search_path = []
        if templates_dir is not None:
            search_path.append(str(Path(templates_dir).expanduser().resolve()))
        search_path.append(str(DEFAULT_TEMPLATES_DIR))
        self.search_path: Tuple[str, ...] = tuple(search_path)

    def load(self, name: str) -> str:
        try:
            return _load_source(self.search_path, name)
        except TemplateNotFound as exc:
            logger.error("Failed to load Flutter template: %s", name)
            raise TemplateNotFoundError(name) from exc

    def render(self, name: str, config: TemplateConfig) -> str:
        return render_template(self.load(name), config)


def render_template(template: str, config: TemplateConfig) -> str:
    """Render ``template`` against ``config`` using the block and variable grammar."""

    def _replace(match: re.Match[str]) -> str:
        block_key = match.group(1)
        if block_key is None:
            key = match.group(3).strip()
            if key not in config:
                return match.group(0)
            return _format_value(config[key])

        value = config.get(block_key.strip())
        content = match.group(2)
        if isinstance(value, (list, tuple)):
            return "".join(render_template(content, _item_context(config, item)) for item in value)
        if value:
            return render_template(content, config)
        return ""

    return _TOKEN.sub(_replace, template)


def _item_context(config: TemplateConfig, item: Any) -> Dict[str, Any]:
    context: Dict[str, Any] = dict(config)
    if isinstance(item, Mapping):
        context.update(item)
    else:
        context["."] = item
    return context


def _format_value(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


__all__ = [
    "DEFAULT_TEMPLATES_DIR",
    "TemplateConfig",
    "TemplateNotFoundError",
    "TemplateStore",
    "TemplateValue",
    "render_template",
]
