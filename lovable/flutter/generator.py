"""Template-driven Flutter source generation."""

from __future__ import annotations

import re
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Sequence

from ..logging import get_logger
from ..models import ProjectType
from .naming import to_pascal_case, to_snake_case
from .templates import TemplateStore

MAIN_DART_TEMPLATE = "main.dart.template"
PUBSPEC_TEMPLATE = "pubspec.yaml.template"
STATELESS_WIDGET_TEMPLATE = "stateless-widget.template"
STATEFUL_WIDGET_TEMPLATE = "stateful-widget.template"
SCREEN_TEMPLATE = "screen.template"

DEFAULT_PROJECT_DESCRIPTION = "A new Flutter project generated by Open Lovable."

_SCREEN_NAME_PATTERNS = (
    re.compile(r"create\s+(?:a\s+)?(\w+)\s+screen", re.IGNORECASE),
    re.compile(r"build\s+(\w+)\s+screen", re.IGNORECASE),
    re.compile(r"make\s+(?:a\s+)?(\w+)\s+screen", re.IGNORECASE),
    re.compile(r"(\w+)\s+screen", re.IGNORECASE),
    re.compile(r"screen\s+(?:called\s+)?(\w+)", re.IGNORECASE),
)

_WIDGET_NAME_PATTERNS = (
    re.compile(r"create\s+(?:a\s+)?([\w\s]+)\s+widget", re.IGNORECASE),
    re.compile(r"build\s+([\w\s]+)\s+widget", re.IGNORECASE),
    re.compile(r"make\s+(?:a\s+)?([\w\s]+)\s+widget", re.IGNORECASE),
    re.compile(r"([\w\s]+)\s+widget", re.IGNORECASE),
    re.compile(r"widget\s+(?:called\s+)?([\w\s]+)", re.IGNORECASE),
    re.compile(r"component\s+(?:called\s+)?([\w\s]+)", re.IGNORECASE),
)

_PROJECT_NAME_PATTERNS = (
    re.compile(r"create\s+(?:a\s+)?(\w+)\s+(?:app|project)", re.IGNORECASE),
    re.compile(r"build\s+(\w+)\s+app", re.IGNORECASE),
    re.compile(r"make\s+(?:a\s+)?(\w+)\s+(?:app|project)", re.IGNORECASE),
    re.compile(r"(?:app|project)\s+(?:called\s+)?(\w+)", re.IGNORECASE),
)

_DEFAULT_BOTTOM_NAV_ITEMS = (
    {"icon": "Icons.home", "label": "Home"},
    {"icon": "Icons.settings", "label": "Settings"},
)

logger = get_logger("flutter.generator")


class UnsupportedProjectTypeError(RuntimeError):
    """Raised when Flutter generation is requested for a non-Flutter project."""


def _with_defaults(defaults: Mapping[str, Any], config: Mapping[str, Any]) -> Dict[str, Any]:
    merged = dict(defaults)
    merged.update(config)
    return merged


def _with_suffix(name: str, suffix: str) -> str:
    return name if name.endswith(suffix) else name + suffix


class FlutterCodeGenerator:
    """Renders Flutter entry points, widgets, screens and pubspec files."""

    def __init__(
        self,
        store: TemplateStore | None = None,
        *,
        templates_dir: Path | None = None,
    ) -> None:
        self.store = store or TemplateStore(templates_dir)

    def generate_main_dart(self, config: Mapping[str, Any] | None = None) -> str:
        defaults = {
            "app_name": "MyApp",
            "app_title": "Flutter App",
            "primary_color": "Colors.blue",
            "home_widget": "HomePage",
        }
        return self.store.render(MAIN_DART_TEMPLATE, _with_defaults(defaults, config or {}))

    def generate_pubspec_yaml(self, config: Mapping[str, Any] | None = None) -> str:
        defaults = {
            "project_name": "flutter_app",
            "project_description": "A new Flutter project.",
            "dependencies": [],
            "dev_dependencies": [],
            "has_assets": False,
            "assets": [],
            "has_fonts": False,
            "fonts": [],
        }
        return self.store.render(PUBSPEC_TEMPLATE, _with_defaults(defaults, config or {}))

    def generate_stateful_widget(self, config: Mapping[str, Any]) -> str:
        defaults = {
            "constructor_params": [],
            "state_variables": [],
            "lifecycle_methods": [],
            "custom_methods": [],
            "widget_body": "Container()",
        }
        return self.store.render(STATEFUL_WIDGET_TEMPLATE, _with_defaults(defaults, config))

    def generate_stateless_widget(self, config: Mapping[str, Any]) -> str:
        defaults = {
            "constructor_params": [],
            "custom_methods": [],
            "widget_body": "Container()",
        }
        return self.store.render(STATELESS_WIDGET_TEMPLATE, _with_defaults(defaults, config))

    def generate_screen(self, config: Mapping[str, Any]) -> str:
        defaults: Dict[str, Any] = {
            "screen_title": config.get("screen_name"),
            "has_app_bar": True,
            "has_drawer": False,
            "has_floating_action_button": False,
            "has_bottom_navigation": False,
            "has_actions": False,
            "body_content": 'Center(child: Text("Hello World"))',
            "actions": [],
            "drawer_items": [],
            "bottom_nav_items": [],
            "current_index": "0",
            "on_tap_handler": "(index) {}",
            "fab_action": "() {}",
            "fab_tooltip": "Action",
            "fab_icon": "Icons.add",
        }
        merged = _with_defaults(defaults, config)
        if merged["has_bottom_navigation"] and not merged["bottom_nav_items"]:
            # BottomNavigationBar asserts at least two items.
            merged["bottom_nav_items"] = [dict(item) for item in _DEFAULT_BOTTOM_NAV_ITEMS]
        return self.store.render(SCREEN_TEMPLATE, merged)

    def generate_flutter_project(
        self,
        project_name: str,
        *,
        project_description: str | None = None,
        app_title: str | None = None,
        primary_color: str | None = None,
    ) -> Dict[str, str]:
        """Return ``path -> content`` for a runnable single-page Flutter project."""
        app_name = to_pascal_case(project_name)
        home_widget = f"{app_name}HomePage"
        title = app_title or project_name
        home_page_path = f"pages/{to_snake_case(home_widget)}.dart"

        main_dart = self.generate_main_dart(
            {
                "app_name": app_name,
                "app_title": title,
                "primary_color": primary_color or "Colors.blue",
                "home_widget": home_widget,
                "home_import": home_page_path,
            }
        )
        pubspec_yaml = self.generate_pubspec_yaml(
            {
                "project_name": to_snake_case(project_name),
                "project_description": project_description or DEFAULT_PROJECT_DESCRIPTION,
            }
        )
        home_page = self.generate_screen(
            {
                "screen_name": home_widget,
                "screen_title": title,
                "body_content": (
                    "Center(\n"
                    "        child: Column(\n"
                    "          mainAxisAlignment: MainAxisAlignment.center,\n"
                    "          children: [\n"
                    "            Text(\n"
                    f"              'Welcome to {title}!',\n"
                    "              style: TextStyle(fontSize: 24, fontWeight: FontWeight.bold),\n"
                    "            ),\n"
                    "            SizedBox(height: 16),\n"
                    "            Text(\n"
                    "              'Start building your amazing app',\n"
                    "              style: TextStyle(fontSize: 16),\n"
                    "            ),\n"
                    "          ],\n"
                    "        ),\n"
                    "      )"
                ),
            }
        )
        logger.info("Generated Flutter project %s", app_name)
        return {
            "lib/main.dart": main_dart,
            "pubspec.yaml": pubspec_yaml,
            f"lib/{home_page_path}": home_page,
        }

    def generate_flutter_code_from_prompt(self, prompt: str, project_type: ProjectType) -> str:
        """Generate representative Dart code for a free-text prompt.

        The prompt is routed by keyword to the screen, widget or project
        generator, in that priority order. Anything else yields a minimal
        stateless widget that echoes the prompt.
        """
        if project_type is not ProjectType.FLUTTER_MOBILE:
            raise UnsupportedProjectTypeError(
                "Flutter code generation is only supported for Flutter mobile projects"
            )

        lower_prompt = prompt.lower()
        if "screen" in lower_prompt or "page" in lower_prompt:
            return self._generate_screen_from_prompt(prompt)
        if "widget" in lower_prompt or "component" in lower_prompt:
            return self._generate_widget_from_prompt(prompt)
        if "project" in lower_prompt or "app" in lower_prompt:
            return self._generate_project_from_prompt(prompt)

        logger.info("No generation keyword in prompt; rendering a default widget")
        return self.generate_stateless_widget(
            {
                "widget_name": "GeneratedWidget",
                "widget_body": (
                    "Container(\n"
                    f"        child: Text('Generated from: {_dart_string(prompt)}'),\n"
                    "      )"
                ),
            }
        )

    def extract_screen_name(self, prompt: str) -> Optional[str]:
        name = _first_group(_SCREEN_NAME_PATTERNS, prompt)
        return _with_suffix(to_pascal_case(name), "Screen") if name else None

    def extract_widget_name(self, prompt: str) -> Optional[str]:
        name = _first_group(_WIDGET_NAME_PATTERNS, prompt)
        return _with_suffix(to_pascal_case(name.strip()), "Widget") if name else None

    def extract_project_name(self, prompt: str) -> Optional[str]:
        name = _first_group(_PROJECT_NAME_PATTERNS, prompt)
        if not name:
            return None
        suffix = "Project" if "project" in prompt.lower() else "App"
        return _with_suffix(to_pascal_case(name), suffix)

    def _generate_screen_from_prompt(self, prompt: str) -> str:
        lower_prompt = prompt.lower()
        screen_name = self.extract_screen_name(prompt) or "GeneratedScreen"
        has_bottom_navigation = "bottom navigation" in lower_prompt or "tab" in lower_prompt
        config: Dict[str, Any] = {
            "screen_name": screen_name,
            "has_app_bar": "appbar" in lower_prompt or "app bar" in lower_prompt,
            "has_floating_action_button": "floating action" in lower_prompt or "fab" in lower_prompt,
            "has_bottom_navigation": has_bottom_navigation,
            "body_content": f"Center(\n        child: Text('{screen_name} Screen'),\n      )",
        }
        if has_bottom_navigation:
            config["on_tap_handler"] = "(index) => setState(() => _currentIndex = index)"
        logger.info("Generating screen %s", screen_name)
        return self.generate_screen(config)

    def _generate_widget_from_prompt(self, prompt: str) -> str:
        lower_prompt = prompt.lower()
        widget_name = self.extract_widget_name(prompt) or "GeneratedWidget"
        config = {
            "widget_name": widget_name,
            "widget_body": f"Container(\n      child: Text('{widget_name}'),\n    )",
        }
        if "stateful" in lower_prompt or "state" in lower_prompt or "interactive" in lower_prompt:
            logger.info("Generating stateful widget %s", widget_name)
            return self.generate_stateful_widget(config)
        logger.info("Generating stateless widget %s", widget_name)
        return self.generate_stateless_widget(config)

    def _generate_project_from_prompt(self, prompt: str) -> str:
        project_name = self.extract_project_name(prompt) or "GeneratedApp"
        files = self.generate_flutter_project(project_name, app_title=project_name)
        return files["lib/main.dart"]


def _first_group(patterns: Sequence[re.Pattern[str]], prompt: str) -> Optional[str]:
    for pattern in patterns:
        match = pattern.search(prompt)
        if match:
            return match.group(1)
    return None


def _dart_string(text: str) -> str:
    """Escape ``text`` for the inside of a single-quoted Dart string literal."""
    return (
        text.replace("\\", "\\\\")
        .replace("'", "\\'")
        .replace("$", "\\$")
        .replace("\n", "\\n")
    )


__all__ = [
    "DEFAULT_PROJECT_DESCRIPTION",
    "FlutterCodeGenerator",
    "UnsupportedProjectTypeError",
]
