"""Heuristic resolvers that map a prompt onto manifest files.

Every resolver is a pure function of ``(prompt, manifest)`` returning an
ordered list of target paths. None of them raise for a well-formed manifest:
when nothing specific matches they degrade to the manifest entry point.
"""

from __future__ import annotations

import re
from typing import Iterable, List

from ..logging import get_logger
from ..models import FileManifest, ProposedPath

logger = get_logger("intent.resolvers")

_COMPONENT_STOP_WORDS = re.compile(
    r"\b(the|a|an|in|on|to|from|update|change|modify|edit|fix|make)\b", re.IGNORECASE
)
_FLUTTER_STOP_WORDS = re.compile(
    r"\b(the|a|an|in|on|to|from|update|change|modify|edit|fix|make|create|build|widget|screen)\b",
    re.IGNORECASE,
)
_WORD = re.compile(r"\b\w+\b")
_QUOTED = re.compile(r"""["']([^"']+)["']""")
_ACTION_TARGET = re.compile(
    r"(?:remove|delete|hide)\s+(?:the\s+)?(.+?)(?:\s+button|\s+link|\s+text|\s+element|\s+section|$)",
    re.IGNORECASE,
)
_LOCATION = re.compile(r"\b(?:in|to|on|inside)\s+(?:the\s+)?(\w+)", re.IGNORECASE)
_PROBLEM_WORDS = re.compile(r"error|bug|issue|problem|broken|not working", re.IGNORECASE)

UI_ELEMENTS = (
    "header",
    "footer",
    "nav",
    "sidebar",
    "button",
    "card",
    "modal",
    "hero",
    "banner",
    "about",
    "services",
    "features",
    "testimonials",
    "gallery",
    "contact",
    "team",
    "pricing",
)

COMMON_FLUTTER_WIDGETS = (
    "appbar",
    "scaffold",
    "container",
    "column",
    "row",
    "button",
    "card",
    "list",
    "fab",
)

PACKAGE_FILE_SUFFIXES = ("package.json", "vite.config.js", "tsconfig.json")
PUBSPEC_SUFFIXES = ("pubspec.yaml", "pubspec.yml")
DEFAULT_PUBSPEC_PATH = "pubspec.yaml"


def _file_name(path: str) -> str:
    return path.rsplit("/", 1)[-1].lower()


def _dedupe(paths: Iterable[str]) -> List[str]:
    seen: List[str] = []
    for path in paths:
        if path not in seen:
            seen.append(path)
    return seen


def extract_component_names(prompt: str) -> List[str]:
    """Return candidate component words from a prompt, minus stop-words and short tokens."""
    cleaned = _COMPONENT_STOP_WORDS.sub("", prompt).lower()
    return [word for word in _WORD.findall(cleaned) if len(word) > 2]


def extract_flutter_widget_names(prompt: str) -> List[str]:
    """Return candidate widget words, followed by any common Flutter widget nouns mentioned."""
    cleaned = _FLUTTER_STOP_WORDS.sub("", prompt).lower()
    words = [word for word in _WORD.findall(cleaned) if len(word) > 2]
    lower_prompt = prompt.lower()
    for widget in COMMON_FLUTTER_WIDGETS:
        if widget in lower_prompt:
            words.append(widget)
    return words


def find_component_files(prompt: str, manifest: FileManifest) -> List[str]:
    """Search by file name or component name, falling back to common UI element nouns."""
    files: List[str] = []
    lower_prompt = prompt.lower()
    words = extract_component_names(prompt)
    logger.debug("Extracted component words: %s", words)

    for path, info in manifest.files.items():
        file_name = _file_name(path)
        component_name = info.component_info.name.lower() if info.component_info else None
        for word in words:
            if word in file_name or (component_name is not None and word in component_name):
                logger.debug("Component match: word=%r in file=%s", word, path)
                files.append(path)
                break

    if not files:
        for element in UI_ELEMENTS:
            if element not in lower_prompt:
                continue
            for path in manifest.files:
                file_name = _file_name(path)
                if f"{element}." in file_name or file_name == element:
                    logger.debug("UI element match: element=%r in file=%s", element, path)
                    return [path]
            for path in manifest.files:
                if element in _file_name(path):
                    logger.debug("UI element partial match: element=%r in file=%s", element, path)
                    return [path]

    if len(files) > 1:
        logger.debug("Found %d component files, keeping the first", len(files))
        return files[:1]
    return files or [manifest.entry_point]


def find_component_by_content(prompt: str, manifest: FileManifest) -> List[str]:
    """Search component sources for quoted text or the object of remove/delete/hide."""
    terms = [match.group(1) for match in _QUOTED.finditer(prompt)]
    action = _ACTION_TARGET.search(prompt)
    if action:
        terms.append(action.group(1).strip())
    logger.debug("Content search terms: %s", terms)

    files: List[str] = []
    if terms:
        lowered_terms = [term.lower() for term in terms]
        for path, info in manifest.files.items():
            if ".jsx" not in path and ".tsx" not in path:
                continue
            content = info.content.lower()
            for term in lowered_terms:
                if term in content:
                    logger.debug("Found %r in %s", term, path)
                    files.append(path)
                    break

    if not files:
        return find_component_files(prompt, manifest)
    return files[:1]


def find_feature_insertion_points(prompt: str, manifest: FileManifest) -> List[str]:
    """Pick router files and parent components that a new feature should be wired into."""
    files: List[str] = []
    lower_prompt = prompt.lower()

    if "page" in lower_prompt:
        for path, info in manifest.files.items():
            if (
                "Route" in info.content
                or "createBrowserRouter" in info.content
                or "router" in path
                or "routes" in path
            ):
                files.append(path)
        if manifest.entry_point:
            files.append(manifest.entry_point)

    if any(keyword in lower_prompt for keyword in ("component", "section", "add", "create")):
        location = _LOCATION.search(prompt)
        if location:
            parents = find_component_files(location.group(1), manifest)
            logger.debug("Adding to %s, parent files: %s", location.group(1), parents)
            files.extend(parents)
        else:
            for word in extract_component_names(prompt):
                related = find_component_files(word, manifest)
                if related and related[0] != manifest.entry_point:
                    files.extend(related)
            if not files:
                files.append(manifest.entry_point)

    return _dedupe(files)


def find_problem_files(prompt: str, manifest: FileManifest) -> List[str]:
    """Recently modified files for problem reports, plus any component named in the prompt."""
    files: List[str] = []
    if _PROBLEM_WORDS.search(prompt):
        recent = sorted(
            manifest.files.items(), key=lambda item: item[1].last_modified, reverse=True
        )[:5]
        files.extend(path for path, _ in recent)
    files.extend(find_component_files(prompt, manifest))
    return _dedupe(files)


def find_style_files(prompt: str, manifest: FileManifest) -> List[str]:
    files = list(manifest.style_files)
    tailwind = next((path for path in manifest.files if "tailwind.config" in path), None)
    if tailwind:
        files.append(tailwind)
    files.extend(find_component_files(prompt, manifest))
    return files


def find_refactor_targets(prompt: str, manifest: FileManifest) -> List[str]:
    return find_component_files(prompt, manifest)


def find_package_files(prompt: str, manifest: FileManifest) -> List[str]:
    return [path for path in manifest.files if path.endswith(PACKAGE_FILE_SUFFIXES)]


def find_flutter_insertion_points(prompt: str, manifest: FileManifest) -> List[str]:
    """Prefer main.dart among Dart sources, else the first Dart source, else the entry point."""
    flutter_files = [
        path
        for path in manifest.files
        if path.endswith(".dart") and ("lib/" in path or "widgets/" in path)
    ]
    if not flutter_files:
        return [manifest.entry_point]
    main_file = next((path for path in flutter_files if "main.dart" in path), None)
    return [main_file or flutter_files[0]]


def find_flutter_screen_insertion_points(prompt: str, manifest: FileManifest) -> List[str]:
    screen_files = [
        path
        for path in manifest.files
        if path.endswith(".dart")
        and ("screens/" in path or "pages/" in path or "lib/" in path)
    ]
    main_file = next((path for path in screen_files if "main.dart" in path), None) or next(
        (path for path in screen_files if "app.dart" in path), None
    )
    return [main_file] if main_file else [manifest.entry_point]


def find_flutter_widget_files(prompt: str, manifest: FileManifest) -> List[str]:
    """Match widget words, including common Flutter nouns, against Dart file and widget names."""
    files: List[str] = []
    words = extract_flutter_widget_names(prompt)
    logger.debug("Extracted widget words: %s", words)

    for path, info in manifest.files.items():
        if not path.endswith(".dart"):
            continue
        file_name = _file_name(path)
        widget_name = info.flutter_info.name.lower() if info.flutter_info else None
        for word in words:
            if word in file_name or (widget_name is not None and word in widget_name):
                logger.debug("Widget match: word=%r in file=%s", word, path)
                files.append(path)
                break

    return files or find_flutter_insertion_points(prompt, manifest)


def find_flutter_navigation_files(prompt: str, manifest: FileManifest) -> List[str]:
    files = [
        path
        for path in manifest.files
        if path.endswith(".dart")
        and (
            "main.dart" in path
            or "app.dart" in path
            or "home.dart" in path
            or "navigation" in path
        )
    ]
    return files or find_flutter_insertion_points(prompt, manifest)


def find_flutter_package_files(prompt: str, manifest: FileManifest) -> List[str]:
    """Existing pubspec files, or a proposed root ``pubspec.yaml`` when there is none."""
    files: List[str] = [path for path in manifest.files if path.endswith(PUBSPEC_SUFFIXES)]
    return files or [ProposedPath(DEFAULT_PUBSPEC_PATH)]


def find_entry_point(prompt: str, manifest: FileManifest) -> List[str]:
    return [manifest.entry_point]


__all__ = [
    "extract_component_names",
    "extract_flutter_widget_names",
    "find_component_by_content",
    "find_component_files",
    "find_entry_point",
    "find_feature_insertion_points",
    "find_flutter_insertion_points",
    "find_flutter_navigation_files",
    "find_flutter_package_files",
    "find_flutter_screen_insertion_points",
    "find_flutter_widget_files",
    "find_package_files",
    "find_problem_files",
    "find_refactor_targets",
    "find_style_files",
]
