"""Prompt classification into edit intents over a file manifest."""

from __future__ import annotations

import re
from typing import Dict, List, Sequence

from ..logging import get_logger
from ..models import EditIntent, EditType, FileManifest, IntentPattern
from . import resolvers

logger = get_logger("intent.classifier")

DEFAULT_CONFIDENCE = 0.3
DEFAULT_DESCRIPTION = "General update to application"


def _compile(*patterns: str) -> List[re.Pattern[str]]:
    return [re.compile(pattern, re.IGNORECASE) for pattern in patterns]


# Evaluated top to bottom, first match wins. Flutter groups come before the
# generic React groups so that "create a login screen" never reads as a page
# or component edit.
INTENT_PATTERNS: Sequence[IntentPattern] = (
    IntentPattern(
        patterns=_compile(
            r"create\s+(a\s+)?(\w+)\s+widget",
            r"build\s+(a\s+)?(\w+)\s+widget",
            r"make\s+(a\s+)?(\w+)\s+widget",
            r"add\s+(a\s+)?new\s+(\w+)\s+widget",
            r"implement\s+(a\s+)?(\w+)\s+widget",
        ),
        type=EditType.CREATE_FLUTTER_WIDGET,
        file_resolver=resolvers.find_flutter_insertion_points,
    ),
    IntentPattern(
        patterns=_compile(
            r"create\s+(a\s+)?(\w+)\s+(screen|page)",
            r"build\s+(a\s+)?(\w+)\s+(screen|page)",
            r"make\s+(a\s+)?(\w+)\s+(screen|page)",
            r"new\s+(screen|page)",
            r"add\s+(a\s+)?new\s+(\w+\s+)?(screen|page)",
            r"([\uac00-\ud7af]+)\s*(화면|스크린|페이지)\s*(만들어|생성|추가)",
            r"(화면|스크린|페이지).*(만들어|생성|추가)",
        ),
        type=EditType.CREATE_FLUTTER_SCREEN,
        file_resolver=resolvers.find_flutter_screen_insertion_points,
    ),
    IntentPattern(
        patterns=_compile(
            r"update\s+(the\s+)?(\w+)\s+(widget)",
            r"change\s+(the\s+)?(\w+)\s+(widget)",
            r"modify\s+(the\s+)?(\w+)\s+(widget)",
            r"edit\s+(the\s+)?(\w+)\s+(widget)",
        ),
        type=EditType.UPDATE_FLUTTER_WIDGET,
        file_resolver=resolvers.find_flutter_widget_files,
    ),
    IntentPattern(
        patterns=_compile(
            r"add\s+(a\s+)?app\s?bar",
            r"implement\s+app\s?bar",
            r"create\s+app\s?bar",
            r"add\s+(a\s+)?bottom\s+navigation",
            r"implement\s+bottom\s+navigation",
            r"add\s+(a\s+)?floating\s+action\s+button",
            r"add\s+(a\s+)?fab",
            r"implement\s+navigation",
            r"add\s+navigation",
            r"add\s+tab\s?bar",
            r"implement\s+tab\s?bar",
        ),
        type=EditType.ADD_FLUTTER_NAVIGATION,
        file_resolver=resolvers.find_flutter_navigation_files,
    ),
    IntentPattern(
        patterns=_compile(
            r"add\s+flutter\s+(\w+\s+)?(package|dependency)",
            r"install\s+flutter\s+(\w+\s+)?(package|dependency)",
            r"use\s+flutter\s+(package|library)",
            r"add\s+(\w+)\s+flutter\s+(package|library)",
            r"flutter\s+pub\s+add",
            r"add\s+(\w+)\s+(package|dependency)",
            r"install\s+(\w+)\s+(package|dependency)",
        ),
        type=EditType.ADD_FLUTTER_PACKAGE,
        file_resolver=resolvers.find_flutter_package_files,
    ),
    IntentPattern(
        patterns=_compile(
            r"update\s+(the\s+)?(\w+)\s+(component|section|page)",
            r"change\s+(the\s+)?(\w+)",
            r"modify\s+(the\s+)?(\w+)",
            r"edit\s+(the\s+)?(\w+)",
            r"fix\s+(the\s+)?(\w+)\s+(styling|style|css|layout)",
            r"remove\s+.*\s+(button|link|text|element|section)",
            r"delete\s+.*\s+(button|link|text|element|section)",
            r"hide\s+.*\s+(button|link|text|element|section)",
        ),
        type=EditType.UPDATE_COMPONENT,
        file_resolver=resolvers.find_component_by_content,
    ),
    IntentPattern(
        patterns=_compile(
            r"add\s+(a\s+)?new\s+(\w+)\s+(page|section|feature|component)",
            r"create\s+(a\s+)?(\w+)\s+(page|section|feature|component)",
            r"implement\s+(a\s+)?(\w+)\s+(page|section|feature)",
            r"build\s+(a\s+)?(\w+)\s+(page|section|feature)",
            r"add\s+(\w+)\s+to\s+(?:the\s+)?(\w+)",
            r"add\s+(?:a\s+)?(\w+)\s+(?:component|section)",
            r"include\s+(?:a\s+)?(\w+)",
        ),
        type=EditType.ADD_FEATURE,
        file_resolver=resolvers.find_feature_insertion_points,
    ),
    IntentPattern(
        patterns=_compile(
            r"fix\s+(the\s+)?(\w+|\w+\s+\w+)(?!\s+styling|\s+style)",
            r"resolve\s+(the\s+)?error",
            r"debug\s+(the\s+)?(\w+)",
            r"repair\s+(the\s+)?(\w+)",
        ),
        type=EditType.FIX_ISSUE,
        file_resolver=resolvers.find_problem_files,
    ),
    IntentPattern(
        patterns=_compile(
            r"change\s+(the\s+)?(color|theme|style|styling|css)",
            r"update\s+(the\s+)?(color|theme|style|styling|css)",
            r"make\s+it\s+(dark|light|blue|red|green)",
            r"style\s+(the\s+)?(\w+)",
        ),
        type=EditType.UPDATE_STYLE,
        file_resolver=resolvers.find_style_files,
    ),
    IntentPattern(
        patterns=_compile(
            r"refactor\s+(the\s+)?(\w+)",
            r"clean\s+up\s+(the\s+)?code",
            r"reorganize\s+(the\s+)?(\w+)",
            r"optimize\s+(the\s+)?(\w+)",
        ),
        type=EditType.REFACTOR,
        file_resolver=resolvers.find_refactor_targets,
    ),
    IntentPattern(
        patterns=_compile(
            r"start\s+over",
            r"recreate\s+everything",
            r"rebuild\s+(the\s+)?app",
            r"new\s+app",
            r"from\s+scratch",
        ),
        type=EditType.FULL_REBUILD,
        file_resolver=resolvers.find_entry_point,
    ),
    IntentPattern(
        patterns=_compile(
            r"install\s+(\w+)",
            r"add\s+(\w+)\s+(package|library|dependency)",
            r"use\s+(\w+)\s+(library|framework)",
        ),
        type=EditType.ADD_DEPENDENCY,
        file_resolver=resolvers.find_package_files,
    ),
)

_DESCRIPTIONS: Dict[EditType, str] = {
    EditType.UPDATE_COMPONENT: "Updating component(s): {files}",
    EditType.ADD_FEATURE: "Adding new feature to: {files}",
    EditType.FIX_ISSUE: "Fixing issue in: {files}",
    EditType.UPDATE_STYLE: "Updating styles in: {files}",
    EditType.REFACTOR: "Refactoring: {files}",
    EditType.FULL_REBUILD: "Rebuilding entire application",
    EditType.ADD_DEPENDENCY: "Adding new dependency",
    EditType.CREATE_FLUTTER_WIDGET: "Creating Flutter widget in: {files}",
    EditType.CREATE_FLUTTER_SCREEN: "Creating Flutter screen in: {files}",
    EditType.UPDATE_FLUTTER_WIDGET: "Updating Flutter widget in: {files}",
    EditType.ADD_FLUTTER_NAVIGATION: "Adding Flutter navigation to: {files}",
    EditType.ADD_FLUTTER_PACKAGE: "Adding Flutter package to: {files}",
}


def analyze_edit_intent(prompt: str, manifest: FileManifest) -> EditIntent:
    """Classify ``prompt`` and select the manifest files the edit should touch.

    Matching runs against the lower-cased prompt while resolvers receive the
    prompt in its original casing. A prompt that matches no group yields a
    low-confidence component update of the entry point.
    """
    lower_prompt = prompt.lower()
    for group in INTENT_PATTERNS:
        if not any(regex.search(lower_prompt) for regex in group.patterns):
            continue
        target_files = group.file_resolver(prompt, manifest)
        intent = EditIntent(
            type=group.type,
            target_files=target_files,
            confidence=calculate_confidence(prompt, group, target_files),
            description=generate_description(group.type, target_files),
            suggested_context=suggested_context(target_files, manifest),
        )
        logger.debug(
            "Classified prompt as %s targeting %s (confidence %.2f)",
            intent.type.value,
            intent.target_files,
            intent.confidence,
        )
        return intent

    logger.debug("No intent pattern matched; falling back to %s", manifest.entry_point)
    return EditIntent(
        type=EditType.UPDATE_COMPONENT,
        target_files=[manifest.entry_point],
        confidence=DEFAULT_CONFIDENCE,
        description=DEFAULT_DESCRIPTION,
        suggested_context=[],
    )


def calculate_confidence(prompt: str, group: IntentPattern, target_files: Sequence[str]) -> float:
    confidence = 0.5
    if target_files and target_files[0] != "":
        confidence += 0.2
    if len(prompt.split()) > 5:
        confidence += 0.1
    if any(regex.search(prompt) for regex in group.patterns):
        confidence += 0.2
    return min(confidence, 1.0)


def generate_description(edit_type: EditType, target_files: Sequence[str]) -> str:
    file_names = ", ".join(path.rsplit("/", 1)[-1] for path in target_files)
    template = _DESCRIPTIONS.get(edit_type, "Editing: {files}")
    return template.format(files=file_names)


def suggested_context(target_files: Sequence[str], manifest: FileManifest) -> List[str]:
    """Every manifest path that is not already a target."""
    targets = set(target_files)
    return [path for path in manifest.files if path not in targets]


__all__ = [
    "INTENT_PATTERNS",
    "analyze_edit_intent",
    "calculate_confidence",
    "generate_description",
    "suggested_context",
]
