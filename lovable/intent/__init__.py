"""Prompt intent classification and target file resolution."""

from .classifier import INTENT_PATTERNS, analyze_edit_intent
from .resolvers import (
    extract_component_names,
    extract_flutter_widget_names,
    find_component_by_content,
    find_component_files,
    find_flutter_package_files,
)

__all__ = [
    "INTENT_PATTERNS",
    "analyze_edit_intent",
    "extract_component_names",
    "extract_flutter_widget_names",
    "find_component_by_content",
    "find_component_files",
    "find_flutter_package_files",
]
