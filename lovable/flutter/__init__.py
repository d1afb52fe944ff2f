"""Flutter code generation, templates and pubspec management."""

from .generator import FlutterCodeGenerator, UnsupportedProjectTypeError
from .naming import to_pascal_case, to_snake_case
from .packages import (
    FlutterPackage,
    FlutterPackageManager,
    PubspecData,
    PubspecParseError,
    PubspecValidation,
)
from .templates import TemplateNotFoundError, TemplateStore, render_template

__all__ = [
    "FlutterCodeGenerator",
    "FlutterPackage",
    "FlutterPackageManager",
    "PubspecData",
    "PubspecParseError",
    "PubspecValidation",
    "TemplateNotFoundError",
    "TemplateStore",
    "UnsupportedProjectTypeError",
    "render_template",
    "to_pascal_case",
    "to_snake_case",
]
