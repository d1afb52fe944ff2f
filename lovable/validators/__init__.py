"""Heuristic validation for generated Dart and Flutter code."""

from .base import (
    CodeValidator,
    ComplexityReport,
    DartValidationError,
    DartValidationResult,
    Severity,
)
from .dart import DartValidator, validate_dart_code

__all__ = [
    "CodeValidator",
    "ComplexityReport",
    "DartValidationError",
    "DartValidationResult",
    "DartValidator",
    "Severity",
    "validate_dart_code",
]
