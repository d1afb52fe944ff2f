"""Core validation data structures."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Protocol, runtime_checkable


class Severity(str, Enum):
    ERROR = "error"
    WARNING = "warning"
    INFO = "info"


@dataclass
class DartValidationError:
    """A single finding at a 1-based line and column."""

    line: int
    column: int
    message: str
    severity: Severity
    code: Optional[str] = None


@dataclass
class DartValidationResult:
    """Outcome of validating one source string.

    ``is_valid`` only reflects ``errors``; warnings and info findings never
    make code invalid.
    """

    is_valid: bool
    errors: List[DartValidationError] = field(default_factory=list)
    warnings: List[DartValidationError] = field(default_factory=list)
    formatted_code: Optional[str] = None


@dataclass
class ComplexityReport:
    cyclomatic_complexity: int
    lines_of_code: int
    number_of_methods: int
    nesting_depth: int


@runtime_checkable
class CodeValidator(Protocol):
    """Protocol implemented by source validators."""

    name: str

    def validate(self, code: str) -> DartValidationResult:
        """Run validation and return the findings."""


__all__ = [
    "CodeValidator",
    "ComplexityReport",
    "DartValidationError",
    "DartValidationResult",
    "Severity",
]
