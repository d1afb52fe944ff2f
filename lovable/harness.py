"""Self-check harness that exercises Flutter generation end to end."""

from __future__ import annotations

import re
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, List, Optional, Sequence

from jinja2 import Environment, FileSystemLoader

from .flutter.generator import FlutterCodeGenerator
from .logging import get_logger
from .models import ProjectType
from .validators import CodeValidator, DartValidationResult, DartValidator

REPORT_TEMPLATE = "harness_report.md.j2"
_TEMPLATES_DIR = Path(__file__).with_name("templates")

_WIDGET_DECLARATION = re.compile(r"extends\s+(StatelessWidget|StatefulWidget|State<)")
_WIDGET_CLASS = re.compile(r"class\s+\w+\s+extends\s+(StatelessWidget|StatefulWidget)")
_BUILD_METHOD = re.compile(r"Widget\s+build\s*\(\s*BuildContext\s+context\s*\)")
_MATERIAL_IMPORT = "import 'package:flutter/material.dart'"


@dataclass(frozen=True)
class CaseExpectations:
    valid_syntax: bool = True
    contains_widget: bool = True
    has_imports: bool = True
    follows_widget_patterns: bool = True


@dataclass(frozen=True)
class GenerationCase:
    """A prompt and what its generated code must satisfy."""

    name: str
    prompt: str
    expected: CaseExpectations = field(default_factory=CaseExpectations)
    project_type: ProjectType = ProjectType.FLUTTER_MOBILE


@dataclass
class CaseResult:
    case: GenerationCase
    generated_code: str
    validation: Optional[DartValidationResult]
    passed: bool
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    elapsed_ms: float = 0.0


DEFAULT_CASES: Sequence[GenerationCase] = (
    GenerationCase("Basic StatelessWidget Generation", "Create a simple hello world widget"),
    GenerationCase("Login Screen Generation", "Create a login screen with email and password fields"),
    GenerationCase(
        "Home Screen with AppBar", "Create a home screen with app bar and floating action button"
    ),
    GenerationCase("Shopping Cart Widget", "Build a stateful shopping cart widget with item count"),
    GenerationCase("Complete App Structure", "Create a complete todo app with main.dart"),
)


def follows_widget_patterns(code: str) -> bool:
    return bool(_WIDGET_CLASS.search(code) and _BUILD_METHOD.search(code))


class GenerationHarness:
    """Generates code for each case, validates it and checks the expectations."""

    def __init__(
        self,
        generator: FlutterCodeGenerator | None = None,
        validator: CodeValidator | None = None,
    ) -> None:
        self.generator = generator or FlutterCodeGenerator()
        self.validator = validator or DartValidator()
        self.logger = get_logger("harness")

    def run_all(self, cases: Iterable[GenerationCase] | None = None) -> List[CaseResult]:
        return [self.run_case(case) for case in (DEFAULT_CASES if cases is None else cases)]

    def run_case(self, case: GenerationCase) -> CaseResult:
        started = time.perf_counter()
        try:
            code = self.generator.generate_flutter_code_from_prompt(case.prompt, case.project_type)
        except Exception as exc:  # noqa: BLE001
            self.logger.warning("Case %r failed to generate: %s", case.name, exc)
            return CaseResult(
                case=case,
                generated_code="",
                validation=None,
                passed=False,
                errors=[f"Generation failed: {exc}"],
                elapsed_ms=_elapsed_ms(started),
            )

        validation = self.validator.validate(code)
        errors: List[str] = []
        expected = case.expected
        if expected.valid_syntax and not validation.is_valid:
            errors.append("Generated code has invalid Dart syntax")
            errors.extend(f"line {error.line}: {error.message}" for error in validation.errors)
        if expected.contains_widget and not _WIDGET_DECLARATION.search(code):
            errors.append("Generated code does not contain a Flutter widget")
        if expected.has_imports and _MATERIAL_IMPORT not in code:
            errors.append("Generated code is missing the Flutter material import")
        if expected.follows_widget_patterns and not follows_widget_patterns(code):
            errors.append("Generated code does not follow Flutter widget patterns")

        result = CaseResult(
            case=case,
            generated_code=code,
            validation=validation,
            passed=not errors,
            errors=errors,
            warnings=[warning.message for warning in validation.warnings],
            elapsed_ms=_elapsed_ms(started),
        )
        self.logger.info("%s: %s", case.name, "PASS" if result.passed else "FAIL")
        return result


def render_report(results: Sequence[CaseResult], templates_dir: Path | None = None) -> str:
    """Render a Markdown summary of harness results."""
    directories = [str(templates_dir)] if templates_dir else []
    directories.append(str(_TEMPLATES_DIR))
    env = Environment(
        loader=FileSystemLoader(directories),
        autoescape=False,
        trim_blocks=True,
        lstrip_blocks=True,
    )
    passed = sum(1 for result in results if result.passed)
    total = len(results)
    return env.get_template(REPORT_TEMPLATE).render(
        results=results,
        total=total,
        passed=passed,
        failed=total - passed,
        success_rate=(passed / total * 100) if total else 0.0,
    )


def _elapsed_ms(started: float) -> float:
    return (time.perf_counter() - started) * 1000


__all__ = [
    "DEFAULT_CASES",
    "CaseExpectations",
    "CaseResult",
    "GenerationCase",
    "GenerationHarness",
    "follows_widget_patterns",
    "render_report",
]
