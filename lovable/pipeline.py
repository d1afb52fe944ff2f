"""Prompt-to-code pipeline: classify, generate, check."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import List, Optional

from .config import LovableConfig
from .flutter.generator import FlutterCodeGenerator
from .flutter.packages import FlutterPackage, FlutterPackageManager, PubspecData
from .flutter.templates import TemplateStore
from .intent.classifier import analyze_edit_intent
from .intent.resolvers import DEFAULT_PUBSPEC_PATH
from .logging import get_logger
from .models import EditIntent, EditType, FileManifest, ProjectType, ProposedPath
from .validators import ComplexityReport, DartValidationError, DartValidationResult, DartValidator

CODE_EDIT_TYPES = frozenset(
    {
        EditType.CREATE_FLUTTER_WIDGET,
        EditType.CREATE_FLUTTER_SCREEN,
        EditType.UPDATE_FLUTTER_WIDGET,
    }
)

_NAMED_PACKAGE = (
    re.compile(r"flutter\s+pub\s+add\s+(\w+)", re.IGNORECASE),
    re.compile(
        r"(?:add|install|use)\s+(?:(?:a|an|the)\s+)?(\w+)\s+(?:flutter\s+)?(?:package|dependency|library)",
        re.IGNORECASE,
    ),
    re.compile(r"(?:add|install)\s+flutter\s+(\w+)\s+(?:package|dependency)", re.IGNORECASE),
)
_NOT_PACKAGE_NAMES = frozenset({"a", "an", "the", "new", "flutter", "dart", "pub"})


@dataclass
class PipelineResult:
    """Everything produced for one prompt."""

    intent: EditIntent
    project_type: ProjectType
    generated_code: Optional[str] = None
    validation: Optional[DartValidationResult] = None
    lint: List[DartValidationError] = field(default_factory=list)
    complexity: Optional[ComplexityReport] = None
    packages: List[FlutterPackage] = field(default_factory=list)
    pubspec_path: Optional[str] = None
    pubspec: Optional[str] = None
    pubspec_created: bool = False

    @property
    def is_valid(self) -> bool:
        return self.validation is None or self.validation.is_valid


class EditPipeline:
    """Runs a prompt through classification and, for Flutter targets, generation."""

    def __init__(
        self,
        generator: FlutterCodeGenerator | None = None,
        package_manager: FlutterPackageManager | None = None,
        validator: DartValidator | None = None,
        config: LovableConfig | None = None,
    ) -> None:
        self.config = config
        templates_dir = config.templates_dir if config is not None else None
        self.generator = generator or FlutterCodeGenerator(TemplateStore(templates_dir))
        self.package_manager = package_manager or FlutterPackageManager()
        self.validator = validator or DartValidator()
        self.logger = get_logger("pipeline")

    def classify(self, prompt: str, manifest: FileManifest) -> EditIntent:
        return analyze_edit_intent(prompt, manifest)

    def run(
        self,
        prompt: str,
        manifest: FileManifest,
        project_type: ProjectType | None = None,
    ) -> PipelineResult:
        """Classify ``prompt`` and produce code or a pubspec for Flutter intents.

        React intents come back with only the classification; writing React
        code is left to the caller.
        """
        resolved_type = project_type or (
            self.config.project_type if self.config is not None else ProjectType.REACT_WEB
        )
        intent = self.classify(prompt, manifest)
        self.logger.info(
            "Prompt classified as %s (confidence %.2f)", intent.type.value, intent.confidence
        )
        result = PipelineResult(intent=intent, project_type=resolved_type)

        if resolved_type is not ProjectType.FLUTTER_MOBILE:
            return result
        if intent.type in CODE_EDIT_TYPES:
            self._generate_code(prompt, result)
        elif intent.type is EditType.ADD_FLUTTER_PACKAGE:
            self._update_pubspec(prompt, manifest, result)
        return result

    def _generate_code(self, prompt: str, result: PipelineResult) -> None:
        code = self.generator.generate_flutter_code_from_prompt(prompt, result.project_type)
        validation = self.validator.validate(code)
        result.validation = validation
        result.complexity = self.validator.analyze_complexity(code)
        result.packages = self.package_manager.analyze_package_needs(code)

        validation_config = self.config.validation if self.config is not None else None
        if validation_config is None or validation_config.lint:
            result.lint = self.validator.lint(code)
        if validation_config is not None and validation_config.format:
            code = validation.formatted_code or code
        result.generated_code = code

        self.logger.info(
            "Generated %d lines (%d errors, %d warnings)",
            len(code.splitlines()),
            len(validation.errors),
            len(validation.warnings),
        )

    def _update_pubspec(self, prompt: str, manifest: FileManifest, result: PipelineResult) -> None:
        targets = result.intent.target_files
        target = targets[0] if targets else ProposedPath(DEFAULT_PUBSPEC_PATH)
        existing = None if isinstance(target, ProposedPath) else manifest.files.get(target)

        pubspec: PubspecData
        if existing is None:
            project_name = self.config.project_name if self.config is not None else None
            pubspec = self.package_manager.create_default_pubspec(project_name or "flutter_app")
            result.pubspec_created = True
            self.logger.info("No pubspec found; creating %s", target)
        else:
            pubspec = self.package_manager.parse_pubspec(existing.content)

        for name in self.packages_from_prompt(prompt):
            if name not in pubspec.dependencies:
                pubspec = self.package_manager.add_package(pubspec, name)
                result.packages.append(
                    FlutterPackage(name=name, version=str(pubspec.dependencies[name]))
                )

        result.pubspec_path = str(target)
        result.pubspec = self.package_manager.serialize_pubspec(pubspec)

    def packages_from_prompt(self, prompt: str) -> List[str]:
        """Package names spelled out in the prompt, then those implied by its keywords."""
        names: List[str] = []
        for pattern in _NAMED_PACKAGE:
            for match in pattern.finditer(prompt):
                name = match.group(1).lower()
                if name not in _NOT_PACKAGE_NAMES and name not in names:
                    names.append(name)
        for name in self.package_manager.packages_for_prompt(prompt):
            if name not in names:
                names.append(name)
        return names


__all__ = ["CODE_EDIT_TYPES", "EditPipeline", "PipelineResult"]
