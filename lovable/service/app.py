"""FastAPI application entrypoint for lovable service mode."""

from __future__ import annotations

import asyncio
from typing import Any, Callable, Dict, List, Optional

from fastapi import Depends, FastAPI
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from ..manifest import ManifestBuilder
from ..models import ProjectType
from ..pipeline import EditPipeline
from ..validators import DartValidationError


class ClassifyRequest(BaseModel):
    prompt: str
    files: Dict[str, str] = Field(default_factory=dict)


class ClassifyResponse(BaseModel):
    type: str
    target_files: List[str]
    proposed_files: List[str]
    confidence: float
    description: str
    suggested_context: List[str]


class GenerateRequest(BaseModel):
    prompt: str
    project_type: str = ProjectType.FLUTTER_MOBILE.value


class Finding(BaseModel):
    line: int
    column: int
    message: str
    severity: str
    code: Optional[str] = None


class GenerateResponse(BaseModel):
    code: str
    is_valid: bool
    errors: List[Finding]
    warnings: List[Finding]


class EditRequest(BaseModel):
    prompt: str
    files: Dict[str, str] = Field(default_factory=dict)
    project_type: str = ProjectType.FLUTTER_MOBILE.value


class Package(BaseModel):
    name: str
    version: str


class EditResponse(BaseModel):
    type: str
    target_files: List[str]
    proposed_files: List[str]
    confidence: float
    description: str
    code: Optional[str] = None
    is_valid: bool
    errors: List[Finding] = Field(default_factory=list)
    warnings: List[Finding] = Field(default_factory=list)
    lint: List[Finding] = Field(default_factory=list)
    packages: List[Package] = Field(default_factory=list)
    pubspec_path: Optional[str] = None
    pubspec: Optional[str] = None
    pubspec_created: bool = False


class ValidateRequest(BaseModel):
    code: str
    lint: bool = False


class Complexity(BaseModel):
    cyclomatic_complexity: int
    lines_of_code: int
    number_of_methods: int
    nesting_depth: int


class ValidateResponse(BaseModel):
    is_valid: bool
    errors: List[Finding]
    warnings: List[Finding]
    complexity: Complexity
    lint: List[Finding] = Field(default_factory=list)
    formatted_code: Optional[str] = None


class HealthResponse(BaseModel):
    status: str


def _default_pipeline() -> EditPipeline:
    return EditPipeline()


def _findings(errors: List[DartValidationError]) -> List[Finding]:
    return [
        Finding(
            line=error.line,
            column=error.column,
            message=error.message,
            severity=error.severity.value,
            code=error.code,
        )
        for error in errors
    ]


async def _run_blocking(func: Callable[[], Any]) -> Any:
    loop = asyncio.get_running_loop()
    return await loop.run_in_executor(None, func)


def create_app(
    pipeline_factory: Callable[[], EditPipeline] = _default_pipeline,
) -> FastAPI:
    """Create the FastAPI application exposing lovable operations."""
    app = FastAPI(title="Lovable Service", version="1.0.0")

    async def get_pipeline() -> EditPipeline:
        return pipeline_factory()

    @app.get("/health", response_model=HealthResponse)
    async def health() -> HealthResponse:
        return HealthResponse(status="ok")

    @app.post("/classify", response_model=ClassifyResponse)
    async def classify(
        payload: ClassifyRequest,
        pipeline: EditPipeline = Depends(get_pipeline),
    ) -> ClassifyResponse:
        def _classify() -> ClassifyResponse:
            manifest = ManifestBuilder().build(payload.files)
            intent = pipeline.classify(payload.prompt, manifest)
            return ClassifyResponse(
                type=intent.type.value,
                target_files=[str(path) for path in intent.target_files],
                proposed_files=[str(path) for path in intent.proposed_files],
                confidence=intent.confidence,
                description=intent.description,
                suggested_context=intent.suggested_context,
            )

        return await _run_blocking(_classify)

    @app.post("/generate", response_model=GenerateResponse)
    async def generate(
        payload: GenerateRequest,
        pipeline: EditPipeline = Depends(get_pipeline),
    ) -> GenerateResponse:
        def _generate() -> GenerateResponse:
            project_type = ProjectType.from_string(payload.project_type)
            code = pipeline.generator.generate_flutter_code_from_prompt(payload.prompt, project_type)
            result = pipeline.validator.validate(code)
            return GenerateResponse(
                code=code,
                is_valid=result.is_valid,
                errors=_findings(result.errors),
                warnings=_findings(result.warnings),
            )

        return await _run_blocking(_generate)

    @app.post("/edit", response_model=EditResponse)
    async def edit(
        payload: EditRequest,
        pipeline: EditPipeline = Depends(get_pipeline),
    ) -> EditResponse:
        def _edit() -> EditResponse:
            manifest = ManifestBuilder().build(payload.files)
            project_type = ProjectType.from_string(payload.project_type)
            result = pipeline.run(payload.prompt, manifest, project_type)
            intent = result.intent
            validation = result.validation
            return EditResponse(
                type=intent.type.value,
                target_files=[str(path) for path in intent.target_files],
                proposed_files=[str(path) for path in intent.proposed_files],
                confidence=intent.confidence,
                description=intent.description,
                code=result.generated_code,
                is_valid=result.is_valid,
                errors=_findings(validation.errors) if validation else [],
                warnings=_findings(validation.warnings) if validation else [],
                lint=_findings(result.lint),
                packages=[
                    Package(name=package.name, version=package.version)
                    for package in result.packages
                ],
                pubspec_path=result.pubspec_path,
                pubspec=result.pubspec,
                pubspec_created=result.pubspec_created,
            )

        return await _run_blocking(_edit)

    @app.post("/validate", response_model=ValidateResponse)
    async def validate(
        payload: ValidateRequest,
        pipeline: EditPipeline = Depends(get_pipeline),
    ) -> ValidateResponse:
        validator = pipeline.validator
        result = validator.validate(payload.code)
        complexity = validator.analyze_complexity(payload.code)
        return ValidateResponse(
            is_valid=result.is_valid,
            errors=_findings(result.errors),
            warnings=_findings(result.warnings),
            lint=_findings(validator.lint(payload.code)) if payload.lint else [],
            formatted_code=result.formatted_code,
            complexity=Complexity(
                cyclomatic_complexity=complexity.cyclomatic_complexity,
                lines_of_code=complexity.lines_of_code,
                number_of_methods=complexity.number_of_methods,
                nesting_depth=complexity.nesting_depth,
            ),
        )

    @app.exception_handler(RuntimeError)
    async def runtime_error_handler(_: Any, exc: RuntimeError) -> JSONResponse:
        return JSONResponse(status_code=400, content={"detail": str(exc)})

    return app


def run_service(
    host: str = "0.0.0.0", port: int = 8000
) -> None:  # pragma: no cover - integration path
    import uvicorn

    app = create_app()
    uvicorn.run(app, host=host, port=port)
