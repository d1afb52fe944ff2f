"""CLI entrypoints for lovable commands."""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Any, Dict, List

from .config import ConfigError, LovableConfig, load_config
from .harness import GenerationHarness, render_report
from .logging import configure_logging, get_logger
from .manifest import ManifestBuilder
from .models import ProjectType
from .pipeline import EditPipeline, PipelineResult
from .validators import DartValidationError, DartValidator

GENERATED_SOURCE_NAME = "generated.dart"

logger = get_logger("cli")


def _add_logging_options(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        default=argparse.SUPPRESS if suppress_default else False,
        help="Increase log verbosity for troubleshooting.",
    )
    parser.add_argument(
        "-q",
        "--quiet",
        action="store_true",
        default=argparse.SUPPRESS if suppress_default else False,
        help="Only log warnings and errors.",
    )


def _add_path_option(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--path",
        default=".",
        help="Project root holding .lovable.yml (defaults to current directory).",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="lovable",
        description="Classify edit prompts and generate Flutter code for app projects.",
    )
    _add_logging_options(parser)
    parser.add_argument(
        "--log-file",
        default=None,
        help="Also write DEBUG-level logs to this file.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    classify_parser = subparsers.add_parser(
        "classify",
        help="Classify a prompt and list the project files it should edit.",
    )
    _add_logging_options(classify_parser, suppress_default=True)
    classify_parser.add_argument("prompt", help="Edit request in natural language.")
    classify_parser.add_argument(
        "path",
        nargs="?",
        default=".",
        help="Path to the project root (defaults to current directory).",
    )
    classify_parser.add_argument(
        "--json",
        action="store_true",
        help="Print the intent as JSON.",
    )

    generate_parser = subparsers.add_parser(
        "generate",
        help="Generate Flutter code from a prompt.",
    )
    _add_logging_options(generate_parser, suppress_default=True)
    _add_path_option(generate_parser)
    generate_parser.add_argument("prompt", help="Description of the widget, screen or app.")
    generate_parser.add_argument(
        "--project-type",
        choices=[member.value for member in ProjectType],
        default=None,
        help="Override the project type from .lovable.yml.",
    )

    edit_parser = subparsers.add_parser(
        "edit",
        help="Classify a prompt against a project and produce the code or pubspec it needs.",
    )
    _add_logging_options(edit_parser, suppress_default=True)
    edit_parser.add_argument("prompt", help="Edit request in natural language.")
    edit_parser.add_argument(
        "path",
        nargs="?",
        default=".",
        help="Path to the project root (defaults to current directory).",
    )
    edit_parser.add_argument(
        "--project-type",
        choices=[member.value for member in ProjectType],
        default=None,
        help="Override the project type from .lovable.yml.",
    )
    edit_parser.add_argument(
        "--json",
        action="store_true",
        help="Print the pipeline result as JSON.",
    )
    edit_parser.add_argument(
        "--write",
        action="store_true",
        help="Write an updated pubspec back into the project.",
    )

    validate_parser = subparsers.add_parser(
        "validate",
        help="Run the heuristic Dart checks over a source file.",
    )
    _add_logging_options(validate_parser, suppress_default=True)
    validate_parser.add_argument("file", help="Dart source file to check.")
    validate_parser.add_argument(
        "--lint",
        action="store_true",
        help="Also report Flutter lint findings.",
    )
    validate_parser.add_argument(
        "--format",
        action="store_true",
        help="Print the formatted source instead of findings.",
    )

    selfcheck_parser = subparsers.add_parser(
        "selfcheck",
        help="Generate and validate code for the built-in prompt cases.",
    )
    _add_logging_options(selfcheck_parser, suppress_default=True)
    _add_path_option(selfcheck_parser)
    selfcheck_parser.add_argument(
        "--output",
        default=None,
        help="Write the Markdown report to this file instead of stdout.",
    )

    serve_parser = subparsers.add_parser(
        "serve",
        help="Run the HTTP service.",
    )
    _add_logging_options(serve_parser, suppress_default=True)
    serve_parser.add_argument("--host", default="0.0.0.0", help="Interface to bind.")
    serve_parser.add_argument("--port", type=int, default=8000, help="Port to listen on.")

    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for lovable commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(
        verbose=bool(args.verbose),
        quiet=bool(args.quiet),
        log_file=Path(args.log_file) if args.log_file else None,
    )

    if args.command == "classify":
        _run_classify(parser, args)
    elif args.command == "generate":
        _run_generate(parser, args)
    elif args.command == "edit":
        _run_edit(parser, args)
    elif args.command == "validate":
        _run_validate(parser, args)
    elif args.command == "selfcheck":
        _run_selfcheck(parser, args)
    elif args.command == "serve":
        from .service import run_service

        run_service(host=args.host, port=args.port)
    else:  # pragma: no cover - argparse enforces choices
        parser.exit(1, "Unknown command\n")


def _load_project_config(parser: argparse.ArgumentParser, path: str) -> LovableConfig:
    try:
        return load_config(Path(path))
    except ConfigError as exc:
        parser.exit(1, f"{exc}\n")


def _run_classify(parser: argparse.ArgumentParser, args: argparse.Namespace) -> None:
    try:
        manifest = ManifestBuilder().scan(args.path)
    except (FileNotFoundError, NotADirectoryError) as exc:
        parser.exit(1, f"{exc}\n")
    intent = EditPipeline().classify(args.prompt, manifest)

    if args.json:
        print(
            json.dumps(
                {
                    "type": intent.type.value,
                    "target_files": list(intent.target_files),
                    "proposed_files": list(intent.proposed_files),
                    "confidence": intent.confidence,
                    "description": intent.description,
                    "suggested_context": intent.suggested_context,
                },
                indent=2,
            )
        )
        return

    print(f"{intent.type.value} (confidence {intent.confidence:.2f})")
    print(intent.description)
    proposed = set(intent.proposed_files)
    for path in intent.target_files:
        marker = " (new)" if path in proposed else ""
        print(f"  {path or '(no entry point)'}{marker}")


def _run_generate(parser: argparse.ArgumentParser, args: argparse.Namespace) -> None:
    config = _load_project_config(parser, args.path)
    project_type = (
        ProjectType.from_string(args.project_type) if args.project_type else config.project_type
    )
    pipeline = EditPipeline(config=config)
    try:
        code = pipeline.generator.generate_flutter_code_from_prompt(args.prompt, project_type)
    except RuntimeError as exc:
        parser.exit(1, f"lovable generate failed: {exc}\n")
    print(code)


def _run_edit(parser: argparse.ArgumentParser, args: argparse.Namespace) -> None:
    try:
        manifest = ManifestBuilder().scan(args.path)
    except (FileNotFoundError, NotADirectoryError) as exc:
        parser.exit(1, f"{exc}\n")
    config = _load_project_config(parser, args.path)
    project_type = ProjectType.from_string(args.project_type) if args.project_type else None
    try:
        result = EditPipeline(config=config).run(args.prompt, manifest, project_type)
    except RuntimeError as exc:
        parser.exit(1, f"lovable edit failed: {exc}\n")

    if args.write and result.pubspec is not None and result.pubspec_path:
        target = Path(args.path) / result.pubspec_path
        target.write_text(result.pubspec, encoding="utf-8")
        logger.info("Wrote %s", target)

    if args.json:
        print(json.dumps(_result_payload(result), indent=2))
    else:
        _print_result(result)
    if not result.is_valid:
        parser.exit(1, "Generated code has errors\n")


def _result_payload(result: PipelineResult) -> Dict[str, Any]:
    intent = result.intent
    errors = result.validation.errors if result.validation is not None else []
    warnings = result.validation.warnings if result.validation is not None else []
    return {
        "type": intent.type.value,
        "project_type": result.project_type.value,
        "target_files": [str(path) for path in intent.target_files],
        "proposed_files": [str(path) for path in intent.proposed_files],
        "confidence": intent.confidence,
        "description": intent.description,
        "code": result.generated_code,
        "is_valid": result.is_valid,
        "errors": [_finding_payload(error) for error in errors],
        "warnings": [_finding_payload(warning) for warning in warnings],
        "lint": [_finding_payload(finding) for finding in result.lint],
        "packages": [
            {"name": package.name, "version": package.version} for package in result.packages
        ],
        "pubspec_path": result.pubspec_path,
        "pubspec": result.pubspec,
        "pubspec_created": result.pubspec_created,
    }


def _finding_payload(finding: DartValidationError) -> Dict[str, Any]:
    return {
        "line": finding.line,
        "column": finding.column,
        "message": finding.message,
        "severity": finding.severity.value,
        "code": finding.code,
    }


def _print_result(result: PipelineResult) -> None:
    intent = result.intent
    print(f"{intent.type.value} (confidence {intent.confidence:.2f})")
    print(intent.description)

    if result.generated_code is not None:
        print()
        print(result.generated_code)
        findings: List[DartValidationError] = list(result.lint)
        if result.validation is not None:
            findings = [*result.validation.errors, *result.validation.warnings, *findings]
        for finding in findings:
            print(_describe(Path(GENERATED_SOURCE_NAME), finding))

    if result.pubspec is not None:
        marker = " (new)" if result.pubspec_created else ""
        print()
        print(f"# {result.pubspec_path}{marker}")
        for package in result.packages:
            print(f"# + {package.name}: {package.version}")
        print(result.pubspec, end="")


def _run_validate(parser: argparse.ArgumentParser, args: argparse.Namespace) -> None:
    source_path = Path(args.file)
    try:
        code = source_path.read_text(encoding="utf-8")
    except OSError as exc:
        parser.exit(1, f"Cannot read {source_path}: {exc}\n")

    validator = DartValidator()
    result = validator.validate(code)
    if args.format:
        print(result.formatted_code or "")
        return

    findings: List[DartValidationError] = [*result.errors, *result.warnings]
    if args.lint:
        findings.extend(validator.lint(code))
    for finding in sorted(findings, key=lambda item: (item.line, item.column)):
        print(_describe(source_path, finding))

    print(f"{len(result.errors)} error(s), {len(findings) - len(result.errors)} other finding(s)")
    if not result.is_valid:
        parser.exit(1)


def _run_selfcheck(parser: argparse.ArgumentParser, args: argparse.Namespace) -> None:
    config = _load_project_config(parser, args.path)
    pipeline = EditPipeline(config=config)
    results = GenerationHarness(pipeline.generator, pipeline.validator).run_all()
    report = render_report(results)
    if args.output:
        Path(args.output).write_text(report, encoding="utf-8")
        print(f"Report written to {args.output}")
    else:
        print(report)
    if not all(result.passed for result in results):
        parser.exit(1, "Self-check failed\n")


def _describe(path: Path, finding: DartValidationError) -> str:
    code = f" [{finding.code}]" if finding.code else ""
    return f"{path}:{finding.line}:{finding.column}: {finding.severity.value}: {finding.message}{code}"


if __name__ == "__main__":
    main(sys.argv[1:])
