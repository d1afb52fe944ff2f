"""Tests for the prompt-to-code pipeline."""

from __future__ import annotations

from pathlib import Path
from typing import Any

from lovable.config import LovableConfig, ValidationConfig
from lovable.flutter import FlutterPackageManager
from lovable.models import EditType, ProjectType, ProposedPath
from lovable.pipeline import EditPipeline
from tests._fixtures.manifest_builder import build_manifest

MAIN_DART = """
import 'package:flutter/material.dart';

void main() {
  runApp(const MyApp());
}
"""

PUBSPEC = """
name: demo_app
version: 2.0.0+3
dependencies:
  flutter:
    sdk: flutter
"""


def _flutter_config(tmp_path: Path, **overrides: Any) -> LovableConfig:
    return LovableConfig(root=tmp_path, project_type=ProjectType.FLUTTER_MOBILE, **overrides)


def test_widget_prompt_generates_checked_code() -> None:
    manifest = build_manifest({"lib/main.dart": MAIN_DART, "pubspec.yaml": PUBSPEC})

    result = EditPipeline().run("create a profile widget", manifest, ProjectType.FLUTTER_MOBILE)

    assert result.intent.type is EditType.CREATE_FLUTTER_WIDGET
    assert result.intent.target_files == ["lib/main.dart"]
    assert result.generated_code is not None
    assert "class ProfileWidget extends StatelessWidget" in result.generated_code
    assert result.is_valid
    assert result.complexity is not None
    assert result.complexity.number_of_methods >= 1
    assert any(finding.code == "prefer_const_constructors" for finding in result.lint)
    assert result.pubspec is None


def test_react_projects_only_classify() -> None:
    manifest = build_manifest({"src/App.jsx": "export default function App() { return null; }"})

    result = EditPipeline().run("create a profile widget", manifest)

    assert result.project_type is ProjectType.REACT_WEB
    assert result.intent.type is EditType.CREATE_FLUTTER_WIDGET
    assert result.generated_code is None
    assert result.validation is None
    assert result.is_valid


def test_navigation_prompt_has_no_generated_output(tmp_path: Path) -> None:
    manifest = build_manifest({"lib/main.dart": MAIN_DART})
    pipeline = EditPipeline(config=_flutter_config(tmp_path))

    result = pipeline.run("add a bottom navigation", manifest)

    assert result.intent.type is EditType.ADD_FLUTTER_NAVIGATION
    assert result.generated_code is None
    assert result.pubspec is None


def test_package_prompt_updates_existing_pubspec(tmp_path: Path) -> None:
    manifest = build_manifest({"lib/main.dart": MAIN_DART, "pubspec.yaml": PUBSPEC})
    pipeline = EditPipeline(config=_flutter_config(tmp_path))

    result = pipeline.run("add http package", manifest)

    assert result.intent.type is EditType.ADD_FLUTTER_PACKAGE
    assert result.pubspec_path == "pubspec.yaml"
    assert not result.pubspec_created
    assert [package.name for package in result.packages] == ["http"]
    assert result.pubspec is not None
    pubspec = FlutterPackageManager().parse_pubspec(result.pubspec)
    assert pubspec.name == "demo_app"
    assert pubspec.version == "2.0.0+3"
    assert pubspec.dependencies == {"flutter": "sdk: flutter", "http": "^1.2.0"}


def test_package_prompt_proposes_missing_pubspec(tmp_path: Path) -> None:
    manifest = build_manifest({"lib/main.dart": MAIN_DART})
    pipeline = EditPipeline(config=_flutter_config(tmp_path, project_name="RunTracker"))

    result = pipeline.run("flutter pub add dio", manifest)

    assert result.intent.target_files == [ProposedPath("pubspec.yaml")]
    assert result.intent.proposed_files == ["pubspec.yaml"]
    assert result.pubspec_created
    assert result.pubspec_path == "pubspec.yaml"
    assert result.pubspec is not None
    pubspec = FlutterPackageManager().parse_pubspec(result.pubspec)
    assert pubspec.name == "run_tracker"
    assert pubspec.dependencies["dio"] == "^5.3.2"
    assert pubspec.dependencies["cupertino_icons"] == "^1.0.2"


def test_packages_already_present_are_not_reported(tmp_path: Path) -> None:
    pubspec_with_http = PUBSPEC + "  http: ^0.13.0\n"
    manifest = build_manifest({"pubspec.yaml": pubspec_with_http})
    pipeline = EditPipeline(config=_flutter_config(tmp_path))

    result = pipeline.run("add http package", manifest)

    assert result.packages == []
    assert result.pubspec is not None
    assert FlutterPackageManager().parse_pubspec(result.pubspec).dependencies["http"] == "^0.13.0"


def test_packages_from_prompt() -> None:
    pipeline = EditPipeline()

    assert pipeline.packages_from_prompt(
        "Please install the provider package and add state management"
    ) == ["provider"]
    assert pipeline.packages_from_prompt("add flutter lottie package for animation") == ["lottie"]
    assert pipeline.packages_from_prompt("add a new package") == []
    assert pipeline.packages_from_prompt("flutter pub add dio and call the api") == ["dio", "http"]


def test_config_controls_lint_and_format(tmp_path: Path) -> None:
    config = _flutter_config(tmp_path, validation=ValidationConfig(lint=False, format=True))
    manifest = build_manifest({"lib/main.dart": MAIN_DART})

    result = EditPipeline(config=config).run("create a login screen", manifest)

    assert result.intent.type is EditType.CREATE_FLUTTER_SCREEN
    assert result.lint == []
    assert result.validation is not None
    assert result.generated_code == result.validation.formatted_code


def test_config_templates_dir_overrides_templates(tmp_path: Path) -> None:
    (tmp_path / "stateless-widget.template").write_text(
        "// {{widget_name}}\n", encoding="utf-8"
    )
    config = _flutter_config(tmp_path, templates_dir=tmp_path)
    manifest = build_manifest({"lib/main.dart": MAIN_DART})

    result = EditPipeline(config=config).run("create a profile widget", manifest)

    assert result.generated_code == "// ProfileWidget\n"
