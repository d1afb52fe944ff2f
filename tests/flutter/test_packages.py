"""Tests for lovable.flutter.packages."""

from __future__ import annotations

import pytest

from lovable.flutter.packages import (
    COMMON_PACKAGES,
    FlutterPackageManager,
    PubspecData,
    PubspecParseError,
)


@pytest.fixture
def manager() -> FlutterPackageManager:
    return FlutterPackageManager()


def test_default_pubspec(manager: FlutterPackageManager) -> None:
    pubspec = manager.create_default_pubspec("MyAwesomeApp")

    assert pubspec.name == "my_awesome_app"
    assert pubspec.description == "A new Flutter application."
    assert pubspec.version == "1.0.0+1"
    assert pubspec.environment == {"sdk": ">=3.1.0 <4.0.0"}
    assert pubspec.dependencies == {"flutter": "sdk: flutter", "cupertino_icons": "^1.0.2"}
    assert pubspec.dev_dependencies == {"flutter_test": "sdk: flutter", "flutter_lints": "^3.0.0"}
    assert pubspec.flutter == {"uses_material_design": True}


def test_serialize_writes_pubspec_yaml(manager: FlutterPackageManager) -> None:
    pubspec = manager.create_default_pubspec("MyAwesomeApp", "Shop front")

    text = manager.serialize_pubspec(pubspec)

    assert "name: my_awesome_app" in text
    assert "description: Shop front" in text
    assert "version: 1.0.0+1" in text
    assert "publish_to: none" in text
    assert "    sdk: flutter" in text
    assert "uses-material-design: true" in text
    assert manager.parse_pubspec(text) == pubspec


def test_serialize_omits_empty_flutter_section(manager: FlutterPackageManager) -> None:
    text = manager.serialize_pubspec(PubspecData(name="bare", description="d"))

    assert "flutter" not in text


def test_parse_fills_defaults(manager: FlutterPackageManager) -> None:
    pubspec = manager.parse_pubspec("dependencies:\n  http: ^1.2.0\n  path:\n")

    assert pubspec.name == "flutter_app"
    assert pubspec.description == "A Flutter application"
    assert pubspec.version == "1.0.0+1"
    assert pubspec.environment == {"sdk": ">=3.1.0 <4.0.0"}
    assert pubspec.dependencies == {"http": "^1.2.0", "path": "any"}
    assert pubspec.flutter == {}


def test_parse_normalises_flutter_section(manager: FlutterPackageManager) -> None:
    pubspec = manager.parse_pubspec(
        "name: demo\n"
        "flutter:\n"
        "  uses-material-design: true\n"
        "  assets:\n"
        "    - images/logo.png\n"
    )

    assert pubspec.flutter == {"uses_material_design": True, "assets": ["images/logo.png"]}


def test_parse_rejects_malformed_yaml(manager: FlutterPackageManager) -> None:
    with pytest.raises(PubspecParseError, match="Failed to parse pubspec.yaml"):
        manager.parse_pubspec("invalid: yaml: content: [unclosed")


def test_parse_rejects_non_mapping_root(manager: FlutterPackageManager) -> None:
    with pytest.raises(PubspecParseError):
        manager.parse_pubspec("- just\n- a list\n")


def test_add_package_resolves_versions(manager: FlutterPackageManager) -> None:
    pubspec = manager.create_default_pubspec("demo")

    updated = manager.add_package(pubspec, "http")
    updated = manager.add_package(updated, "mockito", dev=True)
    updated = manager.add_package(updated, "left_pad")
    updated = manager.add_package(updated, "dio", "^5.0.0")

    assert updated.dependencies["http"] == "^1.2.0"
    assert updated.dev_dependencies["mockito"] == "^5.4.2"
    assert updated.dependencies["left_pad"] == "^1.0.0"
    assert updated.dependencies["dio"] == "^5.0.0"
    assert "http" not in pubspec.dependencies


def test_remove_package_drops_from_both_sections(manager: FlutterPackageManager) -> None:
    pubspec = manager.add_package(manager.create_default_pubspec("demo"), "http")

    updated = manager.remove_package(manager.remove_package(pubspec, "http"), "flutter_lints")

    assert "http" not in updated.dependencies
    assert "flutter_lints" not in updated.dev_dependencies
    assert "http" in pubspec.dependencies


def test_add_asset_is_idempotent(manager: FlutterPackageManager) -> None:
    pubspec = manager.create_default_pubspec("demo")

    updated = manager.add_asset(manager.add_asset(pubspec, "images/"), "images/")

    assert updated.flutter["assets"] == ["images/"]
    assert "assets" not in pubspec.flutter


def test_add_font_replaces_existing_family(manager: FlutterPackageManager) -> None:
    pubspec = manager.create_default_pubspec("demo")

    updated = manager.add_font(pubspec, "Inter", [{"asset": "fonts/Inter-Regular.ttf"}])
    updated = manager.add_font(
        updated, "Inter", [{"asset": "fonts/Inter-Bold.ttf", "weight": 700}]
    )

    assert updated.flutter["fonts"] == [
        {"family": "Inter", "fonts": [{"asset": "fonts/Inter-Bold.ttf", "weight": 700}]}
    ]


def test_analyze_package_needs(manager: FlutterPackageManager) -> None:
    code = (
        "import 'package:flutter/material.dart';\n"
        "import 'package:http/http.dart' as http;\n"
        "import 'package:provider/provider.dart';\n"
        "import 'widgets/tile.dart';\n"
        "\n"
        "final prefs = await SharedPreferences.getInstance();\n"
        "final cart = Consumer<Cart>(builder: build);\n"
    )

    packages = manager.analyze_package_needs(code)

    assert [package.name for package in packages] == ["http", "provider", "shared_preferences"]
    assert packages[0].version == "^1.2.0"
    assert packages[0].description == "Auto-detected from import: package:http/http.dart"
    assert packages[2].description == "Persistent storage for simple data"


def test_validate_pubspec_accepts_default(manager: FlutterPackageManager) -> None:
    result = manager.validate_pubspec(manager.create_default_pubspec("demo"))

    assert result.is_valid
    assert result.errors == []


def test_validate_pubspec_reports_every_problem(manager: FlutterPackageManager) -> None:
    result = manager.validate_pubspec(
        PubspecData(name="Bad-Name", version="1.0", environment={}, dependencies={})
    )

    assert not result.is_valid
    assert result.errors == [
        "Package name must start with a lowercase letter and contain only "
        "lowercase letters, numbers, and underscores",
        "Version must follow semantic versioning format (e.g., 1.0.0+1)",
        "Dart SDK constraint is required",
        "Flutter dependency is required",
    ]


def test_validate_pubspec_requires_name_and_version(manager: FlutterPackageManager) -> None:
    pubspec = manager.create_default_pubspec("demo")
    pubspec.name = ""
    pubspec.version = ""

    result = manager.validate_pubspec(pubspec)

    assert result.errors == ["Package name is required", "Version is required"]


def test_packages_for_prompt(manager: FlutterPackageManager) -> None:
    assert manager.packages_for_prompt("Fetch data from an API and cache network image") == [
        "http",
        "image_picker",
        "cached_network_image",
    ]
    assert manager.packages_for_prompt("make the button blue") == []


def test_generate_pubspec_from_prompt(manager: FlutterPackageManager) -> None:
    pubspec = manager.generate_pubspec_from_prompt("Track GPS location", "RunTracker")

    assert pubspec.name == "run_tracker"
    assert pubspec.dependencies["geolocator"] == "^10.1.0"


def test_suggested_packages_by_category(manager: FlutterPackageManager) -> None:
    state = manager.get_suggested_packages("state")
    everything = manager.get_suggested_packages()

    assert [package.name for package in state] == ["provider", "riverpod", "flutter_riverpod"]
    assert state[0].description == "State management library"
    assert len(everything) == len(COMMON_PACKAGES)
    assert len(manager.get_suggested_packages("unknown")) == len(COMMON_PACKAGES)
    freezed = next(package for package in everything if package.name == "freezed_annotation")
    assert freezed.description == "Flutter package"
