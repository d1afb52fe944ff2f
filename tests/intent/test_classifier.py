"""Tests for lovable.intent.classifier."""

from __future__ import annotations

import pytest

from lovable.intent import INTENT_PATTERNS, analyze_edit_intent
from lovable.intent.classifier import calculate_confidence, generate_description
from lovable.models import EditType, ProposedPath
from tests._fixtures.manifest_builder import build_manifest


@pytest.fixture
def react_manifest():
    return build_manifest(
        {
            "src/App.jsx": """
                import Header from './Header';

                export default function App() {
                  return <Header />;
                }
            """,
            "src/Header.jsx": "export default function Header() { return <header />; }\n",
            "src/Footer.jsx": "export default function Footer() { return <footer />; }\n",
            "src/index.css": "body { margin: 0; }\n",
        }
    )


@pytest.fixture
def flutter_manifest():
    return build_manifest(
        {
            "lib/main.dart": """
                import 'package:flutter/material.dart';

                class DemoApp extends StatelessWidget {
                  const DemoApp({super.key});
                }
            """,
            "lib/widgets/profile_card.dart": """
                import 'package:flutter/material.dart';

                class ProfileCard extends StatelessWidget {
                  const ProfileCard({super.key});
                }
            """,
        }
    )


def test_screen_prompt_without_dart_files_targets_entry_point(react_manifest) -> None:
    intent = analyze_edit_intent("create a login screen with app bar", react_manifest)

    assert intent.type is EditType.CREATE_FLUTTER_SCREEN
    assert intent.target_files == [react_manifest.entry_point]
    assert intent.confidence == pytest.approx(1.0)


def test_component_update_resolves_named_file(react_manifest) -> None:
    intent = analyze_edit_intent("change the header color", react_manifest)

    assert intent.type is EditType.UPDATE_COMPONENT
    assert intent.target_files == ["src/Header.jsx"]
    assert intent.confidence == pytest.approx(0.9)
    assert intent.description == "Updating component(s): Header.jsx"


def test_unmatched_prompt_falls_back_to_entry_point(react_manifest) -> None:
    intent = analyze_edit_intent("hello there", react_manifest)

    assert intent.type is EditType.UPDATE_COMPONENT
    assert intent.target_files == ["src/App.jsx"]
    assert intent.confidence == pytest.approx(0.3)
    assert intent.description == "General update to application"
    assert intent.suggested_context == []


def test_feature_prompt_targets_named_location(react_manifest) -> None:
    intent = analyze_edit_intent("add a new section to the footer", react_manifest)

    assert intent.type is EditType.ADD_FEATURE
    assert intent.target_files == ["src/Footer.jsx"]
    assert intent.description == "Adding new feature to: Footer.jsx"
    assert "src/Footer.jsx" not in intent.suggested_context


def test_suggested_context_complements_targets(react_manifest) -> None:
    intent = analyze_edit_intent("change the header color", react_manifest)

    assert not set(intent.suggested_context) & set(intent.target_files)
    assert set(intent.suggested_context) | set(intent.target_files) == set(react_manifest.files)


def test_classification_is_deterministic(react_manifest) -> None:
    first = analyze_edit_intent("update the theme colors", react_manifest)
    second = analyze_edit_intent("update the theme colors", react_manifest)

    assert first == second
    assert first.type is EditType.UPDATE_STYLE
    assert first.target_files == ["src/index.css", "src/App.jsx"]


def test_widget_prompt_targets_main_dart(flutter_manifest) -> None:
    intent = analyze_edit_intent("create a profile widget", flutter_manifest)

    assert intent.type is EditType.CREATE_FLUTTER_WIDGET
    assert intent.target_files == ["lib/main.dart"]
    assert intent.description == "Creating Flutter widget in: main.dart"


def test_widget_update_finds_widget_file(flutter_manifest) -> None:
    intent = analyze_edit_intent("update the profile widget", flutter_manifest)

    assert intent.type is EditType.UPDATE_FLUTTER_WIDGET
    assert intent.target_files == ["lib/widgets/profile_card.dart"]


def test_navigation_prompt_targets_main_dart(flutter_manifest) -> None:
    intent = analyze_edit_intent("add a bottom navigation bar", flutter_manifest)

    assert intent.type is EditType.ADD_FLUTTER_NAVIGATION
    assert intent.target_files == ["lib/main.dart"]


def test_package_prompt_proposes_missing_pubspec(flutter_manifest) -> None:
    intent = analyze_edit_intent("add http package", flutter_manifest)

    assert intent.type is EditType.ADD_FLUTTER_PACKAGE
    assert intent.target_files == ["pubspec.yaml"]
    assert isinstance(intent.target_files[0], ProposedPath)
    assert intent.proposed_files == ["pubspec.yaml"]
    assert intent.confidence == pytest.approx(0.9)


def test_package_prompt_uses_existing_pubspec() -> None:
    manifest = build_manifest({"lib/main.dart": "void main() {}\n", "pubspec.yaml": "name: demo\n"})

    intent = analyze_edit_intent("add http package", manifest)

    assert intent.target_files == ["pubspec.yaml"]
    assert intent.proposed_files == []


def test_korean_screen_prompt(flutter_manifest) -> None:
    intent = analyze_edit_intent("로그인 화면 만들어줘", flutter_manifest)

    assert intent.type is EditType.CREATE_FLUTTER_SCREEN


def test_full_rebuild_targets_entry_point(react_manifest) -> None:
    intent = analyze_edit_intent("Let's start over", react_manifest)

    assert intent.type is EditType.FULL_REBUILD
    assert intent.target_files == ["src/App.jsx"]
    assert intent.description == "Rebuilding entire application"


def test_flutter_groups_precede_react_groups() -> None:
    order = [group.type for group in INTENT_PATTERNS]

    assert order[:5] == [
        EditType.CREATE_FLUTTER_WIDGET,
        EditType.CREATE_FLUTTER_SCREEN,
        EditType.UPDATE_FLUTTER_WIDGET,
        EditType.ADD_FLUTTER_NAVIGATION,
        EditType.ADD_FLUTTER_PACKAGE,
    ]


def test_calculate_confidence_components() -> None:
    group = INTENT_PATTERNS[0]

    assert calculate_confidence("xyz", group, [""]) == pytest.approx(0.5)
    assert calculate_confidence("xyz", group, ["lib/main.dart"]) == pytest.approx(0.7)
    assert calculate_confidence(
        "please create a counter widget for me", group, ["lib/main.dart"]
    ) == pytest.approx(1.0)


def test_generate_description_uses_file_names() -> None:
    description = generate_description(EditType.FIX_ISSUE, ["src/a/One.jsx", "src/Two.jsx"])

    assert description == "Fixing issue in: One.jsx, Two.jsx"
