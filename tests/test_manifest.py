"""Tests for lovable.manifest."""

from __future__ import annotations

from pathlib import Path

import pytest

from lovable.manifest import ManifestBuilder, resolve_import_path
from lovable.models import RouteInfo
from tests._fixtures.manifest_builder import ProjectBuilder, build_manifest


REACT_FILES = {
    "src/App.jsx": """
        import React from 'react';
        import Header from './components/Header';
        import { Footer } from './components/Footer';

        export default function App() {
          return (<div><Header /><Footer /></div>);
        }
    """,
    "src/components/Header.jsx": """
        import { useState } from 'react';

        export default function Header({ title, subtitle }) {
          const [open, setOpen] = useState(false);
          return <header>{title}</header>;
        }
    """,
    "src/components/Footer.jsx": "export const Footer = () => <footer />;\n",
    "src/index.css": "body { margin: 0; }\n",
    "src/hooks/useAuth.js": "export function useAuth() { return null; }\n",
}


def test_build_indexes_react_sources() -> None:
    manifest = build_manifest(REACT_FILES)

    assert manifest.entry_point == "src/App.jsx"
    assert manifest.style_files == ["src/index.css"]
    assert manifest.files["src/App.jsx"].type == "component"
    assert manifest.files["src/index.css"].type == "style"
    assert manifest.files["src/hooks/useAuth.js"].type == "hook"

    header = manifest.files["src/components/Header.jsx"].component_info
    assert header is not None
    assert header.name == "Header"
    assert header.props == ["title", "subtitle"]
    assert header.hooks == ["useState"]
    assert header.has_state is True

    app = manifest.files["src/App.jsx"]
    assert app.component_info is not None
    assert app.component_info.child_components == ["Header", "Footer"]
    sources = {item.source: item for item in app.imports}
    assert sources["react"].is_local is False
    assert sources["./components/Header"].default_import == "Header"
    assert sources["./components/Footer"].imports == ["Footer"]

    assert manifest.files["src/components/Footer.jsx"].exports == ["Footer"]


def test_build_links_component_tree() -> None:
    manifest = build_manifest(REACT_FILES)

    tree = manifest.component_tree
    assert tree["App"].file == "src/App.jsx"
    assert tree["App"].imports == ["Header", "Footer"]
    assert tree["Header"].imported_by == ["App"]
    assert tree["Footer"].imported_by == ["App"]


def test_build_without_files_has_empty_entry_point() -> None:
    manifest = ManifestBuilder().build({})

    assert manifest.files == {}
    assert manifest.entry_point == ""


def test_scan_flutter_project(project_builder: ProjectBuilder) -> None:
    project_builder.write(
        {
            "pubspec.yaml": "name: demo\n",
            "lib/main.dart": """
                import 'package:flutter/material.dart';
                import 'screens/home_screen.dart';

                void main() => runApp(const DemoApp());

                class DemoApp extends StatelessWidget {
                  const DemoApp({super.key});

                  @override
                  Widget build(BuildContext context) {
                    return MaterialApp(
                      routes: {
                        '/home': (context) => const HomeScreen(),
                      },
                    );
                  }
                }
            """,
            "lib/screens/home_screen.dart": """
                import 'package:flutter/material.dart';

                class HomeScreen extends StatefulWidget {
                  const HomeScreen({super.key});

                  @override
                  State<HomeScreen> createState() => _HomeScreenState();
                }

                class _HomeScreenState extends State<HomeScreen> {
                  @override
                  Widget build(BuildContext context) {
                    return Scaffold(body: Container());
                  }
                }
            """,
        }
    )

    manifest = project_builder.scan()

    assert manifest.entry_point == "lib/main.dart"
    assert manifest.files["pubspec.yaml"].type == "flutter_config"
    assert manifest.files["lib/main.dart"].type == "flutter_widget"
    assert manifest.files["lib/screens/home_screen.dart"].type == "flutter_screen"
    assert RouteInfo(path="/home", component="HomeScreen") in manifest.routes
    assert manifest.files["lib/main.dart"].last_modified > 0

    home = manifest.files["lib/screens/home_screen.dart"].flutter_info
    assert home is not None
    assert home.name == "HomeScreen"
    assert home.has_state is True
    assert home.is_screen is True
    assert "Scaffold" in home.child_widgets

    assert manifest.component_tree["DemoApp"].imports == ["HomeScreen"]
    assert manifest.component_tree["HomeScreen"].imported_by == ["DemoApp"]


def test_scan_skips_excluded_directories(project_builder: ProjectBuilder) -> None:
    project_builder.write(
        {
            ".lovable.yml": "exclude_paths:\n  - generated/\n",
            "src/App.jsx": "export default function App() { return null; }\n",
            "node_modules/react/index.js": "module.exports = {};\n",
            "generated/Thing.jsx": "export const Thing = () => null;\n",
        }
    )

    paths = project_builder.scan().paths()

    assert "src/App.jsx" in paths
    assert "node_modules/react/index.js" not in paths
    assert "generated/Thing.jsx" not in paths


def test_scan_rejects_missing_directory(tmp_path: Path) -> None:
    missing = tmp_path / "missing"

    with pytest.raises(FileNotFoundError) as excinfo:
        ManifestBuilder().scan(missing)

    assert "missing" in str(excinfo.value)


def test_resolve_import_path_handles_aliases_and_packages() -> None:
    manifest = build_manifest(
        {
            "src/App.tsx": "import Button from '@/components/Button';\n",
            "src/components/Button.tsx": "export default function Button() { return null; }\n",
            "lib/widgets/tile.dart": "class Tile {}\n",
        }
    )

    assert resolve_import_path("src/App.tsx", "@/components/Button", manifest) == (
        "src/components/Button.tsx"
    )
    assert resolve_import_path("src/App.tsx", "./components/Button", manifest) == (
        "src/components/Button.tsx"
    )
    assert resolve_import_path("lib/main.dart", "package:demo/widgets/tile.dart", manifest) == (
        "lib/widgets/tile.dart"
    )
    assert resolve_import_path("src/App.tsx", "react", manifest) is None
    assert resolve_import_path("lib/main.dart", "dart:async", manifest) is None
