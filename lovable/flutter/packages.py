"""Flutter package manifest (pubspec.yaml) modelling and editing."""

from __future__ import annotations

import copy
import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Sequence

import yaml

from ..logging import get_logger
from .naming import to_snake_case

DEFAULT_SDK_CONSTRAINT = ">=3.1.0 <4.0.0"
DEFAULT_VERSION = "1.0.0+1"
FALLBACK_PACKAGE_VERSION = "^1.0.0"
SDK_FLUTTER = "sdk: flutter"

COMMON_PACKAGES: Dict[str, str] = {
    "http": "^1.2.0",
    "provider": "^6.1.1",
    "riverpod": "^2.4.9",
    "flutter_riverpod": "^2.4.9",
    "shared_preferences": "^2.2.2",
    "path_provider": "^2.1.1",
    "sqflite": "^2.3.0",
    "image_picker": "^1.0.4",
    "camera": "^0.10.5+5",
    "geolocator": "^10.1.0",
    "connectivity_plus": "^5.0.2",
    "url_launcher": "^6.2.1",
    "webview_flutter": "^4.4.2",
    "firebase_core": "^2.24.2",
    "firebase_auth": "^4.15.3",
    "cloud_firestore": "^4.13.6",
    "dio": "^5.3.2",
    "json_annotation": "^4.8.1",
    "freezed_annotation": "^2.4.1",
    "google_fonts": "^6.1.0",
    "cached_network_image": "^3.3.0",
    "flutter_svg": "^2.0.9",
    "animations": "^2.0.11",
    "flutter_staggered_grid_view": "^0.7.0",
    "pull_to_refresh": "^2.0.0",
    "shimmer": "^3.0.0",
    "lottie": "^2.7.0",
}

COMMON_DEV_PACKAGES: Dict[str, str] = {
    "flutter_test": SDK_FLUTTER,
    "flutter_lints": "^3.0.0",
    "build_runner": "^2.4.7",
    "json_serializable": "^6.7.1",
    "freezed": "^2.4.6",
    "mockito": "^5.4.2",
    "integration_test": SDK_FLUTTER,
}

PACKAGE_DESCRIPTIONS: Dict[str, str] = {
    "http": "HTTP client for making API requests",
    "provider": "State management library",
    "riverpod": "Advanced state management",
    "flutter_riverpod": "Flutter bindings for Riverpod",
    "shared_preferences": "Persistent storage for simple data",
    "path_provider": "Access to device file system paths",
    "sqflite": "SQLite plugin for Flutter",
    "image_picker": "Pick images from gallery or camera",
    "camera": "Camera plugin for Flutter",
    "geolocator": "Location services",
    "connectivity_plus": "Network connectivity info",
    "url_launcher": "Launch URLs in external applications",
    "webview_flutter": "WebView widget",
    "firebase_core": "Firebase core functionality",
    "firebase_auth": "Firebase authentication",
    "cloud_firestore": "Cloud Firestore database",
    "dio": "HTTP client with interceptors",
    "json_annotation": "JSON serialization annotations",
    "google_fonts": "Google Fonts for Flutter",
    "cached_network_image": "Cached network images",
    "flutter_svg": "SVG rendering support",
    "animations": "Pre-built animations",
    "lottie": "Lottie animations",
    "shimmer": "Shimmer effect widget",
}

PACKAGE_CATEGORIES: Dict[str, Sequence[str]] = {
    "network": ("http", "dio", "connectivity_plus"),
    "state": ("provider", "riverpod", "flutter_riverpod"),
    "storage": ("shared_preferences", "path_provider", "sqflite"),
    "ui": ("google_fonts", "flutter_svg", "animations", "lottie", "shimmer"),
    "media": ("image_picker", "camera", "cached_network_image"),
}

# Prompt keywords that imply a package, checked in order.
_PROMPT_KEYWORDS: Sequence[tuple[Sequence[str], str]] = (
    (("http", "api", "request"), "http"),
    (("state management", "provider"), "provider"),
    (("storage", "preferences"), "shared_preferences"),
    (("image", "photo", "camera"), "image_picker"),
    (("location", "gps"), "geolocator"),
    (("web", "url"), "url_launcher"),
    (("font", "google fonts"), "google_fonts"),
    (("animation", "lottie"), "lottie"),
    (("svg",), "flutter_svg"),
    (("cache", "network image"), "cached_network_image"),
)

# Source patterns that imply a package, with the reason reported.
_CODE_PATTERNS: Sequence[tuple[Sequence[str], str, str]] = (
    (("http.", "HttpClient"), "http", "HTTP client for API calls"),
    (("Provider", "Consumer"), "provider", "State management with Provider"),
    (("SharedPreferences",), "shared_preferences", "Persistent storage for simple data"),
    (("ImagePicker",), "image_picker", "Pick images from gallery or camera"),
)

_IMPORT = re.compile(r"""import\s+['"]([^'"]+)['"]""")
_PACKAGE_NAME = re.compile(r"^[a-z][a-z0-9_]*$")
_VERSION = re.compile(r"^\d+\.\d+\.\d+(\+\d+)?$")

logger = get_logger("flutter.packages")


class PubspecParseError(ValueError):
    """Raised when pubspec text cannot be parsed."""


@dataclass
class FlutterPackage:
    """A package suggestion or detected dependency."""

    name: str
    version: str
    description: str = ""
    dev: bool = False


@dataclass
class PubspecData:
    """Structured view of a Flutter package manifest."""

    name: str
    version: str = DEFAULT_VERSION
    description: Optional[str] = None
    environment: Dict[str, str] = field(default_factory=lambda: {"sdk": DEFAULT_SDK_CONSTRAINT})
    dependencies: Dict[str, Any] = field(default_factory=dict)
    dev_dependencies: Dict[str, Any] = field(default_factory=dict)
    flutter: Dict[str, Any] = field(default_factory=dict)


@dataclass
class PubspecValidation:
    is_valid: bool
    errors: List[str] = field(default_factory=list)


def _dependencies_from_yaml(value: Any) -> Dict[str, Any]:
    if not isinstance(value, Mapping):
        return {}
    result: Dict[str, Any] = {}
    for name, spec in value.items():
        if isinstance(spec, Mapping) and set(spec) == {"sdk"}:
            result[str(name)] = f"sdk: {spec['sdk']}"
        elif spec is None:
            result[str(name)] = "any"
        else:
            result[str(name)] = spec
    return result


def _dependencies_to_yaml(dependencies: Mapping[str, Any]) -> Dict[str, Any]:
    result: Dict[str, Any] = {}
    for name, spec in dependencies.items():
        if isinstance(spec, str) and spec.startswith("sdk:"):
            result[name] = {"sdk": spec.split(":", 1)[1].strip()}
        else:
            result[name] = spec
    return result


def _flutter_from_yaml(value: Any) -> Dict[str, Any]:
    if not isinstance(value, Mapping):
        return {}
    result = {str(key).replace("-", "_"): item for key, item in value.items()}
    fonts = result.get("fonts")
    if isinstance(fonts, list):
        result["fonts"] = [dict(font) for font in fonts if isinstance(font, Mapping)]
    return result


def _flutter_to_yaml(flutter: Mapping[str, Any]) -> Dict[str, Any]:
    return {key.replace("_", "-"): value for key, value in flutter.items()}


class FlutterPackageManager:
    """Creates, parses, edits and checks pubspec manifests."""

    def create_default_pubspec(self, project_name: str, description: str | None = None) -> PubspecData:
        return PubspecData(
            name=to_snake_case(project_name),
            description=description or "A new Flutter application.",
            version=DEFAULT_VERSION,
            environment={"sdk": DEFAULT_SDK_CONSTRAINT},
            dependencies={"flutter": SDK_FLUTTER, "cupertino_icons": "^1.0.2"},
            dev_dependencies={"flutter_test": SDK_FLUTTER, "flutter_lints": "^3.0.0"},
            flutter={"uses_material_design": True},
        )

    def parse_pubspec(self, text: str) -> PubspecData:
        """Parse pubspec YAML, filling in defaults for missing fields."""
        try:
            parsed = yaml.safe_load(text)
        except yaml.YAMLError as exc:
            raise PubspecParseError(f"Failed to parse pubspec.yaml: {exc}") from exc
        if not isinstance(parsed, Mapping):
            raise PubspecParseError("Failed to parse pubspec.yaml: expected a mapping at the root")

        environment = parsed.get("environment")
        return PubspecData(
            name=str(parsed.get("name") or "flutter_app"),
            description=str(parsed.get("description") or "A Flutter application"),
            version=str(parsed.get("version") or DEFAULT_VERSION),
            environment=(
                {str(key): str(value) for key, value in environment.items()}
                if isinstance(environment, Mapping)
                else {"sdk": DEFAULT_SDK_CONSTRAINT}
            ),
            dependencies=_dependencies_from_yaml(parsed.get("dependencies")),
            dev_dependencies=_dependencies_from_yaml(parsed.get("dev_dependencies")),
            flutter=_flutter_from_yaml(parsed.get("flutter")),
        )

    def serialize_pubspec(self, data: PubspecData) -> str:
        document: Dict[str, Any] = {
            "name": data.name,
            "description": data.description,
            "publish_to": "none",
            "version": data.version,
            "environment": dict(data.environment),
            "dependencies": _dependencies_to_yaml(data.dependencies),
            "dev_dependencies": _dependencies_to_yaml(data.dev_dependencies),
        }
        if data.flutter:
            document["flutter"] = _flutter_to_yaml(data.flutter)
        return yaml.safe_dump(
            document,
            sort_keys=False,
            default_flow_style=False,
            allow_unicode=True,
            width=100,
        )

    def add_package(
        self,
        data: PubspecData,
        package_name: str,
        version: str | None = None,
        *,
        dev: bool = False,
    ) -> PubspecData:
        updated = copy.deepcopy(data)
        resolved = (
            version
            or COMMON_PACKAGES.get(package_name)
            or (COMMON_DEV_PACKAGES.get(package_name) if dev else None)
            or FALLBACK_PACKAGE_VERSION
        )
        target = updated.dev_dependencies if dev else updated.dependencies
        target[package_name] = resolved
        logger.debug("Added %s%s %s", package_name, " (dev)" if dev else "", resolved)
        return updated

    def remove_package(self, data: PubspecData, package_name: str) -> PubspecData:
        updated = copy.deepcopy(data)
        updated.dependencies.pop(package_name, None)
        updated.dev_dependencies.pop(package_name, None)
        return updated

    def add_asset(self, data: PubspecData, asset_path: str) -> PubspecData:
        updated = copy.deepcopy(data)
        assets = updated.flutter.setdefault("assets", [])
        if asset_path not in assets:
            assets.append(asset_path)
        return updated

    def add_font(
        self, data: PubspecData, family: str, font_assets: Sequence[Mapping[str, Any]]
    ) -> PubspecData:
        """Add a font family, replacing the files of an existing family with the same name."""
        updated = copy.deepcopy(data)
        fonts: List[Dict[str, Any]] = updated.flutter.setdefault("fonts", [])
        assets = [dict(asset) for asset in font_assets]
        for font in fonts:
            if font.get("family") == family:
                font["fonts"] = assets
                break
        else:
            fonts.append({"family": family, "fonts": assets})
        return updated

    def analyze_package_needs(self, dart_code: str) -> List[FlutterPackage]:
        """Detect packages required by imports and well-known API usage in Dart code."""
        packages: List[FlutterPackage] = []
        for import_path in _IMPORT.findall(dart_code):
            if not import_path.startswith("package:"):
                continue
            name = import_path[len("package:"):].split("/", 1)[0]
            if name in {"flutter", "flutter_test"}:
                continue
            packages.append(
                FlutterPackage(
                    name=name,
                    version=COMMON_PACKAGES.get(name, FALLBACK_PACKAGE_VERSION),
                    description=f"Auto-detected from import: {import_path}",
                )
            )

        for needles, name, description in _CODE_PATTERNS:
            if any(needle in dart_code for needle in needles):
                packages.append(
                    FlutterPackage(name=name, version=COMMON_PACKAGES[name], description=description)
                )

        unique: List[FlutterPackage] = []
        seen: set[str] = set()
        for package in packages:
            if package.name not in seen:
                seen.add(package.name)
                unique.append(package)
        return unique

    def validate_pubspec(self, data: PubspecData) -> PubspecValidation:
        errors: List[str] = []
        if not data.name:
            errors.append("Package name is required")
        elif not _PACKAGE_NAME.match(data.name):
            errors.append(
                "Package name must start with a lowercase letter and contain only "
                "lowercase letters, numbers, and underscores"
            )

        if not data.version:
            errors.append("Version is required")
        elif not _VERSION.match(data.version):
            errors.append("Version must follow semantic versioning format (e.g., 1.0.0+1)")

        if not (data.environment or {}).get("sdk"):
            errors.append("Dart SDK constraint is required")
        if not data.dependencies.get("flutter"):
            errors.append("Flutter dependency is required")
        return PubspecValidation(is_valid=not errors, errors=errors)

    def generate_pubspec_from_prompt(self, prompt: str, project_name: str) -> PubspecData:
        pubspec = self.create_default_pubspec(project_name)
        for package in self.packages_for_prompt(prompt):
            pubspec = self.add_package(pubspec, package)
        return pubspec

    def packages_for_prompt(self, prompt: str) -> List[str]:
        """Package names implied by keywords in a prompt."""
        lower_prompt = prompt.lower()
        return [
            package
            for keywords, package in _PROMPT_KEYWORDS
            if any(keyword in lower_prompt for keyword in keywords)
        ]

    def get_suggested_packages(self, category: str | None = None) -> List[FlutterPackage]:
        packages = [
            FlutterPackage(
                name=name,
                version=version,
                description=PACKAGE_DESCRIPTIONS.get(name, "Flutter package"),
            )
            for name, version in COMMON_PACKAGES.items()
        ]
        if not category:
            return packages
        names = PACKAGE_CATEGORIES.get(category.lower())
        if names is None:
            return packages
        return [package for package in packages if package.name in names]


__all__ = [
    "COMMON_DEV_PACKAGES",
    "COMMON_PACKAGES",
    "FlutterPackage",
    "FlutterPackageManager",
    "PubspecData",
    "PubspecParseError",
    "PubspecValidation",
]
