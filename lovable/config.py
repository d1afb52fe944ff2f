"""Configuration loading for lovable projects (.lovable.yml)."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from .models import DEFAULT_PROJECT_TYPE, ProjectType

CONFIG_FILENAME = ".lovable.yml"


class ConfigError(RuntimeError):
    """Raised when the configuration file cannot be parsed."""


@dataclass
class ValidationConfig:
    """Settings for checking generated Dart code."""

    lint: bool = True
    format: bool = False


@dataclass
class LovableConfig:
    """Represents the high-level settings defined in .lovable.yml."""

    root: Path
    project_type: ProjectType = DEFAULT_PROJECT_TYPE
    project_name: Optional[str] = None
    templates_dir: Optional[Path] = None
    validation: ValidationConfig = field(default_factory=ValidationConfig)
    exclude_paths: List[str] = field(default_factory=list)


def load_config(config_path: Path) -> LovableConfig:
    """Load configuration from disk."""
    config_file = _resolve_config_path(config_path)
    root = config_file.parent.resolve()

    if not config_file.exists():
        return LovableConfig(root=root)

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{CONFIG_FILENAME} must contain a mapping at the root")

    project_data = _as_dict(data.get("project"))
    project_type = ProjectType.from_string(_as_str(project_data.get("type")))
    project_name = _as_str(project_data.get("name"))

    templates_data = _as_dict(data.get("templates"))
    templates_dir_str = _as_str(templates_data.get("dir"))
    templates_dir = root / templates_dir_str if templates_dir_str else None

    validation_data = _as_dict(data.get("validation"))
    validation = ValidationConfig()
    if validation_data:
        lint = _as_bool(validation_data.get("lint"))
        fmt = _as_bool(validation_data.get("format"))
        if lint is not None:
            validation.lint = lint
        if fmt is not None:
            validation.format = fmt

    return LovableConfig(
        root=root,
        project_type=project_type,
        project_name=project_name,
        templates_dir=templates_dir,
        validation=validation,
        exclude_paths=_as_str_list(data.get("exclude_paths")),
    )


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    if config_path.name != CONFIG_FILENAME:
        return (config_path.parent / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Dict[str, Any]:
    text = path.read_text(encoding="utf-8")
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return loaded if loaded is not None else {}


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_str(value: Any) -> Optional[str]:
    return str(value) if isinstance(value, (str, int, float, bool)) else None


def _as_bool(value: Any) -> Optional[bool]:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in {"true", "yes", "on", "1"}:
            return True
        if lowered in {"false", "no", "off", "0"}:
            return False
    if isinstance(value, int):
        return bool(value)
    return None


def _as_str_list(value: Any) -> List[str]:
    if isinstance(value, list):
        return [str(item) for item in value if isinstance(item, (str, int, float))]
    if isinstance(value, str):
        return [value]
    return []


__all__ = ["CONFIG_FILENAME", "ConfigError", "LovableConfig", "ValidationConfig", "load_config"]
