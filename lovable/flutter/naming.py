"""Identifier casing helpers for generated Dart code."""

from __future__ import annotations

import re


def to_pascal_case(value: str) -> str:
    """``"my-awesome widget"`` -> ``"MyAwesomeWidget"``; inner capitals are kept."""
    spaced = re.sub(r"[^a-zA-Z0-9]", " ", value)
    capitalized = re.sub(r"\b\w", lambda match: match.group(0).upper(), spaced)
    return re.sub(r"\s", "", capitalized)


def to_snake_case(value: str) -> str:
    """``"MyAwesomeApp"`` -> ``"my_awesome_app"``."""
    underscored = re.sub(r"[A-Z]", lambda match: "_" + match.group(0).lower(), value)
    underscored = re.sub(r"^_", "", underscored)
    underscored = re.sub(r"[^a-zA-Z0-9_]", "_", underscored)
    underscored = re.sub(r"_+", "_", underscored)
    return re.sub(r"^_|_$", "", underscored)


__all__ = ["to_pascal_case", "to_snake_case"]
