"""Tests for lovable.flutter.naming."""

from __future__ import annotations

import pytest

from lovable.flutter.naming import to_pascal_case, to_snake_case


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        ("my-awesome widget", "MyAwesomeWidget"),
        ("profile card", "ProfileCard"),
        ("TodoApp", "TodoApp"),
        ("settings", "Settings"),
    ],
)
def test_to_pascal_case(value: str, expected: str) -> None:
    assert to_pascal_case(value) == expected


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        ("MyAwesomeApp", "my_awesome_app"),
        ("Todo App", "todo_app"),
        ("TodoAppHomePage", "todo_app_home_page"),
        ("demo", "demo"),
    ],
)
def test_to_snake_case(value: str, expected: str) -> None:
    assert to_snake_case(value) == expected
