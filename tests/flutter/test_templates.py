"""Tests for lovable.flutter.templates."""

from __future__ import annotations

from pathlib import Path

import pytest

from lovable.flutter.templates import TemplateNotFoundError, TemplateStore, render_template


def test_render_replaces_variables() -> None:
    assert render_template("Hello {{name}}!", {"name": "World"}) == "Hello World!"


def test_render_leaves_unknown_variables() -> None:
    assert render_template("{{known}} {{missing}}", {"known": "x"}) == "x {{missing}}"


def test_render_formats_scalars() -> None:
    rendered = render_template("{{flag}}/{{off}}/{{count}}/{{empty}}", {
        "flag": True,
        "off": False,
        "count": 3,
        "empty": None,
    })

    assert rendered == "true/false/3/"


def test_list_block_repeats_per_item() -> None:
    template = "{{#items}}- {{prefix}}{{label}}\n{{/items}}"

    rendered = render_template(
        template, {"prefix": "> ", "items": [{"label": "a"}, {"label": "b"}]}
    )

    assert rendered == "- > a\n- > b\n"


def test_list_block_binds_scalar_items_to_dot() -> None:
    assert render_template("{{#tags}}[{{.}}]{{/tags}}", {"tags": ["x", "y"]}) == "[x][y]"


def test_conditional_block_follows_truthiness() -> None:
    template = "a{{#show}}-shown{{/show}}b"

    assert render_template(template, {"show": True}) == "a-shownb"
    assert render_template(template, {"show": False}) == "ab"
    assert render_template(template, {"show": []}) == "ab"
    assert render_template(template, {}) == "ab"


def test_nested_blocks_render() -> None:
    template = "{{#groups}}{{name}}:{{#members}}{{.}},{{/members}};{{/groups}}"

    rendered = render_template(
        template,
        {"groups": [{"name": "g1", "members": ["a", "b"]}, {"name": "g2", "members": []}]},
    )

    assert rendered == "g1:a,b,;g2:;"


def test_inserted_values_are_not_rescanned() -> None:
    assert render_template("{{a}}", {"a": "{{b}}", "b": "nope"}) == "{{b}}"


def test_store_loads_bundled_templates() -> None:
    source = TemplateStore().load("main.dart.template")

    assert "void main()" in source
    assert "{{app_name}}" in source


def test_store_raises_for_unknown_template() -> None:
    with pytest.raises(TemplateNotFoundError) as excinfo:
        TemplateStore().load("missing.template")

    assert excinfo.value.name == "missing.template"
    assert str(excinfo.value) == "Template not found: missing.template"


def test_store_prefers_project_templates(tmp_path: Path) -> None:
    (tmp_path / "stateless-widget.template").write_text(
        "// custom {{widget_name}}\n", encoding="utf-8"
    )
    store = TemplateStore(tmp_path)

    assert store.render("stateless-widget.template", {"widget_name": "Tile"}) == "// custom Tile\n"
    assert "extends StatefulWidget" in store.load("stateful-widget.template")
