"""Line-oriented heuristic checks for Dart and Flutter source.

Nothing here parses Dart. Each rule is a regular expression or substring
test applied per line, plus a handful of whole-file structural checks, so
false positives and negatives on unusual code are expected.
"""

from __future__ import annotations

import re
from typing import FrozenSet, List, Sequence, Tuple

from .base import ComplexityReport, DartValidationError, DartValidationResult, Severity

FLUTTER_MATERIAL_IMPORT = "import 'package:flutter/material.dart'"
BUILD_METHOD_SIGNATURE = "Widget build(BuildContext context)"
INDENT_SIZE = 2

FLUTTER_WIDGETS: FrozenSet[str] = frozenset(
    {
        "Widget",
        "StatelessWidget",
        "StatefulWidget",
        "State",
        "BuildContext",
        "Scaffold",
        "AppBar",
        "Container",
        "Text",
        "Column",
        "Row",
        "Stack",
        "ListView",
        "GridView",
        "Image",
        "Icon",
        "IconButton",
        "ElevatedButton",
        "TextButton",
        "FloatingActionButton",
        "Card",
        "Padding",
        "Margin",
        "Center",
        "Align",
        "Expanded",
        "Flexible",
        "SizedBox",
        "Divider",
        "TextField",
        "TextFormField",
        "DropdownButton",
        "Checkbox",
        "Radio",
        "Switch",
        "Slider",
        "AlertDialog",
        "BottomSheet",
        "Drawer",
        "BottomNavigationBar",
        "TabBar",
        "TabBarView",
        "MaterialApp",
        "CupertinoApp",
        "Theme",
        "MediaQuery",
        "SafeArea",
    }
)

# (wrong, correct). A match followed by ":" is a named argument such as
# ``appBar:`` and is not reported.
_TYPOS: Sequence[Tuple[re.Pattern[str], str, str]] = tuple(
    (re.compile(rf"\b{wrong}\b(?!\s*:)"), wrong, correct)
    for wrong, correct in (
        ("Stateless", "StatelessWidget"),
        ("Stateful", "StatefulWidget"),
        ("scaffold", "Scaffold"),
        ("appBar", "AppBar"),
        ("container", "Container"),
        ("text", "Text"),
        ("column", "Column"),
        ("row", "Row"),
    )
)

_DECLARATION = re.compile(r"^\s*(var|final|const|int|double|String|bool|List|Map)\s+")
_ASSIGNMENT = re.compile(r"^\s*\w+\s*=")
_RETURN = re.compile(r"^\s*return\s+")
_THROW = re.compile(r"^\s*throw\s+")
_ASSERT = re.compile(r"^\s*assert\s*\(")
_SUPER_CALL = re.compile(r"^\s*super\s*\(")

_RETURN_CALL = re.compile(r"^\s*return\s+\w+\(")
_RETURN_WIDGET = re.compile(r"return\s+(\w+)\(")
_CLASS_NAME = re.compile(r"class\s+(\w+)")
_PASCAL_CASE = re.compile(r"^_?[A-Z][a-zA-Z0-9]*$")
_VARIABLE_NAME = re.compile(r"(?:var|final|const)\s+(\w+)")
_CAMEL_CASE = re.compile(r"^[a-z][a-zA-Z0-9]*$")
_LONG_STRING = re.compile(r"'[^']{10,}'")

_SPACED_OPERATOR = re.compile(r"(\w)([+\-*/%=<>!&|])(\w)")
_SPACED_ARITHMETIC = re.compile(r"(\w)([+\-*/%])(\w)")
_COMMA = re.compile(r",(\S)")
_SEMICOLON = re.compile(r";(\S)")

_CALL = re.compile(r"(\w+)\(")
_BRACED_INTERPOLATION = re.compile(r"\$\{(\w+)\}")
_LEGACY_KEY = (re.compile(r"\{key\}"), re.compile(r"\{Key\? key\}"))

_DECISION_POINT = re.compile(r"\b(?:if|else|for|while|case|catch)\b|&&|\|\||\?")
_METHOD_SIGNATURE = re.compile(r"\b(\w+)\s*\([^)]*\)\s*{")


class DartValidator:
    """Heuristic syntax, Flutter-pattern and lint checks for Dart source."""

    name = "dart"

    def validate(self, code: str) -> DartValidationResult:
        errors: List[DartValidationError] = []
        warnings: List[DartValidationError] = []

        for index, line in enumerate(code.split("\n")):
            line_number = index + 1
            self._check_basic_syntax(line, line_number, errors)
            self._check_flutter_patterns(line, line_number, warnings)
            self._check_best_practices(line, line_number, warnings)

        self._check_overall_structure(code, errors)

        return DartValidationResult(
            is_valid=not errors,
            errors=errors,
            warnings=warnings,
            formatted_code=self.format(code),
        )

    def _check_basic_syntax(
        self, line: str, line_number: int, errors: List[DartValidationError]
    ) -> None:
        trimmed = line.strip()
        if not trimmed or trimmed.startswith("//") or trimmed.startswith("/*"):
            return

        if _should_have_semicolon(line) and not trimmed.endswith(";"):
            errors.append(
                DartValidationError(
                    line=line_number,
                    column=len(line),
                    message="Missing semicolon at end of statement",
                    severity=Severity.ERROR,
                    code="missing_semicolon",
                )
            )

        if "//" in line:
            return
        for pattern, wrong, correct in _TYPOS:
            match = pattern.search(line)
            if match:
                errors.append(
                    DartValidationError(
                        line=line_number,
                        column=match.start() + 1,
                        message=f"Did you mean '{correct}'? Found '{wrong}'",
                        severity=Severity.ERROR,
                        code="possible_typo",
                    )
                )

    def _check_flutter_patterns(
        self, line: str, line_number: int, warnings: List[DartValidationError]
    ) -> None:
        trimmed = line.strip()

        if _RETURN_CALL.match(trimmed) and "const" not in trimmed:
            widget = _RETURN_WIDGET.search(trimmed)
            if widget and widget.group(1) in FLUTTER_WIDGETS:
                name = widget.group(1)
                warnings.append(
                    DartValidationError(
                        line=line_number,
                        column=trimmed.find(name) + 1,
                        message=(
                            "Consider adding 'const' keyword for better performance: "
                            f"const {name}(...)"
                        ),
                        severity=Severity.WARNING,
                        code="missing_const",
                    )
                )

        if "({" in trimmed and "key" in trimmed and "super.key" not in trimmed:
            warnings.append(
                DartValidationError(
                    line=line_number,
                    column=1,
                    message="Consider using super.key instead of key parameter",
                    severity=Severity.WARNING,
                    code="prefer_super_key",
                )
            )

        class_match = _CLASS_NAME.search(trimmed)
        if class_match and not _PASCAL_CASE.match(class_match.group(1)):
            class_name = class_match.group(1)
            warnings.append(
                DartValidationError(
                    line=line_number,
                    column=trimmed.find(class_name) + 1,
                    message="Widget class names should be in PascalCase",
                    severity=Severity.WARNING,
                    code="invalid_class_name",
                )
            )

    def _check_best_practices(
        self, line: str, line_number: int, warnings: List[DartValidationError]
    ) -> None:
        trimmed = line.strip()

        variable = _VARIABLE_NAME.search(trimmed)
        if variable and "(" not in trimmed and "extends" not in trimmed:
            variable_name = variable.group(1)
            if not _CAMEL_CASE.match(variable_name) and not variable_name.startswith("_"):
                warnings.append(
                    DartValidationError(
                        line=line_number,
                        column=trimmed.find(variable_name) + 1,
                        message="Variable names should be in camelCase",
                        severity=Severity.WARNING,
                        code="invalid_variable_name",
                    )
                )

        if "//" not in trimmed and "import" not in trimmed:
            for literal in _LONG_STRING.findall(trimmed):
                if len(literal) > 20:
                    warnings.append(
                        DartValidationError(
                            line=line_number,
                            column=trimmed.find(literal) + 1,
                            message="Consider extracting long strings to constants or localization",
                            severity=Severity.INFO,
                            code="long_string_literal",
                        )
                    )

        if "setState" in trimmed and "() =>" not in trimmed:
            warnings.append(
                DartValidationError(
                    line=line_number,
                    column=trimmed.find("setState") + 1,
                    message="Consider using setState(() => { ... }) for better readability",
                    severity=Severity.INFO,
                    code="setState_style",
                )
            )

    def _check_overall_structure(self, code: str, errors: List[DartValidationError]) -> None:
        if ("StatelessWidget" in code or "StatefulWidget" in code) and (
            FLUTTER_MATERIAL_IMPORT not in code
        ):
            errors.append(
                _file_error(
                    f"Missing required import: {FLUTTER_MATERIAL_IMPORT};", "missing_import"
                )
            )

        has_state_class = "extends State<" in code
        if "extends StatefulWidget" in code and not has_state_class:
            errors.append(
                _file_error("StatefulWidget requires a corresponding State class", "missing_state_class")
            )

        if ("extends StatelessWidget" in code or has_state_class) and (
            BUILD_METHOD_SIGNATURE not in code
        ):
            errors.append(_file_error("Widget classes must have a build method", "missing_build_method"))

    def format(self, code: str) -> str:
        """Normalise operator and separator spacing and re-indent by bracket depth."""
        formatted = _SPACED_OPERATOR.sub(r"\1 \2 \3", code)
        formatted = _SPACED_ARITHMETIC.sub(r"\1 \2 \3", formatted)
        formatted = _COMMA.sub(r", \1", formatted)
        formatted = _SEMICOLON.sub(r"; \1", formatted)

        indent_level = 0
        lines: List[str] = []
        for line in formatted.split("\n"):
            trimmed = line.strip()
            if not trimmed:
                lines.append("")
                continue
            if trimmed.startswith(("}", "]", ")")):
                indent_level = max(0, indent_level - 1)
            lines.append(" " * (indent_level * INDENT_SIZE) + trimmed)
            if trimmed.endswith(("{", "[", "(")):
                indent_level += 1
        return "\n".join(lines)

    def lint(self, code: str) -> List[DartValidationError]:
        """Flutter lint rules, reported independently of :meth:`validate`."""
        findings: List[DartValidationError] = []
        for index, line in enumerate(code.split("\n")):
            line_number = index + 1
            trimmed = line.strip()

            if _should_be_const_constructor(line):
                findings.append(
                    DartValidationError(
                        line=line_number,
                        column=1,
                        message="Prefer const with constant constructors.",
                        severity=Severity.WARNING,
                        code="prefer_const_constructors",
                    )
                )

            if "print(" in trimmed:
                findings.append(
                    DartValidationError(
                        line=line_number,
                        column=trimmed.find("print(") + 1,
                        message="Avoid print() in production code. Use debugPrint() or logging.",
                        severity=Severity.WARNING,
                        code="avoid_print",
                    )
                )

            if '"' in trimmed and "'" not in trimmed and "\\" not in trimmed:
                findings.append(
                    DartValidationError(
                        line=line_number,
                        column=trimmed.find('"') + 1,
                        message="Prefer single quotes for strings.",
                        severity=Severity.INFO,
                        code="prefer_single_quotes",
                    )
                )

            interpolation = _BRACED_INTERPOLATION.search(trimmed)
            if interpolation:
                findings.append(
                    DartValidationError(
                        line=line_number,
                        column=interpolation.start() + 1,
                        message=(
                            "Unnecessary braces in string interpolation. "
                            f"Use ${interpolation.group(1)} instead."
                        ),
                        severity=Severity.INFO,
                        code="unnecessary_brace_in_string_interps",
                    )
                )
        return findings

    def quick_fixes(self, error: DartValidationError, line: str) -> List[str]:
        """Replacement lines that would resolve ``error`` on ``line``."""
        if error.code == "missing_const":
            call = _CALL.search(line)
            if call:
                name = call.group(1)
                return [line.replace(f"{name}(", f"const {name}(", 1)]
            return []
        if error.code == "prefer_super_key":
            fixed = line
            for pattern in _LEGACY_KEY:
                fixed = pattern.sub("{super.key}", fixed, count=1)
            return [fixed]
        if error.code == "missing_semicolon":
            return [line + ";"]
        if error.code == "prefer_single_quotes":
            return [line.replace('"', "'")]
        if error.code == "unnecessary_brace_in_string_interps":
            return [_BRACED_INTERPOLATION.sub(r"$\1", line)]
        return []

    def analyze_complexity(self, code: str) -> ComplexityReport:
        lines = [
            line for line in code.split("\n") if line.strip() and not line.strip().startswith("//")
        ]

        depth = 0
        max_depth = 0
        for line in lines:
            depth += line.count("{") - line.count("}")
            max_depth = max(max_depth, depth)

        return ComplexityReport(
            cyclomatic_complexity=len(_DECISION_POINT.findall(code)) + 1,
            lines_of_code=len(lines),
            number_of_methods=len(_METHOD_SIGNATURE.findall(code)),
            nesting_depth=max_depth,
        )


def _should_have_semicolon(line: str) -> bool:
    trimmed = line.strip()
    # Lines that open a block, an arrow body or a call continue on the next line.
    if "{" in trimmed or "=>" in trimmed or trimmed.endswith("("):
        return False
    return bool(
        _DECLARATION.match(line)
        or _ASSIGNMENT.match(line)
        or _RETURN.match(line)
        or _THROW.match(line)
        or _ASSERT.match(line)
        or _SUPER_CALL.match(line)
    )


def _should_be_const_constructor(line: str) -> bool:
    call = _CALL.search(line)
    return bool(
        call
        and call.group(1) in FLUTTER_WIDGETS
        and "const " not in line
        and "new " not in line
        and "=" not in line
        and "var " not in line
    )


def _file_error(message: str, code: str) -> DartValidationError:
    return DartValidationError(line=1, column=1, message=message, severity=Severity.ERROR, code=code)


def validate_dart_code(code: str) -> DartValidationResult:
    return DartValidator().validate(code)


__all__ = ["FLUTTER_WIDGETS", "DartValidator", "validate_dart_code"]
