"""Project scanning and file manifest building utilities."""

from __future__ import annotations

import os
import posixpath
import re
import time
from fnmatch import fnmatchcase
from pathlib import Path
from typing import Dict, Iterator, List, Mapping, Optional, Sequence

from .config import ConfigError, load_config
from .logging import get_logger
from .models import (
    ComponentInfo,
    ComponentTreeNode,
    FileInfo,
    FileManifest,
    FlutterWidgetInfo,
    ImportInfo,
    RouteInfo,
)

_EXCLUDED_DIRS = {
    ".git",
    ".hg",
    ".svn",
    ".venv",
    ".next",
    ".dart_tool",
    ".idea",
    ".pytest_cache",
    "__pycache__",
    "node_modules",
    "build",
    "dist",
}

_TEXT_SUFFIXES = {
    ".js",
    ".jsx",
    ".ts",
    ".tsx",
    ".dart",
    ".css",
    ".scss",
    ".sass",
    ".less",
    ".json",
    ".yaml",
    ".yml",
    ".html",
    ".md",
}

_STYLE_SUFFIXES = (".css", ".scss", ".sass", ".less")
_CONFIG_SUFFIXES = (".json", ".yaml", ".yml", ".toml")
_FLUTTER_CONFIG_NAMES = {"pubspec.yaml", "pubspec.yml", "analysis_options.yaml"}
_JS_SUFFIXES = (".jsx", ".tsx", ".js", ".ts")

_ENTRY_POINT_CANDIDATES = (
    "src/App.jsx",
    "src/App.tsx",
    "src/App.js",
    "src/main.jsx",
    "src/main.tsx",
    "lib/main.dart",
    "App.jsx",
    "App.tsx",
    "main.dart",
)

_RESOLVE_EXTENSIONS = (".jsx", ".js", ".tsx", ".ts", "")

_JS_IMPORT = re.compile(r"""^\s*import\s+(?:(.+?)\s+from\s+)?['"]([^'"]+)['"]""", re.MULTILINE)
_DART_IMPORT = re.compile(
    r"""^\s*import\s+['"]([^'"]+)['"](?:\s+as\s+\w+)?(?:\s+show\s+([\w\s,]+))?\s*;""",
    re.MULTILINE,
)
_JS_EXPORT_DECL = re.compile(
    r"^\s*export\s+(?:default\s+)?(?:async\s+)?(?:function|const|let|var|class)\s+(\w+)",
    re.MULTILINE,
)
_JS_EXPORT_DEFAULT = re.compile(r"^\s*export\s+default\s+(\w+)\s*;?\s*$", re.MULTILINE)
_JS_EXPORT_LIST = re.compile(r"^\s*export\s*\{([^}]*)\}", re.MULTILINE)
_DART_CLASS = re.compile(r"^\s*(?:abstract\s+)?class\s+(\w+)", re.MULTILINE)
_COMPONENT_DECL = re.compile(
    r"(?:function\s+([A-Z]\w*)\s*\(([^)]*)\)|(?:const|let)\s+([A-Z]\w*)\s*=\s*(?:\(([^)]*)\)|(\w+))\s*=>)"
)
_HOOK_CALL = re.compile(r"\b(use[A-Z]\w*)\s*\(")
_JSX_CHILD = re.compile(r"<([A-Z]\w*)")
_WIDGET_CLASS = re.compile(r"class\s+(\w+)\s+extends\s+(StatelessWidget|StatefulWidget)")
_WIDGET_FIELD = re.compile(r"^\s*final\s+[\w<>?,\s]+?\s+(\w+)\s*;", re.MULTILINE)
_WIDGET_CALL = re.compile(r"\b([A-Z]\w*)\s*\(")
_JSX_ROUTE = re.compile(r"<Route\b([^>]*)>")
_JSX_ROUTE_PATH = re.compile(r"""path\s*=\s*["']([^"']+)["']""")
_JSX_ROUTE_ELEMENT = re.compile(r"element\s*=\s*\{\s*<(\w+)")
_FLUTTER_ROUTE = re.compile(
    r"""['"](/[^'"]*)['"]\s*:\s*\([^)]*\)\s*=>\s*(?:const\s+)?(\w+)\s*\("""
)


def _basename(path: str) -> str:
    return path.rsplit("/", 1)[-1]


def _infer_file_type(path: str, content: str) -> str:
    name = _basename(path)
    lower_path = path.lower()
    lower_name = name.lower()

    if lower_name.endswith(_STYLE_SUFFIXES):
        return "style"
    if lower_name in _FLUTTER_CONFIG_NAMES:
        return "flutter_config"
    if lower_name.endswith(".dart"):
        if "/screens/" in f"/{lower_path}" or "/pages/" in f"/{lower_path}" or "Scaffold(" in content:
            return "flutter_screen"
        return "flutter_widget"
    if lower_name.endswith(_CONFIG_SUFFIXES) or ".config." in lower_name:
        return "config"

    stem = name.split(".", 1)[0]
    if re.match(r"use[A-Z]", stem):
        return "hook"
    if "context" in lower_name or "createContext(" in content:
        return "context"
    if "layout" in lower_name:
        return "layout"
    if "/pages/" in f"/{lower_path}" or ("/app/" in f"/{lower_path}" and stem == "page"):
        return "page"
    if lower_name.endswith((".jsx", ".tsx")) or (stem[:1].isupper() and lower_name.endswith(_JS_SUFFIXES)):
        return "component"
    return "utility"


def _parse_js_imports(content: str) -> List[ImportInfo]:
    imports: List[ImportInfo] = []
    for match in _JS_IMPORT.finditer(content):
        clause, source = match.group(1), match.group(2)
        default_import: Optional[str] = None
        named: List[str] = []
        if clause:
            brace = re.search(r"\{([^}]*)\}", clause)
            if brace:
                for item in brace.group(1).split(","):
                    item = item.strip()
                    if not item:
                        continue
                    named.append(item.split(" as ")[-1].strip())
                clause = clause[: brace.start()] + clause[brace.end():]
            head = clause.strip().rstrip(",").strip()
            if head and not head.startswith("*"):
                default_import = head
        imports.append(
            ImportInfo(
                source=source,
                imports=named,
                default_import=default_import,
                is_local=source.startswith((".", "@/")),
            )
        )
    return imports


def _parse_dart_imports(content: str) -> List[ImportInfo]:
    imports: List[ImportInfo] = []
    for match in _DART_IMPORT.finditer(content):
        source = match.group(1)
        shown = [name.strip() for name in (match.group(2) or "").split(",") if name.strip()]
        imports.append(
            ImportInfo(
                source=source,
                imports=shown,
                is_local=not source.startswith(("package:", "dart:")),
            )
        )
    return imports


def _parse_exports(path: str, content: str) -> List[str]:
    if path.endswith(".dart"):
        return [name for name in _DART_CLASS.findall(content) if not name.startswith("_")]
    exports: List[str] = []
    for name in _JS_EXPORT_DECL.findall(content) + _JS_EXPORT_DEFAULT.findall(content):
        if name not in exports:
            exports.append(name)
    for group in _JS_EXPORT_LIST.findall(content):
        for item in group.split(","):
            item = item.strip()
            if item:
                name = item.split(" as ")[-1].strip()
                if name not in exports:
                    exports.append(name)
    return exports


def _unique(items: Sequence[str]) -> List[str]:
    seen: List[str] = []
    for item in items:
        if item not in seen:
            seen.append(item)
    return seen


def _extract_component_info(path: str, content: str) -> Optional[ComponentInfo]:
    match = _COMPONENT_DECL.search(content)
    if match:
        name = match.group(1) or match.group(3)
        raw_props = match.group(2) if match.group(1) else (match.group(4) or match.group(5) or "")
    else:
        stem = _basename(path).split(".", 1)[0]
        if not stem[:1].isupper():
            return None
        name, raw_props = stem, ""

    props: List[str] = []
    destructured = re.search(r"\{([^}]*)\}", raw_props)
    if destructured:
        for item in destructured.group(1).split(","):
            prop = item.split("=")[0].split(":")[0].strip()
            if prop and prop != "...":
                props.append(prop.lstrip("."))

    hooks = _unique(_HOOK_CALL.findall(content))
    children = [child for child in _unique(_JSX_CHILD.findall(content)) if child != name]
    return ComponentInfo(
        name=name,
        props=props,
        hooks=hooks,
        has_state="useState" in hooks or "useReducer" in hooks,
        child_components=children,
    )


def _extract_flutter_info(content: str, file_type: str) -> Optional[FlutterWidgetInfo]:
    match = _WIDGET_CLASS.search(content)
    if not match:
        return None
    name, base = match.group(1), match.group(2)
    is_screen = file_type == "flutter_screen"
    own_classes = set(_DART_CLASS.findall(content))
    children = [
        widget
        for widget in _unique(_WIDGET_CALL.findall(content))
        if widget not in own_classes and widget not in {"State", "Key"}
    ]
    return FlutterWidgetInfo(
        name=name,
        type="Screen" if is_screen else base,
        props=_unique(_WIDGET_FIELD.findall(content)),
        has_state=base == "StatefulWidget",
        child_widgets=children,
        is_screen=is_screen,
        uses_navigation="Navigator" in content or "routes:" in content,
    )


def _extract_routes(content: str) -> List[RouteInfo]:
    routes: List[RouteInfo] = []
    for tag in _JSX_ROUTE.finditer(content):
        attrs = tag.group(1)
        path_match = _JSX_ROUTE_PATH.search(attrs)
        element_match = _JSX_ROUTE_ELEMENT.search(attrs)
        if path_match and element_match:
            routes.append(RouteInfo(path=path_match.group(1), component=element_match.group(1)))
    for path, widget in _FLUTTER_ROUTE.findall(content):
        routes.append(RouteInfo(path=path, component=widget))
    return routes


def _normalize(path: str) -> str:
    normalized = posixpath.normpath(path)
    return "" if normalized == "." else normalized


def resolve_import_path(from_file: str, import_path: str, manifest: FileManifest) -> Optional[str]:
    """Resolve a local import against manifest paths, or ``None`` when it is external."""
    if import_path.startswith("@/"):
        rest = import_path[2:]
        for ext in _RESOLVE_EXTENSIONS:
            for candidate in (f"src/{rest}{ext}", f"src/{rest}/index{ext}"):
                for path in manifest.files:
                    if path == candidate or path.endswith(f"/{candidate}"):
                        return path
        return None

    if import_path.startswith(("package:", "dart:")):
        if not import_path.startswith("package:"):
            return None
        _, _, rest = import_path[len("package:"):].partition("/")
        candidate = f"lib/{rest}"
        for path in manifest.files:
            if path == candidate or path.endswith(f"/{candidate}"):
                return path
        return None

    is_relative = import_path.startswith(("./", "../"))
    is_dart_relative = from_file.endswith(".dart") and not import_path.startswith("/")
    if not (is_relative or is_dart_relative):
        return None

    from_dir = from_file.rsplit("/", 1)[0] if "/" in from_file else ""
    resolved = _normalize(posixpath.join(from_dir, import_path))
    if from_file.startswith("/") and not resolved.startswith("/"):
        resolved = f"/{resolved}"
    for ext in _RESOLVE_EXTENSIONS:
        full_path = f"{resolved}{ext}"
        if full_path in manifest.files:
            return full_path
        index_path = f"{resolved}/index{ext}"
        if index_path in manifest.files:
            return index_path
    return None


class ManifestBuilder:
    """Derives a file manifest from project sources."""

    def __init__(self, exclude_paths: Sequence[str] | None = None) -> None:
        self.exclude_paths = list(exclude_paths or [])
        self.logger = get_logger("manifest")

    def build(
        self,
        files: Mapping[str, str],
        last_modified: Mapping[str, float] | None = None,
        *,
        timestamp: float | None = None,
    ) -> FileManifest:
        """Return a manifest for a ``path -> content`` mapping."""
        modified = last_modified or {}
        manifest = FileManifest(timestamp=time.time() if timestamp is None else timestamp)

        for path, content in files.items():
            file_type = _infer_file_type(path, content)
            is_dart = path.endswith(".dart")
            info = FileInfo(
                path=path,
                content=content,
                type=file_type,
                last_modified=float(modified.get(path, 0.0)),
                relative_path=path.lstrip("/"),
                exports=_parse_exports(path, content) if is_dart or path.endswith(_JS_SUFFIXES) else [],
            )
            if is_dart:
                info.imports = _parse_dart_imports(content)
                info.flutter_info = _extract_flutter_info(content, file_type)
            elif path.endswith(_JS_SUFFIXES):
                info.imports = _parse_js_imports(content)
                if file_type in {"component", "page", "layout"}:
                    info.component_info = _extract_component_info(path, content)
            manifest.files[path] = info
            manifest.routes.extend(_extract_routes(content))
            if file_type == "style":
                manifest.style_files.append(path)

        manifest.entry_point = self._find_entry_point(manifest)
        manifest.component_tree = self._build_component_tree(manifest)
        self.logger.debug(
            "Built manifest with %d files, %d routes, entry point %s",
            len(manifest.files),
            len(manifest.routes),
            manifest.entry_point or "(none)",
        )
        return manifest

    def scan(self, root: str | Path) -> FileManifest:
        """Walk a project directory and build its manifest."""
        root_path = Path(root).expanduser().resolve()
        if not root_path.exists():
            raise FileNotFoundError(f"Project path not found: {root}")
        if not root_path.is_dir():
            raise NotADirectoryError(f"Project path is not a directory: {root}")

        patterns = list(self.exclude_paths)
        try:
            patterns.extend(load_config(root_path).exclude_paths)
        except ConfigError as exc:
            self.logger.warning("Ignoring exclude paths from config: %s", exc)

        contents: Dict[str, str] = {}
        modified: Dict[str, float] = {}
        for path in self._iter_files(root_path, patterns):
            rel_path = path.relative_to(root_path).as_posix()
            try:
                contents[rel_path] = path.read_text(encoding="utf-8")
            except UnicodeDecodeError:
                self.logger.debug("Skipping non-text file %s", rel_path)
                continue
            modified[rel_path] = path.stat().st_mtime
        self.logger.debug("Scanner discovered %d files under %s", len(contents), root_path)
        return self.build(contents, modified)

    @staticmethod
    def _iter_files(root: Path, patterns: Sequence[str]) -> Iterator[Path]:
        for dirpath, dirnames, filenames in os.walk(root):
            current_dir = Path(dirpath)
            rel_dir = current_dir.relative_to(root).as_posix() if current_dir != root else ""
            dirnames[:] = sorted(
                name
                for name in dirnames
                if name not in _EXCLUDED_DIRS
                and not _is_excluded(f"{rel_dir}/{name}" if rel_dir else name, patterns)
            )
            for filename in sorted(filenames):
                if Path(filename).suffix.lower() not in _TEXT_SUFFIXES:
                    continue
                rel_path = f"{rel_dir}/{filename}" if rel_dir else filename
                if _is_excluded(rel_path, patterns):
                    continue
                yield current_dir / filename

    @staticmethod
    def _find_entry_point(manifest: FileManifest) -> str:
        for candidate in _ENTRY_POINT_CANDIDATES:
            for path in manifest.files:
                if path == candidate or path.endswith(f"/{candidate}"):
                    return path
        return next(iter(manifest.files), "")

    @staticmethod
    def _build_component_tree(manifest: FileManifest) -> Dict[str, ComponentTreeNode]:
        names_by_file: Dict[str, str] = {}
        tree: Dict[str, ComponentTreeNode] = {}
        for path, info in manifest.files.items():
            widget = info.component_info or info.flutter_info
            if widget is None or widget.name in tree:
                continue
            if info.type in {"page", "flutter_screen"}:
                node_type = "page"
            elif info.type == "layout":
                node_type = "layout"
            else:
                node_type = "component"
            tree[widget.name] = ComponentTreeNode(file=path, type=node_type)
            names_by_file[path] = widget.name

        for path, name in names_by_file.items():
            node = tree[name]
            for item in manifest.files[path].imports:
                if not item.is_local and not item.source.startswith("package:"):
                    continue
                target = resolve_import_path(path, item.source, manifest)
                imported = names_by_file.get(target) if target else None
                if imported is None or imported == name or imported in node.imports:
                    continue
                node.imports.append(imported)
                tree[imported].imported_by.append(name)
        return tree


def _is_excluded(rel_path: str, patterns: Sequence[str]) -> bool:
    for pattern in patterns:
        cleaned = pattern.strip().strip("/")
        if not cleaned:
            continue
        if fnmatchcase(rel_path, cleaned) or rel_path.startswith(f"{cleaned}/"):
            return True
        if "/" not in cleaned and any(fnmatchcase(part, cleaned) for part in rel_path.split("/")):
            return True
    return False


__all__ = ["ManifestBuilder", "resolve_import_path"]
