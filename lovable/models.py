"""Core data models shared across lovable components."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
import re
from typing import Callable, Dict, List, Optional, Sequence


class ProjectType(str, Enum):
    """Kinds of project the generator can target."""

    REACT_WEB = "REACT_WEB"
    FLUTTER_MOBILE = "FLUTTER_MOBILE"

    @classmethod
    def from_string(cls, value: str | None) -> "ProjectType":
        """Return the matching project type, defaulting to React web projects."""
        if value:
            normalized = value.strip().upper().replace("-", "_")
            for member in cls:
                if member.value == normalized:
                    return member
        return DEFAULT_PROJECT_TYPE


DEFAULT_PROJECT_TYPE = ProjectType.REACT_WEB


class EditType(str, Enum):
    """Closed set of edit operations a prompt can be classified as."""

    UPDATE_COMPONENT = "UPDATE_COMPONENT"
    ADD_FEATURE = "ADD_FEATURE"
    FIX_ISSUE = "FIX_ISSUE"
    REFACTOR = "REFACTOR"
    FULL_REBUILD = "FULL_REBUILD"
    UPDATE_STYLE = "UPDATE_STYLE"
    ADD_DEPENDENCY = "ADD_DEPENDENCY"
    CREATE_FLUTTER_WIDGET = "CREATE_FLUTTER_WIDGET"
    CREATE_FLUTTER_SCREEN = "CREATE_FLUTTER_SCREEN"
    UPDATE_FLUTTER_WIDGET = "UPDATE_FLUTTER_WIDGET"
    ADD_FLUTTER_NAVIGATION = "ADD_FLUTTER_NAVIGATION"
    ADD_FLUTTER_PACKAGE = "ADD_FLUTTER_PACKAGE"


class ProposedPath(str):
    """A target path that does not exist yet and should be created by the caller."""

    __slots__ = ()

    def __repr__(self) -> str:
        return f"ProposedPath({str.__repr__(self)})"


@dataclass
class ImportInfo:
    """A single import statement found in a source file."""

    source: str
    imports: List[str] = field(default_factory=list)
    default_import: Optional[str] = None
    is_local: bool = False


@dataclass
class ComponentInfo:
    """React component details extracted from a source file."""

    name: str
    props: List[str] = field(default_factory=list)
    hooks: List[str] = field(default_factory=list)
    has_state: bool = False
    child_components: List[str] = field(default_factory=list)


@dataclass
class FlutterWidgetInfo:
    """Flutter widget details extracted from a Dart file."""

    name: str
    type: str = "CustomWidget"
    props: List[str] = field(default_factory=list)
    has_state: bool = False
    child_widgets: List[str] = field(default_factory=list)
    is_screen: bool = False
    uses_navigation: bool = False


@dataclass
class FileInfo:
    """Metadata and content for an individual project file."""

    path: str
    content: str
    type: str
    last_modified: float = 0.0
    relative_path: str = ""
    exports: List[str] = field(default_factory=list)
    imports: List[ImportInfo] = field(default_factory=list)
    component_info: Optional[ComponentInfo] = None
    flutter_info: Optional[FlutterWidgetInfo] = None

    def __post_init__(self) -> None:
        if not self.relative_path:
            self.relative_path = self.path


@dataclass
class RouteInfo:
    """Page routing entry."""

    path: str
    component: str
    layout: Optional[str] = None


@dataclass
class ComponentTreeNode:
    """Forward and reverse import edges for a single component."""

    file: str
    imports: List[str] = field(default_factory=list)
    imported_by: List[str] = field(default_factory=list)
    type: str = "component"


@dataclass
class FileManifest:
    """Snapshot of a project's file tree and derived indexes."""

    files: Dict[str, FileInfo] = field(default_factory=dict)
    routes: List[RouteInfo] = field(default_factory=list)
    component_tree: Dict[str, ComponentTreeNode] = field(default_factory=dict)
    entry_point: str = ""
    style_files: List[str] = field(default_factory=list)
    timestamp: float = 0.0

    def paths(self) -> List[str]:
        return list(self.files)


@dataclass
class EditIntent:
    """Classification of a prompt into an edit operation and target files."""

    type: EditType
    target_files: List[str]
    confidence: float
    description: str
    suggested_context: List[str] = field(default_factory=list)

    @property
    def proposed_files(self) -> List[str]:
        """Targets that do not exist yet and should be created."""
        return [path for path in self.target_files if isinstance(path, ProposedPath)]


FileResolver = Callable[[str, FileManifest], List[str]]


@dataclass(frozen=True)
class IntentPattern:
    """Ordered regex group mapped to an edit type and a file resolver."""

    patterns: Sequence[re.Pattern[str]]
    type: EditType
    file_resolver: FileResolver
