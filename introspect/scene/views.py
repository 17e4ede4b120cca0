from dataclasses import dataclass, field
from enum import Enum
from typing import Any, List, Optional
import math
from runner.errors import NoRegistry

def canonical_key(value: Any) -> Optional[str]:
    """
    Converts a host identifier (str, Enum, tuple, int, ...) to its canonical
    string form. Only strings leave the snapshot readers.
    """
    if value is None:
        return None
    if isinstance(value, str):
        return value
    if isinstance(value, Enum):
        return value.name
    if isinstance(value, (bytes, bytearray)):
        return bytes(value).decode("utf-8", errors="replace")
    if isinstance(value, (tuple, list)):
        parts = ["None" if v is None else canonical_key(v) for v in value]
        return "(" + ", ".join(parts) + ")"
    return str(value)

@dataclass(frozen=True, order=True)
class ElementId:
    value: str

    @classmethod
    def from_raw(cls, raw: Any) -> 'ElementId':
        if isinstance(raw, ElementId):
            return raw
        return cls(canonical_key(raw))

    def matches(self, filter_text: str) -> bool:
        # ":save_button" and "save_button" address the same element
        stripped = filter_text[1:] if filter_text.startswith(":") else filter_text
        return self.value == stripped or self.value == filter_text

    def __str__(self) -> str:
        return self.value

@dataclass(frozen=True)
class Point:
    x: float
    y: float

    def to_dict(self) -> dict[str, Any]:
        return {'x': self.x, 'y': self.y}

def _finite(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool) and math.isfinite(value)

@dataclass(frozen=True)
class Bounds:
    left: float
    top: float
    width: float
    height: float

    @classmethod
    def parse(cls, raw: Any) -> Optional['Bounds']:
        """
        Accepts a mapping or object with left/top/width/height (or x/y in place
        of left/top), or a 4-item sequence. Returns None when the geometry is
        unusable instead of guessing.
        """
        if raw is None:
            return None
        if isinstance(raw, Bounds):
            return raw
        if isinstance(raw, (tuple, list)):
            if len(raw) != 4:
                return None
            left, top, width, height = raw
        else:
            left = field_of(raw, 'left', field_of(raw, 'x'))
            top = field_of(raw, 'top', field_of(raw, 'y'))
            width = field_of(raw, 'width')
            height = field_of(raw, 'height')
        if not all(_finite(v) for v in (left, top, width, height)):
            return None
        if width < 0 or height < 0:
            return None
        return cls(left=left, top=top, width=width, height=height)

    @property
    def center(self) -> Point:
        return Point(self.left + self.width / 2, self.top + self.height / 2)

    def translate(self, dx: float, dy: float) -> 'Bounds':
        return Bounds(self.left + dx, self.top + dy, self.width, self.height)

    def to_dict(self) -> dict[str, Any]:
        return {
            'left': self.left,
            'top': self.top,
            'width': self.width,
            'height': self.height,
        }

def field_of(record: Any, name: str, default: Any = None) -> Any:
    """Reads a field from either a mapping or an attribute object."""
    if isinstance(record, dict):
        return record.get(name, default)
    if hasattr(record, 'get') and hasattr(record, 'keys'):
        return record.get(name, default)
    return getattr(record, name, default)

@dataclass
class SemanticElement:
    id: ElementId
    type: str
    clickable: bool
    local_bounds: Optional[Bounds]
    owning_graph_key: Optional[str]
    registration_timestamp: float = 0
    label: Optional[str] = None
    role: Optional[str] = None
    description: Optional[str] = None
    z_index: Optional[int] = None

@dataclass(frozen=True)
class TransformOp:
    name: str
    value: Any

@dataclass
class GraphNode:
    key: str
    children: List[str] = field(default_factory=list)
    transform_ops: List[TransformOp] = field(default_factory=list)
    rendered: Optional[bool] = None

@dataclass
class Diagnostic:
    kind: str
    message: str
    element_id: Optional[str] = None
    graph_key: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        out = {'kind': self.kind, 'message': self.message}
        if self.element_id is not None:
            out['element_id'] = self.element_id
        if self.graph_key is not None:
            out['graph_key'] = self.graph_key
        return out

@dataclass
class RegistrySnapshot:
    entries: List[SemanticElement]
    skipped: int = 0
    present: bool = True
    diagnostics: List[Diagnostic] = field(default_factory=list)

    @classmethod
    def missing(cls, reason: str = "No semantic registry found - the viewport may not have semantic elements enabled") -> 'RegistrySnapshot':
        return cls(entries=[], skipped=0, present=False, diagnostics=[Diagnostic(kind=NoRegistry.kind, message=reason)])

@dataclass
class Accumulation:
    dx: float = 0
    dy: float = 0
    depth: int = 0
    approximate: bool = False
    depth_limited: bool = False
    diagnostics: List[Diagnostic] = field(default_factory=list)

@dataclass
class ResolvedElement:
    element: SemanticElement
    absolute_bounds: Optional[Bounds]
    absolute_center: Optional[Point]
    position_approximate: bool = False

    @property
    def id(self) -> ElementId:
        return self.element.id

@dataclass
class QueryResult:
    elements: List[ResolvedElement]
    diagnostics: List[Diagnostic] = field(default_factory=list)
    skipped_entries: int = 0
    registry_present: bool = True

    @property
    def count(self) -> int:
        return len(self.elements)

    def first(self) -> Optional[ResolvedElement]:
        return self.elements[0] if self.elements else None
