"""Component-splitting data structures (definitions, patterns, component tree)."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ComponentRole(Enum):
    SEMANTIC = "semantic"
    LAYOUT = "layout"
    INTERACTIVE = "interactive"
    CONTENT = "content"
    NAVIGATION = "navigation"
    MEDIA = "media"
    DATA = "data"
    UNKNOWN = "unknown"


class PatternType(Enum):
    CARD = "card"
    LIST_ITEM = "list-item"
    SECTION = "section"
    FORM_FIELD = "form-field"
    TABLE_ROW = "table-row"
    MEDIA_ITEM = "media-item"
    BUTTON = "button"
    UNKNOWN = "unknown"


class EdgeType(Enum):
    CONTAINS = "contains"
    RENDERS = "renders"
    WRAPS = "wraps"
    ADJACENT = "adjacent"


class ExtractionReason(Enum):
    SEMANTIC_TAG = "semantic-tag"
    REPEATING_PATTERN = "repeating-pattern"
    CLASS_PATTERN = "class-pattern"
    CUSTOM_SELECTOR = "custom-selector"
    COMPLEX_STRUCTURE = "complex-structure"
    USER_DEFINED = "user-defined"


@dataclass(slots=True, frozen=True)
class BemInfo:
    block: str
    element: str | None = None
    modifier: str | None = None


@dataclass(slots=True)
class PropDefinition:
    name: str
    type: str  # TypeScript type expression, e.g. "string" or "() => void"
    required: bool = False
    default: str | None = None
    description: str | None = None


@dataclass(slots=True)
class ComponentMetadata:
    element_count: int = 0
    text_length: int = 0
    has_interactive: bool = False
    has_forms: bool = False
    has_images: bool = False
    child_types: list[str] = field(default_factory=list)
    is_pattern_item: bool = False


@dataclass(slots=True)
class ComponentDefinition:
    id: str
    name: str
    tag: str
    node_id: str
    html: str
    depth: int
    classes: list[str] = field(default_factory=list)
    bem: BemInfo | None = None
    parent_id: str | None = None
    children: list[str] = field(default_factory=list)
    pattern_id: str | None = None
    role: ComponentRole = ComponentRole.UNKNOWN
    reason: ExtractionReason = ExtractionReason.USER_DEFINED
    confidence: float = 0.0
    suggested_props: list[PropDefinition] = field(default_factory=list)
    metadata: ComponentMetadata = field(default_factory=ComponentMetadata)


@dataclass(slots=True, frozen=True)
class PropBinding:
    """Where a pattern prop comes from: element ``position`` (pre-order within a member) and ``source``."""

    position: int
    source: str  # "text" or an attribute name
    prop: str


@dataclass(slots=True)
class PatternDetectionResult:
    id: str
    label: str
    count: int
    member_ids: list[str]
    confidence: float
    pattern_type: PatternType
    similarity: float = 1.0
    inferred_props: list[PropDefinition] = field(default_factory=list)
    sample_structure: str = ""
    bindings: list[PropBinding] = field(default_factory=list)


@dataclass(slots=True, frozen=True)
class ComponentEdge:
    source: str
    target: str
    type: EdgeType


@dataclass(slots=True)
class ComponentTreeNode:
    id: str
    depth: int
    child_ids: list[str] = field(default_factory=list)
    parent_id: str | None = None
    siblings: list[str] = field(default_factory=list)


@dataclass(slots=True)
class ComponentTree:
    root: str = ""
    nodes: dict[str, ComponentTreeNode] = field(default_factory=dict)
    edges: list[ComponentEdge] = field(default_factory=list)


@dataclass(slots=True)
class SplitMetadata:
    total_components: int = 0
    max_depth: int = 0
    processing_time: float = 0.0
    by_type: dict[str, int] = field(default_factory=dict)
    by_role: dict[str, int] = field(default_factory=dict)
    by_depth: dict[int, int] = field(default_factory=dict)
    total_patterns: int = 0
    total_pattern_items: int = 0
    average_pattern_confidence: float = 0.0
    total_elements: int = 0
    text_content_ratio: float = 0.0

    def to_dict(self) -> dict[str, Any]:
        return {
            "total_components": self.total_components,
            "max_depth": self.max_depth,
            "processing_time": round(self.processing_time, 3),
            "component_counts": {
                "by_type": dict(self.by_type),
                "by_role": dict(self.by_role),
                "by_depth": {str(k): v for k, v in self.by_depth.items()},
            },
            "pattern_stats": {
                "total_patterns": self.total_patterns,
                "total_pattern_items": self.total_pattern_items,
                "average_confidence": round(self.average_pattern_confidence, 3),
            },
            "source_stats": {
                "total_elements": self.total_elements,
                "text_content_ratio": round(self.text_content_ratio, 3),
            },
        }


@dataclass(slots=True)
class SplitResult:
    components: list[ComponentDefinition] = field(default_factory=list)
    patterns: list[PatternDetectionResult] = field(default_factory=list)
    tree: ComponentTree = field(default_factory=ComponentTree)
    metadata: SplitMetadata = field(default_factory=SplitMetadata)

    def by_node_id(self) -> dict[str, ComponentDefinition]:
        return {c.node_id: c for c in self.components}

    def get(self, component_id: str) -> ComponentDefinition | None:
        for component in self.components:
            if component.id == component_id:
                return component
        return None


__all__ = [
    "BemInfo",
    "ComponentDefinition",
    "ComponentEdge",
    "ComponentMetadata",
    "ComponentRole",
    "ComponentTree",
    "ComponentTreeNode",
    "EdgeType",
    "ExtractionReason",
    "PatternDetectionResult",
    "PatternType",
    "PropBinding",
    "PropDefinition",
    "SplitMetadata",
    "SplitResult",
]
