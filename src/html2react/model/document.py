"""Parsed document tree: node arena, attributes, metadata and semantic sections."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from enum import Enum


class NodeType(Enum):
    ELEMENT = "element"
    TEXT = "text"
    COMMENT = "comment"
    FRAGMENT = "fragment"


class SemanticType(Enum):
    HEADER = "header"
    NAV = "nav"
    MAIN = "main"
    ASIDE = "aside"
    FOOTER = "footer"
    SECTION = "section"
    ARTICLE = "article"
    FIGURE = "figure"
    FORM = "form"
    TABLE = "table"
    LIST = "list"
    CARD = "card"
    HERO = "hero"
    NONE = "none"


@dataclass(slots=True, frozen=True)
class EventHandler:
    name: str  # attribute name as written in the markup
    react_name: str
    handler: str


@dataclass(slots=True)
class NodeAttributes:
    """Normalized attributes of an element.

    ``html`` keeps plain attributes under their React name. Classes, styles,
    events and data-/aria- attributes are split out so later stages never
    have to re-parse them.
    """

    html: dict[str, str | bool] = field(default_factory=dict)
    events: list[EventHandler] = field(default_factory=list)
    style: dict[str, str] = field(default_factory=dict)
    style_text: str | None = None
    class_name: str | None = None
    data: dict[str, str] = field(default_factory=dict)
    aria: dict[str, str] = field(default_factory=dict)
    # Attribute names and values exactly as they appeared in the source
    raw: dict[str, str] = field(default_factory=dict)

    @property
    def classes(self) -> list[str]:
        return self.class_name.split() if self.class_name else []

    @property
    def element_id(self) -> str | None:
        value = self.html.get("id")
        return value if isinstance(value, str) and value else None


@dataclass(slots=True)
class ParsedNode:
    id: str
    type: NodeType
    depth: int
    tag: str | None = None
    attributes: NodeAttributes = field(default_factory=NodeAttributes)
    child_ids: list[str] = field(default_factory=list)
    text: str | None = None
    parent_id: str | None = None
    semantic_type: SemanticType | None = None
    self_closing: bool = False

    @property
    def is_element(self) -> bool:
        return self.type is NodeType.ELEMENT

    @property
    def classes(self) -> list[str]:
        return self.attributes.classes


@dataclass(slots=True)
class DocumentMetadata:
    source: str = ""
    title: str | None = None
    lang: str | None = None
    charset: str | None = None
    viewport: str | None = None
    node_count: int = 0
    max_depth: int = 0
    unique_tags: list[str] = field(default_factory=list)
    unique_classes: list[str] = field(default_factory=list)
    unique_ids: list[str] = field(default_factory=list)


@dataclass(slots=True)
class SemanticSection:
    type: SemanticType
    node_id: str
    component_name: str
    node_ids: list[str]
    confidence: float
    reasoning: str


@dataclass(slots=True)
class ParsedDocument:
    """A parsed markup tree stored as an arena of nodes addressed by id."""

    root_id: str
    nodes: dict[str, ParsedNode]
    metadata: DocumentMetadata
    sections: list[SemanticSection] = field(default_factory=list)

    @property
    def root(self) -> ParsedNode:
        return self.nodes[self.root_id]

    def get(self, node_id: str) -> ParsedNode:
        return self.nodes[node_id]

    def children(self, node: ParsedNode | str) -> list[ParsedNode]:
        target = self.nodes[node] if isinstance(node, str) else node
        return [self.nodes[cid] for cid in target.child_ids]

    def element_children(self, node: ParsedNode | str) -> list[ParsedNode]:
        return [child for child in self.children(node) if child.is_element]

    def parent(self, node: ParsedNode | str) -> ParsedNode | None:
        target = self.nodes[node] if isinstance(node, str) else node
        if target.parent_id is None:
            return None
        return self.nodes.get(target.parent_id)

    def walk(self, node_id: str | None = None) -> Iterator[ParsedNode]:
        """Yield nodes of a subtree in document (pre-)order."""
        stack = [node_id or self.root_id]
        while stack:
            node = self.nodes[stack.pop()]
            yield node
            stack.extend(reversed(node.child_ids))

    def elements(self, node_id: str | None = None) -> Iterator[ParsedNode]:
        return (node for node in self.walk(node_id) if node.is_element)

    def text_content(self, node_id: str) -> str:
        return "".join(n.text or "" for n in self.walk(node_id) if n.type is NodeType.TEXT)

    def order_of(self, node_id: str) -> int:
        """Document-order index derived from the pre-order ``node-N`` id."""
        try:
            return int(node_id.rsplit("-", 1)[1])
        except (IndexError, ValueError):
            return len(self.nodes)


__all__ = [
    "DocumentMetadata",
    "EventHandler",
    "NodeAttributes",
    "NodeType",
    "ParsedDocument",
    "ParsedNode",
    "SemanticSection",
    "SemanticType",
]
