"""Split a parsed document into component definitions.

Each element is checked against the extraction rules in priority order:
semantic tag, repeating-pattern membership, class/BEM pattern, custom
selector, structural complexity. The first rule whose confidence clears
``min_confidence`` wins and its reason is recorded on the definition.
"""

from __future__ import annotations

import logging
import re
import time
from collections.abc import Iterator
from dataclasses import dataclass

from html2react.model.component import (
    BemInfo,
    ComponentDefinition,
    ComponentEdge,
    ComponentMetadata,
    ComponentRole,
    ComponentTree,
    ComponentTreeNode,
    EdgeType,
    ExtractionReason,
    PatternDetectionResult,
    PropDefinition,
    SplitMetadata,
    SplitResult,
)
from html2react.model.document import ParsedDocument, ParsedNode
from html2react.model.options import SplitterOptions
from html2react.parser.html_parser import parse, to_html
from html2react.parser.semantic import matches_selector
from html2react.splitter.names import NameGenerator, parse_bem
from html2react.splitter.patterns import PatternDetector

logger = logging.getLogger(__name__)

SEMANTIC_TAGS = frozenset(
    {
        "header",
        "nav",
        "main",
        "footer",
        "article",
        "section",
        "aside",
        "figure",
        "figcaption",
        "dialog",
        "details",
        "summary",
    }
)

CONTAINER_PATTERNS = tuple(
    re.compile(p, re.IGNORECASE)
    for p in ("container", "wrapper", "layout", "grid", "flex", "row", "col", "section")
)

INTERACTIVE_TAGS = frozenset(
    {"button", "a", "input", "textarea", "select", "form", "details", "dialog"}
)
MEDIA_TAGS = frozenset({"img", "picture", "video", "audio", "canvas", "svg"})
DATA_TAGS = frozenset({"table", "ul", "ol", "dl"})
_INTERACTIVE_DESCENDANTS = frozenset({"button", "a", "input", "textarea", "select", "form"})

_NAVIGATION_RE = re.compile(r"nav|menu|breadcrumb|pagination", re.IGNORECASE)
_CONTENT_RE = re.compile(r"card|article|post|item|entry", re.IGNORECASE)

SEMANTIC_CONFIDENCE = 0.95
BLOCK_CONFIDENCE = 0.7
CONTAINER_CONFIDENCE = 0.65
CUSTOM_SELECTOR_CONFIDENCE = 0.9
COMPLEXITY_CONFIDENCE = 0.6
MAX_TEXT_RATIO = 0.8


@dataclass(slots=True, frozen=True)
class _Extraction:
    reason: ExtractionReason
    confidence: float
    pattern: PatternDetectionResult | None = None


def has_container_class(classes: list[str]) -> bool:
    return any(p.search(c) for c in classes for p in CONTAINER_PATTERNS)


def classify_role(node: ParsedNode) -> ComponentRole:
    tag = node.tag or ""
    classes = node.classes
    if tag in SEMANTIC_TAGS:
        return ComponentRole.SEMANTIC
    if tag in INTERACTIVE_TAGS:
        return ComponentRole.INTERACTIVE
    if tag in MEDIA_TAGS:
        return ComponentRole.MEDIA
    if tag in DATA_TAGS:
        return ComponentRole.DATA
    if any(_NAVIGATION_RE.search(c) for c in classes):
        return ComponentRole.NAVIGATION
    if has_container_class(classes):
        return ComponentRole.LAYOUT
    if any(_CONTENT_RE.search(c) for c in classes):
        return ComponentRole.CONTENT
    return ComponentRole.UNKNOWN


def bem_of(classes: list[str]) -> BemInfo | None:
    for cls in classes:
        info = parse_bem(cls)
        if info.element or info.modifier:
            return info
    return None


class ComponentSplitter:
    def __init__(
        self,
        options: SplitterOptions | None = None,
        names: NameGenerator | None = None,
        detector: PatternDetector | None = None,
    ) -> None:
        self.options = options or SplitterOptions()
        self.names = names or NameGenerator()
        self.detector = detector or PatternDetector(
            min_occurrences=self.options.min_pattern_occurrences,
            similarity_threshold=self.options.similarity_threshold,
        )
        self._counter = 0
        self._pattern_names: dict[str, str] = {}

    def split(self, source: str | ParsedDocument) -> SplitResult:
        """Split markup (or an already parsed document) into components."""
        started = time.perf_counter()
        document = parse(source) if isinstance(source, str) else source
        if not document.root.child_ids and not document.root.is_element:
            return SplitResult()

        patterns = self.detector.detect(document) if self.options.detect_patterns else []
        membership = {member: p for p in patterns for member in p.member_ids}

        components: list[ComponentDefinition] = []
        self._counter = 0
        self._pattern_names = {}
        self._visit(document, document.root, 0, None, components, membership)

        result = SplitResult(
            components=components,
            patterns=patterns,
            tree=self.build_tree(document, components),
        )
        result.metadata = self._metadata(document, result, time.perf_counter() - started)
        logger.debug(
            "Split into %d components (%d patterns)", len(components), len(patterns)
        )
        return result

    def _visit(
        self,
        document: ParsedDocument,
        node: ParsedNode,
        depth: int,
        parent: ComponentDefinition | None,
        components: list[ComponentDefinition],
        membership: dict[str, PatternDetectionResult],
    ) -> None:
        if depth > self.options.max_component_depth:
            return
        extraction = self.match_rule(document, node, membership) if node.is_element else None
        if extraction is None:
            for child in document.element_children(node):
                self._visit(document, child, depth, parent, components, membership)
            return

        definition = self._define(document, node, depth, parent, extraction, membership)
        components.append(definition)
        if parent is not None:
            parent.children.append(definition.id)
        pattern = membership.get(node.id)
        if pattern is not None and pattern.member_ids[0] != node.id:
            # Later members reuse the first member's component
            return
        for child in document.element_children(node):
            self._visit(document, child, depth + 1, definition, components, membership)

    def match_rule(
        self,
        document: ParsedDocument,
        node: ParsedNode,
        membership: dict[str, PatternDetectionResult],
    ) -> _Extraction | None:
        """Return the first extraction rule that applies with enough confidence."""
        for extraction in self._candidates(document, node, membership):
            if extraction.confidence >= self.options.min_confidence:
                return extraction
        return None

    def _candidates(
        self,
        document: ParsedDocument,
        node: ParsedNode,
        membership: dict[str, PatternDetectionResult],
    ) -> Iterator[_Extraction]:
        if node.tag in SEMANTIC_TAGS:
            yield _Extraction(ExtractionReason.SEMANTIC_TAG, SEMANTIC_CONFIDENCE)
        pattern = membership.get(node.id)
        if pattern is not None:
            yield _Extraction(ExtractionReason.REPEATING_PATTERN, pattern.confidence, pattern)
        classes = node.classes
        if classes:
            block = next((c for c in classes if "__" not in c and "--" not in c), None)
            if block and self.is_significant(document, node):
                yield _Extraction(ExtractionReason.CLASS_PATTERN, BLOCK_CONFIDENCE)
            if has_container_class(classes):
                yield _Extraction(ExtractionReason.CLASS_PATTERN, CONTAINER_CONFIDENCE)
        if any(matches_selector(node, s) for s in self.options.custom_selectors):
            yield _Extraction(ExtractionReason.CUSTOM_SELECTOR, CUSTOM_SELECTOR_CONFIDENCE)
        if self.is_complex(document, node):
            yield _Extraction(ExtractionReason.COMPLEX_STRUCTURE, COMPLEXITY_CONFIDENCE)

    def is_significant(self, document: ParsedDocument, node: ParsedNode) -> bool:
        if len(document.element_children(node)) < self.options.min_element_count:
            return False
        markup = to_html(document, node.id)
        ratio = len(document.text_content(node.id)) / max(len(markup), 1)
        return ratio <= MAX_TEXT_RATIO

    @staticmethod
    def is_complex(document: ParsedDocument, node: ParsedNode) -> bool:
        if len(document.element_children(node)) < 2:
            return False
        deepest = max(n.depth for n in document.elements(node.id))
        return deepest - node.depth >= 2

    def _define(
        self,
        document: ParsedDocument,
        node: ParsedNode,
        depth: int,
        parent: ComponentDefinition | None,
        extraction: _Extraction,
        membership: dict[str, PatternDetectionResult],
    ) -> ComponentDefinition:
        self._counter += 1
        pattern = membership.get(node.id)
        if pattern is not None and pattern.id in self._pattern_names:
            name = self._pattern_names[pattern.id]
        else:
            name = self.names.generate_name(node, document, parent.name if parent else None)
            if pattern is not None:
                self._pattern_names[pattern.id] = name
        return ComponentDefinition(
            id=f"component-{self._counter}",
            name=name,
            tag=node.tag or "",
            node_id=node.id,
            html=to_html(document, node.id),
            depth=depth,
            classes=list(node.classes),
            bem=bem_of(node.classes),
            parent_id=parent.id if parent else None,
            pattern_id=pattern.id if pattern else None,
            role=classify_role(node),
            reason=extraction.reason,
            confidence=extraction.confidence,
            suggested_props=self.suggest_props(document, node, pattern is not None),
            metadata=self._component_metadata(document, node, extraction),
        )

    @staticmethod
    def suggest_props(
        document: ParsedDocument, node: ParsedNode, in_pattern: bool
    ) -> list[PropDefinition]:
        props = [PropDefinition("className", "string")]
        if document.element_children(node):
            props.append(PropDefinition("children", "ReactNode"))
        if node.tag in INTERACTIVE_TAGS:
            props.append(PropDefinition("onClick", "() => void"))
        if node.tag == "img":
            props.append(PropDefinition("src", "string", required=True))
            props.append(PropDefinition("alt", "string", required=True))
        if node.tag == "a":
            props.append(PropDefinition("href", "string", required=True))
        if in_pattern:
            props.append(PropDefinition("variant", "string"))
        return props

    @staticmethod
    def _component_metadata(
        document: ParsedDocument, node: ParsedNode, extraction: _Extraction
    ) -> ComponentMetadata:
        descendants = [n for n in document.elements(node.id) if n.id != node.id]
        tags = {n.tag for n in descendants}
        return ComponentMetadata(
            element_count=len(descendants),
            text_length=len(document.text_content(node.id)),
            has_interactive=bool(tags & _INTERACTIVE_DESCENDANTS),
            has_forms="form" in tags,
            has_images="img" in tags,
            child_types=[c.tag or "" for c in document.element_children(node)],
            is_pattern_item=extraction.reason is ExtractionReason.REPEATING_PATTERN,
        )

    @staticmethod
    def build_tree(document: ParsedDocument, components: list[ComponentDefinition]) -> ComponentTree:
        tree = ComponentTree()
        if not components:
            return tree
        by_id = {c.id: c for c in components}
        for component in components:
            tree.nodes[component.id] = ComponentTreeNode(
                id=component.id,
                depth=component.depth,
                child_ids=list(component.children),
                parent_id=component.parent_id,
            )
        top_level = [c.id for c in components if c.parent_id is None]
        tree.root = top_level[0] if top_level else components[0].id

        for component in components:
            parent_node = document.get(component.node_id)
            for child_id in component.children:
                child = by_id[child_id]
                tree.edges.append(
                    ComponentEdge(component.id, child_id, _edge_type(document, parent_node, child))
                )
        for node in tree.nodes.values():
            group = tree.nodes[node.parent_id].child_ids if node.parent_id else top_level
            node.siblings = [s for s in group if s != node.id]
        return tree

    @staticmethod
    def _metadata(document: ParsedDocument, result: SplitResult, elapsed: float) -> SplitMetadata:
        metadata = SplitMetadata(processing_time=elapsed)
        components = result.components
        metadata.total_components = len(components)
        metadata.max_depth = max((c.depth for c in components), default=0)
        for component in components:
            metadata.by_type[component.tag] = metadata.by_type.get(component.tag, 0) + 1
            role = component.role.value
            metadata.by_role[role] = metadata.by_role.get(role, 0) + 1
            metadata.by_depth[component.depth] = metadata.by_depth.get(component.depth, 0) + 1
        patterns = result.patterns
        metadata.total_patterns = len(patterns)
        metadata.total_pattern_items = sum(p.count for p in patterns)
        if patterns:
            metadata.average_pattern_confidence = sum(p.confidence for p in patterns) / len(patterns)
        metadata.total_elements = sum(1 for _ in document.elements())
        markup_length = len(to_html(document))
        metadata.text_content_ratio = len(document.text_content(document.root_id)) / max(
            markup_length, 1
        )
        return metadata


def _edge_type(document: ParsedDocument, parent: ParsedNode, child: ComponentDefinition) -> EdgeType:
    if child.pattern_id is not None:
        return EdgeType.RENDERS
    element_children = document.element_children(parent)
    if len(element_children) == 1 and element_children[0].id == child.node_id:
        return EdgeType.WRAPS
    return EdgeType.CONTAINS


def split(source: str | ParsedDocument, options: SplitterOptions | None = None) -> SplitResult:
    return ComponentSplitter(options).split(source)


__all__ = [
    "CONTAINER_PATTERNS",
    "INTERACTIVE_TAGS",
    "SEMANTIC_TAGS",
    "ComponentSplitter",
    "bem_of",
    "classify_role",
    "has_container_class",
    "split",
]
