"""Repeating-pattern detection over sibling subtrees.

Siblings are grouped by signature (tag plus first class). A group becomes a
pattern when it has enough members and their descendant shapes are similar
enough on average. Values that differ between members at the same position
(text, ``src``, ``alt``, ``href``) become inferred props.
"""

from __future__ import annotations

import logging
import re
from collections import Counter
from itertools import combinations

from html2react.model.component import (
    PatternDetectionResult,
    PatternType,
    PropBinding,
    PropDefinition,
)
from html2react.model.document import NodeType, ParsedDocument, ParsedNode
from html2react.parser.html_parser import to_html
from html2react.splitter.names import generate_unique_name

logger = logging.getLogger(__name__)

# Classless siblings only group for tags that naturally repeat
REPEATABLE_TAGS = frozenset({"li", "tr", "td", "th", "dt", "dd", "article", "figure", "option"})

TEXT_PROP_NAMES: dict[str, str] = {
    "h1": "title",
    "h2": "title",
    "h3": "title",
    "h4": "title",
    "h5": "title",
    "h6": "title",
    "p": "description",
    "a": "linkText",
    "button": "buttonLabel",
    "span": "text",
    "li": "text",
    "label": "label",
    "strong": "label",
}

VARYING_ATTRIBUTES = ("src", "alt", "href")

SAMPLE_LENGTH = 200

_NUMERIC_RE = re.compile(r"^-?\d+(?:\.\d+)?$")
_CLASSIFIERS: tuple[tuple[PatternType, tuple[str, ...], tuple[str, ...]], ...] = (
    (PatternType.CARD, (), ("card", "product")),
    (PatternType.TABLE_ROW, ("tr",), ()),
    (PatternType.FORM_FIELD, ("input", "label", "select", "textarea"), ("form-group", "field")),
    (PatternType.MEDIA_ITEM, ("img", "figure", "picture"), ("media", "gallery", "photo")),
    (PatternType.BUTTON, ("button",), ("btn", "button")),
    (PatternType.LIST_ITEM, ("li", "dt", "dd"), ("nav", "menu", "link", "item", "entry")),
    (PatternType.SECTION, ("section",), ("section", "hero", "feature")),
)


def signature(node: ParsedNode) -> str:
    classes = node.classes
    return f"{node.tag}.{classes[0]}" if classes else node.tag or ""


def shape(document: ParsedDocument, node_id: str) -> list[str]:
    """Pre-order ``tag.class`` tokens of the descendants of ``node_id``."""
    return [signature(n) for n in document.elements(node_id) if n.id != node_id]


def shape_similarity(a: list[str], b: list[str]) -> float:
    """Multiset overlap of two shapes; 1.0 when identical."""
    if a == b:
        return 1.0
    if not a or not b:
        return 0.0
    ca, cb = Counter(a), Counter(b)
    keys = ca.keys() | cb.keys()
    shared = sum(min(ca[k], cb[k]) for k in keys)
    total = sum(max(ca[k], cb[k]) for k in keys)
    return shared / total if total else 1.0


def classify_pattern(tag: str, label: str) -> PatternType:
    normalized = label.lower().replace("__", "-")
    for ptype, tags, keywords in _CLASSIFIERS:
        if tag in tags or any(k in normalized for k in keywords):
            return ptype
    return PatternType.UNKNOWN


def infer_value_type(values: list[str]) -> str:
    if all(v.lower() in ("true", "false") for v in values):
        return "boolean"
    if all(_NUMERIC_RE.match(v) for v in values):
        return "number"
    return "string"


class PatternDetector:
    def __init__(self, min_occurrences: int = 2, similarity_threshold: float = 0.7) -> None:
        self.min_occurrences = min_occurrences
        self.similarity_threshold = similarity_threshold

    def detect(self, document: ParsedDocument) -> list[PatternDetectionResult]:
        results: list[PatternDetectionResult] = []
        for parent in document.walk():
            if parent.type not in (NodeType.ELEMENT, NodeType.FRAGMENT):
                continue
            for members in self._sibling_groups(document, parent):
                result = self._evaluate(document, members, len(results) + 1)
                if result is not None:
                    results.append(result)
        logger.debug("Detected %d repeating patterns", len(results))
        return results

    def _sibling_groups(self, document: ParsedDocument, parent: ParsedNode) -> list[list[ParsedNode]]:
        groups: dict[str, list[ParsedNode]] = {}
        for child in document.element_children(parent):
            if not child.classes and child.tag not in REPEATABLE_TAGS:
                continue
            groups.setdefault(signature(child), []).append(child)
        return [g for g in groups.values() if len(g) >= self.min_occurrences]

    def average_similarity(self, document: ParsedDocument, members: list[ParsedNode]) -> float:
        shapes = [shape(document, m.id) for m in members]
        pairs = list(combinations(shapes, 2))
        if not pairs:
            return 1.0
        return sum(shape_similarity(a, b) for a, b in pairs) / len(pairs)

    @staticmethod
    def confidence(count: int, similarity: float) -> float:
        score = min(count / 5, 1.0) * 0.3 + similarity * 0.7
        if similarity >= 0.95:
            score += 0.2
        return min(score, 1.0)

    def _evaluate(
        self, document: ParsedDocument, members: list[ParsedNode], index: int
    ) -> PatternDetectionResult | None:
        similarity = self.average_similarity(document, members)
        if similarity < self.similarity_threshold:
            logger.debug(
                "Rejected pattern candidate %s (similarity %.2f)", signature(members[0]), similarity
            )
            return None
        first = members[0]
        props, bindings = self.infer_bindings(document, members)
        label = (first.classes[0] if first.classes else first.tag or "element").replace("__", "-")
        return PatternDetectionResult(
            id=f"pattern-{label}-{index}",
            label=label,
            count=len(members),
            member_ids=[m.id for m in members],
            confidence=self.confidence(len(members), similarity),
            pattern_type=classify_pattern(first.tag or "", label),
            similarity=similarity,
            inferred_props=props,
            sample_structure=to_html(document, first.id)[:SAMPLE_LENGTH],
            bindings=bindings,
        )

    def infer_props(self, document: ParsedDocument, members: list[ParsedNode]) -> list[PropDefinition]:
        return self.infer_bindings(document, members)[0]

    def infer_bindings(
        self, document: ParsedDocument, members: list[ParsedNode]
    ) -> tuple[list[PropDefinition], list[PropBinding]]:
        """Props for values that vary across members at the same tree position."""
        columns = [list(document.elements(m.id)) for m in members]
        width = min(len(c) for c in columns)
        props: list[PropDefinition] = []
        bindings: list[PropBinding] = []

        def add(position: int, source: str, base: str, values: list[str]) -> None:
            name = generate_unique_name(base, [p.name for p in props])
            props.append(PropDefinition(name=name, type=infer_value_type(values), required=True))
            bindings.append(PropBinding(position=position, source=source, prop=name))

        for position in range(width):
            row = [column[position] for column in columns]
            tag = row[0].tag or ""
            if any(node.tag != tag for node in row):
                break
            texts = [own_text(document, node) for node in row]
            if any(texts) and len(set(texts)) > 1:
                add(position, "text", TEXT_PROP_NAMES.get(tag, "content"), texts)
            for attr in VARYING_ATTRIBUTES:
                values = [str(node.attributes.html.get(attr, "")) for node in row]
                if any(values) and len(set(values)) > 1:
                    add(position, attr, attr, values)
        return props, bindings


def own_text(document: ParsedDocument, node: ParsedNode) -> str:
    """Whitespace-collapsed text of the direct text children of ``node``."""
    return " ".join(
        " ".join((child.text or "").split())
        for child in document.children(node)
        if child.type is NodeType.TEXT and (child.text or "").strip()
    )


def binding_value(document: ParsedDocument, member_id: str, binding: PropBinding) -> str:
    """Value of ``binding`` inside one pattern member."""
    elements = list(document.elements(member_id))
    if binding.position >= len(elements):
        return ""
    node = elements[binding.position]
    if binding.source == "text":
        return own_text(document, node)
    return str(node.attributes.html.get(binding.source, ""))


__all__ = [
    "PatternDetector",
    "binding_value",
    "classify_pattern",
    "infer_value_type",
    "own_text",
    "shape",
    "shape_similarity",
    "signature",
]
