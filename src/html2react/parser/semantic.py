"""Semantic section classification for parsed documents.

A section is a subtree whose root looks like a known structural role
(header, nav, card, hero, ...). Classification uses custom rules first, then
card/hero classes, then tag names, then role-like class names.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from html2react.model.document import (
    ParsedDocument,
    ParsedNode,
    SemanticSection,
    SemanticType,
)
from html2react.model.options import SemanticRule


@dataclass(frozen=True)
class _Pattern:
    tags: tuple[str, ...]
    classes: tuple[str, ...]


SEMANTIC_PATTERNS: dict[SemanticType, _Pattern] = {
    SemanticType.HEADER: _Pattern(
        ("header", "masthead"), ("header", "site-header", "page-header", "main-header", "top-bar")
    ),
    SemanticType.NAV: _Pattern(
        ("nav", "navigation"), ("nav", "navbar", "navigation", "menu", "main-menu", "top-nav")
    ),
    SemanticType.MAIN: _Pattern(("main",), ("main", "content", "main-content", "primary-content")),
    SemanticType.ASIDE: _Pattern(
        ("aside", "sidebar"), ("aside", "sidebar", "side-bar", "secondary-content")
    ),
    SemanticType.FOOTER: _Pattern(
        ("footer",), ("footer", "site-footer", "page-footer", "bottom-bar")
    ),
    SemanticType.SECTION: _Pattern(("section",), ("section",)),
    SemanticType.ARTICLE: _Pattern(("article",), ("article", "post", "entry")),
    SemanticType.FIGURE: _Pattern(("figure",), ("figure", "image", "media")),
    SemanticType.FORM: _Pattern(("form",), ("form", "search-form", "login-form")),
    SemanticType.TABLE: _Pattern(("table",), ("table", "data-table")),
    SemanticType.LIST: _Pattern(("ul", "ol", "dl"), ("list", "items", "listing")),
    SemanticType.CARD: _Pattern((), ("card", "panel", "box", "tile")),
    SemanticType.HERO: _Pattern((), ("hero", "banner", "jumbotron", "showcase")),
}

# Role classes consulted after tags; only the page-level landmarks.
_CLASS_ROLE_ORDER = (
    SemanticType.HEADER,
    SemanticType.NAV,
    SemanticType.FOOTER,
    SemanticType.ASIDE,
)

COMPONENT_NAME_TEMPLATES: dict[SemanticType, str] = {
    SemanticType.HEADER: "Header",
    SemanticType.NAV: "Navigation",
    SemanticType.MAIN: "MainContent",
    SemanticType.ASIDE: "Sidebar",
    SemanticType.FOOTER: "Footer",
    SemanticType.SECTION: "Section",
    SemanticType.ARTICLE: "Article",
    SemanticType.FIGURE: "Figure",
    SemanticType.FORM: "Form",
    SemanticType.TABLE: "Table",
    SemanticType.LIST: "List",
    SemanticType.CARD: "Card",
    SemanticType.HERO: "Hero",
    SemanticType.NONE: "Component",
}

_TAG_TYPES: dict[str, SemanticType] = {
    tag: stype for stype, pattern in SEMANTIC_PATTERNS.items() for tag in pattern.tags
}
# <article> is listed under MAIN in some pattern sets; it is always an article here.
_TAG_TYPES["article"] = SemanticType.ARTICLE


def matches_selector(node: ParsedNode, selector: str) -> bool:
    """Match the small selector subset used by rules: ``.cls``, ``#id``, ``[a=b]``, ``tag``."""
    if not node.is_element:
        return False
    selector = selector.strip()
    if selector.startswith("."):
        return selector[1:] in node.classes
    if selector.startswith("#"):
        return node.attributes.element_id == selector[1:]
    if selector.startswith("[") and selector.endswith("]"):
        attr, sep, value = selector[1:-1].partition("=")
        attr = attr.strip()
        actual = node.attributes.raw.get(attr)
        if not sep:
            return actual is not None
        return actual == value.strip().strip("'\"")
    return node.tag == selector.lower()


def to_pascal_words(text: str) -> str:
    words = re.sub(r"[^a-zA-Z0-9]", " ", text).split()
    return "".join(w[:1].upper() + w[1:].lower() for w in words)


class SemanticAnalyzer:
    def __init__(self, rules: list[SemanticRule] | None = None) -> None:
        self.rules = list(rules or [])

    def analyze(self, document: ParsedDocument) -> list[SemanticSection]:
        sections: list[SemanticSection] = []
        for node in document.elements():
            stype = self.identify(node)
            if stype is SemanticType.NONE:
                continue
            node.semantic_type = stype
            sections.append(self._create_section(document, node, stype))
        return self._post_process(document, sections)

    def identify(self, node: ParsedNode) -> SemanticType:
        if not node.is_element:
            return SemanticType.NONE
        for rule in self.rules:
            if matches_selector(node, rule.selector):
                return rule.type

        classes = node.classes
        if any(c in SEMANTIC_PATTERNS[SemanticType.CARD].classes for c in classes):
            return SemanticType.CARD
        if any(c in SEMANTIC_PATTERNS[SemanticType.HERO].classes for c in classes):
            return SemanticType.HERO

        if node.tag in _TAG_TYPES:
            return _TAG_TYPES[node.tag]

        for stype in _CLASS_ROLE_ORDER:
            if any(c in SEMANTIC_PATTERNS[stype].classes for c in classes):
                return stype
        return SemanticType.NONE

    def confidence(self, node: ParsedNode, stype: SemanticType) -> float:
        pattern = SEMANTIC_PATTERNS.get(stype)
        if pattern is None:
            return 1.0 if any(matches_selector(node, r.selector) for r in self.rules) else 0.0
        if node.tag in pattern.tags:
            return 1.0
        score = 0.0
        for cls in node.classes:
            if cls in pattern.classes:
                score += 0.4
                break
            if any(cls in p or p in cls for p in pattern.classes):
                score += 0.2
                break
        if score == 0.0 and any(matches_selector(node, r.selector) for r in self.rules):
            return 1.0
        return min(score, 1.0)

    def component_name(self, node: ParsedNode, stype: SemanticType) -> str:
        for rule in self.rules:
            if rule.component_name and matches_selector(node, rule.selector):
                return rule.component_name
        base = COMPONENT_NAME_TEMPLATES[stype]
        if node.attributes.element_id:
            return base + to_pascal_words(node.attributes.element_id)
        if node.classes:
            suffix = to_pascal_words(node.classes[0])
            return base if suffix == base else base + suffix
        return base

    def _create_section(
        self, document: ParsedDocument, node: ParsedNode, stype: SemanticType
    ) -> SemanticSection:
        return SemanticSection(
            type=stype,
            node_id=node.id,
            component_name=self.component_name(node, stype),
            node_ids=[n.id for n in document.walk(node.id)],
            confidence=self.confidence(node, stype),
            reasoning=self._reasoning(node, stype),
        )

    @staticmethod
    def _reasoning(node: ParsedNode, stype: SemanticType) -> str:
        reasons: list[str] = []
        if node.tag == stype.value:
            reasons.append(f'Tag name matches semantic type "{stype.value}"')
        for cls in node.classes:
            if stype.value in cls:
                reasons.append(f'Class name "{cls}" suggests {stype.value} component')
                break
        if node.attributes.element_id:
            reasons.append(f'Has ID "{node.attributes.element_id}"')
        return "; ".join(reasons) or f"Pattern matching detected {stype.value} component"

    @staticmethod
    def _post_process(
        document: ParsedDocument, sections: list[SemanticSection]
    ) -> list[SemanticSection]:
        """Keep only outermost sections, in document order."""
        ordered = sorted(
            sections,
            key=lambda s: (document.get(s.node_id).depth, -s.confidence, document.order_of(s.node_id)),
        )
        kept: list[SemanticSection] = []
        covered: set[str] = set()
        for section in ordered:
            if section.node_id in covered:
                continue
            kept.append(section)
            covered.update(section.node_ids)
        kept.sort(key=lambda s: document.order_of(s.node_id))
        return kept


def component_names(document: ParsedDocument) -> dict[str, str]:
    """Map every node id inside a section to that section's component name."""
    names: dict[str, str] = {}
    for section in document.sections:
        for node_id in section.node_ids:
            names[node_id] = section.component_name
    return names


def sections_by_type(document: ParsedDocument, stype: SemanticType) -> list[SemanticSection]:
    return [s for s in document.sections if s.type is stype]


def section_for_node(document: ParsedDocument, node_id: str) -> SemanticSection | None:
    for section in document.sections:
        if node_id in section.node_ids:
            return section
    return None


def hierarchy(document: ParsedDocument) -> dict[str, list[str]]:
    """Map each section root to the classified nodes nested inside it."""
    tree: dict[str, list[str]] = {}
    for section in document.sections:
        tree[section.node_id] = [
            node_id
            for node_id in section.node_ids[1:]
            if document.get(node_id).semantic_type not in (None, SemanticType.NONE)
        ]
    return tree


__all__ = [
    "COMPONENT_NAME_TEMPLATES",
    "SEMANTIC_PATTERNS",
    "SemanticAnalyzer",
    "component_names",
    "hierarchy",
    "matches_selector",
    "section_for_node",
    "sections_by_type",
    "to_pascal_words",
]
