"""Component name generation.

A ``NameGenerator`` is a per-run registry: every name it hands out is
recorded so later names never collide with earlier ones. Precedence for a
candidate name is an explicit ``data-component``/``data-name`` attribute,
then the BEM block of the first meaningful class, then the semantic tag,
then content (heading, button or link text), then a generic fallback.
"""

from __future__ import annotations

import re
from collections.abc import Iterable

from html2react.model.component import BemInfo
from html2react.model.document import ParsedDocument, ParsedNode

# JavaScript keywords plus React-specific names that make poor component names
RESERVED_WORDS: frozenset[str] = frozenset(
    {
        "abstract", "await", "boolean", "break", "byte", "case", "catch", "char",
        "class", "const", "continue", "debugger", "default", "delete", "do", "double",
        "else", "enum", "export", "extends", "false", "final", "finally", "float",
        "for", "function", "goto", "if", "implements", "import", "in", "instanceof",
        "int", "interface", "let", "long", "native", "new", "null", "package",
        "private", "protected", "public", "return", "short", "static", "super",
        "switch", "synchronized", "this", "throw", "throws", "transient", "true",
        "try", "typeof", "var", "void", "volatile", "while", "with", "yield",
        "render", "constructor", "component", "props", "state", "ref", "key",
        "children", "classname", "style", "onclick", "onchange", "fragment", "react",
    }
)  # fmt: skip

SEMANTIC_TAG_NAMES: dict[str, str] = {
    "header": "Header",
    "nav": "Nav",
    "main": "Main",
    "footer": "Footer",
    "article": "Article",
    "section": "Section",
    "aside": "AsideSidebar",
    "figure": "Figure",
    "figcaption": "Figcaption",
    "dialog": "Dialog",
    "details": "Details",
    "summary": "Summary",
    "a": "Link",
    "img": "Image",
    "button": "Button",
}

# Local names that only make sense relative to their parent (Card + header -> CardHeader)
PART_WORDS: frozenset[str] = frozenset(
    {
        "header", "footer", "body", "title", "subtitle", "content", "image", "media",
        "actions", "action", "item", "items", "text", "meta", "description", "icon",
        "caption", "link", "links", "label", "price", "thumbnail", "details",
    }
)  # fmt: skip

GENERIC_CLASSES: frozenset[str] = frozenset(
    {"container", "wrapper", "content", "section", "area", "box", "inner", "outer"}
)

CONTENT_KEYWORDS: tuple[str, ...] = (
    "contact", "support", "help", "about", "settings", "profile", "dashboard",
    "login", "register", "search", "filter", "sort", "product", "service",
    "feature", "pricing", "team", "news",
)  # fmt: skip

MAX_NAME_LENGTH = 48
MAX_CONTENT_WORDS = 3

_BEM_ELEMENT_RE = re.compile(r"^(.+)__([^_]+)$")
_BEM_MODIFIER_RE = re.compile(r"^(.+?)(?:__[^_]+)?--(.+)$")
_WORD_SPLIT_RE = re.compile(r"[-_\s]+|(?=[A-Z])|(?<=\d)(?=[A-Za-z])|(?<=[A-Za-z])(?=\d)")
_COMPONENT_NAME_RE = re.compile(r"^[A-Z][A-Za-z0-9]*$")
_HEADINGS = ("h1", "h2", "h3", "h4", "h5", "h6")


def to_pascal_case(text: str) -> str:
    """``site-header`` -> ``SiteHeader``; digit-only words are dropped."""
    words: list[str] = []
    for word in _WORD_SPLIT_RE.split(str(text)):
        cleaned = re.sub(r"[^a-zA-Z0-9]", "", word or "")
        cleaned = cleaned.lstrip("0123456789")
        if cleaned:
            words.append(cleaned[0].upper() + cleaned[1:].lower())
    return "".join(words)


def parse_bem(class_name: str) -> BemInfo:
    match = _BEM_ELEMENT_RE.match(class_name)
    if match:
        return BemInfo(block=match.group(1), element=match.group(2))
    match = _BEM_MODIFIER_RE.match(class_name)
    if match:
        return BemInfo(block=match.group(1), modifier=match.group(2))
    return BemInfo(block=class_name)


def meaningful_class(classes: Iterable[str]) -> str | None:
    """First class that can carry a name (no state/js hooks, numbers or modifiers)."""
    for cls in classes:
        if len(cls) < 2 or cls.startswith(("js-", "is-", "has-")):
            continue
        if cls.isdigit() or "--" in cls:
            continue
        return cls
    return None


def sanitize_identifier(name: str) -> str:
    """Coerce ``name`` into a PascalCase identifier that is not a reserved word."""
    cleaned = re.sub(r"[^A-Za-z0-9]", "", name)
    cleaned = cleaned.lstrip("0123456789")
    if not cleaned:
        return "Component"
    cleaned = cleaned[0].upper() + cleaned[1:]
    if cleaned.lower() in RESERVED_WORDS:
        cleaned += "Component"
    return cleaned[:MAX_NAME_LENGTH]


def component_identifier(name: str) -> str:
    """User-chosen component name as-is when it is already a PascalCase identifier."""
    if _COMPONENT_NAME_RE.match(name):
        return name
    return sanitize_identifier(name)


def generate_unique_name(base: str, existing: Iterable[str]) -> str:
    """Return ``base`` or ``base`` + (highest numeric suffix already taken + 1).

    >>> generate_unique_name("Panel", ["Panel", "Panel5", "Panel10"])
    'Panel11'
    """
    taken = set(existing)
    if base not in taken:
        return base
    pattern = re.compile(rf"^{re.escape(base)}(\d+)$")
    numbers = [int(m.group(1)) for m in map(pattern.match, taken) if m]
    return f"{base}{max(numbers, default=1) + 1}"


class NameGenerator:
    """Per-run component name registry."""

    def __init__(self, prefix: str = "") -> None:
        self.prefix = prefix
        self._used: list[str] = []

    @property
    def used_names(self) -> list[str]:
        return list(self._used)

    def reserve(self, name: str) -> str:
        """Register ``name`` (made unique if needed) and return it."""
        unique = generate_unique_name(name, self._used)
        self._used.append(unique)
        return unique

    def reset(self) -> None:
        self._used.clear()

    def generate_name(
        self,
        node: ParsedNode,
        document: ParsedDocument,
        parent_name: str | None = None,
        existing: Iterable[str] = (),
    ) -> str:
        candidate = self.candidate(node, document, parent_name)
        name = sanitize_identifier(self.prefix + candidate)
        unique = generate_unique_name(name, [*existing, *self._used])
        self._used.append(unique)
        return unique

    def candidate(
        self, node: ParsedNode, document: ParsedDocument, parent_name: str | None = None
    ) -> str:
        explicit = node.attributes.data.get("data-component") or node.attributes.data.get(
            "data-name"
        )
        if explicit and to_pascal_case(explicit):
            return to_pascal_case(explicit)

        cls = meaningful_class(node.classes)
        if cls and cls.lower() not in GENERIC_CLASSES:
            return self._from_class(cls, parent_name)

        tag_name = SEMANTIC_TAG_NAMES.get(node.tag or "")
        if tag_name:
            if parent_name and (node.tag or "") in PART_WORDS:
                return parent_name + tag_name
            return tag_name

        content = self.suggest_from_content(node, document)
        if content:
            return content

        if cls:
            return self._from_class(cls, parent_name)
        return self._generic(node, document)

    def _from_class(self, cls: str, parent_name: str | None) -> str:
        bem = parse_bem(cls)
        if bem.element:
            return to_pascal_case(f"{bem.block} {bem.element}")
        if parent_name and cls.lower() in PART_WORDS:
            return parent_name + to_pascal_case(cls)
        return to_pascal_case(bem.block)

    def suggest_from_content(self, node: ParsedNode, document: ParsedDocument) -> str | None:
        """Derive a name from heading, button or link text, then paragraph keywords."""
        elements = list(document.elements(node.id))
        for tag, suffix in ((_HEADINGS, ""), (("button",), "Button"), (("a",), "Link")):
            for element in elements:
                if element.tag not in tag:
                    continue
                words = document.text_content(element.id).split()[:MAX_CONTENT_WORDS]
                name = to_pascal_case(" ".join(words))
                if name:
                    return name if name.endswith(suffix) else name + suffix
        for element in elements:
            if element.tag != "p":
                continue
            text = document.text_content(element.id).lower()
            for keyword in CONTENT_KEYWORDS:
                if keyword in text:
                    return to_pascal_case(keyword)
        return None

    def _generic(self, node: ParsedNode, document: ParsedDocument) -> str:
        counter = len(self._used) + 1
        if document.element_children(node):
            return f"Container{counter}"
        return f"Component{counter}"


__all__ = [
    "PART_WORDS",
    "RESERVED_WORDS",
    "SEMANTIC_TAG_NAMES",
    "NameGenerator",
    "component_identifier",
    "generate_unique_name",
    "meaningful_class",
    "parse_bem",
    "sanitize_identifier",
    "to_pascal_case",
]
