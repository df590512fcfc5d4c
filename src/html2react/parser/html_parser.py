"""Markup -> ParsedDocument.

BeautifulSoup's ``html.parser`` backend gives browser-like tolerance for
malformed markup (unclosed tags, stray end tags) without raising. The tree
is flattened into an arena of ``ParsedNode`` objects with pre-order ids so
id order equals document order.
"""

from __future__ import annotations

import html
import logging
from contextlib import suppress

from bs4 import BeautifulSoup, Comment, NavigableString, PageElement, Tag
from bs4.element import PreformattedString

from html2react.errors import ParseInputError
from html2react.ids import SequentialIds
from html2react.model.document import (
    DocumentMetadata,
    NodeType,
    ParsedDocument,
    ParsedNode,
)
from html2react.model.options import ParserOptions, ProgressCallback
from html2react.parser.attributes import VOID_ELEMENTS, normalize_attributes
from html2react.parser.semantic import SemanticAnalyzer

logger = logging.getLogger(__name__)


def _safe_emit(on_progress: ProgressCallback, event: str, payload: dict[str, int | str]) -> None:
    if on_progress is None:
        return
    with suppress(Exception):
        on_progress(event, payload)


def make_soup(markup: str) -> BeautifulSoup:
    # multi_valued_attributes=None keeps class/rel/headers as plain strings
    return BeautifulSoup(markup, "html.parser", multi_valued_attributes=None)


class _TreeBuilder:
    def __init__(self, options: ParserOptions) -> None:
        self.options = options
        self.ids = SequentialIds("node")
        self.nodes: dict[str, ParsedNode] = {}
        self.max_depth = 0

    def _register(self, node: ParsedNode) -> ParsedNode:
        self.nodes[node.id] = node
        self.max_depth = max(self.max_depth, node.depth)
        return node

    def meaningful(self, children: list[PageElement]) -> list[PageElement]:
        kept: list[PageElement] = []
        for child in children:
            if isinstance(child, Tag):
                if child.name in ("head", "!doctype"):
                    continue
                kept.append(child)
            elif isinstance(child, Comment):
                if self.options.include_comments:
                    kept.append(child)
            elif isinstance(child, PreformattedString):
                continue
            elif isinstance(child, NavigableString):
                if self.options.preserve_whitespace or str(child).strip():
                    kept.append(child)
        return kept

    def build(self, item: PageElement, depth: int, parent_id: str | None) -> ParsedNode | None:
        if self.options.max_depth is not None and depth > self.options.max_depth:
            return None
        if isinstance(item, Tag):
            return self.build_element(item, depth, parent_id)
        if isinstance(item, Comment):
            return self._register(
                ParsedNode(
                    id=self.ids.next(),
                    type=NodeType.COMMENT,
                    depth=depth,
                    text=str(item),
                    parent_id=parent_id,
                )
            )
        return self._register(
            ParsedNode(
                id=self.ids.next(),
                type=NodeType.TEXT,
                depth=depth,
                text=str(item),
                parent_id=parent_id,
            )
        )

    def build_element(self, tag: Tag, depth: int, parent_id: str | None) -> ParsedNode:
        name = tag.name.lower()
        node = self._register(
            ParsedNode(
                id=self.ids.next(),
                type=NodeType.ELEMENT,
                depth=depth,
                tag=name,
                attributes=normalize_attributes(dict(tag.attrs)),
                parent_id=parent_id,
                self_closing=name in VOID_ELEMENTS,
            )
        )
        if node.self_closing:
            return node
        for child in self.meaningful(list(tag.children)):
            built = self.build(child, depth + 1, node.id)
            if built is not None:
                node.child_ids.append(built.id)
        return node

    def build_fragment(self, children: list[PageElement]) -> ParsedNode:
        root = self._register(ParsedNode(id=self.ids.next(), type=NodeType.FRAGMENT, depth=0))
        for child in children:
            built = self.build(child, 1, root.id)
            if built is not None:
                root.child_ids.append(built.id)
        return root


def _content_container(soup: BeautifulSoup) -> Tag:
    if soup.body is not None:
        return soup.body
    if soup.html is not None:
        return soup.html
    return soup


def _extract_metadata(soup: BeautifulSoup, source: str) -> DocumentMetadata:
    metadata = DocumentMetadata(source=source)
    if soup.title is not None and soup.title.string:
        metadata.title = soup.title.string.strip() or None
    if soup.html is not None:
        lang = soup.html.get("lang")
        metadata.lang = str(lang) if lang else None
    charset = soup.find("meta", attrs={"charset": True})
    if isinstance(charset, Tag):
        metadata.charset = str(charset.get("charset"))
    viewport = soup.find("meta", attrs={"name": "viewport"})
    if isinstance(viewport, Tag) and viewport.get("content"):
        metadata.viewport = str(viewport.get("content"))
    return metadata


def _collect_unique(document: ParsedDocument) -> None:
    tags: set[str] = set()
    classes: set[str] = set()
    ids: set[str] = set()
    for node in document.elements():
        if node.tag:
            tags.add(node.tag)
        classes.update(node.classes)
        if node.attributes.element_id:
            ids.add(node.attributes.element_id)
    document.metadata.unique_tags = sorted(tags)
    document.metadata.unique_classes = sorted(classes)
    document.metadata.unique_ids = sorted(ids)


def empty_document(source: str = "") -> ParsedDocument:
    root = ParsedNode(id="node-0", type=NodeType.FRAGMENT, depth=0)
    return ParsedDocument(
        root_id=root.id,
        nodes={root.id: root},
        metadata=DocumentMetadata(source=source, node_count=1),
    )


def parse(markup: str, options: ParserOptions | None = None) -> ParsedDocument:
    """Parse ``markup`` into a ParsedDocument.

    Raises:
        ParseInputError: If ``markup`` is None
    """
    if markup is None:
        raise ParseInputError("HTML input cannot be None")
    options = options or ParserOptions()
    source = str(markup)
    if not source.strip():
        return empty_document(source)

    _safe_emit(options.on_progress, "parse:start", {"length": len(source)})
    soup = make_soup(source.strip())
    metadata = _extract_metadata(soup, source)

    builder = _TreeBuilder(options)
    top_level = builder.meaningful(list(_content_container(soup).children))
    if len(top_level) == 1 and isinstance(top_level[0], Tag):
        root = builder.build_element(top_level[0], 0, None)
    else:
        root = builder.build_fragment(top_level)

    document = ParsedDocument(root_id=root.id, nodes=builder.nodes, metadata=metadata)
    metadata.node_count = len(builder.nodes)
    metadata.max_depth = builder.max_depth
    _collect_unique(document)

    _safe_emit(options.on_progress, "parse:analyzing", {"nodes": metadata.node_count})
    document.sections = SemanticAnalyzer(options.semantic_rules).analyze(document)
    logger.debug(
        "Parsed %d nodes (max depth %d, %d sections)",
        metadata.node_count,
        metadata.max_depth,
        len(document.sections),
    )
    _safe_emit(
        options.on_progress,
        "parse:complete",
        {"nodes": metadata.node_count, "sections": len(document.sections)},
    )
    return document


def to_html(document: ParsedDocument, node_id: str | None = None) -> str:
    """Serialize a subtree back to markup using the original attribute names."""
    node = document.get(node_id or document.root_id)
    if node.type is NodeType.TEXT:
        return html.escape(node.text or "", quote=False)
    if node.type is NodeType.COMMENT:
        return f"<!--{node.text or ''}-->"
    inner = "".join(to_html(document, cid) for cid in node.child_ids)
    if node.type is NodeType.FRAGMENT:
        return inner
    attrs = "".join(
        f' {name}="{html.escape(value, quote=True)}"' if value != "" else f" {name}"
        for name, value in node.attributes.raw.items()
    )
    if node.tag in VOID_ELEMENTS:
        return f"<{node.tag}{attrs}>"
    return f"<{node.tag}{attrs}>{inner}</{node.tag}>"


__all__ = ["empty_document", "make_soup", "parse", "to_html"]
