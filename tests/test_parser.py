from __future__ import annotations

import pytest

from html2react.errors import ParseInputError
from html2react.model.document import NodeType, SemanticType
from html2react.model.options import ParserOptions, SemanticRule
from html2react.parser import parse, to_html
from html2react.parser.attributes import normalize_attributes, parse_style
from html2react.parser.semantic import (
    component_names,
    hierarchy,
    matches_selector,
    section_for_node,
    sections_by_type,
)


def test_parse_none_raises() -> None:
    with pytest.raises(ParseInputError):
        parse(None)  # type: ignore[arg-type]


@pytest.mark.parametrize("markup", ["", "   \n\t  "])
def test_parse_empty_input_yields_empty_fragment(markup: str) -> None:
    doc = parse(markup)
    assert doc.root.type is NodeType.FRAGMENT
    assert doc.root.child_ids == []
    assert doc.sections == []


def test_single_top_level_element_becomes_root() -> None:
    doc = parse('<div class="container"><p>Hello World</p></div>')
    assert doc.root.tag == "div"
    assert doc.root.classes == ["container"]
    assert [c.tag for c in doc.element_children(doc.root)] == ["p"]
    assert doc.text_content(doc.root_id).strip() == "Hello World"


def test_multiple_top_level_nodes_wrap_in_fragment() -> None:
    doc = parse("<h1>A</h1><p>B</p>")
    assert doc.root.type is NodeType.FRAGMENT
    assert [c.tag for c in doc.element_children(doc.root)] == ["h1", "p"]


def test_child_depth_and_parent_links_are_consistent(landing_page: str) -> None:
    doc = parse(landing_page)
    for node in doc.walk():
        for child_id in node.child_ids:
            child = doc.get(child_id)
            assert child.parent_id == node.id
            assert child.depth == node.depth + 1


def test_node_ids_follow_document_order(landing_page: str) -> None:
    doc = parse(landing_page)
    order = [int(n.id.split("-")[1]) for n in doc.walk()]
    assert order == sorted(order)
    assert len(set(order)) == len(order) == doc.metadata.node_count


def test_void_elements_have_no_children() -> None:
    doc = parse('<div><img src="a.png" alt="A"><br><input type="text"></div>')
    children = doc.element_children(doc.root)
    assert [c.tag for c in children] == ["img", "br", "input"]
    assert all(c.self_closing and not c.child_ids for c in children)


def test_malformed_markup_is_tolerated() -> None:
    doc = parse("<div><p>open paragraph<span>unclosed</div></b>")
    assert doc.root.tag == "div"
    assert "unclosed" in doc.text_content(doc.root_id)


def test_metadata_extraction(landing_page: str) -> None:
    doc = parse(landing_page)
    assert doc.metadata.title == "Acme Landing"
    assert doc.metadata.lang == "en"
    assert doc.metadata.charset == "utf-8"
    assert "card" in doc.metadata.unique_classes
    assert "li" in doc.metadata.unique_tags


def test_whitespace_and_comments_are_optional() -> None:
    markup = "<div>\n  <!-- note -->\n  <p>x</p>\n</div>"
    plain = parse(markup)
    assert [c.type for c in plain.children(plain.root)] == [NodeType.ELEMENT]
    with_comments = parse(markup, ParserOptions(include_comments=True))
    types = [c.type for c in with_comments.children(with_comments.root)]
    assert NodeType.COMMENT in types


def test_max_depth_truncates_tree() -> None:
    doc = parse("<div><section><p><span>deep</span></p></section></div>", ParserOptions(max_depth=1))
    assert doc.metadata.max_depth == 1
    assert all(n.depth <= 1 for n in doc.walk())


def test_progress_events_are_emitted_and_callback_errors_suppressed() -> None:
    events: list[str] = []

    def on_progress(event: str, payload: dict[str, int | str]) -> None:
        events.append(event)
        raise RuntimeError("boom")

    parse("<p>x</p>", ParserOptions(on_progress=on_progress))
    assert events == ["parse:start", "parse:analyzing", "parse:complete"]


def test_normalize_attributes_splits_categories() -> None:
    attrs = normalize_attributes(
        {
            "class": "btn  primary",
            "for": "email",
            "tabindex": "2",
            "onclick": "go()",
            "style": "background-color: red; z-index: 3",
            "data-id": "7",
            "aria-label": "Go",
            "disabled": "",
        }
    )
    assert attrs.classes == ["btn", "primary"]
    assert attrs.html["htmlFor"] == "email"
    assert attrs.html["tabIndex"] == "2"
    assert attrs.html["disabled"] is True
    assert attrs.events[0].react_name == "onClick"
    assert attrs.style == {"backgroundColor": "red", "zIndex": "3"}
    assert attrs.data == {"data-id": "7"}
    assert attrs.aria == {"aria-label": "Go"}


def test_parse_style_skips_malformed_declarations() -> None:
    style = parse_style("color: red; nonsense; :empty; background: url(data:image/png;base64,AAA=)")
    assert style == {"color": "red", "background": "url(data:image/png;base64,AAA=)"}


def test_to_html_round_trips_original_attribute_names() -> None:
    doc = parse('<label for="x" class="a">Name</label>')
    assert to_html(doc) == '<label for="x" class="a">Name</label>'


def test_semantic_sections_keep_outermost_only(landing_page: str) -> None:
    doc = parse(landing_page)
    types = [s.type for s in doc.sections]
    assert types == [SemanticType.HEADER, SemanticType.MAIN, SemanticType.FOOTER]
    tree = hierarchy(doc)
    header = doc.sections[0]
    nested = [doc.get(n).semantic_type for n in tree[header.node_id]]
    assert SemanticType.NAV in nested


def test_custom_semantic_rule_wins() -> None:
    rule = SemanticRule(selector=".promo", type=SemanticType.HERO, component_name="PromoBanner")
    doc = parse('<div class="promo"><h1>Sale</h1></div>', ParserOptions(semantic_rules=[rule]))
    assert doc.sections[0].type is SemanticType.HERO
    assert doc.sections[0].component_name == "PromoBanner"


def test_matches_selector_subset() -> None:
    doc = parse('<a id="home" class="nav-link" data-kind="primary" href="/">Home</a>')
    node = doc.root
    assert matches_selector(node, ".nav-link")
    assert matches_selector(node, "#home")
    assert matches_selector(node, "[data-kind=primary]")
    assert matches_selector(node, "[href]")
    assert matches_selector(node, "A")
    assert not matches_selector(node, ".missing")


def test_section_lookup_helpers(landing_page: str) -> None:
    doc = parse(landing_page)
    header = doc.sections[0]
    nav_id = next(n.id for n in doc.elements() if n.tag == "nav")
    assert section_for_node(doc, nav_id) is header
    assert section_for_node(doc, "node-does-not-exist") is None
    assert [s.type for s in sections_by_type(doc, SemanticType.FOOTER)] == [SemanticType.FOOTER]
    names = component_names(doc)
    assert names[header.node_id] == header.component_name
    assert names[nav_id] == header.component_name
