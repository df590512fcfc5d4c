from __future__ import annotations

import pytest

from html2react.parser import parse
from html2react.splitter.names import (
    NameGenerator,
    generate_unique_name,
    parse_bem,
    sanitize_identifier,
    to_pascal_case,
)


@pytest.mark.parametrize(
    ("existing", "expected"),
    [
        ([], "Card"),
        (["Card"], "Card2"),
        (["Card", "Card2", "Card3"], "Card4"),
        (["Panel", "Panel5", "Panel10"], "Panel11"),
    ],
)
def test_generate_unique_name_increments_past_highest_suffix(existing: list[str], expected: str) -> None:
    base = expected.rstrip("0123456789") or expected
    assert generate_unique_name(base, existing) == expected


def test_sanitize_identifier() -> None:
    assert sanitize_identifier("3d-model") == "Dmodel"
    assert sanitize_identifier("!!!") == "Component"
    assert sanitize_identifier("class") == "ClassComponent"
    assert sanitize_identifier("Fragment") == "FragmentComponent"


def test_to_pascal_case_and_bem() -> None:
    assert to_pascal_case("site-header") == "SiteHeader"
    assert to_pascal_case("product_card") == "ProductCard"
    info = parse_bem("card__title")
    assert (info.block, info.element, info.modifier) == ("card", "title", None)
    info = parse_bem("button--primary")
    assert (info.block, info.modifier) == ("button", "primary")


def test_explicit_data_attribute_wins() -> None:
    doc = parse('<section class="hero" data-component="promo-banner"><h1>Hi</h1></section>')
    assert NameGenerator().generate_name(doc.root, doc) == "PromoBanner"


def test_bem_block_then_semantic_tag() -> None:
    doc = parse('<header class="site-header"><h1>T</h1></header>')
    assert NameGenerator().generate_name(doc.root, doc) == "SiteHeader"
    doc = parse("<footer><p>x</p></footer>")
    assert NameGenerator().generate_name(doc.root, doc) == "Footer"


def test_context_aware_part_name() -> None:
    doc = parse('<div class="header"><span>x</span></div>')
    names = NameGenerator()
    assert names.generate_name(doc.root, doc, parent_name="Card") == "CardHeader"


def test_content_derived_name_is_limited_to_three_words() -> None:
    doc = parse("<div><h2>Meet our amazing team today</h2></div>")
    assert NameGenerator().generate_name(doc.root, doc) == "MeetOurAmazing"


def test_button_content_gets_suffix() -> None:
    doc = parse("<div><button>Sign up</button></div>")
    assert NameGenerator().generate_name(doc.root, doc) == "SignUpButton"


def test_generic_fallback_and_registry_uniqueness() -> None:
    doc = parse("<div><span>x</span></div>")
    names = NameGenerator()
    first = names.generate_name(doc.root, doc)
    second = names.generate_name(doc.root, doc)
    assert first == "Container1"
    assert second != first
    assert names.used_names == [first, second]
    names.reset()
    assert names.used_names == []


def test_reserve_makes_names_unique() -> None:
    names = NameGenerator()
    assert names.reserve("App") == "App"
    assert names.reserve("App") == "App2"
