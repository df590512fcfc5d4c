from __future__ import annotations

import pytest

from html2react.css import base
from html2react.css.base import (
    camel_to_kebab,
    get_converter,
    inline_style_class,
    parse_stylesheet,
    simple_class,
    stylesheet_filename,
)
from html2react.css.modules import class_expression, module_reference
from html2react.css.tailwind import arbitrary_utility, to_utility
from html2react.model.options import CssOptions, CssStrategy
from html2react.model.output import FileKind

INLINE = '<div style="mask-type: alpha; display: flex"><p style="color: red">x</p></div>'
FORWARD = (
    '<div style="display: flex; padding: 8px"><p style="color: red">a</p>'
    '<span style="font-weight: 700">b</span></div>'
)
REVERSED = (
    '<div><span style="font-weight: 700">b</span><p style="color: red">a</p>'
    '<section style="padding: 8px; display: flex"></section></div>'
)


def test_vanilla_keeps_rules_in_source_order(landing_page: str) -> None:
    result = get_converter(CssStrategy.VANILLA).convert(landing_page)
    assert result.css == (
        ".card {\n  display: flex;\n  padding: 16px;\n}\n\n.card__title {\n  font-weight: 700;\n}\n"
    )
    assert result.stats.rules_extracted == 2
    assert [f.file_name for f in result.generated_files] == ["styles.css"]
    assert result.generated_files[0].kind is FileKind.STYLE


@pytest.mark.parametrize("strategy", list(CssStrategy))
def test_output_is_idempotent(strategy: CssStrategy, landing_page: str) -> None:
    options = CssOptions(extract_inline=True)
    converter = get_converter(strategy)
    markup = landing_page + FORWARD
    assert converter.convert(markup, options).css == converter.convert(markup, options).css


@pytest.mark.parametrize("strategy", list(CssStrategy))
def test_output_does_not_depend_on_element_order(strategy: CssStrategy) -> None:
    options = CssOptions(extract_inline=True)
    forward = get_converter(strategy).convert(FORWARD, options)
    backward = get_converter(strategy).convert(REVERSED, options)
    assert forward.stats.inline_styles_converted == 3
    assert forward.css == backward.css
    assert forward.class_name_map == backward.class_name_map


def test_duplicate_rules_are_dropped() -> None:
    markup = "<style>.a { color: red; }</style><style>.a { color: red; }</style><p class='a'>x</p>"
    result = get_converter(CssStrategy.VANILLA).convert(markup)
    assert result.stats.rules_extracted == 1
    assert result.css.count(".a {") == 1


def test_vanilla_extracts_inline_styles_when_asked() -> None:
    result = get_converter(CssStrategy.VANILLA).convert(INLINE, CssOptions(extract_inline=True))
    red = inline_style_class({"color": "red"})
    assert f".{red} {{\n  color: red;\n}}" in result.css
    assert result.class_name_map[red] == red
    assert result.stats.inline_styles_converted == 2

    plain = get_converter(CssStrategy.VANILLA).convert(INLINE)
    assert red not in plain.css
    assert plain.class_name_map == {}


def test_at_rules_are_kept_verbatim() -> None:
    sheet = "@import url(base.css);\n@media (max-width: 600px) { .a { color: red; } }\n.b { margin: 0 }"
    rules = parse_stylesheet(sheet)
    assert [r.is_at_rule for r in rules] == [True, True, False]
    assert rules[0].raw == "@import url(base.css);"
    assert rules[1].raw == "@media (max-width: 600px) { .a { color: red; } }"
    assert rules[2].declarations == (("margin", "0"),)


def test_empty_markup_still_yields_one_stylesheet() -> None:
    for strategy in CssStrategy:
        result = get_converter(strategy).convert("")
        assert len(result.generated_files) == 1


def test_tailwind_maps_rules_to_apply(landing_page: str) -> None:
    result = get_converter(CssStrategy.TAILWIND).convert(landing_page)
    assert result.css.startswith("@tailwind base;\n@tailwind components;\n@tailwind utilities;")
    assert "@layer components {" in result.css
    assert "@apply flex p-4;" in result.css
    assert result.class_name_map == {"card": "flex p-4", "card__title": "font-bold"}
    assert result.warnings == []


def test_tailwind_unsupported_property_uses_arbitrary_value() -> None:
    result = get_converter(CssStrategy.TAILWIND).convert(INLINE)
    key = inline_style_class({"maskType": "alpha", "display": "flex"})
    assert result.class_name_map[key] == "flex [mask-type:alpha]"
    assert result.warnings == ["Unsupported property: mask-type: alpha"]


def test_tailwind_utilities() -> None:
    assert to_utility("display", "flex") == "flex"
    assert to_utility("display", "none") == "hidden"
    assert to_utility("opacity", "0.5") == "opacity-50"
    assert to_utility("border", "1px solid #000") == "border"
    assert to_utility("mask-type", "alpha") is None
    assert arbitrary_utility("grid-area", "1 / 2") == "[grid-area:1_/_2]"


def test_modules_reference_map(landing_page: str) -> None:
    result = get_converter(CssStrategy.CSS_MODULES).convert(landing_page)
    assert result.class_name_map["card"] == "styles.card"
    assert result.class_name_map["card__title"] == "styles.card__title"
    assert result.class_name_map["site-header"] == "styles['site-header']"
    assert result.generated_files[0].file_name == "styles.module.css"
    assert ".card {" in result.css


def test_module_class_expressions() -> None:
    assert module_reference("card") == "styles.card"
    assert module_reference("card-title") == "styles['card-title']"
    assert class_expression(["card"]) == "styles.card"
    assert class_expression(["a", "b-c"]) == "[styles.a, styles['b-c']].join(' ')"


def test_helpers() -> None:
    assert camel_to_kebab("backgroundColor") == "background-color"
    assert camel_to_kebab("msTransform") == "-ms-transform"
    assert camel_to_kebab("--brand") == "--brand"
    assert simple_class(".card") == "card"
    assert simple_class(".card:hover") is None
    assert stylesheet_filename(CssStrategy.CSS_MODULES, "app") == "app.module.css"
    assert stylesheet_filename(CssStrategy.TAILWIND) == "styles.css"
    assert inline_style_class({"color": "red"}) == inline_style_class({"color": "red"})
    assert inline_style_class({"color": "red"}).startswith(base.INLINE_CLASS_PREFIX + "-")
