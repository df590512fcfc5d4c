"""Shared CSS collection for every output strategy.

All strategies consume the same ``CssCollection``: rules from ``<style>``
blocks (source order, duplicates dropped), one entry per distinct inline
style keyed by a content-derived class name, and the sorted class
inventory. Inline entries and inventories are sorted so the output does not
depend on the order elements were visited in.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Any, Protocol

from bs4 import Tag

from html2react.ids import content_hash
from html2react.model.options import CssOptions, CssStrategy
from html2react.model.output import GeneratedFile
from html2react.parser.attributes import parse_style, split_declarations
from html2react.parser.html_parser import make_soup

logger = logging.getLogger(__name__)

INLINE_CLASS_PREFIX = "inline"

_COMMENT_RE = re.compile(r"/\*.*?\*/", re.DOTALL)
_CAMEL_RE = re.compile(r"[A-Z]")
_SIMPLE_CLASS_RE = re.compile(r"^\.(-?[_a-zA-Z][\w-]*)$")


def camel_to_kebab(prop: str) -> str:
    """``backgroundColor`` -> ``background-color``; ``WebkitX``/``msX`` get their dash back."""
    if prop.startswith("--"):
        return prop
    if prop.startswith("ms") and len(prop) > 2 and prop[2].isupper():
        prop = "-" + prop
    return _CAMEL_RE.sub(lambda m: "-" + m.group(0).lower(), prop)


def canonical_style(style: dict[str, str]) -> str:
    return ";".join(f"{key}:{value}" for key, value in sorted(style.items()))


def inline_style_class(style: dict[str, str]) -> str:
    """Deterministic class name for a parsed inline style map."""
    return f"{INLINE_CLASS_PREFIX}-{content_hash(canonical_style(style), length=8)}"


def simple_class(selector: str) -> str | None:
    """Class name when ``selector`` is a lone class selector like ``.card``."""
    match = _SIMPLE_CLASS_RE.match(selector.strip())
    return match.group(1) if match else None


@dataclass(slots=True, frozen=True)
class CssRule:
    selector: str
    declarations: tuple[tuple[str, str], ...] = ()
    # Verbatim text for at-rules (@media, @font-face, @import, ...)
    raw: str | None = None

    @property
    def is_at_rule(self) -> bool:
        return self.raw is not None


@dataclass(slots=True)
class CssCollection:
    rules: list[CssRule] = field(default_factory=list)
    inline: dict[str, tuple[tuple[str, str], ...]] = field(default_factory=dict)
    classes: list[str] = field(default_factory=list)
    elements_processed: int = 0


@dataclass(slots=True)
class CssStats:
    elements_processed: int = 0
    inline_styles_converted: int = 0
    classes_generated: int = 0
    rules_extracted: int = 0
    files_created: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "elements_processed": self.elements_processed,
            "inline_styles_converted": self.inline_styles_converted,
            "classes_generated": self.classes_generated,
            "rules_extracted": self.rules_extracted,
            "files_created": self.files_created,
        }


@dataclass(slots=True)
class CssResult:
    css: str
    class_name_map: dict[str, str] = field(default_factory=dict)
    generated_files: list[GeneratedFile] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    stats: CssStats = field(default_factory=CssStats)


class CssConverter(Protocol):
    strategy: CssStrategy

    def convert(self, markup: str, options: CssOptions | None = None) -> CssResult: ...


def _parse_declarations(body: str) -> tuple[tuple[str, str], ...]:
    pairs: list[tuple[str, str]] = []
    for declaration in split_declarations(body):
        prop, sep, value = declaration.partition(":")
        prop, value = prop.strip(), value.strip()
        if sep and prop and value:
            pairs.append((prop if prop.startswith("--") else prop.lower(), value))
        else:
            logger.debug("Skipping malformed declaration: %r", declaration)
    return tuple(pairs)


def _matching_brace(text: str, start: int) -> int:
    depth = 0
    for index in range(start, len(text)):
        if text[index] == "{":
            depth += 1
        elif text[index] == "}":
            depth -= 1
            if depth == 0:
                return index
    return len(text) - 1


def parse_stylesheet(text: str) -> list[CssRule]:
    """Split stylesheet text into rules; at-rules are kept verbatim."""
    text = _COMMENT_RE.sub("", text)
    rules: list[CssRule] = []
    pos = 0
    while pos < len(text):
        brace = text.find("{", pos)
        semi = text.find(";", pos)
        head = text[pos : brace if brace != -1 else len(text)].strip()
        if head.startswith("@") and semi != -1 and (brace == -1 or semi < brace):
            rules.append(CssRule(selector=text[pos:semi].strip(), raw=text[pos : semi + 1].strip()))
            pos = semi + 1
            continue
        if brace == -1:
            break
        end = _matching_brace(text, brace)
        if head.startswith("@"):
            rules.append(CssRule(selector=head, raw=text[pos : end + 1].strip()))
        elif head:
            rules.append(CssRule(selector=head, declarations=_parse_declarations(text[brace + 1 : end])))
        pos = end + 1
    return rules


def collect(markup: str) -> CssCollection:
    """Gather style rules, inline styles and classes from ``markup``."""
    soup = make_soup(markup or "")
    collection = CssCollection()
    seen_rules: set[CssRule] = set()
    for style in soup.find_all("style"):
        for rule in parse_stylesheet(style.get_text()):
            if rule not in seen_rules:
                seen_rules.add(rule)
                collection.rules.append(rule)

    classes: set[str] = set()
    inline: dict[str, tuple[tuple[str, str], ...]] = {}
    for element in soup.find_all(True):
        if not isinstance(element, Tag):
            continue
        collection.elements_processed += 1
        class_attr = element.get("class")
        if class_attr:
            classes.update(str(class_attr).split())
        style_text = element.get("style")
        if not style_text:
            continue
        style = parse_style(str(style_text))
        if style:
            inline[inline_style_class(style)] = tuple(
                (camel_to_kebab(key), value) for key, value in sorted(style.items())
            )
    collection.inline = dict(sorted(inline.items()))
    collection.classes = sorted(classes)
    return collection


def render_block(selector: str, declarations: list[str] | tuple[str, ...], indent: str = "") -> str:
    inner = "".join(f"{indent}  {line}\n" for line in declarations)
    return f"{indent}{selector} {{\n{inner}{indent}}}"


def render_rule(rule: CssRule) -> str:
    if rule.raw is not None:
        return rule.raw
    return render_block(rule.selector, [f"{prop}: {value};" for prop, value in rule.declarations])


def join_blocks(blocks: list[str]) -> str:
    blocks = [b for b in blocks if b]
    return "\n\n".join(blocks) + "\n" if blocks else ""


def stylesheet_filename(strategy: CssStrategy, target: str = "styles") -> str:
    if strategy is CssStrategy.CSS_MODULES:
        return f"{target}.module.css"
    return f"{target}.css"


def get_converter(strategy: CssStrategy) -> CssConverter:
    from html2react.css.modules import CssModulesConverter
    from html2react.css.tailwind import TailwindConverter
    from html2react.css.vanilla import VanillaConverter

    converters: dict[CssStrategy, type] = {
        CssStrategy.TAILWIND: TailwindConverter,
        CssStrategy.CSS_MODULES: CssModulesConverter,
        CssStrategy.VANILLA: VanillaConverter,
    }
    return converters[strategy]()


__all__ = [
    "CssCollection",
    "CssConverter",
    "CssResult",
    "CssRule",
    "CssStats",
    "camel_to_kebab",
    "collect",
    "get_converter",
    "inline_style_class",
    "parse_stylesheet",
    "render_block",
    "render_rule",
    "simple_class",
    "stylesheet_filename",
]
