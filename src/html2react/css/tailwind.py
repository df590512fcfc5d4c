"""Tailwind strategy: declarations become utility classes.

Declarations without a known utility fall back to Tailwind's arbitrary
property syntax (``[prop:value]``) and are reported as unsupported.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable

from html2react.css.base import (
    CssResult,
    CssStats,
    collect,
    join_blocks,
    render_block,
    render_rule,
    simple_class,
    stylesheet_filename,
)
from html2react.feature_logger import log_feature_decision
from html2react.model.options import CssOptions, CssStrategy
from html2react.model.output import FileKind, GeneratedFile

logger = logging.getLogger(__name__)

DIRECTIVES = "@tailwind base;\n@tailwind components;\n@tailwind utilities;"

_SPACING = {
    "0": "0",
    "4px": "1",
    "8px": "2",
    "12px": "3",
    "16px": "4",
    "24px": "6",
    "32px": "8",
    "0.25rem": "1",
    "0.5rem": "2",
    "0.75rem": "3",
    "1rem": "4",
    "1.5rem": "6",
    "2rem": "8",
}

# property -> value -> utility
UTILITY_MAP: dict[str, dict[str, str]] = {
    "display": {
        "flex": "flex",
        "grid": "grid",
        "block": "block",
        "inline": "inline",
        "inline-block": "inline-block",
        "inline-flex": "inline-flex",
        "none": "hidden",
    },
    "flex-direction": {
        "row": "flex-row",
        "column": "flex-col",
        "row-reverse": "flex-row-reverse",
        "column-reverse": "flex-col-reverse",
    },
    "flex-wrap": {"wrap": "flex-wrap", "nowrap": "flex-nowrap"},
    "align-items": {
        "start": "items-start",
        "end": "items-end",
        "center": "items-center",
        "stretch": "items-stretch",
        "baseline": "items-baseline",
        "flex-start": "items-start",
        "flex-end": "items-end",
    },
    "justify-content": {
        "start": "justify-start",
        "end": "justify-end",
        "center": "justify-center",
        "flex-start": "justify-start",
        "flex-end": "justify-end",
        "space-between": "justify-between",
        "space-around": "justify-around",
        "space-evenly": "justify-evenly",
    },
    "position": {v: v for v in ("static", "fixed", "absolute", "relative", "sticky")},
    "top": {"0": "top-0", "auto": "top-auto"},
    "right": {"0": "right-0", "auto": "right-auto"},
    "bottom": {"0": "bottom-0", "auto": "bottom-auto"},
    "left": {"0": "left-0", "auto": "left-auto"},
    "overflow": {v: f"overflow-{v}" for v in ("hidden", "scroll", "auto", "visible")},
    "overflow-x": {v: f"overflow-x-{v}" for v in ("hidden", "scroll", "auto")},
    "overflow-y": {v: f"overflow-y-{v}" for v in ("hidden", "scroll", "auto")},
    "width": {
        "100%": "w-full",
        "50%": "w-1/2",
        "25%": "w-1/4",
        "75%": "w-3/4",
        "auto": "w-auto",
        "100vw": "w-screen",
    },
    "height": {"100%": "h-full", "auto": "h-auto", "100vh": "h-screen"},
    "text-align": {v: f"text-{v}" for v in ("left", "center", "right", "justify")},
    "color": {
        "black": "text-black",
        "white": "text-white",
        "red": "text-red-500",
        "blue": "text-blue-500",
        "green": "text-green-500",
        "gray": "text-gray-500",
        "transparent": "text-transparent",
    },
    "background-color": {
        "black": "bg-black",
        "white": "bg-white",
        "red": "bg-red-500",
        "blue": "bg-blue-500",
        "green": "bg-green-500",
        "gray": "bg-gray-500",
        "transparent": "bg-transparent",
    },
    "font-weight": {
        "normal": "font-normal",
        "bold": "font-bold",
        "400": "font-normal",
        "500": "font-medium",
        "600": "font-semibold",
        "700": "font-bold",
    },
    "font-style": {"italic": "italic", "normal": "not-italic"},
    "text-decoration": {"underline": "underline", "none": "no-underline", "line-through": "line-through"},
    "border-radius": {
        "0": "rounded-none",
        "4px": "rounded",
        "8px": "rounded-lg",
        "12px": "rounded-xl",
        "16px": "rounded-2xl",
        "50%": "rounded-full",
        "9999px": "rounded-full",
    },
    "box-shadow": {
        "none": "shadow-none",
        "0 1px 2px 0 rgba(0, 0, 0, 0.05)": "shadow-sm",
        "0 2px 4px rgba(0,0,0,0.1)": "shadow-md",
        "0 4px 6px -1px rgba(0, 0, 0, 0.1)": "shadow-lg",
        "0 10px 15px -3px rgba(0, 0, 0, 0.1)": "shadow-xl",
    },
    "cursor": {"pointer": "cursor-pointer", "default": "cursor-default", "not-allowed": "cursor-not-allowed"},
    "grid-template-columns": {
        "1fr 1fr": "grid-cols-2",
        "1fr 1fr 1fr": "grid-cols-3",
        "repeat(2, 1fr)": "grid-cols-2",
        "repeat(3, 1fr)": "grid-cols-3",
        "repeat(4, 1fr)": "grid-cols-4",
    },
    "padding": {value: f"p-{step}" for value, step in _SPACING.items()},
    "padding-top": {value: f"pt-{step}" for value, step in _SPACING.items()},
    "padding-right": {value: f"pr-{step}" for value, step in _SPACING.items()},
    "padding-bottom": {value: f"pb-{step}" for value, step in _SPACING.items()},
    "padding-left": {value: f"pl-{step}" for value, step in _SPACING.items()},
    "margin": {**{value: f"m-{step}" for value, step in _SPACING.items()}, "0 auto": "mx-auto", "auto": "m-auto"},
    "margin-top": {value: f"mt-{step}" for value, step in _SPACING.items()},
    "margin-right": {value: f"mr-{step}" for value, step in _SPACING.items()},
    "margin-bottom": {value: f"mb-{step}" for value, step in _SPACING.items()},
    "margin-left": {value: f"ml-{step}" for value, step in _SPACING.items()},
    "gap": {value: f"gap-{step}" for value, step in _SPACING.items()},
}


def _opacity(value: str) -> str | None:
    try:
        number = float(value)
    except ValueError:
        return None
    if not 0 <= number <= 1:
        return None
    return f"opacity-{round(number * 100)}"


def _border(value: str) -> str | None:
    parts = value.split()
    if "solid" in parts and ("1px" in parts or len(parts) == 1):
        return "border"
    if value == "none" or value == "0":
        return "border-0"
    return None


# Properties whose utility depends on parsing the value
VALUE_RESOLVERS: dict[str, Callable[[str], str | None]] = {
    "opacity": _opacity,
    "border": _border,
}

_WHITESPACE_RE = re.compile(r"\s+")


def arbitrary_utility(prop: str, value: str) -> str:
    """Tailwind arbitrary property class, e.g. ``[mask-type:alpha]``."""
    return f"[{prop}:{_WHITESPACE_RE.sub('_', value.strip())}]"


def to_utility(prop: str, value: str) -> str | None:
    """Known utility for a single declaration, or ``None``."""
    prop = prop.strip().lower()
    value = value.strip()
    mapped = UTILITY_MAP.get(prop, {}).get(value) or UTILITY_MAP.get(prop, {}).get(value.lower())
    if mapped:
        return mapped
    resolver = VALUE_RESOLVERS.get(prop)
    return resolver(value) if resolver else None


def to_utilities(
    declarations: tuple[tuple[str, str], ...], warnings: list[str]
) -> list[str]:
    utilities: list[str] = []
    for prop, value in declarations:
        utility = to_utility(prop, value)
        if utility is None:
            message = f"Unsupported property: {prop}: {value}"
            if message not in warnings:
                warnings.append(message)
            utility = arbitrary_utility(prop, value)
        if utility not in utilities:
            utilities.append(utility)
    return utilities


def _apply_block(class_name: str, utilities: list[str]) -> str:
    return render_block(f".{class_name}", [f"@apply {' '.join(utilities)};"], indent="  ")


class TailwindConverter:
    strategy = CssStrategy.TAILWIND

    def convert(self, markup: str, options: CssOptions | None = None) -> CssResult:
        options = options or CssOptions()
        collection = collect(markup)
        warnings: list[str] = []
        stats = CssStats(elements_processed=collection.elements_processed)
        class_name_map: dict[str, str] = {}

        component_blocks: list[str] = []
        plain_blocks: list[str] = []
        for rule in collection.rules:
            class_name = simple_class(rule.selector)
            if class_name is None or rule.is_at_rule or not rule.declarations:
                plain_blocks.append(render_rule(rule))
                continue
            utilities = to_utilities(rule.declarations, warnings)
            class_name_map[class_name] = " ".join(utilities)
            component_blocks.append(_apply_block(class_name, utilities))
            stats.classes_generated += 1
        stats.rules_extracted = len(collection.rules)

        for class_name, declarations in collection.inline.items():
            utilities = to_utilities(declarations, warnings)
            class_name_map[class_name] = " ".join(utilities)
            stats.inline_styles_converted += 1
            if options.extract_inline:
                component_blocks.append(_apply_block(class_name, utilities))
                stats.classes_generated += 1

        blocks = [DIRECTIVES]
        if component_blocks:
            blocks.append("@layer components {\n" + "\n\n".join(component_blocks) + "\n}")
        blocks.extend(plain_blocks)
        css = join_blocks(blocks)

        if warnings:
            log_feature_decision("Tailwind", "arbitrary-values", {"unsupported": len(warnings)})
        file = GeneratedFile(stylesheet_filename(self.strategy, options.target_filename), css, FileKind.STYLE)
        stats.files_created = 1
        return CssResult(
            css=css,
            class_name_map=class_name_map,
            generated_files=[file],
            warnings=warnings,
            stats=stats,
        )


__all__ = ["TailwindConverter", "UTILITY_MAP", "arbitrary_utility", "to_utilities", "to_utility"]
