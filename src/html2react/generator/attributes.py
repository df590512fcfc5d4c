"""HTML -> JSX attribute transformation.

Works on the normalized ``NodeAttributes`` produced by the parser, so names
in ``html`` are already React names. This module decides how each value is
written: quoted string, bare boolean, ``{expression}``, event arrow function
or style object literal.
"""

from __future__ import annotations

import re
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum

from html2react.model.document import NodeAttributes
from html2react.parser.attributes import (
    BOOLEAN_ATTRIBUTES,
    EVENT_ALIASES,
    REACT_ATTRIBUTE_ALIASES,
)

# Attributes React manages itself; never emitted
REMOVED_ATTRIBUTES: frozenset[str] = frozenset(
    {"data-reactid", "data-reactroot", "reactid", "reactroot"}
)

_NUMERIC_RE = re.compile(r"^-?\d+(?:\.\d+)?$")
_IDENTIFIER_RE = re.compile(r"^[A-Za-z_$][\w$]*$")


class AttributeKind(Enum):
    DIRECT = "direct"
    BOOLEAN = "boolean"
    EXPRESSION = "expression"
    EVENT = "event"
    STYLE = "style"


@dataclass(slots=True, frozen=True)
class JsxAttribute:
    name: str
    value: str | bool
    kind: AttributeKind

    def render(self) -> str:
        if self.kind is AttributeKind.BOOLEAN:
            return self.name
        if self.kind is AttributeKind.DIRECT:
            return f'{self.name}="{escape_attribute(str(self.value))}"'
        return f"{self.name}={{{self.value}}}"


def react_attribute_name(name: str) -> str:
    """React prop name for an HTML attribute name (identity when not aliased)."""
    lname = name.lower()
    if lname in EVENT_ALIASES:
        return EVENT_ALIASES[lname]
    return REACT_ATTRIBUTE_ALIASES.get(lname, name)


def is_boolean_attribute(name: str) -> bool:
    return name.lower() in BOOLEAN_ATTRIBUTES


def is_expression(value: str) -> bool:
    value = value.strip()
    return len(value) > 2 and value.startswith("{") and value.endswith("}")


def is_identifier(value: str) -> bool:
    return bool(_IDENTIFIER_RE.match(value))


def escape_attribute(value: str) -> str:
    return value.replace("&", "&amp;").replace('"', "&quot;")


def _js_string(value: str) -> str:
    return "'" + value.replace("\\", "\\\\").replace("'", "\\'") + "'"


def style_object(style: dict[str, str]) -> str:
    """``{'zIndex': '10', 'color': 'red'}`` -> ``{ zIndex: 10, color: 'red' }``."""
    entries = []
    for key, value in style.items():
        rendered = value if _NUMERIC_RE.match(value) else _js_string(value)
        prop = key if is_identifier(key) else _js_string(key)
        entries.append(f"{prop}: {rendered}")
    return "{ " + ", ".join(entries) + " }"


def event_handler(handler: str) -> str:
    """Handler body as a JSX expression; ``{expr}`` values pass through."""
    handler = handler.strip()
    if is_expression(handler):
        return handler[1:-1].strip()
    body = handler.rstrip(";").strip()
    return f"() => {{ {body}; }}" if body else "() => {}"


def transform_attributes(
    attributes: NodeAttributes,
    *,
    convert_class: bool = True,
    class_value: Callable[[list[str]], str] | None = None,
    include_style: bool = True,
    extra_classes: list[str] | None = None,
    overrides: dict[str, str] | None = None,
) -> list[JsxAttribute]:
    """Render ``attributes`` into ordered JSX attributes.

    ``class_value`` turns the class list into an expression (CSS Modules);
    when omitted the class string is emitted as-is. ``overrides`` replaces
    attribute values with expressions (pattern prop bindings).
    """
    overrides = overrides or {}
    result: list[JsxAttribute] = []

    classes = attributes.classes + list(extra_classes or [])
    if classes:
        name = "className" if convert_class else "class"
        if class_value is not None:
            result.append(JsxAttribute(name, class_value(classes), AttributeKind.EXPRESSION))
        else:
            result.append(JsxAttribute(name, " ".join(classes), AttributeKind.DIRECT))

    for name, value in attributes.html.items():
        if name.lower() in REMOVED_ATTRIBUTES:
            continue
        if name in overrides:
            result.append(JsxAttribute(name, overrides[name], AttributeKind.EXPRESSION))
        elif value is True:
            result.append(JsxAttribute(name, True, AttributeKind.BOOLEAN))
        elif is_expression(str(value)):
            result.append(JsxAttribute(name, str(value).strip()[1:-1], AttributeKind.EXPRESSION))
        else:
            result.append(JsxAttribute(name, str(value), AttributeKind.DIRECT))

    for event in attributes.events:
        result.append(JsxAttribute(event.react_name, event_handler(event.handler), AttributeKind.EVENT))

    if include_style and attributes.style:
        result.append(JsxAttribute("style", style_object(attributes.style), AttributeKind.STYLE))

    for passthrough in (attributes.data, attributes.aria):
        for name, value in passthrough.items():
            if name in REMOVED_ATTRIBUTES:
                continue
            if is_expression(value):
                result.append(JsxAttribute(name, value.strip()[1:-1], AttributeKind.EXPRESSION))
            else:
                result.append(JsxAttribute(name, value, AttributeKind.DIRECT))
    return result


__all__ = [
    "REMOVED_ATTRIBUTES",
    "AttributeKind",
    "JsxAttribute",
    "escape_attribute",
    "event_handler",
    "is_boolean_attribute",
    "is_expression",
    "is_identifier",
    "react_attribute_name",
    "style_object",
    "transform_attributes",
]
