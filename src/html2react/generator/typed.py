"""Typed output capability for ``CodeGenerator``.

``TypedProps`` is handed to the generator at construction; when present the
generator collects props from ``{expr}`` attribute values and renders a
``<Name>Props`` interface plus a typed signature.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field

from html2react.generator.attributes import is_expression, is_identifier
from html2react.model.component import PropDefinition
from html2react.model.document import NodeAttributes

_SEGMENT_RE = re.compile(r"[a-z]+|[A-Z][a-z]*|\d+")
_NUMBER_LITERAL_RE = re.compile(r"^-?\d+(?:\.\d+)?$")
_HANDLER_RE = re.compile(r"^on[A-Z]")

NUMBER_WORDS = frozenset({"count", "num", "number"})
BOOLEAN_PREFIXES = frozenset({"is", "has", "should", "can"})
FUNCTION_WORDS = frozenset({"callback", "handler"})


def _segments(name: str) -> list[str]:
    return [s.lower() for s in _SEGMENT_RE.findall(name)]


def infer_type(name: str, value: str = "", *, event: bool = False) -> str:
    """TypeScript type for a prop from its name, then from a literal value."""
    segments = _segments(name)
    if NUMBER_WORDS.intersection(segments):
        return "number"
    if len(segments) > 1 and segments[0] in BOOLEAN_PREFIXES:
        return "boolean"
    if event or _HANDLER_RE.match(name) or FUNCTION_WORDS.intersection(segments):
        return "() => void"
    body = value.strip()
    if is_expression(body):
        body = body[1:-1].strip()
    if _NUMBER_LITERAL_RE.match(body):
        return "number"
    if body in ("true", "false"):
        return "boolean"
    return "string"


def literal_body(value: str) -> str | None:
    """``{10}`` -> ``10``; ``None`` when the expression is not a number/boolean literal."""
    if not is_expression(value):
        return None
    body = value.strip()[1:-1].strip()
    if _NUMBER_LITERAL_RE.match(body) or body in ("true", "false"):
        return body
    return None


def merge_props(*groups: list[PropDefinition]) -> list[PropDefinition]:
    """Concatenate prop lists; a later definition replaces an earlier one with the same name."""
    merged: list[PropDefinition] = []
    index: dict[str, int] = {}
    for group in groups:
        for prop in group:
            if prop.name in index:
                merged[index[prop.name]] = prop
            else:
                index[prop.name] = len(merged)
                merged.append(prop)
    return merged


@dataclass
class TypedProps:
    include_interface: bool = True
    custom_props: list[PropDefinition] = field(default_factory=list)

    def infer(self, attributes: NodeAttributes) -> tuple[list[PropDefinition], dict[str, str]]:
        """Props referenced by one element's attributes.

        Returns the props and attribute overrides (attribute name -> prop
        name) for literal values that were lifted into defaulted props.
        """
        props: list[PropDefinition] = []
        overrides: dict[str, str] = {}
        for name, value in attributes.html.items():
            if not isinstance(value, str) or not is_expression(value):
                continue
            body = value.strip()[1:-1].strip()
            if is_identifier(body):
                props.append(PropDefinition(body, infer_type(body, value)))
                continue
            literal = literal_body(value)
            if literal is not None and is_identifier(name):
                props.append(PropDefinition(name, infer_type(name, value), default=literal))
                overrides[name] = name
        for event in attributes.events:
            body = event.handler.strip()
            if is_expression(body) and is_identifier(body[1:-1].strip()):
                props.append(PropDefinition(body[1:-1].strip(), "() => void"))
        for passthrough in (attributes.data, attributes.aria):
            for value in passthrough.values():
                if is_expression(value) and is_identifier(value.strip()[1:-1].strip()):
                    body = value.strip()[1:-1].strip()
                    props.append(PropDefinition(body, infer_type(body, value)))
        return props, overrides

    def merge(self, *groups: list[PropDefinition]) -> list[PropDefinition]:
        return merge_props(*groups, self.custom_props)

    def render_interface(self, name: str, props: list[PropDefinition]) -> str:
        lines = [f"interface {name}Props {{"]
        for prop in props:
            if prop.description:
                lines.append(f"  /** {prop.description} */")
            lines.append(f"  {prop.name}{_optional(prop)}: {prop.type};")
        lines.append("}")
        return "\n".join(lines)

    def annotation(self, name: str, props: list[PropDefinition]) -> str:
        if self.include_interface:
            return f"{name}Props"
        return "{ " + " ".join(f"{p.name}{_optional(p)}: {p.type};" for p in props) + " }"


def _optional(prop: PropDefinition) -> str:
    return "" if prop.required and prop.default is None else "?"


__all__ = ["TypedProps", "infer_type", "literal_body", "merge_props"]
