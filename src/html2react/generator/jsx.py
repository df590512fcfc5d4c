"""Function-component source generation (JSX and TSX).

One ``CodeGenerator`` renders every component. Typed output is switched on
by passing a ``TypedProps`` capability instead of subclassing. Nested
component boundaries render as ``<Child />`` elements and become imports;
members of a repeating pattern share the first member's file and receive
their differing values as props.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

from html2react.css.base import inline_style_class
from html2react.css.modules import class_expression
from html2react.generator.attributes import escape_attribute, transform_attributes
from html2react.generator.formatter import format_source
from html2react.generator.typed import TypedProps, merge_props
from html2react.model.component import (
    ComponentDefinition,
    PatternDetectionResult,
    PropBinding,
    PropDefinition,
    SplitResult,
)
from html2react.model.document import NodeType, ParsedDocument, ParsedNode
from html2react.model.options import CssStrategy, GeneratorOptions, OutputFormat
from html2react.model.output import FileKind, GeneratedFile
from html2react.parser.attributes import VOID_ELEMENTS
from html2react.splitter.names import component_identifier, generate_unique_name
from html2react.splitter.patterns import binding_value

logger = logging.getLogger(__name__)

INDENT = "  "

# Handled by the CSS stage or not representable as JSX children
SKIPPED_TAGS = frozenset({"script", "style", "noscript", "template"})

_TEXT_ESCAPES = {"&": "&amp;", "<": "&lt;", ">": "&gt;", "{": "{'{'}", "}": "{'}'}"}


def escape_text(text: str) -> str:
    return "".join(_TEXT_ESCAPES.get(ch, ch) for ch in text)


def text_line(raw: str, has_previous: bool, has_next: bool) -> str:
    """Collapsed, escaped text; edge spaces next to siblings survive as ``{' '}``."""
    text = escape_text(" ".join(raw.split()))
    if not text:
        return ""
    if has_previous and raw[:1].isspace():
        text = "{' '}" + text
    if has_next and raw[-1:].isspace():
        text += "{' '}"
    return text


@dataclass(slots=True)
class GeneratorStats:
    components_generated: int = 0
    elements_processed: int = 0
    attributes_transformed: int = 0
    inline_styles_converted: int = 0
    lines_of_code: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "components_generated": self.components_generated,
            "elements_processed": self.elements_processed,
            "attributes_transformed": self.attributes_transformed,
            "inline_styles_converted": self.inline_styles_converted,
            "lines_of_code": self.lines_of_code,
        }


@dataclass(slots=True)
class GeneratorResult:
    files: list[GeneratedFile] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    stats: GeneratorStats = field(default_factory=GeneratorStats)
    entry_point: str | None = None

    def extend(self, other: GeneratorResult) -> None:
        self.files.extend(other.files)
        self.warnings.extend(w for w in other.warnings if w not in self.warnings)
        for key, value in other.stats.to_dict().items():
            setattr(self.stats, key, getattr(self.stats, key) + value)


@dataclass
class _Render:
    """Mutable state for rendering one component body."""

    document: ParsedDocument
    own_node_id: str
    registry: dict[str, ComponentDefinition]
    patterns: dict[str, PatternDetectionResult]
    # node id -> {"text" | attribute name -> prop name}
    bound: dict[str, dict[str, str]] = field(default_factory=dict)
    imports: list[str] = field(default_factory=list)
    props: list[PropDefinition] = field(default_factory=list)
    uses_styles: bool = False
    warnings: list[str] = field(default_factory=list)
    stats: GeneratorStats = field(default_factory=GeneratorStats)


def active_bindings(
    document: ParsedDocument,
    pattern: PatternDetectionResult,
    registry: dict[str, ComponentDefinition],
) -> list[PropBinding]:
    """Bindings of ``pattern`` that are not hidden behind a nested component."""
    owner = pattern.member_ids[0]
    elements = list(document.elements(owner))
    nested = {
        node.id
        for boundary in elements
        if boundary.id != owner and boundary.id in registry
        for node in document.walk(boundary.id)
    }
    return [
        b for b in pattern.bindings if b.position < len(elements) and elements[b.position].id not in nested
    ]


class CodeGenerator:
    def __init__(self, options: GeneratorOptions | None = None, typed: TypedProps | None = None) -> None:
        self.options = options or GeneratorOptions()
        self.typed = typed

    @property
    def extension(self) -> str:
        return self.options.format.extension

    @property
    def kind(self) -> str:
        return self.options.format.value

    def generate(
        self,
        definition: ComponentDefinition,
        document: ParsedDocument,
        registry: dict[str, ComponentDefinition] | None = None,
        patterns: dict[str, PatternDetectionResult] | None = None,
    ) -> GeneratorResult:
        """Generate the source file for one component definition."""
        registry = registry or {}
        patterns = patterns or {}
        pattern = patterns.get(definition.pattern_id) if definition.pattern_id else None
        return self._component(definition.name, definition.node_id, document, registry, patterns, pattern)

    def generate_root(self, document: ParsedDocument, name: str | None = None) -> GeneratorResult:
        """One component rendering the whole document."""
        name = component_identifier(name or self.options.component_name)
        result = self._component(name, document.root_id, document, {}, {}, None)
        result.entry_point = name
        return result

    def generate_all(self, split: SplitResult, document: ParsedDocument) -> GeneratorResult:
        """One file per component (one per pattern), an entry component and an index barrel."""
        if not split.components:
            result = self.generate_root(document)
            result.files.append(self.index_file([result.entry_point or self.options.component_name]))
            return result

        registry = split.by_node_id()
        patterns = {p.id: p for p in split.patterns}
        result = GeneratorResult()
        names: list[str] = []
        for definition in split.components:
            if definition.name in names:
                continue
            names.append(definition.name)
            result.extend(self.generate(definition, document, registry, patterns))

        if document.root_id in registry:
            result.entry_point = registry[document.root_id].name
        else:
            wrapper = generate_unique_name(component_identifier(self.options.component_name), names)
            result.extend(self._component(wrapper, document.root_id, document, registry, patterns, None))
            names.append(wrapper)
            result.entry_point = wrapper
        result.files.append(self.index_file(names))
        return result

    def index_file(self, names: list[str]) -> GeneratedFile:
        lines = [f"export {{ default as {name} }} from './{name}';" for name in names]
        index_ext = ".ts" if self.options.format is OutputFormat.TSX else ".js"
        return GeneratedFile(f"index{index_ext}", "\n".join(lines) + "\n", FileKind.INDEX)

    def render_node(self, document: ParsedDocument, node_id: str | None = None) -> str:
        """JSX markup for a subtree without any component boundaries (previews)."""
        state = _Render(document, node_id or document.root_id, {}, {})
        return "\n".join(self._node(state, document.get(node_id or document.root_id), 0))

    def _component(
        self,
        name: str,
        node_id: str,
        document: ParsedDocument,
        registry: dict[str, ComponentDefinition],
        patterns: dict[str, PatternDetectionResult],
        pattern: PatternDetectionResult | None,
    ) -> GeneratorResult:
        state = _Render(document, node_id, registry, patterns)
        pattern_props: list[PropDefinition] = []
        if pattern is not None:
            elements = list(document.elements(pattern.member_ids[0]))
            by_name = {p.name: p for p in pattern.inferred_props}
            for binding in active_bindings(document, pattern, registry):
                state.bound.setdefault(elements[binding.position].id, {})[binding.source] = binding.prop
                pattern_props.append(by_name[binding.prop])

        body = self._node(state, document.get(node_id), 0)
        props = merge_props(pattern_props, state.props, self.options.custom_props)
        if self.typed is not None:
            props = self.typed.merge(props)
        source = self._assemble(name, props, body, state)
        source = format_source(source, self.kind, self.options.formatting)

        state.stats.components_generated = 1
        state.stats.lines_of_code = len(source.splitlines())
        file = GeneratedFile(f"{name}{self.extension}", source, FileKind.COMPONENT)
        logger.debug("Generated %s (%d lines)", file.file_name, state.stats.lines_of_code)
        return GeneratorResult(files=[file], warnings=state.warnings, stats=state.stats)

    def _assemble(self, name: str, props: list[PropDefinition], body: list[str], state: _Render) -> str:
        imports: list[str] = []
        if self.options.include_react_import:
            imports.append("import React from 'react';")
        imports.extend(self.options.custom_imports)
        imports.extend(f"import {child} from './{child}';" for child in state.imports)
        if state.uses_styles:
            imports.append(f"import styles from '../styles/{self.options.stylesheet_name}.module.css';")

        sections: list[str] = []
        if imports:
            sections.append("\n".join(imports))
        typed = self.typed is not None
        if typed and props and self.typed.include_interface:
            sections.append(self.typed.render_interface(name, props))

        params = ""
        if props:
            names = ", ".join(f"{p.name} = {p.default}" if p.default is not None else p.name for p in props)
            params = f"{{ {names} }}"
            if typed:
                params += f": {self.typed.annotation(name, props)}"

        lines = [f"export default function {name}({params}) {{"]
        if body:
            lines.append(f"{INDENT}return (")
            lines.extend(f"{INDENT * 2}{line}" for line in body)
            lines.append(f"{INDENT});")
        else:
            lines.append(f"{INDENT}return null;")
        lines.append("}")
        sections.append("\n".join(lines))
        return "\n\n".join(sections) + "\n"

    def _node(self, state: _Render, node: ParsedNode, depth: int) -> list[str]:
        if node.type is NodeType.TEXT:
            text = " ".join((node.text or "").split())
            return [escape_text(text)] if text else []
        if node.type is NodeType.COMMENT:
            comment = (node.text or "").replace("*/", "* /").strip()
            return [f"{{/* {comment} */}}"]
        if node.type is NodeType.FRAGMENT:
            children = self._children(state, node, depth)
            if not children:
                return []
            if len(children) == 1:
                return children[0]
            return ["<>", *(f"{INDENT}{line}" for child in children for line in child), "</>"]

        if node.id != state.own_node_id and node.id in state.registry:
            return [self._usage(state, state.registry[node.id])]
        tag = node.tag or "div"
        if tag in SKIPPED_TAGS:
            message = f"Skipped <{tag}> element"
            if message not in state.warnings:
                state.warnings.append(message)
            return []

        state.stats.elements_processed += 1
        attrs = self._attributes(state, node)
        opening = f"<{tag}{' ' + attrs if attrs else ''}"
        if tag in VOID_ELEMENTS or node.self_closing:
            return [f"{opening} />"]

        children = self._children(state, node, depth)
        if not children:
            return [f"{opening} />"]
        if len(children) == 1 and len(children[0]) == 1:
            inline = f"{opening}>{children[0][0]}</{tag}>"
            if len(inline) + (depth + 2) * len(INDENT) <= self.options.formatting.print_width:
                return [inline]
        lines = [f"{opening}>"]
        lines.extend(f"{INDENT}{line}" for child in children for line in child)
        lines.append(f"</{tag}>")
        return lines

    def _children(self, state: _Render, node: ParsedNode, depth: int) -> list[list[str]]:
        bound_text = state.bound.get(node.id, {}).get("text")
        children = state.document.children(node)
        rendered: list[list[str]] = []
        for index, child in enumerate(children):
            if child.type is NodeType.TEXT:
                if bound_text is not None:
                    if (child.text or "").strip():
                        rendered.append([f"{{{bound_text}}}"])
                        bound_text = None
                    continue
                text = text_line(child.text or "", index > 0, index < len(children) - 1)
                if text:
                    rendered.append([text])
                continue
            lines = self._node(state, child, depth + 1)
            if lines:
                rendered.append(lines)
        return rendered

    def _attributes(self, state: _Render, node: ParsedNode) -> str:
        attributes = node.attributes
        overrides = {
            source: prop for source, prop in state.bound.get(node.id, {}).items() if source != "text"
        }
        if self.typed is not None:
            inferred, literal_overrides = self.typed.infer(attributes)
            state.props = merge_props(state.props, inferred)
            overrides = {**literal_overrides, **overrides}

        extract = self.options.extract_styles and bool(attributes.style)
        extra_classes = [inline_style_class(attributes.style)] if extract else []
        if extract:
            state.stats.inline_styles_converted += 1

        class_value = None
        if self.options.css_strategy is CssStrategy.CSS_MODULES and (attributes.classes or extra_classes):
            state.uses_styles = True
            class_value = class_expression

        jsx = transform_attributes(
            attributes,
            convert_class=self.options.convert_class_to_class_name,
            class_value=class_value,
            include_style=not extract,
            extra_classes=extra_classes,
            overrides=overrides,
        )
        state.stats.attributes_transformed += len(jsx)
        return " ".join(attribute.render() for attribute in jsx)

    def _usage(self, state: _Render, definition: ComponentDefinition) -> str:
        if definition.name not in state.imports:
            state.imports.append(definition.name)
        pattern = state.patterns.get(definition.pattern_id) if definition.pattern_id else None
        if pattern is None:
            return f"<{definition.name} />"
        types = {p.name: p.type for p in pattern.inferred_props}
        parts = [definition.name]
        for binding in active_bindings(state.document, pattern, state.registry):
            value = binding_value(state.document, definition.node_id, binding)
            if types.get(binding.prop) == "number" and value:
                parts.append(f"{binding.prop}={{{value}}}")
            elif types.get(binding.prop) == "boolean" and value:
                parts.append(f"{binding.prop}={{{value.lower()}}}")
            else:
                parts.append(f'{binding.prop}="{escape_attribute(value)}"')
        return f"<{' '.join(parts)} />"


__all__ = ["CodeGenerator", "GeneratorResult", "GeneratorStats", "active_bindings", "escape_text"]
