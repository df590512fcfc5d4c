"""JSX/TSX code generation."""

from __future__ import annotations

from html2react.generator.formatter import format_source
from html2react.generator.jsx import CodeGenerator, GeneratorResult, GeneratorStats
from html2react.generator.typed import TypedProps

__all__ = ["CodeGenerator", "GeneratorResult", "GeneratorStats", "TypedProps", "format_source"]
