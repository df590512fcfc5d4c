"""Markup parsing: node tree, attribute normalization and semantic sections."""

from __future__ import annotations

from html2react.parser.html_parser import empty_document, make_soup, parse, to_html
from html2react.parser.semantic import SemanticAnalyzer

__all__ = ["SemanticAnalyzer", "empty_document", "make_soup", "parse", "to_html"]
