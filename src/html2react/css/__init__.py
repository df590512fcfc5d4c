"""Stylesheet conversion strategies (Tailwind, CSS Modules, vanilla CSS)."""

from html2react.css.base import (
    CssConverter,
    CssResult,
    CssStats,
    get_converter,
    inline_style_class,
    stylesheet_filename,
)

__all__ = [
    "CssConverter",
    "CssResult",
    "CssStats",
    "get_converter",
    "inline_style_class",
    "stylesheet_filename",
]
