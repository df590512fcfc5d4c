"""Component splitting: boundaries, repeating patterns and names."""

from __future__ import annotations

from html2react.splitter.names import NameGenerator, generate_unique_name
from html2react.splitter.patterns import PatternDetector
from html2react.splitter.splitter import ComponentSplitter, split

__all__ = ["ComponentSplitter", "NameGenerator", "PatternDetector", "generate_unique_name", "split"]
