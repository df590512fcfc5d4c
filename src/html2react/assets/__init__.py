"""Asset extraction: discovery, identity-based dedupe, download and rewrite."""

from __future__ import annotations

from html2react.assets.extractor import AssetExtractor, rewrite_references

__all__ = ["AssetExtractor", "rewrite_references"]
