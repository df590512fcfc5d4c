"""Archive packaging and project scaffolding."""

from __future__ import annotations

from html2react.builder.packaging import ArchiveResult, ScaffoldContext, build_archive, write_archive

__all__ = ["ArchiveResult", "ScaffoldContext", "build_archive", "write_archive"]
