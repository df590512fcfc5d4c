"""Generated output files shared by the generator, CSS and packaging stages."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class FileKind(Enum):
    COMPONENT = "component"
    STYLE = "style"
    TYPE = "type"
    INDEX = "index"
    ASSET = "asset"
    CONFIG = "config"
    DOCUMENT = "document"


@dataclass(slots=True)
class GeneratedFile:
    file_name: str
    content: str
    kind: FileKind

    @property
    def line_count(self) -> int:
        return len(self.content.splitlines())


__all__ = ["FileKind", "GeneratedFile"]
