"""Asset records produced by the asset extractor."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Literal


class AssetType(Enum):
    IMAGE = "image"
    FONT = "font"
    STYLESHEET = "stylesheet"
    SCRIPT = "script"
    FAVICON = "favicon"
    VIDEO = "video"
    AUDIO = "audio"
    DOCUMENT = "document"
    OTHER = "other"


class AssetSource(Enum):
    REMOTE = "remote"
    BASE64 = "base64"
    LOCAL = "local"
    CSS_REFERENCE = "css_reference"


GENERIC_MIME = "application/octet-stream"

# mime -> (type, format)
MIME_TYPES: dict[str, tuple[AssetType, str | None]] = {
    "image/jpeg": (AssetType.IMAGE, "jpeg"),
    "image/png": (AssetType.IMAGE, "png"),
    "image/gif": (AssetType.IMAGE, "gif"),
    "image/svg+xml": (AssetType.IMAGE, "svg"),
    "image/webp": (AssetType.IMAGE, "webp"),
    "image/bmp": (AssetType.IMAGE, "bmp"),
    "image/x-icon": (AssetType.IMAGE, "ico"),
    "image/avif": (AssetType.IMAGE, "avif"),
    "image/tiff": (AssetType.IMAGE, "tiff"),
    "font/woff": (AssetType.FONT, "woff"),
    "font/woff2": (AssetType.FONT, "woff2"),
    "font/ttf": (AssetType.FONT, "ttf"),
    "font/otf": (AssetType.FONT, "otf"),
    "application/vnd.ms-fontobject": (AssetType.FONT, "eot"),
    "text/css": (AssetType.STYLESHEET, None),
    "text/javascript": (AssetType.SCRIPT, None),
    "application/javascript": (AssetType.SCRIPT, None),
    "video/mp4": (AssetType.VIDEO, None),
    "video/webm": (AssetType.VIDEO, None),
    "video/ogg": (AssetType.VIDEO, None),
    "audio/mpeg": (AssetType.AUDIO, None),
    "audio/wav": (AssetType.AUDIO, None),
    "application/pdf": (AssetType.DOCUMENT, None),
}

EXTENSION_TO_MIME: dict[str, str] = {
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".png": "image/png",
    ".gif": "image/gif",
    ".svg": "image/svg+xml",
    ".webp": "image/webp",
    ".bmp": "image/bmp",
    ".ico": "image/x-icon",
    ".avif": "image/avif",
    ".tiff": "image/tiff",
    ".tif": "image/tiff",
    ".woff": "font/woff",
    ".woff2": "font/woff2",
    ".ttf": "font/ttf",
    ".otf": "font/otf",
    ".eot": "application/vnd.ms-fontobject",
    ".css": "text/css",
    ".scss": "text/x-scss",
    ".less": "text/x-less",
    ".js": "text/javascript",
    ".mjs": "text/javascript",
    ".mp4": "video/mp4",
    ".webm": "video/webm",
    ".ogg": "video/ogg",
    ".mp3": "audio/mpeg",
    ".wav": "audio/wav",
    ".pdf": "application/pdf",
}

MIME_TO_EXTENSION: dict[str, str] = {
    "image/jpeg": ".jpg",
    "image/png": ".png",
    "image/gif": ".gif",
    "image/svg+xml": ".svg",
    "image/webp": ".webp",
    "image/bmp": ".bmp",
    "image/x-icon": ".ico",
    "image/avif": ".avif",
    "font/woff": ".woff",
    "font/woff2": ".woff2",
    "font/ttf": ".ttf",
    "font/otf": ".otf",
    "text/css": ".css",
    "text/javascript": ".js",
    "application/javascript": ".js",
    "video/mp4": ".mp4",
    "audio/mpeg": ".mp3",
    "application/pdf": ".pdf",
}


@dataclass(slots=True, frozen=True)
class AssetReference:
    element: str
    attribute: str
    element_id: str | None = None
    element_classes: tuple[str, ...] = ()


@dataclass(slots=True)
class ExtractedAsset:
    id: str
    type: AssetType
    source: AssetSource
    original_url: str
    mime_type: str
    file_name: str
    output_path: str
    format: str | None = None
    resolved_url: str | None = None
    base64_data: str | None = None
    size: int | None = None
    width: int | None = None
    height: int | None = None
    references: list[AssetReference] = field(default_factory=list)
    extracted: bool = False
    error: str | None = None
    checksum: str | None = None


@dataclass(slots=True, frozen=True)
class AssetWarning:
    severity: Literal["error", "warning", "info"]
    message: str
    asset_url: str | None = None
    element: str | None = None


@dataclass(slots=True)
class AssetExtractionResult:
    assets: dict[str, ExtractedAsset] = field(default_factory=dict)
    warnings: list[AssetWarning] = field(default_factory=list)
    updated_html: str | None = None

    @property
    def by_type(self) -> dict[AssetType, list[ExtractedAsset]]:
        grouped: dict[AssetType, list[ExtractedAsset]] = {}
        for asset in self.assets.values():
            grouped.setdefault(asset.type, []).append(asset)
        return grouped

    @property
    def total_count(self) -> int:
        return len(self.assets)

    @property
    def extracted_count(self) -> int:
        return sum(1 for a in self.assets.values() if a.extracted)

    @property
    def failed_count(self) -> int:
        return sum(1 for a in self.assets.values() if a.error is not None)

    @property
    def total_size(self) -> int:
        return sum(a.size or 0 for a in self.assets.values())


__all__ = [
    "EXTENSION_TO_MIME",
    "GENERIC_MIME",
    "MIME_TO_EXTENSION",
    "MIME_TYPES",
    "AssetExtractionResult",
    "AssetReference",
    "AssetSource",
    "AssetType",
    "AssetWarning",
    "ExtractedAsset",
]
