"""Exception types raised across the conversion pipeline."""

from __future__ import annotations


class ParseInputError(TypeError):
    """Raised when the parser receives ``None`` instead of a markup string."""


class ConversionCancelled(RuntimeError):
    """Raised at a stage boundary once cancellation has been requested."""


class PackagingError(RuntimeError):
    """Raised when the archive layout cannot be assembled."""


class AssetDownloadError(RuntimeError):
    """Raised when a single remote asset cannot be fetched."""

    def __init__(self, url: str, reason: str) -> None:
        super().__init__(f"Failed to download {url}: {reason}")
        self.url = url
        self.reason = reason


__all__ = [
    "AssetDownloadError",
    "ConversionCancelled",
    "PackagingError",
    "ParseInputError",
]
