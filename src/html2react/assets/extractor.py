"""Asset discovery, deduplication and optional download.

Assets are keyed by identity: the sha256 of the payload for data URLs and
the resolved URL for everything else, so repeated references collapse into
one record that lists every referencing element. Rewriting walks the parsed
tree and replaces exactly the attribute value or ``url()`` token that
matched, never a substring of the whole document.
"""

from __future__ import annotations

import base64
import binascii
import contextlib
import io
import logging
import re
from collections.abc import Callable, Iterator
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from pathlib import PurePosixPath
from typing import Literal
from urllib.parse import unquote, urljoin, urlparse

import requests
from bs4 import Tag
from PIL import Image, UnidentifiedImageError

from html2react.errors import AssetDownloadError
from html2react.feature_logger import log_error_policy
from html2react.ids import content_hash
from html2react.model.assets import (
    EXTENSION_TO_MIME,
    GENERIC_MIME,
    MIME_TO_EXTENSION,
    MIME_TYPES,
    AssetExtractionResult,
    AssetReference,
    AssetSource,
    AssetType,
    AssetWarning,
    ExtractedAsset,
)
from html2react.model.options import AssetOptions, ProgressCallback
from html2react.parser.html_parser import make_soup

logger = logging.getLogger(__name__)

_URL_TOKEN_RE = re.compile(r"""url\(\s*(['"]?)(.*?)\1\s*\)""", re.IGNORECASE)
_UNSAFE_FILENAME_RE = re.compile(r"[^a-zA-Z0-9._-]")
_REPEATED_UNDERSCORE_RE = re.compile(r"_{2,}")
_SCHEME_RE = re.compile(r"^([a-z][a-z0-9+.-]*):", re.IGNORECASE)

IGNORED_SCHEMES = frozenset({"javascript", "mailto", "tel", "about", "blob"})

OUTPUT_FOLDERS: dict[AssetType, str] = {
    AssetType.IMAGE: "images",
    AssetType.FAVICON: "images",
    AssetType.FONT: "fonts",
    AssetType.STYLESHEET: "styles",
    AssetType.SCRIPT: "scripts",
    AssetType.VIDEO: "media",
    AssetType.AUDIO: "media",
}

_LINK_AS_TYPES = {
    "font": AssetType.FONT,
    "image": AssetType.IMAGE,
    "script": AssetType.SCRIPT,
    "style": AssetType.STYLESHEET,
}
_SOURCE_PARENT_TYPES = {
    "video": AssetType.VIDEO,
    "audio": AssetType.AUDIO,
    "picture": AssetType.IMAGE,
}


def _safe_emit(on_progress: ProgressCallback, event: str, payload: dict[str, int | str]) -> None:
    if on_progress is None:
        return
    with contextlib.suppress(Exception):
        on_progress(event, payload)


@dataclass(slots=True)
class _Hit:
    element: Tag
    attribute: str  # attribute name, or "style" / "#text" for url() tokens
    url: str
    forced_type: AssetType | None = None


def parse_data_url(url: str) -> tuple[str, str] | None:
    """``data:<mime>[;base64],<data>`` -> (mime, base64 payload)."""
    header, sep, data = url[5:].partition(",")
    if not sep:
        return None
    mime = header.split(";")[0].strip().lower() or "text/plain"
    if ";base64" in header.lower():
        return mime, "".join(data.split())
    return mime, base64.b64encode(unquote(data).encode("utf-8")).decode("ascii")


def split_srcset(srcset: str) -> list[str]:
    """URLs of a ``srcset`` value (descriptors dropped)."""
    return [candidate.split()[0] for candidate in _srcset_candidates(srcset)]


def css_urls(text: str) -> list[str]:
    return [m.group(2).strip() for m in _URL_TOKEN_RE.finditer(text) if m.group(2).strip()]


def mime_from_url(url: str) -> str:
    suffix = PurePosixPath(urlparse(url).path).suffix.lower()
    return EXTENSION_TO_MIME.get(suffix, GENERIC_MIME)


def sanitize_filename(name: str) -> str:
    name = _UNSAFE_FILENAME_RE.sub("_", unquote(name))
    return _REPEATED_UNDERSCORE_RE.sub("_", name).lower()


def classify_source(url: str) -> AssetSource:
    if url.startswith("data:"):
        return AssetSource.BASE64
    if url.startswith(("http://", "https://", "//")):
        return AssetSource.REMOTE
    return AssetSource.LOCAL


def _class_tuple(element: Tag) -> tuple[str, ...]:
    value = element.get("class")
    return tuple(str(value).split()) if value else ()


class AssetExtractor:
    def __init__(self, base_url: str = "") -> None:
        self.base_url = base_url
        self._assets: dict[str, ExtractedAsset] = {}
        self._warnings: list[AssetWarning] = []
        self._file_names: set[str] = set()

    def reset(self) -> None:
        self._assets = {}
        self._warnings = []
        self._file_names = set()

    def extract_from_html(self, markup: str, options: AssetOptions | None = None) -> AssetExtractionResult:
        """Scan ``markup`` for assets without touching the network."""
        options = options or AssetOptions()
        self.reset()
        soup = make_soup(markup or "")
        hits = list(self._scan(soup))
        _safe_emit(options.on_progress, "assets:scan", {"references": len(hits)})
        for hit in hits:
            self._register(hit, options)
        for asset in self._assets.values():
            self._finalize(asset, options)
        return self._result(soup, options)

    def extract_with_download(
        self,
        markup: str,
        options: AssetOptions | None = None,
        session: requests.Session | None = None,
    ) -> AssetExtractionResult:
        """Scan ``markup`` and fetch every remote asset once.

        A failing download marks only that asset as not extracted and adds a
        warning; the remaining assets are unaffected.
        """
        options = options or AssetOptions()
        self.reset()
        soup = make_soup(markup or "")
        for hit in self._scan(soup):
            self._register(hit, options)

        pending = [
            a for a in self._assets.values()
            if (a.resolved_url or "").startswith(("http://", "https://"))
        ]
        own_session = session is None
        http = session or requests.Session()
        try:
            outcomes = self._download_all(http, pending, options)
        finally:
            if own_session:
                http.close()

        for index, asset in enumerate(pending, start=1):
            outcome = outcomes[asset.id]
            if isinstance(outcome, AssetDownloadError):
                asset.extracted = False
                asset.error = outcome.reason
                self._warn("error", str(outcome), asset.original_url)
                log_error_policy("AssetExtractor", "download_failed", "skip", asset.original_url)
            else:
                asset.base64_data = base64.b64encode(outcome).decode("ascii")
                asset.size = len(outcome)
                asset.extracted = True
            _safe_emit(
                options.on_progress,
                "assets:download",
                {"current": index, "total": len(pending), "url": asset.original_url},
            )
        for asset in self._assets.values():
            self._finalize(asset, options)
        return self._result(soup, options)

    def asset_bundle(self) -> dict[str, bytes]:
        """Decoded payloads of extracted assets keyed by output path."""
        bundle: dict[str, bytes] = {}
        for asset in self._assets.values():
            if asset.extracted and asset.base64_data:
                bundle[asset.output_path] = base64.b64decode(asset.base64_data)
        return bundle

    def resolve_url(self, url: str) -> str:
        if url.startswith("data:"):
            return url
        if url.startswith("//"):
            scheme = urlparse(self.base_url).scheme or "https"
            return f"{scheme}:{url}"
        if self.base_url:
            return urljoin(self.base_url, url)
        return url

    def _scan(self, soup: Tag) -> Iterator[_Hit]:
        for element in soup.find_all(True):
            tag = element.name
            if tag == "img":
                yield from self._attribute_hits(element, "src")
                yield from self._srcset_hits(element)
            elif tag == "link":
                is_asset, forced = self._link_type(element)
                if is_asset:
                    yield from self._attribute_hits(element, "href", forced)
            elif tag == "script":
                yield from self._attribute_hits(element, "src", AssetType.SCRIPT)
            elif tag == "source":
                parent = element.parent.name if element.parent is not None else ""
                forced = _SOURCE_PARENT_TYPES.get(parent)
                yield from self._attribute_hits(element, "src", forced)
                yield from self._srcset_hits(element, forced)
            elif tag in ("video", "audio"):
                yield from self._attribute_hits(element, "src", _SOURCE_PARENT_TYPES[tag])
                yield from self._attribute_hits(element, "poster", AssetType.IMAGE)
            elif tag in ("image", "use"):
                for attribute in ("href", "xlink:href"):
                    yield from self._attribute_hits(element, attribute)
            elif tag == "style":
                for url in css_urls(element.get_text()):
                    yield _Hit(element, "#text", url)

            style = element.get("style")
            if style:
                for url in css_urls(str(style)):
                    yield _Hit(element, "style", url)

    @staticmethod
    def _link_type(element: Tag) -> tuple[bool, AssetType | None]:
        rel = str(element.get("rel") or "").lower().split()
        as_type = str(element.get("as") or "").lower()
        if "stylesheet" in rel:
            return True, AssetType.STYLESHEET
        if any("icon" in r for r in rel):
            return True, AssetType.FAVICON
        if as_type in _LINK_AS_TYPES:
            return True, _LINK_AS_TYPES[as_type]
        if "preload" in rel or "prefetch" in rel:
            return True, None
        # Not an asset link (canonical, alternate, ...)
        return False, None

    @staticmethod
    def _attribute_hits(element: Tag, attribute: str, forced: AssetType | None = None) -> Iterator[_Hit]:
        value = element.get(attribute)
        if value and str(value).strip():
            yield _Hit(element, attribute, str(value).strip(), forced)

    @staticmethod
    def _srcset_hits(element: Tag, forced: AssetType | None = None) -> Iterator[_Hit]:
        srcset = element.get("srcset")
        if srcset:
            for url in split_srcset(str(srcset)):
                yield _Hit(element, "srcset", url, forced)

    def _register(self, hit: _Hit, options: AssetOptions) -> None:
        url = hit.url
        if url.startswith("#"):
            return
        scheme = _SCHEME_RE.match(url)
        if scheme and scheme.group(1).lower() in IGNORED_SCHEMES:
            return
        if scheme and scheme.group(1).lower() not in ("http", "https", "data"):
            self._warn("warning", f"Unsupported protocol in URL: {url}", url, hit.element.name)
            return

        source = classify_source(url)
        if hit.attribute in ("style", "#text") and source is not AssetSource.BASE64:
            source = AssetSource.CSS_REFERENCE
        reference = AssetReference(
            element=hit.element.name,
            attribute=hit.attribute,
            element_id=str(hit.element.get("id")) if hit.element.get("id") else None,
            element_classes=_class_tuple(hit.element),
        )

        payload: str | None = None
        if url.startswith("data:"):
            parsed = parse_data_url(url)
            if parsed is None:
                self._warn("warning", "Malformed data URL", url[:40], hit.element.name)
                return
            mime, payload = parsed
            identity = content_hash(payload)
        else:
            try:
                mime = mime_from_url(url)
                identity = self.resolve_url(url)
            except ValueError:
                self._warn("warning", f"Malformed URL: {url}", url[:80], hit.element.name)
                return

        existing = self._assets.get(identity)
        if existing is not None:
            existing.references.append(reference)
            return

        if options.allowed_mime_types is not None and mime not in options.allowed_mime_types:
            self._warn("info", f"Skipped asset with MIME type {mime}", url[:80], hit.element.name)
            return
        if mime in options.blocked_mime_types:
            self._warn("info", f"Blocked asset with MIME type {mime}", url[:80], hit.element.name)
            return

        asset_type, fmt = MIME_TYPES.get(mime, (AssetType.OTHER, None))
        if hit.forced_type is not None:
            asset_type = hit.forced_type
        file_name = self._file_name(url, mime, identity)
        asset = ExtractedAsset(
            id=identity,
            type=asset_type,
            source=source,
            original_url=url,
            mime_type=mime,
            file_name=file_name,
            output_path=self._output_path(options, asset_type, file_name),
            format=fmt or (MIME_TO_EXTENSION.get(mime, "").lstrip(".") or None),
            resolved_url=None if payload is not None else identity,
            base64_data=payload,
            references=[reference],
            extracted=payload is not None,
        )
        self._assets[identity] = asset

    def _file_name(self, url: str, mime: str, identity: str) -> str:
        extension = MIME_TO_EXTENSION.get(mime, ".bin")
        if url.startswith("data:"):
            name = f"asset-{identity[:8]}{extension}"
        else:
            segment = PurePosixPath(urlparse(url).path).name
            name = sanitize_filename(segment) if segment else f"asset-{content_hash(identity, 8)}{extension}"
        candidate = name
        stem, dot, suffix = name.rpartition(".")
        if not dot:
            stem, suffix = name, ""
        counter = 1
        while candidate in self._file_names:
            candidate = f"{stem}_{counter}.{suffix}" if suffix else f"{stem}_{counter}"
            counter += 1
        self._file_names.add(candidate)
        return candidate

    @staticmethod
    def _output_path(options: AssetOptions, asset_type: AssetType, file_name: str) -> str:
        root = options.output_directory.strip("/") or "assets"
        folder = OUTPUT_FOLDERS.get(asset_type)
        return f"{root}/{folder}/{file_name}" if folder else f"{root}/{file_name}"

    def _download_all(
        self, session: requests.Session, assets: list[ExtractedAsset], options: AssetOptions
    ) -> dict[str, bytes | AssetDownloadError]:
        def fetch(asset: ExtractedAsset) -> bytes | AssetDownloadError:
            try:
                return download(session, asset.resolved_url or asset.original_url, options.timeout)
            except AssetDownloadError as exc:
                return exc

        if options.max_workers > 1 and len(assets) > 1:
            with ThreadPoolExecutor(max_workers=options.max_workers) as pool:
                results = list(pool.map(fetch, assets))
        else:
            results = [fetch(asset) for asset in assets]
        return {asset.id: outcome for asset, outcome in zip(assets, results)}

    def _finalize(self, asset: ExtractedAsset, options: AssetOptions) -> None:
        if asset.base64_data is None:
            return
        try:
            data = base64.b64decode(asset.base64_data, validate=True)
        except (binascii.Error, ValueError) as exc:
            asset.extracted = False
            asset.error = f"Invalid base64 payload: {exc}"
            self._warn("warning", asset.error, asset.original_url[:80])
            return
        asset.size = len(data)
        asset.checksum = content_hash(data, length=64)
        if options.max_file_size is not None and asset.size > options.max_file_size:
            asset.extracted = False
            asset.error = f"Asset exceeds max size ({asset.size} > {options.max_file_size} bytes)"
            self._warn("warning", asset.error, asset.original_url[:80])
            return
        if asset.type in (AssetType.IMAGE, AssetType.FAVICON) and asset.mime_type != "image/svg+xml":
            read_dimensions(asset, data)

    def _result(self, soup: Tag, options: AssetOptions) -> AssetExtractionResult:
        result = AssetExtractionResult(assets=dict(self._assets), warnings=list(self._warnings))
        if options.rewrite_html:
            result.updated_html = rewrite_references(soup, self._rewrite_map(), self.resolve_url)
        logger.debug(
            "Assets: %d found, %d extracted, %d warnings",
            result.total_count,
            result.extracted_count,
            len(result.warnings),
        )
        return result

    def _rewrite_map(self) -> dict[str, str]:
        return {
            asset.id: f"./{asset.output_path}"
            for asset in self._assets.values()
            if asset.extracted
        }

    def _warn(
        self,
        severity: Literal["error", "warning", "info"],
        message: str,
        url: str | None = None,
        element: str | None = None,
    ) -> None:
        self._warnings.append(AssetWarning(severity, message, url, element))


def download(session: requests.Session, url: str, timeout: float) -> bytes:
    """Fetch ``url`` once; any transport or HTTP error becomes ``AssetDownloadError``."""
    try:
        response = session.get(url, timeout=timeout)
        response.raise_for_status()
    except requests.RequestException as exc:
        raise AssetDownloadError(url, str(exc)) from exc
    return response.content


def read_dimensions(asset: ExtractedAsset, data: bytes) -> None:
    try:
        with Image.open(io.BytesIO(data)) as image:
            asset.width, asset.height = image.size
    except (UnidentifiedImageError, OSError) as exc:
        logger.debug("Could not read image dimensions for %s: %s", asset.file_name, exc)


def rewrite_references(
    soup: Tag, replacements: dict[str, str], identify: Callable[[str], str]
) -> str:
    """Replace matched asset references in place and serialize ``soup``.

    ``replacements`` is keyed by asset identity; ``identify`` maps a raw
    reference to its identity (data URLs are hashed here).
    """

    def key(url: str) -> str:
        if url.startswith("data:"):
            parsed = parse_data_url(url)
            return content_hash(parsed[1]) if parsed else url
        try:
            return identify(url)
        except ValueError:
            return url

    def swap(url: str) -> str:
        return replacements.get(key(url.strip()), url)

    def swap_css(text: str) -> str:
        def token(match: re.Match[str]) -> str:
            inner = match.group(2).strip()
            new = swap(inner)
            return match.group(0) if new == inner else f"url('{new}')"

        return _URL_TOKEN_RE.sub(token, text)

    if not replacements:
        return str(soup)
    for element in soup.find_all(True):
        for attribute in ("src", "href", "xlink:href", "poster"):
            value = element.get(attribute)
            if value:
                element[attribute] = swap(str(value))
        srcset = element.get("srcset")
        if srcset:
            element["srcset"] = ", ".join(
                " ".join([swap(parts[0]), *parts[1:]])
                for parts in (c.split() for c in _srcset_candidates(str(srcset)))
                if parts
            )
        style = element.get("style")
        if style:
            element["style"] = swap_css(str(style))
        if element.name == "style" and element.string is not None:
            element.string.replace_with(swap_css(str(element.string)))
    return str(soup)


def _srcset_candidates(srcset: str) -> list[str]:
    candidates: list[str] = []
    for candidate in re.split(r",\s+", srcset.strip()):
        candidates.extend([candidate] if candidate.startswith("data:") else candidate.split(","))
    return [c.strip() for c in candidates if c.strip()]


__all__ = [
    "AssetExtractor",
    "classify_source",
    "css_urls",
    "download",
    "mime_from_url",
    "parse_data_url",
    "read_dimensions",
    "rewrite_references",
    "sanitize_filename",
    "split_srcset",
]
