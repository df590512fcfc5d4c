from __future__ import annotations

from typing import Any

import requests

from html2react.assets.extractor import (
    AssetExtractor,
    classify_source,
    css_urls,
    parse_data_url,
    sanitize_filename,
    split_srcset,
)
from html2react.ids import content_hash
from html2react.model.assets import AssetSource, AssetType
from html2react.model.options import AssetOptions

PIXEL = (
    "iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAYAAAAfFcSJAAAADUlEQVR42mNkYPhfDwAChwGA60e6kgAAAABJRU5ErkJggg=="
)
PIXEL_URL = f"data:image/png;base64,{PIXEL}"


class FakeResponse:
    def __init__(self, content: bytes) -> None:
        self.content = content

    def raise_for_status(self) -> None:
        return None


class FakeSession:
    def __init__(self, failing: set[str]) -> None:
        self.failing = failing
        self.requested: list[str] = []

    def get(self, url: str, timeout: float) -> FakeResponse:
        self.requested.append(url)
        if url in self.failing:
            raise requests.ConnectionError("connection refused")
        return FakeResponse(f"payload:{url}".encode())


def test_same_data_url_is_one_asset_with_two_references() -> None:
    markup = (
        f'<div><img src="{PIXEL_URL}" class="logo">'
        f"<span style=\"background: url('{PIXEL_URL}')\">x</span></div>"
    )
    result = AssetExtractor().extract_from_html(markup)
    assert result.total_count == 1
    asset = next(iter(result.assets.values()))
    assert asset.source is AssetSource.BASE64
    assert asset.type is AssetType.IMAGE
    assert asset.extracted
    assert [(r.element, r.attribute) for r in asset.references] == [("img", "src"), ("span", "style")]
    assert asset.references[0].element_classes == ("logo",)
    assert asset.file_name == f"asset-{content_hash(PIXEL)[:8]}.png"
    assert asset.output_path == f"assets/images/{asset.file_name}"
    assert (asset.width, asset.height) == (1, 1)
    assert asset.checksum is not None and len(asset.checksum) == 64


def test_rewrite_replaces_exact_references() -> None:
    markup = f'<div><img src="{PIXEL_URL}"><p>data:image/png;base64 is text</p></div>'
    extractor = AssetExtractor()
    result = extractor.extract_from_html(markup)
    asset = next(iter(result.assets.values()))
    assert result.updated_html is not None
    assert f'src="./{asset.output_path}"' in result.updated_html
    assert PIXEL not in result.updated_html
    assert "data:image/png;base64 is text" in result.updated_html
    assert list(extractor.asset_bundle()) == [asset.output_path]


def test_remote_assets_are_recorded_but_not_fetched_without_download() -> None:
    markup = '<img src="https://cdn.test/a.png"><img src="https://cdn.test/a.png">'
    result = AssetExtractor().extract_from_html(markup)
    assert result.total_count == 1
    asset = result.assets["https://cdn.test/a.png"]
    assert asset.source is AssetSource.REMOTE
    assert not asset.extracted
    assert len(asset.references) == 2
    assert 'src="https://cdn.test/a.png"' in (result.updated_html or "")


def test_one_failed_download_does_not_affect_the_others() -> None:
    urls = [f"https://cdn.test/{name}.png" for name in ("a", "b", "c")]
    markup = "".join(f'<img src="{url}">' for url in urls)
    session = FakeSession(failing={urls[1]})
    events: list[tuple[str, dict[str, Any]]] = []
    options = AssetOptions(download_remote=True, on_progress=lambda e, p: events.append((e, p)))

    extractor = AssetExtractor()
    result = extractor.extract_with_download(markup, options, session=session)  # type: ignore[arg-type]

    assert sorted(session.requested) == urls
    assert result.extracted_count == 2
    assert result.failed_count == 1
    assert result.total_size == sum(len(v) for v in extractor.asset_bundle().values())
    assert not result.assets[urls[1]].extracted
    assert [w.severity for w in result.warnings] == ["error"]
    assert result.warnings[0].asset_url == urls[1]
    assert "connection refused" in result.warnings[0].message
    assert extractor.asset_bundle() == {
        "assets/images/a.png": b"payload:https://cdn.test/a.png",
        "assets/images/c.png": b"payload:https://cdn.test/c.png",
    }
    html = result.updated_html or ""
    assert 'src="./assets/images/a.png"' in html
    assert f'src="{urls[1]}"' in html
    downloads = [p for e, p in events if e == "assets:download"]
    assert [(p["current"], p["total"]) for p in downloads] == [(1, 3), (2, 3), (3, 3)]


def test_parallel_downloads_match_sequential() -> None:
    urls = [f"https://cdn.test/{n}.css" for n in range(4)]
    markup = "".join(f'<link rel="stylesheet" href="{url}">' for url in urls)
    options = AssetOptions(download_remote=True, max_workers=3)
    result = AssetExtractor().extract_with_download(markup, options, session=FakeSession(set()))  # type: ignore[arg-type]
    assert result.extracted_count == 4
    assert {a.type for a in result.assets.values()} == {AssetType.STYLESHEET}


def test_ignored_and_unsupported_schemes() -> None:
    markup = (
        '<img src="javascript:void(0)"><img src="#sprite">'
        '<img src="ftp://files.test/x.png"><link rel="canonical" href="https://site.test/">'
    )
    result = AssetExtractor().extract_from_html(markup)
    assert result.total_count == 0
    assert [(w.severity, w.message) for w in result.warnings] == [
        ("warning", "Unsupported protocol in URL: ftp://files.test/x.png")
    ]


def test_malformed_url_is_skipped_with_a_warning() -> None:
    markup = '<div><img src="http://[::1/logo.png"><img src="ok.png"></div>'
    result = AssetExtractor().extract_from_html(markup)
    assert list(result.assets) == ["ok.png"]
    assert [(w.severity, w.message, w.element) for w in result.warnings] == [
        ("warning", "Malformed URL: http://[::1/logo.png", "img")
    ]
    assert 'src="http://[::1/logo.png"' in (result.updated_html or "")


def test_invalid_base64_payload_is_not_extracted() -> None:
    result = AssetExtractor().extract_from_html('<img src="data:image/png;base64,@@@">')
    asset = next(iter(result.assets.values()))
    assert not asset.extracted
    assert (asset.error or "").startswith("Invalid base64 payload")
    assert asset.size is None
    assert len(result.warnings) == 1
    assert result.warnings[0].severity == "warning"


def test_mime_filters_and_size_limit() -> None:
    markup = f'<img src="{PIXEL_URL}"><script src="app.js"></script>'
    blocked = AssetExtractor().extract_from_html(markup, AssetOptions(blocked_mime_types=["image/png"]))
    assert [a.original_url for a in blocked.assets.values()] == ["app.js"]
    assert blocked.warnings[0].severity == "info"

    tiny = AssetExtractor().extract_from_html(markup, AssetOptions(max_file_size=10))
    pixel = next(a for a in tiny.assets.values() if a.source is AssetSource.BASE64)
    assert not pixel.extracted
    assert "exceeds max size" in (pixel.error or "")


def test_base_url_resolution_and_duplicate_file_names() -> None:
    markup = '<img src="/a/logo.png"><img src="/b/logo.png"><img src="//cdn.test/x.png">'
    result = AssetExtractor(base_url="https://site.test/page/").extract_from_html(markup)
    assert sorted(result.assets) == [
        "https://cdn.test/x.png",
        "https://site.test/a/logo.png",
        "https://site.test/b/logo.png",
    ]
    names = sorted(a.file_name for a in result.assets.values())
    assert names == ["logo.png", "logo_1.png", "x.png"]


def test_helpers() -> None:
    assert parse_data_url("data:text/plain,hi%20there") == ("text/plain", "aGkgdGhlcmU=")
    assert parse_data_url("data:broken") is None
    assert split_srcset("a.png 1x, b.png 2x") == ["a.png", "b.png"]
    assert css_urls("a { background: url('x.png') } b { src: url(y.woff2) }") == ["x.png", "y.woff2"]
    assert sanitize_filename("My%20Photo (1).PNG") == "my_photo_1_.png"
    assert classify_source("//cdn.test/x.js") is AssetSource.REMOTE
    assert classify_source("img/x.png") is AssetSource.LOCAL
