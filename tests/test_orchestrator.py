from __future__ import annotations

import io
import zipfile
from pathlib import Path
from typing import Any

import pytest

from html2react import orchestrator
from html2react.model.options import ConversionOptions, CssStrategy, OutputFormat
from html2react.model.output import FileKind
from html2react.orchestrator import (
    CancelToken,
    ConversionStatus,
    Converter,
    StageName,
    StageStatus,
    convert,
)
from html2react.settings import AppSettings, SettingsStore

CONTAINER = '<div class="container"><p>Hello World</p></div>'
ALL_STAGES = [
    StageName.PARSE,
    StageName.SPLIT,
    StageName.GENERATE,
    StageName.CSS,
    StageName.ASSETS,
    StageName.ZIP,
]


def _components(result: orchestrator.ConversionResult) -> dict[str, str]:
    return {f.file_name: f.content for f in result.files if f.kind is FileKind.COMPONENT}


def test_container_conversion_with_defaults() -> None:
    result = convert(CONTAINER)
    assert result.success
    assert [s.name for s in result.stages] == ALL_STAGES
    assert all(s.status is StageStatus.COMPLETE for s in result.stages)
    assert all(s.duration >= 0 for s in result.stages)

    components = _components(result)
    assert list(components) == ["Container.tsx"]
    assert 'className="container"' in components["Container.tsx"]
    assert "import React" not in components["Container.tsx"]
    assert result.entry_point == "Container"
    assert sorted(f.file_name for f in result.files) == ["Container.tsx", "index.ts", "styles.css"]
    assert result.stats.components == 1
    assert result.stats.total_files == 3

    assert result.archive is not None
    with zipfile.ZipFile(io.BytesIO(result.archive.data)) as archive:
        names = archive.namelist()
        main = archive.read("src/main.tsx").decode("utf-8")
    assert "src/components/Container.tsx" in names
    assert "import Container from './components/Container';" in main
    assert "import './styles/styles.css';" in main


def test_cancel_before_start_runs_no_stage() -> None:
    token = CancelToken()
    token.cancel()
    result = convert(CONTAINER, cancel=token)
    assert result.status is ConversionStatus.CANCELLED
    assert result.stages == []
    assert result.files == []
    assert result.archive is None


def test_cancel_between_stages_keeps_completed_stages() -> None:
    token = CancelToken()

    def on_progress(event: str, payload: dict[str, Any]) -> None:
        if event == "stage:complete" and payload["stage"] == "split":
            token.cancel()

    result = convert(CONTAINER, cancel=token, on_progress=on_progress)
    assert result.status is ConversionStatus.CANCELLED
    assert result.message == "Conversion cancelled"
    assert [s.name for s in result.stages] == [StageName.PARSE, StageName.SPLIT]
    assert result.files == []


def test_none_input_fails_in_parse_stage() -> None:
    result = convert(None)  # type: ignore[arg-type]
    assert result.status is ConversionStatus.ERROR
    assert [(s.name, s.status) for s in result.stages] == [(StageName.PARSE, StageStatus.ERROR)]
    assert "HTML input cannot be None" in result.message


def test_stage_failure_halts_remaining_stages(monkeypatch: pytest.MonkeyPatch) -> None:
    def broken(strategy: CssStrategy) -> Any:
        raise RuntimeError("boom")

    monkeypatch.setattr(orchestrator, "get_converter", broken)
    result = convert(CONTAINER)
    assert result.status is ConversionStatus.ERROR
    assert result.message == "Stage 'css' failed: boom"
    assert [s.name for s in result.stages] == ALL_STAGES[:4]
    assert result.stages[-1].status is StageStatus.ERROR
    assert list(_components(result)) == ["Container.tsx"]
    assert result.archive is None


def test_missing_parse_output_fails_the_next_stage(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(Converter, "_parse", lambda self, ctx, markup: "Parsed nothing")
    result = convert(CONTAINER)
    assert result.status is ConversionStatus.ERROR
    assert result.message == "Stage 'split' failed: No parsed document; the parse stage has not run"
    assert [s.status for s in result.stages] == [StageStatus.COMPLETE, StageStatus.ERROR]


def test_empty_input_produces_scaffolding_only() -> None:
    result = convert("   ")
    assert result.success
    assert len(result.stages) == 6
    assert _components(result) == {}
    assert result.entry_point is None
    assert result.stages[2].message == "Empty input, nothing to generate"
    assert result.archive is not None
    assert "src/main.tsx" in result.archive.entries


def test_splitting_disabled_renders_one_component() -> None:
    options = ConversionOptions(enable_splitting=False, component_name="Landing", output_format=OutputFormat.JSX)
    result = convert(CONTAINER, options)
    assert list(_components(result)) == ["Landing.jsx"]
    assert result.stages[1].message == "Splitting disabled"
    assert result.entry_point == "Landing"


def test_landing_page_components(landing_page: str) -> None:
    result = convert(landing_page, ConversionOptions(include_source_html=True, compute_checksum=True))
    assert result.success
    assert sorted(_components(result)) == [
        "Card.tsx",
        "Cards.tsx",
        "Component.tsx",
        "Footer.tsx",
        "Main.tsx",
        "Navbar.tsx",
        "SiteHeader.tsx",
    ]
    assert result.entry_point == "Component"
    assert result.archive is not None
    assert "original.html" in result.archive.entries
    assert result.archive.checksum is not None
    with zipfile.ZipFile(io.BytesIO(result.archive.data)) as archive:
        index_html = archive.read("index.html").decode("utf-8")
    assert "<title>Acme Landing</title>" in index_html
    assert '<html lang="en">' in index_html


def test_warnings_are_collected() -> None:
    markup = '<div><script>track()</script><img src="ftp://files.test/x.png"><p>x</p></div>'
    result = convert(markup)
    assert "Skipped <script> element" in result.warnings
    assert "Unsupported protocol in URL: ftp://files.test/x.png (ftp://files.test/x.png)" in result.warnings


def test_malformed_asset_url_does_not_fail_the_conversion() -> None:
    result = convert('<div class="container"><img src="http://[::1/logo.png"><img src="ok.png"></div>')
    assert result.success
    assert all(s.status is StageStatus.COMPLETE for s in result.stages)
    assert "Malformed URL: http://[::1/logo.png (http://[::1/logo.png)" in result.warnings
    assert result.archive is not None


def test_progress_events_bracket_every_stage() -> None:
    events: list[tuple[str, dict[str, Any]]] = []
    convert(CONTAINER, on_progress=lambda e, p: events.append((e, p)))
    stage_events = [(e, p["stage"]) for e, p in events if e.startswith("stage:")]
    expected = []
    for stage in ALL_STAGES:
        expected += [("stage:start", stage.value), ("stage:complete", stage.value)]
    assert stage_events == expected
    assert "parse:start" in [e for e, _ in events]


def test_failing_progress_callback_is_ignored() -> None:
    def explode(event: str, payload: dict[str, Any]) -> None:
        raise ValueError("listener bug")

    assert convert(CONTAINER, on_progress=explode).success


def test_stored_settings_provide_defaults(tmp_path: Path) -> None:
    store = SettingsStore(tmp_path / "settings.json")
    store.update(css={"strategy": "tailwind"}, component={"output_format": "jsx"})
    result = Converter(store).convert(CONTAINER)
    styles = next(f for f in result.files if f.kind is FileKind.STYLE)
    assert styles.content.startswith("@tailwind base;")
    assert list(_components(result)) == ["Container.jsx"]

    explicit = Converter(store).convert(CONTAINER, ConversionOptions(output_format=OutputFormat.TSX))
    assert list(_components(explicit)) == ["Container.tsx"]


def test_explicit_settings_object_wins_over_store(tmp_path: Path) -> None:
    settings = AppSettings()
    settings.css.strategy = CssStrategy.CSS_MODULES
    result = Converter(SettingsStore(tmp_path / "missing.json"), settings=settings).convert(CONTAINER)
    names = [f.file_name for f in result.files]
    assert "styles.module.css" in names
    assert "styles.container" in _components(result)["Container.tsx"]
