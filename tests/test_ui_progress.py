from __future__ import annotations

from rich.console import Console

from html2react.ui.progress import STAGE_LABELS, ProgressReporter


def _reporter() -> ProgressReporter:
    return ProgressReporter(console=Console(file=None, quiet=True))


def test_progress_stage_flow() -> None:
    with _reporter() as pr:
        pr.emit("stage:start", {"stage": "parse"})
        assert "stage:parse" in pr._tasks
        pr.emit("stage:complete", {"stage": "parse", "message": "Parsed 4 nodes"})
        # stage task finalized and removed
        assert "stage:parse" not in pr._tasks
        task = pr.progress.tasks[0]
        assert task.description == "Parsing HTML: Parsed 4 nodes"
        assert task.completed == 1


def test_progress_stage_error() -> None:
    with _reporter() as pr:
        pr.emit("stage:start", {"stage": "css"})
        pr.emit("stage:error", {"stage": "css", "message": "boom"})
        assert pr._tasks == {}
        assert "failed" in pr.progress.tasks[0].description


def test_progress_downloads_totals() -> None:
    with _reporter() as pr:
        pr.emit("assets:download", {"current": 1, "total": 3, "url": "https://cdn.test/a.png"})
        assert "downloads" in pr._tasks
        assert pr._totals.get("downloads") == 3
        pr.emit("assets:download", {"current": 2, "total": 3, "url": "https://cdn.test/b.png"})
        pr.emit("assets:download", {"current": 3, "total": 3, "url": "https://cdn.test/c.png"})
        assert "downloads" not in pr._tasks
        assert pr.progress.tasks[0].completed == 3


def test_progress_ignores_unknown_events() -> None:
    with _reporter() as pr:
        pr.emit("parse:analyzing", {"nodes": 10})
        pr.emit("stage:complete", {"stage": "zip"})
        assert pr._tasks == {}
        assert pr.progress.tasks == []


def test_every_stage_has_a_label() -> None:
    assert list(STAGE_LABELS) == ["parse", "split", "generate", "css", "assets", "zip"]
