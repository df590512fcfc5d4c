"""Rich progress display driven by pipeline progress events."""

from __future__ import annotations

from types import TracebackType

from rich.console import Console
from rich.progress import (
    BarColumn,
    MofNCompleteColumn,
    Progress,
    SpinnerColumn,
    TaskID,
    TextColumn,
    TimeElapsedColumn,
)

STAGE_LABELS = {
    "parse": "Parsing HTML",
    "split": "Splitting components",
    "generate": "Generating code",
    "css": "Converting styles",
    "assets": "Extracting assets",
    "zip": "Packaging archive",
}


class ProgressReporter:
    """Map ``(event, payload)`` callbacks onto rich progress tasks.

    Tasks are keyed by name in ``_tasks``; a stage task is created on
    ``stage:start`` and removed when the stage completes or fails. Asset
    downloads get a bounded task sized from the first ``assets:download``
    payload.
    """

    def __init__(self, console: Console | None = None) -> None:
        self.progress = Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            BarColumn(),
            MofNCompleteColumn(),
            TimeElapsedColumn(),
            console=console,
            transient=False,
        )
        self._tasks: dict[str, TaskID] = {}
        self._totals: dict[str, int] = {}

    def __enter__(self) -> ProgressReporter:
        self.progress.start()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.progress.stop()

    def add_step(self, description: str, total: int | None = None) -> TaskID:
        return self.progress.add_task(description, total=total)

    def finish_task(self, task: TaskID) -> None:
        total = next(t.total for t in self.progress.tasks if t.id == task)
        if total is None:
            self.progress.update(task, total=1, completed=1)
        else:
            self.progress.update(task, completed=total)
        self.progress.stop_task(task)

    def _start(self, name: str, description: str, total: int | None = None) -> None:
        if name in self._tasks:
            return
        self._tasks[name] = self.add_step(description, total=total)
        if total is not None:
            self._totals[name] = total

    def _finish(self, name: str, description: str | None = None) -> None:
        task = self._tasks.pop(name, None)
        if task is None:
            return
        if description:
            self.progress.update(task, description=description)
        self.finish_task(task)

    def emit(self, event: str, payload: dict[str, int | str]) -> None:
        stage = str(payload.get("stage", ""))
        if event == "stage:start":
            self._start(f"stage:{stage}", STAGE_LABELS.get(stage, stage))
        elif event == "stage:complete":
            label = STAGE_LABELS.get(stage, stage)
            message = payload.get("message")
            self._finish(f"stage:{stage}", f"{label}: {message}" if message else label)
        elif event == "stage:error":
            label = STAGE_LABELS.get(stage, stage)
            self._finish(f"stage:{stage}", f"[red]{label} failed[/red]")
        elif event == "assets:download":
            total = int(payload.get("total", 0))
            self._start("downloads", "Downloading assets", total=total)
            self.progress.update(self._tasks["downloads"], completed=int(payload.get("current", 0)))
            if int(payload.get("current", 0)) >= total:
                self._finish("downloads")
