from __future__ import annotations

import subprocess
from typing import Any

import pytest

from html2react.generator import formatter
from html2react.generator.formatter import format_source, prettier_command
from html2react.model.options import FormattingOptions

SOURCE = "export default function A(){return null}\n"


def test_disabled_returns_source_unchanged(monkeypatch: pytest.MonkeyPatch) -> None:
    def fail(*args: Any, **kwargs: Any) -> None:
        raise AssertionError("prettier should not be looked up")

    monkeypatch.setattr(formatter.shutil, "which", fail)
    assert format_source(SOURCE, "jsx") == SOURCE


def test_missing_binary_falls_back(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(formatter.shutil, "which", lambda name: None)
    assert format_source(SOURCE, "jsx", FormattingOptions(prettier=True)) == SOURCE


def test_failed_run_falls_back(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(formatter.shutil, "which", lambda name: "/usr/bin/prettier")

    def boom(cmd: list[str], **kwargs: Any) -> None:
        raise subprocess.CalledProcessError(2, cmd, stderr="SyntaxError")

    monkeypatch.setattr(formatter.subprocess, "run", boom)
    assert format_source(SOURCE, "tsx", FormattingOptions(prettier=True)) == SOURCE


def test_successful_run_returns_formatted(monkeypatch: pytest.MonkeyPatch) -> None:
    calls: list[list[str]] = []
    monkeypatch.setattr(formatter.shutil, "which", lambda name: "/usr/bin/prettier")

    def fake_run(cmd: list[str], **kwargs: Any) -> subprocess.CompletedProcess[str]:
        calls.append(cmd)
        return subprocess.CompletedProcess(cmd, 0, stdout="formatted\n", stderr="")

    monkeypatch.setattr(formatter.subprocess, "run", fake_run)
    assert format_source(SOURCE, "tsx", FormattingOptions(prettier=True)) == "formatted\n"
    assert calls[0][1:3] == ["--parser", "typescript"]


def test_prettier_command_flags() -> None:
    cmd = prettier_command("prettier", "css", FormattingOptions(single_quote=False, semi=False, print_width=100))
    assert cmd[:3] == ["prettier", "--parser", "css"]
    assert "--print-width" in cmd and cmd[cmd.index("--print-width") + 1] == "100"
    assert "--single-quote" not in cmd
    assert "--no-semi" in cmd
