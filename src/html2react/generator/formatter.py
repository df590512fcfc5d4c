"""Best-effort source formatting through an external ``prettier`` binary.

``format_source`` never raises: when formatting is disabled, the binary is
missing, or the run fails, the input is returned unchanged.
"""

from __future__ import annotations

import logging
import shutil
import subprocess

from html2react.feature_logger import log_error_policy, log_feature_decision
from html2react.model.options import FormattingOptions

logger = logging.getLogger(__name__)

FORMATTER_TIMEOUT = 30.0

_PARSERS = {
    "jsx": "babel",
    "js": "babel",
    "tsx": "typescript",
    "ts": "typescript",
    "css": "css",
    "json": "json",
    "md": "markdown",
    "html": "html",
}


def find_prettier() -> str | None:
    return shutil.which("prettier")


def prettier_command(executable: str, kind: str, options: FormattingOptions) -> list[str]:
    cmd = [
        executable,
        "--parser",
        _PARSERS.get(kind, "babel"),
        "--print-width",
        str(options.print_width),
        "--tab-width",
        str(options.indent_size),
        "--trailing-comma",
        options.trailing_comma,
    ]
    if options.single_quote:
        cmd.append("--single-quote")
    if not options.semi:
        cmd.append("--no-semi")
    return cmd


def format_source(source: str, kind: str, options: FormattingOptions | None = None) -> str:
    """Format ``source`` of the given ``kind`` (jsx, tsx, css, json, ...)."""
    options = options or FormattingOptions()
    if not options.prettier:
        return source
    executable = find_prettier()
    if executable is None:
        log_feature_decision("Formatter", "fallback", {"reason": "prettier not found"})
        return source
    try:
        completed = subprocess.run(
            prettier_command(executable, kind, options),
            input=source,
            capture_output=True,
            text=True,
            check=True,
            timeout=FORMATTER_TIMEOUT,
        )
    except subprocess.CalledProcessError as exc:
        log_error_policy("Formatter", "format_failed", "identity", (exc.stderr or "").strip()[:200])
        return source
    except (OSError, subprocess.TimeoutExpired) as exc:
        log_error_policy("Formatter", "format_failed", "identity", str(exc))
        return source
    return completed.stdout or source


__all__ = ["find_prettier", "format_source", "prettier_command"]
