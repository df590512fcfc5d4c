"""Jinja2 templates for the project scaffolding shipped in every archive."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

from jinja2 import Environment, FileSystemLoader, StrictUndefined, select_autoescape

TEMPLATES_DIR = Path(__file__).parent / "templates"


@dataclass(frozen=True)
class Templates:
    env: Environment

    def render_readme(self, context: dict[str, Any]) -> str:
        tpl = self.env.get_template("README.md")
        return str(tpl.render(**context))

    def render_index_html(self, context: dict[str, Any]) -> str:
        tpl = self.env.get_template("index.html")
        return str(tpl.render(**context))

    def render_main(self, context: dict[str, Any]) -> str:
        tpl = self.env.get_template("main.jsx")
        return str(tpl.render(**context))


def create_environment(templates_dir: Path | None = None) -> Templates:
    loader = FileSystemLoader(str(templates_dir or TEMPLATES_DIR))
    env = Environment(
        loader=loader,
        undefined=StrictUndefined,
        autoescape=select_autoescape(["html"]),
        keep_trailing_newline=True,
    )
    return Templates(env=env)


__all__ = ["TEMPLATES_DIR", "Templates", "create_environment"]
