"""CSS Modules strategy.

Selectors are written unchanged; the bundler scopes class names, so the only
extra output is the class -> ``styles.<name>`` reference map used by
components.
"""

from __future__ import annotations

import logging
import re

from html2react.css.base import (
    CssResult,
    CssStats,
    collect,
    join_blocks,
    render_block,
    render_rule,
    stylesheet_filename,
)
from html2react.model.options import CssOptions, CssStrategy
from html2react.model.output import FileKind, GeneratedFile

logger = logging.getLogger(__name__)

HEADER = "/* CSS Modules: class names are scoped per component import */"

_IDENTIFIER_RE = re.compile(r"^[A-Za-z_$][\w$]*$")


def module_reference(class_name: str, binding: str = "styles") -> str:
    """``card`` -> ``styles.card``; ``card-title`` -> ``styles['card-title']``."""
    if _IDENTIFIER_RE.match(class_name):
        return f"{binding}.{class_name}"
    return f"{binding}['{class_name}']"


def class_expression(classes: list[str], binding: str = "styles") -> str:
    """JSX ``className`` expression for one or more module classes."""
    refs = [module_reference(name, binding) for name in classes]
    if len(refs) == 1:
        return refs[0]
    return "[" + ", ".join(refs) + "].join(' ')"


class CssModulesConverter:
    strategy = CssStrategy.CSS_MODULES

    def convert(self, markup: str, options: CssOptions | None = None) -> CssResult:
        options = options or CssOptions()
        collection = collect(markup)
        stats = CssStats(elements_processed=collection.elements_processed)

        blocks = [HEADER]
        blocks.extend(render_rule(rule) for rule in collection.rules)
        stats.rules_extracted = len(collection.rules)

        class_names = set(collection.classes)
        for class_name, declarations in collection.inline.items():
            stats.inline_styles_converted += 1
            if options.extract_inline:
                blocks.append(render_block(f".{class_name}", [f"{p}: {v};" for p, v in declarations]))
                class_names.add(class_name)
        class_name_map = {name: module_reference(name) for name in sorted(class_names)}
        stats.classes_generated = len(class_name_map)

        css = join_blocks(blocks)
        file = GeneratedFile(stylesheet_filename(self.strategy, options.target_filename), css, FileKind.STYLE)
        stats.files_created = 1
        return CssResult(css=css, class_name_map=class_name_map, generated_files=[file], stats=stats)


__all__ = ["CssModulesConverter", "class_expression", "module_reference"]
