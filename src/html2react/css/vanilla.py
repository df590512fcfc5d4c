"""Plain stylesheet strategy: source rules as written plus inline-style classes."""

from __future__ import annotations

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


class VanillaConverter:
    strategy = CssStrategy.VANILLA

    def convert(self, markup: str, options: CssOptions | None = None) -> CssResult:
        options = options or CssOptions()
        collection = collect(markup)
        stats = CssStats(
            elements_processed=collection.elements_processed,
            rules_extracted=len(collection.rules),
        )
        blocks = [render_rule(rule) for rule in collection.rules]
        class_name_map: dict[str, str] = {}
        for class_name, declarations in collection.inline.items():
            stats.inline_styles_converted += 1
            if options.extract_inline:
                blocks.append(render_block(f".{class_name}", [f"{p}: {v};" for p, v in declarations]))
                class_name_map[class_name] = class_name
                stats.classes_generated += 1

        css = join_blocks(blocks)
        file = GeneratedFile(stylesheet_filename(self.strategy, options.target_filename), css, FileKind.STYLE)
        stats.files_created = 1
        return CssResult(css=css, class_name_map=class_name_map, generated_files=[file], stats=stats)


__all__ = ["VanillaConverter"]
