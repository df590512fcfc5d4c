"""Option records for each pipeline stage and for a whole conversion.

Stage options carry concrete defaults. ``ConversionOptions`` is the per-call
record: every field is optional and ``None`` means "use the stored setting".
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from html2react.model.component import PropDefinition
from html2react.model.document import SemanticType


class OutputFormat(Enum):
    """Generated source flavour."""

    JSX = "jsx"
    TSX = "tsx"

    @property
    def extension(self) -> str:
        return f".{self.value}"


class CssStrategy(Enum):
    """Stylesheet output strategy."""

    TAILWIND = "tailwind"
    CSS_MODULES = "css-modules"
    VANILLA = "vanilla"


def _enum_from_cli(enum_cls: type[Enum], value: str, label: str) -> Any:
    try:
        return enum_cls(value)
    except ValueError as exc:
        valid_values = [member.value for member in enum_cls]
        raise ValueError(f"Invalid {label} '{value}'. Valid values: {valid_values}") from exc


ProgressCallback = Callable[[str, dict[str, int | str]], None] | None


@dataclass(slots=True, frozen=True)
class SemanticRule:
    """Custom classification rule; ``selector`` is ``.class``, ``#id``, ``[attr=value]`` or a tag."""

    selector: str
    type: SemanticType
    component_name: str | None = None


@dataclass
class ParserOptions:
    max_depth: int | None = None
    preserve_whitespace: bool = False
    include_comments: bool = False
    semantic_rules: list[SemanticRule] = field(default_factory=list)
    on_progress: ProgressCallback = None


@dataclass
class SplitterOptions:
    min_element_count: int = 3
    max_component_depth: int = 5
    detect_patterns: bool = True
    min_pattern_occurrences: int = 2
    similarity_threshold: float = 0.7
    min_confidence: float = 0.5
    custom_selectors: list[str] = field(default_factory=list)


@dataclass
class FormattingOptions:
    indent_size: int = 2
    print_width: int = 80
    single_quote: bool = True
    trailing_comma: str = "es5"
    semi: bool = True
    prettier: bool = False


@dataclass
class GeneratorOptions:
    format: OutputFormat = OutputFormat.JSX
    component_name: str = "Component"
    include_prop_types: bool = True
    extract_styles: bool = False
    convert_class_to_class_name: bool = True
    include_react_import: bool = True
    custom_imports: list[str] = field(default_factory=list)
    custom_props: list[PropDefinition] = field(default_factory=list)
    css_strategy: CssStrategy = CssStrategy.VANILLA
    stylesheet_name: str = "styles"
    formatting: FormattingOptions = field(default_factory=FormattingOptions)


@dataclass
class CssOptions:
    target_filename: str = "styles"
    # Emit a class rule for every distinct inline style (pairs with GeneratorOptions.extract_styles)
    extract_inline: bool = False


@dataclass
class AssetOptions:
    download_remote: bool = False
    max_file_size: int | None = None
    allowed_mime_types: list[str] | None = None
    blocked_mime_types: list[str] = field(default_factory=list)
    output_directory: str = "assets"
    timeout: float = 10.0
    max_workers: int = 1
    rewrite_html: bool = True
    on_progress: ProgressCallback = None


@dataclass
class PackageOptions:
    project_name: str = "react-app-from-html"
    use_src_directory: bool = True
    include_package_json: bool = True
    include_readme: bool = True
    include_source_html: bool = False
    compression_level: int = 6
    compute_checksum: bool = False


@dataclass
class ConversionOptions:
    """Explicit per-call options. ``None`` defers to stored settings."""

    component_name: str | None = None
    output_format: OutputFormat | None = None
    css_strategy: CssStrategy | None = None
    extract_styles: bool | None = None
    convert_class_to_class_name: bool | None = None
    include_prop_types: bool | None = None
    include_react_import: bool | None = None
    enable_splitting: bool | None = None
    download_assets: bool | None = None
    include_source_html: bool | None = None
    compute_checksum: bool | None = None
    prettier: bool | None = None
    project_name: str | None = None

    @classmethod
    def from_cli(
        cls,
        *,
        name: str | None = None,
        format: str | None = None,
        css: str | None = None,
        extract_styles: bool | None = None,
        class_to_classname: bool | None = None,
        split: bool | None = None,
        download_assets: bool | None = None,
        include_source: bool | None = None,
        checksum: bool | None = None,
    ) -> ConversionOptions:
        """Build ConversionOptions from CLI argument values.

        Raises:
            ValueError: If ``format`` or ``css`` is not a known value
        """
        output_format = _enum_from_cli(OutputFormat, format, "output format") if format else None
        css_strategy = _enum_from_cli(CssStrategy, css, "CSS strategy") if css else None
        return cls(
            component_name=name,
            output_format=output_format,
            css_strategy=css_strategy,
            extract_styles=extract_styles,
            convert_class_to_class_name=class_to_classname,
            enable_splitting=split,
            download_assets=download_assets,
            include_source_html=include_source,
            compute_checksum=checksum,
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization/logging."""
        return {
            "component_name": self.component_name,
            "output_format": self.output_format.value if self.output_format else None,
            "css_strategy": self.css_strategy.value if self.css_strategy else None,
            "extract_styles": self.extract_styles,
            "convert_class_to_class_name": self.convert_class_to_class_name,
            "include_prop_types": self.include_prop_types,
            "include_react_import": self.include_react_import,
            "enable_splitting": self.enable_splitting,
            "download_assets": self.download_assets,
            "include_source_html": self.include_source_html,
            "compute_checksum": self.compute_checksum,
            "prettier": self.prettier,
            "project_name": self.project_name,
        }

    def __repr__(self) -> str:
        explicit = ", ".join(f"{k}={v!r}" for k, v in self.to_dict().items() if v is not None)
        return f"ConversionOptions({explicit})"


__all__ = [
    "AssetOptions",
    "ConversionOptions",
    "CssOptions",
    "CssStrategy",
    "FormattingOptions",
    "GeneratorOptions",
    "OutputFormat",
    "PackageOptions",
    "ParserOptions",
    "ProgressCallback",
    "SemanticRule",
    "SplitterOptions",
]
