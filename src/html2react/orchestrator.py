"""Run a whole conversion as six timed stages.

parse -> split -> generate -> css -> assets -> zip. Each stage is recorded
with its status and duration whatever the outcome. The first failing stage
halts the remaining ones; cancellation is checked between stages. The
public ``Converter.convert`` never raises: it returns a ``ConversionResult``
holding whatever files and stage log exist at that point.
"""

from __future__ import annotations

import contextlib
import logging
import threading
import time
from collections.abc import Callable
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any

from html2react.assets.extractor import AssetExtractor
from html2react.builder.packaging import ArchiveResult, ScaffoldContext, build_archive
from html2react.css.base import get_converter, stylesheet_filename
from html2react.errors import ConversionCancelled
from html2react.feature_logger import log_conversion_configuration, log_feature_decision
from html2react.generator.jsx import CodeGenerator
from html2react.generator.typed import TypedProps
from html2react.model.assets import AssetExtractionResult
from html2react.model.component import SplitResult
from html2react.model.document import ParsedDocument
from html2react.model.options import (
    AssetOptions,
    ConversionOptions,
    CssOptions,
    CssStrategy,
    GeneratorOptions,
    OutputFormat,
    PackageOptions,
    ParserOptions,
    ProgressCallback,
    SplitterOptions,
)
from html2react.model.output import FileKind, GeneratedFile
from html2react.parser.html_parser import parse
from html2react.settings import AppSettings, SettingsStore, merge_options
from html2react.splitter.names import NameGenerator
from html2react.splitter.splitter import ComponentSplitter

logger = logging.getLogger(__name__)


def is_empty(document: ParsedDocument) -> bool:
    return not document.root.is_element and not document.root.child_ids


class StageName(Enum):
    PARSE = "parse"
    SPLIT = "split"
    GENERATE = "generate"
    CSS = "css"
    ASSETS = "assets"
    ZIP = "zip"


class StageStatus(Enum):
    COMPLETE = "complete"
    ERROR = "error"


class ConversionStatus(Enum):
    SUCCESS = "success"
    ERROR = "error"
    CANCELLED = "cancelled"


class CancelToken:
    """Cooperative cancellation flag, safe to set from another thread or a signal handler."""

    def __init__(self) -> None:
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def raise_if_cancelled(self) -> None:
        if self._event.is_set():
            raise ConversionCancelled("Conversion cancelled")


@dataclass(slots=True)
class ConversionStage:
    name: StageName
    status: StageStatus
    duration: float
    message: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name.value,
            "status": self.status.value,
            "duration": round(self.duration, 4),
            "message": self.message,
        }


@dataclass(slots=True)
class ConversionStats:
    processing_time: float = 0.0
    total_files: int = 0
    components: int = 0
    assets: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "processing_time": round(self.processing_time, 4),
            "total_files": self.total_files,
            "components": self.components,
            "assets": self.assets,
        }


@dataclass(slots=True)
class ConversionResult:
    status: ConversionStatus
    message: str
    files: list[GeneratedFile] = field(default_factory=list)
    stages: list[ConversionStage] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    stats: ConversionStats = field(default_factory=ConversionStats)
    archive: ArchiveResult | None = None
    entry_point: str | None = None

    @property
    def success(self) -> bool:
        return self.status is ConversionStatus.SUCCESS


@dataclass
class ConversionContext:
    """Per-run state threaded through every stage."""

    options: ConversionOptions
    settings: AppSettings
    names: NameGenerator = field(default_factory=NameGenerator)
    cancel: CancelToken = field(default_factory=CancelToken)
    on_progress: ProgressCallback = None
    warnings: list[str] = field(default_factory=list)
    files: dict[str, GeneratedFile] = field(default_factory=dict)
    stages: list[ConversionStage] = field(default_factory=list)
    document: ParsedDocument | None = None
    split: SplitResult | None = None
    assets: AssetExtractionResult | None = None
    asset_bundle: dict[str, bytes] = field(default_factory=dict)
    entry_point: str | None = None
    archive: ArchiveResult | None = None

    def require_document(self) -> ParsedDocument:
        if self.document is None:
            raise RuntimeError("No parsed document; the parse stage has not run")
        return self.document

    def require_split(self) -> SplitResult:
        if self.split is None:
            raise RuntimeError("No split result; the split stage has not run")
        return self.split

    def add_file(self, file: GeneratedFile) -> None:
        # Keyed by name: a later stylesheet replaces an earlier one
        self.files[file.file_name] = file

    def emit(self, event: str, payload: dict[str, int | str]) -> None:
        if self.on_progress is not None:
            with contextlib.suppress(Exception):
                self.on_progress(event, payload)


class Converter:
    """Entry point for one or more independent conversions."""

    def __init__(self, settings_store: SettingsStore | None = None, settings: AppSettings | None = None) -> None:
        self.settings_store = settings_store
        self._settings = settings

    def load_settings(self) -> AppSettings:
        if self._settings is not None:
            return self._settings
        if self.settings_store is not None:
            return self.settings_store.load()
        return AppSettings()

    def convert(
        self,
        markup: str,
        options: ConversionOptions | None = None,
        cancel: CancelToken | None = None,
        on_progress: ProgressCallback = None,
    ) -> ConversionResult:
        started = time.perf_counter()
        try:
            settings = self.load_settings()
            context = ConversionContext(
                options=merge_options(settings, options),
                settings=settings,
                cancel=cancel or CancelToken(),
                on_progress=on_progress,
            )
        except Exception as exc:
            logger.exception("Could not prepare conversion")
            return ConversionResult(ConversionStatus.ERROR, f"Conversion failed: {exc}")
        log_conversion_configuration(context.options)

        stages: list[tuple[StageName, Callable[[ConversionContext], str]]] = [
            (StageName.PARSE, lambda ctx: self._parse(ctx, markup)),
            (StageName.SPLIT, self._split),
            (StageName.GENERATE, self._generate),
            (StageName.CSS, lambda ctx: self._css(ctx, markup)),
            (StageName.ASSETS, lambda ctx: self._assets(ctx, markup)),
            (StageName.ZIP, lambda ctx: self._zip(ctx, markup)),
        ]

        status = ConversionStatus.SUCCESS
        message = "Conversion completed successfully"
        for name, run in stages:
            try:
                context.cancel.raise_if_cancelled()
            except ConversionCancelled as exc:
                status = ConversionStatus.CANCELLED
                message = str(exc)
                logger.info("Conversion cancelled before stage %s", name.value)
                break
            context.emit("stage:start", {"stage": name.value})
            stage_started = time.perf_counter()
            try:
                detail = run(context)
            except Exception as exc:
                duration = time.perf_counter() - stage_started
                context.stages.append(ConversionStage(name, StageStatus.ERROR, duration, str(exc)))
                context.emit("stage:error", {"stage": name.value, "message": str(exc)})
                logger.error("Stage %s failed: %s", name.value, exc, exc_info=True)
                status = ConversionStatus.ERROR
                message = f"Stage '{name.value}' failed: {exc}"
                break
            duration = time.perf_counter() - stage_started
            context.stages.append(ConversionStage(name, StageStatus.COMPLETE, duration, detail))
            context.emit("stage:complete", {"stage": name.value, "message": detail})
            logger.debug("Stage %s completed in %.3fs: %s", name.value, duration, detail)

        files = list(context.files.values())
        stats = ConversionStats(
            processing_time=time.perf_counter() - started,
            total_files=len(files),
            components=sum(1 for f in files if f.kind is FileKind.COMPONENT),
            assets=context.assets.extracted_count if context.assets else 0,
        )
        return ConversionResult(
            status=status,
            message=message,
            files=files,
            stages=context.stages,
            warnings=context.warnings,
            stats=stats,
            archive=context.archive,
            entry_point=context.entry_point,
        )

    def _parse(self, ctx: ConversionContext, markup: str) -> str:
        ctx.document = parse(markup, ParserOptions(on_progress=ctx.on_progress))
        return f"Parsed {ctx.document.metadata.node_count} nodes"

    def _split(self, ctx: ConversionContext) -> str:
        document = ctx.require_document()
        if not ctx.options.enable_splitting:
            ctx.split = SplitResult()
            log_feature_decision("Splitter", "skipped", {"reason": "splitting disabled"})
            return "Splitting disabled"
        ctx.split = ComponentSplitter(SplitterOptions(), names=ctx.names).split(document)
        return f"Found {len(ctx.split.components)} components"

    def _generator_options(self, ctx: ConversionContext) -> GeneratorOptions:
        options = ctx.options
        formatting = ctx.settings.formatting
        if options.prettier is not None and options.prettier != formatting.prettier:
            formatting = replace(formatting, prettier=options.prettier)
        return GeneratorOptions(
            format=options.output_format or OutputFormat.TSX,
            component_name=options.component_name or "Component",
            include_prop_types=bool(options.include_prop_types),
            extract_styles=bool(options.extract_styles),
            convert_class_to_class_name=bool(options.convert_class_to_class_name),
            include_react_import=bool(options.include_react_import),
            css_strategy=options.css_strategy or CssStrategy.VANILLA,
            stylesheet_name=ctx.settings.css.target_filename,
            formatting=formatting,
        )

    def _generate(self, ctx: ConversionContext) -> str:
        document = ctx.require_document()
        split_result = ctx.require_split()
        if is_empty(document):
            log_feature_decision("CodeGenerator", "skipped", {"reason": "empty input"})
            return "Empty input, nothing to generate"
        gen_options = self._generator_options(ctx)
        typed = None
        if gen_options.format is OutputFormat.TSX:
            typed = TypedProps(include_interface=gen_options.include_prop_types)
        generator = CodeGenerator(gen_options, typed)
        if not split_result.components:
            log_feature_decision(
                "CodeGenerator", "fallback", {"reason": "no components", "name": gen_options.component_name}
            )
        result = generator.generate_all(split_result, document)
        for file in result.files:
            ctx.add_file(file)
        ctx.warnings.extend(result.warnings)
        ctx.entry_point = result.entry_point
        count = sum(1 for f in result.files if f.kind is FileKind.COMPONENT)
        return f"Generated {count} component files"

    def _css(self, ctx: ConversionContext, markup: str) -> str:
        strategy = ctx.options.css_strategy or CssStrategy.VANILLA
        css_options = CssOptions(
            target_filename=ctx.settings.css.target_filename,
            extract_inline=bool(ctx.options.extract_styles),
        )
        result = get_converter(strategy).convert(markup, css_options)
        for file in result.generated_files:
            ctx.add_file(file)
        ctx.warnings.extend(result.warnings)
        return f"{strategy.value}: {result.stats.rules_extracted} rules, {result.stats.classes_generated} classes"

    def _assets(self, ctx: ConversionContext, markup: str) -> str:
        extractor = AssetExtractor()
        asset_options = AssetOptions(download_remote=bool(ctx.options.download_assets), on_progress=ctx.on_progress)
        if asset_options.download_remote:
            ctx.assets = extractor.extract_with_download(markup, asset_options)
        else:
            ctx.assets = extractor.extract_from_html(markup, asset_options)
        ctx.asset_bundle = extractor.asset_bundle()
        ctx.warnings.extend(
            f"{w.message} ({w.asset_url})" if w.asset_url else w.message
            for w in ctx.assets.warnings
            if w.severity != "info"
        )
        return f"Found {ctx.assets.total_count} assets, extracted {ctx.assets.extracted_count}"

    def _zip(self, ctx: ConversionContext, markup: str) -> str:
        document = ctx.require_document()
        options = ctx.options
        strategy = options.css_strategy or CssStrategy.VANILLA
        stylesheet = stylesheet_filename(strategy, ctx.settings.css.target_filename)
        scaffold = ScaffoldContext(
            entry_point=ctx.entry_point,
            output_format=options.output_format or OutputFormat.TSX,
            css_strategy=strategy,
            stylesheet=stylesheet if stylesheet in ctx.files else None,
            title=document.metadata.title,
            lang=document.metadata.lang or "en",
            source_html=(ctx.assets.updated_html if ctx.assets and ctx.assets.updated_html else markup),
        )
        package_options = PackageOptions(
            project_name=options.project_name or "react-app-from-html",
            include_source_html=bool(options.include_source_html),
            compute_checksum=bool(options.compute_checksum),
        )
        ctx.archive = build_archive(list(ctx.files.values()), ctx.asset_bundle, package_options, scaffold)
        ctx.warnings.extend(ctx.archive.warnings)
        return f"Packed {len(ctx.archive.entries)} entries ({ctx.archive.size} bytes)"


def convert(
    markup: str,
    options: ConversionOptions | None = None,
    cancel: CancelToken | None = None,
    on_progress: ProgressCallback = None,
) -> ConversionResult:
    """Convert with stored-settings defaults ignored (built-in defaults only)."""
    return Converter().convert(markup, options, cancel, on_progress)


__all__ = [
    "CancelToken",
    "ConversionContext",
    "ConversionResult",
    "ConversionStage",
    "ConversionStats",
    "ConversionStatus",
    "Converter",
    "StageName",
    "StageStatus",
    "convert",
]
