"""CLI interface for html2react."""

import contextlib
import json
import logging
import signal
from collections.abc import Iterator
from pathlib import Path
from typing import Annotated

import typer

from html2react import __version__
from html2react.builder.packaging import slugify, write_archive
from html2react.generator.formatter import find_prettier
from html2react.model.options import ConversionOptions
from html2react.orchestrator import CancelToken, ConversionStatus, Converter, StageStatus
from html2react.settings import SettingsStore
from html2react.ui.progress import ProgressReporter

app = typer.Typer(
    name="html2react",
    help="Convert HTML mockups into React component projects.",
    no_args_is_help=True,
)


@contextlib.contextmanager
def _cancel_on_interrupt(token: CancelToken) -> Iterator[None]:
    """Turn Ctrl-C into a cooperative cancellation for the duration of the block."""
    try:
        previous = signal.signal(signal.SIGINT, lambda signum, frame: token.cancel())
    except ValueError:
        # Not on the main thread; leave default handling in place
        yield
        return
    try:
        yield
    finally:
        signal.signal(signal.SIGINT, previous)


def _configure_logging(verbose: bool) -> None:
    if not verbose:
        return
    from rich.logging import RichHandler

    logging.basicConfig(
        level=logging.DEBUG,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(rich_tracebacks=True, show_path=False)],
    )


@app.command()
def convert(
    html: Annotated[
        Path,
        typer.Argument(
            help="Path to source HTML file",
            exists=True,
            file_okay=True,
            dir_okay=False,
            readable=True,
        ),
    ],
    out: Annotated[
        Path | None,
        typer.Option("--out", "-o", help="Archive path (default: dist/<project>.zip)"),
    ] = None,
    name: Annotated[
        str | None,
        typer.Option("--name", help="Name of the entry component"),
    ] = None,
    format: Annotated[
        str | None,
        typer.Option("--format", help="Output format: 'jsx' or 'tsx'"),
    ] = None,
    css: Annotated[
        str | None,
        typer.Option("--css", help="CSS strategy: 'tailwind', 'css-modules' or 'vanilla'"),
    ] = None,
    extract_styles: Annotated[
        bool | None,
        typer.Option(
            "--extract-styles/--no-extract-styles",
            help="Move inline style attributes into generated classes",
        ),
    ] = None,
    class_to_classname: Annotated[
        bool | None,
        typer.Option(
            "--class-to-classname/--keep-class",
            help="Rename class attributes to className (default: yes)",
        ),
    ] = None,
    split: Annotated[
        bool | None,
        typer.Option("--split/--no-split", help="Split the page into components (default: yes)"),
    ] = None,
    download_assets: Annotated[
        bool | None,
        typer.Option(
            "--download-assets/--no-download-assets",
            help="Fetch remote images, fonts and scripts into the archive (default: no)",
        ),
    ] = None,
    include_source: Annotated[
        bool,
        typer.Option("--include-source", help="Add the source HTML to the archive as original.html"),
    ] = False,
    checksum: Annotated[
        bool,
        typer.Option("--checksum", help="Print a SHA-256 digest of the archive"),
    ] = False,
    settings_path: Annotated[
        Path | None,
        typer.Option("--settings", help="Settings file to read defaults from"),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Show debug logging"),
    ] = False,
) -> None:
    """
    Convert an HTML mockup into a zipped React project.

    Examples:

        # Defaults from the settings file
        html2react convert mockup.html

        # JSX with Tailwind, written to a custom path
        html2react convert mockup.html --format jsx --css tailwind --out site.zip
    """
    _configure_logging(verbose)
    try:
        options = ConversionOptions.from_cli(
            name=name,
            format=format,
            css=css,
            extract_styles=extract_styles,
            class_to_classname=class_to_classname,
            split=split,
            download_assets=download_assets,
            include_source=include_source or None,
            checksum=checksum or None,
        )
    except ValueError as exc:
        typer.echo(f"Error: {exc}")
        raise typer.Exit(1) from exc

    try:
        markup = html.read_text(encoding="utf-8")
    except UnicodeDecodeError as exc:
        typer.echo(f"Error: {html} is not valid UTF-8 ({exc.reason})")
        raise typer.Exit(1) from exc
    store = SettingsStore(settings_path)
    converter = Converter(store)
    token = CancelToken()

    typer.echo(f"📄 Converting HTML: {html}")
    with _cancel_on_interrupt(token), ProgressReporter() as pr:
        result = converter.convert(markup, options, cancel=token, on_progress=pr.emit)

    for stage in result.stages:
        marker = "✅" if stage.status is StageStatus.COMPLETE else "❌"
        typer.echo(f"{marker} {stage.name.value:<9} {stage.duration * 1000:8.1f} ms  {stage.message}")
    for warning in result.warnings:
        typer.echo(f"⚠️  {warning}")

    if result.status is ConversionStatus.CANCELLED:
        typer.echo(f"\n⏹️  {result.message}")
        raise typer.Exit(1)
    if result.status is ConversionStatus.ERROR or result.archive is None:
        typer.echo(f"\n❌ {result.message}")
        raise typer.Exit(1)

    project = options.project_name or store.load().advanced.project_name
    target = out or Path("dist") / f"{slugify(project)}.zip"
    write_archive(result.archive, target)
    stats = result.stats
    typer.echo(
        f"\n✅ Wrote {target} ({result.archive.size} bytes): "
        f"{stats.components} components, {stats.total_files} files, {stats.assets} assets "
        f"in {stats.processing_time:.2f}s"
    )
    if result.archive.checksum:
        typer.echo(f"🔒 SHA-256: {result.archive.checksum}")


@app.command()
def settings(
    show: Annotated[bool, typer.Option("--show", help="Print the stored settings")] = False,
    reset: Annotated[bool, typer.Option("--reset", help="Restore built-in defaults")] = False,
    settings_path: Annotated[
        Path | None,
        typer.Option("--settings", help="Settings file location"),
    ] = None,
) -> None:
    """Show or reset the stored conversion defaults."""
    store = SettingsStore(settings_path)
    if reset:
        store.reset()
        typer.echo(f"Settings reset: {store.path}")
    if show or not reset:
        typer.echo(json.dumps(store.load().to_dict(), indent=2))


@app.command()
def version() -> None:
    """Show version information."""
    typer.echo(f"html2react version {__version__}")


def version_callback(value: bool) -> None:
    """Version callback for --version flag."""
    if value:
        typer.echo(f"html2react version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            callback=version_callback,
            is_eager=True,
            help="Show version and exit",
        ),
    ] = None,
) -> None:
    """
    html2react - Convert HTML mockups into React component projects.

    Features:
    - Splits pages into components from semantic tags, repeating patterns and classes
    - Generates JSX or TypeScript (TSX) with inferred props
    - Tailwind, CSS Modules or plain CSS output
    - Extracts and deduplicates images, fonts and scripts

    For detailed usage, run: html2react convert --help
    """
    pass


@app.command()
def doctor() -> None:
    """Report optional tool availability and the settings location."""
    prettier = find_prettier()
    typer.echo(f"prettier: {prettier or 'not found (output is left unformatted)'}")
    store = SettingsStore()
    state = "exists" if store.path.exists() else "not created yet"
    typer.echo(f"settings: {store.path} ({state})")


if __name__ == "__main__":  # pragma: no cover - executed only via `python -m`
    app()
