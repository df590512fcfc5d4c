"""Assemble generated files, assets and scaffolding into one zip archive.

The archive is byte-for-byte reproducible: entries are sorted, timestamps
and permissions are fixed, and scaffolding JSON is rendered with a stable
key order.
"""

from __future__ import annotations

import io
import json
import logging
import re
import zipfile
from dataclasses import dataclass, field
from pathlib import Path, PurePosixPath

from html2react import __version__
from html2react.builder.files import atomic_write_bytes
from html2react.builder.templating import Templates, create_environment
from html2react.errors import PackagingError
from html2react.ids import content_hash
from html2react.model.options import CssStrategy, OutputFormat, PackageOptions
from html2react.model.output import FileKind, GeneratedFile

logger = logging.getLogger(__name__)

ZIP_TIMESTAMP = (1980, 1, 1, 0, 0, 0)
FILE_MODE = 0o644 << 16

REACT_VERSION = "^18.3.1"
VITE_VERSION = "^5.4.0"
VITE_REACT_PLUGIN_VERSION = "^4.3.1"
TYPESCRIPT_VERSION = "^5.5.0"
TAILWIND_VERSION = "^3.4.0"

_SLUG_RE = re.compile(r"[^a-z0-9]+")


@dataclass(slots=True)
class ScaffoldContext:
    """What the scaffolding needs to know about the generated project."""

    entry_point: str | None = "Component"
    output_format: OutputFormat = OutputFormat.JSX
    css_strategy: CssStrategy = CssStrategy.VANILLA
    stylesheet: str | None = None
    title: str | None = None
    lang: str = "en"
    source_html: str | None = None


@dataclass(slots=True)
class ArchiveResult:
    data: bytes
    size: int
    entries: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    checksum: str | None = None


def slugify(text: str) -> str:
    slug = _SLUG_RE.sub("-", (text or "").lower()).strip("-")
    return slug or "react-app"


def compute_checksum(data: bytes) -> str:
    return content_hash(data, length=64)


def validate_entry_path(path: str) -> str:
    """Reject absolute, parent-escaping and backslash archive paths."""
    if not path or path.startswith("/") or "\\" in path or re.match(r"^[A-Za-z]:", path):
        raise PackagingError(f"Invalid archive path: {path!r}")
    if any(part in ("..", "") for part in path.split("/")):
        raise PackagingError(f"Invalid archive path: {path!r}")
    return path


def package_json(options: PackageOptions, scaffold: ScaffoldContext) -> str:
    typed = scaffold.output_format is OutputFormat.TSX
    dev_dependencies = {
        "@vitejs/plugin-react": VITE_REACT_PLUGIN_VERSION,
        "vite": VITE_VERSION,
    }
    if typed:
        dev_dependencies.update(
            {
                "@types/react": "^18.3.3",
                "@types/react-dom": "^18.3.0",
                "typescript": TYPESCRIPT_VERSION,
            }
        )
    if scaffold.css_strategy is CssStrategy.TAILWIND:
        dev_dependencies.update(
            {"autoprefixer": "^10.4.19", "postcss": "^8.4.38", "tailwindcss": TAILWIND_VERSION}
        )
    manifest = {
        "name": slugify(options.project_name),
        "private": True,
        "version": "0.1.0",
        "type": "module",
        "scripts": {
            "dev": "vite",
            "build": "tsc && vite build" if typed else "vite build",
            "preview": "vite preview",
        },
        "dependencies": {"react": REACT_VERSION, "react-dom": REACT_VERSION},
        "devDependencies": dict(sorted(dev_dependencies.items())),
    }
    return json.dumps(manifest, indent=2) + "\n"


def tsconfig_files() -> dict[str, str]:
    tsconfig = {
        "compilerOptions": {
            "target": "ES2020",
            "useDefineForClassFields": True,
            "lib": ["ES2020", "DOM", "DOM.Iterable"],
            "module": "ESNext",
            "skipLibCheck": True,
            "moduleResolution": "bundler",
            "allowImportingTsExtensions": True,
            "resolveJsonModule": True,
            "isolatedModules": True,
            "noEmit": True,
            "jsx": "react-jsx",
            "strict": True,
        },
        "include": ["src"],
        "references": [{"path": "./tsconfig.node.json"}],
    }
    node = {
        "compilerOptions": {
            "composite": True,
            "skipLibCheck": True,
            "module": "ESNext",
            "moduleResolution": "bundler",
            "allowSyntheticDefaultImports": True,
        },
        "include": ["vite.config.ts"],
    }
    return {
        "tsconfig.json": json.dumps(tsconfig, indent=2) + "\n",
        "tsconfig.node.json": json.dumps(node, indent=2) + "\n",
    }


def vite_config() -> str:
    return (
        "import { defineConfig } from 'vite';\n"
        "import react from '@vitejs/plugin-react';\n\n"
        "export default defineConfig({\n"
        "  plugins: [react()],\n"
        "});\n"
    )


def tailwind_files(source_dir: str) -> dict[str, str]:
    content_glob = f"./{source_dir}/**/*.{{js,jsx,ts,tsx}}" if source_dir else "./**/*.{js,jsx,ts,tsx}"
    return {
        "tailwind.config.js": (
            "/** @type {import('tailwindcss').Config} */\n"
            "export default {\n"
            f"  content: ['./index.html', '{content_glob}'],\n"
            "  theme: {\n    extend: {},\n  },\n  plugins: [],\n};\n"
        ),
        "postcss.config.js": (
            "export default {\n  plugins: {\n    tailwindcss: {},\n    autoprefixer: {},\n  },\n};\n"
        ),
    }


class Packager:
    def __init__(self, options: PackageOptions | None = None, templates: Templates | None = None) -> None:
        self.options = options or PackageOptions()
        self.templates = templates or create_environment()

    @property
    def source_dir(self) -> str:
        return "src" if self.options.use_src_directory else ""

    def _under_source(self, *parts: str) -> str:
        return str(PurePosixPath(self.source_dir, *parts)) if self.source_dir else str(PurePosixPath(*parts))

    def layout(
        self,
        files: list[GeneratedFile],
        assets: dict[str, bytes],
        scaffold: ScaffoldContext,
    ) -> tuple[dict[str, bytes], list[str]]:
        """Map every output to its archive path."""
        entries: dict[str, bytes] = {}
        warnings: list[str] = []

        def put(path: str, data: str | bytes) -> None:
            path = validate_entry_path(path)
            if path in entries:
                warnings.append(f"Duplicate archive entry replaced: {path}")
            entries[path] = data.encode("utf-8") if isinstance(data, str) else data

        components: list[dict[str, str]] = []
        for file in files:
            if file.kind is FileKind.STYLE:
                put(self._under_source("styles", file.file_name), file.content)
            elif file.kind in (FileKind.COMPONENT, FileKind.INDEX, FileKind.TYPE):
                put(self._under_source("components", file.file_name), file.content)
                if file.kind is FileKind.COMPONENT:
                    components.append(
                        {"name": PurePosixPath(file.file_name).stem, "file": file.file_name}
                    )
            else:
                put(file.file_name, file.content)

        for output_path, data in sorted(assets.items()):
            put(self._under_source(output_path), data)

        typed = scaffold.output_format is OutputFormat.TSX
        main_name = "main.tsx" if typed else "main.jsx"
        global_stylesheet = (
            scaffold.stylesheet if scaffold.css_strategy is not CssStrategy.CSS_MODULES else None
        )
        put(
            self._under_source(main_name),
            self.templates.render_main(
                {
                    "entry_point": scaffold.entry_point,
                    "global_stylesheet": global_stylesheet,
                    "typed": typed,
                }
            ),
        )
        put(
            "index.html",
            self.templates.render_index_html(
                {
                    "title": scaffold.title or self.options.project_name,
                    "lang": scaffold.lang,
                    "main_path": self._under_source(main_name),
                }
            ),
        )
        put("vite.config.ts" if typed else "vite.config.js", vite_config())
        if self.options.include_package_json:
            put("package.json", package_json(self.options, scaffold))
        if typed:
            for name, content in tsconfig_files().items():
                put(name, content)
        if scaffold.css_strategy is CssStrategy.TAILWIND:
            for name, content in tailwind_files(self.source_dir).items():
                put(name, content)
        if self.options.include_readme:
            put(
                "README.md",
                self.templates.render_readme(
                    {
                        "project_name": self.options.project_name,
                        "version": __version__,
                        "components": components,
                        "entry_point": scaffold.entry_point,
                        "css_strategy": scaffold.css_strategy.value,
                        "stylesheet": scaffold.stylesheet,
                        "assets": sorted(assets),
                    }
                ),
            )
        if self.options.include_source_html and scaffold.source_html is not None:
            put("original.html", scaffold.source_html)
        return entries, warnings

    def build(
        self,
        files: list[GeneratedFile],
        assets: dict[str, bytes] | None = None,
        scaffold: ScaffoldContext | None = None,
    ) -> ArchiveResult:
        entries, warnings = self.layout(files, assets or {}, scaffold or ScaffoldContext())
        buffer = io.BytesIO()
        level = min(max(self.options.compression_level, 0), 9)
        with zipfile.ZipFile(buffer, "w", compression=zipfile.ZIP_DEFLATED, compresslevel=level) as archive:
            for path in sorted(entries):
                info = zipfile.ZipInfo(path, date_time=ZIP_TIMESTAMP)
                info.compress_type = zipfile.ZIP_DEFLATED
                info.external_attr = FILE_MODE
                archive.writestr(info, entries[path], compresslevel=level)
        data = buffer.getvalue()
        checksum = compute_checksum(data) if self.options.compute_checksum else None
        logger.debug("Packed %d entries (%d bytes)", len(entries), len(data))
        return ArchiveResult(
            data=data,
            size=len(data),
            entries=sorted(entries),
            warnings=warnings,
            checksum=checksum,
        )


def build_archive(
    files: list[GeneratedFile],
    assets: dict[str, bytes] | None = None,
    options: PackageOptions | None = None,
    scaffold: ScaffoldContext | None = None,
) -> ArchiveResult:
    return Packager(options).build(files, assets, scaffold)


def write_archive(result: ArchiveResult, path: Path) -> Path:
    atomic_write_bytes(path, result.data)
    return path


__all__ = [
    "ArchiveResult",
    "Packager",
    "ScaffoldContext",
    "build_archive",
    "compute_checksum",
    "package_json",
    "slugify",
    "validate_entry_path",
    "write_archive",
]
