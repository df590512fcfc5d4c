from __future__ import annotations

import io
import json
import zipfile
from pathlib import Path

import pytest

from html2react.builder.packaging import (
    Packager,
    ScaffoldContext,
    build_archive,
    package_json,
    slugify,
    validate_entry_path,
    write_archive,
)
from html2react.errors import PackagingError
from html2react.model.options import CssStrategy, OutputFormat, PackageOptions
from html2react.model.output import FileKind, GeneratedFile

FILES = [
    GeneratedFile("Hero.tsx", "export default function Hero() { return null; }\n", FileKind.COMPONENT),
    GeneratedFile("index.ts", "export { default as Hero } from './Hero';\n", FileKind.INDEX),
    GeneratedFile("styles.css", ".hero {}\n", FileKind.STYLE),
]
TSX = ScaffoldContext(
    entry_point="Hero",
    output_format=OutputFormat.TSX,
    stylesheet="styles.css",
    title="Launch & Learn",
)


def _read(data: bytes) -> dict[str, str]:
    with zipfile.ZipFile(io.BytesIO(data)) as archive:
        return {
            name: archive.read(name).decode("utf-8")
            for name in archive.namelist()
            if not name.startswith("src/assets/")
        }


def test_archive_is_deterministic() -> None:
    first = build_archive(FILES, {"assets/images/logo.png": b"\x89PNG"}, scaffold=TSX)
    second = build_archive(FILES, {"assets/images/logo.png": b"\x89PNG"}, scaffold=TSX)
    assert first.data == second.data
    assert first.size == len(first.data)
    assert first.entries == sorted(first.entries)


def test_tsx_layout() -> None:
    result = build_archive(FILES, {"assets/images/logo.png": b"\x89PNG"}, scaffold=TSX)
    assert result.entries == [
        "README.md",
        "index.html",
        "package.json",
        "src/assets/images/logo.png",
        "src/components/Hero.tsx",
        "src/components/index.ts",
        "src/main.tsx",
        "src/styles/styles.css",
        "tsconfig.json",
        "tsconfig.node.json",
        "vite.config.ts",
    ]
    contents = _read(result.data)
    with zipfile.ZipFile(io.BytesIO(result.data)) as archive:
        assert archive.read("src/assets/images/logo.png") == b"\x89PNG"
    main = contents["src/main.tsx"]
    assert "import Hero from './components/Hero';" in main
    assert "import './styles/styles.css';" in main
    assert "<Hero />" in main
    assert "getElementById('root')!" in main
    assert "<title>Launch &amp; Learn</title>" in contents["index.html"]
    assert 'src="/src/main.tsx"' in contents["index.html"]
    assert "- `Hero` (Hero.tsx) - entry component" in contents["README.md"]
    manifest = json.loads(contents["package.json"])
    assert manifest["name"] == "react-app-from-html"
    assert manifest["scripts"]["build"] == "tsc && vite build"
    assert "typescript" in manifest["devDependencies"]


def test_jsx_tailwind_without_entry() -> None:
    scaffold = ScaffoldContext(entry_point=None, css_strategy=CssStrategy.TAILWIND)
    options = PackageOptions(project_name="My Site!", use_src_directory=False, include_readme=False)
    result = build_archive([], options=options, scaffold=scaffold)
    assert result.entries == [
        "index.html",
        "main.jsx",
        "package.json",
        "postcss.config.js",
        "tailwind.config.js",
        "vite.config.js",
    ]
    contents = _read(result.data)
    assert "./components/" not in contents["main.jsx"]
    assert "{null}" in contents["main.jsx"]
    manifest = json.loads(contents["package.json"])
    assert manifest["name"] == "my-site"
    assert "tailwindcss" in manifest["devDependencies"]
    assert "./**/*.{js,jsx,ts,tsx}" in contents["tailwind.config.js"]


def test_css_modules_stylesheet_is_not_imported_globally() -> None:
    scaffold = ScaffoldContext(
        entry_point="Hero", css_strategy=CssStrategy.CSS_MODULES, stylesheet="styles.module.css"
    )
    main = _read(build_archive(FILES, scaffold=scaffold).data)["src/main.jsx"]
    assert "styles.module.css" not in main


def test_source_html_and_checksum() -> None:
    scaffold = ScaffoldContext(source_html="<p>hi</p>")
    options = PackageOptions(include_source_html=True, compute_checksum=True)
    result = build_archive(FILES, options=options, scaffold=scaffold)
    assert _read(result.data)["original.html"] == "<p>hi</p>"
    assert result.checksum is not None and len(result.checksum) == 64
    assert build_archive(FILES).checksum is None


def test_duplicate_entries_warn() -> None:
    files = [*FILES, GeneratedFile("Hero.tsx", "// again\n", FileKind.COMPONENT)]
    result = Packager().build(files, scaffold=TSX)
    assert result.warnings == ["Duplicate archive entry replaced: src/components/Hero.tsx"]


@pytest.mark.parametrize("path", ["../x", "/abs", "a/../b", "a\\b", "C:/x", "", "a//b"])
def test_invalid_entry_paths_are_rejected(path: str) -> None:
    with pytest.raises(PackagingError):
        validate_entry_path(path)


def test_asset_path_escape_is_rejected() -> None:
    with pytest.raises(PackagingError):
        build_archive([], {"../evil.png": b"x"})


def test_write_archive(tmp_path: Path) -> None:
    result = build_archive(FILES, scaffold=TSX)
    target = write_archive(result, tmp_path / "out" / "site.zip")
    assert target.read_bytes() == result.data


def test_slugify_and_package_json() -> None:
    assert slugify("Hello, World") == "hello-world"
    assert slugify("***") == "react-app"
    manifest = json.loads(package_json(PackageOptions(), ScaffoldContext()))
    assert manifest["scripts"]["build"] == "vite build"
    assert "typescript" not in manifest["devDependencies"]
    assert list(manifest["devDependencies"]) == sorted(manifest["devDependencies"])
