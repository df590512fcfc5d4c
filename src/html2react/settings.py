"""Stored conversion defaults.

Settings live in one JSON file grouped as ``component``, ``css``,
``formatting`` and ``advanced``. The store is loaded once per run and the
resulting ``AppSettings`` is passed explicitly through the conversion; there
is no module-level instance.
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import asdict, dataclass, field, fields, replace
from pathlib import Path
from typing import Any

from html2react.builder.files import atomic_write_text
from html2react.model.options import ConversionOptions, CssStrategy, FormattingOptions, OutputFormat

logger = logging.getLogger(__name__)

SETTINGS_ENV_VAR = "HTML2REACT_SETTINGS"
DEFAULT_SETTINGS_PATH = Path.home() / ".config" / "html2react" / "settings.json"


@dataclass
class ComponentSettings:
    name: str = "Component"
    output_format: OutputFormat = OutputFormat.TSX
    include_prop_types: bool = True
    include_react_import: bool = False
    convert_class_to_class_name: bool = True
    extract_styles: bool = False


@dataclass
class CssSettings:
    strategy: CssStrategy = CssStrategy.VANILLA
    target_filename: str = "styles"


@dataclass
class AdvancedSettings:
    enable_splitting: bool = True
    download_assets: bool = False
    include_source_html: bool = False
    compute_checksum: bool = False
    project_name: str = "react-app-from-html"


@dataclass
class AppSettings:
    component: ComponentSettings = field(default_factory=ComponentSettings)
    css: CssSettings = field(default_factory=CssSettings)
    formatting: FormattingOptions = field(default_factory=FormattingOptions)
    advanced: AdvancedSettings = field(default_factory=AdvancedSettings)

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["component"]["output_format"] = self.component.output_format.value
        data["css"]["strategy"] = self.css.strategy.value
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> AppSettings:
        """Build settings from stored JSON, keeping defaults for unknown or invalid entries."""
        settings = cls()
        for group_name in ("component", "css", "formatting", "advanced"):
            raw = data.get(group_name)
            if not isinstance(raw, dict):
                continue
            group = getattr(settings, group_name)
            setattr(settings, group_name, _apply(group, raw, group_name))
        return settings


_ENUM_FIELDS: dict[str, type[OutputFormat] | type[CssStrategy]] = {
    "output_format": OutputFormat,
    "strategy": CssStrategy,
}


def _apply(group: Any, raw: dict[str, Any], group_name: str) -> Any:
    changes: dict[str, Any] = {}
    for f in fields(group):
        if f.name not in raw:
            continue
        value = raw[f.name]
        current = getattr(group, f.name)
        if f.name in _ENUM_FIELDS:
            try:
                value = _ENUM_FIELDS[f.name](value)
            except ValueError:
                logger.warning("Ignoring invalid setting %s.%s=%r", group_name, f.name, value)
                continue
        elif type(value) is not type(current):
            logger.warning("Ignoring invalid setting %s.%s=%r", group_name, f.name, value)
            continue
        changes[f.name] = value
    return replace(group, **changes)


def default_settings_path() -> Path:
    env = os.environ.get(SETTINGS_ENV_VAR)
    return Path(env).expanduser() if env else DEFAULT_SETTINGS_PATH


class SettingsStore:
    """JSON-backed settings file.

    Resolution order for the file location: explicit ``path``, then the
    ``HTML2REACT_SETTINGS`` environment variable, then
    ``~/.config/html2react/settings.json``.
    """

    def __init__(self, path: Path | None = None) -> None:
        self.path = Path(path) if path is not None else default_settings_path()

    def load(self) -> AppSettings:
        if not self.path.exists():
            logger.debug("No settings file at %s; using defaults", self.path)
            return AppSettings()
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            logger.warning("Could not read settings from %s (%s); using defaults", self.path, exc)
            return AppSettings()
        if not isinstance(data, dict):
            logger.warning("Settings file %s is not a JSON object; using defaults", self.path)
            return AppSettings()
        return AppSettings.from_dict(data)

    def save(self, settings: AppSettings) -> Path:
        atomic_write_text(self.path, json.dumps(settings.to_dict(), indent=2) + "\n")
        logger.debug("Saved settings to %s", self.path)
        return self.path

    def update(self, **groups: dict[str, Any]) -> AppSettings:
        """Merge partial groups, e.g. ``update(css={"strategy": "tailwind"})``, and save."""
        current = self.load()
        data = current.to_dict()
        for name, values in groups.items():
            if name not in data:
                raise ValueError(f"Unknown settings group '{name}'. Valid groups: {sorted(data)}")
            data[name].update(values)
        settings = AppSettings.from_dict(data)
        self.save(settings)
        return settings

    def reset(self) -> AppSettings:
        settings = AppSettings()
        self.save(settings)
        return settings


def merge_options(settings: AppSettings, options: ConversionOptions | None = None) -> ConversionOptions:
    """Fill every unset field of ``options`` from ``settings``; explicit values win."""
    options = options or ConversionOptions()
    defaults = ConversionOptions(
        component_name=settings.component.name,
        output_format=settings.component.output_format,
        css_strategy=settings.css.strategy,
        extract_styles=settings.component.extract_styles,
        convert_class_to_class_name=settings.component.convert_class_to_class_name,
        include_prop_types=settings.component.include_prop_types,
        include_react_import=settings.component.include_react_import,
        enable_splitting=settings.advanced.enable_splitting,
        download_assets=settings.advanced.download_assets,
        include_source_html=settings.advanced.include_source_html,
        compute_checksum=settings.advanced.compute_checksum,
        prettier=settings.formatting.prettier,
        project_name=settings.advanced.project_name,
    )
    explicit = {f.name: getattr(options, f.name) for f in fields(options) if getattr(options, f.name) is not None}
    return replace(defaults, **explicit)


__all__ = [
    "AdvancedSettings",
    "AppSettings",
    "ComponentSettings",
    "CssSettings",
    "SettingsStore",
    "default_settings_path",
    "merge_options",
]
