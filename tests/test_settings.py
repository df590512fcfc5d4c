from __future__ import annotations

import json
import logging
from pathlib import Path

import pytest

from html2react.model.options import ConversionOptions, CssStrategy, OutputFormat
from html2react.settings import (
    SETTINGS_ENV_VAR,
    AppSettings,
    SettingsStore,
    default_settings_path,
    merge_options,
)


def test_missing_file_loads_defaults(tmp_path: Path) -> None:
    settings = SettingsStore(tmp_path / "settings.json").load()
    assert settings == AppSettings()
    assert settings.component.output_format is OutputFormat.TSX
    assert settings.component.include_prop_types is True
    assert settings.component.include_react_import is False
    assert settings.css.strategy is CssStrategy.VANILLA


def test_invalid_json_falls_back_to_defaults(tmp_path: Path, caplog: pytest.LogCaptureFixture) -> None:
    path = tmp_path / "settings.json"
    path.write_text("{not json", encoding="utf-8")
    with caplog.at_level(logging.WARNING, logger="html2react.settings"):
        assert SettingsStore(path).load() == AppSettings()
    assert "using defaults" in caplog.text

    path.write_text("[1, 2]", encoding="utf-8")
    assert SettingsStore(path).load() == AppSettings()


def test_save_and_load_round_trip(tmp_path: Path) -> None:
    store = SettingsStore(tmp_path / "nested" / "settings.json")
    settings = AppSettings()
    settings.component.name = "Landing"
    settings.css.strategy = CssStrategy.TAILWIND
    settings.formatting.print_width = 100
    store.save(settings)

    stored = json.loads(store.path.read_text(encoding="utf-8"))
    assert stored["css"]["strategy"] == "tailwind"
    assert stored["component"]["output_format"] == "tsx"
    assert store.load() == settings


def test_invalid_entries_keep_defaults(tmp_path: Path) -> None:
    path = tmp_path / "settings.json"
    path.write_text(
        json.dumps(
            {
                "component": {"output_format": "coffee", "name": 42, "extract_styles": True},
                "css": "tailwind",
                "advanced": {"project_name": "shop"},
            }
        ),
        encoding="utf-8",
    )
    settings = SettingsStore(path).load()
    assert settings.component.output_format is OutputFormat.TSX
    assert settings.component.name == "Component"
    assert settings.component.extract_styles is True
    assert settings.css.strategy is CssStrategy.VANILLA
    assert settings.advanced.project_name == "shop"


def test_update_and_reset(tmp_path: Path) -> None:
    store = SettingsStore(tmp_path / "settings.json")
    updated = store.update(css={"strategy": "css-modules"}, advanced={"download_assets": True})
    assert updated.css.strategy is CssStrategy.CSS_MODULES
    assert store.load().advanced.download_assets is True

    with pytest.raises(ValueError, match="Unknown settings group"):
        store.update(colors={"primary": "red"})

    assert store.reset() == AppSettings()
    assert store.load() == AppSettings()


def test_settings_path_from_environment(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    target = tmp_path / "custom.json"
    monkeypatch.setenv(SETTINGS_ENV_VAR, str(target))
    assert default_settings_path() == target
    assert SettingsStore().path == target
    assert SettingsStore(tmp_path / "explicit.json").path == tmp_path / "explicit.json"


def test_merge_options_explicit_values_win() -> None:
    settings = AppSettings()
    settings.css.strategy = CssStrategy.TAILWIND
    settings.advanced.project_name = "shop"

    merged = merge_options(settings, ConversionOptions(output_format=OutputFormat.JSX, extract_styles=False))
    assert merged.output_format is OutputFormat.JSX
    assert merged.css_strategy is CssStrategy.TAILWIND
    assert merged.extract_styles is False
    assert merged.project_name == "shop"
    assert merged.component_name == "Component"

    defaults = merge_options(settings)
    assert defaults.output_format is OutputFormat.TSX
    assert defaults.enable_splitting is True
