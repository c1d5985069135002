from __future__ import annotations

import json
from pathlib import Path

import pytest

from core.metadata import DEFAULT_SECTION_LAYOUT, Section
from core.namespaces import MetadataField
from infrastructure import settings as settings_module
from infrastructure.settings import DEFAULT_SETTINGS_PATH, JsonSettings, load_settings


def _write(tmp_path: Path, data: object) -> Path:
    path = tmp_path / "settings.json"
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


def test_defaults_without_file() -> None:
    settings = JsonSettings()
    assert settings.software == "PhotoMeta"
    assert settings.date_tolerance == 1.0
    assert settings.location_tolerance == 1e-5
    assert settings.rational_epsilon == 1e-6
    assert tuple(settings.section_layout()) == tuple(
        (section, tuple(fields)) for section, fields in DEFAULT_SECTION_LAYOUT
    )


def test_file_overrides_are_layered(tmp_path: Path) -> None:
    settings = JsonSettings(
        _write(tmp_path, {"product": {"software": "MyApp"}, "sync": {"date_tolerance_seconds": 2}})
    )
    assert settings.software == "MyApp"
    assert settings.date_tolerance == 2.0
    # Untouched sibling keys keep their defaults
    assert settings.location_tolerance == 1e-5
    assert settings.get("logging.level") == "INFO"
    assert settings.get("missing.key", "fallback") == "fallback"


def test_invalid_number_falls_back(tmp_path: Path) -> None:
    settings = JsonSettings(_write(tmp_path, {"rational": {"epsilon": "tiny"}}))
    assert settings.rational_epsilon == 1e-6


def test_missing_file_raises(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        JsonSettings(tmp_path / "nope.json")


def test_non_object_raises(tmp_path: Path) -> None:
    with pytest.raises(ValueError):
        JsonSettings(_write(tmp_path, [1, 2, 3]))


def test_section_layout_skips_unknown_entries(tmp_path: Path) -> None:
    settings = JsonSettings(
        _write(
            tmp_path,
            {
                "display": {
                    "sections": [
                        {"title": "GEAR", "fields": ["make", "bogus", "lens-model"]},
                        {"title": "NOT A SECTION", "fields": ["iso"]},
                    ]
                }
            },
        )
    )
    assert settings.section_layout() == (
        (Section.GEAR, (MetadataField.MAKE, MetadataField.LENS_MODEL)),
    )


def test_project_settings_file_is_loaded_by_default() -> None:
    assert DEFAULT_SETTINGS_PATH.name == "settings.json"
    assert DEFAULT_SETTINGS_PATH.exists()
    settings = load_settings()
    assert settings.software == "PhotoMeta"
    assert settings.get("logging.level") == "INFO"


def test_load_settings_reads_conventional_path(monkeypatch, tmp_path: Path) -> None:
    path = _write(tmp_path, {"product": {"software": "FromProjectFile"}})
    monkeypatch.setattr(settings_module, "DEFAULT_SETTINGS_PATH", path)
    assert load_settings().software == "FromProjectFile"


def test_load_settings_without_project_file_uses_defaults(monkeypatch, tmp_path: Path) -> None:
    monkeypatch.setattr(settings_module, "DEFAULT_SETTINGS_PATH", tmp_path / "absent.json")
    settings = load_settings()
    assert settings.software == "PhotoMeta"
    assert settings.date_tolerance == 1.0


def test_load_settings_explicit_path_must_exist(tmp_path: Path) -> None:
    assert load_settings(_write(tmp_path, {"rational": {"epsilon": 0.01}})).rational_epsilon == 0.01
    with pytest.raises(FileNotFoundError):
        load_settings(tmp_path / "missing.json")
