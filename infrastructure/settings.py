"""Settings access helpers for JSON-based configuration.

A settings file only needs the keys it wants to change; everything else falls
back to `DEFAULT_SETTINGS`.
"""

from __future__ import annotations

import copy
import json
from pathlib import Path
from typing import Any

from loguru import logger

from core.metadata import DEFAULT_SECTION_LAYOUT, Section, SectionLayout
from core.namespaces import MetadataField
from core.rational import DEFAULT_EPSILON
from core.services.intent_builder import DEFAULT_SOFTWARE
from core.services.sync_policy import DATE_TOLERANCE_SECONDS, LOCATION_TOLERANCE_DEGREES

BASE_DIR = Path(__file__).resolve().parent.parent
DEFAULT_SETTINGS_PATH = BASE_DIR / "settings.json"

DEFAULT_SETTINGS: dict[str, Any] = {
    "product": {"software": DEFAULT_SOFTWARE},
    "sync": {
        "date_tolerance_seconds": DATE_TOLERANCE_SECONDS,
        "location_tolerance_degrees": LOCATION_TOLERANCE_DEGREES,
    },
    "rational": {"epsilon": DEFAULT_EPSILON},
    "display": {
        "sections": [
            {"title": section.value, "fields": [f.value for f in fields]}
            for section, fields in DEFAULT_SECTION_LAYOUT
        ]
    },
    "logging": {"level": "INFO", "dir": None},
}


def _merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(base.get(key), dict):
            _merge(base[key], value)
        else:
            base[key] = value
    return base


class JsonSettings:
    """JSON settings reader with dotted-key access layered over defaults."""

    def __init__(self, settings_path: str | Path | None = None) -> None:
        self._data: dict[str, Any] = copy.deepcopy(DEFAULT_SETTINGS)
        self._path = Path(settings_path) if settings_path is not None else None
        if self._path is None:
            return
        if not self._path.exists():
            raise FileNotFoundError(f"settings.json not found: {self._path}")
        with self._path.open("r", encoding="utf-8") as f:
            loaded = json.load(f)
        if not isinstance(loaded, dict):
            raise ValueError(f"settings must be a JSON object: {self._path}")
        _merge(self._data, loaded)

    def get(self, key: str, default: Any | None = None) -> Any:
        """Return value for dotted `key`, or `default` if not present."""
        parts = key.split(".")
        node: Any = self._data
        for part in parts:
            if isinstance(node, dict) and part in node:
                node = node[part]
            else:
                return default
        return node

    def get_float(self, key: str, default: float) -> float:
        try:
            return float(self.get(key, default))
        except (TypeError, ValueError):
            logger.warning("Invalid number for setting {}; using {}", key, default)
            return default

    @property
    def software(self) -> str:
        return str(self.get("product.software", DEFAULT_SOFTWARE) or DEFAULT_SOFTWARE)

    @property
    def date_tolerance(self) -> float:
        return self.get_float("sync.date_tolerance_seconds", DATE_TOLERANCE_SECONDS)

    @property
    def location_tolerance(self) -> float:
        return self.get_float("sync.location_tolerance_degrees", LOCATION_TOLERANCE_DEGREES)

    @property
    def rational_epsilon(self) -> float:
        return self.get_float("rational.epsilon", DEFAULT_EPSILON)

    def section_layout(self) -> SectionLayout:
        """Parse `display.sections`; unknown titles or fields are skipped with a warning."""
        raw = self.get("display.sections", [])
        layout: list[tuple[Section, tuple[MetadataField, ...]]] = []
        if not isinstance(raw, list):
            logger.warning("display.sections is not a list; using defaults")
            return DEFAULT_SECTION_LAYOUT
        for item in raw:
            if not isinstance(item, dict):
                continue
            try:
                section = Section(item.get("title"))
            except ValueError:
                logger.warning("Unknown display section: {}", item.get("title"))
                continue
            fields: list[MetadataField] = []
            for name in item.get("fields", []) or []:
                try:
                    fields.append(MetadataField(name))
                except ValueError:
                    logger.warning("Unknown field {} in section {}", name, section.value)
            layout.append((section, tuple(fields)))
        return tuple(layout)


def load_settings(settings_path: str | Path | None = None) -> JsonSettings:
    """Load `settings_path`, or the project's `settings.json` when none is given.

    An explicit path must exist. The conventional file is optional; without it
    the built-in defaults apply.
    """
    if settings_path is not None:
        return JsonSettings(settings_path)
    if DEFAULT_SETTINGS_PATH.exists():
        logger.debug("Loading settings from {}", DEFAULT_SETTINGS_PATH)
        return JsonSettings(DEFAULT_SETTINGS_PATH)
    logger.warning("No settings.json at {}; using defaults", DEFAULT_SETTINGS_PATH)
    return JsonSettings()
