from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml

from jsoncompare.core.errors import SettingsError
from jsoncompare.core.settings import CompareSettings, DetectorSettings

_TOP_LEVEL_KEYS = {"detector", "ignore_patterns"}
_DETECTOR_KEYS = {"min_object_proportion", "min_overlap_ratio", "preferred_keys", "max_composite_size"}


def _load_yaml(path: Path) -> dict[str, Any]:
    try:
        loaded = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as exc:
        raise SettingsError(f"Settings file is not valid YAML: {path}: {exc}") from exc
    if loaded is None:
        return {}
    if not isinstance(loaded, dict):
        raise SettingsError(f"Settings file must be a mapping: {path}")
    return loaded


def _reject_unknown(raw: dict[str, Any], allowed: set[str], *, section: str) -> None:
    unknown = sorted(str(key) for key in raw if key not in allowed)
    if unknown:
        raise SettingsError(f"Unknown {section} setting(s): {', '.join(unknown)}")


def _parse_string_list(raw: Any, *, field_name: str) -> tuple[str, ...]:
    if raw is None:
        return ()
    if not isinstance(raw, list):
        raise SettingsError(f"{field_name} must be a list")
    if not all(isinstance(item, str) for item in raw):
        raise SettingsError(f"{field_name} entries must be strings")
    return tuple(raw)


def _parse_detector(raw: Any) -> DetectorSettings:
    if raw is None:
        return DetectorSettings()
    if not isinstance(raw, dict):
        raise SettingsError("detector must be a mapping")
    _reject_unknown(raw, _DETECTOR_KEYS, section="detector")

    defaults = DetectorSettings()
    preferred_raw = raw.get("preferred_keys")
    return DetectorSettings(
        min_object_proportion=raw.get("min_object_proportion", defaults.min_object_proportion),
        min_overlap_ratio=raw.get("min_overlap_ratio", defaults.min_overlap_ratio),
        preferred_keys=(
            _parse_string_list(preferred_raw, field_name="detector.preferred_keys")
            if preferred_raw is not None
            else defaults.preferred_keys
        ),
        max_composite_size=raw.get("max_composite_size", defaults.max_composite_size),
    )


def parse_settings(data: dict[str, Any]) -> CompareSettings:
    if not isinstance(data, dict):
        raise SettingsError("settings must be a mapping")
    _reject_unknown(data, _TOP_LEVEL_KEYS, section="top-level")
    return CompareSettings(
        detector=_parse_detector(data.get("detector")),
        ignore_patterns=_parse_string_list(data.get("ignore_patterns"), field_name="ignore_patterns"),
    )


def load_settings(path: Path) -> CompareSettings:
    return parse_settings(_load_yaml(path))


__all__ = ["load_settings", "parse_settings"]
