from __future__ import annotations

from dataclasses import dataclass, field

from jsoncompare.core.constants import (
    MAX_COMPOSITE_KEY_SIZE,
    MIN_OBJECT_PROPORTION,
    MIN_OVERLAP_RATIO,
    PREFERRED_IDENTITY_KEYS,
)
from jsoncompare.core.errors import SettingsError


@dataclass(slots=True, frozen=True)
class DetectorSettings:
    min_object_proportion: float = MIN_OBJECT_PROPORTION
    min_overlap_ratio: float = MIN_OVERLAP_RATIO
    preferred_keys: tuple[str, ...] = PREFERRED_IDENTITY_KEYS
    max_composite_size: int = MAX_COMPOSITE_KEY_SIZE

    def __post_init__(self) -> None:
        for name in ("min_object_proportion", "min_overlap_ratio"):
            ratio = getattr(self, name)
            if isinstance(ratio, bool) or not isinstance(ratio, int | float) or not 0.0 <= ratio <= 1.0:
                raise SettingsError(f"{name} must be a number between 0 and 1, got {ratio!r}")
        if isinstance(self.max_composite_size, bool) or not isinstance(self.max_composite_size, int):
            raise SettingsError("max_composite_size must be an integer")
        if self.max_composite_size < 1:
            raise SettingsError(f"max_composite_size must be at least 1, got {self.max_composite_size}")
        if not all(isinstance(name, str) and name for name in self.preferred_keys):
            raise SettingsError("preferred_keys must be non-empty strings")


@dataclass(slots=True, frozen=True)
class CompareSettings:
    detector: DetectorSettings = field(default_factory=DetectorSettings)
    ignore_patterns: tuple[str, ...] = ()


DEFAULT_COMPARE_SETTINGS = CompareSettings()


__all__ = [
    "DEFAULT_COMPARE_SETTINGS",
    "CompareSettings",
    "DetectorSettings",
]
