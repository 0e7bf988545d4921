"""Capability lookup available to code that generates a unit body."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Callable


@dataclass(frozen=True)
class FeatureType:
    """A named capability with a default used when nothing overrides it.

    ``parse`` converts a raw string value (e.g. from ``--feature key=value``).
    """
    key: str
    default: Any = None
    parse: Callable[[str], Any] | None = None


class FeatureSet:
    """Opaque key -> value capability store."""

    def __init__(self, values: Mapping[str, Any] | None = None) -> None:
        self._values: dict[str, Any] = dict(values or {})

    def get(self, feature: FeatureType) -> Any:
        if feature.key not in self._values:
            return feature.default
        value = self._values[feature.key]
        if feature.parse is not None and isinstance(value, str):
            return feature.parse(value)
        return value

    def with_values(self, **values: Any) -> FeatureSet:
        merged = dict(self._values)
        merged.update(values)
        return FeatureSet(merged)

    def keys(self) -> list[str]:
        return sorted(self._values)


def parse_feature_options(options: tuple[str, ...] | list[str]) -> dict[str, str]:
    """Parse ``KEY=VALUE`` strings; raises ValueError on a missing ``=``."""
    values: dict[str, str] = {}
    for option in options:
        key, sep, value = option.partition("=")
        key = key.strip()
        if not sep or not key:
            raise ValueError(f"Expected KEY=VALUE, got {option!r}")
        values[key] = value.strip()
    return values
