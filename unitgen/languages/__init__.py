"""Language registry - maps file extensions to language analysers."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from unitgen.languages.base import LanguageAnalyser

_REGISTRY: dict[str, LanguageAnalyser] = {}
_INITIALISED = False


def _init_registry() -> None:
    global _INITIALISED
    if _INITIALISED:
        return

    from unitgen.languages.java import JavaAnalyser

    analysers: list[LanguageAnalyser] = [
        JavaAnalyser(),
    ]

    for analyser in analysers:
        for ext in analyser.extensions:
            _REGISTRY[ext] = analyser

    _INITIALISED = True


def get_analyser(extension: str) -> LanguageAnalyser | None:
    """Get the language analyser for a file extension (e.g. '.java')."""
    _init_registry()
    return _REGISTRY.get(extension)


def get_language(extension: str) -> str | None:
    """Get the language name for a file extension."""
    analyser = get_analyser(extension)
    return analyser.language_name if analyser else None


def supported_extensions() -> set[str]:
    """Return all supported file extensions."""
    _init_registry()
    return set(_REGISTRY.keys())
