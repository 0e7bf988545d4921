"""Exception types raised while generating a unit."""

from __future__ import annotations


class UnitgenError(Exception):
    """Base class for unitgen errors."""


class FilerError(UnitgenError):
    """The filer refused to create a sink, e.g. for a duplicate output target.

    Callers are expected to downgrade this to a warning.
    """


class FormatterError(UnitgenError):
    """The formatter rejected the generated source."""

    def __init__(self, message: str, line: int | None = None) -> None:
        super().__init__(message if line is None else f"line {line}: {message}")
        self.line = line


class GenerationError(UnitgenError, RuntimeError):
    """Unrecoverable failure: I/O, formatting, or misuse of a writer."""
