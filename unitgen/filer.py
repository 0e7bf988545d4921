"""Output sinks for generated units."""

from __future__ import annotations

import io
import logging
from pathlib import Path
from typing import Protocol, TextIO

from unitgen.config import QualifiedName
from unitgen.errors import FilerError

logger = logging.getLogger(__name__)


class Filer(Protocol):
    """Creates one writable text stream per generated unit.

    Raises FilerError for a duplicate target and OSError for any other
    failure.
    """

    def create_source_file(self, name: str, originating: object | None = None) -> TextIO:
        ...


def _check_top_level(name: str) -> QualifiedName:
    try:
        qualified = QualifiedName.parse(name)
    except ValueError as e:
        raise FilerError(f"Not a type name: {name!r}") from e
    if not qualified.is_top_level:
        raise FilerError(f"Only top-level types can be written, got {name}")
    return qualified


class DirectoryFiler:
    """Writes ``<root>/<package path>/<Type>.java``."""

    def __init__(self, root: str | Path, extension: str = ".java") -> None:
        self.root = Path(root)
        self.extension = extension
        self._created: dict[str, Path] = {}
        self.originating: dict[str, object | None] = {}

    @property
    def created(self) -> list[Path]:
        return list(self._created.values())

    def path_for(self, name: QualifiedName) -> Path:
        return self.root.joinpath(*name.package, name.simple_name + self.extension)

    def create_source_file(self, name: str, originating: object | None = None) -> TextIO:
        if name in self._created:
            raise FilerError(f"Attempt to recreate a file for type {name}")
        path = self.path_for(_check_top_level(name))
        path.parent.mkdir(parents=True, exist_ok=True)
        sink = open(path, "w", encoding="utf-8", newline="\n")
        self._created[name] = path
        self.originating[name] = originating
        logger.debug(f"Opened {path} for {name}")
        return sink


class MemorySink(io.StringIO):
    """StringIO that keeps its content readable after close()."""

    def __init__(self) -> None:
        super().__init__()
        self.value = ""

    def close(self) -> None:
        if not self.closed:
            self.value = self.getvalue()
        super().close()


class MemoryFiler:
    """Keeps generated units in memory, keyed by type name."""

    def __init__(self) -> None:
        self.sinks: dict[str, MemorySink] = {}
        self.originating: dict[str, object | None] = {}

    def create_source_file(self, name: str, originating: object | None = None) -> TextIO:
        if name in self.sinks:
            raise FilerError(f"Attempt to recreate a file for type {name}")
        _check_top_level(name)
        sink = MemorySink()
        self.sinks[name] = sink
        self.originating[name] = originating
        return sink

    @property
    def sources(self) -> dict[str, str]:
        return {
            name: sink.value if sink.closed else sink.getvalue()
            for name, sink in self.sinks.items()
        }
