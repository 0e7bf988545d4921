"""Whole-file lifecycle for one generated unit: preamble, imports, formatted body."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from enum import Enum
from typing import Any, TextIO

from unitgen.config import QualifiedName
from unitgen.errors import FilerError, FormatterError, GenerationError
from unitgen.features import FeatureSet, FeatureType
from unitgen.filer import Filer
from unitgen.formatting import Formatter, JavaFormatter
from unitgen.graph.import_resolver import ImportResolver
from unitgen.graph.symbol_table import SymbolLookup
from unitgen.source import Excerpt, SourceBuilder

logger = logging.getLogger(__name__)

PREAMBLE = "// Autogenerated code. Do not modify.\n"


class WriterState(str, Enum):
    OPEN = "open"
    CLOSED = "closed"


class UnitWriter:
    """Writes one generated type to the sink provided by a filer.

    The body is assembled in memory because the imports must be written
    first but are only known once the body is complete. Implicit bindings
    are seeded before any body text, in this order: the unit itself, its
    nested classes, then the other top-level types of its package. The first
    registration of a simple name wins. Nested classes are deliberately seeded
    before package siblings: inside the unit a member type shadows a sibling
    of the same name, so the sibling is the one printed fully qualified.

    Raises:
        FilerError: the filer refused the target (e.g. a duplicate). This is
            propagated unchanged so callers can downgrade it to a warning;
            every other failure surfaces as GenerationError.
    """

    def __init__(
        self,
        filer: Filer,
        class_to_write: QualifiedName,
        nested_classes: Iterable[QualifiedName] = (),
        originating: object | None = None,
        *,
        symbols: SymbolLookup | None = None,
        formatter: Formatter | None = None,
        features: FeatureSet | None = None,
        builtin_packages: Iterable[str] = ("java.lang",),
    ) -> None:
        self.class_to_write = class_to_write
        self._formatter = formatter if formatter is not None else JavaFormatter()
        self._sink = self._open(filer, class_to_write, originating)
        self._state = WriterState.OPEN

        resolver = ImportResolver(builtin_packages)
        try:
            resolver.add_implicit_binding(class_to_write)
            for nested_class in nested_classes:
                resolver.add_implicit_binding(nested_class)
            if symbols is not None:
                for sibling in symbols.types_in_package(class_to_write.package_name):
                    resolver.add_implicit_binding(QualifiedName(class_to_write.package, (sibling,)))
        except BaseException:
            # The caller never receives a writer to abort
            self._sink.close()
            raise
        self._resolver = resolver
        self._source = SourceBuilder(resolver, features)

    @staticmethod
    def _open(filer: Filer, name: QualifiedName, originating: object | None) -> TextIO:
        try:
            sink = filer.create_source_file(str(name), originating)
        except FilerError:
            raise
        except OSError as e:
            raise GenerationError(f"Cannot create source file for {name}: {e}") from e

        try:
            sink.write(PREAMBLE)
            if name.package:
                sink.write(f"package {name.package_name};\n")
            sink.write("\n")
        except OSError as e:
            sink.close()
            raise GenerationError(f"Cannot write preamble for {name}: {e}") from e
        logger.debug(f"Opened unit {name}")
        return sink

    @property
    def state(self) -> WriterState:
        return self._state

    @property
    def closed(self) -> bool:
        return self._state == WriterState.CLOSED

    @property
    def resolver(self) -> ImportResolver:
        return self._resolver

    @property
    def imports(self) -> list[str]:
        return self._resolver.import_list()

    def add(self, fmt: str, *args: Any) -> UnitWriter:
        self._check_open()
        self._source.add(fmt, *args)
        return self

    def add_line(self, fmt: str, *args: Any) -> UnitWriter:
        self._check_open()
        self._source.add_line(fmt, *args)
        return self

    def add_excerpt(self, excerpt: Excerpt) -> UnitWriter:
        self._check_open()
        self._source.add_excerpt(excerpt)
        return self

    def sub_builder(self) -> SourceBuilder:
        return self._source.sub_builder()

    def feature(self, feature_type: FeatureType) -> Any:
        return self._source.feature(feature_type)

    def current_text(self) -> str:
        return self._source.current_text()

    def close(self) -> None:
        """Write the import block and the formatted body, then release the sink."""
        self._check_open()
        self._state = WriterState.CLOSED
        self._resolver.freeze()
        try:
            imports = self._resolver.import_list()
            if imports:
                for class_import in imports:
                    self._sink.write(f"import {class_import};\n")
                self._sink.write("\n")
            self._sink.write(self._formatter.format_source(self._source.current_text()))
        except FormatterError as e:
            raise GenerationError(f"Cannot format {self.class_to_write}: {e}") from e
        except OSError as e:
            raise GenerationError(f"Cannot write {self.class_to_write}: {e}") from e
        finally:
            self._release()
        logger.debug(f"Closed unit {self.class_to_write} with {len(imports)} imports")

    def abort(self) -> None:
        """Release the sink without writing the body."""
        if self.closed:
            return
        self._state = WriterState.CLOSED
        self._resolver.freeze()
        self._release()
        logger.debug(f"Aborted unit {self.class_to_write}")

    def _check_open(self) -> None:
        if self.closed:
            raise GenerationError(f"Unit {self.class_to_write} is already closed")

    def _release(self) -> None:
        try:
            self._sink.close()
        except OSError as e:
            raise GenerationError(f"Cannot close {self.class_to_write}: {e}") from e

    def __enter__(self) -> UnitWriter:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if exc_type is None:
            self.close()
        else:
            self.abort()
