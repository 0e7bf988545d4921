"""Incremental source text builder that routes type references through an ImportResolver."""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

from unitgen.config import QualifiedName
from unitgen.errors import GenerationError
from unitgen.features import FeatureSet, FeatureType
from unitgen.graph.import_resolver import ImportResolver


@runtime_checkable
class Excerpt(Protocol):
    """A reusable piece of source that knows how to write itself."""

    def add_to(self, builder: SourceBuilder) -> None:
        ...


class TemplateExcerpt:
    """Excerpt adding a single ``%``-style template with its arguments."""

    def __init__(self, fmt: str, *args: Any) -> None:
        self.fmt = fmt
        self.args = args

    def add_to(self, builder: SourceBuilder) -> None:
        builder.add(self.fmt, *self.args)

    def __repr__(self) -> str:
        return f"TemplateExcerpt({self.fmt!r})"


class SourceBuilder:
    """Append-only source buffer.

    Templates use ``%s`` placeholders. Arguments are converted before
    substitution:

    - ``QualifiedName``: the resolver's short or fully-qualified text
    - ``SourceBuilder``: its text so far, spliced verbatim
    - ``Excerpt``: rendered into a fresh sub-builder, then spliced
    - anything else: left to ``%`` formatting

    Sub-builders share the resolver, so their references take part in the
    same collision space as the parent's.
    """

    def __init__(self, resolver: ImportResolver, features: FeatureSet | None = None) -> None:
        self._resolver = resolver
        self._features = features if features is not None else FeatureSet()
        self._segments: list[str] = []

    @property
    def resolver(self) -> ImportResolver:
        return self._resolver

    def add(self, fmt: str, *args: Any) -> SourceBuilder:
        self._segments.append(self._format(fmt, args))
        return self

    def add_line(self, fmt: str, *args: Any) -> SourceBuilder:
        text = self._format(fmt, args)
        if not text.endswith("\n"):
            text += "\n"
        self._segments.append(text)
        return self

    def add_excerpt(self, excerpt: Excerpt) -> SourceBuilder:
        excerpt.add_to(self)
        return self

    def sub_builder(self) -> SourceBuilder:
        return SourceBuilder(self._resolver, self._features)

    def feature(self, feature_type: FeatureType) -> Any:
        return self._features.get(feature_type)

    def current_text(self) -> str:
        return "".join(self._segments)

    def __str__(self) -> str:
        return self.current_text()

    def _format(self, fmt: str, args: tuple[Any, ...]) -> str:
        converted = tuple(self._convert(arg) for arg in args)
        try:
            return fmt % converted
        except (TypeError, ValueError, KeyError) as e:
            raise GenerationError(f"Malformed template {fmt!r}: {e}") from e

    def _convert(self, arg: Any) -> Any:
        if isinstance(arg, QualifiedName):
            return self._resolver.resolve(arg)
        if isinstance(arg, SourceBuilder):
            return arg.current_text()
        if isinstance(arg, Excerpt):
            sub = self.sub_builder()
            arg.add_to(sub)
            return sub.current_text()
        return arg
