"""Simple-name bindings for one generated unit: short name or fully qualified."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from unitgen.config import Binding, BindingKind, QualifiedName
from unitgen.errors import GenerationError

logger = logging.getLogger(__name__)


class ImportResolver:
    """Decides how each type reference is printed and which imports it needs.

    bindings: simple_name -> Binding

    A simple name is bound at most once and never re-bound. Implicit bindings
    (the unit, its nested classes, its package siblings) are registered before
    the body is generated; explicit bindings are created on the first
    reference to an unclaimed top-level name and become imports. The first
    registration of a simple name wins; every loser is printed fully
    qualified.
    """

    def __init__(self, builtin_packages: Iterable[str] = ("java.lang",)) -> None:
        self._bindings: dict[str, Binding] = {}
        self._builtin_packages = frozenset(builtin_packages)
        self._frozen = False

    @property
    def frozen(self) -> bool:
        return self._frozen

    @property
    def bindings(self) -> dict[str, Binding]:
        return dict(self._bindings)

    def freeze(self) -> None:
        self._frozen = True

    def add_implicit_binding(self, name: QualifiedName) -> None:
        """Make ``name`` usable by its simple name without an import.

        Silently ignored if the simple name already belongs to another type.
        """
        self._check_not_frozen(name)
        key = name.simple_name
        existing = self._bindings.get(key)
        if existing is None:
            self._bindings[key] = Binding(key, name, BindingKind.IMPLICIT)
            logger.debug(f"Implicit binding {key} -> {name}")
        elif existing.qualified_name != name:
            logger.debug(
                f"Implicit binding for {name} rejected: {key} already bound to "
                f"{existing.qualified_name}"
            )

    def resolve(self, name: QualifiedName) -> str:
        """Return the text to print for a reference to ``name``."""
        self._check_not_frozen(name)

        direct = self._bindings.get(name.simple_name)
        if direct is not None and direct.qualified_name == name:
            return name.simple_name

        top_level = name.top_level()
        key = top_level.simple_name
        binding = self._bindings.get(key)
        if binding is not None:
            if binding.qualified_name == top_level:
                return name.nested_path
            if not top_level.package:
                raise GenerationError(
                    f"Cannot refer to {name}: {key} is already bound to "
                    f"{binding.qualified_name} and unnamed-package types have no qualified form"
                )
            return str(name)

        if not top_level.package:
            # Unnamed-package types cannot be imported or qualified further, so
            # the first reference claims the simple name without an import.
            self._bindings[key] = Binding(key, top_level, BindingKind.IMPLICIT)
            logger.debug(f"Implicit binding {key} -> {top_level} (unnamed package)")
            return name.nested_path

        if top_level.package_name in self._builtin_packages:
            return str(name)

        self._bindings[key] = Binding(key, top_level, BindingKind.EXPLICIT)
        logger.debug(f"Explicit binding {key} -> {top_level}")
        return name.nested_path

    def import_list(self) -> list[str]:
        """Fully-qualified names to import, sorted."""
        return sorted(
            str(b.qualified_name)
            for b in self._bindings.values()
            if b.kind == BindingKind.EXPLICIT
        )

    def _check_not_frozen(self, name: QualifiedName) -> None:
        if self._frozen:
            raise GenerationError(f"Cannot bind {name}: the unit has already been closed")
