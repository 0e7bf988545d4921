"""Dual HashMap symbol table: package-scoped index + file index."""

from __future__ import annotations

from typing import Protocol

from unitgen.config import TypeDeclaration


class SymbolLookup(Protocol):
    """Answers which top-level type names a package declares."""

    def types_in_package(self, package: str) -> list[str]:
        ...


class PackageSymbolTable:
    """Dual HashMap for top-level type lookups.

    package_index: package -> type_name -> TypeDeclaration
    file_index: file_path -> list[TypeDeclaration]
    """

    def __init__(self) -> None:
        self.package_index: dict[str, dict[str, TypeDeclaration]] = {}
        self.file_index: dict[str, list[TypeDeclaration]] = {}

    def add(self, decl: TypeDeclaration) -> None:
        # Package index; the first declaration of a name in a package is kept
        if decl.package not in self.package_index:
            self.package_index[decl.package] = {}
        self.package_index[decl.package].setdefault(decl.name, decl)

        # File index
        if decl.file not in self.file_index:
            self.file_index[decl.file] = []
        self.file_index[decl.file].append(decl)

    def types_in_package(self, package: str) -> list[str]:
        """Return the sorted top-level type names declared in a package."""
        return sorted(self.package_index.get(package, {}))

    def lookup(self, package: str, name: str) -> TypeDeclaration | None:
        """Look up a type by package and simple name."""
        types = self.package_index.get(package)
        if types:
            return types.get(name)
        return None

    def packages(self) -> list[str]:
        return sorted(self.package_index)

    def files_for_package(self, package: str) -> list[str]:
        """Return the files that declare types in the given package."""
        types = self.package_index.get(package, {})
        return sorted({decl.file for decl in types.values()})

    def get_types_in_file(self, file_path: str) -> list[TypeDeclaration]:
        return self.file_index.get(file_path, [])

    def __len__(self) -> int:
        return sum(len(types) for types in self.package_index.values())
