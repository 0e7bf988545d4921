"""Abstract base for language analysers."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

import tree_sitter

from unitgen.config import TypeDeclaration


@runtime_checkable
class LanguageAnalyser(Protocol):
    """Protocol that all language analysers must implement."""

    extensions: list[str]
    language_name: str

    def get_language(self) -> tree_sitter.Language:
        """Return the tree-sitter Language object for this analyser."""
        ...

    def extract_package(self, tree: tree_sitter.Tree, source: bytes) -> str:
        """Return the declared package, or '' for the unnamed package."""
        ...

    def extract_types(
        self, tree: tree_sitter.Tree, source: bytes, file_path: str
    ) -> list[TypeDeclaration]:
        """Extract top-level type declarations from a parsed AST."""
        ...
