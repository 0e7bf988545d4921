"""Java language analyser."""

from __future__ import annotations

import tree_sitter
import tree_sitter_java as ts_java

from unitgen.config import TypeDeclaration, TypeKind

_TYPE_MAP = {
    "class_declaration": TypeKind.CLASS,
    "interface_declaration": TypeKind.INTERFACE,
    "enum_declaration": TypeKind.ENUM,
    "record_declaration": TypeKind.RECORD,
    "annotation_type_declaration": TypeKind.ANNOTATION,
}


class JavaAnalyser:
    extensions = [".java"]
    language_name = "java"

    def get_language(self) -> tree_sitter.Language:
        return tree_sitter.Language(ts_java.language())

    def extract_package(self, tree: tree_sitter.Tree, source: bytes) -> str:
        for child in tree.root_node.children:
            if child.type == "package_declaration":
                for c in child.children:
                    if c.type in ("scoped_identifier", "identifier"):
                        return c.text.decode("utf-8")
        return ""

    def extract_types(
        self, tree: tree_sitter.Tree, source: bytes, file_path: str
    ) -> list[TypeDeclaration]:
        package = self.extract_package(tree, source)
        types: list[TypeDeclaration] = []
        # Only direct children of the program node are top-level types
        for child in tree.root_node.children:
            kind = _TYPE_MAP.get(child.type)
            if kind is None:
                continue
            name = self._get_name(child)
            if name is None:
                continue
            types.append(TypeDeclaration(
                name=name,
                package=package,
                kind=kind,
                file=file_path,
                line=child.start_point[0] + 1,
            ))
        return types

    def first_error_line(self, tree: tree_sitter.Tree) -> int | None:
        """Return the 1-based line of the first syntax error, if any."""
        if not tree.root_node.has_error:
            return None
        return self._find_error(tree.root_node)

    def _find_error(self, node) -> int | None:
        if node.type == "ERROR" or node.is_missing:
            return node.start_point[0] + 1
        for child in node.children:
            if child.has_error:
                line = self._find_error(child)
                if line is not None:
                    return line
        return node.start_point[0] + 1

    def _get_name(self, node) -> str | None:
        for child in node.children:
            if child.type == "identifier":
                return child.text.decode("utf-8")
        return None
