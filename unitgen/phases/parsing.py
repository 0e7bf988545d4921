"""Phase 2: Tree-sitter AST to top-level type extraction."""

from __future__ import annotations

import logging
import os

import tree_sitter

from unitgen.config import GeneratorConfig, SourceFile
from unitgen.graph.symbol_table import PackageSymbolTable
from unitgen.languages import get_analyser

logger = logging.getLogger(__name__)

# Cache parsers per language to avoid re-creating
_parsers: dict[str, tree_sitter.Parser] = {}


def get_parser(analyser) -> tree_sitter.Parser | None:
    """Get or create a parser for the given analyser."""
    key = analyser.language_name
    if key not in _parsers:
        try:
            lang = analyser.get_language()
            _parsers[key] = tree_sitter.Parser(lang)
        except Exception as e:
            logger.warning(f"Failed to initialise parser for {key}: {e}")
            return None
    return _parsers[key]


def run_parsing_phase(
    config: GeneratorConfig, files: list[SourceFile], table: PackageSymbolTable,
) -> None:
    """Parse source files and register their top-level types."""
    for source_file in files:
        ext = os.path.splitext(source_file.path)[1].lower()
        analyser = get_analyser(ext)
        if analyser is None:
            continue

        parser = get_parser(analyser)
        if parser is None:
            continue

        # Read file
        full_path = os.path.join(source_file.root, source_file.path)
        try:
            with open(full_path, "rb") as f:
                source = f.read()
        except OSError as e:
            logger.warning(f"Failed to read {source_file.path}: {e}")
            continue

        # Parse
        try:
            tree = parser.parse(source)
        except Exception as e:
            logger.warning(f"Failed to parse {source_file.path}: {e}")
            continue

        # Extract types
        try:
            types = analyser.extract_types(tree, source, source_file.path)
        except Exception as e:
            logger.warning(f"Failed to extract types from {source_file.path}: {e}")
            continue

        for decl in types:
            table.add(decl)
        logger.debug(f"Scanned {source_file.path}: {len(types)} top-level types")
