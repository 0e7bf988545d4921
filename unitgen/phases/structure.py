"""Phase 1: Source file discovery."""

from __future__ import annotations

import fnmatch
import logging
import os
from pathlib import Path

from unitgen.config import GeneratorConfig, SourceFile
from unitgen.languages import get_language

logger = logging.getLogger(__name__)

DEFAULT_IGNORE = {
    ".git", "bin", "obj", "node_modules", ".idea", "__pycache__",
    ".mypy_cache", ".pytest_cache", ".tox", "dist", "build", ".eggs",
    "target", ".venv", "venv", ".gradle", "out",
}


def _should_ignore(name: str, ignore_set: set[str]) -> bool:
    """Check if a directory or file name matches ignore patterns."""
    if name in ignore_set or name.startswith("."):
        return True
    return any(fnmatch.fnmatch(name, pattern) for pattern in ignore_set)


def run_structure_phase(config: GeneratorConfig) -> list[SourceFile]:
    """Walk every source root and collect the files an analyser understands."""
    ignore_set = set(DEFAULT_IGNORE)
    ignore_set.update(config.exclude_patterns)

    files: list[SourceFile] = []
    for source_root in config.source_roots:
        root = Path(source_root)
        if not root.is_dir():
            logger.warning(f"Source root {source_root} is not a directory, skipping")
            continue

        for dirpath, dirnames, filenames in os.walk(root):
            # Filter ignored directories in-place
            dirnames[:] = [
                d for d in sorted(dirnames)
                if not _should_ignore(d, ignore_set)
            ]

            for filename in sorted(filenames):
                if _should_ignore(filename, ignore_set):
                    continue

                ext = os.path.splitext(filename)[1].lower()
                language = get_language(ext)
                if language is None:
                    continue

                full_path = os.path.join(dirpath, filename)
                try:
                    size = os.path.getsize(full_path)
                except OSError:
                    size = 0

                # Skip files over max size
                if size > config.max_file_size:
                    logger.debug(f"Skipping {full_path}: {size} bytes")
                    continue

                rel_path = os.path.relpath(full_path, root).replace("\\", "/")
                files.append(SourceFile(
                    path=rel_path,
                    root=str(root),
                    language=language,
                    size=size,
                ))

    return files
