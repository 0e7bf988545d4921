"""Sequential phase orchestrator with timing."""

from __future__ import annotations

import time

from unitgen.config import GeneratorConfig, SourceFile
from unitgen.graph.symbol_table import PackageSymbolTable
from unitgen.phases.parsing import run_parsing_phase
from unitgen.phases.structure import run_structure_phase


_PHASE_LABELS = {
    "structure": "Finding source files",
    "parsing": "Collecting package types",
}


def build_symbol_table(
    config: GeneratorConfig,
    progress_callback=None,
) -> tuple[PackageSymbolTable, dict[str, float]]:
    """Scan the configured source roots and return the table with phase timings.

    Args:
        config: Generator configuration; only ``source_roots``,
            ``exclude_patterns`` and ``max_file_size`` are used.
        progress_callback: Optional callable(phase_name, label) invoked
            when each phase starts. Used by the CLI for Rich progress.
    """
    table = PackageSymbolTable()
    files: list[SourceFile] = []
    timings: dict[str, float] = {}

    def _structure() -> None:
        files.extend(run_structure_phase(config))

    phases = [
        ("structure", _structure),
        ("parsing", lambda: run_parsing_phase(config, files, table)),
    ]

    for name, phase_fn in phases:
        if progress_callback:
            progress_callback(name, _PHASE_LABELS.get(name, name))
        start = time.monotonic()
        phase_fn()
        timings[name] = time.monotonic() - start

    return table, timings
