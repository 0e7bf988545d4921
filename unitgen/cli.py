"""unitgen CLI - Generate Java units with collision-free imports."""

from __future__ import annotations

import json
import logging
from pathlib import Path

import click
from rich.console import Console
from rich.logging import RichHandler

from unitgen.config import GeneratorConfig, QualifiedName
from unitgen.errors import FilerError, GenerationError
from unitgen.features import FeatureSet, parse_feature_options
from unitgen.filer import DirectoryFiler, MemoryFiler
from unitgen.formatting import get_formatter
from unitgen.graph.symbol_table import PackageSymbolTable
from unitgen.pipeline import build_symbol_table
from unitgen.render import render_template
from unitgen.writer import UnitWriter


def _configure_logging(verbose: bool) -> None:
    root_logger = logging.getLogger()
    for handler in list(root_logger.handlers):
        if isinstance(handler, RichHandler):
            root_logger.removeHandler(handler)
    root_logger.addHandler(RichHandler(
        console=Console(stderr=True),
        show_time=False,
        show_path=False,
    ))
    root_logger.setLevel(logging.DEBUG if verbose else logging.WARNING)


@click.group()
def cli() -> None:
    """unitgen - Generate Java source files with automatic imports."""
    pass


def _scan_with_progress(config: GeneratorConfig, console: Console) -> PackageSymbolTable:
    """Run the scan with Rich progress display."""
    from rich.progress import Progress, SpinnerColumn, TextColumn, TimeElapsedColumn
    from rich.table import Table

    with Progress(
        SpinnerColumn(),
        TextColumn("[bold blue]{task.description}"),
        TimeElapsedColumn(),
        console=console,
        transient=True,
    ) as progress:
        task = progress.add_task("Initialising...", total=None)

        def on_phase(name, label):
            progress.update(task, description=label)

        table, timings = build_symbol_table(config, progress_callback=on_phase)

    summary = Table(title="Package types", show_edge=False)
    summary.add_column("Package", style="bold")
    summary.add_column("Types", justify="right")
    summary.add_column("Names")
    for package in table.packages():
        names = table.types_in_package(package)
        summary.add_row(package or "<unnamed>", str(len(names)), ", ".join(names))
    console.print(summary)

    if config.verbose and timings:
        timing_table = Table(title="Phase Timings", show_edge=False)
        timing_table.add_column("Phase", style="bold")
        timing_table.add_column("Time (ms)", justify="right")
        for phase, seconds in timings.items():
            timing_table.add_row(phase, f"{seconds * 1000:.1f}")
        console.print(timing_table)

    return table


@cli.command("scan")
@click.argument("roots", nargs=-1, required=True, type=click.Path(exists=True, file_okay=False))
@click.option("-o", "--output", "output_path", default=None, help="Write package types as JSON")
@click.option("--exclude", multiple=True, help="Additional glob patterns to exclude")
@click.option("--verbose", is_flag=True, help="Show debug logs and phase timings")
@click.option("--quiet", is_flag=True, help="Suppress all output except errors")
def scan_cmd(
    roots: tuple[str, ...],
    output_path: str | None,
    exclude: tuple[str, ...],
    verbose: bool,
    quiet: bool,
) -> None:
    """List the top-level types declared in each package under ROOTS."""
    _configure_logging(verbose)
    config = GeneratorConfig(
        source_roots=[str(Path(root).resolve()) for root in roots],
        exclude_patterns=list(exclude),
        verbose=verbose,
        quiet=quiet,
    )

    if quiet:
        table, _ = build_symbol_table(config)
    else:
        table = _scan_with_progress(config, Console())

    if output_path:
        output = Path(output_path)
        output.parent.mkdir(parents=True, exist_ok=True)
        data = {package: table.types_in_package(package) for package in table.packages()}
        output.write_text(json.dumps(data, indent=2))
        if not quiet:
            Console().print(f"[green]Output written to:[/green] {output_path}")


@cli.command("render")
@click.argument("template", type=click.Path(exists=True, dir_okay=False))
@click.option("--class", "class_name", required=True, help="Qualified name of the unit, e.g. com.example.Foo")
@click.option("--nested", multiple=True, help="Nested class declared by the unit (repeatable)")
@click.option("--source-root", "source_roots", multiple=True, type=click.Path(exists=True, file_okay=False),
              help="Java source root to scan for package siblings (repeatable)")
@click.option("--output-dir", default=None, type=click.Path(file_okay=False), help="Directory to write the unit to")
@click.option("--dry-run", is_flag=True, help="Print the unit instead of writing it")
@click.option("--formatter", "formatter_name", default="basic",
              type=click.Choice(["basic", "google-java-format"]), help="Body formatter")
@click.option("--formatter-executable", default="google-java-format", help="Path to google-java-format")
@click.option("--feature", "feature_options", multiple=True, help="Capability value as KEY=VALUE (repeatable)")
@click.option("--builtin", "builtin_packages", multiple=True,
              help="Package never imported (repeatable, default java.lang)")
@click.option("--verbose", is_flag=True, help="Show debug logs")
def render_cmd(
    template: str,
    class_name: str,
    nested: tuple[str, ...],
    source_roots: tuple[str, ...],
    output_dir: str | None,
    dry_run: bool,
    formatter_name: str,
    formatter_executable: str,
    feature_options: tuple[str, ...],
    builtin_packages: tuple[str, ...],
    verbose: bool,
) -> None:
    """Render TEMPLATE as the body of a generated unit.

    Type references in the template are written as $[com.example.Name].
    """
    _configure_logging(verbose)
    if output_dir is None and not dry_run:
        raise click.UsageError("Pass --output-dir or --dry-run")

    try:
        unit_name = QualifiedName.parse(class_name)
        nested_classes = [QualifiedName.parse(n) for n in nested]
        features = parse_feature_options(feature_options)
    except ValueError as e:
        raise click.BadParameter(str(e))

    config = GeneratorConfig(
        source_roots=list(source_roots),
        output_dir=output_dir,
        formatter=formatter_name,
        formatter_executable=formatter_executable,
        builtin_packages=list(builtin_packages) or ["java.lang"],
        features=features,
        dry_run=dry_run,
        verbose=verbose,
    )

    symbols = None
    if config.source_roots:
        symbols, _ = build_symbol_table(config)

    filer = MemoryFiler() if config.dry_run else DirectoryFiler(config.output_dir)
    console = Console()
    try:
        with UnitWriter(
            filer,
            unit_name,
            nested_classes,
            originating=template,
            symbols=symbols,
            formatter=get_formatter(config),
            features=FeatureSet(config.features),
            builtin_packages=config.builtin_packages,
        ) as unit:
            render_template(Path(template).read_text(encoding="utf-8"), unit)
    except FilerError as e:
        console.print(f"[yellow]Warning:[/yellow] {e}")
        return
    except (GenerationError, OSError, ValueError) as e:
        raise click.ClickException(str(e))

    if config.dry_run:
        from rich.syntax import Syntax
        console.print(Syntax(filer.sources[str(unit_name)], "java", line_numbers=False))
    else:
        console.print(f"[green]Output written to:[/green] {filer.path_for(unit_name)}")


if __name__ == "__main__":
    cli()
