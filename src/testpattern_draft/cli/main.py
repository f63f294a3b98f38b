"""CLI entry point for testpattern-draft.

Invoked as::

    testpattern-draft [OPTIONS] COMMAND [ARGS]...

or during development::

    python -m testpattern_draft.cli.main

Commands
--------
- generate   Infer draft rule records from a sample file
- compile    Merge a data directory of rule records into one corpus
- detectors  List the built-in detector catalogue
"""
from __future__ import annotations

import logging
import sys
from datetime import date
from pathlib import Path

import click
from rich import box
from rich.console import Console
from rich.table import Table

from testpattern_draft.pipeline import GenerationResult

console = Console()
err_console = Console(stderr=True)

_VERBOSE_SAMPLE_COUNT = 3


# ---------------------------------------------------------------------------
# Root command group
# ---------------------------------------------------------------------------


@click.group()
@click.version_option(package_name="testpattern-draft")
def cli() -> None:
    """testpattern-draft: infer draft detection rules from sample data."""


# ---------------------------------------------------------------------------
# generate
# ---------------------------------------------------------------------------


def _print_diagnostics(source: str, result: GenerationResult) -> None:
    document = result.document
    err_console.print(f"\n[bold]-- Analyzing: {source} --[/bold]\n", markup=True, highlight=False)
    err_console.print(f"Format: {'CSV' if document.is_tabular else 'Plain text'}", markup=False)
    if document.is_tabular:
        err_console.print(f"Headers: {', '.join(document.header_names)}", markup=False)
    err_console.print(f"Lines: {len(document.lines)}", markup=False)
    err_console.print(f"Tokens: {len(document.tokens)}\n", markup=False)

    err_console.print("[bold]-- Built-in detections --[/bold]")
    if not result.detections:
        err_console.print("  (none)", markup=False)
    for name, detection in result.detections.items():
        err_console.print(
            f"  {name}: {len(detection.matches)} matches, "
            f"{len(detection.distinct_values)} unique, score={detection.score}",
            markup=False,
        )
        samples = ", ".join(detection.sample_values(_VERBOSE_SAMPLE_COUNT))
        err_console.print(f"    samples: {samples}", markup=False)

    err_console.print("\n[bold]-- Structural detections --[/bold]")
    if not result.structural_groups:
        err_console.print("  (none)", markup=False)
    for group in result.structural_groups:
        err_console.print(
            f"  {group.derived_name} [{group.signature}]: "
            f"{len(group.distinct_values)} unique values, score={group.score}",
            markup=False,
        )
        err_console.print(f"    regex: {group.regex}", markup=False, highlight=False)
        samples = ", ".join(group.sample_values(_VERBOSE_SAMPLE_COUNT))
        err_console.print(f"    samples: {samples}", markup=False)
    err_console.print("")


@cli.command(name="generate")
@click.argument("sample", type=click.Path(dir_okay=False, path_type=Path))
@click.option(
    "--output-dir",
    "-o",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Write one YAML file per draft record into this directory.",
)
@click.option("--verbose", "-v", is_flag=True, default=False, help="Print detection details.")
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="Optional YAML file overriding record scaffold values.",
)
def generate_command(
    sample: Path,
    output_dir: Path | None,
    verbose: bool,
    config_path: Path | None,
) -> None:
    """Infer draft rule records from a CSV or free-text SAMPLE file."""
    from testpattern_draft.config import ConfigLoader
    from testpattern_draft.pipeline import SampleReadError, generate_drafts, read_sample
    from testpattern_draft.records.render import (
        record_filename,
        record_to_yaml,
        records_to_yaml,
    )

    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    loader = ConfigLoader()
    try:
        config = loader.load(config_path) if config_path else loader.defaults()
    except ValueError as exc:
        raise click.UsageError(f"Invalid config {config_path}: {exc}") from exc

    try:
        content = read_sample(sample)
    except SampleReadError as exc:
        err_console.print(f"[red]Error reading file:[/red] {exc.path}")
        err_console.print(exc.reason, markup=False)
        sys.exit(1)

    result = generate_drafts(content, date.today(), config)

    if verbose:
        _print_diagnostics(str(sample), result)

    if not result.has_records:
        err_console.print("No patterns detected in the input file.")
        return

    if output_dir is not None:
        output_dir.mkdir(parents=True, exist_ok=True)
        for record in result.records:
            path = output_dir / record_filename(record)
            path.write_text(record_to_yaml(record), encoding="utf-8")
            err_console.print(f"Wrote: {path}", markup=False, highlight=False)
        err_console.print(
            f"\n{len(result.records)} draft pattern(s) written to {output_dir}",
            markup=False,
        )
    else:
        click.echo(records_to_yaml(result.records), nl=False)

    err_console.print(
        '\nReminder: Draft patterns are prefixed with "DRAFT-". '
        "Review and rename slugs before committing.",
        markup=False,
    )


# ---------------------------------------------------------------------------
# compile
# ---------------------------------------------------------------------------


@cli.command(name="compile")
@click.argument("data_dir", type=click.Path(file_okay=False, path_type=Path))
@click.option(
    "--output",
    "-o",
    type=click.Path(dir_okay=False, path_type=Path),
    default=Path("patterns.json"),
    show_default=True,
    help="Destination JSON corpus file.",
)
def compile_command(data_dir: Path, output: Path) -> None:
    """Merge the rule records under DATA_DIR into one JSON corpus."""
    from testpattern_draft.corpus.compiler import CorpusCompileError, CorpusCompiler

    logging.basicConfig(level=logging.WARNING, format="  WARN: %(message)s")

    console.print("Compiling patterns...")
    try:
        corpus = CorpusCompiler(data_dir).compile_to_file(output)
    except CorpusCompileError as exc:
        err_console.print(f"[red]Error:[/red] {exc}")
        sys.exit(1)

    console.print(
        f"Done: {len(corpus.patterns)} patterns, {len(corpus.collections)} collections, "
        f"{len(corpus.keywords)} keyword dictionaries -> {output}",
        markup=False,
    )
    if corpus.resolved_count:
        console.print(
            f"  ({corpus.resolved_count} patterns had keyword_lists references resolved)",
            markup=False,
        )


# ---------------------------------------------------------------------------
# detectors
# ---------------------------------------------------------------------------


@cli.command(name="detectors")
def detectors_command() -> None:
    """List the built-in detector catalogue in evaluation order."""
    from testpattern_draft.detection.registry import BUILTIN_DETECTORS

    table = Table(title="Built-in Detectors", box=box.SIMPLE)
    table.add_column("Name", style="cyan")
    table.add_column("Slug")
    table.add_column("Confidence", style="magenta")
    table.add_column("Validator")
    for detector in BUILTIN_DETECTORS:
        table.add_row(
            detector.name,
            detector.slug,
            detector.confidence,
            detector.validator.value if detector.validator else "-",
        )
    console.print(table)


if __name__ == "__main__":
    cli()
