"""Command-line interface for genjson code generation."""

from __future__ import annotations

import json
import logging
import sys
from importlib import resources
from pathlib import Path
from typing import TYPE_CHECKING

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from genjson.generator.config import GeneratorConfig
from genjson.generator.errors import GenerationError, ScanError
from genjson.generator.pipeline import generate, write_output
from genjson.generator.planner import plan_models
from genjson.generator.representation import representation_kind
from genjson.generator.scanner import scan
from genjson.generator.symbols import SymbolTable
from genjson.generator.types import Container, CustomOverride, Direction, ModelRef, Primitive

if TYPE_CHECKING:
    from genjson.generator.pipeline import GenerationResult
    from genjson.generator.types import CodecReference, ModelPlan

RUNTIME_FILES = [
    "__init__.py",
    "result.py",
    "codecs.py",
    "extractors.py",
    "registry.py",
    "markers.py",
]


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def _load_config(config_file: str | None, **options: str | None) -> GeneratorConfig:
    config = GeneratorConfig.load(config_file) if config_file else GeneratorConfig()
    return config.override(**options)


source_options = [
    click.option("--config", "-c", "config_file", default=None, help="JSON configuration file"),
    click.option("--root", "-r", default=None, help="Project root directory"),
    click.option(
        "--source-dir", "-s", default=None, help="Directory below the root holding the packages"
    ),
    click.option("--base-package", "-p", default=None, help="Package whose models are scanned"),
    click.option("--verbose", "-v", is_flag=True, default=False, help="Log progress to stderr"),
]


def with_source_options(fn):
    for option in reversed(source_options):
        fn = option(fn)
    return fn


@click.group()
def cli() -> None:
    """genjson JSON reader/writer generator."""


@cli.command()
@with_source_options
@click.option("--dest-package", "-d", default=None, help="Package receiving the generated code")
@click.option(
    "--runtime-import",
    default=None,
    help="Import path for the runtime (default genjson.runtime)",
)
def gen(
    config_file: str | None,
    root: str | None,
    source_dir: str | None,
    base_package: str | None,
    verbose: bool,
    dest_package: str | None,
    runtime_import: str | None,
) -> None:
    """Generate reader and writer modules for the marked models."""
    _setup_logging(verbose)
    config = _load_config(
        config_file,
        root=root,
        source_dir=source_dir,
        base_package=base_package,
        dest_package=dest_package,
        runtime_import=runtime_import,
    )
    if not config.base_package or not config.dest_package:
        raise click.UsageError("--base-package and --dest-package are required")

    try:
        result = generate(config)
    except ScanError as exc:
        raise click.ClickException(str(exc)) from exc
    except GenerationError as exc:
        raise click.UsageError(str(exc)) from exc

    write_output(result, config.dest_path)
    _print_summary(result, config)

    if not result.ok:
        sys.exit(1)


@cli.command()
@with_source_options
@click.option("--json", "output_json", is_flag=True, help="Output as JSON")
def info(
    config_file: str | None,
    root: str | None,
    source_dir: str | None,
    base_package: str | None,
    verbose: bool,
    output_json: bool,
) -> None:
    """Display the scanned models and how their fields resolve."""
    _setup_logging(verbose)
    config = _load_config(config_file, root=root, source_dir=source_dir, base_package=base_package)
    if not config.base_package:
        raise click.UsageError("--base-package is required")

    try:
        symbols = SymbolTable(scan(config.root, config.source_dir, config.base_package))
    except ScanError as exc:
        raise click.ClickException(str(exc)) from exc

    plans = {}
    failures = {}
    for direction in Direction:
        direction_plans, direction_failures = plan_models(symbols, direction)
        plans[direction] = {plan.name: plan for plan in direction_plans}
        failures[direction] = {f.model: f.message for f in direction_failures}

    if output_json:
        _output_json(symbols, plans, failures)
    else:
        _output_plain(symbols, plans, failures)


@cli.command()
@click.option("--output", "-o", "output_path", default=".", help="Output directory")
@click.option("--name", default="genjson_runtime", help="Runtime package name")
def runtime(output_path: str, name: str) -> None:
    """Copy the runtime package so generated code can vendor it."""
    runtime_dir = Path(output_path) / name
    runtime_dir.mkdir(parents=True, exist_ok=True)
    for filename in RUNTIME_FILES:
        content = resources.files("genjson.runtime").joinpath(filename).read_text()
        (runtime_dir / filename).write_text(content)
    print(f"Generated Python runtime in {runtime_dir}")
    print(f"Use --runtime-import {name} when generating")


def _print_summary(result: GenerationResult, config: GeneratorConfig) -> None:
    console = Console()
    table = Table(show_header=True, box=None, padding=(0, 2, 0, 0))
    table.add_column("Model", style="white")
    table.add_column("Reader", style="green")
    table.add_column("Writer", style="green")

    for model in result.symbols.models():
        reader = "yes" if model.name in result.readers else ""
        writer = "yes" if model.name in result.writers else ""
        table.add_row(model.name, reader, writer)

    console.print(f"[bold cyan]Generated {config.dest_package}[/bold cyan] in {config.dest_path}")
    console.print(table)

    if result.failures:
        console.print()
        console.print("[bold red]Failures[/bold red]")
        for failure in result.failures:
            console.print(f"  {failure.model} ({failure.direction.value}): {escape(failure.message)}")


def _codec_summary(plan: ModelPlan | None) -> str:
    if plan is None:
        return ""
    return ", ".join(f"{fp.field.name}: {_describe(fp.codec)}" for fp in plan.fields)


def _describe(codec: CodecReference) -> str:
    if isinstance(codec, Primitive):
        return codec.kind.value
    if isinstance(codec, ModelRef):
        return codec.name
    if isinstance(codec, Container):
        return f"{codec.shape.value}[{_describe(codec.element)}]"
    if isinstance(codec, CustomOverride):
        return f"custom {codec.qualified_name}"
    return repr(codec)


def _output_json(
    symbols: SymbolTable,
    plans: dict[Direction, dict[str, ModelPlan]],
    failures: dict[Direction, dict[str, str]],
) -> None:
    """Output model info as JSON."""
    data: dict = {"models": {}}
    for model in symbols.models():
        entry = model.to_dict()
        for direction in Direction:
            plan = plans[direction].get(model.name)
            entry[direction.value] = {
                "plan": plan.to_dict() if plan else None,
                "error": failures[direction].get(model.name),
            }
        data["models"][model.qualified_name] = entry

    print(json.dumps(data, indent=2, default=str))


def _output_plain(
    symbols: SymbolTable,
    plans: dict[Direction, dict[str, ModelPlan]],
    failures: dict[Direction, dict[str, str]],
) -> None:
    """Output model info using rich text formatting."""
    console = Console()

    console.print("[bold cyan]Models[/bold cyan]")
    table = Table(show_header=True, box=None, padding=(0, 2, 0, 0))
    table.add_column("Name", style="white")
    table.add_column("Module", style="dim")
    table.add_column("Reader", style="yellow")
    table.add_column("Writer", style="yellow")
    table.add_column("Fields", style="white")

    for model in symbols.models():
        columns = []
        for direction in Direction:
            if not model.generates(direction):
                columns.append("")
            elif model.name in failures[direction]:
                columns.append("[red]failed[/red]")
            else:
                columns.append(representation_kind(model, direction).value)
        plan = plans[Direction.READER].get(model.name) or plans[Direction.WRITER].get(model.name)
        table.add_row(model.name, model.module, *columns, escape(_codec_summary(plan)))

    console.print(table)

    errors = [
        (name, direction, message)
        for direction in Direction
        for name, message in failures[direction].items()
    ]
    if errors:
        console.print()
        console.print("[bold red]Errors[/bold red]")
        for name, direction, message in errors:
            console.print(f"  {name} ({direction.value}): {escape(message)}")


def main() -> None:
    """Main entry point."""
    cli()


if __name__ == "__main__":
    main()
