"""End-to-end generation: scan, freeze, plan, emit, write."""

import logging
from dataclasses import dataclass, field
from pathlib import Path

from .config import GeneratorConfig
from .emitter import render_package, render_readers, render_writers
from .errors import GenerationError
from .planner import GenerationFailure, plan_models
from .resolver import TypeResolver
from .scanner import scan
from .symbols import SymbolTable
from .types import Direction, ModelPlan

logger = logging.getLogger(__name__)


@dataclass
class GenerationResult:
    """Outcome of one generation run."""

    symbols: SymbolTable
    reader_plans: list[ModelPlan] = field(default_factory=list)
    writer_plans: list[ModelPlan] = field(default_factory=list)
    readers: list[str] = field(default_factory=list)
    writers: list[str] = field(default_factory=list)
    failures: list[GenerationFailure] = field(default_factory=list)
    files: dict[str, str] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return not self.failures


def generate_from_symbols(symbols: SymbolTable, config: GeneratorConfig) -> GenerationResult:
    """Plan and render every marked model of a frozen symbol table."""
    if not config.dest_package:
        raise GenerationError("A destination package is required")

    resolver = TypeResolver(symbols)
    result = GenerationResult(symbols=symbols)

    result.reader_plans, failures = plan_models(symbols, Direction.READER, resolver)
    result.failures.extend(failures)
    result.writer_plans, failures = plan_models(symbols, Direction.WRITER, resolver)
    result.failures.extend(failures)

    readers = render_readers(result.reader_plans, config.runtime_import)
    writers = render_writers(result.writer_plans, config.runtime_import)
    result.failures.extend(readers.failures)
    result.failures.extend(writers.failures)
    result.readers = readers.models
    result.writers = writers.models

    result.files = {
        "__init__.py": render_package(
            config.dest_package, config.readers_module, config.writers_module
        ),
        f"{config.readers_module}.py": readers.source,
        f"{config.writers_module}.py": writers.source,
    }

    logger.info(
        "Generated %d readers and %d writers (%d failures)",
        len(result.readers),
        len(result.writers),
        len(result.failures),
    )
    return result


def generate(config: GeneratorConfig) -> GenerationResult:
    """Run the whole pipeline for ``config``.

    Raises:
        ScanError: Declarations are ambiguous or malformed; nothing is generated.
    """
    models = scan(config.root, config.source_dir, config.base_package)
    # every model is known before any field is resolved
    symbols = SymbolTable(models)
    return generate_from_symbols(symbols, config)


def write_output(result: GenerationResult, directory: str | Path) -> list[Path]:
    """Write the generated package into ``directory``, replacing earlier output."""
    out_dir = Path(directory)
    out_dir.mkdir(parents=True, exist_ok=True)

    written = []
    for filename, content in result.files.items():
        path = out_dir / filename
        path.write_text(content, encoding="utf-8")
        written.append(path)
        logger.debug("Wrote %s", path)
    return written
