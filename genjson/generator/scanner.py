"""Model declaration scanner.

Reads Python source statically and extracts the classes marked with
``@generate_reader``, ``@generate_writer`` or ``@generate_json``. Nothing is
imported or executed, and no type is resolved here.
"""

import ast
import logging
from pathlib import Path
from typing import Any

from .errors import ScanError
from .types import Direction, FieldDescriptor, ModelDescriptor, RepresentationKind

logger = logging.getLogger(__name__)

MARKERS: dict[str, tuple[Direction, ...]] = {
    "generate_reader": (Direction.READER,),
    "generate_writer": (Direction.WRITER,),
    "generate_json": (Direction.READER, Direction.WRITER),
}

REPRESENTATION_VALUES = {
    "json_representation": "representation",
    "json_reader_representation": "reader_representation",
    "json_writer_representation": "writer_representation",
}
WRITER_IGNORE_VALUE = "json_writer_ignore"

READER_SUFFIX = "_reader"
WRITER_SUFFIX = "_writer"


def scan(root: str | Path, source_dir: str, base_package: str) -> list[ModelDescriptor]:
    """Scan every module under ``base_package`` for model declarations.

    Args:
        root: Project root directory.
        source_dir: Directory below ``root`` holding the package tree.
        base_package: Fully-qualified package whose modules are scanned.

    Returns:
        Model descriptors in file order, then declaration order.

    Raises:
        ScanError: When the package is missing, a file cannot be parsed, a
            declaration is malformed, or two models share a simple name.
    """
    source_root = Path(root) / source_dir
    package_path = source_root.joinpath(*base_package.split(".")) if base_package else source_root

    if package_path.is_dir():
        files = [
            (path, _module_name(base_package, path.relative_to(package_path)))
            for path in sorted(package_path.rglob("*.py"))
        ]
    elif package_path.with_suffix(".py").is_file():
        files = [(package_path.with_suffix(".py"), base_package)]
    else:
        raise ScanError(f"Package {base_package or '.'} not found under {source_root}")

    models: list[ModelDescriptor] = []
    for path, module in files:
        logger.debug("Scanning %s (%s)", path, module)
        models.extend(scan_source(path.read_text(encoding="utf-8"), module, source=str(path)))

    check_unique(models)
    logger.debug("Found %d model declarations", len(models))
    return models


def scan_source(text: str, module: str, source: str = "<string>") -> list[ModelDescriptor]:
    """Extract the model declarations of one module's source text."""
    try:
        tree = ast.parse(text, filename=source)
    except SyntaxError as exc:
        raise ScanError(f"{source}:{exc.lineno}: invalid Python source ({exc.msg})") from exc

    models: list[ModelDescriptor] = []
    for node in tree.body:
        if not isinstance(node, ast.ClassDef):
            continue
        directions = _markers(node)
        if directions:
            models.append(_scan_class(node, module, directions, source))

    check_unique(models)
    return models


def check_unique(models: list[ModelDescriptor]) -> None:
    """Reject two declarations with the same simple name."""
    seen: dict[str, ModelDescriptor] = {}
    for model in models:
        other = seen.get(model.name)
        if other is not None:
            raise ScanError(
                f"Ambiguous model name '{model.name}': declared as {other.qualified_name} "
                f"({other.source}:{other.line}) and {model.qualified_name} "
                f"({model.source}:{model.line})",
                model=model.name,
            )
        seen[model.name] = model


def _module_name(base_package: str, relative: Path) -> str:
    parts = list(relative.with_suffix("").parts)
    if parts and parts[-1] == "__init__":
        parts.pop()
    return ".".join(p for p in (base_package, *parts) if p)


def _terminal_name(node: ast.expr) -> str | None:
    if isinstance(node, ast.Call):
        return _terminal_name(node.func)
    if isinstance(node, ast.Subscript):
        return _terminal_name(node.value)
    if isinstance(node, ast.Name):
        return node.id
    if isinstance(node, ast.Attribute):
        return node.attr
    return None


def _markers(node: ast.ClassDef) -> set[Direction]:
    directions: set[Direction] = set()
    for decorator in node.decorator_list:
        directions.update(MARKERS.get(_terminal_name(decorator) or "", ()))
    return directions


def _scan_class(
    node: ast.ClassDef, module: str, directions: set[Direction], source: str
) -> ModelDescriptor:
    name = node.name
    raw_fields: list[tuple[str, str, bool]] = []
    values: dict[str, ast.expr] = {}

    for stmt in node.body:
        if isinstance(stmt, ast.AnnAssign) and isinstance(stmt.target, ast.Name):
            if _terminal_name(stmt.annotation) == "ClassVar":
                if stmt.value is not None:
                    values[stmt.target.id] = stmt.value
                continue
            if any(f[0] == stmt.target.id for f in raw_fields):
                raise ScanError(
                    f"{source}:{stmt.lineno}: {name}.{stmt.target.id} is declared twice",
                    model=name,
                )
            raw_fields.append((stmt.target.id, ast.unparse(stmt.annotation), stmt.value is not None))
        elif (
            isinstance(stmt, ast.Assign)
            and len(stmt.targets) == 1
            and isinstance(stmt.targets[0], ast.Name)
        ):
            values[stmt.targets[0].id] = stmt.value

    fields = tuple(
        FieldDescriptor(
            name=field_name,
            type_expression=type_expression,
            has_default=has_default,
            reader_override=_string_value(values, f"{field_name}{READER_SUFFIX}", name),
            writer_override=_string_value(values, f"{field_name}{WRITER_SUFFIX}", name),
        )
        for field_name, type_expression, has_default in raw_fields
    )

    representations = {
        attr: _representation(values, key, name) for key, attr in REPRESENTATION_VALUES.items()
    }

    return ModelDescriptor(
        name=name,
        module=module,
        fields=fields,
        generate_reader=Direction.READER in directions,
        generate_writer=Direction.WRITER in directions,
        writer_ignore=_ignore_list(values, name),
        source=source,
        line=node.lineno,
        **representations,
    )


def _literal(values: dict[str, ast.expr], key: str, model: str) -> Any:
    node = values.get(key)
    if node is None:
        return None
    try:
        return ast.literal_eval(node)
    except (ValueError, TypeError, SyntaxError, RecursionError) as exc:
        raise ScanError(
            f"{model}.{key}: expected a literal value, got '{ast.unparse(node)}'", model=model
        ) from exc


def _string_value(values: dict[str, ast.expr], key: str, model: str) -> str | None:
    value = _literal(values, key, model)
    if value is not None and not isinstance(value, str):
        raise ScanError(f"{model}.{key}: expected a string, got {value!r}", model=model)
    return value


def _representation(
    values: dict[str, ast.expr], key: str, model: str
) -> RepresentationKind | None:
    value = _string_value(values, key, model)
    if value is None:
        return None
    try:
        return RepresentationKind(value)
    except ValueError:
        allowed = ", ".join(repr(k.value) for k in RepresentationKind)
        raise ScanError(
            f"{model}.{key}: unknown representation {value!r} (expected one of {allowed})",
            model=model,
        ) from None


def _ignore_list(values: dict[str, ast.expr], model: str) -> tuple[str, ...]:
    value = _literal(values, WRITER_IGNORE_VALUE, model)
    if value is None:
        return ()
    if isinstance(value, str) or not isinstance(value, (list, tuple, set, frozenset)):
        raise ScanError(
            f"{model}.{WRITER_IGNORE_VALUE}: expected a list of field names, got {value!r}",
            model=model,
        )
    if not all(isinstance(v, str) for v in value):
        raise ScanError(f"{model}.{WRITER_IGNORE_VALUE}: field names must be strings", model=model)
    # sets have no order; keep output deterministic
    return tuple(value) if isinstance(value, (list, tuple)) else tuple(sorted(value))
