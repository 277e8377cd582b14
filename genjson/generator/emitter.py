"""Python code emitter for generated readers and writers."""

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from typing import Any

from jinja2 import Environment, PackageLoader

from .errors import GenerationError, ReservedNameError
from .planner import GenerationFailure, prune_dependents
from .types import (
    CodecReference,
    Container,
    ContainerShape,
    CustomOverride,
    Direction,
    ModelPlan,
    ModelRef,
    ParameterDelegate,
    Primitive,
    PrimitiveKind,
)

logger = logging.getLogger(__name__)

env = Environment(
    loader=PackageLoader("genjson.generator", "templates"),
    trim_blocks=True,
    lstrip_blocks=True,
    keep_trailing_newline=True,
    line_comment_prefix="%%",
    line_statement_prefix="%",
)

DEFAULT_RUNTIME_IMPORT = "genjson.runtime"
RUNTIME_ALIAS = "_rt"
READERS_REGISTRY = "READERS"
WRITERS_REGISTRY = "WRITERS"

# Model names the generated modules use for their own purposes
RESERVED_NAMES = frozenset(
    [READERS_REGISTRY, WRITERS_REGISTRY, "cls", "value", "obj", "dict", "list", "isinstance"]
)

# Map primitive codecs to runtime reader functions
PRIMITIVE_READERS = {
    PrimitiveKind.TEXT: "read_str",
    PrimitiveKind.INTEGER: "read_int",
    PrimitiveKind.NUMBER: "read_float",
    PrimitiveKind.BOOLEAN: "read_bool",
    PrimitiveKind.JSON: "read_json",
}

# Map container shapes to runtime reader combinators
CONTAINER_READERS = {
    ContainerShape.LIST: "list_of",
    ContainerShape.SET: "set_of",
    ContainerShape.FROZENSET: "frozenset_of",
    ContainerShape.TUPLE: "tuple_of",
    ContainerShape.MAP: "dict_of",
    ContainerShape.OPTIONAL: "optional",
}


def reader_class_name(model: str) -> str:
    return f"{model}Reader"


def writer_class_name(model: str) -> str:
    return f"{model}Writer"


def extractor_name(model: str, field_name: str) -> str:
    return f"_{model}__{field_name}"


class _Imports:
    """Collects the modules generated code imports from."""

    def __init__(self) -> None:
        self.models: dict[str, list[str]] = {}
        self.custom: dict[str, str] = {}

    def model(self, plan: ModelPlan) -> str:
        names = self.models.setdefault(plan.model.module, [])
        if plan.name not in names:
            names.append(plan.name)
        return plan.name

    def custom_codec(self, codec: CustomOverride) -> str:
        alias = self.custom.setdefault(codec.module, f"_custom_{len(self.custom)}")
        return f"{alias}.{codec.attribute}"

    def model_lines(self) -> list[str]:
        return [
            f"from {module} import {', '.join(sorted(names))}"
            for module, names in sorted(self.models.items())
        ]

    def custom_lines(self) -> list[str]:
        return [f"import {module} as {alias}" for module, alias in sorted(self.custom.items())]


def _is_identity(codec: CodecReference) -> bool:
    """True when the decoded Python value already is its JSON value."""
    if isinstance(codec, Primitive):
        return True
    if isinstance(codec, Container) and codec.shape == ContainerShape.OPTIONAL:
        return _is_identity(codec.element)
    return False


def gen_reader_expr(codec: CodecReference, imports: _Imports) -> str:
    """Generate the expression of a reader callable for a codec."""
    if isinstance(codec, Primitive):
        return f"{RUNTIME_ALIAS}.{PRIMITIVE_READERS[codec.kind]}"
    if isinstance(codec, ModelRef):
        return f"{reader_class_name(codec.name)}.read"
    if isinstance(codec, Container):
        combinator = CONTAINER_READERS[codec.shape]
        return f"{RUNTIME_ALIAS}.{combinator}({gen_reader_expr(codec.element, imports)})"
    if isinstance(codec, CustomOverride):
        return imports.custom_codec(codec)
    raise GenerationError(f"Unknown codec reference: {codec!r}")


def gen_writer_expr(codec: CodecReference, src: str, imports: _Imports, depth: int = 0) -> str:
    """Generate an expression converting ``src`` to its JSON value."""
    if isinstance(codec, Primitive):
        return src
    if isinstance(codec, ModelRef):
        return f"{writer_class_name(codec.name)}.write({src})"
    if isinstance(codec, CustomOverride):
        return f"{imports.custom_codec(codec)}({src})"
    if not isinstance(codec, Container):
        raise GenerationError(f"Unknown codec reference: {codec!r}")

    element = codec.element
    if codec.shape == ContainerShape.OPTIONAL:
        if _is_identity(element):
            return src
        return f"(None if {src} is None else {gen_writer_expr(element, src, imports, depth)})"

    if codec.shape == ContainerShape.MAP:
        if _is_identity(element):
            return f"dict({src})"
        key, item = f"_k{depth}", f"_v{depth}"
        inner = gen_writer_expr(element, item, imports, depth + 1)
        return f"{{{key}: {inner} for {key}, {item} in {src}.items()}}"

    # list, set and tuple all write a JSON array
    if _is_identity(element):
        return f"list({src})"
    item = f"_v{depth}"
    return f"[{gen_writer_expr(element, item, imports, depth + 1)} for {item} in {src}]"


@dataclass
class ReaderField:
    name: str
    var: str
    extractor: str
    reader: str
    missing: str
    invalid: str
    required: bool


@dataclass
class ReaderBlock:
    name: str
    qualified_name: str
    class_name: str
    enum_name: str
    variants: list[str]
    delegate: bool
    shape_error: str | None = None
    fields: list[ReaderField] = field(default_factory=list)
    construct: bool = False

    def defined_names(self) -> list[str]:
        return [self.enum_name, self.class_name, *(f.extractor for f in self.fields)]


@dataclass
class WriterBlock:
    name: str
    qualified_name: str
    class_name: str
    delegate: bool
    entries: list[tuple[str, str]] = field(default_factory=list)
    delegate_expr: str = ""

    def defined_names(self) -> list[str]:
        return [self.class_name]


def _prepare_reader(plan: ModelPlan, imports: _Imports) -> ReaderBlock:
    if plan.errors is None:
        raise GenerationError(f"{plan.name}: reader plan has no error taxonomy", model=plan.name)
    errors = plan.errors
    enum_name = errors.enum_name

    fields = []
    for fp in plan.fields:
        name = fp.field.name
        if isinstance(plan.representation, ParameterDelegate):
            delegate = errors.delegate_invalid()
            missing = invalid = delegate.name if delegate else ""
        else:
            missing = errors.missing(name).name
            invalid = errors.invalid(name).name
        fields.append(
            ReaderField(
                name=name,
                var=f"_f_{name}",
                extractor=extractor_name(plan.name, name),
                reader=gen_reader_expr(fp.codec, imports),
                missing=f"{enum_name}.{missing}",
                invalid=f"{enum_name}.{invalid}",
                required=not fp.field.has_default,
            )
        )

    shape = errors.shape_mismatch()
    imports.model(plan)
    return ReaderBlock(
        name=plan.name,
        qualified_name=plan.model.qualified_name,
        class_name=reader_class_name(plan.name),
        enum_name=enum_name,
        variants=[v.name for v in errors.variants],
        delegate=isinstance(plan.representation, ParameterDelegate),
        shape_error=f"{enum_name}.{shape.name}" if shape else None,
        fields=fields,
        construct=any(not f.required for f in fields),
    )


def _prepare_writer(plan: ModelPlan, imports: _Imports) -> WriterBlock:
    entries = [
        (fp.field.name, gen_writer_expr(fp.codec, f"obj.{fp.field.name}", imports))
        for fp in plan.fields
    ]
    delegate = isinstance(plan.representation, ParameterDelegate)
    imports.model(plan)
    return WriterBlock(
        name=plan.name,
        qualified_name=plan.model.qualified_name,
        class_name=writer_class_name(plan.name),
        delegate=delegate,
        entries=[] if delegate else entries,
        delegate_expr=entries[0][1] if delegate else "",
    )


@dataclass
class RenderedModule:
    """Source of one generated module and the models it contains."""

    source: str
    models: list[str]
    failures: list[GenerationFailure]


def check_names(model: str, defined: Sequence[str], owners: dict[str, str]) -> None:
    """Reject a model whose name or generated names clash in the output module.

    ``owners`` maps every name the module defines to the first model that
    defines it.
    """
    if model.startswith("_") or model in RESERVED_NAMES:
        raise ReservedNameError(
            f"{model}: the model name is reserved in generated code", model=model
        )
    owner = owners.get(model)
    if owner is not None:
        raise ReservedNameError(
            f"{model}: the model name clashes with a name generated for {owner}", model=model
        )
    for name in defined:
        if owners.get(name, model) != model:
            raise ReservedNameError(
                f"{model}: generated name {name} is already used by {owners[name]}", model=model
            )


def _prepare_all(
    plans: Sequence[ModelPlan],
    direction: Direction,
    prepare: Callable[[ModelPlan, _Imports], Any],
) -> tuple[list[Any], _Imports, list[GenerationFailure]]:
    failures: list[GenerationFailure] = []
    prepared = []
    for plan in plans:
        try:
            prepared.append((plan, prepare(plan, _Imports())))
        except GenerationError as exc:
            failures.append(GenerationFailure(plan.name, direction, exc))

    owners: dict[str, str] = {}
    for plan, block in prepared:
        for name in block.defined_names():
            owners.setdefault(name, plan.name)
    for plan, block in prepared:
        try:
            check_names(plan.name, block.defined_names(), owners)
        except GenerationError as exc:
            failures.append(GenerationFailure(plan.name, direction, exc))

    kept, dropped = prune_dependents(plans, {f.model for f in failures}, direction)
    failures.extend(dropped)

    imports = _Imports()
    blocks = [prepare(plan, imports) for plan in kept]
    return blocks, imports, failures


def render_readers(
    plans: Sequence[ModelPlan], runtime_import: str = DEFAULT_RUNTIME_IMPORT
) -> RenderedModule:
    """Render the readers module for ``plans``."""
    blocks, imports, failures = _prepare_all(plans, Direction.READER, _prepare_reader)
    source = env.get_template("readers.py.j2").render(
        blocks=blocks,
        model_imports=imports.model_lines(),
        custom_imports=imports.custom_lines(),
        runtime_import=runtime_import,
        rt=RUNTIME_ALIAS,
        registry=READERS_REGISTRY,
    )
    logger.debug("Rendered %d readers", len(blocks))
    return RenderedModule(source=source, models=[b.name for b in blocks], failures=failures)


def render_writers(
    plans: Sequence[ModelPlan], runtime_import: str = DEFAULT_RUNTIME_IMPORT
) -> RenderedModule:
    """Render the writers module for ``plans``."""
    blocks, imports, failures = _prepare_all(plans, Direction.WRITER, _prepare_writer)
    source = env.get_template("writers.py.j2").render(
        blocks=blocks,
        model_imports=imports.model_lines(),
        custom_imports=imports.custom_lines(),
        runtime_import=runtime_import,
        rt=RUNTIME_ALIAS,
        registry=WRITERS_REGISTRY,
    )
    logger.debug("Rendered %d writers", len(blocks))
    return RenderedModule(source=source, models=[b.name for b in blocks], failures=failures)


def render_package(
    base_package: str, readers_module: str = "readers", writers_module: str = "writers"
) -> str:
    """Render the destination package ``__init__`` re-exporting both registries."""
    return env.get_template("package.py.j2").render(
        base_package=base_package,
        readers_module=readers_module,
        writers_module=writers_module,
        readers_registry=READERS_REGISTRY,
        writers_registry=WRITERS_REGISTRY,
    )
