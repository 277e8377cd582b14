"""Type definitions for model scanning, resolution and code generation."""

from dataclasses import dataclass
from enum import StrEnum, auto

from dataclasses_json import DataClassJsonMixin


class Direction(StrEnum):
    """Codec direction."""

    READER = auto()
    WRITER = auto()


class RepresentationKind(StrEnum):
    OBJECT = "object"
    PARAMETER = "parameter"


@dataclass(frozen=True)
class FieldDescriptor(DataClassJsonMixin):
    """Represents one declared field of a model.

    ``type_expression`` is the annotation source text exactly as declared,
    e.g. ``list[Item]`` or ``"PhoneNumber" | None``.
    """

    name: str
    type_expression: str
    has_default: bool = False
    reader_override: str | None = None
    writer_override: str | None = None

    def override(self, direction: Direction) -> str | None:
        if direction == Direction.READER:
            return self.reader_override
        return self.writer_override


@dataclass(frozen=True)
class ModelDescriptor(DataClassJsonMixin):
    """Represents a model declaration found by the scanner."""

    name: str
    module: str
    fields: tuple[FieldDescriptor, ...]
    generate_reader: bool = False
    generate_writer: bool = False
    representation: RepresentationKind | None = None
    reader_representation: RepresentationKind | None = None
    writer_representation: RepresentationKind | None = None
    writer_ignore: tuple[str, ...] = ()
    source: str = ""
    line: int = 0

    @property
    def qualified_name(self) -> str:
        return f"{self.module}.{self.name}"

    def generates(self, direction: Direction) -> bool:
        if direction == Direction.READER:
            return self.generate_reader
        return self.generate_writer

    def field_named(self, name: str) -> FieldDescriptor | None:
        return next((f for f in self.fields if f.name == name), None)


# Codec references


class PrimitiveKind(StrEnum):
    TEXT = auto()
    INTEGER = auto()
    NUMBER = auto()
    BOOLEAN = auto()
    JSON = auto()


class ContainerShape(StrEnum):
    LIST = auto()
    SET = auto()
    FROZENSET = auto()
    TUPLE = auto()
    MAP = auto()
    OPTIONAL = auto()


@dataclass(frozen=True)
class Primitive(DataClassJsonMixin):
    kind: PrimitiveKind


@dataclass(frozen=True)
class ModelRef(DataClassJsonMixin):
    name: str


@dataclass(frozen=True)
class Container(DataClassJsonMixin):
    shape: ContainerShape
    element: "CodecReference"


@dataclass(frozen=True)
class CustomOverride(DataClassJsonMixin):
    qualified_name: str

    @property
    def module(self) -> str:
        return self.qualified_name.rpartition(".")[0]

    @property
    def attribute(self) -> str:
        return self.qualified_name.rpartition(".")[2]


CodecReference = Primitive | ModelRef | Container | CustomOverride


def model_refs(codec: CodecReference):
    """Yield every model name referenced by a codec, containers included."""
    if isinstance(codec, ModelRef):
        yield codec.name
    elif isinstance(codec, Container):
        yield from model_refs(codec.element)


# Representations


@dataclass(frozen=True)
class ObjectRepresentation(DataClassJsonMixin):
    ignored: frozenset[str] = frozenset()


@dataclass(frozen=True)
class ParameterDelegate(DataClassJsonMixin):
    pass


Representation = ObjectRepresentation | ParameterDelegate


# Reader error variants


@dataclass(frozen=True)
class ShapeMismatch(DataClassJsonMixin):
    model: str

    @property
    def name(self) -> str:
        return f"{self.model}NotJsonObject"


@dataclass(frozen=True)
class FieldMissing(DataClassJsonMixin):
    model: str
    field_name: str

    @property
    def name(self) -> str:
        return f"{self.model}{to_camel_case(self.field_name)}MissingError"


@dataclass(frozen=True)
class FieldInvalid(DataClassJsonMixin):
    model: str
    field_name: str

    @property
    def name(self) -> str:
        return f"{self.model}{to_camel_case(self.field_name)}InvalidError"


@dataclass(frozen=True)
class DelegateInvalid(DataClassJsonMixin):
    model: str

    @property
    def name(self) -> str:
        return f"{self.model}InvalidJsonType"


ErrorVariant = ShapeMismatch | FieldMissing | FieldInvalid | DelegateInvalid


@dataclass(frozen=True)
class ErrorTaxonomy(DataClassJsonMixin):
    """The closed set of failures one generated reader can return."""

    model: str
    variants: tuple[ErrorVariant, ...]

    @property
    def enum_name(self) -> str:
        return f"{self.model}ReaderError"

    def shape_mismatch(self) -> ShapeMismatch | None:
        return next((v for v in self.variants if isinstance(v, ShapeMismatch)), None)

    def missing(self, field_name: str) -> FieldMissing:
        return next(
            v for v in self.variants if isinstance(v, FieldMissing) and v.field_name == field_name
        )

    def invalid(self, field_name: str) -> FieldInvalid:
        return next(
            v for v in self.variants if isinstance(v, FieldInvalid) and v.field_name == field_name
        )

    def delegate_invalid(self) -> DelegateInvalid | None:
        return next((v for v in self.variants if isinstance(v, DelegateInvalid)), None)


# Plans


@dataclass(frozen=True)
class FieldPlan(DataClassJsonMixin):
    """A field that takes part in one direction, with its resolved codec."""

    field: FieldDescriptor
    codec: CodecReference


@dataclass(frozen=True)
class ModelPlan(DataClassJsonMixin):
    """Everything the emitter needs to render one model in one direction."""

    model: ModelDescriptor
    direction: Direction
    representation: Representation
    fields: tuple[FieldPlan, ...]
    errors: ErrorTaxonomy | None = None
    dependencies: tuple[str, ...] = ()

    @property
    def name(self) -> str:
        return self.model.name


def to_camel_case(name: str) -> str:
    """Convert ``snake_case`` or ``camelCase`` to ``CamelCase``."""
    parts = [p for p in name.split("_") if p]
    return "".join(p[0].upper() + p[1:] for p in parts)
