"""Field type resolution.

A field resolves to a codec through a fixed priority chain: a custom
override declared for the field, then the primitive registry, then the
parametric containers (recursively), then the symbol table. Anything left
over is an UnresolvedTypeError for the owning model.

Steps two to four are an ordered list of ResolutionRule entries; pass a
different list to TypeResolver to support more shapes.
"""

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass

from .errors import InvalidOverrideError, UnresolvedTypeError
from .symbols import SymbolTable
from .typeexpr import ELLIPSIS, UNION, TypeExpr, TypeExpressionError, parse_type
from .types import (
    CodecReference,
    Container,
    ContainerShape,
    CustomOverride,
    Direction,
    FieldDescriptor,
    ModelDescriptor,
    ModelRef,
    Primitive,
    PrimitiveKind,
)

logger = logging.getLogger(__name__)

PRIMITIVE_CODECS: dict[str, PrimitiveKind] = {
    "str": PrimitiveKind.TEXT,
    "int": PrimitiveKind.INTEGER,
    "float": PrimitiveKind.NUMBER,
    "bool": PrimitiveKind.BOOLEAN,
    "Any": PrimitiveKind.JSON,
}

SEQUENCE_SHAPES: dict[str, ContainerShape] = {
    "list": ContainerShape.LIST,
    "List": ContainerShape.LIST,
    "Sequence": ContainerShape.LIST,
    "MutableSequence": ContainerShape.LIST,
    "set": ContainerShape.SET,
    "Set": ContainerShape.SET,
    "frozenset": ContainerShape.FROZENSET,
    "FrozenSet": ContainerShape.FROZENSET,
    "AbstractSet": ContainerShape.SET,
}

TUPLE_NAMES = frozenset(["tuple", "Tuple"])
MAPPING_NAMES = frozenset(["dict", "Dict", "Mapping", "MutableMapping"])


@dataclass(frozen=True)
class FieldContext:
    """Identifies the field being resolved, for error messages."""

    model: str
    field: str
    type_expression: str

    def unresolved(self, reason: str = "") -> UnresolvedTypeError:
        return UnresolvedTypeError(self.model, self.field, self.type_expression, reason)


@dataclass(frozen=True)
class ResolutionRule:
    name: str
    matches: Callable[[TypeExpr, "TypeResolver"], bool]
    build: Callable[[TypeExpr, "TypeResolver", FieldContext], CodecReference]


def _is_primitive(expr: TypeExpr, _resolver: "TypeResolver") -> bool:
    return not expr.args and expr.simple_name in PRIMITIVE_CODECS


def _build_primitive(expr: TypeExpr, _resolver: "TypeResolver", _ctx: FieldContext) -> Primitive:
    return Primitive(PRIMITIVE_CODECS[expr.simple_name])


def _is_optional(expr: TypeExpr, _resolver: "TypeResolver") -> bool:
    if expr.simple_name == "Optional":
        return True
    return expr.simple_name == UNION and any(a.is_none for a in expr.args)


def _build_optional(expr: TypeExpr, resolver: "TypeResolver", ctx: FieldContext) -> Container:
    members = [a for a in expr.args if not a.is_none]
    if len(members) != 1:
        raise ctx.unresolved("only X | None unions are supported")
    return Container(ContainerShape.OPTIONAL, resolver.resolve_expr(members[0], ctx))


def _is_sequence(expr: TypeExpr, _resolver: "TypeResolver") -> bool:
    return expr.simple_name in SEQUENCE_SHAPES and len(expr.args) == 1


def _build_sequence(expr: TypeExpr, resolver: "TypeResolver", ctx: FieldContext) -> Container:
    return Container(SEQUENCE_SHAPES[expr.simple_name], resolver.resolve_expr(expr.args[0], ctx))


def _is_tuple(expr: TypeExpr, _resolver: "TypeResolver") -> bool:
    return expr.simple_name in TUPLE_NAMES and bool(expr.args)


def _build_tuple(expr: TypeExpr, resolver: "TypeResolver", ctx: FieldContext) -> Container:
    if len(expr.args) != 2 or expr.args[1].name != ELLIPSIS:
        raise ctx.unresolved("only homogeneous tuple[X, ...] is supported")
    return Container(ContainerShape.TUPLE, resolver.resolve_expr(expr.args[0], ctx))


def _is_mapping(expr: TypeExpr, _resolver: "TypeResolver") -> bool:
    return expr.simple_name in MAPPING_NAMES and len(expr.args) == 2


def _build_mapping(expr: TypeExpr, resolver: "TypeResolver", ctx: FieldContext) -> Container:
    key, value = expr.args
    if key.args or key.simple_name != "str":
        raise ctx.unresolved("JSON object keys must be str")
    return Container(ContainerShape.MAP, resolver.resolve_expr(value, ctx))


def _is_model(expr: TypeExpr, resolver: "TypeResolver") -> bool:
    return not expr.args and resolver.symbols.lookup(expr.simple_name) is not None


def _build_model(expr: TypeExpr, _resolver: "TypeResolver", _ctx: FieldContext) -> ModelRef:
    return ModelRef(expr.simple_name)


DEFAULT_RULES: tuple[ResolutionRule, ...] = (
    ResolutionRule("primitive", _is_primitive, _build_primitive),
    ResolutionRule("optional", _is_optional, _build_optional),
    ResolutionRule("sequence", _is_sequence, _build_sequence),
    ResolutionRule("tuple", _is_tuple, _build_tuple),
    ResolutionRule("mapping", _is_mapping, _build_mapping),
    ResolutionRule("model", _is_model, _build_model),
)


class TypeResolver:
    """Resolves field types against a frozen symbol table."""

    def __init__(self, symbols: SymbolTable, rules: Sequence[ResolutionRule] = DEFAULT_RULES):
        self.symbols = symbols
        self.rules = tuple(rules)

    def resolve(
        self,
        type_expression: str,
        override: str | None = None,
        *,
        model: str = "<model>",
        field: str = "<field>",
    ) -> CodecReference:
        """Resolve one field type to a codec reference.

        Raises:
            InvalidOverrideError: The override is not a ``module.attr`` name.
            UnresolvedTypeError: No rule matches the type.
        """
        if override is not None:
            # Overrides win even over types that would resolve on their own
            if "." not in override.strip("."):
                raise InvalidOverrideError(model, field, override)
            return CustomOverride(override)

        ctx = FieldContext(model=model, field=field, type_expression=type_expression)
        try:
            expr = parse_type(type_expression)
        except TypeExpressionError as exc:
            raise ctx.unresolved("not a valid type expression") from exc
        return self.resolve_expr(expr, ctx)

    def resolve_expr(self, expr: TypeExpr, ctx: FieldContext) -> CodecReference:
        for rule in self.rules:
            if rule.matches(expr, self):
                codec = rule.build(expr, self, ctx)
                logger.debug("%s.%s: %s -> %s (%s)", ctx.model, ctx.field, expr, codec, rule.name)
                return codec
        raise ctx.unresolved(f"'{expr}' is not a primitive, container or generated model")

    def resolve_field(
        self, model: ModelDescriptor, field: FieldDescriptor, direction: Direction
    ) -> CodecReference:
        return self.resolve(
            field.type_expression,
            field.override(direction),
            model=model.name,
            field=field.name,
        )
