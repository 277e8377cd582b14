"""Type expression parser using Lark."""

import os
from dataclasses import dataclass
from typing import Any

from lark import Lark
from lark.exceptions import LarkError
from lark.visitors import Transformer

_g_parser: Lark | None = None

UNION = "Union"
NONE = "None"
ELLIPSIS = "..."


class TypeExpressionError(ValueError):
    """Raised when an annotation cannot be parsed."""


@dataclass(frozen=True)
class TypeExpr:
    """A parsed annotation: a (possibly dotted) name and its type arguments.

    ``X | Y`` is represented as ``TypeExpr("Union", (X, Y))``.
    """

    name: str
    args: tuple["TypeExpr", ...] = ()

    @property
    def simple_name(self) -> str:
        return self.name.rpartition(".")[2]

    @property
    def is_none(self) -> bool:
        return self.name == NONE and not self.args

    def __str__(self) -> str:
        if self.name == UNION and self.args:
            return " | ".join(str(a) for a in self.args)
        if not self.args:
            return self.name
        return f"{self.name}[{', '.join(str(a) for a in self.args)}]"


class TreeTransformer(Transformer):
    """Transform parse tree into TypeExpr nodes."""

    def name(self, args: list[Any]) -> TypeExpr:
        return TypeExpr(name=".".join(str(a) for a in args))

    def generic(self, args: list[Any]) -> TypeExpr:
        base: TypeExpr = args[0]
        return TypeExpr(name=base.name, args=tuple(args[1:]))

    def union(self, args: list[Any]) -> TypeExpr:
        return TypeExpr(name=UNION, args=tuple(args))

    def quoted(self, args: list[Any]) -> TypeExpr:
        # Forward reference: the string holds another annotation
        return parse_type(str(args[0])[1:-1])

    def ellipsis(self, _args: list[Any]) -> TypeExpr:
        return TypeExpr(name=ELLIPSIS)


def parse_type(text: str) -> TypeExpr:
    """Parse an annotation's source text."""
    global _g_parser

    if not _g_parser:
        with open(f"{os.path.dirname(__file__)}/typeexpr.lark", encoding="utf-8") as f:
            grammar = f.read()
        _g_parser = Lark(grammar, parser="lalr")

    try:
        tree = _g_parser.parse(text)
        result = TreeTransformer().transform(tree)
    except LarkError as exc:
        raise TypeExpressionError(f"Invalid type expression '{text}'") from exc
    if not isinstance(result, TypeExpr):
        raise TypeExpressionError(f"Invalid type expression '{text}'")
    return result
