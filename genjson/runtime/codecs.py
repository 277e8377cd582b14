"""Primitive readers and container combinators used by generated code.

A reader is any callable taking a decoded JSON value (the output of
``json.loads``) and returning a Result. Containers read their elements in
sequence order and stop at the first element that fails.
"""

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, TypeVar

from .result import Failure, Result, Success

T = TypeVar("T")

Reader = Callable[[Any], Result[Any, Any]]


@dataclass(frozen=True, slots=True)
class InvalidJsonType:
    """Failure value of the primitive readers and container combinators."""

    expected: str
    actual: str

    @classmethod
    def of(cls, expected: str, value: Any) -> "InvalidJsonType":
        return cls(expected=expected, actual=_json_type_name(value))


def _json_type_name(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, list):
        return "array"
    if isinstance(value, dict):
        return "object"
    return type(value).__name__


def read_str(value: Any) -> Result[str, InvalidJsonType]:
    if isinstance(value, str):
        return Success(value)
    return Failure(InvalidJsonType.of("string", value))


def read_int(value: Any) -> Result[int, InvalidJsonType]:
    # bool is a subclass of int
    if isinstance(value, int) and not isinstance(value, bool):
        return Success(value)
    return Failure(InvalidJsonType.of("integer", value))


def read_float(value: Any) -> Result[float, InvalidJsonType]:
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        try:
            return Success(float(value))
        except OverflowError:
            # json.loads keeps integers of any size
            return Failure(InvalidJsonType("number", "integer out of range"))
    return Failure(InvalidJsonType.of("number", value))


def read_bool(value: Any) -> Result[bool, InvalidJsonType]:
    if isinstance(value, bool):
        return Success(value)
    return Failure(InvalidJsonType.of("boolean", value))


def read_json(value: Any) -> Result[Any, InvalidJsonType]:
    return Success(value)


def _read_sequence(reader: Reader, items: list[Any]) -> Result[list[Any], Any]:
    out: list[Any] = []
    for item in items:
        result = reader(item)
        if isinstance(result, Failure):
            return result
        out.append(result.value)
    return Success(out)


def list_of(reader: Reader) -> Reader:
    """Read a JSON array into a list."""

    def read(value: Any) -> Result[list[Any], Any]:
        if not isinstance(value, list):
            return Failure(InvalidJsonType.of("array", value))
        return _read_sequence(reader, value)

    return read


def set_of(reader: Reader) -> Reader:
    """Read a JSON array into a set."""

    def read(value: Any) -> Result[set[Any], Any]:
        return list_of(reader)(value).map(set)

    return read


def frozenset_of(reader: Reader) -> Reader:
    """Read a JSON array into a frozenset."""

    def read(value: Any) -> Result[frozenset[Any], Any]:
        return list_of(reader)(value).map(frozenset)

    return read


def tuple_of(reader: Reader) -> Reader:
    """Read a JSON array into a tuple."""

    def read(value: Any) -> Result[tuple[Any, ...], Any]:
        return list_of(reader)(value).map(tuple)

    return read


def dict_of(reader: Reader) -> Reader:
    """Read a JSON object into a dict, reading each value with ``reader``."""

    def read(value: Any) -> Result[dict[str, Any], Any]:
        if not isinstance(value, dict):
            return Failure(InvalidJsonType.of("object", value))
        out: dict[str, Any] = {}
        for key, item in value.items():
            result = reader(item)
            if isinstance(result, Failure):
                return result
            out[key] = result.value
        return Success(out)

    return read


def optional(reader: Reader) -> Reader:
    """Read ``null`` as None and anything else with ``reader``."""

    def read(value: Any) -> Result[Any, Any]:
        if value is None:
            return Success(None)
        return reader(value)

    return read
