"""Tests for primitive readers and container combinators."""

import pytest

from genjson.runtime import (
    Failure,
    InvalidJsonType,
    Success,
    dict_of,
    frozenset_of,
    list_of,
    optional,
    read_bool,
    read_float,
    read_int,
    read_json,
    read_str,
    set_of,
    tuple_of,
)


def describe_primitive_readers():
    @pytest.mark.parametrize(
        "reader,value",
        [
            (read_str, "text"),
            (read_int, 3),
            (read_bool, False),
            (read_json, {"any": [1, None]}),
        ],
    )
    def accept_matching_values(expect, reader, value):
        expect(reader(value)) == Success(value)

    @pytest.mark.parametrize(
        "reader,value,expected,actual",
        [
            (read_str, 1, "string", "number"),
            (read_int, "1", "integer", "string"),
            (read_int, 1.5, "integer", "number"),
            (read_int, True, "integer", "boolean"),
            (read_float, None, "number", "null"),
            (read_float, False, "number", "boolean"),
            (read_bool, 0, "boolean", "number"),
            (read_str, [], "string", "array"),
            (read_str, {}, "string", "object"),
        ],
    )
    def reject_other_values(expect, reader, value, expected, actual):
        expect(reader(value)) == Failure(InvalidJsonType(expected, actual))

    def read_float_widens_integers(expect):
        result = read_float(3)
        expect(result) == Success(3.0)
        expect(isinstance(result.value, float)) == True


def describe_containers():
    def read_lists_in_order(expect):
        expect(list_of(read_int)([1, 2, 3])) == Success([1, 2, 3])
        expect(list_of(read_int)([])) == Success([])

    def stop_at_first_failing_element(expect):
        result = list_of(read_int)([1, "two", None])
        expect(result) == Failure(InvalidJsonType("integer", "string"))

    def require_arrays(expect):
        expect(list_of(read_int)({"a": 1})) == Failure(InvalidJsonType("array", "object"))
        expect(tuple_of(read_int)("abc")) == Failure(InvalidJsonType("array", "string"))

    def read_sets_and_tuples(expect):
        expect(set_of(read_str)(["a", "b", "a"])) == Success({"a", "b"})
        expect(tuple_of(read_str)(["a", "b"])) == Success(("a", "b"))

    def read_objects_as_dicts(expect):
        reader = dict_of(list_of(read_int))
        expect(reader({"a": [1], "b": []})) == Success({"a": [1], "b": []})
        expect(reader({"a": [1], "b": ["x"]})) == Failure(InvalidJsonType("integer", "string"))
        expect(reader([])) == Failure(InvalidJsonType("object", "array"))

    def read_null_as_none(expect):
        reader = optional(read_str)
        expect(reader(None)) == Success(None)
        expect(reader("x")) == Success("x")
        expect(reader(1)) == Failure(InvalidJsonType("string", "number"))

    def nest(expect):
        reader = list_of(optional(dict_of(read_bool)))
        expect(reader([None, {"on": True}])) == Success([None, {"on": True}])


def describe_large_numbers():
    def read_float_rejects_integers_beyond_float_range(expect):
        result = read_float(10**400)
        expect(result) == Failure(InvalidJsonType("number", "integer out of range"))

    def read_int_keeps_large_integers(expect):
        expect(read_int(10**400)) == Success(10**400)


def describe_frozenset_of():
    def builds_frozensets(expect):
        result = frozenset_of(read_str)(["a", "b", "a"])
        expect(result) == Success(frozenset({"a", "b"}))
        expect(type(result.value)) == frozenset

    def requires_arrays(expect):
        expect(frozenset_of(read_str)("a")) == Failure(InvalidJsonType("array", "string"))
