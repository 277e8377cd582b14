"""Runtime support imported by generated readers and writers."""

from .codecs import (
    InvalidJsonType,
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
from .extractors import ABSENT, ObjectValueExtractor, construct
from .markers import generate_json, generate_reader, generate_writer
from .registry import CodecNotFoundError, CodecRegistry, JsonReader, JsonWriter
from .result import Failure, Result, ResultError, Success

__all__ = [
    "ABSENT",
    "CodecNotFoundError",
    "CodecRegistry",
    "Failure",
    "InvalidJsonType",
    "JsonReader",
    "JsonWriter",
    "ObjectValueExtractor",
    "Result",
    "ResultError",
    "Success",
    "construct",
    "dict_of",
    "frozenset_of",
    "generate_json",
    "generate_reader",
    "generate_writer",
    "list_of",
    "optional",
    "read_bool",
    "read_float",
    "read_int",
    "read_json",
    "read_str",
    "set_of",
    "tuple_of",
]
