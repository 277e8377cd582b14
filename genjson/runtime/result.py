"""Success/failure values returned by generated readers."""

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Generic, Literal, TypeVar

T = TypeVar("T")
E = TypeVar("E")
U = TypeVar("U")
F = TypeVar("F")


class ResultError(RuntimeError):
    """Raised when unwrapping a failed result."""


@dataclass(frozen=True, slots=True)
class Success(Generic[T]):
    """A successfully read value."""

    value: T

    @property
    def is_success(self) -> Literal[True]:
        return True

    @property
    def is_failure(self) -> Literal[False]:
        return False

    def map(self, fn: Callable[[T], U]) -> "Success[U]":
        return Success(fn(self.value))

    def flat_map(self, fn: Callable[[T], "Result[U, F]"]) -> "Result[U, F]":
        return fn(self.value)

    def map_error(self, fn: Callable[[Any], Any]) -> "Success[T]":
        return self

    def get_or_else(self, default: Any) -> T:
        return self.value

    def unwrap(self) -> T:
        return self.value


@dataclass(frozen=True, slots=True)
class Failure(Generic[E]):
    """A failed read carrying one error value.

    Generated readers put a member of the model's error enum here; the
    primitive readers put an InvalidJsonType.
    """

    error: E

    @property
    def is_success(self) -> Literal[False]:
        return False

    @property
    def is_failure(self) -> Literal[True]:
        return True

    def map(self, fn: Callable[[Any], Any]) -> "Failure[E]":
        return self

    def flat_map(self, fn: Callable[[Any], Any]) -> "Failure[E]":
        return self

    def map_error(self, fn: Callable[[E], F]) -> "Failure[F]":
        return Failure(fn(self.error))

    def get_or_else(self, default: U) -> U:
        return default

    def unwrap(self) -> Any:
        raise ResultError(f"Called unwrap() on a failed result: {self.error!r}")


Result = Success[T] | Failure[E]
