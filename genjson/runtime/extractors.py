"""Keyed field extraction for object representations."""

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from .codecs import Reader
from .result import Failure, Result, Success

T = TypeVar("T")
E = TypeVar("E")


class _Absent:
    def __repr__(self) -> str:
        return "ABSENT"


# Marks a missing key on a field that has a default in the model
ABSENT: Any = _Absent()


@dataclass(frozen=True, slots=True)
class ObjectValueExtractor(Generic[T, E]):
    """Reads one key of a JSON object and maps failures to model errors.

    Args:
        key: The JSON object key.
        reader: Reader for the value under ``key``.
        missing: Error returned when the key is absent and required.
        invalid: Error returned when ``reader`` fails.
        required: When False an absent key yields ``Success(ABSENT)`` so the
            model's own default applies.
    """

    key: str
    reader: Reader
    missing: E
    invalid: E
    required: bool = True

    def extract(self, obj: Mapping[str, Any]) -> Result[T, E]:
        if self.key not in obj:
            if self.required:
                return Failure(self.missing)
            return Success(ABSENT)
        result = self.reader(obj[self.key])
        if isinstance(result, Failure):
            return Failure(self.invalid)
        return result


def construct(model: type[T], /, **kwargs: Any) -> T:
    """Instantiate ``model`` leaving out absent keyword arguments."""
    return model(**{name: value for name, value in kwargs.items() if value is not ABSENT})
