"""Base classes for generated codecs and the registries that aggregate them."""

from collections.abc import Iterator, Mapping
from typing import Any, ClassVar, Generic, TypeVar

from .result import Result

T = TypeVar("T")
E = TypeVar("E")


class CodecNotFoundError(KeyError):
    """Raised when no codec is registered for a model."""


class JsonReader(Generic[T, E]):
    """Base class for generated readers.

    Subclasses set ``model`` and ``errors`` and implement ``read``.

    Example:
        class ItemReader(JsonReader[Item, ItemReaderError]):
            model = Item
            errors = ItemReaderError

            @classmethod
            def read(cls, value: Any) -> Result[Item, ItemReaderError]:
                ...
    """

    model: ClassVar[type]
    errors: ClassVar[type]

    @classmethod
    def read(cls, value: Any) -> Result[T, E]:
        """Read a model instance from a decoded JSON value. Generated code overrides this."""
        raise NotImplementedError("read() must be implemented by generated code")


class JsonWriter(Generic[T]):
    """Base class for generated writers."""

    model: ClassVar[type]

    @classmethod
    def write(cls, obj: T) -> Any:
        """Convert a model instance to a JSON-compatible value. Generated code overrides this."""
        raise NotImplementedError("write() must be implemented by generated code")


def qualified_name(model: type) -> str:
    return f"{model.__module__}.{model.__qualname__}"


class CodecRegistry(Mapping[str, type]):
    """Generated codecs keyed by the fully-qualified name of their model."""

    def __init__(self, kind: str, codecs: Mapping[str, type]) -> None:
        self.kind = kind
        self._codecs = dict(codecs)

    def __getitem__(self, key: str | type) -> type:
        name = key if isinstance(key, str) else qualified_name(key)
        try:
            return self._codecs[name]
        except KeyError:
            raise CodecNotFoundError(f"No generated {self.kind} for {name}") from None

    def __contains__(self, key: object) -> bool:
        if isinstance(key, type):
            key = qualified_name(key)
        return key in self._codecs

    def __iter__(self) -> Iterator[str]:
        return iter(self._codecs)

    def __len__(self) -> int:
        return len(self._codecs)

    def __repr__(self) -> str:
        return f"CodecRegistry({self.kind!r}, {sorted(self._codecs)!r})"

    def for_type(self, model: type) -> type:
        return self[model]

    def read(self, model: type[T], value: Any) -> Result[T, Any]:
        """Read ``value`` with the registered reader for ``model``."""
        return self[model].read(value)

    def write(self, obj: Any) -> Any:
        """Write ``obj`` with the writer registered for its type."""
        return self[type(obj)].write(obj)
