"""Run-scoped registry of model declarations."""

from collections.abc import Iterable, Iterator, Mapping
from types import MappingProxyType

from .errors import ScanError
from .types import ModelDescriptor


class SymbolTable(Mapping[str, ModelDescriptor]):
    """Maps model simple names to their descriptors.

    The table is filled once, from the complete scan, and is read-only
    afterwards. Every model is present before any field is resolved, so
    models may refer to each other in any order, across files, and
    recursively.
    """

    def __init__(self, models: Iterable[ModelDescriptor]) -> None:
        by_name: dict[str, ModelDescriptor] = {}
        for model in models:
            if model.name in by_name:
                raise ScanError(
                    f"Ambiguous model name '{model.name}': "
                    f"{by_name[model.name].qualified_name} and {model.qualified_name}",
                    model=model.name,
                )
            by_name[model.name] = model
        self._by_name = MappingProxyType(by_name)
        self._by_qualified_name = MappingProxyType(
            {model.qualified_name: model for model in by_name.values()}
        )

    def __getitem__(self, name: str) -> ModelDescriptor:
        return self._by_name[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._by_name)

    def __len__(self) -> int:
        return len(self._by_name)

    def __repr__(self) -> str:
        return f"SymbolTable({list(self._by_name)!r})"

    def lookup(self, name: str) -> ModelDescriptor | None:
        return self._by_name.get(name)

    def by_qualified_name(self, qualified_name: str) -> ModelDescriptor | None:
        return self._by_qualified_name.get(qualified_name)

    def models(self) -> list[ModelDescriptor]:
        """All descriptors in scan order."""
        return list(self._by_name.values())
