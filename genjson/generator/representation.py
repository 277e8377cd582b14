"""Per-model, per-direction representation selection."""

from .errors import InvalidRepresentationError
from .types import (
    Direction,
    ModelDescriptor,
    ObjectRepresentation,
    ParameterDelegate,
    Representation,
    RepresentationKind,
)


def representation_kind(model: ModelDescriptor, direction: Direction) -> RepresentationKind:
    """The configured kind; a direction-specific value wins over the shared one."""
    specific = (
        model.reader_representation
        if direction == Direction.READER
        else model.writer_representation
    )
    return specific or model.representation or RepresentationKind.OBJECT


def select_representation(model: ModelDescriptor, direction: Direction) -> Representation:
    """Choose how ``model`` maps to JSON in ``direction``.

    The writer ignore list only applies to writers; readers always expect
    every field.

    Raises:
        InvalidRepresentationError: A parameter delegate on a model without
            exactly one field, or an ignore list naming unknown fields or
            combined with a writer delegate.
    """
    kind = representation_kind(model, direction)
    ignored = frozenset(model.writer_ignore) if direction == Direction.WRITER else frozenset()

    unknown = sorted(name for name in ignored if model.field_named(name) is None)
    if unknown:
        raise InvalidRepresentationError(
            f"{model.name}: json_writer_ignore names unknown fields: {', '.join(unknown)}",
            model=model.name,
        )

    if kind == RepresentationKind.PARAMETER:
        if len(model.fields) != 1:
            raise InvalidRepresentationError(
                f"{model.name}: parameter representation requires exactly one field, "
                f"found {len(model.fields)}",
                model=model.name,
            )
        if ignored:
            raise InvalidRepresentationError(
                f"{model.name}: json_writer_ignore cannot be used with a parameter writer",
                model=model.name,
            )
        return ParameterDelegate()

    return ObjectRepresentation(ignored=ignored)
