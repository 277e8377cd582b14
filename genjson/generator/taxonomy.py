"""Reader error taxonomy synthesis."""

from .errors import ErrorNameCollisionError
from .types import (
    DelegateInvalid,
    ErrorTaxonomy,
    ErrorVariant,
    FieldInvalid,
    FieldMissing,
    ModelDescriptor,
    ParameterDelegate,
    Representation,
    ShapeMismatch,
)


def synthesize_errors(model: ModelDescriptor, representation: Representation) -> ErrorTaxonomy:
    """Derive the failures a reader for ``model`` can return.

    An object reader fails with ``<Model>NotJsonObject`` or with one
    ``<Model><Field>MissingError`` / ``<Model><Field>InvalidError`` per
    field. A parameter delegate adds no field layer: the wrapped codec's
    failure is reported as ``<Model>InvalidJsonType``.
    """
    variants: list[ErrorVariant]
    if isinstance(representation, ParameterDelegate):
        variants = [DelegateInvalid(model.name)]
    else:
        variants = [ShapeMismatch(model.name)]
        for field in model.fields:
            variants.append(FieldMissing(model.name, field.name))
            variants.append(FieldInvalid(model.name, field.name))

    seen: dict[str, ErrorVariant] = {}
    for variant in variants:
        if variant.name in seen:
            raise ErrorNameCollisionError(
                f"{model.name}: fields produce the same error name {variant.name}",
                model=model.name,
            )
        seen[variant.name] = variant

    return ErrorTaxonomy(model=model.name, variants=tuple(variants))
