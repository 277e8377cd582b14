"""Per-model planning and failure isolation."""

import logging
from collections.abc import Iterable
from dataclasses import dataclass

from .errors import DependencyFailedError, GenerationError, MissingCodecError
from .representation import select_representation
from .resolver import TypeResolver
from .symbols import SymbolTable
from .taxonomy import synthesize_errors
from .types import (
    Direction,
    FieldPlan,
    ModelDescriptor,
    ModelPlan,
    ObjectRepresentation,
    model_refs,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GenerationFailure:
    """A model dropped from one direction, and why."""

    model: str
    direction: Direction
    error: GenerationError

    @property
    def message(self) -> str:
        return str(self.error)


def plan_model(model: ModelDescriptor, direction: Direction, resolver: TypeResolver) -> ModelPlan:
    """Resolve, select and synthesize everything one model needs in one direction."""
    representation = select_representation(model, direction)
    ignored = representation.ignored if isinstance(representation, ObjectRepresentation) else ()

    fields = tuple(
        FieldPlan(field=field, codec=resolver.resolve_field(model, field, direction))
        for field in model.fields
        if field.name not in ignored
    )
    errors = synthesize_errors(model, representation) if direction == Direction.READER else None
    dependencies = tuple(dict.fromkeys(ref for fp in fields for ref in model_refs(fp.codec)))

    return ModelPlan(
        model=model,
        direction=direction,
        representation=representation,
        fields=fields,
        errors=errors,
        dependencies=dependencies,
    )


def plan_models(
    symbols: SymbolTable, direction: Direction, resolver: TypeResolver | None = None
) -> tuple[list[ModelPlan], list[GenerationFailure]]:
    """Plan every model marked for ``direction``.

    A failing model is reported and left out; models that refer to it, or to
    a model with no codec in this direction, are left out as well. All other
    models are unaffected.
    """
    resolver = resolver or TypeResolver(symbols)
    plans: list[ModelPlan] = []
    failures: list[GenerationFailure] = []

    for model in symbols.models():
        if not model.generates(direction):
            continue
        try:
            plans.append(plan_model(model, direction, resolver))
        except GenerationError as exc:
            failures.append(GenerationFailure(model.name, direction, exc))

    for plan in plans:
        for target in plan.dependencies:
            if not symbols[target].generates(direction):
                error = MissingCodecError(
                    plan.name, dependency_field(plan, target), target, direction.value
                )
                failures.append(GenerationFailure(plan.name, direction, error))
                break

    plans, dropped = prune_dependents(plans, {f.model for f in failures}, direction)
    failures.extend(dropped)

    for failure in failures:
        logger.debug("%s %s dropped: %s", failure.model, direction.value, failure.message)
    return plans, failures


def prune_dependents(
    plans: Iterable[ModelPlan], failed: set[str], direction: Direction
) -> tuple[list[ModelPlan], list[GenerationFailure]]:
    """Drop failed plans and, transitively, every plan that refers to one."""
    failed = set(failed)
    kept = [plan for plan in plans if plan.name not in failed]
    failures: list[GenerationFailure] = []

    changed = True
    while changed:
        changed = False
        for plan in list(kept):
            target = next((d for d in plan.dependencies if d in failed), None)
            if target is None:
                continue
            error = DependencyFailedError(plan.name, dependency_field(plan, target), target)
            failures.append(GenerationFailure(plan.name, direction, error))
            failed.add(plan.name)
            kept.remove(plan)
            changed = True

    return kept, failures


def dependency_field(plan: ModelPlan, target: str) -> str:
    """Name of the first field of ``plan`` that refers to ``target``."""
    return next(fp.field.name for fp in plan.fields if target in model_refs(fp.codec))
