"""Generation-time errors.

``ScanError`` aborts the whole run. Every other error is raised while
planning or emitting one model and only drops that model (and the models
that depend on it).
"""


class GenerationError(RuntimeError):
    """Base class for all generation-time failures."""

    def __init__(self, message: str, *, model: str | None = None) -> None:
        super().__init__(message)
        self.model = model


class ScanError(GenerationError):
    """Raised for ambiguous or malformed model declarations."""


class ResolutionError(GenerationError):
    """Raised when a field cannot be mapped to a codec."""

    def __init__(self, message: str, *, model: str, field: str | None = None) -> None:
        super().__init__(message, model=model)
        self.field = field


class UnresolvedTypeError(ResolutionError):
    def __init__(self, model: str, field: str, type_expression: str, reason: str = "") -> None:
        message = f"{model}.{field}: cannot resolve a codec for type '{type_expression}'"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message, model=model, field=field)
        self.type_expression = type_expression


class InvalidOverrideError(ResolutionError):
    def __init__(self, model: str, field: str, override: str) -> None:
        super().__init__(
            f"{model}.{field}: custom codec '{override}' must be a qualified name (module.attr)",
            model=model,
            field=field,
        )
        self.override = override


class MissingCodecError(ResolutionError):
    """Raised when a field refers to a model with no codec in the same direction."""

    def __init__(self, model: str, field: str, target: str, direction: str) -> None:
        super().__init__(
            f"{model}.{field}: {target} has no generated {direction}",
            model=model,
            field=field,
        )
        self.target = target


class DependencyFailedError(ResolutionError):
    """Raised when a field refers to a model whose generation failed."""

    def __init__(self, model: str, field: str, target: str) -> None:
        super().__init__(
            f"{model}.{field}: depends on {target}, which failed to generate",
            model=model,
            field=field,
        )
        self.target = target


class InvalidRepresentationError(GenerationError):
    """Raised for an inconsistent representation configuration."""


class ErrorNameCollisionError(GenerationError):
    """Raised when two fields of a model produce the same error variant name."""


class ReservedNameError(GenerationError):
    """Raised when a model name clashes with a name the generated code defines."""
