"""Exceptions raised for programming and configuration mistakes.

Failed checks on user data are never raised; they are reported as outcomes
inside a :class:`~fieldwise.result.ModelValidationResult`. The exceptions in
this module signal a misuse of the engine itself (a bad member reference, a
record of the wrong type, a write to a read-only member) and are raised
immediately from the offending call.
"""

import typing


class FieldwiseError(Exception):
    """Base exception for all fieldwise errors.

    Attributes:
        context: Dictionary with details about the error (model, member, ...)
    """

    def __init__(
        self, message: str, context: dict[str, typing.Any] | None = None
    ) -> None:
        """Initialize FieldwiseError.

        Args:
            message: Human-readable error message
            context: Optional dictionary with error details
        """
        super().__init__(message)
        self.context = context or {}


class MemberNotFoundError(FieldwiseError, AttributeError):
    """Raised at registration time when a member cannot be resolved for reading."""

    def __init__(self, model_type: type, member: typing.Any) -> None:
        super().__init__(
            f"Member {member!r} was not found as a readable public member of "
            f"type '{model_type.__qualname__}'",
            context={"model_type": model_type, "member": member},
        )
        self.model_type = model_type
        self.member = member


class MemberNotWritableError(FieldwiseError, AttributeError):
    """Raised when a value is written to a member that has no setter."""

    def __init__(self, model_type: type, member_name: str) -> None:
        super().__init__(
            f"Member '{member_name}' of type '{model_type.__qualname__}' "
            "cannot be written to",
            context={"model_type": model_type, "member": member_name},
        )
        self.model_type = model_type
        self.member_name = member_name


class ModelTypeMismatchError(FieldwiseError, TypeError):
    """Raised when a validator receives a record of a type it was not built for."""

    def __init__(self, expected: type, instance: typing.Any) -> None:
        super().__init__(
            f"Instance must not be None and of type '{expected.__qualname__}', "
            f"got '{type(instance).__qualname__}'",
            context={"expected": expected, "actual": type(instance)},
        )
        self.expected = expected


class ConstraintMaterializationError(FieldwiseError, ValueError):
    """Raised when a declarative constraint cannot be instantiated.

    Only raised when the owning validator was configured with
    ``MaterializationOption.RAISE``; by default the constraint is skipped.
    """

    def __init__(self, member_name: str, descriptor: typing.Any) -> None:
        super().__init__(
            f"Could not materialize constraint {descriptor!r} "
            f"for member '{member_name}'",
            context={"member": member_name, "descriptor": descriptor},
        )
        self.member_name = member_name
        self.descriptor = descriptor


class ValidatorConfigurationError(FieldwiseError, ValueError):
    """Raised when a validator or context is configured inconsistently."""
