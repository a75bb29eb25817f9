"""Declarative validation constraints.

Constraints are attached to record members through ``typing.Annotated``
metadata, either as ready instances or as :class:`ConstraintDescriptor`
objects that describe how to build one::

    class Car(pydantic.BaseModel):
        id: Annotated[int, constraint(Range, 1, 10, error_message="Bad id")]
        name: Annotated[str, Required()]

Every constraint implements ``is_valid(value)`` and
``format_message(member_name)``. A constraint may also carry an
``error_message_key`` that is resolved through a localizer at validation time.
"""

import re
import typing

from . import cast as _cast


class ValidationConstraint:
    """Base class for declarative constraints.

    Attributes:
        error_message: Display text template; ``{0}`` is the member name
        error_message_key: Localization key resolved into ``error_message``
        default_message: Template used when no ``error_message`` is set
    """

    default_message: typing.ClassVar[str] = "The field {0} is invalid."

    def __init__(
        self,
        *,
        error_message: str | None = None,
        error_message_key: str | None = None,
    ) -> None:
        """Initialize ValidationConstraint.

        Args:
            error_message: Optional display text template
            error_message_key: Optional localization key for the display text
        """
        self.error_message = error_message
        self.error_message_key = error_message_key

    def is_valid(self, value: typing.Any) -> bool:
        """Check a member value.

        Args:
            value: The value read from the record

        Returns:
            True if the value satisfies the constraint
        """
        raise NotImplementedError

    def message_args(self) -> tuple[typing.Any, ...]:
        """Return the extra positional arguments for the message template."""
        return ()

    def format_message(self, name: str) -> str:
        """Format the failure message for a member.

        Args:
            name: Member name substituted for ``{0}``

        Returns:
            The formatted error message
        """
        template = self.error_message or self.default_message
        return template.format(name, *self.message_args())

    def __repr__(self) -> str:
        return f"{type(self).__name__}{self.message_args()!r}"


class Required(ValidationConstraint):
    """The value must be present; blank strings fail unless explicitly allowed."""

    default_message = "The {0} field is required."

    def __init__(self, *, allow_empty_strings: bool = False, **kwargs: typing.Any):
        super().__init__(**kwargs)
        self.allow_empty_strings = allow_empty_strings

    def is_valid(self, value: typing.Any) -> bool:
        if value is None:
            return False
        if isinstance(value, str) and not self.allow_empty_strings:
            return bool(value.strip())
        return True


class Range(ValidationConstraint):
    """The value must fall between two inclusive bounds.

    When ``operand_type`` is given, the bounds are converted to it on
    construction and every value is converted before comparison, so
    ``Range("2020-01-01", "2020-12-31", operand_type=datetime)`` works
    against both ``datetime`` values and date strings. Without it, numeric
    text such as ``"10"`` is converted to the type of numeric bounds.
    """

    default_message = "The field {0} must be between {1} and {2}."

    def __init__(
        self,
        minimum: typing.Any,
        maximum: typing.Any,
        *,
        operand_type: typing.Any = None,
        **kwargs: typing.Any,
    ) -> None:
        super().__init__(**kwargs)
        if operand_type is not None:
            minimum = _cast.cast_as_annotation(minimum, operand_type)
            maximum = _cast.cast_as_annotation(maximum, operand_type)
        if maximum < minimum:
            raise ValueError(
                f"The maximum value {maximum!r} must be greater than or equal "
                f"to the minimum value {minimum!r}"
            )
        self.minimum = minimum
        self.maximum = maximum
        self.operand_type = operand_type

    def message_args(self) -> tuple[typing.Any, ...]:
        return (self.minimum, self.maximum)

    def _numeric_bound_type(self) -> type | None:
        bounds = (self.minimum, self.maximum)
        if any(isinstance(b, bool) or not isinstance(b, (int, float)) for b in bounds):
            return None
        return float if any(isinstance(b, float) for b in bounds) else int

    def is_valid(self, value: typing.Any) -> bool:
        if value is None or (isinstance(value, str) and not value):
            return True
        operand_type = self.operand_type
        if operand_type is None and isinstance(value, str):
            # numeric text is compared as a number of the bounds' type
            operand_type = self._numeric_bound_type()
        try:
            if operand_type is not None:
                value = _cast.cast_as_annotation(value, operand_type)
            return bool(self.minimum <= value <= self.maximum)
        except _cast.CAST_ERRORS:
            return False


class StringLength(ValidationConstraint):
    """The length of the value must fall between ``minimum`` and ``maximum``."""

    default_message = "The field {0} must be a string with a maximum length of {1}."
    minimum_message = (
        "The field {0} must be a string with a minimum length of {2} "
        "and a maximum length of {1}."
    )

    def __init__(self, maximum: int, *, minimum: int = 0, **kwargs: typing.Any):
        super().__init__(**kwargs)
        if maximum < 0 or minimum > maximum:
            raise ValueError(
                f"Invalid length bounds: minimum={minimum}, maximum={maximum}"
            )
        self.maximum = maximum
        self.minimum = minimum

    def message_args(self) -> tuple[typing.Any, ...]:
        return (self.maximum, self.minimum)

    def format_message(self, name: str) -> str:
        if self.error_message is None and self.minimum:
            return self.minimum_message.format(name, *self.message_args())
        return super().format_message(name)

    def is_valid(self, value: typing.Any) -> bool:
        if value is None:
            return True
        return self.minimum <= len(str(value)) <= self.maximum


class RegularExpression(ValidationConstraint):
    """The whole value must match a regular expression."""

    default_message = "The field {0} must match the regular expression '{1}'."

    def __init__(self, pattern: str, **kwargs: typing.Any) -> None:
        super().__init__(**kwargs)
        self.pattern = pattern
        self._regex = re.compile(pattern)

    def message_args(self) -> tuple[typing.Any, ...]:
        return (self.pattern,)

    def is_valid(self, value: typing.Any) -> bool:
        if value is None:
            return True
        text = str(value)
        if not text:
            return True
        return self._regex.fullmatch(text) is not None


class EmailAddress(ValidationConstraint):
    """The value must look like an e-mail address (a single inner ``@``)."""

    default_message = "The {0} field is not a valid e-mail address."

    def is_valid(self, value: typing.Any) -> bool:
        if value is None:
            return True
        if not isinstance(value, str):
            return False
        if "\r" in value or "\n" in value:
            return False
        at_index = value.find("@")
        return (
            at_index > 0
            and at_index != len(value) - 1
            and at_index == value.rfind("@")
        )


class ConstraintDescriptor(typing.NamedTuple):
    """Static description of a constraint to be built at registration time.

    Attributes:
        kind: The constraint class to instantiate
        args: Positional constructor arguments
        overrides: (name, value) pairs set on the instance after construction
    """

    kind: type
    args: tuple[typing.Any, ...] = ()
    overrides: tuple[tuple[str, typing.Any], ...] = ()


def constraint(
    kind: type, *args: typing.Any, **overrides: typing.Any
) -> ConstraintDescriptor:
    """Describe a constraint for use in ``typing.Annotated`` metadata.

    Args:
        kind: The constraint class
        *args: Positional constructor arguments
        **overrides: Attributes set on the instance after construction

    Returns:
        A ConstraintDescriptor

    Example:
        >>> constraint(Range, 2, 20, error_message_key="Validation.Number.Range")
    """
    return ConstraintDescriptor(kind, args, tuple(overrides.items()))
