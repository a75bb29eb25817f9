"""Built-in custom validators registered through the fluent API."""

import typing

from . import accessors as _accessors
from . import constraints as _constraints
from . import context as _context
from . import result as _result

if typing.TYPE_CHECKING:
    from .model import ModelValidator

_EMAIL = _constraints.EmailAddress()
_REQUIRED = _constraints.Required()

EMAIL_BAD_FORMAT_KEY = "Validation.Email.BadFormat"
REQUIRED_KEY = "Validation.Required.NotNull"


def _normalize_email(
    context: _context.MemberValidatorContext, value: typing.Any
) -> typing.Any:
    if isinstance(value, str):
        return value.strip().lower()
    return value


def _check_email(
    context: _context.MemberValidatorContext, value: typing.Any
) -> _result.MemberResult:
    if value is None:
        return context.succeed()
    if not _EMAIL.is_valid(value):
        return context.fail(context.localize(EMAIL_BAD_FORMAT_KEY, "Invalid Email format."))
    return context.succeed()


def _commit_if_passed(context: _context.MemberValidatorContext, value: typing.Any) -> None:
    if not context.is_failed:
        context.try_set_value(value)


def _check_required(
    context: _context.MemberValidatorContext, value: typing.Any
) -> _result.MemberResult:
    if _REQUIRED.is_valid(value):
        return context.succeed()
    return context.fail(context.localize(REQUIRED_KEY, "Field is required."))


def add_email(
    validator: "ModelValidator", selector: _accessors.MemberSelector
) -> "ModelValidator":
    """Register an e-mail check that trims and lower-cases the member.

    The normalized address is written back only when it passes and the
    member is writable.

    Args:
        validator: The model validator to register with
        selector: Member name or selector callable

    Returns:
        The model validator, for chaining
    """
    return validator.add_custom(
        selector,
        lambda config: config.with_pre_validation(_normalize_email)
        .with_validation(_check_email)
        .with_post_validation(_commit_if_passed),
    )


def add_required(
    validator: "ModelValidator", selector: _accessors.MemberSelector
) -> "ModelValidator":
    """Register a check that the member is not None or a blank string.

    Args:
        validator: The model validator to register with
        selector: Member name or selector callable

    Returns:
        The model validator, for chaining
    """
    return validator.add_custom(
        selector, lambda config: config.with_validation(_check_required)
    )
