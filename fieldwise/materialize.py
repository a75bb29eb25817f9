"""Build constraint validators from declarative member metadata."""

import copy
import logging
import typing

from . import accessors as _accessors
from . import constraints as _constraints
from . import errors as _errors
from . import options as _options
from . import validators as _validators

logger = logging.getLogger(__name__)


def _instantiate(
    descriptor: _constraints.ConstraintDescriptor,
) -> _constraints.ValidationConstraint:
    """Build a constraint from its descriptor.

    Raises:
        AttributeError: If an override names an attribute the constraint lacks
        Exception: Whatever the constraint's constructor raises
    """
    instance = descriptor.kind(*descriptor.args)
    for name, value in descriptor.overrides:
        if not hasattr(instance, name):
            raise AttributeError(
                f"{descriptor.kind.__name__} has no attribute {name!r}"
            )
        setattr(instance, name, value)
    return instance


def _is_constraint_kind(item: typing.Any) -> bool:
    if isinstance(item, _constraints.ValidationConstraint):
        return True
    return (
        isinstance(item, _constraints.ConstraintDescriptor)
        and isinstance(item.kind, type)
        and issubclass(item.kind, _constraints.ValidationConstraint)
    )


def create_constraint_validator(
    accessor: _accessors.MemberAccessor,
    constraint: _constraints.ValidationConstraint,
) -> _validators.MemberConstraintValidator:
    """Wrap a single constraint instance in a member validator.

    Args:
        accessor: Accessor for the constrained member
        constraint: The constraint instance

    Returns:
        A MemberConstraintValidator

    Raises:
        TypeError: If ``constraint`` is not a ValidationConstraint
    """
    if not isinstance(constraint, _constraints.ValidationConstraint):
        raise TypeError(
            f"Expected a ValidationConstraint, got {type(constraint).__name__}"
        )
    return _validators.MemberConstraintValidator(accessor, constraint)


def materialize_constraints(
    accessor: _accessors.MemberAccessor,
    *,
    on_error: _options.MaterializationOption = _options.MaterializationOption.SKIP,
) -> list[_validators.MemberConstraintValidator]:
    """Create one validator per declarative constraint attached to a member.

    Descriptors are instantiated with their positional arguments and then
    receive their overrides; ready constraint instances are copied so every
    registration owns its own. Metadata that is not a constraint is ignored.

    Args:
        accessor: Accessor for the member whose metadata is read
        on_error: SKIP logs and drops a constraint that fails to build;
            RAISE raises ConstraintMaterializationError

    Returns:
        Validators in metadata order

    Raises:
        ConstraintMaterializationError: If on_error is RAISE and a constraint
            fails to build
    """
    result: list[_validators.MemberConstraintValidator] = []
    for item in accessor.metadata:
        if not _is_constraint_kind(item):
            continue

        try:
            if isinstance(item, _constraints.ValidationConstraint):
                instance = copy.copy(item)
            else:
                instance = _instantiate(item)
        except Exception as e:
            if on_error == _options.MaterializationOption.RAISE:
                raise _errors.ConstraintMaterializationError(accessor.name, item) from e
            logger.warning(
                "Skipping constraint %r on %s.%s: %s",
                item,
                accessor.model_type.__qualname__,
                accessor.name,
                e,
                exc_info=True,
            )
            continue

        result.append(create_constraint_validator(accessor, instance))
    return result
