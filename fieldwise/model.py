"""Model validator: registration of member validators and orchestration of a run."""

import logging
import types
import typing

from . import accessors as _accessors
from . import constraints as _constraints
from . import errors as _errors
from . import extensions as _extensions
from . import localization as _localization
from . import materialize as _materialize
from . import options as _options
from . import result as _result
from . import validators as _validators

logger = logging.getLogger(__name__)

ModelT = typing.TypeVar("ModelT")


class ModelValidator(typing.Generic[ModelT]):
    """Validates records of one type against validators registered per member.

    Registration and validation are separate phases: register everything
    first, then share the validator (read-only) across as many runs as
    needed. Registration calls return the validator for chaining::

        validator = (
            ModelValidator(Car)
            .add_attributes()
            .add_required(lambda car: car.name)
            .add_email(lambda car: car.email)
        )
        result = await validator.async_validate(car)

    Attributes:
        model_type: The record type this validator is built for
        accessors: Cache used to resolve members
        on_constraint_error: Policy for declarative constraints that fail to build
    """

    def __init__(
        self,
        model_type: type[ModelT],
        *,
        accessors: _accessors.AccessorCache | None = None,
        on_constraint_error: _options.MaterializationOption = _options.MaterializationOption.SKIP,
    ) -> None:
        """Initialize ModelValidator.

        Args:
            model_type: The record type to validate
            accessors: Accessor cache (default: the process-wide cache)
            on_constraint_error: SKIP or RAISE for broken declarative constraints
        """
        if not isinstance(model_type, type):
            raise TypeError(f"model_type must be a class, got {model_type!r}")
        self.model_type = model_type
        self.accessors = accessors if accessors is not None else _accessors.default_cache
        self.on_constraint_error = _options.MaterializationOption(on_constraint_error)
        self._members: dict[str, list[_validators.MemberValidator]] = {}

    @property
    def members(self) -> typing.Mapping[str, tuple[_validators.MemberValidator, ...]]:
        """Registered validators per member, in registration order."""
        return types.MappingProxyType(
            {name: tuple(items) for name, items in self._members.items()}
        )

    def _resolve(self, selector: _accessors.MemberSelector) -> _accessors.MemberAccessor:
        name = _accessors.member_name_of(self.model_type, selector)
        return self.accessors.resolve(self.model_type, name)

    def register(
        self, member_name: str, validator: _validators.MemberValidator
    ) -> "ModelValidator[ModelT]":
        """Append a validator to a member's list.

        Args:
            member_name: Name the validator's outcomes are reported under
            validator: The member validator

        Returns:
            This validator, for chaining

        Raises:
            ValueError: If member_name is blank
            TypeError: If validator is not a MemberValidator
        """
        if not member_name or not member_name.strip():
            raise ValueError("member_name must not be blank")
        if not isinstance(validator, _validators.MemberValidator):
            raise TypeError(
                f"Expected a MemberValidator, got {type(validator).__name__}"
            )
        self._members.setdefault(member_name, []).append(validator)
        logger.debug(
            "Registered %r on %s.%s", validator, self.model_type.__qualname__, member_name
        )
        return self

    add = register

    def remove(self, member_name: str) -> "ModelValidator[ModelT]":
        """Remove every validator registered for a member.

        Blank or unknown names are ignored.

        Returns:
            This validator, for chaining
        """
        if member_name and member_name.strip():
            self._members.pop(member_name, None)
        return self

    def add_attributes(
        self, selector: _accessors.MemberSelector | None = None
    ) -> "ModelValidator[ModelT]":
        """Register validators for the declarative constraints on members.

        Args:
            selector: A single member to process (default: every readable member)

        Returns:
            This validator, for chaining

        Raises:
            MemberNotFoundError: If the selector does not resolve to a member
            ConstraintMaterializationError: If a constraint fails to build and
                on_constraint_error is RAISE
        """
        if selector is None:
            accessors = list(self.accessors.members(self.model_type).values())
        else:
            accessors = [self._resolve(selector)]

        for accessor in accessors:
            for validator in _materialize.materialize_constraints(
                accessor, on_error=self.on_constraint_error
            ):
                self.register(accessor.name, validator)
        return self

    def add_attribute(
        self,
        selector: _accessors.MemberSelector,
        factory: typing.Callable[[], _constraints.ValidationConstraint],
    ) -> "ModelValidator[ModelT]":
        """Register a validator for a constraint created by ``factory``.

        Args:
            selector: Member name or selector callable
            factory: Function returning a new constraint instance

        Returns:
            This validator, for chaining
        """
        if not callable(factory):
            raise TypeError("factory must be callable")
        accessor = self._resolve(selector)
        validator = _materialize.create_constraint_validator(accessor, factory())
        return self.register(accessor.name, validator)

    def add_custom(
        self,
        selector: _accessors.MemberSelector,
        configure: typing.Callable[[typing.Any], typing.Any],
    ) -> "ModelValidator[ModelT]":
        """Register a custom pipeline validator and let ``configure`` set it up.

        A member name registers a :class:`MemberCustomValidator`; a selector
        callable registers a :class:`TypedMemberCustomValidator` carrying the
        member's annotation.

        Args:
            selector: Member name or selector callable
            configure: Function receiving the new validator to add stages to

        Returns:
            This validator, for chaining
        """
        if not callable(configure):
            raise TypeError("configure must be callable")
        accessor = self._resolve(selector)
        validator: _validators.MemberCustomValidator
        if isinstance(selector, str):
            validator = _validators.MemberCustomValidator(accessor)
        else:
            validator = _validators.TypedMemberCustomValidator(accessor)

        self.register(accessor.name, validator)
        configure(validator)
        return self

    def add_email(self, selector: _accessors.MemberSelector) -> "ModelValidator[ModelT]":
        """Register the built-in e-mail check (see :func:`fieldwise.extensions.add_email`)."""
        return _extensions.add_email(self, selector)

    def add_required(
        self, selector: _accessors.MemberSelector
    ) -> "ModelValidator[ModelT]":
        """Register the built-in required check (see :func:`fieldwise.extensions.add_required`)."""
        return _extensions.add_required(self, selector)

    async def async_validate(
        self,
        instance: ModelT,
        localizer: _localization.Localizer | None = None,
    ) -> _result.ModelValidationResult:
        """Run every registered validator against a record.

        Validators run one at a time in registration order, so a validator
        sees any value committed by the ones before it.

        Args:
            instance: The record to validate; it may be modified by
                post-validation stages
            localizer: Optional localizer for error messages

        Returns:
            The validation result. When nothing is registered this is the
            shared, read-only ``ModelValidationResult.EMPTY``, whose ``add``
            raises TypeError; create a ``ModelValidationResult()`` to collect
            errors found outside the pipeline in that case.

        Raises:
            ModelTypeMismatchError: If instance is None or of another type
        """
        if instance is None or not isinstance(instance, self.model_type):
            raise _errors.ModelTypeMismatchError(self.model_type, instance)

        if not self._members:
            return _result.ModelValidationResult.EMPTY

        summary: dict[str, list[_result.MemberValidationOutcome]] = {}
        for member_name, validators in self._members.items():
            for validator in validators:
                outcome = await validator.async_validate(instance, localizer)
                if outcome is not None:
                    summary.setdefault(member_name, []).append(outcome)

        result = _result.ModelValidationResult(summary)
        logger.debug(
            "Validated %s: %d error(s) in %d member(s)",
            self.model_type.__qualname__,
            result.error_count,
            len(summary),
        )
        return result

    def validate(
        self,
        instance: ModelT,
        localizer: _localization.Localizer | None = None,
    ) -> _result.ModelValidationResult:
        """Blocking variant of :meth:`async_validate`.

        Raises:
            RuntimeError: If called while an event loop is running in this thread
        """
        return _validators.run_sync(self.async_validate, instance, localizer)
