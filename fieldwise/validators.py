"""Member validators: the unit of execution of a model validator.

Every validator is bound to one member of one record type and exposes the
same ``async_validate(instance, localizer)`` contract, returning None on
success or a :class:`~fieldwise.result.MemberValidationOutcome` on failure.
"""

import abc
import asyncio
import inspect
import logging
import typing

from . import accessors as _accessors
from . import constraints as _constraints
from . import context as _context
from . import errors as _errors
from . import localization as _localization
from . import result as _result

logger = logging.getLogger(__name__)

ModelT = typing.TypeVar("ModelT")
MemberT = typing.TypeVar("MemberT")
T = typing.TypeVar("T")

MaybeAwaitable = T | typing.Awaitable[T]

PreValidation = typing.Callable[
    [_context.MemberValidatorContext, typing.Any], MaybeAwaitable[typing.Any]
]
"""Stage 1: (context, original_value) -> value passed on to validation."""

Validation = typing.Callable[
    [_context.MemberValidatorContext, typing.Any],
    MaybeAwaitable[_result.MemberResult],
]
"""Stage 2: (context, value) -> None on success or a failure outcome."""

PostValidation = typing.Callable[
    [_context.MemberValidatorContext, typing.Any], MaybeAwaitable[None]
]
"""Stage 3: (context, value) -> None, run after validation whatever its result."""


def run_sync(
    func: typing.Callable[..., typing.Coroutine[typing.Any, typing.Any, T]],
    *args: typing.Any,
) -> T:
    """Run a coroutine function to completion from synchronous code.

    Args:
        func: Coroutine function to call
        *args: Arguments for ``func``

    Returns:
        The coroutine's result

    Raises:
        RuntimeError: If called while an event loop is running in this thread
    """
    try:
        asyncio.get_running_loop()
    except RuntimeError:
        return asyncio.run(func(*args))
    raise RuntimeError(
        "Synchronous validation cannot run inside a running event loop; "
        "await the async_validate() coroutine instead"
    )


async def _resolve(value: MaybeAwaitable[T]) -> T:
    if inspect.isawaitable(value):
        return await value
    return value


class MemberValidator(abc.ABC):
    """Base class for validators bound to a single record member.

    Attributes:
        accessor: Cached read/write access to the member
    """

    def __init__(self, accessor: _accessors.MemberAccessor) -> None:
        self.accessor = accessor

    @property
    def model_type(self) -> type:
        return self.accessor.model_type

    @property
    def member_name(self) -> str:
        return self.accessor.name

    def check_instance(self, instance: typing.Any) -> None:
        """Ensure ``instance`` is a record of the bound type.

        Raises:
            ModelTypeMismatchError: If it is None or of another type
        """
        if instance is None or not isinstance(instance, self.model_type):
            raise _errors.ModelTypeMismatchError(self.model_type, instance)

    @abc.abstractmethod
    async def async_validate(
        self,
        instance: typing.Any,
        localizer: _localization.Localizer | None = None,
    ) -> _result.MemberResult:
        """Run this validator against a record.

        Args:
            instance: The record to validate
            localizer: Optional localizer for error messages

        Returns:
            None on success, otherwise the failure outcome

        Raises:
            ModelTypeMismatchError: If ``instance`` is not of the bound type
        """

    def validate(
        self,
        instance: typing.Any,
        localizer: _localization.Localizer | None = None,
    ) -> _result.MemberResult:
        """Blocking variant of :meth:`async_validate`."""
        return run_sync(self.async_validate, instance, localizer)

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}"
            f"({self.model_type.__qualname__}.{self.member_name})"
        )


class MemberConstraintValidator(MemberValidator):
    """A validator wrapping one declarative constraint instance."""

    def __init__(
        self,
        accessor: _accessors.MemberAccessor,
        constraint: _constraints.ValidationConstraint,
    ) -> None:
        super().__init__(accessor)
        self.constraint = constraint

    def validate(
        self,
        instance: typing.Any,
        localizer: _localization.Localizer | None = None,
    ) -> _result.MemberResult:
        self.check_instance(instance)
        value = self.accessor.getter(instance)
        constraint = self.constraint

        key = constraint.error_message_key
        if key and constraint.error_message is None and localizer is not None:
            # resolved once; later runs format with the stored text
            constraint.error_message_key = None
            resource = localizer.lookup(key)
            if resource.found:
                constraint.error_message = resource.value

        message = constraint.format_message(self.member_name)
        if constraint.is_valid(value):
            return None
        return _result.MemberValidationOutcome(
            message=message, member_names=(self.member_name,)
        )

    async def async_validate(
        self,
        instance: typing.Any,
        localizer: _localization.Localizer | None = None,
    ) -> _result.MemberResult:
        return self.validate(instance, localizer)


class MemberCustomValidator(MemberValidator):
    """A validator running a configurable three-stage pipeline.

    The stages run at most once each per call, in order:

    1. pre-validation turns the value read from the record into the value to
       check; it never writes to the record,
    2. validation returns None or a failure (missing means passing),
    3. post-validation always runs afterwards with the pre-validated value,
       typically committing it with ``context.try_set_value`` when
       ``context.is_failed`` is False.

    Every stage may be a plain function or a coroutine function.
    """

    def __init__(self, accessor: _accessors.MemberAccessor) -> None:
        super().__init__(accessor)
        self._pre_validation: PreValidation | None = None
        self._validation: Validation | None = None
        self._post_validation: PostValidation | None = None

    @property
    def member_type(self) -> typing.Any:
        return typing.Any

    def _set_stage(self, slot: str, func: typing.Callable[..., typing.Any]) -> None:
        if not callable(func):
            raise TypeError(f"Stage function must be callable, got {func!r}")
        if getattr(self, slot) is not None:
            raise _errors.ValidatorConfigurationError(
                f"Stage '{slot.lstrip('_')}' of member '{self.member_name}' "
                "is already configured",
                context={"member": self.member_name, "stage": slot.lstrip("_")},
            )
        setattr(self, slot, func)

    def with_pre_validation(self, func: PreValidation) -> "MemberCustomValidator":
        """Configure the value normalization stage.

        Args:
            func: Function(context, original_value) returning the value to check

        Returns:
            This validator, for chaining
        """
        self._set_stage("_pre_validation", func)
        return self

    def with_validation(self, func: Validation) -> "MemberCustomValidator":
        """Configure the checking stage.

        Use ``context.succeed()`` and ``context.fail(...)`` to produce the
        return value.

        Args:
            func: Function(context, value) returning None or a failure outcome

        Returns:
            This validator, for chaining
        """
        self._set_stage("_validation", func)
        return self

    def with_post_validation(self, func: PostValidation) -> "MemberCustomValidator":
        """Configure the stage that runs once validation completes.

        Args:
            func: Function(context, value) run whether or not validation failed

        Returns:
            This validator, for chaining
        """
        self._set_stage("_post_validation", func)
        return self

    def create_context(
        self,
        instance: typing.Any,
        localizer: _localization.Localizer | None,
    ) -> _context.MemberValidatorContext:
        return _context.MemberValidatorContext(self, instance, localizer)

    async def async_validate(
        self,
        instance: typing.Any,
        localizer: _localization.Localizer | None = None,
    ) -> _result.MemberResult:
        self.check_instance(instance)
        context = self.create_context(instance, localizer)

        value = self.accessor.getter(instance)
        if self._pre_validation is not None:
            value = await _resolve(self._pre_validation(context, value))

        # no validation stage means the member passes,
        # but post-validation still runs
        result: _result.MemberResult = None
        if self._validation is not None:
            result = await _resolve(self._validation(context, value))
            if result is None:
                result = context.outcome
            elif not isinstance(result, _result.MemberValidationOutcome):
                raise _errors.ValidatorConfigurationError(
                    f"Validation stage of member '{self.member_name}' returned "
                    f"{result!r}; expected None or a MemberValidationOutcome",
                    context={"member": self.member_name},
                )
            elif not context.is_signalled:
                context._signal(result)
            elif result is not context.outcome:
                raise _errors.ValidatorConfigurationError(
                    f"Validation stage of member '{self.member_name}' returned "
                    "an outcome other than the one signalled on its context",
                    context={"member": self.member_name},
                )

        if self._post_validation is not None:
            await _resolve(self._post_validation(context, value))

        return result


class TypedMemberCustomValidator(MemberCustomValidator, typing.Generic[ModelT, MemberT]):
    """A custom pipeline validator that knows its member's annotated type.

    Registered through a selector such as ``lambda car: car.name``; its
    stages receive a ``MemberValidatorContext[ModelT, MemberT]`` whose
    ``member_type`` is the member's annotation.
    """

    @property
    def member_type(self) -> typing.Any:
        return self.accessor.member_type

    def create_context(
        self,
        instance: ModelT,
        localizer: _localization.Localizer | None,
    ) -> "_context.MemberValidatorContext[ModelT, MemberT]":
        return _context.MemberValidatorContext(self, instance, localizer)
