"""Contexts threaded through the stages of a custom member validator.

A context is created for a single ``async_validate`` call and spans the
pre-validation, validation and post-validation stages, so a pass or fail
signalled during validation is visible to the post-validation stage.
"""

import logging
import typing

from . import errors as _errors
from . import localization as _localization
from . import result as _result

if typing.TYPE_CHECKING:
    from .validators import MemberCustomValidator

logger = logging.getLogger(__name__)

ModelT = typing.TypeVar("ModelT")
MemberT = typing.TypeVar("MemberT")

MESSAGE_SEPARATOR = "\n"


class MemberValidatorContextBase:
    """Outcome signalling and localization shared by all contexts.

    Attributes:
        instance: The record being validated (borrowed for the call)
        localizer: Optional localizer for error messages
    """

    def __init__(
        self,
        validator: "MemberCustomValidator",
        instance: typing.Any,
        localizer: _localization.Localizer | None = None,
    ) -> None:
        self._validator = validator
        self.instance = instance
        self.localizer = localizer
        self._outcome: _result.MemberValidationOutcome | None = None
        self._signalled = False

    @property
    def member_name(self) -> str:
        return self._validator.member_name

    @property
    def outcome(self) -> _result.MemberValidationOutcome | None:
        """The failure signalled for this member, or None."""
        return self._outcome

    @property
    def is_failed(self) -> bool:
        """Whether a failure has been signalled for this member."""
        return self._outcome is not None

    @property
    def is_signalled(self) -> bool:
        """Whether a pass or a failure has been signalled for this member."""
        return self._signalled

    def _signal(self, outcome: _result.MemberValidationOutcome | None) -> None:
        if self._signalled:
            raise _errors.ValidatorConfigurationError(
                f"The outcome for member '{self.member_name}' was already signalled",
                context={"member": self.member_name},
            )
        self._signalled = True
        self._outcome = outcome

    def succeed(self) -> None:
        """Signal that the member passed validation.

        Returns:
            None, the success result, so validation stages can
            ``return context.succeed()``
        """
        self._signal(None)

    def fail(self, *messages: str) -> _result.MemberValidationOutcome:
        """Signal that the member failed validation.

        Args:
            *messages: Error messages, joined with newlines

        Returns:
            The failure outcome, so validation stages can
            ``return context.fail(...)``
        """
        message = MESSAGE_SEPARATOR.join(messages)
        if not message:
            message = f"The field {self.member_name} is invalid."
        outcome = _result.MemberValidationOutcome(
            message=message, member_names=(self.member_name,)
        )
        self._signal(outcome)
        return outcome

    def localize(self, key: str | None, default: str | None, *args: typing.Any) -> str:
        """Resolve a message key through the context's localizer.

        Args:
            key: Message key to look up
            default: Text used when the key cannot be resolved
            *args: Positional arguments for ``str.format``

        Returns:
            The localized or default text
        """
        return _localization.localize(self.localizer, key, default, *args)


class MemberValidatorContext(MemberValidatorContextBase, typing.Generic[ModelT, MemberT]):
    """Context giving stages read and write access to the validated member."""

    instance: ModelT

    @property
    def member_type(self) -> typing.Any:
        """The member's annotation, or ``typing.Any`` when it is unknown."""
        return self._validator.member_type

    @property
    def can_write(self) -> bool:
        """Whether the member has a setter."""
        return self._validator.accessor.writable

    def get_value(self) -> MemberT:
        """Read the member's current value from the record."""
        return self._validator.accessor.getter(self.instance)

    def try_get_value(self) -> tuple[bool, MemberT | None]:
        """Read the member's current value without raising.

        Returns:
            Tuple of (succeeded, value); value is None on failure
        """
        try:
            return True, self.get_value()
        except (AttributeError, ValueError, TypeError, LookupError):
            logger.debug("Could not read member '%s'", self.member_name, exc_info=True)
            return False, None

    def set_value(self, value: MemberT | None) -> None:
        """Write a value to the member.

        Raises:
            MemberNotWritableError: If the member has no setter
        """
        setter = self._validator.accessor.setter
        if setter is None:
            raise _errors.MemberNotWritableError(
                self._validator.model_type, self.member_name
            )
        setter(self.instance, value)

    def try_set_value(self, value: MemberT | None) -> bool:
        """Write a value to the member without raising.

        Args:
            value: The value to write

        Returns:
            Whether the value was written
        """
        try:
            self.set_value(value)
            return True
        except (AttributeError, ValueError, TypeError):
            logger.debug("Could not write member '%s'", self.member_name, exc_info=True)
            return False
