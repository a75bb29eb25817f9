"""Result types for validation operations."""

import typing

import pydantic as _pydantic


class MemberValidationOutcome(_pydantic.BaseModel):
    """A single failed check for a member.

    A passing check has no outcome object: validators return ``None``.

    Attributes:
        message: Human-readable error message
        member_names: Names of the members the failure refers to
    """

    model_config = _pydantic.ConfigDict(frozen=True)

    message: str
    member_names: tuple[str, ...] = ()

    def __str__(self) -> str:
        return self.message


MemberResult = MemberValidationOutcome | None
"""Type alias for what a member validator produces; None means success."""


class ModelValidationResult:
    """Per-run report of member validation failures.

    Members without failures are absent. The report is append-only after
    construction: :meth:`add` injects failures found outside the pipeline and
    refreshes the cached error count.
    """

    EMPTY: typing.ClassVar["ModelValidationResult"]

    def __init__(
        self,
        outcomes: typing.Mapping[str, typing.Iterable[MemberValidationOutcome]]
        | None = None,
    ) -> None:
        """Initialize ModelValidationResult.

        Args:
            outcomes: Mapping of member names to their failure outcomes
        """
        self._outcomes: dict[str, list[MemberValidationOutcome]] = {
            name: list(items) for name, items in (outcomes or {}).items()
        }
        self._error_count: int | None = None
        self._read_only = False

    @property
    def field_names(self) -> tuple[str, ...]:
        """Names of the members that have recorded failures."""
        return tuple(self._outcomes)

    @property
    def error_count(self) -> int:
        """Total number of failure outcomes across all members."""
        if self._error_count is None:
            self._error_count = sum(len(items) for items in self._outcomes.values())
        return self._error_count

    @property
    def is_valid(self) -> bool:
        return self.error_count == 0

    def for_field(self, name: str) -> tuple[MemberValidationOutcome, ...]:
        """Get the failures recorded for a member.

        Args:
            name: Member name

        Returns:
            The member's outcomes, or an empty tuple if it has none
        """
        return tuple(self._outcomes.get(name, ()))

    def __getitem__(self, name: str) -> tuple[MemberValidationOutcome, ...]:
        return self.for_field(name)

    def __contains__(self, name: object) -> bool:
        return name in self._outcomes

    def add(
        self, name: str, outcome: MemberValidationOutcome | str | None
    ) -> "ModelValidationResult":
        """Record an additional failure for a member.

        ``None`` outcomes, blank names and blank messages are ignored.

        Args:
            name: Member name
            outcome: A MemberValidationOutcome or an error message

        Returns:
            This result, for chaining

        Raises:
            TypeError: If called on the shared ``EMPTY`` result
        """
        if self._read_only:
            raise TypeError("The shared empty validation result cannot be modified")
        if outcome is None or not name or not name.strip():
            return self
        if isinstance(outcome, str):
            if not outcome.strip():
                return self
            outcome = MemberValidationOutcome(message=outcome, member_names=(name,))

        self._outcomes.setdefault(name, []).append(outcome)
        self._error_count = None
        return self

    def to_dict(self) -> dict[str, list[str]]:
        """Convert the result to a mapping of member names to messages."""
        return {
            name: [outcome.message for outcome in items]
            for name, items in self._outcomes.items()
        }

    def __repr__(self) -> str:
        return (
            f"ModelValidationResult(is_valid={self.is_valid}, "
            f"error_count={self.error_count}, fields={list(self._outcomes)})"
        )


ModelValidationResult.EMPTY = ModelValidationResult()
ModelValidationResult.EMPTY._read_only = True
