"""Configuration options for validator registration."""

from enum import Enum


class MaterializationOption(str, Enum):
    """Options for how to handle declarative constraints that fail to instantiate.

    Attributes:
        SKIP: Log a warning and register no validator for the broken constraint
        RAISE: Raise ConstraintMaterializationError from the registration call
    """

    SKIP = "skip"
    RAISE = "raise"
