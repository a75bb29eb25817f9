"""Per-member validation pipelines for Python records.

Register declarative constraints and custom normalize/check/commit pipelines
per member of a class, dataclass or Pydantic model, then validate instances
into an aggregated, queryable report.
"""

__version__ = "0.1.0"

from fieldwise.accessors import AccessorCache, MemberAccessor, default_cache
from fieldwise.constraints import (
    ConstraintDescriptor,
    EmailAddress,
    Range,
    RegularExpression,
    Required,
    StringLength,
    ValidationConstraint,
    constraint,
)
from fieldwise.context import MemberValidatorContext, MemberValidatorContextBase
from fieldwise.errors import (
    ConstraintMaterializationError,
    FieldwiseError,
    MemberNotFoundError,
    MemberNotWritableError,
    ModelTypeMismatchError,
    ValidatorConfigurationError,
)
from fieldwise.localization import LocalizedString, Localizer, MappingLocalizer
from fieldwise.materialize import create_constraint_validator, materialize_constraints
from fieldwise.model import ModelValidator
from fieldwise.options import MaterializationOption
from fieldwise.result import MemberValidationOutcome, ModelValidationResult
from fieldwise.validators import (
    MemberConstraintValidator,
    MemberCustomValidator,
    MemberValidator,
    TypedMemberCustomValidator,
)

__all__ = [
    "AccessorCache",
    "MemberAccessor",
    "default_cache",
    "ConstraintDescriptor",
    "EmailAddress",
    "Range",
    "RegularExpression",
    "Required",
    "StringLength",
    "ValidationConstraint",
    "constraint",
    "MemberValidatorContext",
    "MemberValidatorContextBase",
    "ConstraintMaterializationError",
    "FieldwiseError",
    "MemberNotFoundError",
    "MemberNotWritableError",
    "ModelTypeMismatchError",
    "ValidatorConfigurationError",
    "LocalizedString",
    "Localizer",
    "MappingLocalizer",
    "create_constraint_validator",
    "materialize_constraints",
    "ModelValidator",
    "MaterializationOption",
    "MemberValidationOutcome",
    "ModelValidationResult",
    "MemberConstraintValidator",
    "MemberCustomValidator",
    "MemberValidator",
    "TypedMemberCustomValidator",
]
