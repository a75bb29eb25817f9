"""Value coercion for constraint operands."""

import types
import typing
from datetime import date, datetime

import dateutil.parser  # type: ignore[import-untyped]

CAST_ERRORS = (ValueError, TypeError, OverflowError, dateutil.parser.ParserError)
"""Exceptions that signal a value could not be coerced."""


def cast_as(value: typing.Any, annotation: type) -> typing.Any:
    """Cast a value to the specified annotation type.

    Strings are parsed with ``dateutil`` when the target is a ``datetime`` or
    a ``date``.

    Args:
        value: The value to cast
        annotation: The target type annotation

    Returns:
        The value cast to the annotation type

    Raises:
        ValueError: If value cannot be converted to annotation type
        TypeError: If casting fails
        dateutil.parser.ParserError: If datetime parsing fails
    """
    if isinstance(value, annotation) and not (
        annotation is int and isinstance(value, bool)
    ):
        return value
    if annotation is datetime:
        return dateutil.parser.parse(value)
    if annotation is date:
        return dateutil.parser.parse(value).date()
    return annotation(value)


def is_union_type(annotation: typing.Any) -> bool:
    """Check if annotation is a union type (Union[X, Y] or X | Y).

    Args:
        annotation: The type annotation to check

    Returns:
        True if annotation is a union type, False otherwise
    """
    if typing.get_origin(annotation) is typing.Union:
        return True
    return isinstance(annotation, types.UnionType)


def cast_as_annotation(value: typing.Any, annotation: typing.Any) -> typing.Any:
    """Cast a value according to its type annotation.

    For union annotations the members are tried in order and the first one
    that accepts the value wins. ``None`` passes through ``Optional`` unions.

    Args:
        value: The value to cast
        annotation: The type annotation (can be a simple type or union)

    Returns:
        The value cast to match the annotation

    Raises:
        TypeError: If the value cannot be cast to any member of a union
        ValueError: If value cannot be converted
    """
    if not is_union_type(annotation):
        return cast_as(value, annotation)

    union_types = typing.get_args(annotation)
    if value is None and type(None) in union_types:
        return None
    for _type in union_types:
        if _type is type(None):
            continue
        try:
            return cast_as(value, _type)
        except CAST_ERRORS:
            continue
    raise TypeError(
        f"Failed to cast value {value!r} to any of the union types: "
        f"{', '.join(str(t) for t in union_types)}"
    )
