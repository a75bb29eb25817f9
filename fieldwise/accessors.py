"""Cached member resolution for record types.

Members of a record type are discovered once per type and compiled once per
``(type, name)`` pair into a :class:`MemberAccessor` holding a getter and an
optional setter. Both caches are plain dictionaries populated with
``dict.setdefault``: concurrent resolution of the same key may compute it
twice, and one of the equal results is kept.
"""

import dataclasses
import inspect
import logging
import operator
import types
import typing

import pydantic

from . import errors as _errors

logger = logging.getLogger(__name__)

Getter = typing.Callable[[typing.Any], typing.Any]
Setter = typing.Callable[[typing.Any, typing.Any], None]
MemberSelector = str | typing.Callable[[typing.Any], typing.Any]


class MemberAccessor(typing.NamedTuple):
    """Resolved, reusable access to one member of a record type.

    Attributes:
        model_type: The record type owning the member
        name: Member name
        member_type: The member's annotation with ``Annotated`` extras removed
        metadata: The ``Annotated`` extras (declarative constraints live here)
        getter: Function reading the member from an instance
        setter: Function writing the member, or None if it is read-only
    """

    model_type: type
    name: str
    member_type: typing.Any
    metadata: tuple[typing.Any, ...]
    getter: Getter
    setter: Setter | None

    @property
    def writable(self) -> bool:
        return self.setter is not None


class _Member(typing.NamedTuple):
    member_type: typing.Any
    metadata: tuple[typing.Any, ...]
    writable: bool


def _split_annotated(annotation: typing.Any) -> tuple[typing.Any, tuple[typing.Any, ...]]:
    if typing.get_origin(annotation) is typing.Annotated:
        args = typing.get_args(annotation)
        return args[0], tuple(args[1:])
    return annotation, ()


def _is_class_var(annotation: typing.Any) -> bool:
    if isinstance(annotation, str):
        return annotation.startswith(("ClassVar", "typing.ClassVar"))
    return typing.get_origin(annotation) is typing.ClassVar or annotation is typing.ClassVar


def _type_hints(model_type: type) -> dict[str, typing.Any]:
    """Get annotations for a class and its bases, keeping ``Annotated`` extras.

    Forward references that cannot be evaluated fall back to the raw
    annotations, which keeps the member readable but loses its metadata.
    """
    try:
        return typing.get_type_hints(model_type, include_extras=True)
    except (NameError, TypeError):
        hints: dict[str, typing.Any] = {}
        for base in reversed(model_type.__mro__):
            hints.update(inspect.get_annotations(base))
        return hints


def _property_type(prop: property) -> typing.Any:
    try:
        return typing.get_type_hints(prop.fget).get("return", typing.Any)
    except (NameError, TypeError):
        return typing.Any


def _discover_properties(model_type: type) -> dict[str, _Member]:
    found: dict[str, _Member] = {}
    for klass in reversed(model_type.__mro__):
        # pydantic's own properties (model_extra, model_fields_set) are not members
        if klass.__module__.split(".", 1)[0] == "pydantic":
            continue
        for name, attr in vars(klass).items():
            if name.startswith("_") or not isinstance(attr, property):
                continue
            if attr.fget is None:
                found.pop(name, None)
                continue
            found[name] = _Member(_property_type(attr), (), attr.fset is not None)
    return found


def _discover_members(model_type: type) -> dict[str, _Member]:
    """List the readable public members of a type in declaration order."""
    members: dict[str, _Member] = {}

    if isinstance(model_type, type) and issubclass(model_type, pydantic.BaseModel):
        frozen_model = bool(model_type.model_config.get("frozen", False))
        for name, field_info in model_type.model_fields.items():
            if name.startswith("_"):
                continue
            members[name] = _Member(
                field_info.annotation,
                tuple(field_info.metadata),
                not (frozen_model or field_info.frozen),
            )
    elif dataclasses.is_dataclass(model_type):
        hints = _type_hints(model_type)
        frozen = model_type.__dataclass_params__.frozen  # type: ignore[attr-defined]
        for field in dataclasses.fields(model_type):
            if field.name.startswith("_"):
                continue
            member_type, metadata = _split_annotated(hints.get(field.name, field.type))
            members[field.name] = _Member(member_type, metadata, not frozen)
    else:
        for name, annotation in _type_hints(model_type).items():
            if name.startswith("_") or _is_class_var(annotation):
                continue
            member_type, metadata = _split_annotated(annotation)
            members[name] = _Member(member_type, metadata, True)

    members.update(_discover_properties(model_type))
    return members


def _make_setter(name: str) -> Setter:
    def setter(instance: typing.Any, value: typing.Any) -> None:
        setattr(instance, name, value)

    return setter


class _SelectorProbe:
    """Stand-in instance that records the attribute a selector reads."""

    def __init__(self) -> None:
        self.fieldwise_path: list[str] = []

    def __getattr__(self, name: str) -> typing.Any:
        if name.startswith("__"):
            raise AttributeError(name)
        self.fieldwise_path.append(name)
        return self


def member_name_of(model_type: type, selector: MemberSelector) -> str:
    """Turn a member selector into a member name.

    A selector is either the member name or a one-argument callable reading a
    single attribute, such as ``lambda car: car.name``. The callable is run
    once against a probe object; it never sees a real record.

    Args:
        model_type: The record type, used for error reporting
        selector: Member name or selector callable

    Returns:
        The selected member name

    Raises:
        MemberNotFoundError: If the selector does not read exactly one attribute
    """
    if isinstance(selector, str):
        return selector
    if not callable(selector):
        raise _errors.MemberNotFoundError(model_type, selector)

    probe = _SelectorProbe()
    try:
        selected = selector(probe)
    except Exception as e:
        raise _errors.MemberNotFoundError(model_type, selector) from e
    if selected is not probe or len(probe.fieldwise_path) != 1:
        raise _errors.MemberNotFoundError(model_type, selector)
    return probe.fieldwise_path[0]


class AccessorCache:
    """Process-wide store of member tables and compiled accessors.

    Members are found from the type alone, never from an instance. On plain
    classes only class-level annotations and properties count, so an
    attribute that is only assigned in ``__init__`` (``self.name = ...``)
    cannot be resolved and raises MemberNotFoundError; annotate it on the
    class (``name: str``) to make it a member.
    """

    def __init__(self) -> None:
        self._members: dict[type, dict[str, _Member]] = {}
        self._accessors: dict[tuple[type, str], MemberAccessor] = {}

    def _member_table(self, model_type: type) -> dict[str, _Member]:
        table = self._members.get(model_type)
        if table is None:
            table = self._members.setdefault(model_type, _discover_members(model_type))
            logger.debug(
                "Discovered %d members on %s", len(table), model_type.__qualname__
            )
        return table

    def try_resolve(self, model_type: type, name: str) -> MemberAccessor | None:
        """Resolve a member, returning None if it is not a readable public member.

        Args:
            model_type: The record type
            name: Member name

        Returns:
            The cached MemberAccessor, or None
        """
        key = (model_type, name)
        accessor = self._accessors.get(key)
        if accessor is not None:
            return accessor

        member = self._member_table(model_type).get(name)
        if member is None:
            return None
        accessor = MemberAccessor(
            model_type=model_type,
            name=name,
            member_type=member.member_type,
            metadata=member.metadata,
            getter=operator.attrgetter(name),
            setter=_make_setter(name) if member.writable else None,
        )
        return self._accessors.setdefault(key, accessor)

    def resolve(self, model_type: type, name: str) -> MemberAccessor:
        """Resolve a member or fail.

        Raises:
            MemberNotFoundError: If the member is not a readable public member
        """
        accessor = self.try_resolve(model_type, name)
        if accessor is None:
            raise _errors.MemberNotFoundError(model_type, name)
        return accessor

    def get_reader(self, model_type: type, name: str) -> Getter:
        """Get the cached function that reads a member from an instance."""
        return self.resolve(model_type, name).getter

    def get_writer(self, model_type: type, name: str) -> Setter | None:
        """Get the cached function that writes a member, or None if read-only."""
        return self.resolve(model_type, name).setter

    def members(self, model_type: type) -> typing.Mapping[str, MemberAccessor]:
        """Get accessors for every readable public member, in declaration order."""
        return types.MappingProxyType(
            {name: self.resolve(model_type, name) for name in self._member_table(model_type)}
        )

    def clear(self) -> None:
        """Forget every cached member table and accessor."""
        self._members.clear()
        self._accessors.clear()


default_cache = AccessorCache()
"""Accessor cache shared by validators that are not given their own."""
