"""Localization hooks for error messages.

The engine does not own any resources; it only asks an optional
:class:`Localizer` to resolve keys and falls back to caller-supplied default
text when no localizer is given or the key is missing.
"""

import typing


class LocalizedString(typing.NamedTuple):
    """Result of a localizer lookup.

    Attributes:
        found: Whether the key exists in the localizer
        value: The localized text (empty when not found)
    """

    found: bool
    value: str


@typing.runtime_checkable
class Localizer(typing.Protocol):
    """Resolves message keys into localized text."""

    def lookup(self, key: str) -> LocalizedString: ...


class MappingLocalizer:
    """A localizer backed by a plain mapping of keys to text."""

    def __init__(self, resources: typing.Mapping[str, str]) -> None:
        """Initialize MappingLocalizer.

        Args:
            resources: Mapping of message keys to localized text
        """
        self.resources = dict(resources)

    def lookup(self, key: str) -> LocalizedString:
        value = self.resources.get(key)
        if value is None:
            return LocalizedString(False, "")
        return LocalizedString(True, value)


def localize(
    localizer: Localizer | None,
    key: str | None,
    default: str | None,
    *args: typing.Any,
) -> str:
    """Resolve a message key, falling back to default text.

    Args:
        localizer: Optional localizer to consult
        key: Message key to look up (None skips the lookup)
        default: Text used when the key cannot be resolved
        *args: Positional arguments for ``str.format``

    Returns:
        The localized (or default) text formatted with ``args``
    """
    template = default or ""
    if localizer is not None and key is not None:
        resource = localizer.lookup(key)
        if resource.found and resource.value is not None:
            template = resource.value
    return template.format(*args) if args else template
