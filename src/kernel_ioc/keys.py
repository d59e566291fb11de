"""Service identifiers.

A service identifier is any hashable key: a string, a class, or a
:class:`Token`. Tokens give an opaque symbolic key that compares by
identity, so two tokens with the same description never collide.
"""

from typing import Any, Union


class Token:
    """Opaque symbolic service identifier, equal only to itself."""

    __slots__ = ("description",)

    def __init__(self, description: str = ""):
        self.description = description

    def __repr__(self) -> str:
        return f"Token({self.description})"

    __str__ = __repr__


ServiceIdentifier = Union[str, type, Token, Any]


def service_identifier_name(service_identifier: ServiceIdentifier) -> str:
    """Return a display name for *service_identifier*.

    Strings are returned unchanged, classes and functions by ``__name__``,
    everything else by ``str()``.
    """
    if isinstance(service_identifier, str):
        return service_identifier
    if isinstance(service_identifier, Token):
        return str(service_identifier)
    return getattr(service_identifier, "__name__", str(service_identifier))
