"""Injection points.

A :class:`Target` describes one dependency slot: the service identifier it
needs, the constructor parameter it fills, and the metadata (named, tagged,
multi-inject, unmanaged) used to pick bindings for it.
"""

import uuid
from dataclasses import dataclass
from typing import Any, Callable, List, Optional, Union

from .constants import MULTI_INJECT_TAG, NAMED_TAG, RESERVED_TAGS, UNMANAGED_TAG
from .keys import ServiceIdentifier, service_identifier_name


@dataclass(frozen=True)
class Metadata:
    """One key/value tag attached to a target."""

    key: str
    value: Any

    def __str__(self) -> str:
        if self.key == NAMED_TAG:
            return f"Named: {self.value}"
        return f"Tagged: {{ key: {self.key}, value: {self.value} }}"


class QueryableString(str):
    """A ``str`` with the comparison helpers constraints like to use."""

    __slots__ = ()

    def starts_with(self, prefix: str) -> bool:
        return self.startswith(prefix)

    def ends_with(self, suffix: str) -> bool:
        return self.endswith(suffix)

    def contains(self, fragment: str) -> bool:
        return fragment in self

    def equals(self, other: str) -> bool:
        return str(self) == other

    def value(self) -> str:
        return str(self)


class Target:
    def __init__(
        self,
        service_identifier: ServiceIdentifier,
        name: Optional[str] = None,
        named_or_tagged: Union[str, Metadata, None] = None,
    ):
        self.guid = uuid.uuid4().hex
        self.service_identifier = service_identifier
        self.name = QueryableString(name or "")
        self.metadata: List[Metadata] = []
        if isinstance(named_or_tagged, str):
            self.metadata.append(Metadata(NAMED_TAG, named_or_tagged))
        elif isinstance(named_or_tagged, Metadata):
            self.metadata.append(named_or_tagged)

    def has_tag(self, key: str) -> bool:
        return any(m.key == key for m in self.metadata)

    def is_array(self) -> bool:
        return self.has_tag(MULTI_INJECT_TAG)

    def matches_array(self, service_identifier: ServiceIdentifier) -> bool:
        return self.matches_tag(MULTI_INJECT_TAG)(service_identifier)

    def is_named(self) -> bool:
        return self.has_tag(NAMED_TAG)

    def is_tagged(self) -> bool:
        return any(m.key not in RESERVED_TAGS for m in self.metadata)

    def is_unmanaged(self) -> bool:
        return self.has_tag(UNMANAGED_TAG)

    def matches_named_tag(self, name: str) -> bool:
        return self.matches_tag(NAMED_TAG)(name)

    def matches_tag(self, key: str) -> Callable[[Any], bool]:
        def matches(value: Any) -> bool:
            return any(m.key == key and m.value == value for m in self.metadata)
        return matches

    def __repr__(self) -> str:
        extra = "".join(f", {m}" for m in self.metadata if m.key == NAMED_TAG or m.key not in RESERVED_TAGS)
        kind = "multi " if self.is_array() else ""
        return f"<Target {kind}{service_identifier_name(self.service_identifier)}{extra}>"
