"""Binding constraints.

A constraint is any callable taking a :class:`~kernel_ioc.planning.Request`
and returning ``True`` when the binding applies to it. The planner only
consults constraints when several bindings compete for a single-valued
target.

The classes below are the built-in constraint expressions. They are frozen
dataclasses, so they compare by value, print readably and can be composed::

    Binding.to(Weapon, Katana, constraint=TargetNamed("strong"))
    Binding.to(Weapon, Shuriken, constraint=AllOf((InjectedInto(Ninja), Not(TargetNamed("strong")))))
"""

from dataclasses import dataclass
from typing import Any, Callable, Optional, Tuple, Union

from .constants import NAMED_TAG

Predicate = Callable[[Any], bool]
Ancestor = Union[str, type]


def traverse_ancestors(request: Any, constraint: Predicate) -> bool:
    """``True`` if *constraint* holds for any ancestor of *request*."""
    parent = request.parent_request
    while parent is not None:
        if constraint(parent):
            return True
        parent = parent.parent_request
    return False


def type_matches(request: Optional[Any], ancestor: Ancestor) -> bool:
    """Whether *request* was planned for *ancestor*.

    A string is compared with the binding's service identifier, a class
    with its implementation type.
    """
    if request is None or not request.bindings:
        return False
    binding = request.bindings[0]
    if isinstance(ancestor, str):
        return binding.service_identifier == ancestor
    return binding.implementation_type is ancestor


def tag_matches(request: Optional[Any], key: str, value: Any) -> bool:
    return request is not None and request.target is not None and request.target.matches_tag(key)(value)


@dataclass(frozen=True)
class Always:
    def __call__(self, request: Any) -> bool:
        return True


@dataclass(frozen=True)
class TargetNamed:
    name: str

    def __call__(self, request: Any) -> bool:
        return tag_matches(request, NAMED_TAG, self.name)


@dataclass(frozen=True)
class TargetTagged:
    key: str
    value: Any

    def __call__(self, request: Any) -> bool:
        return tag_matches(request, self.key, self.value)


@dataclass(frozen=True)
class InjectedInto:
    parent: Ancestor

    def __call__(self, request: Any) -> bool:
        return type_matches(request.parent_request, self.parent)


@dataclass(frozen=True)
class ParentNamed:
    name: str

    def __call__(self, request: Any) -> bool:
        return tag_matches(request.parent_request, NAMED_TAG, self.name)


@dataclass(frozen=True)
class ParentTagged:
    key: str
    value: Any

    def __call__(self, request: Any) -> bool:
        return tag_matches(request.parent_request, self.key, self.value)


@dataclass(frozen=True)
class AnyAncestorIs:
    ancestor: Ancestor

    def __call__(self, request: Any) -> bool:
        return traverse_ancestors(request, lambda r: type_matches(r, self.ancestor))


@dataclass(frozen=True)
class NoAncestorIs:
    ancestor: Ancestor

    def __call__(self, request: Any) -> bool:
        return not traverse_ancestors(request, lambda r: type_matches(r, self.ancestor))


@dataclass(frozen=True)
class AnyAncestorNamed:
    name: str

    def __call__(self, request: Any) -> bool:
        return traverse_ancestors(request, TargetNamed(self.name))


@dataclass(frozen=True)
class NoAncestorNamed:
    name: str

    def __call__(self, request: Any) -> bool:
        return not traverse_ancestors(request, TargetNamed(self.name))


@dataclass(frozen=True)
class AnyAncestorTagged:
    key: str
    value: Any

    def __call__(self, request: Any) -> bool:
        return traverse_ancestors(request, TargetTagged(self.key, self.value))


@dataclass(frozen=True)
class NoAncestorTagged:
    key: str
    value: Any

    def __call__(self, request: Any) -> bool:
        return not traverse_ancestors(request, TargetTagged(self.key, self.value))


@dataclass(frozen=True)
class AnyAncestorMatches:
    constraint: Predicate

    def __call__(self, request: Any) -> bool:
        return traverse_ancestors(request, self.constraint)


@dataclass(frozen=True)
class NoAncestorMatches:
    constraint: Predicate

    def __call__(self, request: Any) -> bool:
        return not traverse_ancestors(request, self.constraint)


@dataclass(frozen=True)
class AllOf:
    constraints: Tuple[Predicate, ...]

    def __call__(self, request: Any) -> bool:
        return all(c(request) for c in self.constraints)


@dataclass(frozen=True)
class Not:
    constraint: Predicate

    def __call__(self, request: Any) -> bool:
        return not self.constraint(request)
