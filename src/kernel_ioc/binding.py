"""Binding records.

A :class:`Binding` is one registered production strategy for a service
identifier. Several bindings may share an identifier; the planner decides
which of them apply to a given injection point.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Callable, Optional

from .keys import ServiceIdentifier


class BindingType(str, Enum):
    """How a binding produces its value."""

    INVALID = "invalid"
    INSTANCE = "instance"
    CONSTANT_VALUE = "constant_value"
    DYNAMIC_VALUE = "dynamic_value"
    CONSTRUCTOR = "constructor"
    FACTORY = "factory"
    FUNCTION = "function"
    AUTO_FACTORY = "auto_factory"
    PROVIDER = "provider"


class BindingScope(str, Enum):
    """Lifecycle of the values produced by a binding."""

    TRANSIENT = "transient"
    SINGLETON = "singleton"


Constraint = Callable[[Any], bool]


def _always(request: Any) -> bool:
    return True


def _new_guid() -> str:
    return uuid.uuid4().hex


@dataclass(eq=False)
class Binding:
    """A registered strategy mapping a service identifier to a production method.

    Only ``INSTANCE`` bindings carry planned dependencies: the planner asks
    the metadata reader for the constructor targets of
    :attr:`implementation_type`. The other kinds are leaves of the plan.

    Attributes:
        service_identifier: The identifier this binding answers for.
        type: The production kind.
        scope: Transient or singleton; consumed by activation, not planning.
        implementation_type: Class to instantiate (``INSTANCE``) or to hand
            out (``CONSTRUCTOR``).
        cache: Constant value, or the singleton instance once activated.
        dynamic_value: Zero-argument callable (``DYNAMIC_VALUE``).
        factory: Callable taking the context (``FACTORY``/``AUTO_FACTORY``).
        provider: Callable taking the context (``PROVIDER``).
        constraint: Predicate over a :class:`Request`; see
            :mod:`kernel_ioc.constraints`.
        on_activation: Hook run by the activation engine.
        module_id: Identifier of the registering module, if any.
        guid: Globally unique binding id.
    """

    service_identifier: ServiceIdentifier
    type: BindingType = BindingType.INVALID
    scope: BindingScope = BindingScope.TRANSIENT
    implementation_type: Optional[type] = None
    cache: Any = None
    activated: bool = False
    dynamic_value: Optional[Callable[[], Any]] = None
    factory: Optional[Callable[[Any], Any]] = None
    provider: Optional[Callable[[Any], Any]] = None
    constraint: Constraint = _always
    on_activation: Optional[Callable[[Any, Any], Any]] = None
    module_id: Optional[str] = None
    guid: str = field(default_factory=_new_guid)

    def clone(self) -> "Binding":
        """Return a copy with the same strategy and a fresh :attr:`guid`."""
        return replace(self, guid=_new_guid())

    @classmethod
    def to(cls, service_identifier: ServiceIdentifier, implementation_type: type, **kwargs: Any) -> "Binding":
        """Shorthand for an ``INSTANCE`` binding."""
        return cls(service_identifier, type=BindingType.INSTANCE, implementation_type=implementation_type, **kwargs)

    @classmethod
    def to_constant(cls, service_identifier: ServiceIdentifier, value: Any, **kwargs: Any) -> "Binding":
        """Shorthand for a ``CONSTANT_VALUE`` binding."""
        return cls(service_identifier, type=BindingType.CONSTANT_VALUE, cache=value, **kwargs)

    def __repr__(self) -> str:
        name = getattr(self.service_identifier, "__name__", str(self.service_identifier))
        impl = getattr(self.implementation_type, "__name__", None)
        target = f" -> {impl}" if impl else ""
        return f"<Binding {name}{target} type={self.type.value} scope={self.scope.value} guid={self.guid[:8]}>"
