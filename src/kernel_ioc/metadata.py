"""Dependency metadata for instantiable classes.

Dependencies are declared once, when the class is defined, as an ordered
tuple of :class:`DependencyDescriptor` stamped on the class itself.
:func:`injectable` derives the tuple from the class's own ``__init__``
annotations; :func:`declare_dependencies` accepts it explicitly. The planner
reads it back through :class:`MetadataReader`.

Constructor parameters are described with :data:`typing.Annotated`::

    @injectable
    class Ninja:
        def __init__(
            self,
            katana: Annotated[Weapon, named("strong")],
            shurikens: list[Throwable],
            clan: Annotated[str, inject("clan")],
            level: Annotated[int, unmanaged()] = 1,
        ): ...

A bare ``list[X]`` annotation is a multi-inject of ``X``.
"""

import inspect
import logging
import typing
from dataclasses import dataclass
from typing import Annotated, Any, Dict, Iterable, List, Optional, Tuple, get_args, get_origin

from .constants import DEPENDENCIES_ATTR, INJECT_TAG, MULTI_INJECT_TAG, NAMED_TAG, UNMANAGED_TAG
from .exceptions import MissingAnnotationError
from .keys import ServiceIdentifier, service_identifier_name
from .target import Metadata, Target

_logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DependencyDescriptor:
    """One constructor argument of an instantiable class.

    Attributes:
        service_identifier: What to inject, or ``None`` when it could not be
            determined.
        name: Disambiguation name (matched by named constraints).
        tags: ``(key, value)`` pairs matched by tagged constraints.
        unmanaged: The container never supplies this argument.
        multi: Collection injection point receiving every binding.
        parameter_name: Constructor parameter this descriptor fills.
    """

    service_identifier: Optional[ServiceIdentifier]
    name: Optional[str] = None
    tags: Tuple[Tuple[str, Any], ...] = ()
    unmanaged: bool = False
    multi: bool = False
    parameter_name: Optional[str] = None


@dataclass(frozen=True)
class Inject:
    service_identifier: ServiceIdentifier


@dataclass(frozen=True)
class MultiInject:
    service_identifier: ServiceIdentifier


@dataclass(frozen=True)
class Named:
    name: str


@dataclass(frozen=True)
class Tagged:
    key: str
    value: Any


@dataclass(frozen=True)
class Unmanaged:
    pass


def inject(service_identifier: ServiceIdentifier) -> Inject:
    return Inject(service_identifier)


def multi_inject(service_identifier: ServiceIdentifier) -> MultiInject:
    return MultiInject(service_identifier)


def named(name: str) -> Named:
    return Named(name)


def tagged(key: str, value: Any) -> Tagged:
    return Tagged(key, value)


def unmanaged() -> Unmanaged:
    return Unmanaged()


_UNKNOWN = (inspect.Parameter.empty, object, Any, None, type(None))


def _known(t: Any) -> Optional[ServiceIdentifier]:
    return None if any(t is u for u in _UNKNOWN) else t


def _split_annotated(ann: Any) -> Tuple[Any, Tuple[Any, ...]]:
    if get_origin(ann) is Annotated:
        args = get_args(ann)
        return (args[0] if args else Any), tuple(args[1:])
    return ann, ()


def _describe_parameter(param: inspect.Parameter, ann: Any) -> DependencyDescriptor:
    base, markers = _split_annotated(ann)

    service_identifier: Optional[ServiceIdentifier] = None
    explicit = False
    multi = False
    name: Optional[str] = None
    tags: List[Tuple[str, Any]] = []
    is_unmanaged = False

    origin = get_origin(base)
    if origin in (list, List):
        multi = True
        elem = get_args(base)[0] if get_args(base) else Any
        elem, elem_markers = _split_annotated(elem)
        markers = markers + elem_markers
        base = elem

    for m in markers:
        if isinstance(m, MultiInject):
            service_identifier, explicit, multi = m.service_identifier, True, True
        elif isinstance(m, Inject):
            service_identifier, explicit = m.service_identifier, True
        elif isinstance(m, Named):
            name = m.name
        elif isinstance(m, Tagged):
            tags.append((m.key, m.value))
        elif isinstance(m, Unmanaged):
            is_unmanaged = True

    if not explicit:
        service_identifier = _known(base)

    return DependencyDescriptor(
        service_identifier=service_identifier,
        name=name,
        tags=tuple(tags),
        unmanaged=is_unmanaged,
        multi=multi,
        parameter_name=param.name,
    )


def _resolve_each(cls: type, init: Any) -> Dict[str, Any]:
    """Resolve ``__init__`` annotations one by one.

    Used when :func:`typing.get_type_hints` fails as a whole, usually on a
    forward reference to a class defined later. Annotations that still cannot
    be evaluated stay as their raw strings.
    """
    globalns = getattr(init, "__globals__", {})
    localns = dict(vars(cls))
    localns.setdefault(cls.__name__, cls)

    hints: Dict[str, Any] = {}
    for name, ann in getattr(init, "__annotations__", {}).items():
        if isinstance(ann, str):
            try:
                ann = eval(ann, globalns, localns)
            except Exception:
                _logger.debug("Unresolved annotation %r for %s.%s", ann, cls.__name__, name)
        hints[name] = ann
    return hints


def analyze_constructor(cls: type) -> Tuple[DependencyDescriptor, ...]:
    """Describe the parameters of the ``__init__`` defined on *cls* itself.

    A class that inherits its constructor declares no dependencies of its own.
    """
    init = cls.__dict__.get("__init__")
    if init is None:
        return ()
    try:
        sig = inspect.signature(init)
    except (ValueError, TypeError):
        return ()
    try:
        hints = typing.get_type_hints(init, include_extras=True)
    except Exception:
        hints = _resolve_each(cls, init)

    out: List[DependencyDescriptor] = []
    for param in list(sig.parameters.values())[1:]:
        if param.kind in (inspect.Parameter.VAR_POSITIONAL, inspect.Parameter.VAR_KEYWORD):
            continue
        out.append(_describe_parameter(param, hints.get(param.name, param.annotation)))
    return tuple(out)


def declare_dependencies(cls: type, *descriptors: DependencyDescriptor) -> type:
    """Stamp an explicit dependency list on *cls*, replacing any earlier one."""
    setattr(cls, DEPENDENCIES_ATTR, tuple(descriptors))
    return cls


def injectable(cls: Optional[type] = None, *, dependencies: Optional[Iterable[DependencyDescriptor]] = None):
    """Declare *cls* as an instantiable class.

    Usable bare (``@injectable``), called (``@injectable()``) or with an
    explicit descriptor list (``@injectable(dependencies=[...])``).
    """
    def dec(c: type) -> type:
        if dependencies is not None:
            return declare_dependencies(c, *dependencies)
        return declare_dependencies(c, *analyze_constructor(c))
    return dec(cls) if cls is not None else dec


def declared_dependencies(cls: Any) -> Optional[Tuple[DependencyDescriptor, ...]]:
    """The descriptors declared on *cls* itself, or ``None`` if it was never declared."""
    return getattr(cls, "__dict__", {}).get(DEPENDENCIES_ATTR)


def descriptor_to_target(descriptor: DependencyDescriptor) -> Target:
    target = Target(descriptor.service_identifier, descriptor.parameter_name)
    if descriptor.multi:
        target.metadata.append(Metadata(MULTI_INJECT_TAG, descriptor.service_identifier))
    elif descriptor.service_identifier is not None:
        target.metadata.append(Metadata(INJECT_TAG, descriptor.service_identifier))
    if descriptor.name is not None:
        target.metadata.append(Metadata(NAMED_TAG, descriptor.name))
    for key, value in descriptor.tags:
        target.metadata.append(Metadata(key, value))
    if descriptor.unmanaged:
        target.metadata.append(Metadata(UNMANAGED_TAG, True))
    return target


class MetadataReader:
    """Reads declared dependency targets and walks class inheritance."""

    def get_targets(self, cls: Any, is_base_class: bool = False) -> List[Target]:
        """Targets for the constructor of *cls*, in parameter order.

        A base-class probe tolerates undeclared classes and unknown argument
        types; a regular lookup raises :class:`MissingAnnotationError`.
        """
        class_name = service_identifier_name(cls)
        descriptors = declared_dependencies(cls)
        if descriptors is None:
            if is_base_class:
                return []
            raise MissingAnnotationError(class_name)

        targets: List[Target] = []
        for index, descriptor in enumerate(descriptors):
            if descriptor.service_identifier is None and not descriptor.unmanaged and not is_base_class:
                raise MissingAnnotationError(class_name, index)
            targets.append(descriptor_to_target(descriptor))
        return targets

    def base_class(self, cls: Any) -> Optional[type]:
        mro = getattr(cls, "__mro__", ())
        if len(mro) < 2 or mro[1] is object:
            return None
        return mro[1]
