"""The planning engine.

Starting from a root binding, :class:`Planner` builds the full tree of
:class:`~kernel_ioc.planning.Request` objects an activation engine needs:
one child per constructor dependency, picked from the kernel's registry
(with parent fallback) and narrowed by binding constraints.

Failures abort the whole plan:

* no active binding -> :class:`NotRegisteredError`
* several active bindings for a single-valued target -> :class:`AmbiguousMatchError`
* an identifier repeating on one root-to-leaf path -> :class:`CircularDependencyError`
* a path longer than ``max_depth`` -> :class:`PlanningDepthError`
* undeclared classes or argument types -> :class:`MissingAnnotationError`
* a derived class declaring fewer arguments than its base needs -> :class:`ArityMismatchError`
"""

import logging
from typing import Any, List, Optional

from .binding import Binding, BindingType
from .config import KernelOptions
from .exceptions import (
    AmbiguousMatchError,
    ArityMismatchError,
    CircularDependencyError,
    NotRegisteredError,
    PlanningDepthError,
)
from .keys import ServiceIdentifier
from .metadata import MetadataReader
from .planning import Context, Plan, Request
from .target import Target

_logger = logging.getLogger(__name__)


class Planner:
    def __init__(self, metadata_reader: Optional[MetadataReader] = None, options: Optional[KernelOptions] = None):
        self._reader = metadata_reader or MetadataReader()
        self._options = options or KernelOptions()

    @property
    def options(self) -> KernelOptions:
        return self._options

    def create_context(self, kernel: Any) -> Context:
        return Context(kernel)

    def create_plan(self, context: Context, binding: Binding, target: Optional[Target]) -> Plan:
        root_request = Request(binding.service_identifier, context, None, binding, target)
        plan = Plan(context, root_request)
        context.add_plan(plan)

        path: List[ServiceIdentifier] = [binding.service_identifier]
        try:
            if binding.type is BindingType.INSTANCE:
                for dependency in self._get_dependencies(context, binding.implementation_type):
                    self._create_sub_request(root_request, dependency, path)
        except RecursionError as e:
            raise PlanningDepthError(self._options.max_depth, self._names(context, path)) from e

        _logger.debug("Planned %s with %d request(s)", self._name(context, binding.service_identifier), len(plan))
        return plan

    def get_bindings(self, kernel: Any, service_identifier: ServiceIdentifier) -> List[Binding]:
        """Bindings for *service_identifier*, falling back to parent kernels.

        Returns an empty list when no kernel in the chain knows the identifier.
        """
        registry = kernel.registry
        if registry.has_key(service_identifier):
            return registry.get(service_identifier)
        if kernel.parent is not None:
            return self.get_bindings(kernel.parent, service_identifier)
        return []

    def get_active_bindings(self, parent_request: Request, target: Target) -> List[Binding]:
        """Bindings that apply to *target* below *parent_request*."""
        context = parent_request.parent_context
        bindings = self.get_bindings(context.kernel, target.service_identifier)
        return self.filter_bindings(context, parent_request, target, bindings)

    def filter_bindings(
        self,
        context: Context,
        parent_request: Optional[Request],
        target: Target,
        bindings: List[Binding],
    ) -> List[Binding]:
        """Apply binding constraints to *bindings* competing for *target*.

        Constraints only narrow single-valued targets with more than one
        candidate; collection targets always receive every binding.
        """
        if len(bindings) <= 1 or target.is_array():
            return bindings

        active = [
            b for b in bindings
            if b.constraint(Request(b.service_identifier, context, parent_request, b, target))
        ]
        _logger.debug(
            "Constraints kept %d of %d binding(s) for %s",
            len(active),
            len(bindings),
            self._name(context, target.service_identifier),
        )
        return active

    def _create_sub_request(self, parent_request: Request, target: Target, path: List[ServiceIdentifier]) -> None:
        context = parent_request.parent_context
        active = self.get_active_bindings(parent_request, target)

        if not active:
            raise NotRegisteredError(target.service_identifier, self._name(context, target.service_identifier))
        if len(active) > 1 and not target.is_array():
            raise AmbiguousMatchError(
                target.service_identifier, self._name(context, target.service_identifier), len(active)
            )
        self._create_child_request(parent_request, target, active, path)

    def _create_child_request(
        self,
        parent_request: Request,
        target: Target,
        bindings: List[Binding],
        path: List[ServiceIdentifier],
    ) -> None:
        context = parent_request.parent_context
        child_request = parent_request.add_child_request(target.service_identifier, bindings, target)
        sub_child_request = child_request

        for binding in bindings:
            if target.is_array():
                sub_child_request = child_request.add_child_request(binding.service_identifier, binding, target)

            if binding.type is not BindingType.INSTANCE:
                continue

            self._enter(context, target.service_identifier, path)
            for dependency in self._get_dependencies(context, binding.implementation_type):
                self._create_sub_request(sub_child_request, dependency, path)
            path.pop()

    def _enter(self, context: Context, service_identifier: ServiceIdentifier, path: List[ServiceIdentifier]) -> None:
        # path is left as is on failure; it only lives for one create_plan call
        if service_identifier in path:
            tail = path[-1]
            path.append(service_identifier)
            raise CircularDependencyError(service_identifier, tail, self._names(context, path))
        if len(path) >= self._options.max_depth:
            path.append(service_identifier)
            raise PlanningDepthError(self._options.max_depth, self._names(context, path))
        path.append(service_identifier)

    def _get_dependencies(self, context: Context, implementation_type: Any) -> List[Target]:
        targets = self._reader.get_targets(implementation_type, is_base_class=False)

        if not self._options.skip_base_class_checks:
            required = self._base_class_dependency_count(implementation_type)
            if len(targets) < required:
                raise ArityMismatchError(self._name(context, implementation_type), required, len(targets))

        return [t for t in targets if not t.is_unmanaged()]

    def _base_class_dependency_count(self, cls: Any) -> int:
        """Managed dependency count of the nearest ancestor that declares any."""
        base = self._reader.base_class(cls)
        while base is not None:
            targets = self._reader.get_targets(base, is_base_class=True)
            managed = sum(1 for t in targets if not t.is_unmanaged())
            if managed > 0:
                return managed
            base = self._reader.base_class(base)
        return 0

    @staticmethod
    def _name(context: Context, service_identifier: ServiceIdentifier) -> str:
        return context.kernel.get_service_identifier_as_string(service_identifier)

    def _names(self, context: Context, path: List[ServiceIdentifier]) -> List[str]:
        return [self._name(context, s) for s in path]
