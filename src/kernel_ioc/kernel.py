"""The kernel: a hierarchical binding registry and the entry point for planning.

A kernel owns a :class:`Registry` and optionally a parent kernel that is
consulted for identifiers it does not bind itself. Planning calls return the
:class:`Context` objects that own the finished plans; keep them for as long as
the plans are in use.
"""

import uuid
from typing import Any, List, Optional

from .binding import Binding
from .config import KernelOptions
from .constants import LOGGER, MULTI_INJECT_TAG
from .exceptions import AmbiguousMatchError, NotRegisteredError
from .keys import ServiceIdentifier, service_identifier_name
from .metadata import MetadataReader
from .planner import Planner
from .planning import Context
from .registry import Registry
from .target import Metadata, Target


class Kernel:
    def __init__(
        self,
        parent: Optional["Kernel"] = None,
        *,
        options: Optional[KernelOptions] = None,
        planner: Optional[Planner] = None,
        metadata_reader: Optional[MetadataReader] = None,
    ) -> None:
        self.guid = uuid.uuid4().hex
        self.parent = parent
        if options is None:
            options = parent.options if parent is not None else KernelOptions()
        self.options = options
        self.registry = Registry()
        self._planner = planner or Planner(metadata_reader, options)

    @property
    def planner(self) -> Planner:
        return self._planner

    def create_child(self, **kwargs: Any) -> "Kernel":
        return Kernel(parent=self, **kwargs)

    # --- registration ---

    def add_binding(self, binding: Binding) -> Binding:
        self.registry.add(binding.service_identifier, binding)
        return binding

    def binding(self, service_identifier: ServiceIdentifier, **fields: Any) -> Binding:
        """Create a :class:`Binding` with this kernel's default scope and add it."""
        fields.setdefault("scope", self.options.default_scope)
        return self.add_binding(Binding(service_identifier, **fields))

    def unbind(self, service_identifier: ServiceIdentifier) -> None:
        self.registry.remove(service_identifier)

    def unbind_all(self) -> None:
        self.registry.clear()

    def unload(self, *module_ids: str) -> None:
        for module_id in module_ids:
            self.registry.remove_by_module_id(module_id)
        self.info(f"Unloaded module(s): {', '.join(module_ids)}")

    def is_bound(self, service_identifier: ServiceIdentifier) -> bool:
        if self.registry.has_key(service_identifier):
            return True
        return self.parent is not None and self.parent.is_bound(service_identifier)

    def get_service_identifier_as_string(self, service_identifier: ServiceIdentifier) -> str:
        return service_identifier_name(service_identifier)

    # --- planning ---

    def plan(self, service_identifier: ServiceIdentifier) -> Context:
        return self._plan(Target(service_identifier))[0]

    def plan_named(self, service_identifier: ServiceIdentifier, name: str) -> Context:
        return self._plan(Target(service_identifier, None, name))[0]

    def plan_tagged(self, service_identifier: ServiceIdentifier, key: str, value: Any) -> Context:
        return self._plan(Target(service_identifier, None, Metadata(key, value)))[0]

    def plan_all(self, service_identifier: ServiceIdentifier) -> List[Context]:
        return self._plan(Target(service_identifier, None, Metadata(MULTI_INJECT_TAG, service_identifier)))

    def _plan(self, target: Target) -> List[Context]:
        service_identifier = target.service_identifier
        bindings = self._planner.get_bindings(self, service_identifier)
        selection = self._planner.create_context(self)
        bindings = self._planner.filter_bindings(selection, None, target, bindings)

        name = self.get_service_identifier_as_string(service_identifier)
        if not bindings:
            raise NotRegisteredError(service_identifier, name)
        if len(bindings) > 1 and not target.is_array():
            raise AmbiguousMatchError(service_identifier, name, len(bindings))

        contexts: List[Context] = []
        for binding in bindings:
            context = self._planner.create_context(self)
            self._planner.create_plan(context, binding, target)
            contexts.append(context)
        LOGGER.debug("[%s] planned %s (%d root binding(s))", self.guid[:8], name, len(contexts))
        return contexts

    def info(self, msg: str) -> None:
        LOGGER.info(f"[{self.guid[:8]}] {msg}")
