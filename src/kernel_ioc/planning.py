"""Resolution tree types: :class:`Request`, :class:`Context` and :class:`Plan`.

Ownership runs one way. A :class:`Context` owns its :class:`Plan`, the plan
owns the root :class:`Request`, and every request owns its children. The
links back up (plan to context, request to context, request to parent) are
weak references, valid while the owner is alive.
"""

import uuid
import weakref
from typing import TYPE_CHECKING, Any, Iterator, List, Optional, Sequence, Union

from .binding import Binding
from .keys import ServiceIdentifier, service_identifier_name
from .target import Target

if TYPE_CHECKING:
    from .kernel import Kernel


def _weak(obj: Any) -> Optional[weakref.ReferenceType]:
    return weakref.ref(obj) if obj is not None else None


def _deref(ref: Optional[weakref.ReferenceType]) -> Any:
    return ref() if ref is not None else None


class Context:
    """One planning invocation against a kernel."""

    def __init__(self, kernel: "Kernel"):
        self.guid = uuid.uuid4().hex
        self.kernel = kernel
        self.plan: Optional["Plan"] = None

    def add_plan(self, plan: "Plan") -> None:
        self.plan = plan

    def __repr__(self) -> str:
        return f"<Context {self.guid[:8]} planned={self.plan is not None}>"


class Plan:
    """A finished (or in-progress) resolution tree and its context."""

    def __init__(self, parent_context: Context, root_request: "Request"):
        self._context_ref = _weak(parent_context)
        self.root_request = root_request

    @property
    def parent_context(self) -> Optional[Context]:
        return _deref(self._context_ref)

    def requests(self) -> Iterator["Request"]:
        """All requests of the tree, depth-first."""
        return self.root_request.walk()

    def __len__(self) -> int:
        return sum(1 for _ in self.requests())


class Request:
    """One node of the resolution tree.

    ``bindings`` holds the single chosen binding in the common case, or the
    whole candidate set for a collection target. Each candidate of a
    collection target gets its own intermediate child so that its
    dependencies are planned independently.
    """

    def __init__(
        self,
        service_identifier: ServiceIdentifier,
        parent_context: Context,
        parent_request: Optional["Request"],
        bindings: Union[Binding, Sequence[Binding]],
        target: Optional[Target],
    ):
        self.guid = uuid.uuid4().hex
        self.service_identifier = service_identifier
        self._context_ref = _weak(parent_context)
        self._parent_ref = _weak(parent_request)
        self.bindings: List[Binding] = [bindings] if isinstance(bindings, Binding) else list(bindings)
        self.target = target
        self.child_requests: List["Request"] = []

    @property
    def parent_context(self) -> Optional[Context]:
        return _deref(self._context_ref)

    @property
    def parent_request(self) -> Optional["Request"]:
        return _deref(self._parent_ref)

    def add_child_request(
        self,
        service_identifier: ServiceIdentifier,
        bindings: Union[Binding, Sequence[Binding]],
        target: Optional[Target],
    ) -> "Request":
        child = Request(service_identifier, self.parent_context, self, bindings, target)
        self.child_requests.append(child)
        return child

    @property
    def depth(self) -> int:
        depth, parent = 0, self.parent_request
        while parent is not None:
            depth += 1
            parent = parent.parent_request
        return depth

    def walk(self) -> Iterator["Request"]:
        yield self
        for child in self.child_requests:
            yield from child.walk()

    def __repr__(self) -> str:
        return (
            f"<Request {service_identifier_name(self.service_identifier)} "
            f"bindings={len(self.bindings)} children={len(self.child_requests)}>"
        )
