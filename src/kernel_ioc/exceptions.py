"""Exception hierarchy for kernel-ioc.

All framework-specific exceptions inherit from :class:`KernelError`, making it
easy to catch any planning error with a single ``except KernelError`` clause.
Messages embed display names produced by
:meth:`Kernel.get_service_identifier_as_string`.
"""

from typing import Any, Sequence


class KernelError(Exception):
    """Base exception for all kernel-ioc errors."""

    pass


class NullArgumentError(KernelError):
    """Raised when ``None`` is passed where an identifier or binding is required."""

    def __init__(self):
        super().__init__("Argument cannot be null")


class KeyNotFoundError(KernelError, KeyError):
    """Raised by :class:`Registry` lookups for an identifier that has no entry.

    Attributes:
        service_identifier: The identifier that was not found.
    """

    def __init__(self, service_identifier: Any):
        name = getattr(service_identifier, "__name__", str(service_identifier))
        super().__init__(f"Key not found: {name}")
        self.service_identifier = service_identifier

    def __str__(self) -> str:
        return self.args[0]


class NotRegisteredError(KernelError):
    """Raised when no active binding exists for a requested identifier.

    Attributes:
        service_identifier: The identifier with zero active bindings.
    """

    def __init__(self, service_identifier: Any, display_name: str):
        super().__init__(f"No bindings found for service identifier: {display_name}")
        self.service_identifier = service_identifier


class AmbiguousMatchError(KernelError):
    """Raised when more than one binding matches a single-valued target.

    Attributes:
        service_identifier: The identifier with several active bindings.
        candidates: Number of bindings that matched.
    """

    def __init__(self, service_identifier: Any, display_name: str, candidates: int):
        super().__init__(
            f"Ambiguous match found for service identifier: {display_name} ({candidates} active bindings)"
        )
        self.service_identifier = service_identifier
        self.candidates = candidates


class CircularDependencyError(KernelError):
    """Raised when a service identifier repeats on one root-to-leaf path.

    Attributes:
        service_identifier: The identifier that was seen twice.
        tail: The identifier whose dependency closed the cycle.
        path: Display names from the root to the repeated identifier.
    """

    def __init__(self, service_identifier: Any, tail: Any, path: Sequence[str]):
        repeated, tail_name = path[-1], path[-2] if len(path) > 1 else path[-1]
        super().__init__(
            f"Circular dependency found: {repeated} and {tail_name} (path: {' -> '.join(path)})"
        )
        self.service_identifier = service_identifier
        self.tail = tail
        self.path = tuple(path)


class MissingAnnotationError(KernelError):
    """Raised when the dependency metadata of a class cannot be determined.

    Attributes:
        class_name: The class being inspected.
        index: Position of the offending constructor argument, or ``None``
            when the class itself was never declared injectable.
    """

    def __init__(self, class_name: str, index: int | None = None):
        if index is None:
            msg = f"Missing required @injectable declaration in: {class_name}."
        else:
            msg = f"Missing required inject or multi_inject annotation in: argument {index} in class {class_name}."
        super().__init__(msg)
        self.class_name = class_name
        self.index = index


class ArityMismatchError(KernelError):
    """Raised when a derived class declares fewer dependencies than its base requires.

    Attributes:
        class_name: The derived class.
        expected: Managed dependency count of the nearest declaring ancestor.
        actual: Number of targets the derived class declares.
    """

    def __init__(self, class_name: str, expected: int, actual: int):
        super().__init__(
            f"The number of constructor arguments in the derived class {class_name} must be >= "
            f"than the number of constructor arguments of its base class "
            f"(expected at least {expected}, found {actual})."
        )
        self.class_name = class_name
        self.expected = expected
        self.actual = actual


class PlanningDepthError(KernelError):
    """Raised when an acyclic dependency path grows beyond the configured depth.

    Attributes:
        max_depth: The configured limit.
        path: Display names of the path that exceeded the limit (may be truncated).
    """

    def __init__(self, max_depth: int, path: Sequence[str]):
        shown = list(path)
        if len(shown) > 6:
            shown = shown[:3] + ["..."] + shown[-3:]
        super().__init__(
            f"Planning exceeded the maximum depth of {max_depth} (path: {' -> '.join(shown)})"
        )
        self.max_depth = max_depth
        self.path = tuple(path)


class ConfigurationError(KernelError):
    """Raised for invalid options or unreadable configuration sources."""

    def __init__(self, msg: str):
        super().__init__(msg)
