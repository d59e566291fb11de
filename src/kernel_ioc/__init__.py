# kernel_ioc/__init__.py
__version__ = "1.0.0"

from .binding import Binding, BindingScope, BindingType
from .config import DictSource, EnvSource, KernelOptions, YamlSource, load_options
from .exceptions import (
    AmbiguousMatchError,
    ArityMismatchError,
    CircularDependencyError,
    ConfigurationError,
    KernelError,
    KeyNotFoundError,
    MissingAnnotationError,
    NotRegisteredError,
    NullArgumentError,
    PlanningDepthError,
)
from .graph_export import export_plan, plan_to_dot
from .kernel import Kernel
from .keys import Token, service_identifier_name
from .metadata import (
    DependencyDescriptor,
    MetadataReader,
    declare_dependencies,
    inject,
    injectable,
    multi_inject,
    named,
    tagged,
    unmanaged,
)
from .planner import Planner
from .planning import Context, Plan, Request
from .registry import Registry
from .target import Metadata, QueryableString, Target

__all__ = [
    "__version__",
    "Kernel",
    "Planner",
    "Registry",
    "Binding",
    "BindingScope",
    "BindingType",
    "Target",
    "Metadata",
    "QueryableString",
    "Request",
    "Context",
    "Plan",
    "Token",
    "service_identifier_name",
    "DependencyDescriptor",
    "MetadataReader",
    "injectable",
    "declare_dependencies",
    "inject",
    "multi_inject",
    "named",
    "tagged",
    "unmanaged",
    "KernelOptions",
    "EnvSource",
    "DictSource",
    "YamlSource",
    "load_options",
    "plan_to_dot",
    "export_plan",
    "KernelError",
    "NullArgumentError",
    "KeyNotFoundError",
    "NotRegisteredError",
    "AmbiguousMatchError",
    "CircularDependencyError",
    "MissingAnnotationError",
    "ArityMismatchError",
    "PlanningDepthError",
    "ConfigurationError",
]
