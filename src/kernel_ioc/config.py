"""Planner options and the sources they are loaded from.

:func:`load_options` merges any number of sources (later sources win),
applies explicit overrides, then coerces and validates the result into an
immutable :class:`KernelOptions`.

Example:
    >>> opts = load_options(EnvSource(), DictSource({"max_depth": 50}))
    >>> opts.max_depth
    50
"""

import os
from dataclasses import dataclass, fields
from typing import Any, Dict, Mapping, Optional

from .binding import BindingScope
from .constants import DEFAULT_MAX_DEPTH, ENV_PREFIX
from .exceptions import ConfigurationError

_TRUE = ("1", "true", "yes", "on")
_FALSE = ("0", "false", "no", "off")


@dataclass(frozen=True)
class KernelOptions:
    """Immutable planner configuration.

    Attributes:
        max_depth: Longest root-to-leaf path the planner will build before
            raising :class:`PlanningDepthError`.
        default_scope: Scope given to bindings created by
            :meth:`Kernel.binding` when none is passed.
        skip_base_class_checks: Disable the base-class arity check.
    """

    max_depth: int = DEFAULT_MAX_DEPTH
    default_scope: BindingScope = BindingScope.TRANSIENT
    skip_base_class_checks: bool = False

    def __post_init__(self) -> None:
        if isinstance(self.max_depth, bool) or not isinstance(self.max_depth, int) or self.max_depth < 1:
            raise ConfigurationError(f"max_depth must be a positive integer, got {self.max_depth!r}")
        if not isinstance(self.default_scope, BindingScope):
            raise ConfigurationError(f"default_scope must be a BindingScope, got {self.default_scope!r}")


class EnvSource:
    """Options read from environment variables.

    Args:
        prefix: Prepended to the upper-cased option name
            (``max_depth`` is read from ``KERNEL_IOC_MAX_DEPTH``).
        environ: Mapping to read instead of :data:`os.environ`.
    """

    def __init__(self, prefix: str = ENV_PREFIX, environ: Optional[Mapping[str, str]] = None) -> None:
        self.prefix = prefix
        self._environ = environ

    def get(self, key: str) -> Optional[str]:
        env = self._environ if self._environ is not None else os.environ
        return env.get(self.prefix + key.upper())


class DictSource:
    """Options held in an in-memory mapping."""

    def __init__(self, data: Mapping[str, Any]):
        self._data = dict(data)

    def get(self, key: str) -> Any:
        return self._data.get(key)


class YamlSource:
    """Options read from a section of a YAML file.

    Requires ``PyYAML`` to be installed (``pip install kernel-ioc[yaml]``).

    Args:
        path: Filesystem path to the YAML file.
        section: Top-level key holding the options; ``None`` reads the
            document root.

    Raises:
        ConfigurationError: If PyYAML is not installed, or if the file
            cannot be loaded or parsed.
    """

    def __init__(self, path: str, section: Optional[str] = "kernel_ioc"):
        self._path = path
        self._section = section
        self._data: Optional[Mapping[str, Any]] = None

    def _load(self) -> Mapping[str, Any]:
        try:
            import yaml
        except Exception:
            raise ConfigurationError("PyYAML not installed")
        try:
            with open(self._path, encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except Exception as e:
            raise ConfigurationError(f"Failed to load YAML config: {e}")
        if self._section is not None:
            if not isinstance(data, dict):
                raise ConfigurationError("Expected a mapping at the root of the YAML config")
            data = data.get(self._section) or {}
        if not isinstance(data, dict):
            raise ConfigurationError(f"Expected a mapping in YAML config section '{self._section}'")
        return data

    def get(self, key: str) -> Any:
        if self._data is None:
            self._data = self._load()
        return self._data.get(key)


def _coerce_int(name: str, value: Any) -> int:
    if isinstance(value, bool):
        raise ConfigurationError(f"Invalid integer for {name}: {value!r}")
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ConfigurationError(f"Invalid integer for {name}: {value!r}") from None


def _coerce_bool(name: str, value: Any) -> bool:
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in _TRUE:
        return True
    if text in _FALSE:
        return False
    raise ConfigurationError(f"Invalid boolean for {name}: {value!r}")


def _coerce_scope(name: str, value: Any) -> BindingScope:
    if isinstance(value, BindingScope):
        return value
    try:
        return BindingScope(str(value).strip().lower())
    except ValueError:
        allowed = ", ".join(s.value for s in BindingScope)
        raise ConfigurationError(f"Invalid scope for {name}: {value!r} (allowed: {allowed})") from None


_COERCERS = {
    "max_depth": _coerce_int,
    "default_scope": _coerce_scope,
    "skip_base_class_checks": _coerce_bool,
}


def load_options(*sources: Any, overrides: Optional[Dict[str, Any]] = None) -> KernelOptions:
    """Build :class:`KernelOptions` from *sources* and *overrides*.

    Raises:
        ConfigurationError: On unknown override keys or invalid values.
    """
    names = [f.name for f in fields(KernelOptions)]
    unknown = set(overrides or {}) - set(names)
    if unknown:
        raise ConfigurationError(f"Unknown options: {sorted(unknown)}")

    raw: Dict[str, Any] = {}
    for src in sources:
        for name in names:
            value = src.get(name)
            if value is not None:
                raw[name] = value
    raw.update(overrides or {})

    return KernelOptions(**{k: _COERCERS[k](k, v) for k, v in raw.items()})
