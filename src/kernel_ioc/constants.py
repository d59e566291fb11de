"""Constants used throughout the kernel-ioc planner.

This module defines the framework logger, the metadata tag keys carried by
:class:`~kernel_ioc.target.Target` instances, and the attribute names stamped
onto declared classes.
"""

import logging

LOGGER_NAME: str = "kernel_ioc"
"""Default logger name for the kernel-ioc package."""

LOGGER: logging.Logger = logging.getLogger(LOGGER_NAME)
"""Pre-configured logger instance for kernel-ioc internal diagnostics."""

INJECT_TAG: str = "inject"
"""Metadata key holding the explicitly injected service identifier."""

MULTI_INJECT_TAG: str = "multi_inject"
"""Metadata key marking a collection injection point; the value is the identifier."""

NAME_TAG: str = "name"
"""Metadata key holding the constructor parameter name of a target."""

NAMED_TAG: str = "named"
"""Metadata key holding the disambiguation name of a target."""

UNMANAGED_TAG: str = "unmanaged"
"""Metadata key marking a constructor argument the container never supplies."""

RESERVED_TAGS: frozenset = frozenset({INJECT_TAG, MULTI_INJECT_TAG, NAME_TAG, UNMANAGED_TAG, NAMED_TAG})
"""Keys that do not count as user tags in :meth:`Target.is_tagged`."""

DEPENDENCIES_ATTR: str = "_kernel_ioc_dependencies"
"""Class attribute storing the declared :class:`DependencyDescriptor` tuple."""

ENV_PREFIX: str = "KERNEL_IOC_"
"""Default environment variable prefix read by :class:`~kernel_ioc.config.EnvSource`."""

DEFAULT_MAX_DEPTH: int = 200
"""Default bound on the length of one root-to-leaf planning path."""
