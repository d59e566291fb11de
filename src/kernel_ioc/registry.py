"""Multi-map from service identifier to its ordered list of bindings."""

import logging
from typing import Dict, Iterator, List

from .binding import Binding
from .exceptions import KeyNotFoundError, NullArgumentError
from .keys import ServiceIdentifier

_logger = logging.getLogger(__name__)


class Registry:
    """Ordered binding lists keyed by service identifier.

    An identifier is present only while it has at least one binding; an
    emptied list is dropped together with its key.
    """

    def __init__(self) -> None:
        self._entries: Dict[ServiceIdentifier, List[Binding]] = {}

    def add(self, service_identifier: ServiceIdentifier, binding: Binding) -> None:
        if service_identifier is None or binding is None:
            raise NullArgumentError()
        self._entries.setdefault(service_identifier, []).append(binding)

    def get(self, service_identifier: ServiceIdentifier) -> List[Binding]:
        """Return the stored list for *service_identifier*.

        Raises:
            NullArgumentError: If *service_identifier* is ``None``.
            KeyNotFoundError: If the identifier has no entry; check
                :meth:`has_key` first when absence is not an error.
        """
        if service_identifier is None:
            raise NullArgumentError()
        try:
            return self._entries[service_identifier]
        except KeyError:
            raise KeyNotFoundError(service_identifier) from None

    def remove(self, service_identifier: ServiceIdentifier) -> None:
        if service_identifier is None:
            raise NullArgumentError()
        if service_identifier not in self._entries:
            raise KeyNotFoundError(service_identifier)
        del self._entries[service_identifier]

    def remove_by_module_id(self, module_id: str) -> None:
        removed = 0
        for key in list(self._entries):
            kept = [b for b in self._entries[key] if b.module_id != module_id]
            removed += len(self._entries[key]) - len(kept)
            if kept:
                self._entries[key] = kept
            else:
                del self._entries[key]
        _logger.debug("Removed %d binding(s) registered by module %s", removed, module_id)

    def has_key(self, service_identifier: ServiceIdentifier) -> bool:
        if service_identifier is None:
            raise NullArgumentError()
        return service_identifier in self._entries

    def keys(self) -> List[ServiceIdentifier]:
        return list(self._entries)

    def clear(self) -> None:
        self._entries.clear()

    def clone(self) -> "Registry":
        """Deep copy: new lists holding cloned bindings."""
        copy = Registry()
        for key, bindings in self._entries.items():
            copy._entries[key] = [b.clone() for b in bindings]
        return copy

    def __contains__(self, service_identifier: object) -> bool:
        return service_identifier in self._entries

    def __iter__(self) -> Iterator[ServiceIdentifier]:
        return iter(list(self._entries))

    def __len__(self) -> int:
        return len(self._entries)
