"""Collections of PDE systems that are consumed by external tools.

Problem definitions append their systems to named collections of a
:class:`SystemRegistry`. The collections are ordered and append-only, so tools like
benchmark harnesses can iterate over them after all problems have been registered.
A process-wide registry is available as :data:`registry`, but registries can also be
created explicitly and passed to the problem definitions.

.. autosummary::
   :nosignatures:

   SystemRegistry
   register
   all_systems
   nonlinear_systems

.. codeauthor:: David Zwicker <david.zwicker@ds.mpg.de>
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterator, Sequence

from .. import config
from .base import PDESystem

_logger = logging.getLogger(__name__)
""":class:`logging.Logger`: Logger instance."""

DEFAULT_COLLECTIONS: tuple[str, ...] = ("all_systems", "nonlinear_systems")
"""tuple: names of the collections that every registry provides"""


class SystemRegistry:
    """Class handling ordered, append-only collections of PDE systems."""

    _collections: dict[str, list[PDESystem]]
    """dict: the systems registered in each collection"""

    def __init__(self, collections: Sequence[str] = DEFAULT_COLLECTIONS):
        """
        Args:
            collections (list of str):
                Names of the collections that are created initially
        """
        self._lock = threading.RLock()
        self._collections = {}
        for name in collections:
            self.add_collection(name)

    def add_collection(self, name: str) -> None:
        """Create a new, empty collection.

        Args:
            name (str):
                Name of the collection
        """
        with self._lock:
            if name in self._collections:
                raise ValueError(f"Collection `{name}` already exists")
            self._collections[name] = []
        _logger.debug("Created collection `%s`", name)

    def register(
        self, system: PDESystem, into: Sequence[str] | str = ("all_systems",)
    ) -> None:
        """Append a system to collections.

        The system is appended to the collections in the order they are given. The
        registry does not remove duplicates, so each system should only be
        registered once.

        Args:
            system (:class:`~pdesys.systems.base.PDESystem`):
                The system to register
            into (list of str):
                The names of the collections to which the system is appended
        """
        if not isinstance(system, PDESystem):
            raise TypeError(f"Only PDE systems can be registered, not {system!r}")
        if isinstance(into, str):
            into = [into]

        with self._lock:
            # check all names first so a failure does not register partially
            unknown = [name for name in into if name not in self._collections]
            if unknown:
                names = ", ".join(self._collections)
                raise KeyError(f"Collections {unknown} not in [{names}]")

            for name in into:
                collection = self._collections[name]
                if config["registry.warn_duplicates"] and any(
                    entry.name == system.name for entry in collection
                ):
                    _logger.warning(
                        "Collection `%s` already contains a system named `%s`",
                        name,
                        system.name,
                    )
                collection.append(system)
                _logger.info("Registered system `%s` in `%s`", system.name, name)

    def collection(self, name: str) -> tuple[PDESystem, ...]:
        """Return the systems of a collection in registration order.

        Args:
            name (str):
                Name of the collection

        Returns:
            tuple: A snapshot of the collection, which is not affected by later
            registrations
        """
        with self._lock:
            try:
                return tuple(self._collections[name])
            except KeyError:
                names = ", ".join(self._collections)
                raise KeyError(f"Collection `{name}` not in [{names}]") from None

    __getitem__ = collection

    def find(self, name: str) -> list[PDESystem]:
        """Return all distinct registered systems with the given name."""
        result: list[PDESystem] = []
        with self._lock:
            for collection in self._collections.values():
                for system in collection:
                    if system.name == name and all(s is not system for s in result):
                        result.append(system)
        return result

    @property
    def names(self) -> list[str]:
        """list: names of all collections"""
        with self._lock:
            return list(self._collections)

    def __contains__(self, name: str) -> bool:
        return name in self._collections

    def __iter__(self) -> Iterator[str]:
        """Iterate over the names of the collections."""
        return iter(self.names)

    def __len__(self) -> int:
        return len(self._collections)

    def __repr__(self) -> str:
        sizes = ", ".join(
            f"{name}={len(systems)}" for name, systems in self._collections.items()
        )
        return f"{self.__class__.__name__}({sizes})"


# initiate the process-wide registry before any problem definition is loaded
registry = SystemRegistry()
""":class:`SystemRegistry`: registry shared by the whole process"""


def default_registry() -> SystemRegistry:
    """Return the process-wide registry."""
    return registry


def register(
    system: PDESystem,
    into: Sequence[str] | str = ("all_systems",),
    *,
    registry: SystemRegistry | None = None,
) -> None:
    """Register a system in a registry.

    Args:
        system (:class:`~pdesys.systems.base.PDESystem`):
            The system to register
        into (list of str):
            The names of the collections to which the system is appended
        registry (:class:`SystemRegistry`):
            The registry, defaulting to the process-wide one
    """
    if registry is None:
        registry = default_registry()
    registry.register(system, into=into)


def all_systems() -> tuple[PDESystem, ...]:
    """Return all systems registered in the process-wide registry."""
    return registry.collection("all_systems")


def nonlinear_systems() -> tuple[PDESystem, ...]:
    """Return the nonlinear systems registered in the process-wide registry."""
    return registry.collection("nonlinear_systems")
