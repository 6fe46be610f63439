"""
Library of PDE problems that are registered when the package is imported.

Each problem module provides a function building the symbolic system and a function
registering it. The function :func:`load` registers all problems of the library into
a registry, which happens automatically for the process-wide registry.

.. autosummary::
   :nosignatures:

   ~brusselator.make_brusselator
   load

.. codeauthor:: David Zwicker <david.zwicker@ds.mpg.de>
"""

from __future__ import annotations

import logging
import threading
import weakref
from typing import Callable

from ..systems.base import PDESystem
from ..systems.registry import SystemRegistry, default_registry
from .brusselator import (  # noqa: F401
    brusselator_forcing,
    make_brusselator,
    register_brusselator,
)

_logger = logging.getLogger(__name__)
""":class:`logging.Logger`: Logger instance."""

PROBLEMS: list[Callable[[SystemRegistry | None], PDESystem]] = [register_brusselator]
"""list: functions registering the problems of the library"""

_loaded: weakref.WeakSet[SystemRegistry] = weakref.WeakSet()
"""set: registries that the library was loaded into (weakly referenced)"""
_load_lock = threading.Lock()


def load(registry: SystemRegistry | None = None) -> list[PDESystem]:
    """Register all problems of the library.

    Problems are registered at most once into each registry, so calling this
    function repeatedly does not create duplicates.

    Args:
        registry (:class:`~pdesys.systems.registry.SystemRegistry`):
            The registry, defaulting to the process-wide one

    Returns:
        list: The systems that have been registered by this call
    """
    if registry is None:
        registry = default_registry()

    with _load_lock:
        if registry in _loaded:
            _logger.debug("Library was already loaded into %r", registry)
            return []
        systems = [register_problem(registry) for register_problem in PROBLEMS]
        _loaded.add(registry)
    return systems


# register all problems in the process-wide registry
load()
