"""
Records describing complete PDE systems and the registry collecting them

.. autosummary::
   :nosignatures:

   ~base.PDESystem
   ~base.build_system
   ~registry.SystemRegistry
   ~registry.register

.. codeauthor:: David Zwicker <david.zwicker@ds.mpg.de>
"""

from .base import (
    IncompleteSystemError,
    MissingBoundaryConditionError,
    PDESystem,
    PDESystemError,
    SignatureMismatchError,
    UndefinedSymbolError,
    build_system,
)
from .registry import (
    SystemRegistry,
    all_systems,
    default_registry,
    nonlinear_systems,
    register,
)

__all__ = [
    "PDESystem",
    "build_system",
    "PDESystemError",
    "UndefinedSymbolError",
    "IncompleteSystemError",
    "SignatureMismatchError",
    "MissingBoundaryConditionError",
    "SystemRegistry",
    "register",
    "default_registry",
    "all_systems",
    "nonlinear_systems",
]
