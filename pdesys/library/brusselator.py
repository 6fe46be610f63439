r"""
The Brusselator in two dimensions

The Brusselator describes pattern formation in an autocatalytic chemical reaction
between two species with concentrations :math:`u` and :math:`v`. The reaction is
bistable and a localized forcing pushes the system from its initial state, so that
patterns form over time. The equations read

.. math::
    \partial_t u &= 1 + v u^2 - 4.4 u + \alpha \nabla^2 u + f(x, y, t) \\
    \partial_t v &= 3.4 u - v u^2 + \alpha \nabla^2 v

where :math:`\alpha` controls diffusion and the forcing

.. math::
    f(x, y, t) = 5 \, \Theta\bigl(0.1^2 - (x - 0.3)^2 - (y - 0.6)^2\bigr)
        \, \Theta(t - 1.1)

is active in a disk after time 1.1. The initial conditions are
:math:`u(x, y, 0) = 22 [y(1 - y)]^{3/2}` and
:math:`v(x, y, 0) = 27 [x(1 - x)]^{3/2}` and both fields are periodic in :math:`x`
and :math:`y`.

.. autosummary::
   :nosignatures:

   brusselator_forcing
   make_brusselator
   register_brusselator

.. codeauthor:: David Zwicker <david.zwicker@ds.mpg.de>
"""

from __future__ import annotations

import logging

from ..domains import initial_condition, interval, periodic_conditions
from ..domains.conditions import Equation
from ..symbolic import (
    Expression,
    derivative,
    dependent,
    independent_variables,
    laplacian,
)
from ..systems.base import PDESystem, build_system
from ..systems.registry import SystemRegistry, register
from ..tools.docstrings import fill_in_docstring
from ..tools.typing import ExpressionLike

_logger = logging.getLogger(__name__)
""":class:`logging.Logger`: Logger instance."""

DESCRIPTION = """
A 2D version of the Brusselator equation, which is a model for the formation of a
pattern in a chemical reaction. The reaction is between two chemicals, A and B, which
are produced and consumed by the reaction. The reaction is autocatalytic, meaning that
the production of A and B is dependent on the concentration of A and B. The reaction
is also bistable, meaning that there are two stable states for the system. The system
is initialized with a small perturbation in the concentration of A, which causes the
system to evolve. The system is then perturbed again, eventually forming a bistable
state. The boundary conditions are periodic in both x and y.
""".strip()


def brusselator_forcing(
    x: ExpressionLike, y: ExpressionLike, t: ExpressionLike
) -> Expression:
    """Return the forcing term of the Brusselator.

    The forcing has the strength 5 inside a disk of radius 0.1 around the point
    (0.3, 0.6) after the time 1.1 and vanishes otherwise. The indicator functions are
    expressed by multiplying comparisons, so nothing is evaluated here.
    """
    disk = ((x - 0.3) ** 2 + (y - 0.6) ** 2) <= 0.1**2
    return disk * (t >= 1.1) * 5.0


def make_brusselator(
    alpha: float = 10.0,
    *,
    x_bounds: tuple[float, float] = (0.0, 1.0),
    y_bounds: tuple[float, float] = (0.0, 1.0),
    t_bounds: tuple[float, float] = (0.0, 11.5),
    name: str = "bruss",
) -> PDESystem:
    """Build the symbolic Brusselator system without registering it.

    Args:
        alpha (float):
            The diffusivity of both species
        x_bounds (tuple):
            The extent of the domain in :math:`x`
        y_bounds (tuple):
            The extent of the domain in :math:`y`
        t_bounds (tuple):
            The simulated time interval
        name (str):
            The name of the system

    Returns:
        :class:`~pdesys.systems.base.PDESystem`: The Brusselator
    """
    x, y, t = independent_variables("x y t")
    u = dependent("u", x, y, t)
    v = dependent("v", x, y, t)
    Dt = derivative(t)

    domains = {
        "x": interval(x, *x_bounds),
        "y": interval(y, *y_bounds),
        "t": interval(t, *t_bounds),
    }

    equations = [
        Equation(
            Dt(u()),
            1.0
            + v() * u() ** 2
            - 4.4 * u()
            + alpha * laplacian(u(), [x, y])
            + brusselator_forcing(x, y, t),
        ),
        Equation(
            Dt(v()),
            3.4 * u() - v() * u() ** 2 + alpha * laplacian(v(), [x, y]),
        ),
    ]

    t_min = domains["t"].min
    u0 = 22 * (y * (1 - y)) ** (3 / 2)
    v0 = 27 * (x * (1 - x)) ** (3 / 2)
    boundary_conditions = [
        initial_condition(u, u0, t, at=t_min),
        *periodic_conditions([u], domains, [x, y]),
        initial_condition(v, v0, t, at=t_min),
        *periodic_conditions([v], domains, [x, y]),
    ]

    return build_system(
        name,
        equations,
        boundary_conditions,
        domains,
        [x, y, t],
        [u(), v()],
        time_variable="t",
        description=DESCRIPTION,
    )


@fill_in_docstring
def register_brusselator(registry: SystemRegistry | None = None) -> PDESystem:
    """Build the Brusselator and register it as a nonlinear system.

    Args:
        registry (:class:`~pdesys.systems.registry.SystemRegistry`):
            {ARG_REGISTRY}

    Returns:
        :class:`~pdesys.systems.base.PDESystem`: The registered system
    """
    system = make_brusselator()
    register(system, into=["all_systems", "nonlinear_systems"], registry=registry)
    _logger.debug("Brusselator summary: %s", system.summary())
    return system
