"""Symbolic equations and helpers for initial and boundary conditions.

Governing equations and conditions share the same representation: a pair of
expressions that are asserted to be equal. Conditions typically fix a dependent
variable at a coordinate, e.g., the initial condition `u(x, y, 0) ~ u0(x, y)` or the
periodic condition `u(0, y, t) ~ u(1, y, t)`.

.. autosummary::
   :nosignatures:

   Equation
   field_at
   initial_condition
   periodic_condition
   periodic_conditions
   classify_condition

.. codeauthor:: David Zwicker <david.zwicker@ds.mpg.de>
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING, Literal, NamedTuple

import sympy

from ..symbolic.expressions import Expression, FieldCall, as_expression
from ..symbolic.expressions import Literal as LiteralExpr
from ..symbolic.variables import Variable

if TYPE_CHECKING:
    from ..tools.typing import ExpressionLike
    from .intervals import Interval


@dataclass(frozen=True)
class Equation:
    """Symbolic equality `lhs ~ rhs` of two expressions."""

    lhs: Expression
    rhs: Expression

    def __post_init__(self):
        object.__setattr__(self, "lhs", as_expression(self.lhs))
        object.__setattr__(self, "rhs", as_expression(self.rhs))

    @property
    def sides(self) -> tuple[Expression, Expression]:
        """tuple: both sides of the equation"""
        return (self.lhs, self.rhs)

    def independent_variables(self) -> set[Variable]:
        """Return all independent variables referenced on either side."""
        return self.lhs.independent_variables() | self.rhs.independent_variables()

    def field_calls(self) -> list[FieldCall]:
        """Return all applications of fields on either side."""
        return self.lhs.field_calls() + self.rhs.field_calls()

    def parameters(self) -> set:
        """Return all parameters used on either side."""
        return self.lhs.parameters() | self.rhs.parameters()

    def substitute(self, mapping) -> Equation:
        """Apply replacements to both sides and return a new equation."""
        return Equation(self.lhs.substitute(mapping), self.rhs.substitute(mapping))

    def to_sympy(self) -> sympy.Eq:
        """Convert the equation to an unevaluated :class:`sympy.Eq`"""
        return sympy.Eq(
            self.lhs._sympy_value(), self.rhs._sympy_value(), evaluate=False
        )

    def __str__(self) -> str:
        return f"{self.lhs} ~ {self.rhs}"


def field_at(field: Variable, **coordinates: ExpressionLike) -> FieldCall:
    """Apply a dependent variable with some of its arguments fixed.

    Example:
        For `u = dependent("u", x, y, t)`, the call `field_at(u, t=0)` returns the
        expression `u(x, y, 0)`.

    Args:
        field (:class:`~pdesys.symbolic.variables.Variable`):
            The dependent variable
        **coordinates:
            Values for the independent variables that should be fixed

    Returns:
        :class:`~pdesys.symbolic.expressions.FieldCall`: The applied field
    """
    if not field.is_dependent:
        raise ValueError(f"`{field.name}` is not a dependent variable")
    unknown = set(coordinates) - set(field.signature)
    if unknown:
        raise ValueError(
            f"Field `{field}` does not depend on {sorted(unknown)}"
        )
    args = [coordinates.get(arg.name, arg) for arg in field.arguments]
    return field(*args)


def initial_condition(
    field: Variable, profile: ExpressionLike, time: Variable, at: float
) -> Equation:
    """Create the initial condition `field(..., t=at) ~ profile`

    Args:
        field (:class:`~pdesys.symbolic.variables.Variable`):
            The dependent variable
        profile:
            The initial profile, which typically depends on spatial coordinates
        time (:class:`~pdesys.symbolic.variables.Variable`):
            The time variable
        at (float):
            The initial time, usually the lower bound of the time domain

    Returns:
        :class:`Equation`: The initial condition
    """
    return Equation(field_at(field, **{time.name: at}), as_expression(profile))


def periodic_condition(field: Variable, domain: Interval) -> Equation:
    """Create the condition that `field` is periodic in the variable of `domain`

    Args:
        field (:class:`~pdesys.symbolic.variables.Variable`):
            The dependent variable
        domain (:class:`~pdesys.domains.intervals.Interval`):
            The domain of the periodic coordinate

    Returns:
        :class:`Equation`: The condition equating the value at the lower edge to the
        value at the upper edge
    """
    name = domain.variable.name
    lower = field_at(field, **{name: domain.min})
    upper = field_at(field, **{name: domain.max})
    return Equation(lower, upper)


def periodic_conditions(
    fields: Sequence[Variable],
    domains: Mapping[str, Interval],
    spatial_variables: Sequence[Variable],
) -> list[Equation]:
    """Create periodic conditions for several fields and spatial variables.

    Args:
        fields (list):
            The dependent variables
        domains (dict):
            The domains of the variables identified by their names
        spatial_variables (list):
            The coordinates along which all fields are periodic

    Returns:
        list: The conditions ordered by field first and by variable second
    """
    return [
        periodic_condition(field, domains[var.name])
        for field in fields
        for var in spatial_variables
    ]


class ConditionInfo(NamedTuple):
    """Information about the role of a condition."""

    kind: Literal["initial", "periodic", "boundary"]
    field: Variable | None
    variable: str | None = None
    side: Literal["lower", "upper"] | None = None


def _literal_at(expr: Expression, value: float) -> bool:
    """Check whether `expr` is a numeric literal equal to `value`"""
    return isinstance(expr, LiteralExpr) and expr.value == value


def classify_condition(
    equation: Equation, time_variable: str, domains: Mapping[str, Interval]
) -> ConditionInfo:
    """Determine which role a condition plays in a PDE system.

    Initial conditions fix the time variable of a field to the lower end of its
    domain. Periodic conditions equate a field at the lower edge of a spatial domain
    with the same field at the upper edge. All other conditions are classified as
    general boundary conditions. If such a condition fixes a single spatial
    coordinate at one edge of its domain, the variable and the side are reported.

    Args:
        equation (:class:`Equation`):
            The condition
        time_variable (str):
            Name of the time variable
        domains (dict):
            The domains of the variables identified by their names

    Returns:
        :class:`ConditionInfo`: Details about the condition
    """
    lhs, rhs = equation.lhs, equation.rhs
    if not isinstance(lhs, FieldCall):
        return ConditionInfo("boundary", None)
    fixed_lhs = lhs.fixed_arguments()
    if len(fixed_lhs) != 1:
        return ConditionInfo("boundary", lhs.variable)

    name, value = next(iter(fixed_lhs.items()))
    domain = domains.get(name)
    if domain is None:
        return ConditionInfo("boundary", lhs.variable)

    if name == time_variable:
        if _literal_at(value, domain.min):
            return ConditionInfo("initial", lhs.variable, name)
        return ConditionInfo("boundary", lhs.variable)

    if isinstance(rhs, FieldCall) and rhs.variable == lhs.variable:
        fixed_rhs = rhs.fixed_arguments()
        if list(fixed_rhs) == [name]:
            for lower, upper in [(domain.min, domain.max), (domain.max, domain.min)]:
                if _literal_at(value, lower) and _literal_at(fixed_rhs[name], upper):
                    return ConditionInfo("periodic", lhs.variable, name)

    if _literal_at(value, domain.min):
        return ConditionInfo("boundary", lhs.variable, name, "lower")
    if _literal_at(value, domain.max):
        return ConditionInfo("boundary", lhs.variable, name, "upper")
    return ConditionInfo("boundary", lhs.variable)
