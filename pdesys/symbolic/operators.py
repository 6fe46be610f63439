"""Differential operators acting on symbolic expressions.

.. autosummary::
   :nosignatures:

   Differential
   derivative
   apply
   laplacian
   laplacian_terms

.. codeauthor:: David Zwicker <david.zwicker@ds.mpg.de>
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from ..tools.typing import ExpressionLike
from .expressions import BinaryOp, DerivativeApplication, Expression, as_expression
from .variables import Variable


@dataclass(frozen=True)
class Differential:
    """Partial derivative of given order with respect to an independent variable.

    Operators can be composed by multiplication, so `Dx * Dx` and `Dx**2` both yield
    the second derivative with respect to `x`. The composition is a single operator
    with a larger order and applying it creates a single expression node.
    """

    variable: Variable
    order: int = 1

    def __post_init__(self):
        if not isinstance(self.variable, Variable) or not self.variable.is_independent:
            raise ValueError(
                f"Derivatives can only be taken with respect to independent variables, "
                f"not `{self.variable}`"
            )
        if isinstance(self.order, bool) or not isinstance(self.order, int):
            raise TypeError(f"Order of derivative must be an integer, not {self.order}")
        if self.order < 1:
            raise ValueError(f"Order of derivative must be positive, not {self.order}")

    def __call__(self, expr: ExpressionLike) -> DerivativeApplication:
        """Apply the operator to an expression."""
        return apply(self, expr)

    def __mul__(self, other):
        if not isinstance(other, Differential):
            return NotImplemented
        if other.variable != self.variable:
            raise ValueError(
                "Only derivatives with respect to the same variable can be composed, "
                f"not `{self.variable.name}` and `{other.variable.name}`"
            )
        return Differential(self.variable, self.order + other.order)

    def __pow__(self, exponent: int) -> Differential:
        if isinstance(exponent, bool) or not isinstance(exponent, int):
            return NotImplemented
        if exponent < 1:
            raise ValueError(f"Exponent must be positive, not {exponent}")
        return Differential(self.variable, self.order * exponent)

    def __str__(self) -> str:
        name = self.variable.name
        if self.order == 1:
            return f"d/d{name}"
        return f"d^{self.order}/d{name}^{self.order}"


def derivative(variable: Variable, order: int = 1) -> Differential:
    """Create the operator of the partial derivative with respect to `variable`

    Args:
        variable (:class:`~pdesys.symbolic.variables.Variable`):
            The independent variable
        order (int):
            The order of the derivative

    Returns:
        :class:`Differential`: The differential operator
    """
    return Differential(variable, order)


def apply(operator: Differential, expr: ExpressionLike) -> DerivativeApplication:
    """Apply a differential operator to an expression.

    The operand is not modified and no derivative is evaluated.
    """
    if not isinstance(operator, Differential):
        raise TypeError(f"Expected a differential operator, not {operator!r}")
    return DerivativeApplication(operator, as_expression(expr))


def laplacian(
    expr: ExpressionLike, spatial_variables: Sequence[Variable]
) -> Expression:
    """Return the Laplacian of an expression.

    The result is the sum of the pure second derivatives with respect to all given
    spatial variables, so it contains exactly one term per variable.

    Args:
        expr:
            The expression whose Laplacian is taken
        spatial_variables (list):
            The spatial coordinates, e.g., `[x, y]`

    Returns:
        :class:`~pdesys.symbolic.expressions.Expression`: The Laplacian
    """
    if not spatial_variables:
        raise ValueError("Laplacian requires at least one spatial variable")
    names = [var.name for var in spatial_variables]
    if len(set(names)) != len(names):
        raise ValueError(f"Spatial variables {names} are not unique")

    terms = [apply(derivative(var, 2), expr) for var in spatial_variables]
    result: Expression = terms[0]
    for term in terms[1:]:
        result = result + term
    return result


def laplacian_terms(expr: Expression) -> list[Expression]:
    """Split a sum into its addends.

    This is the inverse of building a sum and thus allows inspecting the individual
    terms of a Laplacian created by :func:`laplacian`.
    """
    if isinstance(expr, BinaryOp) and expr.op == "add":
        return laplacian_terms(expr.left) + laplacian_terms(expr.right)
    return [expr]
