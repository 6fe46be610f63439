"""Named symbols appearing in PDE systems.

Independent variables (coordinates like `x` or `t`) carry no arguments, while
dependent variables (the fields) are declared as functions of independent variables.
Parameters are free named constants.

.. autosummary::
   :nosignatures:

   Variable
   Parameter
   independent
   independent_variables
   dependent
   parameters

.. codeauthor:: David Zwicker <david.zwicker@ds.mpg.de>
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ..tools.typing import ExpressionLike
    from .expressions import Comparison, Expression, FieldCall


class SymbolArithmetic:
    """Mixin forwarding python operators to the expression of a symbol.

    Subclasses provide :meth:`as_expression`, so arithmetic and comparisons on
    symbols build the same expression trees as on expressions.
    """

    def as_expression(self) -> Expression:
        """Return the expression representing this symbol."""
        raise NotImplementedError

    def __add__(self, other):
        return self.as_expression() + other

    def __radd__(self, other):
        return other + self.as_expression()

    def __sub__(self, other):
        return self.as_expression() - other

    def __rsub__(self, other):
        return other - self.as_expression()

    def __mul__(self, other):
        return self.as_expression() * other

    def __rmul__(self, other):
        return other * self.as_expression()

    def __truediv__(self, other):
        return self.as_expression() / other

    def __rtruediv__(self, other):
        return other / self.as_expression()

    def __pow__(self, other):
        return self.as_expression() ** other

    def __rpow__(self, other):
        return other ** self.as_expression()

    def __neg__(self):
        return -self.as_expression()

    def __le__(self, other):
        return self.as_expression() <= other

    def __ge__(self, other):
        return self.as_expression() >= other

    def __lt__(self, other):
        return self.as_expression() < other

    def __gt__(self, other):
        return self.as_expression() > other

    def equals(self, other: ExpressionLike) -> Comparison:
        """Create the comparison `self == other`

        The python operator `==` compares the symbols themselves instead.
        """
        return self.as_expression().equals(other)


def _check_name(name: str) -> str:
    """Ensure that `name` can be used as a symbol name."""
    if not isinstance(name, str) or not name.isidentifier():
        raise ValueError(f"`{name}` is not a valid symbol name")
    return name


@dataclass(frozen=True)
class Variable(SymbolArithmetic):
    """A named variable of a PDE system.

    A variable without `arguments` is an independent variable, e.g., a spatial
    coordinate or time. A variable with arguments is a dependent variable, i.e., a
    field that is a function of the independent variables listed in `arguments`.
    """

    name: str
    arguments: tuple[Variable, ...] = ()

    def __post_init__(self):
        _check_name(self.name)
        object.__setattr__(self, "arguments", tuple(self.arguments))
        for arg in self.arguments:
            if not isinstance(arg, Variable) or not arg.is_independent:
                raise ValueError(
                    f"Dependent variable `{self.name}` can only depend on independent "
                    f"variables, not on `{arg}`"
                )
        names = [arg.name for arg in self.arguments]
        if len(set(names)) != len(names):
            raise ValueError(f"Arguments of `{self.name}` are not unique: {names}")

    @property
    def is_independent(self) -> bool:
        """bool: whether this is an independent variable"""
        return not self.arguments

    @property
    def is_dependent(self) -> bool:
        """bool: whether this variable is a field depending on other variables"""
        return bool(self.arguments)

    @property
    def signature(self) -> tuple[str, ...]:
        """tuple: names of the independent variables this variable depends on"""
        return tuple(arg.name for arg in self.arguments)

    def __str__(self) -> str:
        if self.is_dependent:
            return f"{self.name}({', '.join(self.signature)})"
        return self.name

    def __call__(self, *args) -> FieldCall:
        """Apply a dependent variable to arguments.

        Calling the field without arguments applies it to its declared signature,
        i.e., `u()` is equivalent to `u(x, y, t)` for `u = dependent("u", x, y, t)`.
        Numbers are accepted to denote a fixed coordinate, e.g., `u(0, y, t)`.
        """
        from .expressions import FieldCall, as_expression

        if self.is_independent:
            raise TypeError(f"Independent variable `{self.name}` cannot be called")
        if not args:
            args = self.arguments
        return FieldCall(self, tuple(as_expression(arg) for arg in args))

    def as_expression(self) -> Expression:
        """Return the expression representing this variable.

        Dependent variables are applied to their full signature.
        """
        from .expressions import VariableRef

        if self.is_dependent:
            return self()
        return VariableRef(self)


@dataclass(frozen=True)
class Parameter(SymbolArithmetic):
    """A named constant, optionally carrying a default value."""

    name: str
    default: float | None = None

    def __post_init__(self):
        _check_name(self.name)

    def __str__(self) -> str:
        return self.name

    def as_expression(self) -> Expression:
        """Return the expression referring to this parameter."""
        from .expressions import ParameterRef

        return ParameterRef(self)


def independent(name: str) -> Variable:
    """Create an independent variable, e.g., a coordinate."""
    return Variable(name)


def independent_variables(names: str) -> tuple[Variable, ...]:
    """Create several independent variables at once.

    Args:
        names (str):
            Names of the variables separated by whitespace or commas, e.g. `"x y t"`

    Returns:
        tuple: The independent variables in the given order
    """
    return tuple(Variable(name) for name in names.replace(",", " ").split())


def dependent(name: str, *arguments: Variable) -> Variable:
    """Create a dependent variable (a field) depending on `arguments`

    Args:
        name (str):
            Name of the field
        *arguments (:class:`Variable`):
            The independent variables the field depends on

    Returns:
        :class:`Variable`: The dependent variable
    """
    if not arguments:
        raise ValueError(f"Dependent variable `{name}` needs at least one argument")
    return Variable(name, tuple(arguments))


def parameters(**defaults: float | None) -> tuple[Parameter, ...]:
    """Create parameters from keyword arguments mapping names to default values."""
    return tuple(Parameter(name, value) for name, value in defaults.items())
