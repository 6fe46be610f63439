"""Immutable expression trees describing the terms of PDE systems.

Expressions are pure data: building them with the usual python operators never
evaluates or simplifies anything. The tree consists of a closed set of node types,
which can be inspected by downstream tools or converted to :mod:`sympy` objects using
:meth:`Expression.to_sympy`.

Comparisons create boolean-valued nodes, which can be multiplied with arithmetic
expressions. In such products, a comparison evaluates to one when it holds and to zero
otherwise, which allows expressing indicator functions and piecewise terms.

.. autosummary::
   :nosignatures:

   Expression
   Literal
   VariableRef
   ParameterRef
   FieldCall
   UnaryOp
   BinaryOp
   Comparison
   DerivativeApplication
   as_expression

.. codeauthor:: David Zwicker <david.zwicker@ds.mpg.de>
"""

from __future__ import annotations

import logging
import numbers
from abc import ABCMeta, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Callable, Iterator

import numpy as np
import sympy

from .. import config
from .variables import Parameter, Variable

if TYPE_CHECKING:
    from collections.abc import Mapping

    from ..tools.typing import ExpressionLike
    from .operators import Differential


_logger = logging.getLogger(__name__)
""":class:`logging.Logger`: Logger instance."""

# binding strength of the operators, which determines where parentheses are needed
_PRECEDENCE = {
    "eq": 1,
    "le": 2,
    "ge": 2,
    "lt": 2,
    "gt": 2,
    "add": 10,
    "sub": 10,
    "mul": 20,
    "div": 20,
    "neg": 25,
    "pow": 30,
}
_ATOM_PRECEDENCE = 100

_BINARY_SYMBOLS = {"add": "+", "sub": "-", "mul": "*", "div": "/", "pow": "^"}
_COMPARISON_SYMBOLS = {"le": "<=", "ge": ">=", "lt": "<", "gt": ">", "eq": "=="}
_SYMPY_RELATIONALS = {
    "le": sympy.Le,
    "ge": sympy.Ge,
    "lt": sympy.Lt,
    "gt": sympy.Gt,
    "eq": sympy.Eq,
}


def as_expression(value: ExpressionLike) -> Expression:
    """Convert a value into an :class:`Expression`

    Args:
        value:
            A number, a :class:`~pdesys.symbolic.variables.Variable`, a
            :class:`~pdesys.symbolic.variables.Parameter`, or an expression

    Returns:
        :class:`Expression`: The expression representing the value
    """
    if isinstance(value, Expression):
        return value
    if isinstance(value, (Variable, Parameter)):
        return value.as_expression()
    if isinstance(value, (bool, np.bool_)):
        raise TypeError("Boolean values cannot be used as literals; use 0 or 1")
    if isinstance(value, numbers.Real):
        if isinstance(value, numbers.Integral):
            return Literal(int(value))
        return Literal(float(value))
    raise TypeError(f"Cannot convert {value!r} of type {type(value)} to expression")


def _coerce(value) -> Expression | None:
    """Helper returning `None` for values that cannot be converted."""
    try:
        return as_expression(value)
    except TypeError:
        return None


class Expression(metaclass=ABCMeta):
    """Abstract base class of all nodes of an expression tree."""

    is_boolean: bool = False
    """bool: whether the node describes a truth value instead of a number"""

    @property
    @abstractmethod
    def children(self) -> tuple[Expression, ...]:
        """tuple: the direct sub-expressions of this node"""

    @abstractmethod
    def map_children(self, func: Callable[[Expression], Expression]) -> Expression:
        """Create a copy of this node with `func` applied to all children."""

    @abstractmethod
    def _sympy(self) -> sympy.Basic:
        """Convert the node to a sympy object."""

    @property
    def precedence(self) -> int:
        """int: binding strength used to place parentheses in text output"""
        return _ATOM_PRECEDENCE

    def walk(self) -> Iterator[Expression]:
        """Iterate over all nodes of the tree in pre-order."""
        yield self
        for child in self.children:
            yield from child.walk()

    def independent_variables(self) -> set[Variable]:
        """Return all independent variables referenced in the expression.

        This includes variables appearing explicitly, as arguments of fields, or as
        the variable of a derivative.
        """
        result: set[Variable] = set()
        for node in self.walk():
            if isinstance(node, VariableRef):
                result.add(node.variable)
            elif isinstance(node, DerivativeApplication):
                result.add(node.operator.variable)
        return result

    def dependent_variables(self) -> set[Variable]:
        """Return all dependent variables (fields) used in the expression."""
        return {call.variable for call in self.field_calls()}

    def parameters(self) -> set[Parameter]:
        """Return all parameters used in the expression."""
        return {
            node.parameter for node in self.walk() if isinstance(node, ParameterRef)
        }

    def field_calls(self) -> list[FieldCall]:
        """Return all applications of fields in the order they appear."""
        return [node for node in self.walk() if isinstance(node, FieldCall)]

    def derivatives(self) -> list[DerivativeApplication]:
        """Return all derivative applications in the order they appear."""
        return [node for node in self.walk() if isinstance(node, DerivativeApplication)]

    def substitute(self, mapping: Mapping[Any, ExpressionLike]) -> Expression:
        """Replace sub-expressions and return a new expression.

        Args:
            mapping (dict):
                Maps the sub-expressions that should be replaced to their replacements.
                Keys may also be variables or parameters.

        Returns:
            :class:`Expression`: The expression with all replacements applied
        """
        repl = {as_expression(k): as_expression(v) for k, v in mapping.items()}

        def replace(node: Expression) -> Expression:
            if node in repl:
                return repl[node]
            return node.map_children(replace)

        return replace(self)

    def to_sympy(self) -> sympy.Basic:
        """Convert the expression to a :mod:`sympy` object.

        The conversion does not simplify the expression. Independent variables and
        parameters become symbols, fields become applied undefined functions, and
        derivatives are represented by :class:`sympy.Derivative`.
        """
        return self._sympy()

    def _sympy_value(self) -> sympy.Basic:
        """Convert the node to a sympy object usable in arithmetic."""
        return self._sympy()

    def get_function(
        self, *args: Variable | Parameter, modules: str | None = None
    ) -> Callable[..., Any]:
        """Return a function evaluating the expression numerically.

        Args:
            *args:
                The variables and parameters that are passed to the function in the
                given order. All symbols of the expression need to be listed.
            modules (str):
                Modules used by :func:`sympy.lambdify`. If omitted, the value of the
                configuration `expressions.lambdify_modules` is used.

        Returns:
            callable: The function
        """
        if self.derivatives() or self.field_calls():
            raise ValueError(
                f"Cannot create a numerical function for `{self}`, since it contains "
                "fields or derivatives"
            )
        names = {arg.name for arg in args}
        symbols = {var.name for var in self.independent_variables()}
        symbols |= {par.name for par in self.parameters()}
        missing = symbols - names
        if missing:
            raise ValueError(f"Symbols {sorted(missing)} are not given in arguments")

        if modules is None:
            modules = config["expressions.lambdify_modules"]
        _logger.debug("Create function for `%s` using `%s`", self, modules)
        arg_symbols = [sympy.Symbol(arg.name) for arg in args]
        return sympy.lambdify(arg_symbols, self._sympy_value(), modules=modules)

    def _format_child(self, child: Expression, right: bool = False) -> str:
        """Format a child node, adding parentheses where necessary."""
        text = str(child)
        if child.precedence < self.precedence or (
            right and child.precedence == self.precedence
        ):
            return f"({text})"
        return text

    # operators creating new expressions
    def __add__(self, other):
        other = _coerce(other)
        return NotImplemented if other is None else BinaryOp("add", self, other)

    def __radd__(self, other):
        other = _coerce(other)
        return NotImplemented if other is None else BinaryOp("add", other, self)

    def __sub__(self, other):
        other = _coerce(other)
        return NotImplemented if other is None else BinaryOp("sub", self, other)

    def __rsub__(self, other):
        other = _coerce(other)
        return NotImplemented if other is None else BinaryOp("sub", other, self)

    def __mul__(self, other):
        other = _coerce(other)
        return NotImplemented if other is None else BinaryOp("mul", self, other)

    def __rmul__(self, other):
        other = _coerce(other)
        return NotImplemented if other is None else BinaryOp("mul", other, self)

    def __truediv__(self, other):
        other = _coerce(other)
        return NotImplemented if other is None else BinaryOp("div", self, other)

    def __rtruediv__(self, other):
        other = _coerce(other)
        return NotImplemented if other is None else BinaryOp("div", other, self)

    def __pow__(self, other):
        other = _coerce(other)
        return NotImplemented if other is None else BinaryOp("pow", self, other)

    def __rpow__(self, other):
        other = _coerce(other)
        return NotImplemented if other is None else BinaryOp("pow", other, self)

    def __neg__(self):
        return UnaryOp("neg", self)

    def __pos__(self):
        return self

    def __le__(self, other):
        other = _coerce(other)
        return NotImplemented if other is None else Comparison("le", self, other)

    def __ge__(self, other):
        other = _coerce(other)
        return NotImplemented if other is None else Comparison("ge", self, other)

    def __lt__(self, other):
        other = _coerce(other)
        return NotImplemented if other is None else Comparison("lt", self, other)

    def __gt__(self, other):
        other = _coerce(other)
        return NotImplemented if other is None else Comparison("gt", self, other)

    def equals(self, other: ExpressionLike) -> Comparison:
        """Create the comparison `self == other`

        The python operator `==` compares the structure of two expressions instead.
        """
        return Comparison("eq", self, as_expression(other))


@dataclass(frozen=True)
class Literal(Expression):
    """A numeric constant."""

    value: int | float

    @property
    def children(self) -> tuple[Expression, ...]:
        return ()

    def map_children(self, func):
        return self

    def _sympy(self):
        if isinstance(self.value, int):
            return sympy.Integer(self.value)
        return sympy.Float(self.value)

    def __str__(self) -> str:
        if isinstance(self.value, int):
            return str(self.value)
        text = format(self.value, f".{config['expressions.float_precision']}g")
        if "." not in text and "e" not in text and "n" not in text:
            text += ".0"  # mark floating point numbers
        return text

    @property
    def precedence(self) -> int:
        # negative numbers need to be protected like a negation
        return _PRECEDENCE["neg"] if self.value < 0 else _ATOM_PRECEDENCE


@dataclass(frozen=True)
class VariableRef(Expression):
    """Reference to an independent variable."""

    variable: Variable

    def __post_init__(self):
        if not self.variable.is_independent:
            raise ValueError(
                f"Dependent variable `{self.variable.name}` must be applied to "
                "arguments"
            )

    @property
    def children(self) -> tuple[Expression, ...]:
        return ()

    def map_children(self, func):
        return self

    def _sympy(self):
        return sympy.Symbol(self.variable.name)

    def __str__(self) -> str:
        return self.variable.name


@dataclass(frozen=True)
class ParameterRef(Expression):
    """Reference to a named parameter."""

    parameter: Parameter

    @property
    def children(self) -> tuple[Expression, ...]:
        return ()

    def map_children(self, func):
        return self

    def _sympy(self):
        return sympy.Symbol(self.parameter.name)

    def __str__(self) -> str:
        return self.parameter.name


@dataclass(frozen=True)
class FieldCall(Expression):
    """A dependent variable evaluated at the given arguments.

    The arguments are expressions, so `u(x, y, t)` denotes the field in the bulk of
    the domain, while `u(0, y, t)` denotes its value at the boundary `x = 0`.
    """

    variable: Variable
    arguments: tuple[Expression, ...]

    def __post_init__(self):
        if not self.variable.is_dependent:
            raise ValueError(f"`{self.variable.name}` is not a dependent variable")
        object.__setattr__(self, "arguments", tuple(self.arguments))

    @property
    def children(self) -> tuple[Expression, ...]:
        return self.arguments

    def map_children(self, func):
        return FieldCall(self.variable, tuple(func(arg) for arg in self.arguments))

    @property
    def is_bulk(self) -> bool:
        """bool: whether the field is applied to exactly its declared signature"""
        return self.arguments == tuple(
            VariableRef(arg) for arg in self.variable.arguments
        )

    def fixed_arguments(self) -> dict[str, Expression]:
        """Return the arguments that deviate from the declared signature.

        Returns:
            dict: Maps the name of the declared independent variable to the
            expression that is used in its place
        """
        return {
            declared.name: arg
            for declared, arg in zip(self.variable.arguments, self.arguments)
            if arg != VariableRef(declared)
        }

    def _sympy(self):
        func = sympy.Function(self.variable.name)
        return func(*(arg._sympy_value() for arg in self.arguments))

    def __str__(self) -> str:
        return f"{self.variable.name}({', '.join(str(a) for a in self.arguments)})"


@dataclass(frozen=True)
class UnaryOp(Expression):
    """Unary operation, which currently only supports negation."""

    op: str
    operand: Expression

    def __post_init__(self):
        if self.op != "neg":
            raise ValueError(f"Unsupported unary operator `{self.op}`")

    @property
    def children(self) -> tuple[Expression, ...]:
        return (self.operand,)

    def map_children(self, func):
        return UnaryOp(self.op, func(self.operand))

    @property
    def precedence(self) -> int:
        return _PRECEDENCE[self.op]

    def _sympy(self):
        return sympy.Mul(sympy.Integer(-1), self.operand._sympy_value(), evaluate=False)

    def __str__(self) -> str:
        return f"-{self._format_child(self.operand, right=True)}"


@dataclass(frozen=True)
class BinaryOp(Expression):
    """Arithmetic operation combining two expressions."""

    op: str
    left: Expression
    right: Expression

    def __post_init__(self):
        if self.op not in _BINARY_SYMBOLS:
            raise ValueError(f"Unsupported binary operator `{self.op}`")

    @property
    def children(self) -> tuple[Expression, ...]:
        return (self.left, self.right)

    def map_children(self, func):
        return BinaryOp(self.op, func(self.left), func(self.right))

    @property
    def precedence(self) -> int:
        return _PRECEDENCE[self.op]

    def _sympy(self):
        left, right = self.left._sympy_value(), self.right._sympy_value()
        if self.op == "add":
            return sympy.Add(left, right, evaluate=False)
        elif self.op == "sub":
            neg = sympy.Mul(sympy.Integer(-1), right, evaluate=False)
            return sympy.Add(left, neg, evaluate=False)
        elif self.op == "mul":
            return sympy.Mul(left, right, evaluate=False)
        elif self.op == "div":
            inv = sympy.Pow(right, sympy.Integer(-1), evaluate=False)
            return sympy.Mul(left, inv, evaluate=False)
        else:
            return sympy.Pow(left, right, evaluate=False)

    def __str__(self) -> str:
        if self.op == "pow":
            # exponentiation is right-associative
            left = self.left
            text_left = str(left)
            if left.precedence <= self.precedence:
                text_left = f"({text_left})"
            return f"{text_left}^{self._format_child(self.right)}"
        left = self._format_child(self.left)
        right = self._format_child(self.right, right=self.op in {"sub", "div"})
        return f"{left} {_BINARY_SYMBOLS[self.op]} {right}"


@dataclass(frozen=True)
class Comparison(Expression):
    """Boolean-valued comparison of two expressions.

    Used inside arithmetic, the comparison acts as an indicator function that is one
    when the comparison holds and zero otherwise.
    """

    op: str
    left: Expression
    right: Expression

    is_boolean = True

    def __post_init__(self):
        if self.op not in _COMPARISON_SYMBOLS:
            raise ValueError(f"Unsupported comparison `{self.op}`")

    def __bool__(self):
        raise TypeError(
            f"The truth value of the symbolic comparison `{self}` is not defined"
        )

    @property
    def children(self) -> tuple[Expression, ...]:
        return (self.left, self.right)

    def map_children(self, func):
        return Comparison(self.op, func(self.left), func(self.right))

    @property
    def precedence(self) -> int:
        return _PRECEDENCE[self.op]

    def _sympy(self):
        relational = _SYMPY_RELATIONALS[self.op]
        return relational(
            self.left._sympy_value(), self.right._sympy_value(), evaluate=False
        )

    def _sympy_value(self):
        return sympy.Piecewise((sympy.Integer(1), self._sympy()), (0, True))

    def __str__(self) -> str:
        left = self._format_child(self.left)
        right = self._format_child(self.right, right=True)
        return f"{left} {_COMPARISON_SYMBOLS[self.op]} {right}"


@dataclass(frozen=True)
class DerivativeApplication(Expression):
    """A differential operator applied to an expression.

    The node carries the order of the derivative explicitly, so a second derivative
    is a single node instead of two nested first derivatives.
    """

    operator: Differential
    operand: Expression

    @property
    def children(self) -> tuple[Expression, ...]:
        return (self.operand,)

    def map_children(self, func):
        return DerivativeApplication(self.operator, func(self.operand))

    @property
    def variable(self) -> Variable:
        """:class:`~pdesys.symbolic.variables.Variable`: variable of the derivative"""
        return self.operator.variable

    @property
    def order(self) -> int:
        """int: order of the derivative"""
        return self.operator.order

    def _sympy(self):
        symbol = sympy.Symbol(self.operator.variable.name)
        return sympy.Derivative(
            self.operand._sympy_value(), (symbol, self.operator.order)
        )

    def __str__(self) -> str:
        return f"{self.operator}({self.operand})"
