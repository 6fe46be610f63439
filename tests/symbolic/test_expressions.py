"""
.. codeauthor:: David Zwicker <david.zwicker@ds.mpg.de>
"""

import dataclasses

import numpy as np
import pytest
import sympy

from pdesys import config
from pdesys.symbolic import (
    BinaryOp,
    Comparison,
    Literal,
    Parameter,
    ParameterRef,
    UnaryOp,
    VariableRef,
    as_expression,
    derivative,
)


def test_as_expression(variables):
    """Test converting values to expressions."""
    x, y, t, u, v = variables
    assert as_expression(2) == Literal(2)
    assert isinstance(as_expression(2).value, int)
    assert as_expression(np.float64(2.5)) == Literal(2.5)
    assert as_expression(x) == VariableRef(x)
    assert as_expression(u) == u()
    assert as_expression(Parameter("a")) == ParameterRef(Parameter("a"))

    expr = x + 1
    assert as_expression(expr) is expr

    for value in [True, "x", None, 1j]:
        with pytest.raises(TypeError):
            as_expression(value)


def test_building_expressions(variables):
    """Test that operators build trees without evaluating them."""
    x, y, t, u, v = variables

    expr = x + 1
    assert expr == BinaryOp("add", VariableRef(x), Literal(1))
    assert 2 - x == BinaryOp("sub", Literal(2), VariableRef(x))
    assert x / y == BinaryOp("div", VariableRef(x), VariableRef(y))
    assert 2**x == BinaryOp("pow", Literal(2), VariableRef(x))
    assert -x == UnaryOp("neg", VariableRef(x))

    # literals are not combined
    summed = Literal(1) + Literal(2)
    assert isinstance(summed, BinaryOp)
    assert summed.children == (Literal(1), Literal(2))

    # expressions are immutable
    with pytest.raises(dataclasses.FrozenInstanceError):
        expr.op = "sub"
    with pytest.raises(ValueError):
        BinaryOp("mod", Literal(1), Literal(2))
    with pytest.raises(ValueError):
        UnaryOp("abs", Literal(1))
    with pytest.raises(ValueError):
        VariableRef(u)


def test_comparisons(variables):
    """Test boolean-valued expressions."""
    x, y, t, u, v = variables

    cond = x <= 0.5
    assert cond == Comparison("le", VariableRef(x), Literal(0.5))
    assert cond.is_boolean
    assert not (x + 1).is_boolean
    assert (1 <= x) == Comparison("ge", VariableRef(x), Literal(1))
    assert (x > y).op == "gt"
    assert (x < y).op == "lt"
    assert x.as_expression().equals(1).op == "eq"

    with pytest.raises(TypeError):
        bool(cond)

    # comparisons act as indicator functions in arithmetic
    indicator = (x <= 0.5) * (t >= 1) * 3.0
    assert isinstance(indicator, BinaryOp)
    comparisons = [node for node in indicator.walk() if node.is_boolean]
    assert len(comparisons) == 2


def test_expression_text(variables):
    """Test converting expressions to text."""
    x, y, t, u, v = variables
    assert str(x + 2 * y) == "x + 2 * y"
    assert str((x + 1) * y) == "(x + 1) * y"
    assert str(x - (y - 1)) == "x - (y - 1)"
    assert str(x - y - 1) == "x - y - 1"
    assert str(x / (y * 2)) == "x / (y * 2)"
    assert str(-x) == "-x"
    assert str(-(x + y)) == "-(x + y)"
    assert str(-(-x)) == "-(-x)"
    assert str(-Literal(-1)) == "-(-1)"
    assert str((x - 0.3) ** 2) == "(x - 0.3)^2"
    assert str(x**2) == "x^2"
    assert str(x <= 0.5) == "x <= 0.5"
    assert str(Literal(1.0)) == "1.0"
    assert str(Literal(0.1**2)) == "0.01"
    assert str(u() * v()) == "u(x, y, t) * v(x, y, t)"
    assert str(derivative(t)(u())) == "d/dt(u(x, y, t))"

    with config({"expressions.float_precision": 3}):
        assert str(Literal(3.14159)) == "3.14"
    assert str(Literal(3.14159)) == "3.14159"


def test_inspection(variables):
    """Test inspecting the symbols of expressions."""
    x, y, t, u, v = variables
    a = Parameter("a")

    expr = a * u() + derivative(x, 2)(v(0, y, t)) + x
    assert expr.independent_variables() == {x, y, t}
    assert expr.dependent_variables() == {u, v}
    assert expr.parameters() == {a}
    assert [str(call) for call in expr.field_calls()] == [
        "u(x, y, t)",
        "v(0, y, t)",
    ]
    assert len(expr.derivatives()) == 1
    assert next(expr.walk()) is expr

    assert (y + 1).independent_variables() == {y}
    assert Literal(1).independent_variables() == set()


def test_substitute(variables):
    """Test replacing parts of expressions."""
    x, y, t, u, v = variables
    a = Parameter("a", 2.0)

    expr = a * x + u()
    replaced = expr.substitute({a: 2.0})
    assert replaced == Literal(2.0) * x + u()
    assert expr.parameters() == {a}  # the original is unchanged

    shifted = u().substitute({x: 0})
    assert shifted == u(0, y, t)


def test_to_sympy(variables):
    """Test converting expressions to sympy."""
    x, y, t, u, v = variables
    X, Y = sympy.symbols("x y")

    assert sympy.simplify((x + 1).to_sympy() - (X + 1)) == 0
    assert sympy.simplify((x - y / 2).to_sympy() - (X - Y / 2)) == 0
    assert sympy.simplify((-(x**2)).to_sympy() + X**2) == 0

    rel = (x <= 1).to_sympy()
    assert isinstance(rel, sympy.LessThan)

    call = u().to_sympy()
    assert call == sympy.Function("u")(X, Y, sympy.Symbol("t"))

    # comparisons in arithmetic become piecewise functions
    indicator = ((x <= 1) * 2).to_sympy()
    assert indicator.atoms(sympy.Piecewise)
    assert indicator.subs(X, 0.5) == 2
    assert indicator.subs(X, 1.5) == 0


def test_get_function(variables):
    """Test creating numerical functions from expressions."""
    x, y, t, u, v = variables
    a = Parameter("a")

    profile = 22 * (y * (1 - y)) ** (3 / 2)
    f = profile.get_function(y)
    assert f(0.5) == pytest.approx(2.75)
    np.testing.assert_allclose(f(np.array([0.0, 1.0])), [0, 0])

    g = (a * x).get_function(x, a)
    assert g(2.0, 3.0) == pytest.approx(6.0)

    indicator = ((x <= 0.5) * 3.0).get_function(x)
    np.testing.assert_allclose(indicator(np.array([0.2, 0.7])), [3.0, 0.0])

    with config({"expressions.lambdify_modules": "math"}):
        h = (x**2).get_function(x)
    assert h(3.0) == pytest.approx(9.0)

    with pytest.raises(ValueError):
        (a * x).get_function(x)  # parameter is missing
    with pytest.raises(ValueError):
        (u() + 1).get_function(x, y, t)
    with pytest.raises(ValueError):
        derivative(x)(x**2).get_function(x)
