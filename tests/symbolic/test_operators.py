"""
.. codeauthor:: David Zwicker <david.zwicker@ds.mpg.de>
"""

import pytest
import sympy

from pdesys.symbolic import (
    DerivativeApplication,
    Differential,
    FieldCall,
    Parameter,
    apply,
    derivative,
    laplacian,
    laplacian_terms,
)


def test_differential_operators(variables):
    """Test creating and composing derivatives."""
    x, y, t, u, v = variables

    Dx = derivative(x)
    assert Dx == Differential(x, 1)
    assert Dx.order == 1
    assert Dx * Dx == Differential(x, 2)
    assert Dx**2 == Differential(x, 2)
    assert derivative(x, 2) * Dx == Differential(x, 3)
    assert str(Dx) == "d/dx"
    assert str(Dx**2) == "d^2/dx^2"

    with pytest.raises(ValueError):
        Dx * derivative(y)
    with pytest.raises(ValueError):
        derivative(u)
    with pytest.raises(ValueError):
        derivative(x, 0)
    with pytest.raises(ValueError):
        Dx**0
    with pytest.raises(TypeError):
        derivative(x, 1.5)


def test_apply_derivatives(variables):
    """Test applying operators to expressions."""
    x, y, t, u, v = variables

    field = u()
    rate = apply(derivative(t), field)
    assert isinstance(rate, DerivativeApplication)
    assert rate.operand is field
    assert rate.variable == t
    assert rate.order == 1
    assert derivative(t)(field) == rate

    # a second derivative is a single node
    second = apply(derivative(x) * derivative(x), field)
    assert second.order == 2
    assert len(second.derivatives()) == 1
    assert isinstance(second.operand, FieldCall)
    assert second != apply(derivative(x), apply(derivative(x), field))

    with pytest.raises(TypeError):
        apply(x, field)

    X, Y, T = sympy.symbols("x y t")
    expected = sympy.Derivative(sympy.Function("u")(X, Y, T), (X, 2))
    assert second.to_sympy() == expected


@pytest.mark.parametrize(
    "make_expr",
    [
        lambda x, y, u, v: u(),
        lambda x, y, u, v: u() ** 2 + v() * x,
        lambda x, y, u, v: laplacian(u(), [x, y]),
        lambda x, y, u, v: Parameter("a") * (u() - v()),
    ],
)
def test_laplacian(make_expr, variables):
    """Test the structure of the Laplacian."""
    x, y, t, u, v = variables
    expr = make_expr(x, y, u, v)

    terms = laplacian_terms(laplacian(expr, [x, y]))
    assert len(terms) == 2
    for term, var in zip(terms, [x, y]):
        assert isinstance(term, DerivativeApplication)
        assert term.order == 2
        assert term.variable == var
        assert term.operand == expr


def test_laplacian_errors(variables):
    """Test invalid arguments of the Laplacian."""
    x, y, t, u, v = variables
    assert laplacian_terms(laplacian(u(), [x])) == [apply(derivative(x, 2), u())]
    with pytest.raises(ValueError):
        laplacian(u(), [])
    with pytest.raises(ValueError):
        laplacian(u(), [x, x])
