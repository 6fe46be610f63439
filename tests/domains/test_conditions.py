"""
.. codeauthor:: David Zwicker <david.zwicker@ds.mpg.de>
"""

import pytest
import sympy

from pdesys.domains import (
    Equation,
    classify_condition,
    field_at,
    initial_condition,
    interval,
    periodic_condition,
    periodic_conditions,
)
from pdesys.symbolic import Literal, derivative


@pytest.fixture
def domains(variables):
    """Return the domains of the test variables."""
    x, y, t, u, v = variables
    return {"x": interval(x, 0.0, 1.0), "y": interval(y, -1, 1), "t": interval(t, 0, 5)}


def test_equation(variables):
    """Test basic properties of equations."""
    x, y, t, u, v = variables
    eq = Equation(derivative(t)(u()), 2 * u() + x)
    assert str(eq) == "d/dt(u(x, y, t)) ~ 2 * u(x, y, t) + x"
    assert eq.sides == (eq.lhs, eq.rhs)
    assert eq.independent_variables() == {x, y, t}
    assert len(eq.field_calls()) == 2
    assert eq.parameters() == set()
    assert isinstance(eq.to_sympy(), sympy.Equality)

    const = Equation(u(), 1)
    assert const.rhs == Literal(1)
    assert const.substitute({x: 0}).lhs == u(0, y, t)


def test_field_at(variables):
    """Test fixing coordinates of fields."""
    x, y, t, u, v = variables
    assert field_at(u, t=0) == u(x, y, 0)
    assert str(field_at(u, x=1.0, t=0)) == "u(1.0, y, 0)"
    assert field_at(u) == u()

    with pytest.raises(ValueError):
        field_at(u, z=0)
    with pytest.raises(ValueError):
        field_at(x, t=0)


def test_initial_and_periodic_conditions(variables, domains):
    """Test creating conditions."""
    x, y, t, u, v = variables

    ic = initial_condition(u, x * (1 - x), t, at=0)
    assert ic.lhs == u(x, y, 0)
    assert ic.lhs.fixed_arguments() == {"t": Literal(0)}

    pc = periodic_condition(u, domains["x"])
    assert str(pc) == "u(0.0, y, t) ~ u(1.0, y, t)"

    bcs = periodic_conditions([u, v], domains, [x, y])
    assert len(bcs) == 4
    assert bcs[0] == pc
    fields = [bc.lhs.variable.name for bc in bcs]
    coords = [next(iter(bc.lhs.fixed_arguments())) for bc in bcs]
    assert fields == ["u", "u", "v", "v"]
    assert coords == ["x", "y", "x", "y"]


def test_classify_conditions(variables, domains):
    """Test determining the role of conditions."""
    x, y, t, u, v = variables

    def classify(eq):
        return classify_condition(eq, "t", domains)

    info = classify(initial_condition(u, 1, t, at=0))
    assert info.kind == "initial"
    assert info.field == u
    assert info.variable == "t"

    info = classify(periodic_condition(v, domains["y"]))
    assert info == ("periodic", v, "y", None)
    info = classify(Equation(u(1.0, y, t), u(0.0, y, t)))
    assert info.kind == "periodic"

    assert classify(Equation(u(0.0, y, t), 0)) == ("boundary", u, "x", "lower")
    assert classify(Equation(u(x, 1, t), 0)) == ("boundary", u, "y", "upper")
    assert classify(Equation(u(0.5, y, t), 0)).side is None
    assert classify(initial_condition(u, 1, t, at=1)).kind == "boundary"
    assert classify(Equation(u(0.0, y, t), v(1.0, y, t))).kind == "boundary"
    assert classify(Equation(u(0.0, 1, t), 0)).variable is None
    assert classify(Equation(x, 0)) == ("boundary", None, None, None)
