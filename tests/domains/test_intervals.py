"""
.. codeauthor:: David Zwicker <david.zwicker@ds.mpg.de>
"""

import dataclasses
import math

import numpy as np
import pytest

from pdesys.domains import Interval, InvalidDomainError, interval
from pdesys.symbolic import Variable, dependent, independent


@pytest.mark.parametrize("bounds", [(0, 1), (-2.5, 3.0), (0.0, 11.5), (1e-8, 2e-8)])
def test_interval_round_trip(bounds):
    """Test that valid intervals report their bounds."""
    x = independent("x")
    dom = interval(x, *bounds)
    assert dom.variable == x
    assert dom.name == "x"
    assert dom.min == bounds[0]
    assert dom.max == bounds[1]
    assert dom.bounds == bounds
    assert dom.length == pytest.approx(bounds[1] - bounds[0])
    assert dom.contains(bounds[0])
    assert dom.contains(bounds[1])
    assert not dom.contains(bounds[1] + 1)

    with pytest.raises(dataclasses.FrozenInstanceError):
        dom.min = -10


@pytest.mark.parametrize(
    "bounds", [(1, 1), (0.0, 0.0), (2, 1), (0, math.inf), (math.nan, 1), (0, "1")]
)
def test_interval_invalid(bounds):
    """Test that inconsistent bounds are rejected."""
    with pytest.raises(InvalidDomainError):
        interval("x", *bounds)


def test_interval_variables():
    """Test the variables that intervals can be associated with."""
    assert interval("t", 0, 1).variable == Variable("t")
    assert interval("t", np.float64(0), 1).min == 0
    assert str(interval("x", 0, 1)) == "x ∈ [0, 1]"
    assert issubclass(InvalidDomainError, ValueError)

    u = dependent("u", independent("x"))
    with pytest.raises(InvalidDomainError):
        Interval(u, 0, 1)
