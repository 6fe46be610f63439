"""This file is used to configure the test environment when running py.test.

.. codeauthor:: David Zwicker <david.zwicker@ds.mpg.de>
"""

import pytest

from pdesys import config, dependent, independent_variables
from pdesys.systems.registry import SystemRegistry


@pytest.fixture(autouse=True)
def _setup_and_teardown():
    """Helper function adjusting environment before and after tests."""
    # run the actual test with the default configuration
    with config({"registry.warn_duplicates": True, "systems.time_variable": "t"}):
        yield


@pytest.fixture(name="registry")
def fresh_registry():
    """Return an empty registry that is independent of the process-wide one."""
    return SystemRegistry()


@pytest.fixture(name="variables")
def brusselator_variables():
    """Return the coordinates `x, y, t` and the fields `u, v` depending on them."""
    x, y, t = independent_variables("x y t")
    u = dependent("u", x, y, t)
    v = dependent("v", x, y, t)
    return x, y, t, u, v
