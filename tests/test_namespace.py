"""
.. codeauthor:: David Zwicker <david.zwicker@ds.mpg.de>
"""

import pytest

import pdesys
from pdesys import domains, symbolic, systems


@pytest.mark.parametrize("package", [domains, symbolic, systems])
def test_public_names(package):
    """Test that the public names of the subpackages are available."""
    for name in package.__all__:
        assert getattr(pdesys, name) is getattr(package, name)


@pytest.mark.parametrize(
    "name",
    ["base", "registry", "variables", "expressions", "operators", "conditions"],
)
def test_submodules_not_exported(name):
    """Test that submodules do not end up in the main name space."""
    assert not hasattr(pdesys, name)
