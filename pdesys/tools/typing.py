"""Provides support for mypy type checking of the package.

.. codeauthor:: David Zwicker <david.zwicker@ds.mpg.de>
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Union

import numpy as np

if TYPE_CHECKING:
    from ..symbolic.expressions import Expression
    from ..symbolic.variables import Parameter, Variable

# types for single numbers:
Real = Union[int, float]  # a real number (no complex number allowed)
Number = Union[Real, complex, np.number]  # any number, including complex numbers

# types that can be turned into symbolic expressions
ExpressionLike = Union[Real, np.number, "Variable", "Parameter", "Expression"]
