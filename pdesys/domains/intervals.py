"""Closed intervals defining the extent of independent variables.

.. codeauthor:: David Zwicker <david.zwicker@ds.mpg.de>
"""

from __future__ import annotations

import logging
import math
import numbers
from dataclasses import dataclass

from ..symbolic.variables import Variable

_logger = logging.getLogger(__name__)
""":class:`logging.Logger`: Logger instance."""


class InvalidDomainError(ValueError):
    """Exception indicating that the bounds of an interval are inconsistent."""


@dataclass(frozen=True)
class Interval:
    """Closed range [`min`, `max`] of an independent variable."""

    variable: Variable
    min: float
    max: float

    def __post_init__(self):
        if isinstance(self.variable, str):
            object.__setattr__(self, "variable", Variable(self.variable))
        if not self.variable.is_independent:
            raise InvalidDomainError(
                f"Domains can only be defined for independent variables, not "
                f"`{self.variable}`"
            )
        for bound in (self.min, self.max):
            if isinstance(bound, bool) or not isinstance(bound, numbers.Real):
                raise InvalidDomainError(
                    f"Bound {bound!r} of `{self.variable.name}` is not a number"
                )
            if not math.isfinite(bound):
                raise InvalidDomainError(
                    f"Bound {bound} of `{self.variable.name}` is not finite"
                )
        if not self.min < self.max:
            raise InvalidDomainError(
                f"Domain of `{self.variable.name}` needs min < max, but got "
                f"[{self.min}, {self.max}]"
            )

    @property
    def name(self) -> str:
        """str: name of the variable whose extent is described"""
        return self.variable.name

    @property
    def bounds(self) -> tuple[float, float]:
        """tuple: lower and upper bound"""
        return (self.min, self.max)

    @property
    def length(self) -> float:
        """float: length of the interval"""
        return self.max - self.min

    def contains(self, value: float) -> bool:
        """Check whether `value` lies inside the closed interval."""
        return self.min <= value <= self.max

    def __str__(self) -> str:
        return f"{self.variable.name} ∈ [{self.min}, {self.max}]"


def interval(variable: Variable | str, min: float, max: float) -> Interval:
    """Associate a closed range with an independent variable.

    Args:
        variable (:class:`~pdesys.symbolic.variables.Variable` or str):
            The independent variable or its name
        min (float):
            Lower bound of the domain
        max (float):
            Upper bound of the domain, which must be larger than `min`

    Returns:
        :class:`Interval`: The domain of the variable
    """
    result = Interval(variable, min, max)  # type: ignore
    _logger.debug("Created domain %s", result)
    return result
