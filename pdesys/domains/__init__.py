"""
Domains of independent variables and conditions at their boundaries

.. autosummary::
   :nosignatures:

   ~intervals.Interval
   ~intervals.interval
   ~conditions.Equation
   ~conditions.initial_condition
   ~conditions.periodic_conditions

.. codeauthor:: David Zwicker <david.zwicker@ds.mpg.de>
"""

from .conditions import (
    ConditionInfo,
    Equation,
    classify_condition,
    field_at,
    initial_condition,
    periodic_condition,
    periodic_conditions,
)
from .intervals import Interval, InvalidDomainError, interval

__all__ = [
    "Interval",
    "InvalidDomainError",
    "interval",
    "Equation",
    "ConditionInfo",
    "field_at",
    "initial_condition",
    "periodic_condition",
    "periodic_conditions",
    "classify_condition",
]
