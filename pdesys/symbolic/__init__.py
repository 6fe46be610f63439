"""
Symbolic building blocks of PDE systems

.. autosummary::
   :nosignatures:

   ~variables.Variable
   ~variables.Parameter
   ~expressions.Expression
   ~operators.Differential
   ~operators.laplacian

.. codeauthor:: David Zwicker <david.zwicker@ds.mpg.de>
"""

from .expressions import (
    BinaryOp,
    Comparison,
    DerivativeApplication,
    Expression,
    FieldCall,
    Literal,
    ParameterRef,
    UnaryOp,
    VariableRef,
    as_expression,
)
from .operators import (
    Differential,
    apply,
    derivative,
    laplacian,
    laplacian_terms,
)
from .variables import (
    Parameter,
    Variable,
    dependent,
    independent,
    independent_variables,
    parameters,
)

__all__ = [
    "Variable",
    "Parameter",
    "independent",
    "independent_variables",
    "dependent",
    "parameters",
    "Expression",
    "Literal",
    "VariableRef",
    "ParameterRef",
    "FieldCall",
    "UnaryOp",
    "BinaryOp",
    "Comparison",
    "DerivativeApplication",
    "as_expression",
    "Differential",
    "derivative",
    "apply",
    "laplacian",
    "laplacian_terms",
]
