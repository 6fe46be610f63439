"""Defines the record bundling all information about a PDE system.

.. autosummary::
   :nosignatures:

   PDESystem
   build_system

.. codeauthor:: David Zwicker <david.zwicker@ds.mpg.de>
"""

from __future__ import annotations

import logging
from collections import Counter
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

import sympy
from sympy.core.function import AppliedUndef

from .. import config
from ..domains.conditions import ConditionInfo, Equation, classify_condition
from ..domains.intervals import Interval
from ..symbolic.expressions import (
    DerivativeApplication,
    FieldCall,
    VariableRef,
)
from ..symbolic.variables import Parameter, Variable
from ..tools.docstrings import fill_in_docstring

_logger = logging.getLogger(__name__)
""":class:`logging.Logger`: Logger instance."""


class PDESystemError(ValueError):
    """Exception signaling that a PDE system is not well-formed."""


class UndefinedSymbolError(PDESystemError):
    """Exception indicating that a dependent variable or parameter was not declared."""


class IncompleteSystemError(PDESystemError):
    """Exception indicating that an independent variable lacks a domain."""


class SignatureMismatchError(PDESystemError):
    """Exception indicating that a field was applied to inconsistent arguments."""


class MissingBoundaryConditionError(PDESystemError):
    """Exception indicating that the conditions do not determine a field."""


@dataclass(frozen=True, eq=False)
class PDESystem:
    """Symbolic description of a time-dependent PDE system.

    Instances should be created using :func:`build_system`, which validates that all
    parts of the system are consistent. The fields of this record are read by
    external tools and therefore form a stable interface: the equations are ordered
    like :attr:`dependent_variables` and :attr:`domains` can be indexed by the names
    of the independent variables.
    """

    name: str
    """str: identifier of the problem"""
    equations: tuple[Equation, ...]
    """tuple: governing equations, one for each dependent variable"""
    boundary_conditions: tuple[Equation, ...]
    """tuple: initial and boundary conditions"""
    domains: Mapping[str, Interval]
    """dict: the extent of each independent variable"""
    independent_variables: tuple[Variable, ...]
    """tuple: independent variables, i.e., coordinates and time"""
    dependent_variables: tuple[Variable, ...]
    """tuple: dependent variables, i.e., the fields"""
    parameters: tuple[Parameter, ...] = ()
    """tuple: named constants appearing in the equations"""
    defaults: Mapping[str, Any] = field(default_factory=dict)
    """dict: default values of the parameters"""
    time_variable: str = "t"
    """str: name of the independent variable denoting time"""
    description: str = ""
    """str: human-readable description of the problem"""

    def __post_init__(self):
        object.__setattr__(self, "equations", tuple(self.equations))
        object.__setattr__(self, "boundary_conditions", tuple(self.boundary_conditions))
        object.__setattr__(self, "domains", MappingProxyType(dict(self.domains)))
        object.__setattr__(
            self, "independent_variables", tuple(self.independent_variables)
        )
        object.__setattr__(self, "dependent_variables", tuple(self.dependent_variables))
        object.__setattr__(self, "parameters", tuple(self.parameters))
        object.__setattr__(self, "defaults", MappingProxyType(dict(self.defaults)))

    @property
    def spatial_variables(self) -> tuple[Variable, ...]:
        """tuple: the independent variables except time"""
        return tuple(
            var for var in self.independent_variables if var.name != self.time_variable
        )

    @property
    def time_domain(self) -> Interval:
        """:class:`~pdesys.domains.intervals.Interval`: domain of the time variable"""
        return self.domains[self.time_variable]

    def equation_for(self, variable: Variable | str) -> Equation:
        """Return the governing equation of a dependent variable.

        Args:
            variable (:class:`~pdesys.symbolic.variables.Variable` or str):
                The dependent variable or its name

        Returns:
            :class:`~pdesys.domains.conditions.Equation`: The equation
        """
        name = variable if isinstance(variable, str) else variable.name
        for var, eq in zip(self.dependent_variables, self.equations):
            if var.name == name:
                return eq
        raise KeyError(f"`{name}` is not a dependent variable of `{self.name}`")

    def classify_conditions(self) -> list[ConditionInfo]:
        """Classify all boundary conditions in the order they are stored."""
        return [
            classify_condition(bc, self.time_variable, self.domains)
            for bc in self.boundary_conditions
        ]

    @property
    def initial_conditions(self) -> dict[str, Equation]:
        """dict: the initial condition of each dependent variable"""
        return {
            info.field.name: bc
            for bc, info in zip(self.boundary_conditions, self.classify_conditions())
            if info.kind == "initial"
        }

    @property
    def periodic_pairs(self) -> dict[tuple[str, str], Equation]:
        """dict: periodic conditions identified by names of field and coordinate"""
        return {
            (info.field.name, info.variable): bc
            for bc, info in zip(self.boundary_conditions, self.classify_conditions())
            if info.kind == "periodic"
        }

    def is_linear(self) -> bool:
        """Determine whether the evolution rates are linear in the fields.

        The right hand sides of all equations are checked to depend at most linearly
        on the fields and their derivatives. Terms that only depend on coordinates,
        like forcing terms, do not affect linearity.

        Returns:
            bool: Whether the PDE system is linear
        """
        for eq in self.equations:
            expr = eq.rhs._sympy_value()
            # replace derivatives and fields by placeholder symbols
            placeholders: list[sympy.Symbol] = []
            for atom_type in (sympy.Derivative, AppliedUndef):
                repl = {}
                for atom in expr.atoms(atom_type):
                    repl[atom] = sympy.Dummy(f"f{len(placeholders)}")
                    placeholders.append(repl[atom])
                expr = expr.xreplace(repl)

            for symbol in placeholders:
                rate = sympy.diff(expr, symbol)
                if rate.free_symbols & set(placeholders):
                    return False
        return True

    def to_sympy(self) -> dict[str, Any]:
        """Convert the system to :mod:`sympy` objects.

        Returns:
            dict: Contains the equations and conditions as :class:`sympy.Eq` and the
            domains as :class:`sympy.Interval` for each variable symbol
        """
        return {
            "equations": [eq.to_sympy() for eq in self.equations],
            "boundary_conditions": [bc.to_sympy() for bc in self.boundary_conditions],
            "domains": {
                sympy.Symbol(name): sympy.Interval(dom.min, dom.max)
                for name, dom in self.domains.items()
            },
            "independent_variables": [
                sympy.Symbol(var.name) for var in self.independent_variables
            ],
            "dependent_variables": [
                sympy.Function(var.name)(*(sympy.Symbol(a) for a in var.signature))
                for var in self.dependent_variables
            ],
            "parameters": [sympy.Symbol(par.name) for par in self.parameters],
        }

    def summary(self) -> dict[str, Any]:
        """Return basic information about the system.

        Returns:
            dict: Names of variables and the number of equations and conditions
        """
        return {
            "name": self.name,
            "independent_variables": [var.name for var in self.independent_variables],
            "dependent_variables": [str(var) for var in self.dependent_variables],
            "parameters": [par.name for par in self.parameters],
            "equations": len(self.equations),
            "boundary_conditions": len(self.boundary_conditions),
            "domains": {name: dom.bounds for name, dom in self.domains.items()},
        }

    def __repr__(self) -> str:
        fields = ", ".join(str(var) for var in self.dependent_variables)
        return f'{self.__class__.__name__}(name="{self.name}", fields=[{fields}])'

    def __str__(self) -> str:
        lines = [f"PDE system `{self.name}`", "Equations:"]
        lines += [f"  {eq}" for eq in self.equations]
        lines.append("Boundary conditions:")
        lines += [f"  {bc}" for bc in self.boundary_conditions]
        lines.append("Domains:")
        lines += [f"  {dom}" for dom in self.domains.values()]
        return "\n".join(lines)


def _normalize_domains(
    domains: Mapping[str, Interval] | Sequence[Interval],
) -> dict[str, Interval]:
    """Turn the supplied domains into a dictionary keyed by variable names."""
    if isinstance(domains, Mapping):
        result = {}
        for key, dom in domains.items():
            name = key if isinstance(key, str) else key.name
            if not isinstance(dom, Interval):
                raise TypeError(f"Domain of `{name}` must be an Interval, not {dom!r}")
            if dom.name != name:
                raise IncompleteSystemError(
                    f"Domain stored for `{name}` describes variable `{dom.name}`"
                )
            result[name] = dom
        return result

    result = {}
    for dom in domains:
        if not isinstance(dom, Interval):
            raise TypeError(f"Expected an Interval, not {dom!r}")
        if dom.name in result:
            raise IncompleteSystemError(f"Multiple domains for `{dom.name}`")
        result[dom.name] = dom
    return result


def _normalize_dependent(variables: Sequence[Variable | FieldCall]) -> list[Variable]:
    """Accept dependent variables either bare or applied to their signature."""
    result: list[Variable] = []
    for var in variables:
        if isinstance(var, FieldCall):
            if not var.is_bulk:
                raise SignatureMismatchError(
                    f"Dependent variable must be declared with its signature, not {var}"
                )
            var = var.variable
        if not isinstance(var, Variable) or not var.is_dependent:
            raise PDESystemError(f"`{var}` is not a dependent variable")
        result.append(var)
    return result


def _check_field_call(call: FieldCall, declared: Mapping[str, Variable], where: str):
    """Check that a field is declared and applied consistently."""
    name = call.variable.name
    if name not in declared:
        raise UndefinedSymbolError(f"Undeclared dependent variable `{name}` in {where}")
    variable = declared[name]
    if call.variable != variable:
        raise SignatureMismatchError(
            f"`{name}` is used as `{call.variable}` in {where}, but declared as "
            f"`{variable}`"
        )
    if len(call.arguments) != len(variable.arguments):
        raise SignatureMismatchError(
            f"`{call}` in {where} has {len(call.arguments)} arguments, but "
            f"`{variable}` expects {len(variable.arguments)}"
        )
    for pos, (arg, expected) in enumerate(zip(call.arguments, variable.arguments)):
        if isinstance(arg, VariableRef) and arg.variable != expected:
            raise SignatureMismatchError(
                f"Argument {pos} of `{call}` in {where} is `{arg}`, but the signature "
                f"`{variable}` expects `{expected.name}`"
            )


def _check_equations(
    equations: Sequence[Equation], dependent: Sequence[Variable], time_variable: str
):
    """Check that each field has exactly one evolution equation in declared order."""
    if len(equations) != len(dependent):
        raise PDESystemError(
            f"Got {len(equations)} equations for {len(dependent)} dependent variables"
        )

    evolved = []
    for eq in equations:
        lhs = eq.lhs
        if not (
            isinstance(lhs, DerivativeApplication)
            and lhs.order == 1
            and lhs.variable.name == time_variable
            and isinstance(lhs.operand, FieldCall)
            and lhs.operand.is_bulk
        ):
            raise PDESystemError(
                f"Left hand side of `{eq}` must be the first time derivative of a "
                "dependent variable"
            )
        evolved.append(lhs.operand.variable.name)

    counts = Counter(evolved)
    duplicates = sorted(name for name, count in counts.items() if count > 1)
    if duplicates:
        raise PDESystemError(f"Multiple equations for {duplicates}")
    expected = [var.name for var in dependent]
    if evolved != expected:
        raise PDESystemError(
            f"Equations describe {evolved}, but must follow the order {expected} of "
            "the dependent variables"
        )


def _check_conditions(
    infos: Sequence[ConditionInfo], dependent: Sequence[Variable], time_variable: str
):
    """Check that conditions determine every field at the initial time and edges."""
    initial = Counter(info.field.name for info in infos if info.kind == "initial")
    periodic = Counter(
        (info.field.name, info.variable) for info in infos if info.kind == "periodic"
    )
    edges = Counter(
        (info.field.name, info.variable, info.side)
        for info in infos
        if info.kind == "boundary" and info.side is not None
    )

    for var in dependent:
        if initial[var.name] == 0:
            raise MissingBoundaryConditionError(
                f"Dependent variable `{var.name}` lacks an initial condition at "
                f"`{time_variable}` = min"
            )
        if initial[var.name] > 1:
            raise PDESystemError(
                f"Dependent variable `{var.name}` has {initial[var.name]} initial "
                "conditions"
            )
        for coord in var.signature:
            if coord == time_variable:
                continue
            num_periodic = periodic[var.name, coord]
            num_lower = edges[var.name, coord, "lower"]
            num_upper = edges[var.name, coord, "upper"]
            if num_periodic > 1 or num_lower > 1 or num_upper > 1:
                raise PDESystemError(
                    f"Dependent variable `{var.name}` has multiple conditions at the "
                    f"same edge of `{coord}`"
                )
            if num_periodic and (num_lower or num_upper):
                raise PDESystemError(
                    f"Dependent variable `{var.name}` has periodic and edge "
                    f"conditions along `{coord}`"
                )
            if num_periodic == 0 and not (num_lower and num_upper):
                raise MissingBoundaryConditionError(
                    f"Dependent variable `{var.name}` lacks a periodic condition "
                    f"along `{coord}`"
                )


@fill_in_docstring
def build_system(
    name: str,
    equations: Sequence[Equation],
    boundary_conditions: Sequence[Equation],
    domains: Mapping[str, Interval] | Sequence[Interval],
    independent_variables: Sequence[Variable],
    dependent_variables: Sequence[Variable | FieldCall],
    *,
    parameters: Sequence[Parameter] = (),
    defaults: Mapping[str, Any] | None = None,
    time_variable: str | None = None,
    description: str = "",
) -> PDESystem:
    """Validate the parts of a PDE system and combine them into a record.

    Building a system has no side effects. In particular, the system is not
    registered anywhere; use :func:`~pdesys.systems.registry.register` for this.

    Args:
        name (str):
            Identifier of the problem
        equations (list):
            {ARG_EQUATIONS}
        boundary_conditions (list):
            {ARG_BOUNDARY_CONDITIONS}
        domains:
            {ARG_DOMAINS}
        independent_variables (list):
            The coordinates and the time variable
        dependent_variables (list):
            The fields, either as dependent variables or applied to their signature,
            e.g., `u(x, y, t)`
        parameters (list):
            Named constants that may appear in the equations and conditions
        defaults (dict):
            Default values of parameters, which take precedence over the defaults
            stored with the parameters
        time_variable (str):
            Name of the time variable. If omitted, the configuration value
            `systems.time_variable` is used.
        description (str):
            Human-readable description of the problem

    Returns:
        :class:`PDESystem`: The validated system

    Raises:
        IncompleteSystemError: if an independent variable lacks a domain
        UndefinedSymbolError: if a field or parameter was not declared
        SignatureMismatchError: if a field is applied to inconsistent arguments
        MissingBoundaryConditionError: if initial or periodic conditions are missing
    """
    if not isinstance(name, str) or not name:
        raise PDESystemError("PDE systems need a name")
    if time_variable is None:
        time_variable = config["systems.time_variable"]
    equations = list(equations)
    boundary_conditions = list(boundary_conditions)
    for eq in equations + boundary_conditions:
        if not isinstance(eq, Equation):
            raise TypeError(f"Expected an Equation, not {eq!r}")
    if not equations:
        raise IncompleteSystemError(f"System `{name}` has no equations")

    # check the independent variables and their domains
    domains = _normalize_domains(domains)
    independent = list(independent_variables)
    for var in independent:
        if not isinstance(var, Variable) or not var.is_independent:
            raise PDESystemError(f"`{var}` is not an independent variable")
    names_indep = [var.name for var in independent]
    if len(set(names_indep)) != len(names_indep):
        raise PDESystemError(f"Independent variables {names_indep} are not unique")
    if time_variable not in names_indep:
        raise IncompleteSystemError(
            f"Time variable `{time_variable}` is not an independent variable"
        )
    for var_name in names_indep:
        if var_name not in domains:
            raise IncompleteSystemError(
                f"Independent variable `{var_name}` has no domain"
            )
    for var_name in domains:
        if var_name not in names_indep:
            raise IncompleteSystemError(
                f"Domain given for `{var_name}`, which is not an independent variable"
            )

    # check the dependent variables
    dependent = _normalize_dependent(dependent_variables)
    declared: dict[str, Variable] = {}
    for var in dependent:
        if var.name in declared:
            if declared[var.name] != var:
                raise SignatureMismatchError(
                    f"`{var.name}` is declared as `{declared[var.name]}` and `{var}`"
                )
            raise PDESystemError(f"Dependent variable `{var.name}` is declared twice")
        if var.name in names_indep:
            raise PDESystemError(f"`{var.name}` is declared as independent variable")
        declared[var.name] = var
        for arg in var.signature:
            if arg not in domains:
                raise IncompleteSystemError(
                    f"`{var}` depends on `{arg}`, which has no domain"
                )

    # check all symbols used in equations and conditions
    parameters = list(parameters)
    names_par = {par.name for par in parameters}
    all_equations = [("equation", eq) for eq in equations]
    all_equations += [("boundary condition", bc) for bc in boundary_conditions]
    for kind, eq in all_equations:
        where = f"{kind} `{eq}`"
        for var in sorted(eq.independent_variables(), key=lambda v: v.name):
            if var.name not in domains:
                raise IncompleteSystemError(
                    f"Variable `{var.name}` in {where} has no domain"
                )
        for call in eq.field_calls():
            _check_field_call(call, declared, where)
        for par in eq.parameters():
            if par.name not in names_par:
                raise UndefinedSymbolError(
                    f"Undeclared parameter `{par.name}` in {where}"
                )

    # collect default values of parameters
    default_values = {
        par.name: par.default for par in parameters if par.default is not None
    }
    if defaults:
        for key, value in defaults.items():
            key_name = key if isinstance(key, str) else key.name
            if key_name not in names_par:
                raise UndefinedSymbolError(f"Default given for undeclared `{key_name}`")
            default_values[key_name] = value

    # check the structure of the equations and conditions
    _check_equations(equations, dependent, time_variable)
    infos = [
        classify_condition(bc, time_variable, domains) for bc in boundary_conditions
    ]
    for bc, info in zip(boundary_conditions, infos):
        if info.field is None:
            raise PDESystemError(f"Condition `{bc}` does not constrain a field")
    _check_conditions(infos, dependent, time_variable)

    system = PDESystem(
        name=name,
        equations=equations,
        boundary_conditions=boundary_conditions,
        domains={var_name: domains[var_name] for var_name in names_indep},
        independent_variables=independent,
        dependent_variables=dependent,
        parameters=parameters,
        defaults=default_values,
        time_variable=time_variable,
        description=description,
    )
    _logger.debug("Built PDE system %r", system)
    return system
