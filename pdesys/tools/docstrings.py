"""
Methods for automatic transformation of docstrings

.. autosummary::
   :nosignatures:

   get_text_block
   fill_in_docstring

.. codeauthor:: David Zwicker <david.zwicker@ds.mpg.de>
"""

import re
import textwrap
from typing import TypeVar

DOCSTRING_REPLACEMENTS = {
    # description of function arguments
    "ARG_EQUATIONS": """
        The governing equations given as a sequence of
        :class:`~pdesys.domains.conditions.Equation`. Each left hand side must be
        the first-order time derivative of one dependent variable and the order of
        the equations must match the order of `dependent_variables`.
        """,
    "ARG_BOUNDARY_CONDITIONS": """
        Initial and boundary conditions given as a sequence of
        :class:`~pdesys.domains.conditions.Equation`. Every dependent variable
        needs exactly one initial condition at the lower end of the time domain and
        a periodic pair for every spatial coordinate it depends on. Conditions are
        conveniently created using
        :func:`~pdesys.domains.conditions.initial_condition` and
        :func:`~pdesys.domains.conditions.periodic_conditions`.
        """,
    "ARG_DOMAINS": """
        The extent of each independent variable. This can either be a mapping from
        variable names to :class:`~pdesys.domains.intervals.Interval` or a sequence
        of such intervals, which are then identified by their variable.
        """,
    "ARG_REGISTRY": """
        The registry into which the system is registered. If omitted, the
        process-wide registry :data:`pdesys.systems.registry.registry` is used.
        """,
}
DOCSTRING_REPLACEMENTS = {k: v[1:-1] for k, v in DOCSTRING_REPLACEMENTS.items()}


def get_text_block(identifier: str) -> str:
    """return a single text block

    Args:
        identifier (str): The name of the text block

    Returns:
        str: the text block as one long line.
    """
    raw_text = DOCSTRING_REPLACEMENTS[identifier]
    return "".join(textwrap.dedent(raw_text))


TFunc = TypeVar("TFunc")


def fill_in_docstring(f: TFunc) -> TFunc:
    """ decorator that replaces text in the docstring of a function """
    tw = textwrap.TextWrapper(
        width=80, expand_tabs=True, replace_whitespace=True, drop_whitespace=True
    )

    for name, value in DOCSTRING_REPLACEMENTS.items():

        def repl(matchobj) -> str:
            """ helper function replacing token in docstring """
            tw.initial_indent = tw.subsequent_indent = matchobj.group(1)
            return tw.fill(textwrap.dedent(value))

        token = "{" + name + "}"
        f.__doc__ = re.sub(  # type: ignore
            f"^([ \t]*){token}",
            repl,
            f.__doc__,
            flags=re.MULTILINE,
        )
    return f
