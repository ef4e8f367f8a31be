import logging
import re
from collections.abc import Iterable, Iterator, Mapping
from contextlib import contextmanager
from tokenize import TokenError

import sympy as sp
from sympy.parsing.sympy_parser import (
    convert_xor,
    implicit_multiplication,
    parse_expr,
    standard_transformations,
)

from .errors import ExpressionError

logger = logging.getLogger(__name__)

# `2x` -> 2*x and `x^2` -> x**2
TRANSFORMATIONS = standard_transformations + (convert_xor, implicit_multiplication)


def _first_position(name: str, source: str) -> int:
    """Returns the index of the first standalone occurrence of `name` in `source`."""
    match = re.search(rf"(?<![A-Za-z_]){re.escape(name)}(?![A-Za-z0-9_])", source)
    if match is None:
        return len(source)
    return match.start()


class SymbolicEngine:
    """Thin adapter around sympy used by the propagation engine.

    Every expression the adapter builds is recorded in an expression registry
    until :meth:`clear` is called. The propagation engine wraps each call in
    :meth:`scope`, so from the caller's point of view the adapter holds no
    state between calls.
    """

    def __init__(self) -> None:
        self._expressions: list[sp.Expr] = []

    def expressions(self) -> list[sp.Expr]:
        """Returns a copy of the expressions currently held by the adapter."""
        return list(self._expressions)

    def clear(self) -> None:
        if self._expressions:
            logger.debug("clearing %d registered expressions", len(self._expressions))
        self._expressions.clear()

    @contextmanager
    def scope(self) -> Iterator["SymbolicEngine"]:
        """Context manager that empties the registry on every exit path."""
        try:
            yield self
        finally:
            self.clear()

    def parse(self, expression: str, names: Iterable[str] = ()) -> sp.Expr:
        """Parses an expression string into a sympy expression.

        Parameters
        ----------
        expression: str
            The expression, e.g. ``"2x + y^2"``.
        names: Iterable[str], optional
            Names that must be read as plain symbols, even when sympy knows
            them as a constant or function (``E``, ``I``, ``S``, ...).

        Returns
        -------
        sp.Expr:
            The parsed expression.

        Raises
        ------
        ExpressionError:
            If the expression is not valid syntax or is not a scalar expression.
        """
        local_dict = {name: sp.Symbol(name) for name in names}
        try:
            parsed = parse_expr(
                expression, local_dict=local_dict, transformations=TRANSFORMATIONS
            )
        except (
            SyntaxError, TokenError, TypeError, ValueError, AttributeError, NameError
        ) as exc:
            raise ExpressionError(f"could not parse expression {expression!r}") from exc

        if not isinstance(parsed, sp.Expr):
            raise ExpressionError(
                f"expression {expression!r} is not a scalar expression"
            )

        logger.debug("parsed %r as %s", expression, parsed)
        self._expressions.append(parsed)
        return parsed

    def free_variables(self, expr: sp.Expr, source: str = "") -> list[str]:
        """Returns the variable names of `expr`, ordered by first appearance in `source`."""
        names = [symbol.name for symbol in expr.free_symbols]
        return sorted(names, key=lambda name: (_first_position(name, source), name))

    def differentiate(self, expr: sp.Expr, variable_name: str) -> sp.Expr:
        """Returns the simplified partial derivative of `expr` with respect to `variable_name`."""
        derivative = sp.simplify(sp.diff(expr, sp.Symbol(variable_name)))
        self._expressions.append(derivative)
        return derivative

    def evaluate(self, expr: sp.Expr, bindings: Mapping[str, float]) -> float:
        """Evaluates `expr` with the given numeric values substituted.

        Raises
        ------
        ExpressionError:
            If the result is not a real number, for instance because a symbol
            has no binding or the expression is undefined at that point.
        """
        result = expr.evalf(subs={sp.Symbol(name): value for name, value in bindings.items()})

        unbound = sorted(symbol.name for symbol in result.free_symbols)
        if unbound:
            raise ExpressionError(
                f"no values given for {', '.join(unbound)}, cannot evaluate {expr}"
            )

        try:
            return float(result)
        except TypeError as exc:
            raise ExpressionError(f"{expr} does not evaluate to a real number") from exc


symbolic_engine = SymbolicEngine()
