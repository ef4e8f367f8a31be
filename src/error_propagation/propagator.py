import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

import sympy as sp
from tqdm.auto import tqdm
from uncertainties.core import AffineScalarFunc

from .combiner import CorrelationMode, ErrorBreakdown, combine
from .errors import ExpressionError, InputError
from .events import EventNotifier, Listener
from .measurement import Measurement, validate_variables
from .symbolic import SymbolicEngine, symbolic_engine

logger = logging.getLogger(__name__)

EVENTS = ("input", "differential", "result")


@dataclass(frozen=True)
class Differential:
    """The partial derivative of an expression with respect to one variable.

    Attributes
    ----------
    value: float
        The derivative evaluated at the measured point.
    variable_name: str
        The variable the derivative was taken against.
    variable: Measurement
        The measurement of that variable.
    value_with_error: float
        ``|value| * variable.error``, the contribution of this variable to the error.
    expression: sp.Expr
        The simplified derivative, ``str(expression)`` gives its textual form.
    """

    value: float
    variable_name: str
    variable: Measurement
    value_with_error: float
    expression: sp.Expr


@dataclass(frozen=True)
class Result:
    """Value and propagated error of an expression."""

    value: float
    error: float | ErrorBreakdown

    def to_dict(self) -> dict[str, Any]:
        error = self.error.to_dict() if isinstance(self.error, ErrorBreakdown) else self.error
        return {"value": self.value, "error": error}

    def to_ufloat(self, correlated: bool = False) -> AffineScalarFunc:
        """Converts the result to an ``uncertainties`` number.

        Parameters
        ----------
        correlated: bool, optional
            Only used when the error is an :class:`ErrorBreakdown`, picks the
            correlated figure instead of the uncorrelated one.
        """
        error = self.error
        if isinstance(error, ErrorBreakdown):
            error = error.correlated if correlated else error.uncorrelated
        return Measurement(self.value, error).to_ufloat()


class Propagator:
    def __init__(
        self,
        correlation: CorrelationMode | str = CorrelationMode.UNCORRELATED,
        symbolic: SymbolicEngine | None = None,
    ) -> None:
        """Initialize the Propagator.

        Parameters
        ----------
        correlation : CorrelationMode or str, optional
            How the error contributions of the variables are combined:
            ``"uncorrelated"`` (quadrature sum, the default), ``"correlated"``
            (linear sum) or ``"both"``.
        symbolic : SymbolicEngine, optional
            The symbolic adapter to use, defaults to the shared ``symbolic_engine``.

        Raises
        ------
        ConfigurationError:
            If the correlation mode is not known.
        """
        self._correlation = CorrelationMode.parse(correlation)
        self.symbolic = symbolic if symbolic is not None else symbolic_engine
        self._events = EventNotifier(EVENTS)

    @property
    def correlation(self) -> CorrelationMode:
        return self._correlation

    def on(self, event: str, listener: Listener) -> Listener:
        """Registers a listener for ``"input"``, ``"differential"`` or ``"result"``."""
        return self._events.on(event, listener)

    def off(self, event: str, listener: Listener) -> None:
        self._events.off(event, listener)

    def calculate(
        self, expression: str | None = None, variables: Mapping[str, Any] | None = None
    ) -> Result:
        """Calculates the value and the propagated error of an expression.

        The ``input`` event is emitted before anything is checked, one
        ``differential`` event per variable (in order of first appearance in
        the expression) and ``result`` right before returning.

        Parameters
        ----------
        expression : str
            The expression, e.g. ``"x*y"`` or ``"2x^2"``.
        variables : Mapping[str, Any], optional
            Variable name to measurement, see
            :func:`~error_propagation.measurement.check_measurement` for the
            accepted forms.

        Returns
        -------
        Result:
            The value of the expression and its error.

        Raises
        ------
        InputError:
            If the expression is missing or a variable is not a valid measurement.
        ExpressionError:
            If the expression cannot be parsed or evaluated.
        """
        self._events.emit("input", expression, variables)

        # input sanitation
        if not isinstance(expression, str) or not expression.strip():
            raise InputError("expression must be a non-empty string")
        measurements = validate_variables(variables)

        with self.symbolic.scope() as symbolic:
            function = symbolic.parse(expression, names=measurements)
            names = symbolic.free_variables(function, expression)

            missing = [name for name in names if name not in measurements]
            if missing:
                raise ExpressionError(
                    f"no values given for {', '.join(missing)} in {expression!r}"
                )

            bindings = {name: measurement.value for name, measurement in measurements.items()}

            contributions = []
            for name in names:
                variable = measurements[name]
                derivative = symbolic.differentiate(function, name)
                slope = symbolic.evaluate(derivative, bindings)
                logger.debug("d(%s)/d%s = %s = %g", function, name, derivative, slope)

                self._events.emit(
                    "differential",
                    Differential(
                        value=slope,
                        variable_name=name,
                        variable=variable,
                        value_with_error=abs(slope) * variable.error,
                        expression=derivative,
                    ),
                )
                contributions.append((slope, variable))

            value = symbolic.evaluate(function, bindings)

        error = combine(contributions, self._correlation) if contributions else 0.0
        result = Result(value=value, error=error)
        logger.debug("%s = %s +/- %s (%s)", expression, value, error, self._correlation.value)

        self._events.emit("result", result)
        return result

    def get_rows(self, variables: Mapping[str, Any] | None) -> list[dict[str, Any]]:
        """Splits a variable map holding lists of measurements into one map per row.

        Variables mapped to a single measurement are held constant across the
        rows. If no variable holds a list, a single row is returned.

        Raises
        ------
        InputError:
            If the lists do not all have the same length.
        """
        if variables is None:
            return [{}]
        if not isinstance(variables, Mapping):
            raise InputError(
                f"variables must be a mapping of names to measurements, got {type(variables).__name__}"
            )

        list_lengths = {len(entry) for entry in variables.values() if isinstance(entry, list)}
        if not list_lengths:
            return [dict(variables)]
        if len(list_lengths) > 1:
            raise InputError(
                f"not all measurement series have the same length, got lengths {sorted(list_lengths)}"
            )

        list_length = list_lengths.pop()
        return [
            {
                name: entry[i] if isinstance(entry, list) else entry
                for name, entry in variables.items()
            }
            for i in range(list_length)
        ]

    def calculate_series(
        self,
        expression: str,
        variables: Mapping[str, Any] | None = None,
        progress: bool = True,
    ) -> list[Result]:
        """Calculates an expression for a series of measurements.

        Parameters
        ----------
        expression : str
            The expression to evaluate for every row.
        variables : Mapping[str, Any], optional
            Variable name to either a single measurement, held constant, or a
            list of measurements. All lists must have the same length.
        progress : bool, optional
            Show a progress bar, defaults to True.

        Returns
        -------
        list[Result]:
            One result per row, each produced by :meth:`calculate`. An empty
            series still emits ``input`` and checks the expression.
        """
        rows = self.get_rows(variables)
        if not rows:
            # an empty series still checks the expression and reports the attempt
            self._events.emit("input", expression, variables)
            if not isinstance(expression, str) or not expression.strip():
                raise InputError("expression must be a non-empty string")
            with self.symbolic.scope() as symbolic:
                names = [name for name in variables or {} if isinstance(name, str)]
                symbolic.parse(expression, names=names)
            return []

        return [
            self.calculate(expression, row)
            for row in tqdm(rows, "propagating errors", disable=not progress)
        ]
