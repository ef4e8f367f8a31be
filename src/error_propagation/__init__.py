"""
First-order error propagation for symbolic expressions.

Modules:
    - propagator: the Propagator engine, its Result and Differential records.
    - combiner: correlation modes and the combination of error contributions.
    - measurement: measurements and validation of variable maps.
    - symbolic: the sympy adapter used to parse, differentiate and evaluate.
    - events: the synchronous listener registry behind Propagator.on.
"""

__version__ = "0.1.0"

from .combiner import CorrelationMode, ErrorBreakdown, combine
from .errors import (
    ConfigurationError,
    ErrorPropagationError,
    ExpressionError,
    InputError,
)
from .measurement import Measurement, Validation, check_measurement, validate_variables
from .propagator import Differential, Propagator, Result
from .symbolic import SymbolicEngine, symbolic_engine

__all__ = [
    # Engine
    "Propagator",
    "Result",
    "Differential",
    # Combination
    "CorrelationMode",
    "ErrorBreakdown",
    "combine",
    # Measurements
    "Measurement",
    "Validation",
    "check_measurement",
    "validate_variables",
    # Symbolic adapter
    "SymbolicEngine",
    "symbolic_engine",
    # Errors
    "ErrorPropagationError",
    "InputError",
    "ExpressionError",
    "ConfigurationError",
]
