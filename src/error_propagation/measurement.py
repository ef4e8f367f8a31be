"""Measurements and the validation of user-supplied variable maps."""

import keyword
import math
from collections.abc import Mapping
from dataclasses import dataclass
from numbers import Real
from typing import Any

from uncertainties import ufloat
from uncertainties.core import AffineScalarFunc

from .errors import InputError


@dataclass(frozen=True)
class Measurement:
    """A measured value together with its absolute (one sigma) uncertainty."""

    value: float
    error: float

    @classmethod
    def from_ufloat(cls, number: AffineScalarFunc) -> "Measurement":
        return cls(float(number.nominal_value), float(number.std_dev))

    def to_ufloat(self) -> AffineScalarFunc:
        return ufloat(self.value, self.error)


@dataclass(frozen=True)
class Validation:
    """Outcome of checking a single variable entry."""

    valid: bool
    reason: str | None = None
    measurement: Measurement | None = None

    @classmethod
    def ok(cls, measurement: Measurement) -> "Validation":
        return cls(True, None, measurement)

    @classmethod
    def invalid(cls, reason: str) -> "Validation":
        return cls(False, reason)


def _is_finite_number(value: Any) -> bool:
    # bool is a subclass of int, but True is not a measurement
    if isinstance(value, bool) or not isinstance(value, Real):
        return False
    return math.isfinite(value)


def _fields(entry: Any) -> tuple[Any, Any] | None:
    """Pulls the raw (value, error) pair out of an entry, or None if it has no such fields."""
    if isinstance(entry, AffineScalarFunc):
        return entry.nominal_value, entry.std_dev
    if isinstance(entry, Mapping):
        if "value" not in entry or "error" not in entry:
            return None
        return entry["value"], entry["error"]
    if hasattr(entry, "value") and hasattr(entry, "error"):
        return entry.value, entry.error
    return None


def check_measurement(entry: Any) -> Validation:
    """Checks whether `entry` describes a valid measurement.

    Accepted are mappings with ``value`` and ``error`` keys, :class:`Measurement`
    instances (or any object with ``value`` and ``error`` attributes) and
    numbers from the ``uncertainties`` package.

    Parameters
    ----------
    entry: Any
        The candidate measurement.

    Returns
    -------
    Validation:
        A valid result carrying the :class:`Measurement`, or an invalid result
        carrying the reason.
    """
    if entry is None:
        return Validation.invalid("is None, expected a measurement")
    if isinstance(entry, (bool, str, Real)):
        return Validation.invalid(
            f"is a {type(entry).__name__}, expected a measurement with a value and an error"
        )

    fields = _fields(entry)
    if fields is None:
        return Validation.invalid("must have both a value and an error")

    value, error = fields
    if not _is_finite_number(value):
        return Validation.invalid(f"value {value!r} is not a finite number")
    if not _is_finite_number(error):
        return Validation.invalid(f"error {error!r} is not a finite number")
    if error < 0:
        return Validation.invalid(f"error {error!r} is negative")

    return Validation.ok(Measurement(float(value), float(error)))


def validate_variables(variables: Mapping[str, Any] | None) -> dict[str, Measurement]:
    """Validates a variable map and converts its entries to measurements.

    Parameters
    ----------
    variables: Mapping[str, Any] or None
        Variable name to measurement. ``None`` means the expression has no
        variables.

    Returns
    -------
    dict[str, Measurement]:
        The validated measurements, keyed by variable name.

    Raises
    ------
    InputError:
        On the first entry that is not a valid measurement, or on a name the
        parser cannot read as a symbol (Python keywords such as ``lambda``).
    """
    if variables is None:
        return {}
    if not isinstance(variables, Mapping):
        raise InputError(
            f"variables must be a mapping of names to measurements, got {type(variables).__name__}"
        )

    measurements = {}
    for name, entry in variables.items():
        if not isinstance(name, str) or not name:
            raise InputError(f"variable names must be non-empty strings, got {name!r}")
        if keyword.iskeyword(name):
            raise InputError(
                f"variable name {name!r} is a Python keyword and cannot appear in an expression"
            )

        validation = check_measurement(entry)
        if not validation.valid:
            raise InputError(f"variable {name!r} {validation.reason}")
        measurements[name] = validation.measurement

    return measurements
