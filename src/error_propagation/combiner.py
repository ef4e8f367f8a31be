from collections.abc import Sequence
from dataclasses import asdict, dataclass
from enum import Enum

import numpy as np

from .errors import ConfigurationError
from .measurement import Measurement


class CorrelationMode(str, Enum):
    """How the per-variable error contributions are combined."""

    UNCORRELATED = "uncorrelated"
    CORRELATED = "correlated"
    BOTH = "both"

    @classmethod
    def parse(cls, mode: "CorrelationMode | str") -> "CorrelationMode":
        if isinstance(mode, cls):
            return mode
        if isinstance(mode, str):
            try:
                return cls(mode.strip().lower())
            except ValueError:
                pass
        choices = ", ".join(member.value for member in cls)
        raise ConfigurationError(f"unknown correlation mode {mode!r}, expected one of {choices}")


@dataclass(frozen=True)
class ErrorBreakdown:
    """Total error under both correlation assumptions."""

    correlated: float
    uncorrelated: float

    def to_dict(self) -> dict[str, float]:
        return asdict(self)


def combine(
    contributions: Sequence[tuple[float, Measurement]],
    mode: CorrelationMode = CorrelationMode.UNCORRELATED,
) -> float | ErrorBreakdown:
    """Combines the per-variable error contributions into a total error.

    For the contributions ``(df/dx_i, x_i)`` the uncorrelated error is

    $$
    \\sqrt{\\sum_i \\left(\\frac{\\partial f}{\\partial x_i} \\cdot \\sigma_{x_i}\\right)^2}
    $$

    and the correlated (worst case) error is the linear sum
    $\\sum_i \\left|\\frac{\\partial f}{\\partial x_i}\\right| \\sigma_{x_i}$.

    Parameters
    ----------
    contributions: Sequence[tuple[float, Measurement]]
        The derivative evaluated at the measured point, paired with the
        measurement of the variable it was taken against.
    mode: CorrelationMode
        Which combination to use. ``BOTH`` returns an :class:`ErrorBreakdown`.

    Returns
    -------
    float or ErrorBreakdown:
        The combined error. NaN and infinite contributions propagate.
    """
    mode = CorrelationMode.parse(mode)

    terms = np.array(
        [derivative * measurement.error for derivative, measurement in contributions],
        dtype=float,
    )
    correlated = float(np.sum(np.abs(terms)))
    uncorrelated = float(np.hypot.reduce(np.abs(terms), initial=0.0))

    if mode is CorrelationMode.CORRELATED:
        return correlated
    if mode is CorrelationMode.BOTH:
        return ErrorBreakdown(correlated=correlated, uncorrelated=uncorrelated)
    return uncorrelated
