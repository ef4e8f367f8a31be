import math

import pytest

from error_propagation import (
    ConfigurationError,
    CorrelationMode,
    ErrorBreakdown,
    Measurement,
    combine,
)

CONTRIBUTIONS = [
    (1.0, Measurement(8, 3)),
    (-1.0, Measurement(15, 4)),
]


def test_uncorrelated_is_quadrature_sum():
    assert combine(CONTRIBUTIONS, CorrelationMode.UNCORRELATED) == 5


def test_uncorrelated_is_default():
    assert combine(CONTRIBUTIONS) == 5


def test_correlated_is_linear_sum_of_magnitudes():
    assert combine(CONTRIBUTIONS, CorrelationMode.CORRELATED) == 7


def test_both():
    assert combine(CONTRIBUTIONS, "both") == ErrorBreakdown(correlated=7, uncorrelated=5)


def test_single_contribution_is_the_same_in_every_mode():
    contributions = [(-16.0, Measurement(8, 3))]
    assert combine(contributions, "uncorrelated") == 48
    assert combine(contributions, "correlated") == 48


def test_no_contributions():
    assert combine([]) == 0


def test_nan_and_inf_propagate():
    assert math.isnan(combine([(math.nan, Measurement(1, 1))]))
    assert math.isinf(combine([(math.inf, Measurement(1, 1))], "correlated"))


def test_mode_parsing():
    assert CorrelationMode.parse("UNCORRELATED") is CorrelationMode.UNCORRELATED
    assert CorrelationMode.parse(CorrelationMode.BOTH) is CorrelationMode.BOTH


@pytest.mark.parametrize("mode", ["linear", "", None, 1])
def test_unknown_modes(mode):
    with pytest.raises(ConfigurationError):
        CorrelationMode.parse(mode)


def test_breakdown_to_dict():
    assert ErrorBreakdown(7.0, 5.0).to_dict() == {"correlated": 7.0, "uncorrelated": 5.0}


def test_large_finite_contributions_do_not_overflow():
    error = combine([(1e200, Measurement(1, 1)), (1e200, Measurement(1, 1))])
    assert math.isfinite(error)
    assert math.isclose(error, math.sqrt(2) * 1e200)
    assert combine([(-1e200, Measurement(1, 1))]) == 1e200
