import math
from unittest.mock import Mock

import pytest

from error_propagation import ExpressionError, InputError, Propagator, symbolic_engine


def test_series_with_constant_variable(propagator):
    results = propagator.calculate_series(
        "c*x",
        {
            "c": {"value": 3, "error": 0},
            "x": [{"value": 1, "error": 0.1}, {"value": 2, "error": 0.2}],
        },
        progress=False,
    )
    assert [r.value for r in results] == [3, 6]
    assert math.isclose(results[0].error, 0.3)
    assert math.isclose(results[1].error, 0.6)
    assert len(symbolic_engine.expressions()) == 0


def test_series_without_lists_is_one_row(propagator):
    results = propagator.calculate_series("x", {"x": {"value": 8, "error": 3}}, progress=False)
    assert len(results) == 1
    assert results[0].error == 3


def test_series_without_variables(propagator):
    results = propagator.calculate_series("5 + 3", progress=False)
    assert [r.value for r in results] == [8]


def test_series_lengths_must_match(propagator):
    with pytest.raises(InputError):
        propagator.calculate_series(
            "x+y",
            {
                "x": [{"value": 1, "error": 1}],
                "y": [{"value": 1, "error": 1}, {"value": 2, "error": 1}],
            },
            progress=False,
        )


def test_empty_series(propagator):
    assert propagator.calculate_series("x", {"x": []}, progress=False) == []


def test_series_emits_events_per_row():
    propagator = Propagator(correlation="correlated")
    listener = Mock()
    propagator.on("result", listener)
    propagator.calculate_series(
        "x",
        {"x": [{"value": v, "error": 1} for v in range(4)]},
        progress=False,
    )
    assert listener.call_count == 4


def test_get_rows_keeps_constants():
    rows = Propagator().get_rows({"a": 1, "b": [2, 3]})
    assert rows == [{"a": 1, "b": 2}, {"a": 1, "b": 3}]


def test_empty_series_still_checks_the_expression(propagator):
    listener = Mock()
    propagator.on("input", listener)
    with pytest.raises(ExpressionError):
        propagator.calculate_series("3-", {"x": []}, progress=False)
    listener.assert_called_once()
    assert len(symbolic_engine.expressions()) == 0


def test_empty_series_requires_an_expression(propagator):
    with pytest.raises(InputError):
        propagator.calculate_series("", {"x": []}, progress=False)
