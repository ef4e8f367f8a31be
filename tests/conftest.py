"""Pytest configuration for repository-relative imports."""

import os
import sys

import pytest

ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "src"))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

from error_propagation import Propagator, symbolic_engine  # noqa: E402


@pytest.fixture(autouse=True)
def clean_symbolic_engine():
    symbolic_engine.clear()
    yield symbolic_engine


@pytest.fixture
def propagator():
    return Propagator()


@pytest.fixture
def xy():
    return {
        "x": {"value": 8, "error": 3},
        "y": {"value": 15, "error": 7},
    }
