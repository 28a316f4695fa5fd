"""Tests for debug mode and numerical checks."""

import math

import numpy as np
import pytest

from krylovtr.diagnostics import (
    assert_finite,
    debug_context,
    is_debug_enabled,
    is_finite_scalar,
    model_value,
    set_debug_enabled,
)
from krylovtr.manifolds import Euclidean


def test_debug_mode_toggle_and_context() -> None:
    """Test debug mode toggling and context manager."""
    original = is_debug_enabled()

    try:
        set_debug_enabled(False)
        assert not is_debug_enabled()

        with debug_context(True):
            assert is_debug_enabled()

        assert not is_debug_enabled()

        set_debug_enabled(True)
        assert is_debug_enabled()

        with debug_context(False):
            assert not is_debug_enabled()

        assert is_debug_enabled()
    finally:
        set_debug_enabled(original)


def test_debug_context_restores_on_error() -> None:
    original = is_debug_enabled()
    try:
        set_debug_enabled(False)
        with pytest.raises(RuntimeError):
            with debug_context(True):
                raise RuntimeError("inside")
        assert not is_debug_enabled()
    finally:
        set_debug_enabled(original)


def test_finite_checks() -> None:
    assert is_finite_scalar(1.0)
    assert not is_finite_scalar(math.inf)
    assert assert_finite(np.float64(2.5), "value") == 2.5
    with pytest.raises(ValueError, match="Preconditioner"):
        assert_finite(math.nan, "Preconditioner")


def test_model_value() -> None:
    M = Euclidean(2)
    grad = np.array([1.0, 2.0])
    eta = np.array([-1.0, 0.5])
    heta = np.array([2.0, 1.0])
    assert model_value(M, None, grad, eta, heta) == pytest.approx(0.0 + 0.5 * (-1.5))
