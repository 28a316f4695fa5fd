"""Numerical sanity checks and model evaluation helpers."""

from __future__ import annotations

import math
from typing import Any


def is_finite_scalar(value: float) -> bool:
    """Return True if ``value`` is a finite real number."""
    return math.isfinite(float(value))


def assert_finite(value: float, what: str) -> float:
    """
    Assert that a scalar produced from callback output is finite.

    Parameters
    ----------
    value:
        Scalar to check, typically an inner product of callback output.
    what:
        Short description used in the error message.

    Returns
    -------
    float
        ``value`` converted to a Python float.

    Raises
    ------
    ValueError
        If the value is NaN or infinite.
    """
    value = float(value)
    if not is_finite_scalar(value):
        raise ValueError(f"{what} produced a non-finite value ({value}).")
    return value


def model_value(manifold: Any, point: Any, grad: Any, eta: Any, heta: Any) -> float:
    """
    Evaluate the quadratic model ``<eta, grad> + 0.5 <eta, Heta>``.

    The Hessian image ``heta`` is supplied by the caller so that no additional
    Hessian-vector product is needed.
    """
    return manifold.inner_product(point, eta, grad) + 0.5 * manifold.inner_product(
        point, eta, heta
    )


__all__ = ["is_finite_scalar", "assert_finite", "model_value"]
