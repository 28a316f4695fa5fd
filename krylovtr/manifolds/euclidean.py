"""Euclidean space with NumPy arrays as points and tangent vectors."""

from __future__ import annotations

from typing import Optional

import numpy as np


class Euclidean:
    """
    Euclidean space of real arrays with a fixed shape.

    Every array of the right shape is tangent at every point, so
    tangentialization only normalizes the dtype.

    Example
    -------
    >>> import numpy as np
    >>> M = Euclidean(3)
    >>> M.inner_product(None, np.ones(3), np.arange(3.0))
    3.0
    """

    def __init__(self, *shape: int) -> None:
        if len(shape) == 0:
            raise ValueError("Euclidean requires at least one dimension.")
        if any(int(s) <= 0 for s in shape):
            raise ValueError(f"Shape entries must be positive, got {shape}.")
        self.shape = tuple(int(s) for s in shape)

    def __repr__(self) -> str:
        return f"Euclidean{self.shape}"

    def dimension(self) -> int:
        return int(np.prod(self.shape))

    def inner_product(self, x: np.ndarray, u: np.ndarray, v: np.ndarray) -> float:
        return float(np.vdot(u, v))

    def norm(self, x: np.ndarray, u: np.ndarray) -> float:
        return float(np.linalg.norm(np.ravel(u)))

    def tangentialize(self, x: np.ndarray, v: np.ndarray) -> np.ndarray:
        return np.asarray(v, dtype=float).reshape(self.shape)

    def zero_vector(self, x: np.ndarray) -> np.ndarray:
        return np.zeros(self.shape)

    def random_point(self, rng: Optional[np.random.Generator] = None) -> np.ndarray:
        rng = rng if rng is not None else np.random.default_rng()
        return rng.standard_normal(self.shape)

    def random_tangent_vector(
        self, x: np.ndarray, rng: Optional[np.random.Generator] = None
    ) -> np.ndarray:
        rng = rng if rng is not None else np.random.default_rng()
        v = rng.standard_normal(self.shape)
        return v / np.linalg.norm(np.ravel(v))

    def lincomb(self, x, a, u, b=None, v=None) -> np.ndarray:
        if v is None:
            return a * u
        return a * u + b * v

    def retraction(self, x: np.ndarray, v: np.ndarray) -> np.ndarray:
        return x + v

    def transport(self, x: np.ndarray, y: np.ndarray, v: np.ndarray) -> np.ndarray:
        return v


__all__ = ["Euclidean"]
