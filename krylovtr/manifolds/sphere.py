"""Unit sphere embedded in R^n."""

from __future__ import annotations

from typing import Optional

import numpy as np


class Sphere:
    """
    Unit sphere ``{x in R^n : ||x|| = 1}`` with the metric inherited from R^n.

    The tangent space at ``x`` is the orthogonal complement of ``x``;
    tangentialization is the orthogonal projection onto it. The retraction
    normalizes ``x + v`` and the vector transport re-projects at the new point.
    """

    def __init__(self, n: int) -> None:
        if int(n) < 2:
            raise ValueError(f"Sphere requires an ambient dimension of at least 2, got {n}.")
        self.n = int(n)

    def __repr__(self) -> str:
        return f"Sphere({self.n})"

    def dimension(self) -> int:
        return self.n - 1

    def inner_product(self, x: np.ndarray, u: np.ndarray, v: np.ndarray) -> float:
        return float(np.dot(u, v))

    def norm(self, x: np.ndarray, u: np.ndarray) -> float:
        return float(np.linalg.norm(u))

    def tangentialize(self, x: np.ndarray, v: np.ndarray) -> np.ndarray:
        v = np.asarray(v, dtype=float)
        return v - np.dot(x, v) * x

    def zero_vector(self, x: np.ndarray) -> np.ndarray:
        return np.zeros(self.n)

    def random_point(self, rng: Optional[np.random.Generator] = None) -> np.ndarray:
        rng = rng if rng is not None else np.random.default_rng()
        x = rng.standard_normal(self.n)
        return x / np.linalg.norm(x)

    def random_tangent_vector(
        self, x: np.ndarray, rng: Optional[np.random.Generator] = None
    ) -> np.ndarray:
        rng = rng if rng is not None else np.random.default_rng()
        v = self.tangentialize(x, rng.standard_normal(self.n))
        return v / np.linalg.norm(v)

    def lincomb(self, x, a, u, b=None, v=None) -> np.ndarray:
        if v is None:
            return a * u
        return a * u + b * v

    def retraction(self, x: np.ndarray, v: np.ndarray) -> np.ndarray:
        y = x + v
        return y / np.linalg.norm(y)

    def transport(self, x: np.ndarray, y: np.ndarray, v: np.ndarray) -> np.ndarray:
        return self.tangentialize(y, v)

    def egrad_to_rgrad(self, x: np.ndarray, egrad: np.ndarray) -> np.ndarray:
        """Riemannian gradient from the Euclidean gradient of an extension."""
        return self.tangentialize(x, egrad)

    def ehess_to_rhess(
        self, x: np.ndarray, egrad: np.ndarray, ehess: np.ndarray, u: np.ndarray
    ) -> np.ndarray:
        """
        Riemannian Hessian-vector product from Euclidean derivatives.

        ``Hess f(x)[u] = P_x(ehess[u]) - <x, egrad> u``.
        """
        return self.tangentialize(x, ehess) - np.dot(x, egrad) * u


__all__ = ["Sphere"]
