"""Capability interface consumed by the trust-region subproblem solvers.

Solvers never inspect tangent vectors directly; every operation on them goes
through a manifold object satisfying :class:`Manifold`. Concrete manifolds
are plain classes that implement these methods, no base class is required.
"""

from __future__ import annotations

from typing import Any, Optional, Protocol, runtime_checkable

Point = Any
TangentVector = Any


@runtime_checkable
class Manifold(Protocol):
    """Operations on the tangent space at a point of a Riemannian manifold."""

    def dimension(self) -> int:
        """Dimension of the tangent spaces."""
        ...

    def inner_product(self, x: Point, u: TangentVector, v: TangentVector) -> float:
        """Riemannian metric at ``x``."""
        ...

    def norm(self, x: Point, u: TangentVector) -> float:
        ...

    def tangentialize(self, x: Point, v: TangentVector) -> TangentVector:
        """Project an approximately tangent vector back onto the tangent space at ``x``."""
        ...

    def zero_vector(self, x: Point) -> TangentVector:
        ...

    def random_tangent_vector(self, x: Point) -> TangentVector:
        """Unit-norm random tangent vector at ``x``."""
        ...

    def lincomb(
        self,
        x: Point,
        a: float,
        u: TangentVector,
        b: Optional[float] = None,
        v: Optional[TangentVector] = None,
    ) -> TangentVector:
        """Return ``a*u`` or ``a*u + b*v``."""
        ...


def supports_finite_differences(manifold: Any) -> bool:
    """Return True if ``manifold`` provides a retraction and a vector transport."""
    return callable(getattr(manifold, "retraction", None)) and callable(
        getattr(manifold, "transport", None)
    )


def lincomb_many(manifold: Manifold, x: Point, coeffs, vectors) -> TangentVector:
    """
    Linear combination ``sum_i coeffs[i] * vectors[i]`` through the manifold.

    Raises
    ------
    ValueError
        If the number of coefficients and vectors differ or no vector is given.
    """
    if len(coeffs) != len(vectors):
        raise ValueError(
            f"Got {len(coeffs)} coefficients for {len(vectors)} tangent vectors."
        )
    if len(vectors) == 0:
        return manifold.zero_vector(x)
    total = manifold.lincomb(x, float(coeffs[0]), vectors[0])
    for coeff, vec in zip(coeffs[1:], vectors[1:]):
        total = manifold.lincomb(x, 1.0, total, float(coeff), vec)
    return total


__all__ = [
    "Manifold",
    "Point",
    "TangentVector",
    "lincomb_many",
    "supports_finite_differences",
]
