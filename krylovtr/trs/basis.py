"""Storage for the Lanczos vectors generated during one subproblem solve."""

from __future__ import annotations

from typing import Any, List, Sequence

from ..manifolds.base import Manifold, Point, TangentVector, lincomb_many


class KrylovBasis:
    """
    Append-only arena of Lanczos vectors ``Q[0..j-1]``.

    Slots are preallocated to ``capacity`` (the inner iteration cap), and the
    vector produced at inner iteration ``j`` lives at index ``j - 1``.
    """

    def __init__(self, capacity: int) -> None:
        if capacity <= 0:
            raise ValueError(f"capacity must be positive, got {capacity}.")
        self._slots: List[Any] = [None] * capacity
        self._size = 0

    @property
    def capacity(self) -> int:
        return len(self._slots)

    def __len__(self) -> int:
        return self._size

    def __getitem__(self, index: int) -> TangentVector:
        if index < 0:
            index += self._size
        if not 0 <= index < self._size:
            raise IndexError(f"Krylov basis index {index} out of range ({self._size}).")
        return self._slots[index]

    def append(self, q: TangentVector) -> None:
        if self._size == len(self._slots):
            raise ValueError(f"Krylov basis is full (capacity {len(self._slots)}).")
        self._slots[self._size] = q
        self._size += 1

    def combine(self, manifold: Manifold, x: Point, coeffs: Sequence[float]) -> TangentVector:
        """Return ``sum_i coeffs[i] * Q[i]`` over the first ``len(coeffs)`` vectors."""
        k = len(coeffs)
        if k > self._size:
            raise ValueError(
                f"Got {k} coefficients but only {self._size} basis vectors are stored."
            )
        return lincomb_many(manifold, x, list(coeffs), self._slots[:k])


__all__ = ["KrylovBasis"]
