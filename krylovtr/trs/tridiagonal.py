"""Symmetric tridiagonal storage and the small dense trust-region leaf solver.

The Lanczos process reduces the subproblem to

    minimize  <h, g> + 0.5 h^T T h    subject to  ||h|| <= Delta

with ``T`` symmetric tridiagonal and ``g`` a multiple of ``e_1``. Since ``T``
is only as large as the number of inner iterations, it is solved essentially
exactly: an eigendecomposition of ``T`` followed by a safeguarded Newton
iteration on the secular equation ``1/||p(lambda)|| = 1/Delta`` with
``p(lambda) = -(T + lambda I)^{-1} g``, and an explicit treatment of the hard
case where ``T + lambda I`` is singular at the solution.

References:
    - Moré & Sorensen, *Computing a trust region step*, SIAM J. Sci. Stat.
      Comput. 4 (1983)
    - Nocedal & Wright, *Numerical Optimization* (2006), section 4.3
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Union

import numpy as np

from ..logging import get_logger

logger = get_logger(__name__)

_EPS = np.finfo(float).eps
# Relative tolerance of the accuracy diagnostics.
_ACCURACY_RTOL = 1e-8
# Components of g below this fraction of ||g|| count as zero in the hard-case test.
_HARD_CASE_RTOL = np.sqrt(_EPS)


class TridiagonalMatrix:
    """
    Symmetric tridiagonal matrix stored as two parallel arrays.

    Rows are appended one at a time: the ``j``-th call to :meth:`append`
    writes ``T[j, j]`` and, for ``j > 1``, ``T[j-1, j] = T[j, j-1]``.
    Written entries are never modified afterwards.
    """

    def __init__(self, capacity: int) -> None:
        if capacity <= 0:
            raise ValueError(f"capacity must be positive, got {capacity}.")
        self._diag = np.zeros(capacity)
        self._offdiag = np.zeros(capacity - 1)
        self._size = 0

    @property
    def capacity(self) -> int:
        return self._diag.size

    def __len__(self) -> int:
        return self._size

    @property
    def diagonal(self) -> np.ndarray:
        return self._diag[: self._size].copy()

    @property
    def offdiagonal(self) -> np.ndarray:
        return self._offdiag[: max(self._size - 1, 0)].copy()

    def append(self, diagonal: float, offdiagonal: Optional[float] = None) -> None:
        """Write the next diagonal entry and its coupling to the previous row."""
        j = self._size
        if j == self.capacity:
            raise ValueError(f"Tridiagonal matrix is full (capacity {self.capacity}).")
        if j == 0:
            if offdiagonal is not None:
                raise ValueError("The first row has no off-diagonal entry.")
        else:
            if offdiagonal is None:
                raise ValueError(f"Row {j + 1} needs an off-diagonal entry.")
            self._offdiag[j - 1] = offdiagonal
        self._diag[j] = diagonal
        self._size += 1

    def leading(self, k: Optional[int] = None) -> np.ndarray:
        """Dense copy of the leading ``k x k`` principal submatrix (default: all rows)."""
        k = self._size if k is None else k
        if not 0 < k <= self._size:
            raise ValueError(f"Cannot extract a {k}x{k} block from {self._size} rows.")
        e = self._offdiag[: k - 1]
        return np.diag(self._diag[:k]) + np.diag(e, 1) + np.diag(e, -1)

    def to_dense(self) -> np.ndarray:
        return self.leading()


@dataclass(frozen=True)
class TridiagonalTRSResult:
    """
    Solution of the reduced trust-region problem.

    Attributes:
        h: Minimizer in the coordinates of the reduced problem.
        limited_by_tr: True if ``||h|| = Delta`` (boundary solution).
        trouble: True if the hard case was met or the Newton iteration did
            not converge within its budget.
        accurate: True if the KKT residual and the boundary error are small.
        multiplier: Lagrange multiplier ``lambda >= 0``.
        iterations: Number of secular-equation iterations.
    """

    h: np.ndarray
    limited_by_tr: bool
    trouble: bool
    accurate: bool
    multiplier: float
    iterations: int


def _check_accuracy(
    mat: np.ndarray, g: np.ndarray, h: np.ndarray, lam: float, radius: float, boundary: bool
) -> bool:
    residual = np.linalg.norm(mat @ h + lam * h + g)
    scale = max(1.0, np.linalg.norm(g) + (np.abs(mat).max() + lam) * np.linalg.norm(h))
    if not residual <= _ACCURACY_RTOL * scale:
        return False
    if boundary:
        return abs(np.linalg.norm(h) - radius) <= _ACCURACY_RTOL * radius
    return True


def _secular_newton(
    evals: np.ndarray,
    b: np.ndarray,
    radius: float,
    lo: float,
    hi: float,
    maxiter: int,
    tol: float,
) -> tuple[float, int, bool]:
    """
    Find ``lam`` in ``(lo, hi]`` with ``||b / (evals + lam)|| = radius``.

    Newton's method on ``1/||p|| - 1/radius``, kept inside the bracket by
    bisection. Returns the root, the iteration count and a convergence flag.
    """
    rtol = max(tol, 1e3 * _EPS)
    lam = hi
    for it in range(1, maxiter + 1):
        denom = evals + lam
        if np.any(denom <= 0):
            norm_p = np.inf
        else:
            norm_p = np.linalg.norm(b / denom)
        if abs(norm_p - radius) <= rtol * radius:
            return lam, it, True
        if norm_p > radius:
            lo = lam
        else:
            hi = lam
        if hi - lo <= 4 * _EPS * max(1.0, abs(lo), abs(hi)):
            return lam, it, True
        if np.isfinite(norm_p):
            q_sq = np.sum(b * b / denom**3)
            candidate = lam + (norm_p - radius) / radius * norm_p**2 / q_sq
        else:
            candidate = np.nan
        if not lo < candidate < hi:
            candidate = 0.5 * (lo + hi)
        if abs(candidate - lam) <= _EPS * max(1.0, abs(lam)):
            return candidate, it, True
        lam = candidate
    return lam, maxiter, False


def solve_tridiagonal_trs(
    T: Union[TridiagonalMatrix, np.ndarray],
    g: np.ndarray,
    radius: float,
    maxiter: int = 100,
    tol: float = 1e-16,
) -> TridiagonalTRSResult:
    """
    Solve ``min <h, g> + 0.5 h^T T h`` subject to ``||h|| <= radius``.

    Parameters
    ----------
    T:
        Symmetric matrix, either a :class:`TridiagonalMatrix` or a dense array.
    g:
        Linear term of the model.
    radius:
        Trust-region radius.
    maxiter:
        Iteration cap of the secular-equation solver.
    tol:
        Relative tolerance on ``||h|| - radius`` for boundary solutions.

    Returns
    -------
    TridiagonalTRSResult
        The minimizer and its diagnostics. Numerical difficulties are
        reported through ``trouble`` and ``accurate``, never raised.
    """
    mat = T.to_dense() if isinstance(T, TridiagonalMatrix) else np.asarray(T, dtype=float)
    if mat.ndim != 2 or mat.shape[0] != mat.shape[1] or mat.shape[0] == 0:
        raise ValueError(f"Expected a non-empty square matrix, got shape {mat.shape}.")
    n = mat.shape[0]
    g = np.asarray(g, dtype=float).reshape(-1)
    if g.size != n:
        raise ValueError(f"Expected g of shape ({n},), got {g.shape}.")
    if not radius > 0:
        raise ValueError(f"radius must be positive, got {radius}.")
    if maxiter <= 0:
        raise ValueError(f"maxiter must be positive, got {maxiter}.")

    mat = 0.5 * (mat + mat.T)
    evals, evecs = np.linalg.eigh(mat)
    b = evecs.T @ g
    g_norm = np.linalg.norm(b)
    lam_min = evals[0]

    # Interior solution: T positive definite and the Newton step fits.
    if lam_min > 0:
        x = -b / evals
        if np.linalg.norm(x) <= radius:
            h = evecs @ x
            return TridiagonalTRSResult(
                h=h,
                limited_by_tr=False,
                trouble=False,
                accurate=_check_accuracy(mat, g, h, 0.0, radius, boundary=False),
                multiplier=0.0,
                iterations=0,
            )

    lo = max(0.0, -lam_min)
    hard_case = False
    iterations = 0
    converged = True

    if lam_min <= 0:
        gap_tol = _HARD_CASE_RTOL * max(1.0, np.abs(evals).max())
        leftmost = evals - lam_min <= gap_tol
        if np.linalg.norm(b[leftmost]) <= _HARD_CASE_RTOL * g_norm:
            x = np.zeros(n)
            rest = ~leftmost
            x[rest] = -b[rest] / (evals[rest] + lo)
            norm_x = np.linalg.norm(x)
            if norm_x <= radius:
                # Shifted system singular at the boundary: move along the
                # leftmost eigenvector until the constraint is active.
                tau = np.sqrt(max(radius**2 - norm_x**2, 0.0))
                x[0] = -tau if b[0] > 0 else tau
                hard_case = True
                lam = lo

    if not hard_case:
        hi = max(lo, g_norm / radius - lam_min)
        lam, iterations, converged = _secular_newton(
            evals, b, radius, lo, hi, maxiter, tol
        )
        x = -b / (evals + lam)

    h = evecs @ x
    accurate = _check_accuracy(mat, g, h, lam, radius, boundary=True)
    trouble = hard_case or not converged
    if trouble or not accurate:
        logger.debug(
            "Tridiagonal TRS of size %d: hard_case=%s converged=%s accurate=%s lambda=%.3e",
            n,
            hard_case,
            converged,
            accurate,
            lam,
        )
    return TridiagonalTRSResult(
        h=h,
        limited_by_tr=True,
        trouble=trouble,
        accurate=accurate,
        multiplier=float(lam),
        iterations=iterations,
    )


__all__ = ["TridiagonalMatrix", "TridiagonalTRSResult", "solve_tridiagonal_trs"]
