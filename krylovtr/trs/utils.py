"""Callback dispatch and finite-difference Hessian approximation."""

from __future__ import annotations

from typing import Optional

from ..manifolds.base import Point, TangentVector, supports_finite_differences
from .core import Problem

# Step length of the finite-difference Hessian, relative to ||d||.
FD_EPS = 2.0**-14


def approx_hessian_vector(
    problem: Problem,
    x: Point,
    d: TangentVector,
    grad_x: Optional[TangentVector] = None,
    eps: float = FD_EPS,
) -> TangentVector:
    """Approximate ``Hess f(x)[d]`` by a forward difference of the gradient.

    The gradient is evaluated at ``R_x(t d)`` with ``t = eps / ||d||`` and
    transported back to the tangent space at ``x``. The result is not linear
    in ``d``, which the solvers detect through a model increase.

    Parameters
    ----------
    problem:
        Problem providing ``grad`` and a manifold with ``retraction`` and
        ``transport``.
    x:
        Point where the Hessian is approximated.
    d:
        Tangent direction.
    grad_x:
        Gradient at ``x`` if already known.
    eps:
        Perturbation size for finite differences.
    """
    if eps <= 0:
        raise ValueError("eps must be positive")
    if problem.grad is None:
        raise ValueError("Finite-difference Hessian requires problem.grad.")
    manifold = problem.manifold
    if not supports_finite_differences(manifold):
        raise ValueError(
            f"{manifold!r} provides no retraction/transport for finite differences."
        )
    norm_d = manifold.norm(x, d)
    if norm_d == 0:
        return manifold.zero_vector(x)
    t = eps / norm_d
    if grad_x is None:
        grad_x = problem.grad(x)
    x1 = manifold.retraction(x, manifold.lincomb(x, t, d))
    grad_x1 = manifold.transport(x1, x, problem.grad(x1))
    return manifold.lincomb(x, 1.0 / t, grad_x1, -1.0 / t, grad_x)


def get_hessian(
    problem: Problem,
    x: Point,
    d: TangentVector,
    grad_x: Optional[TangentVector] = None,
) -> TangentVector:
    """Hessian-vector product, falling back to finite differences of the gradient."""
    if problem.hess is not None:
        return problem.hess(x, d)
    return approx_hessian_vector(problem, x, d, grad_x=grad_x)


def get_precon(problem: Problem, x: Point, r: TangentVector) -> TangentVector:
    """Apply the preconditioner, or return ``r`` when none is configured."""
    if problem.precon is None:
        return r
    return problem.precon(x, r)


__all__ = ["FD_EPS", "approx_hessian_vector", "get_hessian", "get_precon"]
