"""Core interfaces shared by the trust-region subproblem solvers.

A subproblem solve receives a :class:`Problem` (the manifold plus the
Hessian-vector and preconditioner callbacks), a :class:`TRSInput` (current
point, gradient and radius) and :class:`TRSOptions`, and returns a
:class:`TRSOutput` consumed by the outer trust-region driver.

References:
    - Gould, Lucidi, Roma & Toint, *Solving the trust-region subproblem using
      the Lanczos method*, SIAM J. Optim. 9 (1999)
    - Conn, Gould & Toint, *Trust-Region Methods* (2000), chapter 7
"""

from __future__ import annotations

import math
from dataclasses import dataclass, fields, replace
from enum import Enum
from typing import Any, Callable, Mapping, Optional

from ..logging import get_logger
from ..manifolds.base import Manifold, Point, TangentVector

logger = get_logger(__name__)

HessianVector = Callable[[Point, TangentVector], TangentVector]
Preconditioner = Callable[[Point, TangentVector], TangentVector]
Gradient = Callable[[Point], TangentVector]


class StopReason(Enum):
    """Why the inner iteration stopped."""

    MAX_INNER = "maximum inner iterations"
    MODEL_INCREASED = "model increased"
    KAPPA = "reached target residual-kappa (linear)"
    THETA = "reached target residual-theta (superlinear)"
    EXHAUSTED = "Krylov subspace exhausted"
    BREAKDOWN = "Lanczos breakdown (zero curvature)"
    ZERO_GRADIENT = "zero gradient"


@dataclass(frozen=True)
class Problem:
    """
    Container describing the collaborators of a subproblem solve.

    Attributes:
        manifold: Object implementing the :class:`~krylovtr.manifolds.Manifold`
            capabilities.
        hess: Hessian-vector product ``hess(x, d)``. May be an approximation.
        precon: Preconditioner ``precon(x, r)``; identity when omitted. It must
            be symmetric positive definite on the tangent space.
        grad: Riemannian gradient ``grad(x)``. Only used to approximate
            Hessian-vector products by finite differences when ``hess`` is
            not available.
    """

    manifold: Manifold
    hess: Optional[HessianVector] = None
    precon: Optional[Preconditioner] = None
    grad: Optional[Gradient] = None

    def __post_init__(self) -> None:
        if self.hess is None and self.grad is None:
            raise ValueError(
                "Problem needs a Hessian-vector product (hess) or a gradient "
                "(grad) to approximate it."
            )


@dataclass(frozen=True)
class TRSInput:
    """Current outer iterate: point ``x``, gradient at ``x`` and radius ``Delta``."""

    point: Point
    grad: TangentVector
    radius: float


@dataclass(frozen=True)
class TRSOptions:
    """
    Options of the Lanczos subproblem solver.

    Attributes:
        kappa: Linear convergence factor of the residual stopping test.
        theta: Superlinear convergence exponent of the residual stopping test.
        mininner: Minimum number of inner iterations before stopping early.
        maxinner: Maximum number of inner iterations; ``None`` means the
            manifold dimension. Always capped at the manifold dimension.
        maxiter_newton: Iteration cap of the tridiagonal leaf solver.
        tol_newton: Relative tolerance of the tridiagonal leaf solver.
        debug: Verbosity; values above 2 log every inner iteration.
    """

    kappa: float = 0.1
    theta: float = 1.0
    mininner: int = 1
    maxinner: Optional[int] = None
    maxiter_newton: int = 100
    tol_newton: float = 1e-16
    debug: int = 0

    def __post_init__(self) -> None:
        if not self.kappa > 0:
            raise ValueError(f"kappa must be positive, got {self.kappa}.")
        if not self.theta >= 0:
            raise ValueError(f"theta must be non-negative, got {self.theta}.")
        if self.mininner < 0:
            raise ValueError(f"mininner must be non-negative, got {self.mininner}.")
        if self.maxinner is not None and self.maxinner <= 0:
            raise ValueError(f"maxinner must be positive, got {self.maxinner}.")
        if self.maxiter_newton <= 0:
            raise ValueError(
                f"maxiter_newton must be positive, got {self.maxiter_newton}."
            )
        if not self.tol_newton >= 0:
            raise ValueError(f"tol_newton must be non-negative, got {self.tol_newton}.")

    @classmethod
    def from_mapping(cls, options: Optional[Mapping[str, Any]] = None) -> "TRSOptions":
        """Merge user options over the defaults; unknown keys are ignored with a warning."""
        if options is None:
            return cls()
        known = {f.name for f in fields(cls)}
        for key in options:
            if key not in known:
                logger.warning("Ignoring unrecognized option %r.", key)
        return cls(**{k: v for k, v in options.items() if k in known})

    def resolve(self, dimension: int) -> "TRSOptions":
        """Return a copy with ``maxinner`` set and capped at ``dimension``."""
        if dimension <= 0:
            raise ValueError(f"Manifold dimension must be positive, got {dimension}.")
        maxinner = dimension if self.maxinner is None else min(self.maxinner, dimension)
        return replace(self, maxinner=maxinner)


@dataclass(frozen=True)
class TRSStats:
    """Inner iteration count and number of Hessian-vector products."""

    num_inner: int = 0
    hessvec_evals: int = 0


@dataclass(frozen=True)
class TRSOutput:
    """
    Result of one subproblem solve.

    Attributes:
        eta: Approximate minimizer of the model (tangent vector).
        Heta: Hessian-vector image of ``eta``.
        limited_by_tr: True if ``eta`` lies on the trust-region boundary.
        status: Enumeration describing the exit.
        stop_reason: Human-readable exit description.
        stats: Iteration statistics.
        model_value: Model value ``<eta, grad> + 0.5 <eta, Heta>``.
    """

    eta: TangentVector
    Heta: TangentVector
    limited_by_tr: bool
    status: StopReason
    stop_reason: str
    stats: TRSStats
    model_value: float = math.nan

    @property
    def printstr(self) -> str:
        return "%9d   %9d   %s" % (
            self.stats.num_inner,
            self.stats.hessvec_evals,
            self.stop_reason,
        )


def print_header() -> str:
    """Column header matching :attr:`TRSOutput.printstr`."""
    return "%9s   %9s   %s" % ("numinner", "hessvec", "stopreason")


def initial_stats() -> TRSStats:
    """Statistics reported before any subproblem has been solved."""
    return TRSStats(num_inner=0, hessvec_evals=0)


def validate_input(trs_input: TRSInput) -> float:
    """Return the radius as a float, rejecting non-positive or non-finite values."""
    radius = float(trs_input.radius)
    if not (math.isfinite(radius) and radius > 0):
        raise ValueError(f"Trust-region radius must be positive and finite, got {radius}.")
    return radius


__all__ = [
    "HessianVector",
    "Preconditioner",
    "Gradient",
    "StopReason",
    "Problem",
    "TRSInput",
    "TRSOptions",
    "TRSStats",
    "TRSOutput",
    "print_header",
    "initial_stats",
    "validate_input",
]
