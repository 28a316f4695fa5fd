"""Generalized Lanczos trust-region (GLTR) subproblem solver.

The iteration is preconditioned conjugate gradients on the tangent space
while the iterate stays inside the trust region and curvature is positive
(the interior phase). As a by-product it records the Lanczos vectors and the
tridiagonal matrix representing the Hessian on the Krylov subspace. Once CG
would leave the trust region or meets non-positive curvature, the solver
switches for good to the boundary phase: each iteration solves the small
tridiagonal trust-region problem instead, and the final step is rebuilt from
the stored Lanczos vectors.

References:
    - Gould, Lucidi, Roma & Toint, *Solving the trust-region subproblem using
      the Lanczos method*, SIAM J. Optim. 9 (1999)
    - Conn, Gould & Toint, *Trust-Region Methods* (2000), sections 7.5 and 17.4
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Mapping, Optional, Union

import numpy as np

from ..diagnostics import assert_finite, is_debug_enabled, model_value
from ..logging import get_logger
from ..manifolds.base import TangentVector
from .basis import KrylovBasis
from .core import (
    Problem,
    StopReason,
    TRSInput,
    TRSOptions,
    TRSOutput,
    TRSStats,
    validate_input,
)
from .tridiagonal import TridiagonalMatrix, TridiagonalTRSResult, solve_tridiagonal_trs
from .utils import get_hessian, get_precon

logger = get_logger(__name__)


@dataclass
class _LanczosState:
    """Running quantities of the inner iteration, updated once per iteration."""

    eta: TangentVector
    Heta: TangentVector
    r: TangentVector
    z: TangentVector
    mdelta: TangentVector
    Hmdelta: TangentVector
    z_r: float
    norm_r: float
    d_Hd: float
    alpha: float
    prev_alpha: float = math.nan
    beta: float = 0.0
    sigma: float = 1.0
    e_Pe: float = 0.0
    e_Pd: float = 0.0
    d_Pd: float = 0.0
    model_value: float = 0.0
    interior: bool = True


def _divide(num: float, den: float) -> float:
    """IEEE division: zero denominators give signed infinities instead of raising."""
    with np.errstate(divide="ignore", invalid="ignore"):
        return float(np.float64(num) / np.float64(den))


def _check_precon_product(z_r: float) -> float:
    z_r = assert_finite(z_r, "Preconditioner")
    if z_r < 0:
        raise ValueError(
            f"Preconditioner is not positive definite: <z, r> = {z_r:.3e} < 0."
        )
    return z_r


def _extend_lanczos(
    state: _LanczosState,
    j: int,
    T: TridiagonalMatrix,
    basis: KrylovBasis,
    problem: Problem,
    x: Any,
) -> None:
    """Append row ``j`` of ``T`` and the Lanczos vector ``Q_j``."""
    manifold = problem.manifold
    if j == 1:
        T.append(_divide(1.0, state.alpha))
        q = manifold.lincomb(x, 1.0 / math.sqrt(state.z_r), state.z)
        state.sigma = -math.copysign(1.0, state.alpha)
    else:
        offdiag = math.sqrt(state.beta) / abs(state.prev_alpha)
        T.append(_divide(1.0, state.alpha) + state.beta / state.prev_alpha, offdiag)
        q = manifold.lincomb(x, state.sigma / math.sqrt(state.z_r), state.z)
        state.sigma = -math.copysign(1.0, state.alpha) * state.sigma
    basis.append(manifold.tangentialize(x, q))


def trs_lanczos(
    problem: Problem,
    trs_input: TRSInput,
    options: Optional[Union[TRSOptions, Mapping[str, Any]]] = None,
) -> TRSOutput:
    """
    Approximately solve the trust-region subproblem with the GLTR method.

    Minimizes ``m(eta) = <eta, grad> + 0.5 <eta, H eta>`` over the tangent
    space at ``trs_input.point`` subject to ``||eta||_P <= Delta``, where the
    P-norm is induced by the inverse of the preconditioner.

    Parameters
    ----------
    problem:
        Manifold, Hessian-vector product and optional preconditioner.
    trs_input:
        Current point, gradient at that point, and trust-region radius.
    options:
        :class:`TRSOptions` or a mapping of option names to values.

    Returns
    -------
    TRSOutput
        Step ``eta``, its Hessian image, boundary flag, stop reason and
        statistics.

    Raises
    ------
    ValueError
        If the radius or the options are invalid, or a callback produces
        non-finite values. Exceptions raised by the callbacks propagate.
    """
    if options is None:
        options = TRSOptions()
    elif not isinstance(options, TRSOptions):
        options = TRSOptions.from_mapping(options)
    radius = validate_input(trs_input)
    manifold = problem.manifold
    options = options.resolve(manifold.dimension())
    maxinner = options.maxinner
    verbose = options.debug > 2 or is_debug_enabled()

    x = trs_input.point
    grad = trs_input.grad

    def inner(u: TangentVector, v: TangentVector) -> float:
        return manifold.inner_product(x, u, v)

    hessvec_evals = 0

    def hessian(d: TangentVector) -> TangentVector:
        nonlocal hessvec_evals
        hessvec_evals += 1
        return get_hessian(problem, x, d, grad_x=grad)

    r = grad
    norm_r0 = math.sqrt(inner(r, r))
    z = get_precon(problem, x, r)
    z_r = _check_precon_product(inner(z, r))

    if z_r == 0:
        zero = manifold.zero_vector(x)
        logger.debug("Zero gradient, returning the zero step.")
        return TRSOutput(
            eta=zero,
            Heta=manifold.zero_vector(x),
            limited_by_tr=False,
            status=StopReason.ZERO_GRADIENT,
            stop_reason=StopReason.ZERO_GRADIENT.value,
            stats=TRSStats(num_inner=0, hessvec_evals=0),
            model_value=0.0,
        )

    # Right-hand side scale of the reduced problem: grad = gamma_0 * P q_1.
    gamma_0 = math.sqrt(z_r)

    # The search direction is stored negated (mdelta = -delta).
    mdelta = z
    Hmdelta = hessian(mdelta)
    d_Hd = assert_finite(inner(mdelta, Hmdelta), "Hessian-vector product")

    state = _LanczosState(
        eta=manifold.zero_vector(x),
        Heta=manifold.zero_vector(x),
        r=r,
        z=z,
        mdelta=mdelta,
        Hmdelta=Hmdelta,
        z_r=z_r,
        norm_r=norm_r0,
        d_Hd=d_Hd,
        alpha=_divide(z_r, d_Hd),
        d_Pd=z_r,
    )

    T = TridiagonalMatrix(maxinner)
    basis = KrylovBasis(maxinner)
    leaf: Optional[TridiagonalTRSResult] = None
    status = StopReason.MAX_INNER
    # Overflows to inf for huge gradients, which selects kappa.
    with np.errstate(over="ignore"):
        theta_target = float(np.float64(norm_r0) ** options.theta)
    tolerance = norm_r0 * min(theta_target, options.kappa)
    j = 0

    for j in range(1, maxinner + 1):
        _extend_lanczos(state, j, T, basis, problem, x)
        alpha = state.alpha

        if verbose:
            logger.debug(
                "inner %d: (r,r) = %e, (d,Hd) = %e, alpha = %e",
                j,
                state.norm_r**2,
                state.d_Hd,
                alpha,
            )

        if state.interior:
            # <eta + alpha*delta, eta + alpha*delta>_P expanded in running P-products.
            e_Pe_new = state.e_Pe + 2.0 * alpha * state.e_Pd + alpha * alpha * state.d_Pd
            if alpha <= 0 or math.isinf(alpha) or e_Pe_new >= radius**2:
                state.interior = False
                logger.debug(
                    "inner %d: %s, switching to the boundary phase.",
                    j,
                    "non-positive curvature"
                    if alpha <= 0 or math.isinf(alpha)
                    else "trust-region boundary reached",
                )
            else:
                new_eta = manifold.lincomb(x, 1.0, state.eta, -alpha, state.mdelta)
                # Exact for a linear Hessian; saves a Hessian-vector product.
                new_Heta = manifold.lincomb(x, 1.0, state.Heta, -alpha, state.Hmdelta)
                new_model_value = model_value(manifold, x, grad, new_eta, new_Heta)
                if new_model_value >= state.model_value:
                    status = StopReason.MODEL_INCREASED
                    break
                state.e_Pe = e_Pe_new
                state.eta = new_eta
                state.Heta = new_Heta
                state.model_value = new_model_value

        if not state.interior:
            rhs = np.zeros(j)
            rhs[0] = gamma_0
            leaf = solve_tridiagonal_trs(
                T.leading(j),
                rhs,
                radius,
                maxiter=options.maxiter_newton,
                tol=options.tol_newton,
            )
            if math.isinf(alpha):
                status = StopReason.BREAKDOWN
                break

        state.r = manifold.lincomb(x, 1.0, state.r, -alpha, state.Hmdelta)
        state.norm_r = math.sqrt(inner(state.r, state.r))
        state.z = get_precon(problem, x, state.r)
        z_r_old = state.z_r
        state.z_r = _check_precon_product(inner(state.z, state.r))
        state.beta = state.z_r / z_r_old

        if state.interior:
            conv_test = state.norm_r
        else:
            # gamma_{j+1} |<e_j, h_j>|
            conv_test = math.sqrt(state.beta) / abs(alpha) * abs(leaf.h[-1])

        if j >= options.mininner and conv_test <= tolerance:
            if options.kappa < theta_target:
                status = StopReason.KAPPA
            else:
                status = StopReason.THETA
            break
        if state.z_r == 0:
            status = StopReason.EXHAUSTED
            break
        if j == maxinner:
            status = StopReason.MAX_INNER
            break

        state.mdelta = manifold.tangentialize(
            x, manifold.lincomb(x, 1.0, state.z, state.beta, state.mdelta)
        )
        state.e_Pd = state.beta * (state.e_Pd + alpha * state.d_Pd)
        state.d_Pd = state.z_r + state.beta * state.beta * state.d_Pd

        state.Hmdelta = hessian(state.mdelta)
        state.d_Hd = assert_finite(
            inner(state.mdelta, state.Hmdelta), "Hessian-vector product"
        )
        state.prev_alpha = alpha
        state.alpha = _divide(state.z_r, state.d_Hd)

    if state.interior:
        eta, Heta = state.eta, state.Heta
        limited_by_tr = False
        final_model_value = state.model_value
    else:
        # h holds coordinates in the Lanczos basis; map back to the tangent space.
        eta = manifold.tangentialize(x, basis.combine(manifold, x, leaf.h))
        Heta = hessian(eta)
        limited_by_tr = leaf.limited_by_tr
        final_model_value = model_value(manifold, x, grad, eta, Heta)

    stop_reason = status.value
    if status in (StopReason.KAPPA, StopReason.THETA):
        stop_reason += " tCG" if state.interior else " lanczos"

    output = TRSOutput(
        eta=eta,
        Heta=Heta,
        limited_by_tr=limited_by_tr,
        status=status,
        stop_reason=stop_reason,
        stats=TRSStats(num_inner=j, hessvec_evals=hessvec_evals),
        model_value=final_model_value,
    )
    logger.debug("%s", output.printstr)
    return output


__all__ = ["trs_lanczos"]
