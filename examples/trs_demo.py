"""
Example: Trust-region subproblems with the Lanczos (GLTR) solver

Solves three small subproblems: an interior Newton step, a step cut off by the
trust-region boundary, and a step along a direction of negative curvature.
A fourth subproblem lives on the unit sphere with a Rayleigh-quotient cost.
"""

import numpy as np

from krylovtr import (
    Euclidean,
    Problem,
    Sphere,
    TRSInput,
    print_header,
    trs_lanczos,
)


def solve_and_report(title, problem, trs_input):
    print("=" * 60)
    print(title)
    print("=" * 60)
    out = trs_lanczos(problem, trs_input)
    print(print_header())
    print(out.printstr)
    print(f"eta = {out.eta}")
    print(f"||eta|| = {np.linalg.norm(out.eta):.6f} (radius {trs_input.radius})")
    print(f"Limited by trust region: {out.limited_by_tr}")
    print(f"Model value: {out.model_value:.6f}")
    print()
    return out


def main():
    H = np.eye(2)
    euclid = Problem(manifold=Euclidean(2), hess=lambda x, d: H @ d)
    x0 = np.zeros(2)
    g = np.array([1.0, 0.0])
    solve_and_report("Example 1: Interior Newton step", euclid, TRSInput(x0, g, 10.0))
    solve_and_report("Example 2: Boundary step", euclid, TRSInput(x0, g, 0.5))

    H_indef = np.diag([-1.0, 1.0])
    indefinite = Problem(manifold=Euclidean(2), hess=lambda x, d: H_indef @ d)
    solve_and_report(
        "Example 3: Negative curvature", indefinite, TRSInput(x0, g, 2.0)
    )

    # Rayleigh quotient f(x) = x^T A x on the sphere.
    A = np.diag([3.0, 2.0, 1.0, -1.0])
    sphere = Sphere(4)
    x = np.ones(4) / 2.0
    egrad = 2 * A @ x
    rgrad = sphere.egrad_to_rgrad(x, egrad)
    rayleigh = Problem(
        manifold=sphere,
        hess=lambda p, u: sphere.ehess_to_rhess(p, 2 * A @ p, 2 * A @ u, u),
    )
    out = solve_and_report(
        "Example 4: Rayleigh quotient on the sphere", rayleigh, TRSInput(x, rgrad, 0.5)
    )
    print(f"Step tangent to the sphere: {abs(np.dot(x, out.eta)) < 1e-10}")


if __name__ == "__main__":
    main()
