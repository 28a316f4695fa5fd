"""
Trust-region subproblem solvers.

Example
-------
>>> import numpy as np
>>> from krylovtr.manifolds import Euclidean
>>> from krylovtr.trs import Problem, TRSInput, trs_lanczos
>>> H = np.diag([1.0, 1.0])
>>> problem = Problem(manifold=Euclidean(2), hess=lambda x, d: H @ d)
>>> out = trs_lanczos(problem, TRSInput(point=np.zeros(2), grad=np.array([1.0, 0.0]), radius=10.0))
>>> out.eta
array([-1.,  0.])
>>> out.limited_by_tr
False
"""

from . import basis, core, lanczos, tridiagonal, utils
from .basis import KrylovBasis
from .core import (
    Problem,
    StopReason,
    TRSInput,
    TRSOptions,
    TRSOutput,
    TRSStats,
    initial_stats,
    print_header,
)
from .lanczos import trs_lanczos
from .tridiagonal import TridiagonalMatrix, TridiagonalTRSResult, solve_tridiagonal_trs
from .utils import approx_hessian_vector, get_hessian, get_precon

__all__ = [
    "basis",
    "core",
    "lanczos",
    "tridiagonal",
    "utils",
    # Core types
    "Problem",
    "StopReason",
    "TRSInput",
    "TRSOptions",
    "TRSOutput",
    "TRSStats",
    "initial_stats",
    "print_header",
    # Building blocks
    "KrylovBasis",
    "TridiagonalMatrix",
    "TridiagonalTRSResult",
    # Solvers
    "trs_lanczos",
    "solve_tridiagonal_trs",
    "approx_hessian_vector",
    "get_hessian",
    "get_precon",
]
