"""krylovtr - Krylov subspace solvers for Riemannian trust-region subproblems."""

__version__ = "0.1.0"

from .core import Device, default_device, device
from .diagnostics import debug_context, is_debug_enabled, set_debug_enabled
from .logging import configure_logging, get_logger, set_log_level
from .manifolds import Euclidean, Manifold, Sphere, TorchEuclidean
from .trs import (
    KrylovBasis,
    Problem,
    StopReason,
    TRSInput,
    TRSOptions,
    TRSOutput,
    TRSStats,
    TridiagonalMatrix,
    TridiagonalTRSResult,
    approx_hessian_vector,
    initial_stats,
    print_header,
    solve_tridiagonal_trs,
    trs_lanczos,
)

__all__ = [
    "__version__",
    # Devices
    "Device",
    "default_device",
    "device",
    # Diagnostics and logging
    "debug_context",
    "is_debug_enabled",
    "set_debug_enabled",
    "configure_logging",
    "get_logger",
    "set_log_level",
    # Manifolds
    "Manifold",
    "Euclidean",
    "Sphere",
    "TorchEuclidean",
    # Trust-region subproblem
    "KrylovBasis",
    "Problem",
    "StopReason",
    "TRSInput",
    "TRSOptions",
    "TRSOutput",
    "TRSStats",
    "TridiagonalMatrix",
    "TridiagonalTRSResult",
    "approx_hessian_vector",
    "initial_stats",
    "print_header",
    "solve_tridiagonal_trs",
    "trs_lanczos",
]
