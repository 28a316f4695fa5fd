"""Manifolds providing the tangent-space operations used by the solvers."""

from .base import Manifold, lincomb_many, supports_finite_differences
from .euclidean import Euclidean
from .sphere import Sphere
from .torch_euclidean import TorchEuclidean

__all__ = [
    "Manifold",
    "Euclidean",
    "Sphere",
    "TorchEuclidean",
    "lincomb_many",
    "supports_finite_differences",
]
