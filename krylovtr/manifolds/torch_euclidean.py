"""Euclidean space with torch tensors as tangent vectors."""

from __future__ import annotations

import math
from typing import Optional

import torch

from ..core.device import Device, default_device


class TorchEuclidean:
    """
    Euclidean space whose points and tangent vectors are torch tensors.

    Useful when the Hessian-vector callback is written in PyTorch: the solver
    keeps every tangent vector on ``device`` and only pulls inner products
    back to the host as Python floats.
    """

    def __init__(self, *shape: int, device: Optional[Device] = None) -> None:
        if len(shape) == 0:
            raise ValueError("TorchEuclidean requires at least one dimension.")
        if any(int(s) <= 0 for s in shape):
            raise ValueError(f"Shape entries must be positive, got {shape}.")
        self.shape = tuple(int(s) for s in shape)
        self.device = device if device is not None else default_device()

    def __repr__(self) -> str:
        return f"TorchEuclidean{self.shape} on {self.device!r}"

    def dimension(self) -> int:
        return math.prod(self.shape)

    def inner_product(self, x: torch.Tensor, u: torch.Tensor, v: torch.Tensor) -> float:
        return float(torch.sum(u * v).item())

    def norm(self, x: torch.Tensor, u: torch.Tensor) -> float:
        return float(torch.linalg.vector_norm(u).item())

    def tangentialize(self, x: torch.Tensor, v: torch.Tensor) -> torch.Tensor:
        return torch.as_tensor(
            v, dtype=self.device.dtype, device=self.device.as_torch_device()
        ).reshape(self.shape)

    def zero_vector(self, x: torch.Tensor) -> torch.Tensor:
        return torch.zeros(
            self.shape, dtype=self.device.dtype, device=self.device.as_torch_device()
        )

    def random_tangent_vector(
        self, x: torch.Tensor, generator: Optional[torch.Generator] = None
    ) -> torch.Tensor:
        v = torch.randn(
            self.shape,
            generator=generator,
            dtype=self.device.dtype,
            device=self.device.as_torch_device(),
        )
        return v / torch.linalg.vector_norm(v)

    def lincomb(self, x, a, u, b=None, v=None) -> torch.Tensor:
        if v is None:
            return a * u
        return a * u + b * v

    def retraction(self, x: torch.Tensor, v: torch.Tensor) -> torch.Tensor:
        return x + v

    def transport(self, x: torch.Tensor, y: torch.Tensor, v: torch.Tensor) -> torch.Tensor:
        return v


__all__ = ["TorchEuclidean"]
