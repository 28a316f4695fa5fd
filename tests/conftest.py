"""Pytest configuration and shared fixtures for krylovtr tests.

This module provides:
- Deterministic RNG fixtures for numpy and torch
"""

import os

import numpy as np
import pytest
import torch


@pytest.fixture(scope="function")
def rng() -> np.random.Generator:
    """Provide a deterministic numpy RNG for tests.

    Uses seed from TEST_RNG_SEED environment variable (default: 0).
    This ensures tests are reproducible while allowing override for debugging.

    Returns:
        A seeded numpy.random.Generator instance.
    """
    seed = int(os.environ.get("TEST_RNG_SEED", "0"))
    return np.random.default_rng(seed)


@pytest.fixture(scope="function")
def torch_rng() -> torch.Generator:
    """Provide a deterministic torch RNG for tests.

    Uses seed from TEST_RNG_SEED environment variable (default: 0).
    Device is determined by default_device().

    Returns:
        A seeded torch.Generator instance.
    """
    from krylovtr.core.device import default_device

    seed = int(os.environ.get("TEST_RNG_SEED", "0"))
    generator = torch.Generator(device=default_device().as_torch_device())
    generator.manual_seed(seed)
    return generator


@pytest.fixture(scope="function", autouse=True)
def set_random_seeds(rng: np.random.Generator, torch_rng: torch.Generator) -> None:
    """Auto-use fixture to set global random seeds for reproducibility."""
    np.random.seed(int(os.environ.get("TEST_RNG_SEED", "0")))
    torch.manual_seed(int(os.environ.get("TEST_RNG_SEED", "0")))
