"""Diagnostics and debugging utilities for krylovtr."""

from .core import assert_finite, is_finite_scalar, model_value
from .debug_mode import (
    debug_context,
    is_debug_enabled,
    set_debug_enabled,
)

__all__ = [
    "assert_finite",
    "is_finite_scalar",
    "model_value",
    "is_debug_enabled",
    "set_debug_enabled",
    "debug_context",
]
