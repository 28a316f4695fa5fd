"""Core abstractions shared by krylovtr components."""

from .device import Device, default_device, device

__all__ = ["Device", "default_device", "device"]
