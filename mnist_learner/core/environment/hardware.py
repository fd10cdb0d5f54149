"""
Hardware Discovery.

Resolves the compute device every tensor of a run is placed on.
"""

from __future__ import annotations

import logging
import warnings

import torch

from ..paths.constants import LOGGER_NAME

logger = logging.getLogger(LOGGER_NAME)


def detect_best_device() -> str:
    """Return the best available accelerator: ``cuda``, then ``mps``, then ``cpu``."""
    if torch.cuda.is_available():
        return "cuda"
    if hasattr(torch.backends, "mps") and torch.backends.mps.is_available():
        return "mps"
    return "cpu"


def to_device_obj(device: str) -> torch.device:
    """
    Convert a device name into a ``torch.device``.

    ``"auto"`` resolves through :func:`detect_best_device`. An accelerator
    that is requested but unavailable falls back to CPU with a warning.

    Args:
        device: ``"auto"``, ``"cpu"``, ``"cuda"``, ``"cuda:N"`` or ``"mps"``.
    """
    requested = device.lower()
    if requested == "auto":
        requested = detect_best_device()

    if requested.startswith("cuda") and not torch.cuda.is_available():
        warnings.warn(
            "CUDA was explicitly requested but is not available. Falling back to CPU.",
            UserWarning,
            stacklevel=2,
        )
        requested = "cpu"
    elif requested == "mps" and not (
        hasattr(torch.backends, "mps") and torch.backends.mps.is_available()
    ):
        warnings.warn(
            "MPS was explicitly requested but is not available. Falling back to CPU.",
            UserWarning,
            stacklevel=2,
        )
        requested = "cpu"

    return torch.device(requested)
