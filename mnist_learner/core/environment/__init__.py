"""
Environment & Infrastructure Abstraction Layer.

Hardware discovery and reproducibility protocols shared by the fit pipeline.
"""

from .hardware import detect_best_device, to_device_obj
from .reproducibility import set_seed, worker_init_fn

__all__ = [
    "detect_best_device",
    "to_device_obj",
    "set_seed",
    "worker_init_fn",
]
