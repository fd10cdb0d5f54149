"""
Synthetic Digits for Testing.

Tiny in-memory datasets shaped like MNIST, for unit tests and offline smoke
runs without network access.
"""

from __future__ import annotations

import numpy as np

from .dataset import DigitDataset

_SYNTHETIC_SEED = 42
_SYNTHETIC_PIXEL_RANGE = 256


def create_synthetic_digits(
    samples: int = 64,
    num_classes: int = 10,
    resolution: int = 28,
    seed: int = _SYNTHETIC_SEED,
) -> DigitDataset:
    """
    Create a random uint8 image dataset with uniformly drawn labels.

    Args:
        samples: Number of samples.
        num_classes: Labels are drawn from ``[0, num_classes)``.
        resolution: Height and width of each image.
        seed: Seed of the NumPy generator.
    """
    rng = np.random.default_rng(seed)
    images = rng.integers(
        0, _SYNTHETIC_PIXEL_RANGE, (samples, resolution, resolution), dtype=np.uint8
    )
    labels = rng.integers(0, num_classes, samples, dtype=np.int64)
    return DigitDataset(images, labels)
