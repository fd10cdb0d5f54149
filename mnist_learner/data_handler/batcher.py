"""
Batch Collation.

``MnistBatcher`` is the DataLoader ``collate_fn`` that turns a list of raw
``(image, label)`` items into a normalized ``Batch``.
"""

from __future__ import annotations

from typing import Sequence

import numpy as np
import torch

from ..trainer.output import Batch

# MNIST pixel statistics after scaling to [0, 1]
MNIST_MEAN = 0.1307
MNIST_STD = 0.3081


class MnistBatcher:
    """
    Collate raw digits into a ``Batch``.

    Images are scaled to ``[0, 1]`` and standardized with the MNIST mean and
    standard deviation; targets become an int64 vector. Collation runs on
    the CPU; the fit loop moves each batch to the training device.
    """

    def __init__(self, mean: float = MNIST_MEAN, std: float = MNIST_STD) -> None:
        self.mean = mean
        self.std = std

    def __call__(self, items: Sequence[tuple[np.ndarray, int]]) -> Batch:
        if len(items) == 0:
            return Batch(
                images=torch.empty((0, 0, 0), dtype=torch.float32),
                targets=torch.empty((0,), dtype=torch.int64),
            )

        images = np.stack([np.asarray(image, dtype=np.float32) for image, _ in items])
        images_t = torch.from_numpy(images) / 255.0
        images_t = (images_t - self.mean) / self.std

        targets = torch.tensor([int(label) for _, label in items], dtype=torch.int64)
        return Batch(images=images_t, targets=targets)
