"""
PyTorch Dataset Definition Module.

``DigitDataset`` holds raw grayscale digits as a ``(N, H, W)`` uint8 array
plus integer labels. Items are returned raw; normalization and tensor
conversion happen in the batcher so that workers only move small arrays.

It supports two construction paths:

- ``DigitDataset.train(root)`` / ``DigitDataset.test(root)``: MNIST splits
  through torchvision (downloaded on first use).
- ``DigitDataset.from_arrays(images, labels)``: in-memory arrays.
"""

from __future__ import annotations

import logging
from pathlib import Path

import numpy as np
from torch.utils.data import Dataset
from torchvision import datasets

from ..core import DATASET_DIR, LOGGER_NAME, LogStyle
from ..exceptions import DatasetError

logger = logging.getLogger(LOGGER_NAME)


# DATASET CLASS
class DigitDataset(Dataset[tuple[np.ndarray, int]]):
    """
    Labeled grayscale image dataset.

    The constructor accepts NumPy arrays directly (no I/O). Use the
    classmethod factories to load the MNIST splits.
    """

    def __init__(self, images: np.ndarray, labels: np.ndarray) -> None:
        """
        Args:
            images: Array with shape ``(N, H, W)``.
            labels: Label array, any shape that flattens to ``(N,)``.

        Raises:
            DatasetError: If shapes are inconsistent.
        """
        if images.ndim != 3:
            raise DatasetError(f"Images must have shape (N, H, W), got {images.shape}")

        labels = np.asarray(labels).ravel().astype(np.int64)
        if len(labels) != len(images):
            raise DatasetError(f"Got {len(images)} images but {len(labels)} labels")

        self.images = images
        self.labels: np.ndarray = labels

    @classmethod
    def from_arrays(cls, images: np.ndarray, labels: np.ndarray) -> DigitDataset:
        """Build a dataset from in-memory arrays."""
        return cls(np.asarray(images), np.asarray(labels))

    @classmethod
    def train(cls, root: Path = DATASET_DIR, download: bool = True) -> DigitDataset:
        """The 60k-sample MNIST training split."""
        return cls._from_mnist(root, train=True, download=download)

    @classmethod
    def test(cls, root: Path = DATASET_DIR, download: bool = True) -> DigitDataset:
        """The 10k-sample MNIST test split (used for validation)."""
        return cls._from_mnist(root, train=False, download=download)

    @classmethod
    def _from_mnist(cls, root: Path, train: bool, download: bool) -> DigitDataset:
        split = "train" if train else "test"
        try:
            mnist = datasets.MNIST(root=str(root), train=train, download=download)
        except (RuntimeError, OSError) as e:
            raise DatasetError(f"Could not load MNIST {split} split from {root}: {e}") from e

        logger.info(
            f"{LogStyle.INDENT}{LogStyle.ARROW} {'MNIST ' + split:<18}: {len(mnist.targets)} samples"
        )
        return cls(mnist.data.numpy(), mnist.targets.numpy())

    def __len__(self) -> int:
        return len(self.labels)

    def __getitem__(self, idx: int) -> tuple[np.ndarray, int]:
        return self.images[idx], int(self.labels[idx])
