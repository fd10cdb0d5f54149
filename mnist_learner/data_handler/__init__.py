"""
Data Handler Package.

Adapters around the dataset collaborator: MNIST splits, synthetic digits,
batch collation and DataLoader construction.
"""

from .batcher import MNIST_MEAN, MNIST_STD, MnistBatcher
from .dataset import DigitDataset
from .loader import build_dataloader
from .synthetic import create_synthetic_digits

__all__ = [
    "DigitDataset",
    "MnistBatcher",
    "MNIST_MEAN",
    "MNIST_STD",
    "build_dataloader",
    "create_synthetic_digits",
]
