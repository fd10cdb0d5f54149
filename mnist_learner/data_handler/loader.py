"""
Data Loader Construction.

Wraps a ``DigitDataset`` into a batched, seeded-shuffle, optionally
multi-worker ``DataLoader`` yielding ``Batch`` values. Parallel prefetching
is internal to the DataLoader; the fit loop only sees a blocking iterator.

The last batch is kept even when it is smaller than ``batch_size``.
"""

from __future__ import annotations

import torch
from torch.utils.data import DataLoader, Dataset

from ..core import worker_init_fn
from .batcher import MnistBatcher


def build_dataloader(
    dataset: Dataset,
    batch_size: int,
    seed: int,
    num_workers: int = 0,
    shuffle: bool = True,
) -> DataLoader:
    """
    Build a DataLoader over ``dataset``.

    Args:
        dataset: Source of raw ``(image, label)`` items.
        batch_size: Samples per batch.
        seed: Seed of the shuffling generator; identical seeds give identical orders.
        num_workers: Worker processes (0 = load in the main process).
        shuffle: Reshuffle at every epoch.

    Returns:
        DataLoader yielding ``Batch`` objects.
    """
    generator = torch.Generator()
    generator.manual_seed(seed)

    return DataLoader(
        dataset,
        batch_size=batch_size,
        shuffle=shuffle,
        generator=generator,
        num_workers=num_workers,
        collate_fn=MnistBatcher(),
        pin_memory=torch.cuda.is_available(),
        worker_init_fn=worker_init_fn if num_workers > 0 else None,
        persistent_workers=num_workers > 0,
        drop_last=False,
    )
