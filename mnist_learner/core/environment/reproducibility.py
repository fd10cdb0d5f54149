"""
Reproducibility Environment.

Ensures deterministic behavior across Python, NumPy, and PyTorch by
centralizing RNG seeding and DataLoader worker initialization. The fit
pipeline seeds exactly once, from ``TrainingConfig.seed``, before the model
is initialized and before any batch is shuffled.

Two reproducibility levels are supported:

    Standard (strict=False):
        Seeds all PRNGs and disables the cuDNN auto-tuner.

    Strict (strict=True):
        Additionally enables ``torch.use_deterministic_algorithms(True)``
        and configures ``CUBLAS_WORKSPACE_CONFIG`` when CUDA is available.
"""

import logging
import os
import random

import numpy as np
import torch


# REPRODUCIBILITY LOGIC
def set_seed(seed: int, strict: bool = False) -> None:
    """Seed all PRNGs and optionally enforce deterministic algorithms.

    Args:
        seed: The seed value to set across all PRNGs.
        strict: If True, enforces deterministic algorithms (slower on GPU).
    """
    random.seed(seed)
    os.environ["PYTHONHASHSEED"] = str(seed)
    np.random.seed(seed)
    torch.manual_seed(seed)

    if torch.cuda.is_available():
        torch.cuda.manual_seed_all(seed)
        torch.backends.cudnn.deterministic = True
        torch.backends.cudnn.benchmark = False

        if strict:
            os.environ["CUBLAS_WORKSPACE_CONFIG"] = ":4096:8"

    if hasattr(torch.backends, "mps") and torch.backends.mps.is_available():
        torch.mps.manual_seed(seed)

    if strict:
        torch.use_deterministic_algorithms(True)
        logging.info("STRICT REPRODUCIBILITY ENABLED: Using deterministic algorithms.")


def worker_init_fn(worker_id: int) -> None:
    """Initialize PRNGs for a DataLoader worker subprocess.

    Each worker receives a unique but deterministic sub-seed derived from
    the loader's base seed (itself drawn from the seeded generator).

    Args:
        worker_id: Subprocess ID provided by DataLoader (0-based).
    """
    worker_info = torch.utils.data.get_worker_info()
    if worker_info is None:
        return

    seed = (worker_info.seed + worker_id) % 2**32

    random.seed(seed)
    np.random.seed(seed)
    torch.manual_seed(seed)
