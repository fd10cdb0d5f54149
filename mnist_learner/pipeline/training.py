"""
Training Entry Point.

``train`` assembles one complete run out of the configuration, the dataset
collaborator and the fit loop, and leaves every artifact on disk:

    1. Reset the artifact directory and attach ``experiment.log``.
    2. Snapshot the configuration to ``config.json``.
    3. Seed every RNG once, from ``config.seed``.
    4. Build the training and validation loaders.
    5. Initialize model and optimizer on the target device.
    6. Fit for ``config.num_epochs`` epochs (one checkpoint per epoch).
    7. Write ``metrics.csv`` and the final ``model.pt``.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import NamedTuple

import torch
import torch.nn as nn
from torch.utils.data import Dataset

from ..core import (
    DATASET_DIR,
    LOGGER_NAME,
    ArtifactDirectory,
    Logger,
    LogStyle,
    TrainingConfig,
    set_seed,
)
from ..data_handler import DigitDataset, build_dataloader
from ..trainer import EpochSummary, Learner

logger = logging.getLogger(LOGGER_NAME)


class TrainingResult(NamedTuple):
    """Structured return type for :func:`train`."""

    model: nn.Module
    history: list[EpochSummary]
    model_path: Path


def train(
    artifact_dir: Path,
    config: TrainingConfig,
    device: torch.device,
    data_root: Path = DATASET_DIR,
    datasets: tuple[Dataset, Dataset] | None = None,
    use_tqdm: bool = True,
    strict: bool = False,
) -> TrainingResult:
    """
    Train a classifier and persist its artifacts.

    Args:
        artifact_dir: Output directory; deleted and recreated at start.
        config: Complete run hyperparameters.
        device: Device holding the model and every batch.
        data_root: Download/cache directory of the MNIST splits.
        datasets: Optional ``(train, valid)`` datasets replacing MNIST.
        use_tqdm: Show per-phase progress bars.
        strict: Enforce deterministic kernels (see :func:`set_seed`).

    Returns:
        TrainingResult with the trained model, per-epoch history and final
        model path.

    Raises:
        PersistenceError: If the directory cannot be reset or the final model
            cannot be written.
        ConfigError: If the configuration snapshot cannot be written.
        DatasetError: If MNIST cannot be loaded.
        BatchError: If a batch fails; carries epoch, phase and batch index.
    """
    artifacts = ArtifactDirectory(root=Path(artifact_dir))

    # The previous run's log file lives inside the directory being wiped
    Logger.detach_file(LOGGER_NAME)
    artifacts.prepare()
    run_logger = Logger.setup(LOGGER_NAME, log_dir=artifacts.root)

    LogStyle.log_phase_header(run_logger, "TRAINING", LogStyle.DOUBLE)
    run_logger.info(f"{LogStyle.INDENT}{LogStyle.ARROW} {'Artifacts':<18}: {artifacts.root}")
    run_logger.info(f"{LogStyle.INDENT}{LogStyle.ARROW} {'Device':<18}: {device}")

    artifacts.save_config(config)
    set_seed(config.seed, strict=strict)

    if datasets is None:
        train_ds, valid_ds = DigitDataset.train(data_root), DigitDataset.test(data_root)
    else:
        train_ds, valid_ds = datasets

    train_loader = build_dataloader(
        train_ds, config.batch_size, config.seed, num_workers=config.num_workers
    )
    valid_loader = build_dataloader(
        valid_ds, config.batch_size, config.seed, num_workers=config.num_workers
    )
    run_logger.info(
        f"{LogStyle.INDENT}{LogStyle.ARROW} {'Samples':<18}: "
        f"train={len(train_ds)} valid={len(valid_ds)} batch_size={config.batch_size}"
    )

    model = config.model.init(device)
    optimizer = config.optimizer.init(model, config.learning_rate)

    learner = Learner(
        model=model,
        optimizer=optimizer,
        artifacts=artifacts,
        device=device,
        num_epochs=config.num_epochs,
        grad_clip_norm=config.optimizer.grad_clip_norm,
        use_tqdm=use_tqdm,
    )
    trained = learner.fit(train_loader, valid_loader)

    model_path = artifacts.save_final(trained)
    artifacts.save_metrics(learner.history)
    run_logger.info(f"{LogStyle.SUCCESS} Training complete")

    return TrainingResult(model=trained, history=learner.history, model_path=model_path)
