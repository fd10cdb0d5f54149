"""
Inference Entry Points.

Rebuild a trained classifier from an artifact directory and predict labels
for raw uint8 digits.
"""

from __future__ import annotations

import logging
from pathlib import Path

import numpy as np
import torch
import torch.nn as nn

from ..core import LOGGER_NAME, ArtifactDirectory, TrainingConfig, load_model_weights
from ..data_handler import MnistBatcher
from ..trainer import valid_step

logger = logging.getLogger(LOGGER_NAME)


def load_trained_model(artifact_dir: Path, device: torch.device) -> nn.Module:
    """
    Rebuild the model described by ``config.json`` and load ``model.pt``.

    Raises:
        ConfigError: If the saved configuration is missing or invalid.
        FileNotFoundError: If ``model.pt`` does not exist.
        PersistenceError: If the weights do not match the architecture.
    """
    artifacts = ArtifactDirectory(root=Path(artifact_dir))
    config = TrainingConfig.load(artifacts.config_path)

    model = config.model.init(device)
    load_model_weights(model, artifacts.model_path, device)
    model.eval()
    logger.debug(f"Loaded trained model from {artifacts.model_path}")
    return model


def infer(artifact_dir: Path, device: torch.device, images: np.ndarray) -> list[int]:
    """
    Predict the class of each image.

    Args:
        artifact_dir: Directory of a completed run.
        device: Device used for the forward pass.
        images: Raw uint8 digits, ``(H, W)`` or ``(N, H, W)``.

    Returns:
        One predicted label per image.
    """
    images = np.asarray(images)
    if images.ndim == 2:
        images = images[np.newaxis]

    model = load_trained_model(artifact_dir, device)

    # Dummy targets only satisfy the batch contract; the loss is discarded
    batch = MnistBatcher()([(image, 0) for image in images]).to(device)
    item = valid_step(model, batch)
    return item.output.argmax(dim=1).tolist()
