"""
Model Checkpoint & Weight Management.

Saves and restores torch state-dicts. Loading uses ``weights_only=True`` so a
tampered checkpoint cannot execute arbitrary code, and maps tensors onto the
requested device.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import torch

from ...exceptions import PersistenceError


#  WEIGHT MANAGEMENT
def save_state(state: dict[str, Any], path: Path) -> Path:
    """
    Persist a state-dict (model or optimizer) to ``path``.

    Raises:
        PersistenceError: If the file cannot be written.
    """
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        torch.save(state, path)
    except (OSError, RuntimeError) as e:
        raise PersistenceError(f"Could not write state to {path}: {e}") from e
    return path


def save_model_weights(model: torch.nn.Module, path: Path) -> Path:
    """Persist the parameters and buffers of ``model`` to ``path``."""
    return save_state(model.state_dict(), path)


def load_state(path: Path, device: torch.device) -> dict[str, Any]:
    """
    Load a state-dict written by :func:`save_state`.

    Raises:
        FileNotFoundError: If the file does not exist.
    """
    if not path.exists():
        raise FileNotFoundError(f"Checkpoint not found at: {path}")
    return torch.load(path, map_location=device, weights_only=True)


def load_model_weights(model: torch.nn.Module, path: Path, device: torch.device) -> None:
    """
    Restore ``model`` from a state-dict file.

    Args:
        model: The model instance to populate.
        path: Filesystem path to the ``.pt`` file.
        device: Target device for the loaded tensors.

    Raises:
        FileNotFoundError: If the checkpoint file does not exist.
        PersistenceError: If the checkpoint keys do not match the model.
    """
    state_dict = load_state(path, device)

    model_keys = set(model.state_dict().keys())
    checkpoint_keys = set(state_dict.keys())
    if model_keys != checkpoint_keys:
        missing = model_keys - checkpoint_keys
        unexpected = checkpoint_keys - model_keys
        parts = []
        if missing:
            parts.append(f"missing keys: {sorted(missing)[:5]}")
        if unexpected:
            parts.append(f"unexpected keys: {sorted(unexpected)[:5]}")
        raise PersistenceError(
            f"Checkpoint architecture mismatch ({', '.join(parts)}). "
            "Ensure the model config matches the one used during training."
        )

    model.load_state_dict(state_dict)
