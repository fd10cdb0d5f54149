"""
Artifact Directory Lifecycle Management.

Provides the ``ArtifactDirectory`` class, owner of the on-disk output of a
run. The directory is wiped and recreated at run start, receives the config
snapshot and per-epoch checkpoints while training, and finally the trained
model under a fixed name.

Layout::

    <artifact_dir>/
    ├── config.json
    ├── experiment.log
    ├── metrics.csv
    ├── model.pt
    └── checkpoint/
        ├── model-1.pt
        ├── optim-1.pt
        └── ...

Failure policy:
    * ``prepare`` ignores only a missing directory on removal.
    * ``checkpoint`` logs a failed write and lets training continue; an
      intermediate snapshot does not affect the training trajectory.
      A half-written epoch (model without optimizer) is rolled back.
    * ``save_final`` raises ``PersistenceError``: the trained model must not
      silently vanish.
"""

from __future__ import annotations

import logging
import re
import shutil
from pathlib import Path
from typing import TYPE_CHECKING, Sequence

import pandas as pd
import torch
from pydantic import BaseModel, ConfigDict

from ...exceptions import PersistenceError
from ..io.checkpoints import load_model_weights, load_state, save_model_weights, save_state
from .constants import (
    CHECKPOINT_DIRNAME,
    CONFIG_FILENAME,
    LOGGER_NAME,
    METRICS_FILENAME,
    MODEL_CHECKPOINT_TEMPLATE,
    MODEL_FILENAME,
    OPTIM_CHECKPOINT_TEMPLATE,
)

if TYPE_CHECKING:  # pragma: no cover
    from ...trainer.metrics import EpochSummary
    from ..config import TrainingConfig

logger = logging.getLogger(LOGGER_NAME)

_MODEL_CHECKPOINT_RE = re.compile(r"^model-(\d+)\.pt$")


# ARTIFACT DIRECTORY
class ArtifactDirectory(BaseModel):
    """
    Immutable handle on the artifact directory of one run.

    Attributes:
        root: Base directory for all run artifacts.

    Example:
        >>> artifacts = ArtifactDirectory(root=Path("artifacts/mnist"))
        >>> artifacts.prepare()
        >>> artifacts.save_config(cfg)
        >>> artifacts.checkpoint(1, model, optimizer)
        >>> artifacts.save_final(model)
    """

    model_config = ConfigDict(frozen=True)

    root: Path

    # Path Properties
    @property
    def config_path(self) -> Path:
        """Path of the serialized ``TrainingConfig``."""
        return self.root / CONFIG_FILENAME

    @property
    def model_path(self) -> Path:
        """Fixed, well-known path of the final trained model."""
        return self.root / MODEL_FILENAME

    @property
    def metrics_path(self) -> Path:
        """Path of the per-epoch metric report."""
        return self.root / METRICS_FILENAME

    @property
    def checkpoint_dir(self) -> Path:
        """Directory receiving per-epoch snapshots."""
        return self.root / CHECKPOINT_DIRNAME

    def model_checkpoint_path(self, epoch: int) -> Path:
        """Model snapshot path for ``epoch``."""
        return self.checkpoint_dir / MODEL_CHECKPOINT_TEMPLATE.format(epoch=epoch)

    def optim_checkpoint_path(self, epoch: int) -> Path:
        """Optimizer snapshot path for ``epoch``."""
        return self.checkpoint_dir / OPTIM_CHECKPOINT_TEMPLATE.format(epoch=epoch)

    # Lifecycle
    def prepare(self) -> Path:
        """
        Delete the directory recursively if present, then recreate it empty.

        Destructive and idempotent: calling it twice leaves an empty directory
        both times.

        Raises:
            PersistenceError: If removal fails for a reason other than absence,
                or the directory cannot be created.
        """
        try:
            shutil.rmtree(self.root)
        except FileNotFoundError:
            pass
        except OSError as e:
            raise PersistenceError(f"Could not clear artifact directory {self.root}: {e}") from e

        try:
            self.root.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise PersistenceError(f"Could not create artifact directory {self.root}: {e}") from e

        logger.debug(f"Artifact directory reset → {self.root}")
        return self.root

    def save_config(self, config: TrainingConfig) -> Path:
        """
        Write the configuration snapshot.

        Raises:
            ConfigError: If the snapshot cannot be written.
        """
        return config.save(self.config_path)

    def checkpoint(
        self,
        epoch: int,
        model: torch.nn.Module,
        optimizer: torch.optim.Optimizer | None = None,
    ) -> Path | None:
        """
        Persist a point-in-time snapshot keyed by ``epoch``.

        A failed write is logged and swallowed so training can continue. A
        model snapshot whose optimizer snapshot failed is removed, so an epoch
        listed by :meth:`checkpoint_epochs` is always resumable.

        Returns:
            The model snapshot path, or None if the write failed.
        """
        try:
            path = save_model_weights(model, self.model_checkpoint_path(epoch))
            if optimizer is not None:
                save_state(optimizer.state_dict(), self.optim_checkpoint_path(epoch))
        except PersistenceError as e:
            self.model_checkpoint_path(epoch).unlink(missing_ok=True)
            logger.warning(f"Checkpoint for epoch {epoch} failed, continuing: {e}")
            return None

        logger.debug(f"Checkpoint saved → {path.name}")
        return path

    def load_checkpoint(
        self,
        epoch: int,
        model: torch.nn.Module,
        device: torch.device,
        optimizer: torch.optim.Optimizer | None = None,
    ) -> None:
        """
        Restore model (and optionally optimizer) state saved at ``epoch``.

        Raises:
            FileNotFoundError: If a snapshot file for ``epoch`` is missing.
            PersistenceError: If the model snapshot does not match the architecture.
        """
        load_model_weights(model, self.model_checkpoint_path(epoch), device)
        if optimizer is not None:
            optimizer.load_state_dict(load_state(self.optim_checkpoint_path(epoch), device))

    def checkpoint_epochs(self) -> list[int]:
        """Sorted epochs for which a model snapshot exists."""
        if not self.checkpoint_dir.is_dir():
            return []
        epochs = []
        for entry in self.checkpoint_dir.iterdir():
            match = _MODEL_CHECKPOINT_RE.match(entry.name)
            if match:
                epochs.append(int(match.group(1)))
        return sorted(epochs)

    def save_final(self, model: torch.nn.Module) -> Path:
        """
        Persist the trained model under the fixed name ``model.pt``.

        Raises:
            PersistenceError: If the model cannot be written.
        """
        path = save_model_weights(model, self.model_path)
        logger.info(f"Trained model saved → {path}")
        return path

    def save_metrics(self, history: Sequence[EpochSummary]) -> Path:
        """
        Write one CSV row per epoch with train and validation metrics.

        Raises:
            PersistenceError: If the report cannot be written.
        """
        df = pd.DataFrame([summary.to_row() for summary in history])
        try:
            df.to_csv(self.metrics_path, index=False)
        except OSError as e:
            raise PersistenceError(f"Could not write metrics to {self.metrics_path}: {e}") from e
        return self.metrics_path

    def __repr__(self) -> str:
        return f"ArtifactDirectory(root={self.root})"


# FUNCTIONAL INTERFACE
def prepare(artifact_dir: Path) -> ArtifactDirectory:
    """Reset ``artifact_dir`` to an empty directory and return its handle."""
    artifacts = ArtifactDirectory(root=Path(artifact_dir))
    artifacts.prepare()
    return artifacts


def save_config(artifact_dir: Path, config: TrainingConfig) -> Path:
    """Write ``config`` to ``<artifact_dir>/config.json``."""
    return ArtifactDirectory(root=Path(artifact_dir)).save_config(config)


def checkpoint(artifact_dir: Path, epoch: int, model: torch.nn.Module) -> Path | None:
    """Snapshot ``model`` under ``<artifact_dir>/checkpoint/model-{epoch}.pt``."""
    return ArtifactDirectory(root=Path(artifact_dir)).checkpoint(epoch, model)


def save_final(artifact_dir: Path, model: torch.nn.Module) -> Path:
    """Write ``model`` to ``<artifact_dir>/model.pt``."""
    return ArtifactDirectory(root=Path(artifact_dir)).save_final(model)
