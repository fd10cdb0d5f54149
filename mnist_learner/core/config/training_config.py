"""
Training Configuration Manifest.

``TrainingConfig`` is the immutable record of every hyperparameter of a run.
It is created once from caller input, serialized verbatim to
``<artifact_dir>/config.json`` at run start and never mutated afterwards.
Loading the saved document yields a config equal to the one that was saved.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from ...exceptions import ConfigError
from ..io.serialization import load_recipe, write_json_atomic
from ..paths.constants import LOGGER_NAME
from .model_config import ModelConfig
from .optimizer_config import AdamConfig
from .types import BatchSize, LearningRate, NonNegativeInt, PositiveInt, Seed

logger = logging.getLogger(LOGGER_NAME)


# TRAINING CONFIGURATION
class TrainingConfig(BaseModel):
    """
    Flat, exhaustively enumerated set of run hyperparameters.

    Attributes:
        model: Model sub-configuration (required).
        optimizer: Optimizer sub-configuration (required).
        num_epochs: Fixed number of epochs; the fit loop never stops early.
        batch_size: Samples per batch for both splits.
        num_workers: DataLoader worker processes.
        seed: Seed applied once before any stochastic operation.
        learning_rate: Optimizer step size.

    Example:
        >>> cfg = TrainingConfig(
        ...     model=ModelConfig(num_classes=10, hidden_size=512),
        ...     optimizer=AdamConfig(),
        ... )
        >>> cfg.save(Path("artifacts/config.json"))
        >>> TrainingConfig.load(Path("artifacts/config.json")) == cfg
        True
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    model: ModelConfig
    optimizer: AdamConfig
    num_epochs: PositiveInt = Field(default=5, description="Number of training epochs.")
    batch_size: BatchSize = 64
    num_workers: NonNegativeInt = 4
    seed: Seed = 42
    learning_rate: LearningRate = 1.0e-4

    # SERIALIZATION
    def to_dict(self) -> dict[str, Any]:
        """Return the JSON-compatible field mapping."""
        return self.model_dump(mode="json")

    def save(self, path: Path) -> Path:
        """
        Write the config as indented JSON with self-describing field names.

        Raises:
            ConfigError: If the file cannot be written.
        """
        try:
            return write_json_atomic(self.to_dict(), path)
        except OSError as e:
            raise ConfigError(f"Could not save configuration to {path}: {e}") from e

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> TrainingConfig:
        """
        Validate a raw mapping into a config.

        Raises:
            ConfigError: If a field is missing, unknown or out of bounds.
        """
        try:
            return cls.model_validate(data)
        except ValidationError as e:
            raise ConfigError(f"Invalid training configuration: {e}") from e

    @classmethod
    def load(cls, path: Path) -> TrainingConfig:
        """
        Load a config previously written by :meth:`save`.

        Raises:
            ConfigError: If the file is missing, unreadable or invalid.
        """
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise ConfigError(f"Could not load configuration from {path}: {e}") from e
        return cls.from_dict(data)

    @classmethod
    def from_recipe(cls, path: Path, overrides: dict[str, Any] | None = None) -> TrainingConfig:
        """
        Build a config from a YAML recipe with optional dotted-key overrides.

        Args:
            path: YAML recipe (same field layout as ``config.json``).
            overrides: Mapping such as ``{"model.hidden_size": 256, "num_epochs": 1}``.

        Raises:
            ConfigError: If the recipe cannot be parsed or validated.
        """
        try:
            data = load_recipe(path)
        except (OSError, ValueError) as e:
            raise ConfigError(f"Could not read recipe {path}: {e}") from e

        for dotted_key, value in (overrides or {}).items():
            _apply_override(data, dotted_key, value)
            logger.debug(f"Recipe override applied: {dotted_key}={value!r}")

        return cls.from_dict(data)


def _apply_override(data: dict[str, Any], dotted_key: str, value: Any) -> None:
    """Set ``value`` at ``dotted_key`` inside a nested dict, creating sections as needed."""
    *parents, leaf = dotted_key.split(".")
    node = data
    for part in parents:
        child = node.setdefault(part, {})
        if not isinstance(child, dict):
            raise ConfigError(f"Cannot override '{dotted_key}': '{part}' is not a section")
        node = child
    node[leaf] = value
