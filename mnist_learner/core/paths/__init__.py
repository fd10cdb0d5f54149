"""
Filesystem Authority and Path Orchestration Package.

1. **Static Layer** (constants module): logger identity, metric keys,
   artifact file names, default dataset and artifact roots.
2. **Dynamic Layer** (ArtifactDirectory): lifecycle of one run's artifact
   directory (prepare, config snapshot, checkpoints, final model).
"""

from .artifacts import ArtifactDirectory, checkpoint, prepare, save_config, save_final
from .constants import (
    CHECKPOINT_DIRNAME,
    CONFIG_FILENAME,
    DATASET_DIR,
    DEFAULT_ARTIFACT_DIR,
    LOG_FILENAME,
    LOGGER_NAME,
    METRIC_ACCURACY,
    METRIC_LOSS,
    METRICS_FILENAME,
    MODEL_FILENAME,
    PROJECT_ROOT,
    SPLIT_TRAIN,
    SPLIT_VALID,
    get_project_root,
)

__all__ = [
    "PROJECT_ROOT",
    "DATASET_DIR",
    "DEFAULT_ARTIFACT_DIR",
    "LOGGER_NAME",
    "METRIC_LOSS",
    "METRIC_ACCURACY",
    "SPLIT_TRAIN",
    "SPLIT_VALID",
    "CONFIG_FILENAME",
    "MODEL_FILENAME",
    "METRICS_FILENAME",
    "LOG_FILENAME",
    "CHECKPOINT_DIRNAME",
    "get_project_root",
    "ArtifactDirectory",
    "prepare",
    "save_config",
    "checkpoint",
    "save_final",
]
