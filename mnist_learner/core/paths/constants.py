"""
Project-wide Constants and Artifact Layout.

Single source of truth for the logger identity, metric keys and the file
names that make up an artifact directory.

Module Attributes:
    LOGGER_NAME: Global logger identity used by all modules.
    PROJECT_ROOT: Dynamically resolved absolute path to the project root.
    DATASET_DIR: Default download location for the MNIST archives.
    CONFIG_FILENAME: Serialized ``TrainingConfig`` inside the artifact directory.
    MODEL_FILENAME: Final trained model inside the artifact directory.
    CHECKPOINT_DIRNAME: Subdirectory holding per-epoch checkpoints.
"""

from pathlib import Path
from typing import Final

# GLOBAL CONSTANTS
LOGGER_NAME: Final[str] = "MnistLearner"

# Metric keys shared by the fit loop, the summary logger and the CSV report
METRIC_LOSS: Final[str] = "loss"
METRIC_ACCURACY: Final[str] = "accuracy"

# Data splits as seen by the fit loop
SPLIT_TRAIN: Final[str] = "train"
SPLIT_VALID: Final[str] = "valid"

# ARTIFACT LAYOUT
CONFIG_FILENAME: Final[str] = "config.json"
MODEL_FILENAME: Final[str] = "model.pt"
METRICS_FILENAME: Final[str] = "metrics.csv"
LOG_FILENAME: Final[str] = "experiment.log"
CHECKPOINT_DIRNAME: Final[str] = "checkpoint"
MODEL_CHECKPOINT_TEMPLATE: Final[str] = "model-{epoch}.pt"
OPTIM_CHECKPOINT_TEMPLATE: Final[str] = "optim-{epoch}.pt"


# PATH CALCULATIONS
def get_project_root() -> Path:
    """
    Locate the project root by searching upward for a ``.git`` or ``setup.py``.

    Outside a source checkout (a regular install into site-packages) no
    marker is found and the current working directory is used instead.
    """
    current_path = Path(__file__).resolve().parent
    root_markers = {".git", "setup.py"}

    for parent in [current_path] + list(current_path.parents):
        if any((parent / marker).exists() for marker in root_markers):
            return parent

    return Path.cwd().resolve()


PROJECT_ROOT: Final[Path] = get_project_root().resolve()

# Input: where torchvision downloads the raw MNIST archives
DATASET_DIR: Final[Path] = (PROJECT_ROOT / "dataset").resolve()

# Output: default artifact directory used by the CLI
DEFAULT_ARTIFACT_DIR: Final[Path] = (PROJECT_ROOT / "artifacts").resolve()
