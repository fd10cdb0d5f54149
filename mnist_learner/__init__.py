"""
MNIST Learner: reproducible digit classifier training.

Top-level convenience API re-exporting the most commonly used components
from subpackages:

    from mnist_learner import TrainingConfig, ModelConfig, AdamConfig, train
"""

from importlib.metadata import version as _pkg_version

__version__ = _pkg_version("mnist-learner")

from .architectures import ConvNet
from .core import AdamConfig, ArtifactDirectory, LogStyle, ModelConfig, TrainingConfig
from .pipeline import TrainingResult, infer, load_trained_model, train
from .trainer import Learner

__all__ = [
    "__version__",
    # Core
    "TrainingConfig",
    "ModelConfig",
    "AdamConfig",
    "ArtifactDirectory",
    "LogStyle",
    # Architectures
    "ConvNet",
    # Fit loop
    "Learner",
    # Pipeline
    "train",
    "TrainingResult",
    "load_trained_model",
    "infer",
]
