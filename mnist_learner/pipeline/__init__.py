"""
Pipeline Package.

Top-level entry points: ``train`` runs a full fit and writes the artifact
directory; ``load_trained_model`` and ``infer`` consume it.

Example:
    >>> from mnist_learner.pipeline import infer, train
    >>> result = train(Path("artifacts/mnist"), cfg, torch.device("cpu"))
    >>> infer(Path("artifacts/mnist"), torch.device("cpu"), digits)
"""

from .inference import infer, load_trained_model
from .training import TrainingResult, train

__all__ = [
    "TrainingResult",
    "train",
    "load_trained_model",
    "infer",
]
