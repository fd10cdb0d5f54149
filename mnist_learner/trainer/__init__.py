"""
Trainer Package Facade.

Exposes the ``Learner`` fit loop, the per-batch step contracts and the
value types they exchange.
"""

from .engine import apply_gradients, evaluate, forward_classification, train_step, valid_step
from .learner import Learner
from .metrics import EpochSummary, MetricAccumulator, MetricSummary
from .output import Batch, ClassificationOutput, Gradients, TrainOutput

__all__ = [
    "Learner",
    "Batch",
    "ClassificationOutput",
    "TrainOutput",
    "Gradients",
    "forward_classification",
    "evaluate",
    "train_step",
    "valid_step",
    "apply_gradients",
    "MetricAccumulator",
    "MetricSummary",
    "EpochSummary",
]
