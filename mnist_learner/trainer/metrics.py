"""
Metric Aggregation.

Sample-weighted running loss and accuracy for one split of one epoch, and
the immutable per-epoch record the fit loop keeps in its history.
"""

from __future__ import annotations

from dataclasses import dataclass

from ..core import METRIC_ACCURACY, METRIC_LOSS, SPLIT_TRAIN, SPLIT_VALID
from .output import ClassificationOutput


@dataclass(frozen=True)
class MetricSummary:
    """Aggregated metrics of one split over one epoch."""

    loss: float
    accuracy: float
    num_samples: int

    def as_dict(self) -> dict[str, float]:
        return {METRIC_LOSS: self.loss, METRIC_ACCURACY: self.accuracy}


class MetricAccumulator:
    """
    Running aggregation of loss and accuracy.

    Loss is weighted by batch size so that a partial last batch counts in
    proportion to its samples.
    """

    def __init__(self) -> None:
        self.reset()

    def reset(self) -> None:
        """Clear all running sums (called at epoch boundaries)."""
        self._loss_sum = 0.0
        self._correct = 0
        self._samples = 0
        self._batches = 0

    def update(self, item: ClassificationOutput) -> None:
        """Fold one batch output into the running sums."""
        batch_size = item.batch_size
        self._loss_sum += float(item.loss.detach().item()) * batch_size
        self._correct += item.num_correct()
        self._samples += batch_size
        self._batches += 1

    @property
    def num_batches(self) -> int:
        return self._batches

    @property
    def num_samples(self) -> int:
        return self._samples

    def summary(self) -> MetricSummary:
        """Return the aggregate so far; an untouched accumulator reports zeros."""
        if self._samples == 0:
            return MetricSummary(loss=0.0, accuracy=0.0, num_samples=0)
        return MetricSummary(
            loss=self._loss_sum / self._samples,
            accuracy=self._correct / self._samples,
            num_samples=self._samples,
        )


@dataclass(frozen=True)
class EpochSummary:
    """Train and validation metrics recorded at the end of one epoch."""

    epoch: int
    train: MetricSummary
    valid: MetricSummary
    num_batches: int = 0

    def metrics(self, split: str) -> dict[str, float]:
        """Metric mapping for ``split`` (``"train"`` or ``"valid"``)."""
        if split == SPLIT_TRAIN:
            return self.train.as_dict()
        if split == SPLIT_VALID:
            return self.valid.as_dict()
        raise KeyError(f"Unknown split: {split!r}")

    def to_row(self) -> dict[str, float | int]:
        """Flat mapping used for the CSV report."""
        row: dict[str, float | int] = {"epoch": self.epoch}
        for split in (SPLIT_TRAIN, SPLIT_VALID):
            for key, value in self.metrics(split).items():
                row[f"{split}_{key}"] = value
        return row
