"""
Step Contract Value Types.

Plain containers exchanged between the data batcher, the step functions and
the fit loop. A ``ClassificationOutput`` is created fresh for every step and
consumed immediately by the metric accumulators; it is never retained across
steps.
"""

from __future__ import annotations

from dataclasses import dataclass

import torch

# Gradient set: derivative of the loss w.r.t. each trainable parameter, keyed
# by the parameter's qualified name in ``model.named_parameters()``.
Gradients = dict[str, torch.Tensor]


@dataclass(frozen=True)
class Batch:
    """
    One group of labeled samples.

    Attributes:
        images: Float tensor ``(N, H, W)``.
        targets: Int64 class indices ``(N,)``.
    """

    images: torch.Tensor
    targets: torch.Tensor

    def __len__(self) -> int:
        return int(self.targets.shape[0]) if self.targets.ndim > 0 else 0

    @property
    def device(self) -> torch.device:
        return self.images.device

    def to(self, device: torch.device) -> Batch:
        """Return a batch whose tensors live on ``device``."""
        return Batch(
            images=self.images.to(device, non_blocking=True),
            targets=self.targets.to(device, non_blocking=True),
        )

    def pin_memory(self) -> Batch:
        # Called by DataLoader when pin_memory=True
        return Batch(images=self.images.pin_memory(), targets=self.targets.pin_memory())


@dataclass(frozen=True)
class ClassificationOutput:
    """
    Result of evaluating a model on one batch.

    Attributes:
        loss: Scalar cross-entropy loss (attached to the graph in training).
        output: Logits ``(N, C)``.
        targets: Class indices ``(N,)``.
    """

    loss: torch.Tensor
    output: torch.Tensor
    targets: torch.Tensor

    @property
    def batch_size(self) -> int:
        return int(self.targets.shape[0])

    def num_correct(self) -> int:
        """Number of samples whose arg-max logit equals the target."""
        predicted = self.output.detach().argmax(dim=1)
        return int((predicted == self.targets).sum().item())


@dataclass(frozen=True)
class TrainOutput:
    """
    Training step result: a fresh gradient set plus the classification output.

    The gradients are consumed exactly once, by the optimizer update in the
    fit loop.
    """

    gradients: Gradients
    item: ClassificationOutput
