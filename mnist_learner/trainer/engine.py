"""
Classification Evaluator and Step Contracts.

Stateless per-batch kernels consumed by the ``Learner`` fit loop. None of
the functions below mutates model parameters except :func:`apply_gradients`,
which is the single place where an update happens.

Key Functions:
    forward_classification: Forward pass plus per-call cross-entropy loss.
    train_step: Forward + reverse-mode differentiation, gradients returned.
    valid_step: Forward only, under ``torch.no_grad``.
    apply_gradients: Hand a gradient set to the optimizer and step it.
"""

from __future__ import annotations

import logging

import torch
import torch.nn as nn

from ..core import LOGGER_NAME
from ..exceptions import DeviceMismatch, EmptyBatch, ShapeMismatch
from .output import Batch, ClassificationOutput, Gradients, TrainOutput

logger = logging.getLogger(LOGGER_NAME)


# CLASSIFICATION EVALUATOR
def forward_classification(
    model: nn.Module,
    images: torch.Tensor,
    targets: torch.Tensor,
) -> ClassificationOutput:
    """
    Run the model on ``images`` and score the logits against ``targets``.

    A new ``nn.CrossEntropyLoss`` is built for every call; no loss state is
    shared between calls.

    Args:
        model: Classifier returning ``(N, C)`` logits.
        images: Inputs already placed on the model's device.
        targets: Class indices ``(N,)`` in ``[0, C)``.

    Returns:
        ClassificationOutput with loss, logits and targets.

    Raises:
        DeviceMismatch: If inputs, targets and parameters are not co-located.
        ShapeMismatch: If inputs are not rank-3, batch sizes disagree, the
            model's forward pass rejects the inputs, logits are not
            ``(N, C)``, or a target falls outside ``[0, C)``.
    """
    _check_devices(model, images, targets)

    if images.ndim != 3:
        raise ShapeMismatch(f"Inputs must be rank-3 (N, H, W), got shape {tuple(images.shape)}")
    if targets.ndim != 1:
        raise ShapeMismatch(f"Targets must be rank-1, got shape {tuple(targets.shape)}")
    if images.shape[0] != targets.shape[0]:
        raise ShapeMismatch(
            f"Batch size mismatch: {images.shape[0]} inputs vs {targets.shape[0]} targets"
        )

    try:
        output = model(images)
    except (RuntimeError, ValueError) as e:
        raise ShapeMismatch(
            f"Model rejected inputs of shape {tuple(images.shape)}: {e}"
        ) from e

    if output.ndim != 2 or output.shape[0] != targets.shape[0]:
        raise ShapeMismatch(
            f"Expected logits of shape ({targets.shape[0]}, C), got {tuple(output.shape)}"
        )

    num_classes = output.shape[1]
    if targets.numel() > 0:
        low, high = int(targets.min().item()), int(targets.max().item())
        if low < 0 or high >= num_classes:
            raise ShapeMismatch(
                f"Targets span [{low}, {high}] but the model emits {num_classes} classes"
            )

    loss = nn.CrossEntropyLoss()(output, targets)
    return ClassificationOutput(loss=loss, output=output, targets=targets)


# Alias matching the contract name used by the fit loop documentation
evaluate = forward_classification


# STEP CONTRACTS
def train_step(model: nn.Module, batch: Batch) -> TrainOutput:
    """
    Training step: evaluate the batch and differentiate the loss.

    Gradients are computed with ``torch.autograd.grad`` and returned as a
    fresh mapping; nothing is accumulated on ``param.grad`` and no parameter
    is modified.

    Raises:
        EmptyBatch: If the batch holds zero samples.
    """
    _ensure_not_empty(batch)

    named_params = [(name, p) for name, p in model.named_parameters() if p.requires_grad]

    with torch.enable_grad():
        item = forward_classification(model, batch.images, batch.targets)
        grads = torch.autograd.grad(
            item.loss, [p for _, p in named_params], allow_unused=True
        )

    # Parameters outside the loss graph get an explicit zero gradient
    gradients: Gradients = {
        name: grad if grad is not None else torch.zeros_like(param)
        for (name, param), grad in zip(named_params, grads)
    }

    detached = ClassificationOutput(
        loss=item.loss.detach(), output=item.output.detach(), targets=item.targets
    )
    return TrainOutput(gradients=gradients, item=detached)


@torch.no_grad()
def valid_step(model: nn.Module, batch: Batch) -> ClassificationOutput:
    """
    Validation step: evaluate the batch without gradient bookkeeping.

    Raises:
        EmptyBatch: If the batch holds zero samples.
    """
    _ensure_not_empty(batch)
    return forward_classification(model, batch.images, batch.targets)


# OPTIMIZER UPDATE
def apply_gradients(
    model: nn.Module,
    optimizer: torch.optim.Optimizer,
    gradients: Gradients,
    grad_clip_norm: float | None = None,
) -> None:
    """
    Consume a gradient set with one optimizer step.

    Args:
        model: Network whose parameters the optimizer tracks.
        optimizer: Optimizer performing the update rule.
        gradients: Output of :func:`train_step`, keyed by parameter name.
        grad_clip_norm: Max global L2 norm; ``None`` or ``<= 0`` disables clipping.

    Raises:
        KeyError: If a gradient names a parameter the model does not have.
    """
    params = dict(model.named_parameters())
    optimizer.zero_grad(set_to_none=True)

    for name, grad in gradients.items():
        if name not in params:
            raise KeyError(f"Gradient provided for unknown parameter '{name}'")
        params[name].grad = grad

    if grad_clip_norm is not None and grad_clip_norm > 0:
        torch.nn.utils.clip_grad_norm_(
            [params[name] for name in gradients], grad_clip_norm
        )

    optimizer.step()
    optimizer.zero_grad(set_to_none=True)


# INTERNAL HELPERS
def _ensure_not_empty(batch: Batch) -> None:
    """Reject zero-size batches before they turn into NaN metrics."""
    if len(batch) == 0:
        raise EmptyBatch("Received a batch with zero samples")


def _check_devices(model: nn.Module, images: torch.Tensor, targets: torch.Tensor) -> None:
    """Require inputs, targets and the first model parameter to share a device."""
    if targets.device != images.device:
        raise DeviceMismatch(
            f"Inputs on {images.device} but targets on {targets.device}"
        )
    param = next(model.parameters(), None)
    if param is not None and param.device != images.device:
        raise DeviceMismatch(
            f"Inputs on {images.device} but model parameters on {param.device}"
        )
