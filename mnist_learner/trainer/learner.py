"""
Fit Loop Orchestration.

This module encapsulates the ``Learner``, which drives a fixed number of
epochs: a training phase that evaluates each batch, differentiates the loss
and hands the gradients to the optimizer, then a validation phase that
evaluates the updated model without gradients. Both phases feed metric
accumulators; every epoch ends with a summary line and a checkpoint.

State machine::

    Initializing → Epoch(i) → TrainPhase → ValidPhase → Checkpointed
                 → Epoch(i + 1) ... → Finished

Termination is unconditional after ``num_epochs`` epochs; there is no early
stopping. Any batch failure aborts the run and propagates with its epoch,
phase and batch index attached.
"""

from __future__ import annotations

import logging
from typing import Callable, Iterable

import torch
import torch.nn as nn
from tqdm.auto import tqdm

from ..core import (
    LOGGER_NAME,
    SPLIT_TRAIN,
    SPLIT_VALID,
    ArtifactDirectory,
    LogStyle,
    log_epoch_summary,
    log_training_summary,
)
from ..exceptions import BatchError, StepFailure
from .engine import apply_gradients, train_step, valid_step
from .metrics import EpochSummary, MetricAccumulator
from .output import Batch

logger = logging.getLogger(LOGGER_NAME)


# FIT LOOP
class Learner:
    """
    Epoch-driven fit procedure with metric aggregation and checkpointing.

    The learner exclusively owns the model parameters for the duration of
    :meth:`fit`. Steps only read them; :func:`apply_gradients` is the single
    place they change, and it runs synchronously before the next batch.

    Attributes:
        model (nn.Module): Network being trained.
        optimizer (torch.optim.Optimizer): Update rule for the model parameters.
        artifacts (ArtifactDirectory): Destination of per-epoch checkpoints.
        device (torch.device): Device every batch is moved to before a step.
        num_epochs (int): Last epoch to run (inclusive).
        grad_clip_norm (float | None): Optional global gradient norm cap.
        use_tqdm (bool): Show a progress bar per phase.
        summary (bool): Log the learner summary table after the last epoch.
        start_epoch (int): First epoch to run (``> 1`` after :meth:`resume`).
        history (list[EpochSummary]): One record per completed epoch.

    Example:
        >>> learner = Learner(model, optimizer, artifacts, device, num_epochs=5)
        >>> trained = learner.fit(train_loader, valid_loader)
    """

    def __init__(
        self,
        model: nn.Module,
        optimizer: torch.optim.Optimizer,
        artifacts: ArtifactDirectory,
        device: torch.device,
        num_epochs: int,
        grad_clip_norm: float | None = None,
        use_tqdm: bool = True,
        summary: bool = True,
    ) -> None:
        self.model = model
        self.optimizer = optimizer
        self.artifacts = artifacts
        self.device = device
        self.num_epochs = num_epochs
        self.grad_clip_norm = grad_clip_norm
        self.use_tqdm = use_tqdm
        self.summary = summary

        self.start_epoch = 1
        self.history: list[EpochSummary] = []
        self.train_metrics = MetricAccumulator()
        self.valid_metrics = MetricAccumulator()

    def resume(self, epoch: int) -> None:
        """
        Restore model and optimizer from the checkpoint of ``epoch``.

        The next :meth:`fit` call continues with ``epoch + 1``.

        Raises:
            FileNotFoundError: If the checkpoint files for ``epoch`` are missing.
            PersistenceError: If the checkpoint does not match the model.
        """
        self.artifacts.load_checkpoint(epoch, self.model, self.device, self.optimizer)
        self.start_epoch = epoch + 1
        logger.info(f"{LogStyle.INDENT}{LogStyle.ARROW} Resumed from checkpoint of epoch {epoch}")

    def fit(self, train_loader: Iterable, valid_loader: Iterable) -> nn.Module:
        """
        Run epochs ``start_epoch..num_epochs`` and return the trained model.

        Args:
            train_loader: Re-iterable source of training batches.
            valid_loader: Re-iterable source of validation batches.

        Returns:
            The model holding the parameters after the last update.

        Raises:
            BatchError: First batch failure of either phase, with context.
                Errors that are not batch errors arrive as ``StepFailure``
                with the original exception as ``__cause__``.
        """
        for epoch in range(self.start_epoch, self.num_epochs + 1):
            logger.info(f" Epoch {epoch:02d}/{self.num_epochs} ".center(LogStyle.HEADER_WIDTH, "-"))

            self._train_phase(epoch, train_loader)
            self._valid_phase(epoch, valid_loader)

            record = EpochSummary(
                epoch=epoch,
                train=self.train_metrics.summary(),
                valid=self.valid_metrics.summary(),
                num_batches=self.train_metrics.num_batches,
            )
            self.history.append(record)
            log_epoch_summary(record, self.num_epochs)

            self.artifacts.checkpoint(epoch, self.model, self.optimizer)

        if self.summary:
            log_training_summary(self.history)

        return self.model

    def _train_phase(self, epoch: int, loader: Iterable) -> None:
        """Evaluate, differentiate and update on every training batch."""
        self.model.train()
        self.train_metrics.reset()

        def step(batch: Batch) -> None:
            out = train_step(self.model, batch)
            apply_gradients(self.model, self.optimizer, out.gradients, self.grad_clip_norm)
            self.train_metrics.update(out.item)

        self._run_phase(epoch, SPLIT_TRAIN, loader, step)

    def _valid_phase(self, epoch: int, loader: Iterable) -> None:
        """Evaluate every validation batch on the updated model, in eval mode."""
        self.model.eval()
        self.valid_metrics.reset()

        def step(batch: Batch) -> None:
            self.valid_metrics.update(valid_step(self.model, batch))

        self._run_phase(epoch, SPLIT_VALID, loader, step)

    def _run_phase(
        self, epoch: int, phase: str, loader: Iterable, step: Callable[[Batch], None]
    ) -> None:
        """
        Feed every batch of ``loader`` to ``step``.

        Any failure, including one raised by the loader itself, aborts the
        phase. Non-batch errors are wrapped in ``StepFailure`` so that the
        epoch, phase and batch index always travel with the exception.
        """
        batch_index = 0
        try:
            for raw in self._iterate(loader, epoch, phase):
                step(_as_batch(raw).to(self.device))
                batch_index += 1
        except BatchError as e:
            self._abort(e, epoch, phase, batch_index)
            raise
        except Exception as e:
            failure = StepFailure(f"{type(e).__name__}: {e}")
            self._abort(failure, epoch, phase, batch_index)
            raise failure from e

    def _iterate(self, loader: Iterable, epoch: int, phase: str) -> Iterable:
        """Wrap ``loader`` in a progress bar when enabled."""
        if not self.use_tqdm:
            return loader
        desc = f"{phase.capitalize()} Epoch {epoch}/{self.num_epochs}"
        return tqdm(loader, desc=desc, leave=False, ncols=100)

    def _abort(self, error: BatchError, epoch: int, phase: str, batch_index: int) -> None:
        """Attach run context to a batch failure and log it."""
        error.attach_context(epoch=epoch, phase=phase, batch_index=batch_index)
        logger.error(f" {LogStyle.FAILURE} Aborting run: {error}")


def _as_batch(raw: Batch | tuple | list) -> Batch:
    """Accept ``Batch`` objects or plain ``(images, targets)`` pairs."""
    if isinstance(raw, Batch):
        return raw
    images, targets = raw
    return Batch(images=images, targets=targets)
