"""
MNIST Learner Exception Hierarchy.

LearnerError (base, Exception)
├── ConfigError(LearnerError, ValueError)        ← config (de)serialization and validation
├── BatchError(LearnerError)                     ← per-batch evaluation failures
│   ├── ShapeMismatch(BatchError)
│   ├── EmptyBatch(BatchError)
│   ├── DeviceMismatch(BatchError)
│   └── StepFailure(BatchError)                  ← any other error raised inside a step
├── PersistenceError(LearnerError, OSError)      ← checkpoint and final model I/O
└── DatasetError(LearnerError)                   ← dataset loading

ConfigError multi-inherits from ValueError and PersistenceError from OSError
so that generic ``except ValueError`` / ``except OSError`` blocks still apply.
"""

from __future__ import annotations


class LearnerError(Exception):
    """Base exception for all MNIST Learner errors."""


class ConfigError(LearnerError, ValueError):
    """Configuration serialization, deserialization or validation error."""


class BatchError(LearnerError):
    """
    Failure while evaluating a single batch.

    The fit loop attaches the epoch, phase and batch index before re-raising,
    so the caller of the top-level entry point can locate the faulty batch.
    """

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.epoch: int | None = None
        self.phase: str | None = None
        self.batch_index: int | None = None

    def attach_context(self, *, epoch: int, phase: str, batch_index: int) -> None:
        """Record where in the run the failure happened."""
        self.epoch = epoch
        self.phase = phase
        self.batch_index = batch_index

    def __str__(self) -> str:
        message = super().__str__()
        if self.epoch is None:
            return message
        return f"[epoch {self.epoch} | {self.phase} | batch {self.batch_index}] {message}"


class ShapeMismatch(BatchError):
    """Logits, inputs and targets disagree on batch or class dimensions."""


class EmptyBatch(BatchError):
    """A batch with zero samples reached a step function."""


class DeviceMismatch(BatchError):
    """Inputs and model parameters live on different devices."""


class StepFailure(BatchError):
    """
    Non-batch error raised while fetching, moving, evaluating or applying a batch.

    The underlying exception is chained as ``__cause__``.
    """


class PersistenceError(LearnerError, OSError):
    """Checkpoint or final model could not be written or restored."""


class DatasetError(LearnerError):
    """Dataset download, loading or validation error."""
