"""
Training Progress Logging.

Per-epoch metric lines and the end-of-run learner summary.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Sequence

from ..paths.constants import LOGGER_NAME, METRIC_ACCURACY, METRIC_LOSS, SPLIT_TRAIN, SPLIT_VALID
from .styles import LogStyle

if TYPE_CHECKING:  # pragma: no cover
    from ...trainer.metrics import EpochSummary

logger = logging.getLogger(LOGGER_NAME)

# Direction in which each metric improves
_HIGHER_IS_BETTER = {METRIC_LOSS: False, METRIC_ACCURACY: True}


def log_epoch_summary(
    summary: EpochSummary,
    num_epochs: int,
    logger_instance: logging.Logger | None = None,
) -> None:
    """
    Log train and validation metrics for one finished epoch.

    Args:
        summary: Metrics of the epoch that just ended.
        num_epochs: Total number of epochs (for the ``i/N`` display).
        logger_instance: Logger instance to use (defaults to module logger).
    """
    log = logger_instance or logger
    I = LogStyle.INDENT  # noqa: E741
    A = LogStyle.ARROW

    log.info(LogStyle.LIGHT)
    log.info(f"{I}Epoch {summary.epoch}/{num_epochs} {LogStyle.BULLET} {summary.num_batches} batches")
    log.info(f"{I}{A} Loss  : T {summary.train.loss:.4f} / V {summary.valid.loss:.4f}")
    log.info(f"{I}{A} Acc   : T {summary.train.accuracy:.4f} / V {summary.valid.accuracy:.4f}")


def log_training_summary(
    history: Sequence[EpochSummary],
    logger_instance: logging.Logger | None = None,
) -> None:
    """
    Log the learner summary table: last and best value of every metric per split.

    Args:
        history: Per-epoch summaries in epoch order.
        logger_instance: Logger instance to use (defaults to module logger).
    """
    log = logger_instance or logger
    if not history:
        log.warning(f"{LogStyle.WARNING} No epoch completed, nothing to summarize.")
        return

    LogStyle.log_phase_header(log, "LEARNER SUMMARY", LogStyle.DOUBLE)
    log.info(f"{LogStyle.INDENT}{'Split':<7}{'Metric':<10}{'Last':>10}{'Best':>10}{'Epoch':>8}")
    log.info(LogStyle.LIGHT)

    for split in (SPLIT_TRAIN, SPLIT_VALID):
        for metric, higher_is_better in _HIGHER_IS_BETTER.items():
            values = [(s.epoch, s.metrics(split)[metric]) for s in history]
            pick = max if higher_is_better else min
            best_epoch, best_value = pick(values, key=lambda item: item[1])
            last_value = values[-1][1]
            log.info(
                f"{LogStyle.INDENT}{split:<7}{metric:<10}"
                f"{last_value:>10.4f}{best_value:>10.4f}{best_epoch:>8d}"
            )

    log.info(LogStyle.DOUBLE)
