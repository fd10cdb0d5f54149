"""
Telemetry and Reporting Package.

Centralizes logging initialization and training progress output.

Available Components:

- Logger: Stream and file logging initialization.
- LogStyle: Unified logging style constants.
- Progress functions: Per-epoch metric lines and learner summary.
"""

from .logger import ColorFormatter, Logger
from .progress import log_epoch_summary, log_training_summary
from .styles import LogStyle

__all__ = [
    "ColorFormatter",
    "Logger",
    "LogStyle",
    "log_epoch_summary",
    "log_training_summary",
]
