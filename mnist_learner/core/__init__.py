"""
Core Utilities Package

Exposes configuration, reproducibility, persistence, logging and artifact
layout components used by the trainer and pipeline packages.
"""

# Configuration
from .config import AdamConfig, ModelConfig, TrainingConfig

# Environment & Hardware
from .environment import detect_best_device, set_seed, to_device_obj, worker_init_fn

# Input/Output Utilities
from .io import (
    dump_recipe,
    load_model_weights,
    load_recipe,
    load_state,
    save_model_weights,
    save_state,
    write_json_atomic,
)

# Logging
from .logger import Logger, LogStyle, log_epoch_summary, log_training_summary

# Constants & Paths
from .paths import (
    DATASET_DIR,
    DEFAULT_ARTIFACT_DIR,
    LOGGER_NAME,
    METRIC_ACCURACY,
    METRIC_LOSS,
    PROJECT_ROOT,
    SPLIT_TRAIN,
    SPLIT_VALID,
    ArtifactDirectory,
)

__all__ = [
    # Configuration
    "TrainingConfig",
    "ModelConfig",
    "AdamConfig",
    # Constants & Paths
    "PROJECT_ROOT",
    "DATASET_DIR",
    "DEFAULT_ARTIFACT_DIR",
    "LOGGER_NAME",
    "METRIC_LOSS",
    "METRIC_ACCURACY",
    "SPLIT_TRAIN",
    "SPLIT_VALID",
    "ArtifactDirectory",
    # Logging
    "Logger",
    "LogStyle",
    "log_epoch_summary",
    "log_training_summary",
    # Environment
    "set_seed",
    "worker_init_fn",
    "detect_best_device",
    "to_device_obj",
    # I/O
    "write_json_atomic",
    "load_recipe",
    "dump_recipe",
    "save_state",
    "save_model_weights",
    "load_state",
    "load_model_weights",
]
