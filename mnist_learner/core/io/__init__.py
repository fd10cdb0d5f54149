"""
Input/Output & Persistence Utilities.

Configuration serialization (JSON snapshot, YAML recipes) and torch
state-dict persistence for checkpoints and the final model.
"""

from .checkpoints import load_model_weights, load_state, save_model_weights, save_state
from .serialization import dump_recipe, load_recipe, write_json_atomic

__all__ = [
    # Serialization
    "write_json_atomic",
    "load_recipe",
    "dump_recipe",
    # Checkpoints
    "save_state",
    "save_model_weights",
    "load_state",
    "load_model_weights",
]
