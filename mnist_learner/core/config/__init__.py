"""
Configuration Package Initialization.

Flat public API for configuration components. Uses the PEP 562 lazy import
pattern so that importing ``mnist_learner.core.config`` does not pull in
torch until a config class is actually accessed.

Example:
    >>> from mnist_learner.core.config import TrainingConfig
    >>> cfg = TrainingConfig.from_recipe(Path("recipe.yaml"))
"""

from importlib import import_module
from typing import Any

__all__ = [
    "AdamConfig",
    "ModelConfig",
    "TrainingConfig",
]

_PKG = "mnist_learner.core.config"

_LAZY_IMPORTS: dict[str, str] = {
    "AdamConfig": f"{_PKG}.optimizer_config",
    "ModelConfig": f"{_PKG}.model_config",
    "TrainingConfig": f"{_PKG}.training_config",
}


def __getattr__(name: str) -> Any:
    """
    Lazily import configuration components on first access.

    Raises:
        AttributeError: If name is not in the public API (__all__).
    """
    if name not in _LAZY_IMPORTS:
        raise AttributeError(f"module {__name__!r} has no attribute {name!r}")

    module = import_module(_LAZY_IMPORTS[name])
    attr = getattr(module, name)
    globals()[name] = attr
    return attr


def __dir__() -> list[str]:
    """Support for dir() and IDE auto-completion."""
    return sorted(__all__)
