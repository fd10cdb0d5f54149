"""
Optimizer Configuration Module.

Schema for the Adam optimizer collaborator. The learning rate is not part of
this config: it is a top-level training hyperparameter and is passed in at
initialization time.
"""

from __future__ import annotations

import torch.nn as nn
import torch.optim as optim
from pydantic import BaseModel, ConfigDict, Field

from .types import Beta, GradNorm, PositiveFloat, WeightDecay


# OPTIMIZER CONFIGURATION
class AdamConfig(BaseModel):
    """
    Adam hyperparameters.

    Attributes:
        beta_1: Exponential decay rate of the first moment estimate.
        beta_2: Exponential decay rate of the second moment estimate.
        epsilon: Numerical stability term added to the denominator.
        weight_decay: L2 penalty, disabled when None.
        grad_clip_norm: Max global gradient norm, disabled when None.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    beta_1: Beta = 0.9
    beta_2: Beta = 0.999
    epsilon: PositiveFloat = 1e-5
    weight_decay: WeightDecay | None = None
    grad_clip_norm: GradNorm | None = Field(
        default=None, description="Clip gradients to this global L2 norm before each update."
    )

    def init(self, model: nn.Module, learning_rate: float) -> optim.Adam:
        """
        Create an Adam optimizer over the trainable parameters of ``model``.

        Args:
            model: Network whose parameters will be optimized.
            learning_rate: Step size.

        Returns:
            Configured ``torch.optim.Adam`` instance.
        """
        return optim.Adam(
            [p for p in model.parameters() if p.requires_grad],
            lr=learning_rate,
            betas=(self.beta_1, self.beta_2),
            eps=self.epsilon,
            weight_decay=self.weight_decay or 0.0,
        )
