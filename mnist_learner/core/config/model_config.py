"""
Model Architecture Configuration Module.

Declarative schema for the default convolutional classifier. The config
owns parameter initialization: ``ModelConfig.init(device)`` returns a freshly
initialized network already placed on the target device.
"""

from __future__ import annotations

import torch
import torch.nn as nn
from pydantic import BaseModel, ConfigDict, Field

from .types import DropoutRate, PositiveInt


# MODEL CONFIGURATION
class ModelConfig(BaseModel):
    """
    Hyperparameters of the classifier network.

    Attributes:
        num_classes: Number of output classes (logit width).
        hidden_size: Width of the hidden fully-connected layer.
        dropout: Dropout probability applied after convolutions and the hidden layer.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    num_classes: PositiveInt = Field(description="Number of output classes.")
    hidden_size: PositiveInt = Field(description="Width of the hidden linear layer.")
    dropout: DropoutRate = Field(default=0.5, description="Dropout probability.")

    def init(self, device: torch.device) -> nn.Module:
        """
        Build a freshly initialized model on ``device``.

        Parameter initialization draws from the torch global generator, so the
        caller must seed before calling this.
        """
        from ...architectures import ConvNet

        model = ConvNet(
            num_classes=self.num_classes,
            hidden_size=self.hidden_size,
            dropout=self.dropout,
        )
        return model.to(device)
