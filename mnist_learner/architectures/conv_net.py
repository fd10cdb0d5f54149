"""
Compact CNN for 28×28 Grayscale Digits.

Default model collaborator of the fit loop. Consumes a rank-3 batch of
single-channel images ``(N, H, W)`` and returns rank-2 logits ``(N, C)``.

Architecture:
    Input [N×H×W] → reshape [N×1×H×W] → Conv1 [8] → Dropout → Conv2 [16]
                  → Dropout → ReLU → AdaptiveAvgPool [8×8] → FC [hidden]
                  → Dropout → ReLU → FC [num_classes]
"""

from __future__ import annotations

import torch
import torch.nn as nn

_POOL_SIZE = 8
_CONV1_CHANNELS = 8
_CONV2_CHANNELS = 16


# MODEL DEFINITION
class ConvNet(nn.Module):
    """Two-convolution classifier with a hidden fully-connected layer."""

    def __init__(self, num_classes: int, hidden_size: int, dropout: float = 0.5) -> None:
        """
        Initialize ConvNet architecture.

        Args:
            num_classes: Number of output classes
            hidden_size: Width of the hidden linear layer
            dropout: Dropout probability
        """
        super().__init__()
        self.num_classes = num_classes

        self.conv1 = nn.Conv2d(1, _CONV1_CHANNELS, kernel_size=3)
        self.conv2 = nn.Conv2d(_CONV1_CHANNELS, _CONV2_CHANNELS, kernel_size=3)
        self.pool = nn.AdaptiveAvgPool2d((_POOL_SIZE, _POOL_SIZE))
        self.dropout = nn.Dropout(dropout)
        self.linear1 = nn.Linear(_CONV2_CHANNELS * _POOL_SIZE * _POOL_SIZE, hidden_size)
        self.linear2 = nn.Linear(hidden_size, num_classes)
        self.activation = nn.ReLU()

    def forward(self, images: torch.Tensor) -> torch.Tensor:
        """Forward pass: ``(N, H, W)`` images to ``(N, num_classes)`` logits."""
        batch_size, height, width = images.shape

        # Create a channel dimension at the second position
        x = images.reshape(batch_size, 1, height, width)

        x = self.conv1(x)
        x = self.dropout(x)
        x = self.conv2(x)
        x = self.dropout(x)
        x = self.activation(x)

        x = self.pool(x)
        x = torch.flatten(x, 1)
        x = self.linear1(x)
        x = self.dropout(x)
        x = self.activation(x)

        return self.linear2(x)
