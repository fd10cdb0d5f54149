"""
Model Architectures Package.

Exposes the default classifier built by ``ModelConfig.init``.
"""

from .conv_net import ConvNet

__all__ = ["ConvNet"]
