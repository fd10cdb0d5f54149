"""
Semantic type Definitions & Validation Primitives.

Pydantic ``Annotated`` aliases enforcing hyperparameter boundaries at the
configuration edge, before any value reaches the fit loop.
"""

from __future__ import annotations

from typing import Annotated, Literal

from pydantic import Field

# GENERIC PRIMITIVES
PositiveInt = Annotated[int, Field(gt=0)]
NonNegativeInt = Annotated[int, Field(ge=0)]
PositiveFloat = Annotated[float, Field(gt=0.0)]
NonNegativeFloat = Annotated[float, Field(ge=0.0)]

# TRAINING
BatchSize = Annotated[int, Field(ge=1, le=4096)]
Seed = Annotated[int, Field(ge=0, le=2**32 - 1)]

# MODEL GEOMETRY
DropoutRate = Annotated[float, Field(ge=0.0, le=0.9)]

# OPTIMIZATION
LearningRate = Annotated[float, Field(gt=0.0, lt=10.0)]
Beta = Annotated[float, Field(ge=0.0, lt=1.0)]
WeightDecay = Annotated[float, Field(ge=0.0, le=1.0)]
GradNorm = Annotated[float, Field(gt=0.0, le=100.0)]

# SYSTEM
DeviceType = Literal["auto", "cpu", "cuda", "mps"]
