"""Example models and validators.

Reproduces the reference example application: a model with a nested
sub-model and a left/right pair whose allowed contents depend on their types.
"""

from .models import (
    DoubleModel,
    DoubleModelType,
    SomeModel,
    SubModel,
    SubModelType,
    create_sample_model,
)
from .validators import DoubleLeftRightValidator, SomeModelValidator, SubModelValidator

__all__ = [
    "DoubleModel",
    "DoubleModelType",
    "SomeModel",
    "SubModel",
    "SubModelType",
    "create_sample_model",
    "DoubleLeftRightValidator",
    "SomeModelValidator",
    "SubModelValidator",
]
