"""Pressure-transient type curves for multi-fractured horizontal wells in dual-porosity reservoirs."""
from .parameters import (Boundary, WellboreStorage, ModelVariant, ParameterSet, ALL_VARIANTS,
                         MODEL_1, MODEL_2, MODEL_3, MODEL_4, MODEL_5, MODEL_6)
from .laplace import LaplaceModel, flaplace_composite
from .model import CurveResult, SensitivityCurve, TransientCurveModel
from .manager import ModelManager

__all__ = [
    "Boundary",
    "WellboreStorage",
    "ModelVariant",
    "ParameterSet",
    "ALL_VARIANTS",
    "MODEL_1", "MODEL_2", "MODEL_3", "MODEL_4", "MODEL_5", "MODEL_6",
    "LaplaceModel",
    "flaplace_composite",
    "CurveResult",
    "SensitivityCurve",
    "TransientCurveModel",
    "ModelManager",
]
__version__ = "0.1.0"
