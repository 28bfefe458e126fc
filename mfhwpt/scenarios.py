from __future__ import annotations
from typing import Dict, List, Tuple, Union

from .parameters import MODEL_2, MODEL_4, ModelVariant, ParameterSet

# base reservoir description shared by every model
_BASE: Dict[str, float] = dict(phi=0.05, h=20.0, mu=0.5, B=1.05, Ct=5e-4, q=5.0)


def default_parameters(variant: ModelVariant) -> ParameterSet:
    """Starting values for a variant; storage and boundary groups only where they apply."""
    p = dict(_BASE, kf=1e-3, km=1e-4, L=1000.0, Lf=100.0, nf=4, rmD=4.0,
             omega1=0.4, omega2=0.08, lambda1=1e-3, gamaD=0.02)
    if variant.has_storage:
        p.update(cD=0.01, S=1.0)
    if variant.bounded:
        p.update(reD=10.0)
    return ParameterSet(**p)


def infinite_constant_storage() -> Tuple[ModelVariant, ParameterSet]:
    """Model 2 with no stress sensitivity: half-slope early, flattening late."""
    params = ParameterSet(**_BASE, kf=1e-3, km=1e-4, L=1000.0, Lf=100.0, nf=4, rmD=4.0,
                          omega1=0.4, omega2=0.08, lambda1=1e-3, gamaD=0.0,
                          reD=0.0, cD=0.0, S=0.0, N=8)
    return MODEL_2, params


def closed_constant_storage() -> Tuple[ModelVariant, ParameterSet]:
    """Model 4, reD = 10: boundary-depletion upturn at late time."""
    _, params = infinite_constant_storage()
    return MODEL_4, ParameterSet(**{**params.as_dict(), "reD": 10.0})


def omega1_sweep() -> Tuple[ModelVariant, Dict[str, Union[float, List[float]]]]:
    """Raw Model 2 input with omega1 over {0.2, 0.4, 0.6}."""
    variant, params = infinite_constant_storage()
    raw: Dict[str, Union[float, List[float]]] = dict(params.as_dict())
    raw["omega1"] = [0.2, 0.4, 0.6]
    return variant, raw
