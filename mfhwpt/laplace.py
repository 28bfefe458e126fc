from __future__ import annotations
import numpy as np

from .config import STORAGE_EPS
from .fractures import fracture_positions, pwd_composite
from .parameters import ModelVariant, ParameterSet

__all__ = ["LaplaceModel", "flaplace_composite", "interporosity_transfer", "apply_wellbore_storage"]


def interporosity_transfer(z: float, omega1: float, omega2: float, lambda1: float) -> float:
    """fs1 = ω1 + λ1 ω2 / (λ1 + z ω2)."""
    den = lambda1 + z * omega2
    if den == 0.0:
        return omega1
    return omega1 + lambda1 * omega2 / den


def apply_wellbore_storage(pf: float, z: float, cD: float, S: float) -> float:
    """(z pf + S) / (z + CD z² (z pf + S))."""
    with np.errstate(all="ignore"):
        return float(np.float64(z * pf + S) / (z + cD * z * z * (z * pf + S)))


class LaplaceModel:
    """
    Dimensionless wellbore pressure in Laplace space for one model variant and
    one parameter set. Everything independent of z is fixed at construction;
    calling the model with z builds and solves a fresh flux system.
    """

    def __init__(self, variant: ModelVariant, params: ParameterSet) -> None:
        self.variant = variant
        self.params = params

        # Short-hands
        self.M12: float = params.M12
        self.LfD: float = params.LfD
        self.xwD: np.ndarray = fracture_positions(params.nf)
        self.fs2: float = self.M12 * params.omega2
        self.storage: bool = variant.has_storage and (
            params.cD > STORAGE_EPS or abs(params.S) > STORAGE_EPS)

    def fracture_pressure(self, z: float) -> float:
        p = self.params
        fs1 = interporosity_transfer(z, p.omega1, p.omega2, p.lambda1)
        return pwd_composite(z, fs1, self.fs2, self.M12, self.LfD, p.rmD, p.reD,
                             self.xwD, self.variant.boundary)

    def __call__(self, z: float) -> float:
        pf = self.fracture_pressure(z)
        if self.storage:
            pf = apply_wellbore_storage(pf, z, self.params.cD, self.params.S)
        return pf


def flaplace_composite(z: float, params: ParameterSet, variant: ModelVariant) -> float:
    return LaplaceModel(variant, params)(z)
