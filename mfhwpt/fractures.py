"""
Flux allocation along an evenly spaced, collinear array of transverse
fractures in a composite (inner fracture system / outer matrix) reservoir.

For one Laplace variable z the per-fracture fluxes q_1..q_nf and the shared
bottomhole pressure p satisfy

    Σ_j A_ij q_j − p = 0        (i = 1..nf, pressure equality)
    Σ_j z q_j        = 1        (unit total rate)

with A_ij = ∫_{-LfD}^{LfD} [K0(γ1 d) + Ac I0(γ1 d)] dα / (2 M12 LfD) and
d = |xwD_i − xwD_j − α|. The outer-boundary reflection enters through the
composite coefficient Ac.
"""

from __future__ import annotations
import math
from typing import Dict, Tuple, Union

import numpy as np
from scipy.special import kv, kve

from .config import BESSEL_ARG_FLOOR, MAGNITUDE_FLOOR
from .logging_setup import setup_logger
from .parameters import Boundary
from .special import ScaledValue, adaptive_gauss, scaled_besseli

__all__ = [
    "fracture_positions",
    "boundary_terms",
    "coupling_coefficient",
    "flux_matrix",
    "solve_flux_system",
    "pwd_composite",
]

logger = setup_logger(__name__)

# ------------------------------
# Geometry
# ------------------------------
def fracture_positions(nf: int) -> np.ndarray:
    """Centred single fracture, or nf positions spread evenly over [-0.9, 0.9]."""
    if nf <= 1:
        return np.zeros(1)
    return np.linspace(-0.9, 0.9, nf)

# ------------------------------
# Outer boundary reflection: mAB·I0(γ2 rmD), mAB·I1(γ2 rmD)
# ------------------------------
def boundary_terms(boundary: Boundary, gama2: float, rmD: float, reD: float,
                   scaled: bool = False) -> Tuple[Union[float, ScaledValue], Union[float, ScaledValue]]:
    """
    Infinite: mAB = 0
    Closed:   mAB = K1(γ2 reD) / I1(γ2 reD)
    ConstP:   mAB = −K0(γ2 reD) / I0(γ2 reD)

    With scaled=True the two products are returned unresolved, as ScaledValue.
    """
    if boundary is Boundary.INFINITE:
        return 0.0, 0.0

    arg_re = gama2 * reD
    arg_rm = gama2 * rmD
    if boundary is Boundary.CLOSED:
        outer_i = ScaledValue.besseli(1, arg_re)
        outer_k = ScaledValue(kve(1, arg_re), -arg_re)
    else:
        outer_i = ScaledValue.besseli(0, arg_re)
        outer_k = -ScaledValue(kve(0, arg_re), -arg_re)

    # denominator underflow: no reflection
    if not outer_i.value > MAGNITUDE_FLOOR:
        return 0.0, 0.0

    mAB = outer_k / outer_i
    i0 = mAB * ScaledValue.besseli(0, arg_rm)
    i1 = mAB * ScaledValue.besseli(1, arg_rm)
    if scaled:
        return i0, i1
    return i0.resolve(), i1.resolve()

# ------------------------------
# Composite coefficient Ac = Acup / Acdown
# ------------------------------
def coupling_coefficient(gama1: float, gama2: float, M12: float, rmD: float,
                         mab_i0: Union[float, ScaledValue],
                         mab_i1: Union[float, ScaledValue]) -> ScaledValue:
    """
    Acup   = M12 γ1 K1(γ1 rmD)(mAB I0 + K0)(γ2 rmD) + γ2 K0(γ1 rmD)(mAB I1 − K1)(γ2 rmD)
    Acdown = M12 γ1 I1(γ1 rmD)(mAB I0 + K0)(γ2 rmD) − γ2 I0(γ1 rmD)(mAB I1 − K1)(γ2 rmD)

    The outer-region factors are taken times exp(γ2 rmD), common to both sides.
    Acup uses exp(+γ1 rmD)-scaled K and Acdown exp(−γ1 rmD)-scaled I, so the
    ratio is returned with exponent −2 γ1 rmD.
    """
    arg1 = gama1 * rmD
    arg2 = gama2 * rmD
    outer = ScaledValue(1.0, arg2)
    term0 = (outer * mab_i0).resolve() + kve(0, arg2)
    term1 = (outer * mab_i1).resolve() - kve(1, arg2)

    up = M12 * gama1 * kve(1, arg1) * term0 + gama2 * kve(0, arg1) * term1
    down = M12 * gama1 * scaled_besseli(1, arg1) * term0 - gama2 * scaled_besseli(0, arg1) * term1
    if abs(down) < MAGNITUDE_FLOOR:
        down = MAGNITUDE_FLOOR
    return ScaledValue(up / down, -2.0 * arg1)

# ------------------------------
# Linear system
# ------------------------------
def _kernel_integral(offset: float, gama1: float, Ac: ScaledValue, LfD: float) -> float:
    def integrand(alpha: np.ndarray) -> np.ndarray:
        arg = np.maximum(gama1 * np.abs(offset - alpha), BESSEL_ARG_FLOOR)
        return kv(0, arg) + (Ac * ScaledValue.besseli(0, arg)).resolve()

    return adaptive_gauss(integrand, -LfD, LfD)


def flux_matrix(z: float, gama1: float, Ac: ScaledValue, M12: float, LfD: float,
                xwD: np.ndarray) -> np.ndarray:
    """Assemble the (nf+1)×(nf+1) system matrix for one z."""
    nf = len(xwD)
    A = np.zeros((nf + 1, nf + 1))
    # the integral only depends on |xwD_i - xwD_j|
    integrals: Dict[float, float] = {}
    for i in range(nf):
        for j in range(nf):
            offset = abs(xwD[i] - xwD[j])
            key = round(offset, 12)
            if key not in integrals:
                integrals[key] = _kernel_integral(offset, gama1, Ac, LfD)
            A[i, j] = z * integrals[key] / (M12 * z * 2.0 * LfD)
    A[:nf, nf] = -1.0
    A[nf, :nf] = z
    return A


def solve_flux_system(A: np.ndarray) -> np.ndarray:
    """Solve A x = e_last; x[:-1] are fracture fluxes, x[-1] the wellbore pressure."""
    b = np.zeros(A.shape[0])
    b[-1] = 1.0
    try:
        return np.linalg.solve(A, b)
    except np.linalg.LinAlgError:
        logger.debug("singular flux matrix, using least-squares solution")
        return np.linalg.lstsq(A, b, rcond=None)[0]


def pwd_composite(z: float, fs1: float, fs2: float, M12: float, LfD: float, rmD: float,
                  reD: float, xwD: np.ndarray, boundary: Boundary) -> float:
    """Laplace-space wellbore pressure of the fracture array, before storage and skin."""
    if not LfD > 0.0:
        return math.nan

    with np.errstate(all="ignore"):
        gama1 = np.sqrt(z * fs1)
        gama2 = np.sqrt(z * fs2)
        mab_i0, mab_i1 = boundary_terms(boundary, gama2, rmD, reD, scaled=True)
        Ac = coupling_coefficient(gama1, gama2, M12, rmD, mab_i0, mab_i1)
        A = flux_matrix(z, gama1, Ac, M12, LfD, xwD)
        return float(solve_flux_system(A)[-1])
