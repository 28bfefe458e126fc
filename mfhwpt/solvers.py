from __future__ import annotations
import math
from typing import Callable, Tuple

import numpy as np
import mpmath as mp

from .config import (DEFAULT_STEHFEST_N, DERIVATIVE_LOG_WINDOW, GAMAD_EPS,
                     LOW_PRECISION_STEHFEST_N, TD_FLOOR)
from .logging_setup import setup_logger
from .postproc import bourdet_derivative
from .special import stehfest_coefficients

__all__ = [
    "stehfest_order",
    "invert_stehfest",
    "stress_sensitivity",
    "pressure_and_derivative",
    "invert_reference",
]

logger = setup_logger(__name__)

LN2: float = math.log(2.0)

# ------------------------------
# Inversion order
# ------------------------------
def stehfest_order(N: int = 0, high_precision: bool = True) -> int:
    """N from the parameter set (8 when unset) in high precision, 4 otherwise; odd N → 4."""
    n = (N or DEFAULT_STEHFEST_N) if high_precision else LOW_PRECISION_STEHFEST_N
    if n < 2 or n % 2 != 0:
        n = LOW_PRECISION_STEHFEST_N
    return n

# ------------------------------
# Stehfest:  pD(tD) = ln2/tD · Σ V_m F(m ln2 / tD)
# ------------------------------
def invert_stehfest(F: Callable[[float], float], tD: np.ndarray, N: int) -> np.ndarray:
    V = stehfest_coefficients(N)
    tD = np.asarray(tD, dtype=float)
    out = np.zeros(tD.shape)
    dropped = 0
    for k, t in enumerate(tD):
        if not (np.isfinite(t) and t > TD_FLOOR):
            continue
        acc = 0.0
        for m in range(1, N + 1):
            val = F(m * LN2 / t)
            if not np.isfinite(val):
                dropped += 1
                continue
            acc += V[m - 1] * val
        out[k] = acc * LN2 / t
    if dropped:
        logger.debug(f"{dropped} non-finite Laplace evaluations counted as 0")
    return out


def stress_sensitivity(pD: np.ndarray, gamaD: float) -> np.ndarray:
    """pD → −ln(1 − γD pD)/γD where the log argument stays positive."""
    pD = np.asarray(pD, dtype=float)
    if abs(gamaD) <= GAMAD_EPS:
        return pD
    arg = 1.0 - gamaD * pD
    ok = arg > TD_FLOOR
    if not ok.all():
        logger.debug(f"stress-sensitivity correction skipped at {int((~ok).sum())} points")
    return np.where(ok, -np.log(np.where(ok, arg, 1.0)) / gamaD, pD)


def pressure_and_derivative(
    F: Callable[[float], float],
    tD: np.ndarray,
    N: int,
    gamaD: float = 0.0,
    derivative: Callable[[np.ndarray, np.ndarray, float], np.ndarray] = bourdet_derivative,
    log_window: float = DERIVATIVE_LOG_WINDOW,
) -> Tuple[np.ndarray, np.ndarray]:
    """Dimensionless pressure and its log-time derivative on the tD grid."""
    tD = np.asarray(tD, dtype=float)
    pD = stress_sensitivity(invert_stehfest(F, tD, N), gamaD)
    if len(tD) > 2:
        dpD = np.asarray(derivative(tD, pD, log_window), dtype=float)
    else:
        dpD = np.zeros_like(pD)
    return pD, dpD

# ------------------------------
# High-precision reference inversion (verification only)
# ------------------------------
def invert_reference(F: Callable, t: float, method: str = "talbot") -> float:
    """
    Invert a transform written with mpmath-compatible arithmetic. Used to check
    the Stehfest engine against closed-form transforms.
    """
    return float(mp.invertlaplace(F, t, method=method))
