from __future__ import annotations
import numpy as np

from .config import DERIVATIVE_LOG_WINDOW

__all__ = ["bourdet_derivative"]


def bourdet_derivative(t: np.ndarray, p: np.ndarray, L: float = DERIVATIVE_LOG_WINDOW) -> np.ndarray:
    """
    Bourdet derivative dp/d(ln t) with a log-window of half-width L.

    For each point the left and right neighbours are the nearest samples at
    least L away in ln t (or the first/last sample); the two slopes are
    weighted by the opposite spacing. End points use the one-sided slope.
    Returns an array of len(t); non-computable points are 0.
    """
    t = np.asarray(t, dtype=float)
    p = np.asarray(p, dtype=float)
    n = len(t)
    d = np.zeros(n)
    if n < 2:
        return d

    with np.errstate(all="ignore"):
        x = np.log(t)
    for i in range(n):
        j = i - 1
        while j > 0 and x[i] - x[j] < L:
            j -= 1
        k = i + 1
        while k < n - 1 and x[k] - x[i] < L:
            k += 1

        if i == 0:
            dx2 = x[k] - x[i]
            val = (p[k] - p[i]) / dx2 if dx2 > 0 else 0.0
        elif i == n - 1:
            dx1 = x[i] - x[j]
            val = (p[i] - p[j]) / dx1 if dx1 > 0 else 0.0
        else:
            dx1 = x[i] - x[j]
            dx2 = x[k] - x[i]
            if dx1 > 0 and dx2 > 0:
                val = ((p[i] - p[j]) / dx1 * dx2 + (p[k] - p[i]) / dx2 * dx1) / (dx1 + dx2)
            else:
                val = 0.0
        d[i] = val if np.isfinite(val) else 0.0
    return d
