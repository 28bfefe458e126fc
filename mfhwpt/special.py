from __future__ import annotations
from dataclasses import dataclass
from typing import Callable, Union

import numpy as np
from scipy.special import ive

from .config import (BESSEL_ASYMPTOTIC_ARG, EXP_CEILING, EXP_UNDERFLOW, QUAD_EPS,
                     QUAD_MAX_DEPTH, QUAD_REL_TOL)

__all__ = [
    "scaled_besseli",
    "ScaledValue",
    "gauss15",
    "adaptive_gauss",
    "factorial",
    "stehfest_coefficient",
    "stehfest_coefficients",
]

ArrayLike = Union[float, np.ndarray]

# ------------------------------
# Scaled modified Bessel function of the first kind
# ------------------------------
def scaled_besseli(v: int, x: ArrayLike) -> ArrayLike:
    """exp(-|x|)·I_v(|x|); the large-argument limit 1/sqrt(2πx) above 600."""
    x = np.abs(np.asarray(x, dtype=float))
    big = x > BESSEL_ASYMPTOTIC_ARG
    out = np.where(big, 1.0 / np.sqrt(2.0 * np.pi * np.where(big, x, 1.0)), ive(v, x))
    return float(out) if out.ndim == 0 else out


@dataclass(frozen=True)
class ScaledValue:
    """
    A magnitude carried as value·exp(exponent).

    Products and quotients combine the exponents, so an I_v(x) scaled by
    exp(-x) can be paired with K_v or a ratio of Bessel terms without the
    correction factor ever being applied by hand.
    """
    value: ArrayLike
    exponent: ArrayLike = 0.0

    @classmethod
    def besseli(cls, v: int, x: ArrayLike) -> "ScaledValue":
        return cls(scaled_besseli(v, x), np.abs(x))

    def __mul__(self, other):
        if isinstance(other, ScaledValue):
            return ScaledValue(self.value * other.value, self.exponent + other.exponent)
        return ScaledValue(self.value * other, self.exponent)

    __rmul__ = __mul__

    def __truediv__(self, other):
        if isinstance(other, ScaledValue):
            return ScaledValue(self.value / other.value, self.exponent - other.exponent)
        return ScaledValue(self.value / other, self.exponent)

    def __neg__(self):
        return ScaledValue(-self.value, self.exponent)

    def resolve(self) -> ArrayLike:
        """
        Plain value. A zero value, or an exponent below exp underflow, gives
        exactly 0. Large exponents are folded into log|value| first and the
        combined magnitude is capped at exp(EXP_CEILING).
        """
        v = np.asarray(self.value, dtype=float)
        e = np.asarray(self.exponent, dtype=float)
        keep = (v != 0.0) & (e > EXP_UNDERFLOW)
        with np.errstate(all="ignore"):
            direct = v * np.exp(np.minimum(e, EXP_CEILING))
            folded = np.sign(v) * np.exp(np.minimum(np.log(np.abs(v)) + e, EXP_CEILING))
            out = np.where(keep, np.where(e <= EXP_CEILING, direct, folded), 0.0)
        return float(out) if out.ndim == 0 else out


# ------------------------------
# Quadrature
# ------------------------------
_GL15_X, _GL15_W = np.polynomial.legendre.leggauss(15)


def gauss15(f: Callable[[np.ndarray], np.ndarray], a: float, b: float) -> float:
    """Fixed 15-point Gauss–Legendre rule on [a, b]; f must accept an array of nodes."""
    h = 0.5 * (b - a)
    c = 0.5 * (a + b)
    return float(h * np.dot(_GL15_W, f(c + h * _GL15_X)))


def adaptive_gauss(f: Callable[[np.ndarray], np.ndarray], a: float, b: float,
                   eps: float = QUAD_EPS, depth: int = 0, max_depth: int = QUAD_MAX_DEPTH) -> float:
    """
    Recursive bisection on gauss15. One full-interval estimate is compared
    against the sum of the two halves; the halves are accepted when they agree
    to QUAD_REL_TOL·|value| + eps, or when max_depth is reached. Each half is
    refined with eps/2.
    """
    c = 0.5 * (a + b)
    whole = gauss15(f, a, b)
    halves = gauss15(f, a, c) + gauss15(f, c, b)
    if depth >= max_depth or abs(whole - halves) < QUAD_REL_TOL * abs(halves) + eps:
        return halves
    return (adaptive_gauss(f, a, c, eps / 2, depth + 1, max_depth)
            + adaptive_gauss(f, c, b, eps / 2, depth + 1, max_depth))


# ------------------------------
# Stehfest coefficients
# ------------------------------
def factorial(n: int) -> float:
    """n! as a float (0! = 1! = 1), built iteratively."""
    r = 1.0
    for i in range(2, n + 1):
        r *= i
    return r


def stehfest_coefficient(i: int, N: int) -> float:
    """
    V_i = (-1)^(i+N/2) Σ_{k=ceil(i/2)}^{min(i,N/2)}
          k^(N/2)(2k)! / [(N/2-k)! k! (k-1)! (i-k)! (2k-i)!]
    """
    half = N // 2
    s = 0.0
    for k in range((i + 1) // 2, min(i, half) + 1):
        num = k ** half * factorial(2 * k)
        den = (factorial(half - k) * factorial(k) * factorial(k - 1)
               * factorial(i - k) * factorial(2 * k - i))
        if den != 0.0:
            s += num / den
    return s if (i + half) % 2 == 0 else -s


def stehfest_coefficients(N: int) -> np.ndarray:
    """Vector [V_1, …, V_N]."""
    return np.array([stehfest_coefficient(i, N) for i in range(1, N + 1)])
