from __future__ import annotations
import math
from dataclasses import dataclass
from typing import Callable, List, Mapping, Optional, Sequence, Union

import numpy as np
from joblib import Parallel, delayed

from .config import (DEFAULT_POINTS, DEFAULT_T_END, DERIVATIVE_LOG_WINDOW, MAX_CURVES,
                     MIN_POINTS, T_START_EXP, TD_CONSTANT)
from .laplace import LaplaceModel
from .logging_setup import setup_logger
from .parameters import ModelVariant, ParameterSet
from .postproc import bourdet_derivative
from .solvers import pressure_and_derivative, stehfest_order
from .utils import log_time_steps, parse_values

__all__ = ["CurveResult", "SensitivityCurve", "TransientCurveModel"]

logger = setup_logger(__name__)

RawValue = Union[str, float, Sequence[float]]

# grid settings and derived groups never drive a sensitivity sweep
_NOT_SWEPT = ("t", "points", "LfD")


@dataclass(frozen=True)
class CurveResult:
    t: np.ndarray            # h
    pressure: np.ndarray     # MPa
    derivative: np.ndarray   # MPa


@dataclass(frozen=True)
class SensitivityCurve:
    result: CurveResult
    key: Optional[str] = None      # swept parameter; None for the base case
    value: Optional[float] = None
    index: int = 0                 # colour slot, 0..MAX_CURVES-1

    @property
    def label(self) -> str:
        if self.key is None:
            return "theoretical curve"
        return f"{self.key} = {self.value:g}"


class TransientCurveModel:
    """
    Theoretical pressure / Bourdet-derivative curves for a multi-fractured
    horizontal well in a dual-porosity composite reservoir.

      • boundary: infinite, closed or constant pressure
      • wellbore storage: variable (cD, S convolved) or constant
      • stress-sensitive permeability through gamaD

    Each call is a pure function of (variant, parameters, time grid,
    precision flag); only the most recent result is kept in last_result.
    """

    def __init__(
        self,
        variant: ModelVariant,
        high_precision: bool = True,
        derivative: Callable[[np.ndarray, np.ndarray, float], np.ndarray] = bourdet_derivative,
        log_window: float = DERIVATIVE_LOG_WINDOW,
    ) -> None:
        self.variant = variant
        self.high_precision = high_precision
        self.derivative = derivative
        self.log_window = log_window
        self.last_result: Optional[CurveResult] = None

    @property
    def name(self) -> str:
        return self.variant.name

    def set_high_precision(self, high: bool) -> None:
        self.high_precision = high

    @staticmethod
    def dimensionless_time(params: ParameterSet, t: np.ndarray) -> np.ndarray:
        """tD = 14.4 kf t / (φ μ Ct L²)."""
        with np.errstate(all="ignore"):
            return TD_CONSTANT * params.kf * np.asarray(t, dtype=float) / np.float64(params.td_denominator)

    def calculate(self, params: Union[ParameterSet, Mapping[str, float]],
                  t: Optional[Sequence[float]] = None) -> CurveResult:
        if not isinstance(params, ParameterSet):
            params = ParameterSet.from_mapping(params)
        if t is None:
            t = log_time_steps(DEFAULT_POINTS, T_START_EXP, math.log10(DEFAULT_T_END))
        t = np.asarray(t, dtype=float)

        for issue in params.issues(bounded=self.variant.bounded):
            logger.warning(f"{self.name}: {issue}")

        N = stehfest_order(params.N, self.high_precision)
        logger.info(f"Computing {self.name} on {len(t)} points (Stehfest N={N})")

        tD = self.dimensionless_time(params, t)
        pD, dpD = pressure_and_derivative(LaplaceModel(self.variant, params), tD, N,
                                          params.gamaD, self.derivative, self.log_window)

        factor = params.pressure_factor
        with np.errstate(all="ignore"):
            result = CurveResult(t=t, pressure=factor * pD, derivative=factor * dpD)
        self.last_result = result
        return result

    def run(self, raw: Mapping[str, RawValue], t: Optional[Sequence[float]] = None,
            n_points: int = DEFAULT_POINTS, n_jobs: int = 1) -> List[SensitivityCurve]:
        """
        Base case, or one curve per value when a parameter (not t, points or LfD)
        is given several values (the first such parameter is swept, at most MAX_CURVES values).
        Raw values may be numbers, sequences or comma-separated strings. When no
        grid is passed, raw["t"] is the end time and raw["points"] the size.
        """
        values = {k: parse_values(v) for k, v in raw.items()}
        key = next((k for k, v in values.items() if k not in _NOT_SWEPT and len(v) > 1), None)
        base = {k: v[0] for k, v in values.items()}

        if t is None:
            t_end = base.get("t", DEFAULT_T_END)
            if not (math.isfinite(t_end) and t_end >= 1e-3):
                t_end = DEFAULT_T_END
            n = base.get("points", n_points)
            n = max(int(n), MIN_POINTS) if math.isfinite(n) else n_points
            t = log_time_steps(n, T_START_EXP, math.log10(t_end))

        if key is None:
            return [SensitivityCurve(self.calculate(ParameterSet.from_mapping(base), t))]

        sweep = values[key]
        if len(sweep) > MAX_CURVES:
            logger.warning(f"{key}: only the first {MAX_CURVES} of {len(sweep)} values are computed")
            sweep = sweep[:MAX_CURVES]
        logger.info(f"Sensitivity on {key}: {sweep}")

        # LfD is re-derived from L and Lf for every value
        param_sets = [ParameterSet.from_mapping({**base, key: v}) for v in sweep]
        if n_jobs == 1:
            results = [self.calculate(p, t) for p in param_sets]
        else:
            parallel = Parallel(n_jobs=n_jobs, backend="loky", verbose=0)
            results = parallel(delayed(self.calculate)(p, t) for p in param_sets)
            self.last_result = results[-1]

        return [SensitivityCurve(res, key, v, i) for i, (res, v) in enumerate(zip(results, sweep))]
