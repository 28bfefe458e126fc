#!/usr/bin/env python3
"""
Print reference type curves.

Usage:
  python type_curves.py                      # all cases
  python type_curves.py --only closed        # just one case
  python type_curves.py --list               # list case names
  python type_curves.py --low-precision --points 30
"""
from __future__ import annotations
import argparse
import math

from mfhwpt.config import DEFAULT_T_END, T_START_EXP
from mfhwpt.model import TransientCurveModel, CurveResult
from mfhwpt.parameters import ALL_VARIANTS
from mfhwpt.scenarios import (default_parameters, infinite_constant_storage,
                              closed_constant_storage, omega1_sweep)
from mfhwpt.utils import log_time_steps


# -----------------------
# Output
# -----------------------
def _table(title: str, res: CurveResult):
    print(f"\n{title}")
    print(f"{'t [h]':>12} {'Dp [MPa]':>14} {'dDp [MPa]':>14}")
    for t, p, dp in zip(res.t, res.pressure, res.derivative):
        print(f"{t:12.4e} {p:14.6e} {dp:14.6e}")


# -----------------------
# Cases
# -----------------------
def case_infinite(t, high_precision):
    """Infinite boundary, constant storage: half-slope, then dual-porosity dip."""
    variant, params = infinite_constant_storage()
    model = TransientCurveModel(variant, high_precision=high_precision)
    _table(model.name, model.calculate(params, t))


def case_closed(t, high_precision):
    """Closed boundary at reD = 10: late-time upturn (extend t to ~1e6 h to see it)."""
    variant, params = closed_constant_storage()
    model = TransientCurveModel(variant, high_precision=high_precision)
    _table(model.name, model.calculate(params, t))


def case_omega1(t, high_precision):
    """Sensitivity of the Model 2 curve to omega1."""
    variant, raw = omega1_sweep()
    model = TransientCurveModel(variant, high_precision=high_precision)
    for curve in model.run(raw, t):
        _table(f"{model.name}, {curve.label}", curve.result)


def case_defaults(t, high_precision):
    """Every variant with its default parameters."""
    for variant in ALL_VARIANTS:
        model = TransientCurveModel(variant, high_precision=high_precision)
        _table(model.name, model.calculate(default_parameters(variant), t))


CASES = {
    "infinite": case_infinite,
    "closed": case_closed,
    "omega1": case_omega1,
    "defaults": case_defaults,
}


def main():
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[1])
    parser.add_argument("--only", choices=sorted(CASES), help="run a single case")
    parser.add_argument("--list", action="store_true", help="list case names and exit")
    parser.add_argument("--low-precision", action="store_true", help="Stehfest N = 4")
    parser.add_argument("--points", type=int, default=40, help="time-grid size")
    parser.add_argument("--t-end", type=float, default=DEFAULT_T_END, help="last time [h]")
    args = parser.parse_args()

    if args.list:
        for name, func in CASES.items():
            print(f"{name:10s} {func.__doc__}")
        return

    t = log_time_steps(args.points, T_START_EXP, math.log10(args.t_end))
    for name in ([args.only] if args.only else CASES):
        CASES[name](t, not args.low_precision)


if __name__ == "__main__":
    main()
