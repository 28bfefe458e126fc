import numpy as np
import pytest
import os,sys
try:
    from mfhwpt.parameters import *
except ImportError:
    # Add the next directory up to the path if mfhwpt not in it
    sys.path.append(os.path.join(os.path.dirname(__file__), '..'))
    from mfhwpt.parameters import *
from mfhwpt.laplace import LaplaceModel, flaplace_composite, interporosity_transfer
from mfhwpt.model import TransientCurveModel
from mfhwpt.scenarios import (default_parameters, infinite_constant_storage,
                              closed_constant_storage, omega1_sweep)
from mfhwpt.utils import log_time_steps


def _with(params, **kw):
    return ParameterSet(**{**params.as_dict(), **kw})


def test_interporosity_transfer_limits():
    assert interporosity_transfer(1e9, 0.4, 0.08, 1e-3) == pytest.approx(0.4, rel=1e-6)
    assert interporosity_transfer(0.0, 0.4, 0.08, 1e-3) == pytest.approx(0.48)


def test_laplace_finite_over_wide_z():
    z_grid = np.logspace(-6, 7, 14)
    for variant in ALL_VARIANTS:
        model = LaplaceModel(variant, default_parameters(variant))
        for z in z_grid:
            assert np.isfinite(model(z)), f"{variant.name} at z={z}"

    _, base = infinite_constant_storage()
    for rmD in (0.5, 1.0, 4.0, 50.0):
        for nf in (1, 2, 10):
            model = LaplaceModel(MODEL_2, _with(base, rmD=rmD, nf=nf))
            for z in z_grid:
                assert np.isfinite(model(z)), f"rmD={rmD} nf={nf} z={z}"

    # outer boundary close to the composite interface
    for rmD, reD in ((0.5, 0.6), (0.5, 1.5), (1.0, 1.2), (4.0, 4.2)):
        for variant in (MODEL_3, MODEL_4, MODEL_5, MODEL_6):
            params = _with(default_parameters(variant), rmD=rmD, reD=reD)
            model = LaplaceModel(variant, params)
            for z in z_grid:
                assert np.isfinite(model(z)), f"{variant.name} rmD={rmD} reD={reD} z={z}"


def test_small_composite_radius_curve():
    _, base = infinite_constant_storage()
    params = _with(base, rmD=1.0)
    early = TransientCurveModel(MODEL_2).calculate(params, log_time_steps(11, -3.0, -1.0))
    assert np.all(np.isfinite(early.pressure))
    assert np.all(np.diff(early.pressure) > 0.0)
    # first points follow the same fracture linear flow as the default radius
    ref = TransientCurveModel(MODEL_2).calculate(base, log_time_steps(11, -3.0, -1.0))
    assert early.pressure[:3] == pytest.approx(ref.pressure[:3], rel=1e-3)

    (curve,) = TransientCurveModel(MODEL_2).run(dict(params.as_dict(), points=30))
    assert len(curve.result.t) == 30
    assert np.all(np.isfinite(curve.result.pressure))
    assert np.all(np.diff(curve.result.pressure) > 0.0)

    tiny = TransientCurveModel(MODEL_2).calculate(_with(base, rmD=0.5), log_time_steps(6, -3.0, -1.0))
    assert np.all(np.isfinite(tiny.pressure))


def test_remote_boundary_matches_infinite():
    _, params = infinite_constant_storage()
    far = _with(params, reD=1e6)
    for z in np.logspace(-3, 4, 8):
        ref = flaplace_composite(z, params, MODEL_2)
        assert flaplace_composite(z, far, MODEL_4) == pytest.approx(ref, rel=1e-12)
        assert flaplace_composite(z, far, MODEL_6) == pytest.approx(ref, rel=1e-12)

    t = log_time_steps(8, -2.0, 2.0)
    p_inf = TransientCurveModel(MODEL_2).calculate(params, t)
    p_far = TransientCurveModel(MODEL_4).calculate(far, t)
    assert np.allclose(p_inf.pressure, p_far.pressure)
    assert np.allclose(p_inf.derivative, p_far.derivative)


def test_zero_storage_and_skin_match_constant_storage():
    _, params = closed_constant_storage()
    t = log_time_steps(8, -2.0, 2.0)
    for variable, constant in ((MODEL_1, MODEL_2), (MODEL_3, MODEL_4), (MODEL_5, MODEL_6)):
        a = TransientCurveModel(variable).calculate(params, t)
        b = TransientCurveModel(constant).calculate(params, t)
        assert np.array_equal(a.pressure, b.pressure)
    # storage and skin do change the response of a variable-storage model
    stored = TransientCurveModel(MODEL_5).calculate(_with(params, cD=0.01, S=1.0), t)
    assert not np.allclose(stored.pressure, a.pressure)


def test_infinite_boundary_curve():
    variant, params = infinite_constant_storage()
    t = log_time_steps(25, -3.0, 3.0)
    model = TransientCurveModel(variant)
    res = model.calculate(params, t)
    assert model.last_result is res
    assert len(res.t) == len(res.pressure) == len(res.derivative) == 25
    assert np.all(np.isfinite(res.pressure)) and np.all(np.isfinite(res.derivative))
    assert np.all(np.diff(res.pressure) > 0.0)
    assert np.all(res.derivative > 0.0)
    # early fracture linear flow: derivative is half the pressure
    ratio = res.derivative[1:4] / res.pressure[1:4]
    assert np.all((ratio > 0.35) & (ratio < 0.65))


def test_closed_boundary_upturn_and_constant_pressure_decline():
    _, params = closed_constant_storage()
    t = log_time_steps(12, 1.0, 6.0)
    d_inf = TransientCurveModel(MODEL_2).calculate(params, t).derivative
    d_closed = TransientCurveModel(MODEL_4).calculate(params, t).derivative
    d_constp = TransientCurveModel(MODEL_6).calculate(params, t).derivative
    assert d_closed[-1] > d_closed[-2]
    assert d_closed[-1] > 2.0 * d_inf[-1]
    assert d_constp[-1] < d_inf[-1]


def test_stress_sensitivity_raises_pressure():
    _, params = infinite_constant_storage()
    t = log_time_steps(6, -1.0, 3.0)
    plain = TransientCurveModel(MODEL_2).calculate(params, t)
    sensitive = TransientCurveModel(MODEL_2).calculate(_with(params, gamaD=0.02), t)
    assert np.all(sensitive.pressure >= plain.pressure)
    assert sensitive.pressure[-1] > plain.pressure[-1]


def test_precision_flag():
    _, params = infinite_constant_storage()
    t = log_time_steps(6, -1.0, 2.0)
    high = TransientCurveModel(MODEL_2).calculate(params, t)
    low = TransientCurveModel(MODEL_2, high_precision=False).calculate(params, t)
    explicit = TransientCurveModel(MODEL_2).calculate(_with(params, N=4), t)
    assert np.array_equal(low.pressure, explicit.pressure)
    assert np.allclose(high.pressure, low.pressure, rtol=0.25)


def test_sensitivity_sweep():
    variant, raw = omega1_sweep()
    model = TransientCurveModel(variant)
    t = log_time_steps(8, -2.0, 2.0)
    curves = model.run(raw, t)
    assert [c.key for c in curves] == ["omega1"] * 3
    assert [c.index for c in curves] == [0, 1, 2]
    assert [c.label for c in curves] == ["omega1 = 0.2", "omega1 = 0.4", "omega1 = 0.6"]
    assert model.last_result is curves[-1].result

    _, base = infinite_constant_storage()
    for c in curves:
        single = TransientCurveModel(variant).calculate(_with(base, omega1=c.value), t)
        assert np.array_equal(c.result.pressure, single.pressure)
    assert not np.allclose(curves[0].result.pressure, curves[2].result.pressure)


def test_sweep_over_length_rederives_LfD():
    _, base = infinite_constant_storage()
    raw = dict(base.as_dict(), L="500, 1000")
    t = log_time_steps(4, -1.0, 2.0)
    curves = TransientCurveModel(MODEL_2).run(raw, t)
    assert [c.value for c in curves] == [500.0, 1000.0]
    for c in curves:
        single = TransientCurveModel(MODEL_2).calculate(_with(base, L=c.value), t)
        assert np.array_equal(c.result.pressure, single.pressure)


def test_sweep_is_capped_and_default_grid():
    _, base = infinite_constant_storage()
    raw = dict(base.as_dict(), omega1="0.1,0.2,0.3,0.4,0.5,0.6,0.7")
    curves = TransientCurveModel(MODEL_2).run(raw, log_time_steps(3, -1.0, 1.0))
    assert len(curves) == 6
    assert curves[-1].index == 5

    raw = dict(base.as_dict(), t=100.0, points=2)
    (curve,) = TransientCurveModel(MODEL_2).run(raw)
    assert curve.key is None and curve.label == "theoretical curve"
    assert len(curve.result.t) == 5
    assert curve.result.t[0] == pytest.approx(1e-3)
    assert curve.result.t[-1] == pytest.approx(100.0)


def test_parallel_sweep_matches_sequential():
    _, base = infinite_constant_storage()
    raw = dict(base.as_dict(), omega1=[0.3, 0.5])
    t = log_time_steps(3, -1.0, 1.0)
    seq = TransientCurveModel(MODEL_2).run(raw, t)
    par = TransientCurveModel(MODEL_2).run(raw, t, n_jobs=2)
    for a, b in zip(seq, par):
        assert a.label == b.label
        assert np.array_equal(a.result.pressure, b.result.pressure)


def test_missing_parameters_never_raise():
    res = TransientCurveModel(MODEL_3).calculate({}, log_time_steps(4, -1.0, 1.0))
    assert len(res.pressure) == 4 and len(res.derivative) == 4


def test_derived_and_non_finite_raw_values():
    _, base = infinite_constant_storage()
    t = log_time_steps(3, -1.0, 1.0)
    # LfD follows L and Lf, so several LfD values do not make a sweep
    (curve,) = TransientCurveModel(MODEL_2).run(dict(base.as_dict(), LfD="0.1, 0.5"), t)
    assert curve.key is None
    curves = TransientCurveModel(MODEL_2).run(
        dict(base.as_dict(), LfD="0.1, 0.5", omega1="0.3, 0.5"), t)
    assert [c.key for c in curves] == ["omega1", "omega1"]

    (curve,) = TransientCurveModel(MODEL_2).run(dict(base.as_dict(), nf="nan"), t)
    assert np.all(np.isfinite(curve.result.pressure))
    (curve,) = TransientCurveModel(MODEL_2).run(dict(base.as_dict(), t="inf", points="nan"), n_points=6)
    assert len(curve.result.t) == 6
    assert curve.result.t[-1] == pytest.approx(1000.0)

def test_all():
    test_interporosity_transfer_limits()
    test_laplace_finite_over_wide_z()
    test_small_composite_radius_curve()
    test_remote_boundary_matches_infinite()
    test_zero_storage_and_skin_match_constant_storage()
    test_infinite_boundary_curve()
    test_closed_boundary_upturn_and_constant_pressure_decline()
    test_stress_sensitivity_raises_pressure()
    test_precision_flag()
    test_sensitivity_sweep()
    test_sweep_over_length_rederives_LfD()
    test_sweep_is_capped_and_default_grid()
    test_parallel_sweep_matches_sequential()
    test_missing_parameters_never_raise()
    test_derived_and_non_finite_raw_values()
    print("test_mfhwpt_model passed all tests")

if __name__=="__main__":
    test_all()
