from __future__ import annotations

import numpy as np
import pytest

from inflation_eval.country import CountryStructure
from inflation_eval.cpibase import VarCPIBase
from inflation_eval.estimators import (
    InflationSimpleMean,
    InflationWeightedMean,
    get_inflation_function,
)
from inflation_eval.resample import ResampleGSBB, ResampleGSBBMod, ResampleSBB, ScrambleVarMonths
from inflation_eval.transforms import get_dates


def _constant_base(periods: int, start: str = "2001-01", items: int = 6, value: float = 1.0) -> VarCPIBase:
    return VarCPIBase(np.full((periods, items), value), np.ones(items), get_dates(start, periods))


def test_weighted_mean_of_parametric_constant_series():
    base = _constant_base(24)
    inflfn = InflationWeightedMean()
    for resamplefn in (ScrambleVarMonths(), ResampleSBB(), ResampleGSBB()):
        param = resamplefn.parametric(base)
        np.testing.assert_allclose(param.v, 1.0)
        np.testing.assert_allclose(inflfn.monthly(param), 1.0)


def test_weighted_mean_of_extended_parametric_series():
    cs = CountryStructure((_constant_base(120),))
    param = ResampleGSBBMod().parametric(cs)
    monthly = InflationWeightedMean().monthly(param)
    assert monthly.shape == (300,)
    np.testing.assert_allclose(monthly, 1.0)


def test_weighted_mean_reproduces_parametric_measure():
    rng = np.random.default_rng(8)
    v = rng.normal(0.4, 0.3, size=(48, 5))
    w = np.array([10.0, 20.0, 30.0, 25.0, 15.0])
    base = VarCPIBase(v, w, get_dates("2001-01", 48))
    resamplefn = ResampleSBB()
    inflfn = InflationWeightedMean()
    param = resamplefn.parametric(base)
    np.testing.assert_allclose(inflfn.monthly(param), resamplefn.parametric(v) @ (w / w.sum()))


def test_weighted_and_simple_means_differ_with_uneven_weights():
    v = np.tile([0.0, 2.0], (12, 1))
    base = VarCPIBase(v, [1.0, 3.0], get_dates("2001-01", 12))
    np.testing.assert_allclose(InflationSimpleMean().monthly(base), 1.0)
    np.testing.assert_allclose(InflationWeightedMean().monthly(base), 1.5)


def test_trajectory_starts_at_twelfth_month():
    cs = CountryStructure((_constant_base(120), _constant_base(60, "2011-01", items=8)))
    traj = InflationWeightedMean()(cs)
    assert traj.shape == (cs.infl_periods,)
    np.testing.assert_allclose(traj, (1.01**12 - 1) * 100)

    base_traj = InflationSimpleMean()(cs[0])
    assert base_traj.shape == (109,)


def test_structure_monthly_concatenates_bases():
    base_a = _constant_base(24, value=0.5)
    base_b = _constant_base(12, "2003-01", value=2.0)
    monthly = InflationSimpleMean().monthly(CountryStructure((base_a, base_b)))
    np.testing.assert_allclose(monthly[:24], 0.5)
    np.testing.assert_allclose(monthly[24:], 2.0)


def test_weighted_mean_needs_positive_weight():
    base = VarCPIBase(np.ones((12, 2)), [0.0, 0.0], get_dates("2001-01", 12))
    with pytest.raises(ValueError):
        InflationWeightedMean().measure(base)


def test_registry():
    assert isinstance(get_inflation_function("simple_mean"), InflationSimpleMean)
    with pytest.raises(ValueError):
        get_inflation_function("median")
