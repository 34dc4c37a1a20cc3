from __future__ import annotations

import numpy as np
import pandas as pd
import pytest

from inflation_eval.errors import ShapeMismatch
from inflation_eval.transforms import (
    annual_change,
    get_dates,
    to_index,
    to_index_with_base,
    to_variation,
)


def test_variation_roundtrip_matrix_and_vector():
    rng = np.random.default_rng(0)
    vmat = rng.normal(0.5, 1.0, size=(36, 5))
    for base in (100.0, 42.5, np.linspace(80, 120, 5)):
        idx = to_index(vmat, base)
        np.testing.assert_allclose(to_variation(idx, base), vmat, atol=1e-10)

    v = vmat[:, 0]
    np.testing.assert_allclose(to_variation(to_index(v, 7.0), 7.0), v, atol=1e-10)


def test_index_chains_from_base():
    v = np.full(3, 10.0)
    idx = to_index(v, 100)
    np.testing.assert_allclose(idx, [110.0, 121.0, 133.1])


def test_index_with_base_adds_first_row():
    vmat = np.ones((4, 2))
    idx = to_index_with_base(vmat, np.array([100.0, 50.0]))
    assert idx.shape == (5, 2)
    np.testing.assert_allclose(idx[0], [100.0, 50.0])
    np.testing.assert_allclose(idx[1:], to_index(vmat, np.array([100.0, 50.0])))


def test_annual_change_marks_first_months_missing():
    v = np.ones(24)
    yoy = annual_change(to_index(v))
    assert yoy.shape == (24,)
    assert np.isnan(yoy[:11]).all()
    expected = (1.01**12 - 1) * 100
    np.testing.assert_allclose(yoy[11:], expected)


def test_annual_change_short_series_is_all_missing():
    yoy = annual_change(np.full(5, 101.0))
    assert np.isnan(yoy).all()


def test_in_place_variants_reuse_buffer():
    vmat = np.full((24, 3), 2.0)
    buffer = vmat.copy()
    result = to_index(buffer, 100, out=buffer)
    assert result is buffer
    np.testing.assert_allclose(buffer, to_index(vmat, 100))

    to_variation(buffer, 100, out=buffer)
    np.testing.assert_allclose(buffer, vmat)

    idx = to_index(vmat)
    expected = annual_change(idx)
    annual_change(idx, out=idx)
    np.testing.assert_allclose(idx, expected, equal_nan=True)


def test_base_vector_must_match_columns():
    with pytest.raises(ShapeMismatch):
        to_index(np.ones((3, 2)), np.array([100.0, 100.0, 100.0]))
    with pytest.raises(ShapeMismatch):
        to_index(np.ones((3, 2)), 100, out=np.empty((2, 2)))


def test_float32_input_keeps_precision_type():
    v = np.ones((12, 2), dtype=np.float32)
    assert to_index(v).dtype == np.float32


def test_get_dates_monthly():
    dates = get_dates("2010-11", 4)
    expected = pd.DatetimeIndex(["2010-11-01", "2010-12-01", "2011-01-01", "2011-02-01"])
    assert (dates == expected).all()
