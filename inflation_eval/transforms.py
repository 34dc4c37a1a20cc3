"""Conversions between price indices and percentage variations.

All functions take a single series (1-D) or a matrix with one item per
column (2-D) and work in percentage units. ``base_index`` is either a scalar
or one value per column. Passing ``out`` writes the result into a caller
supplied buffer, which may be the input itself.
"""
from __future__ import annotations

from typing import Optional

import numpy as np
import pandas as pd

from .errors import ShapeMismatch

YEAR = 12


def _float_array(values) -> np.ndarray:
    arr = np.asarray(values)
    if not np.issubdtype(arr.dtype, np.floating):
        arr = arr.astype(float)
    if arr.ndim not in (1, 2):
        raise ShapeMismatch(f"Expected a vector or a matrix, got {arr.ndim} dimensions")
    return arr


def _base_array(base_index, values: np.ndarray) -> np.ndarray:
    base = np.asarray(base_index, dtype=values.dtype)
    if base.ndim == 0:
        return base
    if values.ndim != 2 or base.shape != (values.shape[1],):
        raise ShapeMismatch(
            f"Base index of shape {base.shape} does not match data of shape {values.shape}"
        )
    return base


def _output(values: np.ndarray, out: Optional[np.ndarray]) -> np.ndarray:
    if out is None:
        return np.empty_like(values)
    if out.shape != values.shape:
        raise ShapeMismatch(f"Output buffer {out.shape} does not match input {values.shape}")
    return out


def to_index(v, base_index=100.0, out: Optional[np.ndarray] = None) -> np.ndarray:
    """Chain monthly variations into an index starting from ``base_index``."""
    v = _float_array(v)
    base = _base_array(base_index, v)
    res = _output(v, out)
    np.divide(v, 100, out=res)
    res += 1
    np.cumprod(res, axis=0, out=res)
    res *= base
    return res


def to_index_with_base(v, base_index=100.0) -> np.ndarray:
    """Like :func:`to_index` but with the base period as the first row."""
    v = _float_array(v)
    base = _base_array(base_index, v)
    idx = to_index(v, base)
    if v.ndim == 1:
        first = np.reshape(base, (1,))
    else:
        first = np.broadcast_to(base, (1, v.shape[1]))
    return np.concatenate([first.astype(idx.dtype), idx], axis=0)


def to_variation(idx, base_index=100.0, out: Optional[np.ndarray] = None) -> np.ndarray:
    """Month-over-month variations of an index series (inverse of :func:`to_index`)."""
    idx = _float_array(idx)
    base = _base_array(base_index, idx)
    res = _output(idx, out)
    if idx.shape[0] == 0:
        return res
    # Later rows first so an in-place call still sees the original first row.
    np.divide(idx[1:], idx[:-1], out=res[1:])
    np.divide(idx[:1], base, out=res[:1])
    res -= 1
    res *= 100
    return res


def annual_change(idx, base_index=100.0, out: Optional[np.ndarray] = None) -> np.ndarray:
    """Year-over-year variations of an index series.

    The result has the same length as ``idx``. The first 11 entries are NaN:
    a year-over-year change exists only from the 12th month on, where the
    12th month is compared against the base period.
    """
    idx = _float_array(idx)
    base = _base_array(base_index, idx)
    res = _output(idx, out)
    n = idx.shape[0]
    if n > YEAR:
        np.divide(idx[YEAR:], idx[:-YEAR], out=res[YEAR:])
    if n >= YEAR:
        np.divide(idx[YEAR - 1 : YEAR], base, out=res[YEAR - 1 : YEAR])
        res[YEAR - 1 :] -= 1
        res[YEAR - 1 :] *= 100
    res[: min(n, YEAR - 1)] = np.nan
    return res


def get_dates(start, periods: int) -> pd.DatetimeIndex:
    """Month-start dates for ``periods`` consecutive months from ``start``."""
    first = pd.Period(start, freq="M")
    return pd.period_range(start=first, periods=int(periods), freq="M").to_timestamp(how="start")
