"""Synthetic CPI data for tests and examples."""
from __future__ import annotations

import numpy as np
import pandas as pd

from . import transforms as tf
from .country import CountryStructure
from .cpibase import VarCPIBase


def get_random_weights(items: int = 218, rng: np.random.Generator | None = None, dtype=np.float32) -> np.ndarray:
    """Random positive weights summing to 100."""
    rng = np.random.default_rng(0) if rng is None else rng
    w = rng.random(items)
    return (100 * w / w.sum()).astype(dtype)


def get_base_dates(vmat: np.ndarray, start="2000-12") -> pd.DatetimeIndex:
    return tf.get_dates(start, np.asarray(vmat).shape[0])


def get_zero_base(
    dtype=np.float32,
    items: int = 218,
    periods: int = 120,
    start="2001-01",
    baseindex: float = 100.0,
) -> VarCPIBase:
    """Base whose variations are all zero."""
    v = np.zeros((periods, items), dtype=dtype)
    w = get_random_weights(items, dtype=dtype)
    return VarCPIBase(v, w, tf.get_dates(start, periods), baseindex)


def get_zero_country_structure(dtype=np.float32) -> CountryStructure:
    """Two zero bases: 120 months from 2001-01, then 2011-01 to 2021-12 with 279 items."""
    base00 = get_zero_base(dtype, 218, 120, "2001-01")
    base10 = get_zero_base(dtype, 279, 132, "2011-01")
    return CountryStructure((base00, base10))
